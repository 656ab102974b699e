import numpy as np
import pytest

from convergence import ENVS, evaluate, run_trials


@pytest.mark.parametrize('env_name', sorted(ENVS))
def test_errors_shrink_to_small_values(env_name):
    env = ENVS[env_name](np.random.default_rng(0))
    errors = evaluate(env, horizon=4000, stride=1000)
    assert set(errors) == {'q1', 'median', 'q3'}
    for error in errors.values():
        assert error.shape == (4,)
        assert np.all(np.isfinite(error))
        assert error[-1] < 0.15


def test_checkpoint_before_bootstrap_is_nan():
    env = ENVS['uniform'](np.random.default_rng(0))
    errors = evaluate(env, horizon=6, stride=3)
    assert np.isnan(errors['median'][0])
    assert np.isfinite(errors['median'][1])


def test_run_trials_long_format():
    d = run_trials('gaussian', num_trials=2, horizon=600, stride=200, seed=1)
    assert list(d.columns) == ['time', 'estimator', 'error']
    assert len(d) == 3 * 3
    assert sorted(d['time'].unique()) == [200, 400, 600]


def test_errors_are_relative_to_the_spread():
    small = ENVS['gaussian'](np.random.default_rng(4))
    large = ENVS['gaussian'](np.random.default_rng(4))
    large.mean *= 1000.0
    large.deviation *= 1000.0
    a = evaluate(small, horizon=2000, stride=500)
    b = evaluate(large, horizon=2000, stride=500)
    for name in a:
        np.testing.assert_allclose(a[name], b[name], rtol=1e-6, atol=1e-9)
