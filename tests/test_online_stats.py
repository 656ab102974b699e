import numpy as np
import pytest

from online_stats import Extrema, OnlineStats


def test_empty_stats_are_absent():
    stats = OnlineStats()
    assert stats.n == 0
    assert stats.mean is None
    assert stats.var is None
    assert stats.std is None


def test_single_value():
    stats = OnlineStats()
    stats.update(4.0)
    assert stats.mean == 4.0
    assert stats.var == 0.0


def test_population_variance():
    stats = OnlineStats()
    for x in [2, 4, 4, 4, 5, 5, 7, 9]:
        stats.update(x)
    assert stats.n == 8
    assert stats.mean == pytest.approx(5.0)
    assert stats.var == pytest.approx(4.0)
    assert stats.std == pytest.approx(2.0)


def test_matches_two_pass():
    rng = np.random.default_rng(1)
    xs = rng.normal(5.0, 3.0, size=1_000_000)
    stats = OnlineStats()
    for x in xs:
        stats.update(x)
    assert stats.n == len(xs)
    assert stats.mean == pytest.approx(np.mean(xs), rel=1e-6)
    assert stats.var == pytest.approx(np.var(xs), rel=1e-6)


def test_large_offset_small_variance():
    xs = 1e9 + np.array([4.0, 7.0, 13.0, 16.0] * 1000)
    stats = OnlineStats()
    for x in xs:
        stats.update(x)
    assert stats.mean == pytest.approx(1e9 + 10.0, rel=1e-12)
    assert stats.var == pytest.approx(22.5, rel=1e-6)


def test_single_precision_storage():
    stats = OnlineStats(np.float32)
    for x in [0.1, 0.2, 0.3]:
        stats.update(x)
    assert isinstance(stats.mean, np.float32)
    assert isinstance(stats.var, np.float32)
    assert stats.mean == pytest.approx(0.2, rel=1e-6)


def test_reset():
    stats = OnlineStats()
    stats.update(1.0)
    stats.update(3.0)
    stats.reset()
    assert stats.n == 0
    assert stats.mean is None


def test_extrema():
    extrema = Extrema()
    assert extrema.min == np.inf
    assert extrema.max == -np.inf
    for x in [3.0, -1.5, 8.25, 0.0]:
        extrema.update(x)
    assert extrema.min == -1.5
    assert extrema.max == 8.25


def test_extrema_dtype():
    extrema = Extrema(np.float32)
    extrema.update(1.0)
    assert isinstance(extrema.min, np.float32)
    assert isinstance(extrema.max, np.float32)
