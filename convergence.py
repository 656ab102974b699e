"""Convergence of the streaming quartiles towards the exact ones."""

import argparse
import logging
from collections import defaultdict
from typing import Dict

import numpy as np
import pandas as pd
import plotly.express as px

from summary import Summary

logger = logging.getLogger(__name__)

QUANTILES = {'q1': 0.25, 'median': 0.5, 'q3': 0.75}


class GaussianEnv:
    """Stream of normally distributed values.

    Mean and deviation are randomized.
    """

    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.mean = rng.uniform(-10, 10)
        self.deviation = rng.uniform(0.1, 10)

    def step(self) -> float:
        return self.rng.normal(self.mean, self.deviation)


class UniformEnv:
    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.low = rng.uniform(-10, 10)
        self.high = self.low + rng.uniform(0.1, 20)

    def step(self) -> float:
        return self.rng.uniform(self.low, self.high)


class ExponentialEnv:
    """Skewed stream with a long right tail."""

    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.scale = rng.uniform(0.1, 10)

    def step(self) -> float:
        return self.rng.exponential(self.scale)


class LognormalEnv:
    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.sigma = rng.uniform(0.1, 1.5)

    def step(self) -> float:
        return self.rng.lognormal(0.0, self.sigma)


ENVS = {
    'gaussian': GaussianEnv,
    'uniform': UniformEnv,
    'exponential': ExponentialEnv,
    'lognormal': LognormalEnv,
}


def evaluate(env, horizon: int, stride: int, dtype=np.float64) -> Dict[str, np.ndarray]:
    """Relative error of each streaming quartile, every ``stride`` values.

    Errors are scaled by the interquartile range of the values seen so far.
    """
    summary = Summary(dtype)
    values = np.zeros(horizon)
    errors = {name: np.zeros(horizon // stride) for name in QUANTILES}

    for t in range(horizon):
        values[t] = env.step()
        summary.update(values[t])
        if (t + 1) % stride == 0:
            seen = values[:t + 1]
            exact = np.quantile(seen, list(QUANTILES.values()))
            spread = max(exact[2] - exact[0], np.finfo(np.float64).eps)
            estimate = summary.snapshot()._asdict()
            for name, truth in zip(QUANTILES, exact):
                if estimate[name] is None:
                    errors[name][t // stride] = np.nan
                else:
                    errors[name][t // stride] = abs(estimate[name] - truth) / spread
    return errors


def run_trials(env_name: str, num_trials: int, horizon: int, stride: int,
               seed: int = 0, dtype=np.float64) -> pd.DataFrame:
    """Average errors over trials, in long format (time, estimator, error)."""
    rng = np.random.default_rng(seed)
    errors = defaultdict(list)
    for trial in range(num_trials):
        env = ENVS[env_name](rng)
        for name, error in evaluate(env, horizon, stride, dtype).items():
            errors[name].append(error)
        logger.info('%s trial %d done', env_name, trial)

    avgs = {name: np.mean(x, 0) for name, x in errors.items()}
    d = pd.DataFrame(avgs)
    d['time'] = np.arange(1, horizon // stride + 1) * stride
    return d.melt(id_vars='time', var_name='estimator', value_name='error')


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--env', choices=sorted(ENVS), default='gaussian')
    parser.add_argument('--trials', type=int, default=10)
    parser.add_argument('--horizon', type=int, default=100000)
    parser.add_argument('--stride', type=int, default=1000)
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--use-doubles', action='store_true')
    parser.add_argument('--output', default='convergence.png',
                        help='.html for an interactive chart, otherwise a static image')
    args = parser.parse_args(argv)
    logging.basicConfig(format='%(asctime)s %(module)s %(levelname)s %(message)s', level=logging.INFO)

    dtype = np.float64 if args.use_doubles else np.float32
    d = run_trials(args.env, args.trials, args.horizon, args.stride, args.seed, dtype)
    fig = px.line(d, x='time', y='error', color='estimator', log_y=True,
                  title=f'Quartile error / IQR on {args.env} streams (average of {args.trials} trials).')
    if args.output.endswith('.html'):
        fig.write_html(args.output)
    else:
        fig.write_image(args.output)
    logger.info('wrote %s', args.output)


if __name__ == '__main__':
    main()
