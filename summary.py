"""Descriptive statistics of a numeric stream."""

import json
from typing import Dict, NamedTuple, Optional

import numpy as np

from online_stats import Extrema, OnlineStats
from p2_quantile import P2Quantile

NA = 'NA'

LABELS = {
    'mean': 'Mean',
    'variance': 'Variance',
    'median': 'Median',
    'q1': 'q1',
    'q3': 'q3',
    'count': 'Count',
    'min': 'Min',
    'max': 'Max',
}


class Snapshot(NamedTuple):
    """Immutable view of a Summary; absent statistics are None."""

    mean: Optional[float]
    variance: Optional[float]
    median: Optional[float]
    q1: Optional[float]
    q3: Optional[float]
    count: int
    min: Optional[float]
    max: Optional[float]


class Summary:
    """Mean, variance, quartiles and extrema of a stream, in O(1) memory.

    A Summary starts uninitialized and becomes initialized on the first
    ``update``; only then are its statistics reported.
    """

    def __init__(self, dtype=np.float32):
        self.dtype = dtype
        self.stats = OnlineStats(dtype)
        self.q1 = P2Quantile(0.25, dtype)
        self.median = P2Quantile(0.5, dtype)
        self.q3 = P2Quantile(0.75, dtype)
        self.extrema = Extrema(dtype)
        self.count = 0
        self.initialized = False

    def update(self, value) -> None:
        self.stats.update(value)
        self.q1.update(value)
        self.median.update(value)
        self.q3.update(value)
        self.extrema.update(value)
        self.count += 1
        self.initialized = True

    def snapshot(self) -> Snapshot:
        if not self.initialized:
            return Snapshot(None, None, None, None, None, self.count, None, None)
        return Snapshot(
            mean=self.stats.mean,
            variance=self.stats.var,
            median=self.median.get(),
            q1=self.q1.get(),
            q3=self.q3.get(),
            count=self.count,
            min=self.extrema.min,
            max=self.extrema.max,
        )

    def __repr__(self):
        return f'<Summary count={self.count} initialized={self.initialized}>'


def _to_builtin(value):
    # shortest repr for the precision, so float32 0.1 stays 0.1
    if value is None or isinstance(value, int):
        return value
    return float(str(value))


def to_dict(snapshot: Snapshot) -> Dict[str, Optional[float]]:
    return {key: _to_builtin(value) for key, value in snapshot._asdict().items()}


def to_json(snapshot: Snapshot) -> str:
    return json.dumps(to_dict(snapshot))


def format_value(value) -> str:
    """Shortest positional digits for the precision: ``3``, ``0.1``, never ``1e+20``."""
    if value is None:
        return NA
    if isinstance(value, int):
        return str(value)
    return np.format_float_positional(value, trim='-')


def to_text(snapshot: Snapshot) -> str:
    """Eight tab separated ``Label:\\tvalue`` lines, without a trailing newline."""
    lines = []
    for key, value in snapshot._asdict().items():
        lines.append(f'{LABELS[key]}:\t{format_value(value)}')
    return '\n'.join(lines)
