## running mean, variance & extrema

from typing import Optional

import numpy as np


class OnlineStats:
    """Welford's single-pass mean and variance.

    Values are accumulated in ``dtype`` (a numpy floating point scalar type).
    Variance is the population variance, ``m2 / n``.
    """

    def __init__(self, dtype=np.float64):
        self.dtype = dtype
        self.reset()

    def reset(self) -> None:
        self.n = 0
        self._mean = self.dtype(0.0)
        self.m2 = self.dtype(0.0)

    def update(self, x) -> None:
        """Update stats for new observation."""
        x = self.dtype(x)
        self.n += 1
        new_mean = self._mean + (x - self._mean) / self.dtype(self.n)
        self.m2 += (x - self._mean) * (x - new_mean)
        self._mean = new_mean

    @property
    def mean(self) -> Optional[float]:
        if self.n > 0:
            return self._mean
        else:
            return None

    @property
    def var(self) -> Optional[float]:
        if self.n > 0:
            return self.m2 / self.dtype(self.n)
        else:
            return None

    @property
    def std(self) -> Optional[float]:
        var = self.var
        return None if var is None else np.sqrt(var)

    def __repr__(self):
        return f'<OnlineStats n={self.n} mean={self.mean} var={self.var}>'


class Extrema:
    """Running minimum and maximum."""

    def __init__(self, dtype=np.float64):
        self.dtype = dtype
        self.min = dtype(np.inf)
        self.max = dtype(-np.inf)

    def update(self, x) -> None:
        x = self.dtype(x)
        self.min = min(self.min, x)
        self.max = max(self.max, x)

    def __repr__(self):
        return f'<Extrema min={self.min} max={self.max}>'
