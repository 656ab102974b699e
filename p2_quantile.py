"""Streaming quantile estimate with the P² algorithm.

Jain, Chlamtac
The P² algorithm for dynamic calculation of quantiles and histograms
without storing observations
https://www.cse.wustl.edu/~jain/papers/ftp/psqr.pdf
"""

from typing import List, Optional

import numpy as np

NUM_MARKERS = 5


class P2Quantile:
    """Five-marker estimate of the ``p`` quantile in O(1) memory.

    The first five observations are buffered; they are sorted into the
    initial marker heights, and P² updates start with the sixth.
    """

    def __init__(self, p: float, dtype=np.float64):
        if not 0.0 < p < 1.0:
            raise ValueError(f'quantile must be in (0, 1), got {p}')
        self.p = p
        self.dtype = dtype
        self.n = 0
        self.heights: List = []
        self.positions = list(range(1, NUM_MARKERS + 1))
        # desired position of marker i is 1 + (n - 1) * increments[i]
        self.increments = [0.0, p / 2, p, (1 + p) / 2, 1.0]

    def desired_positions(self) -> List[float]:
        return [1 + (self.n - 1) * f for f in self.increments]

    def update(self, x) -> None:
        """Update estimate for new observation."""
        x = self.dtype(x)
        self.n += 1
        if self.n <= NUM_MARKERS:
            self.heights.append(x)
            if self.n == NUM_MARKERS:
                self.heights.sort()
            return

        h = self.heights
        if x < h[0]:
            h[0] = x
            k = 0
        elif x >= h[-1]:
            h[-1] = x
            k = NUM_MARKERS - 2
        else:
            k = 0
            while x >= h[k + 1]:
                k += 1

        for i in range(k + 1, NUM_MARKERS):
            self.positions[i] += 1

        desired = self.desired_positions()
        pos = self.positions
        for i in range(1, NUM_MARKERS - 1):
            d = desired[i] - pos[i]
            if (d >= 1 and pos[i + 1] - pos[i] > 1) or (d <= -1 and pos[i - 1] - pos[i] < -1):
                step = 1 if d > 0 else -1
                height = self._parabolic(i, step)
                if not h[i - 1] < height < h[i + 1]:
                    height = self._linear(i, step)
                h[i] = height
                pos[i] += step

    def _parabolic(self, i: int, d: int):
        h, n = self.heights, self.positions
        return self.dtype(
            h[i] + d / (n[i + 1] - n[i - 1]) * (
                (n[i] - n[i - 1] + d) * (h[i + 1] - h[i]) / (n[i + 1] - n[i])
                + (n[i + 1] - n[i] - d) * (h[i] - h[i - 1]) / (n[i] - n[i - 1])
            )
        )

    def _linear(self, i: int, d: int):
        h, n = self.heights, self.positions
        return self.dtype(h[i] + d * (h[i + d] - h[i]) / (n[i + d] - n[i]))

    def get(self) -> Optional[float]:
        """Current estimate, or None while fewer than five values are seen.

        With exactly five values the estimate is the exact order statistic
        at rank ``(n - 1) * p``; afterwards it is the middle marker height.
        """
        if self.n < NUM_MARKERS:
            return None
        if self.n == NUM_MARKERS:
            return self.heights[int((NUM_MARKERS - 1) * self.p)]
        return self.heights[2]

    def __repr__(self):
        return f'<P2Quantile p={self.p} n={self.n} estimate={self.get()}>'
