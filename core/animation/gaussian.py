"""
Gaussian Blend Table

Precomputed bell-curve weights used to soften the edges of an actor's
influence on the base layer.

    table = GaussianBlendTable(30, 2.5)
    amount = table[i]          # 0-255 blend factor

The table is centred: table[length // 2] is the peak (255) and values
decay toward the edges. Variance controls the width:
    2.5 -> ~6-8 visibly blended pixels
    5.0 -> ~12-14 visibly blended pixels
"""

import math
from typing import List


def gaussian_weight(x: float, variance: float) -> float:
    """Unnormalised Gaussian exp(-x^2 / 2v), 1.0 at x == 0."""
    return math.exp(-(x * x) / (2.0 * variance))


def to_blend_amount(weight: float) -> int:
    """Scale a 0-1 weight to a rounded, clamped 0-255 blend amount."""
    return max(0, min(255, int(weight * 255.0 + 0.5)))


class GaussianBlendTable:
    """Fixed-length lookup of 0-255 blend factors."""

    def __init__(self, length: int, variance: float):
        if length < 1:
            raise ValueError(f"length must be positive, got {length}")
        self._length = length
        self._variance = None
        self._table: List[int] = [0] * length
        self.compute(variance)

    @property
    def length(self) -> int:
        return self._length

    @property
    def variance(self) -> float:
        return self._variance

    @property
    def table(self) -> List[int]:
        return list(self._table)

    def compute(self, variance: float):
        """(Re)compute the curve. No-op when the variance is unchanged."""
        if variance <= 0:
            raise ValueError(f"variance must be positive, got {variance}")
        if variance == self._variance:
            return
        half = self._length // 2
        for i in range(self._length):
            self._table[i] = to_blend_amount(gaussian_weight(i - half, variance))
        self._variance = variance

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index: int) -> int:
        return self._table[index]
