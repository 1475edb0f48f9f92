from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple, Union

import numpy as np

from .errors import DegenerateDistribution, DomainError, OutOfRangeFraction

ArrayLike = Union[float, np.ndarray]


class CDFEntry(NamedTuple):
    cumulative_fraction: float
    domain_value: float


class CDF:
    """Cumulative distribution built from per-bucket density masses.

    Points must be added in ascending domain order. The stored fractions are
    raw running totals; ``total`` normalizes them into [0, 1].
    """

    def __init__(self) -> None:
        self._fractions: List[float] = []
        self._values: List[float] = []
        self._total = 0.0
        self._arrays: Optional[Tuple[np.ndarray, np.ndarray]] = None

    def __len__(self) -> int:
        return len(self._fractions)

    @property
    def total(self) -> float:
        return self._total

    @property
    def entries(self) -> Tuple[CDFEntry, ...]:
        return tuple(CDFEntry(f, x) for f, x in zip(self._fractions, self._values))

    def add_point(self, domain_value: float, density_contribution: float) -> None:
        if not (math.isfinite(density_contribution) and density_contribution >= 0.0):
            raise DomainError(f"density contribution must be finite and >= 0, got {density_contribution}")
        self._total += density_contribution
        self._fractions.append(self._total)
        self._values.append(float(domain_value))
        self._arrays = None

    def validate(self) -> None:
        if not self._fractions:
            raise DegenerateDistribution("CDF has no entries")
        if not self._total > 0.0:
            raise DegenerateDistribution("CDF total density is zero; nothing to sample from")

    def inverse_transform(self, u: float) -> float:
        """Domain value below which a fraction ``u`` of the density lies.

        Binary search for the first entry whose cumulative fraction reaches
        ``u * total``, then linear interpolation inside that bucket.
        """
        _check_fraction(u)
        self.validate()
        fractions = self._fractions
        values = self._values
        target = u * self._total

        lo, hi = 0, len(fractions) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if fractions[mid] < target:
                lo = mid + 1
            else:
                hi = mid

        if lo == 0:
            return values[0]
        f0, f1 = fractions[lo - 1], fractions[lo]
        x0, x1 = values[lo - 1], values[lo]
        if f1 <= f0:
            return x1
        return x0 + (x1 - x0) * (target - f0) / (f1 - f0)

    def inverse_transform_many(self, u: ArrayLike) -> np.ndarray:
        us = np.asarray(u, dtype=float)
        if not np.all((us >= 0.0) & (us < 1.0)):
            raise OutOfRangeFraction("fractions must lie in [0, 1)")
        self.validate()
        fractions, values = self._as_arrays()
        target = us * self._total

        idx = np.searchsorted(fractions, target, side="left")
        idx = np.minimum(idx, len(fractions) - 1)
        prev = np.maximum(idx - 1, 0)
        f0, f1 = fractions[prev], fractions[idx]
        x0, x1 = values[prev], values[idx]
        span = f1 - f0
        safe_span = np.where(span > 0.0, span, 1.0)
        t = np.where(span > 0.0, (target - f0) / safe_span, 1.0)
        out = x0 + (x1 - x0) * t
        return np.where(idx == 0, values[0], out)

    def cumulative_fraction_at(self, x: ArrayLike) -> ArrayLike:
        self.validate()
        fractions, values = self._as_arrays()
        value = np.interp(x, values, fractions, left=0.0) / self._total
        if np.ndim(value) == 0:
            return float(value)
        return value

    def _as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        arrays = self._arrays
        if arrays is None:
            arrays = (np.asarray(self._fractions, dtype=float), np.asarray(self._values, dtype=float))
            self._arrays = arrays
        return arrays


def _check_fraction(u: float) -> None:
    if not 0.0 <= u < 1.0:
        raise OutOfRangeFraction(f"fraction must lie in [0, 1), got {u}")


@dataclass(frozen=True)
class CDFTriple:
    radial: CDF
    polar: CDF
    azimuthal: CDF

    def validate(self) -> None:
        for name, cdf in (("radial", self.radial), ("polar", self.polar), ("azimuthal", self.azimuthal)):
            try:
                cdf.validate()
            except DegenerateDistribution as exc:
                raise DegenerateDistribution(f"{name} distribution: {exc}") from exc
