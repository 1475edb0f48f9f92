from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple, Union

import numpy as np
from numpy.polynomial import Polynomial as _PowerSeries

from .errors import DomainError

ArrayLike = Union[float, np.ndarray]

# Rounding slack when cos(theta) lands a hair outside [-1, 1].
_DOMAIN_TOL = 1e-12


def factorial(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise DomainError(f"factorial requires an integer, got {k!r}")
    if k < 0:
        raise DomainError(f"factorial requires k >= 0, got {k}")
    result = 1
    for i in range(2, int(k) + 1):
        result *= i
    return result


@dataclass(frozen=True, eq=False)
class Polynomial:
    """A power series, optionally multiplied by ``(1 - x^2)^(envelope/2)``.

    The envelope carries the non-polynomial ``sqrt(1 - x^2)`` factor of odd
    order associated Legendre functions, so ``terms`` stays a true polynomial.
    """

    terms: _PowerSeries
    envelope: int = 0
    domain: Optional[Tuple[float, float]] = None

    @property
    def degree(self) -> int:
        return self.terms.degree() + self.envelope

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return tuple(float(c) for c in self.terms.coef)

    def evaluate(self, x: ArrayLike) -> ArrayLike:
        xs = np.asarray(x, dtype=float)
        if self.domain is not None:
            lo, hi = self.domain
            outside = ~((xs >= lo - _DOMAIN_TOL) & (xs <= hi + _DOMAIN_TOL))
            if np.any(outside):
                raise DomainError(f"polynomial evaluated outside its domain [{lo}, {hi}]")
        value = self.terms(xs)
        if self.envelope:
            value = value * np.clip(1.0 - xs * xs, 0.0, None) ** (0.5 * self.envelope)
        if np.ndim(value) == 0:
            return float(value)
        return value

    __call__ = evaluate


@lru_cache(maxsize=128)
def _laguerre_coefficients(degree: int, alpha: float) -> Tuple[float, ...]:
    x = _PowerSeries([0.0, 1.0])
    lm2 = _PowerSeries([1.0])
    if degree == 0:
        return tuple(lm2.coef)
    lm1 = (1.0 + alpha) - x
    for j in range(2, degree + 1):
        lj = ((2 * j - 1 + alpha - x) * lm1 - (j - 1 + alpha) * lm2) / j
        lm2, lm1 = lm1, lj
    return tuple(lm1.coef)


def generalized_laguerre(degree: int, alpha: float) -> Polynomial:
    if degree < 0:
        raise DomainError(f"Laguerre degree must be >= 0, got {degree}")
    return Polynomial(_PowerSeries(_laguerre_coefficients(int(degree), float(alpha))))


@lru_cache(maxsize=128)
def _legendre_coefficients(degree: int, order: int) -> Tuple[float, ...]:
    # Q(x) in P_l^m(x) = (1 - x^2)^(m/2) Q(x), m >= 0, Condon-Shortley phase included.
    x = _PowerSeries([0.0, 1.0])
    pmm_value = 1.0
    fact = 1.0
    for _ in range(order):
        pmm_value *= -fact
        fact += 2.0
    pmm = _PowerSeries([pmm_value])

    if degree == order:
        return tuple(pmm.coef)
    pm1m = x * (2 * order + 1) * pmm
    for ll in range(order + 2, degree + 1):
        pll = ((2 * ll - 1) * x * pm1m - (ll + order - 1) * pmm) / (ll - order)
        pmm, pm1m = pm1m, pll
    return tuple(pm1m.coef)


def associated_legendre(degree: int, order: int) -> Polynomial:
    if degree < 0:
        raise DomainError(f"Legendre degree must be >= 0, got {degree}")
    if abs(order) > degree:
        raise DomainError(f"Legendre order must satisfy |order| <= degree, got order={order}, degree={degree}")

    m_abs = abs(order)
    terms = _PowerSeries(_legendre_coefficients(int(degree), int(m_abs)))
    if order < 0:
        sign = -1.0 if (m_abs % 2 == 1) else 1.0
        ratio = factorial(degree - m_abs) / factorial(degree + m_abs)
        terms = terms * (sign * ratio)
    return Polynomial(terms, envelope=m_abs, domain=(-1.0, 1.0))

