"""
wavefunction.py: hydrogen-like orbital wavefunction in spherical coordinates.

    psi_nlm(r, theta, phi) = R_nl(r) * Theta_lm(theta) * Re(exp(i m phi))

R_nl uses the generalized Laguerre polynomial L_{n-l-1}^{2l+1}; Theta_lm uses
the associated Legendre function P_l^{|m|} (Condon-Shortley phase). The
imaginary part of the azimuthal phase is dropped: sampled clouds follow the
real-orbital convention.

Normalization coefficients are kept as plain scalars next to the raw
polynomials and multiplied in at evaluation time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

import numpy as np
from scipy import integrate

from .errors import InvalidQuantumState
from .special_functions import Polynomial, associated_legendre, factorial, generalized_laguerre

ArrayLike = Union[float, np.ndarray]


def validate_quantum_state(n: int, l: int, m: int, a0: float) -> None:
    """Raise InvalidQuantumState unless n >= 1, 0 <= l < n, |m| <= l and a0 > 0."""
    for name, value in (("n", n), ("l", l), ("m", m)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidQuantumState(f"{name} must be an integer, got {value!r}")
    if n < 1:
        raise InvalidQuantumState(f"n must be >= 1, got n={n}")
    if not 0 <= l <= n - 1:
        raise InvalidQuantumState(f"l must satisfy 0 <= l <= n-1, got n={n}, l={l}")
    if not -l <= m <= l:
        raise InvalidQuantumState(f"m must satisfy -l <= m <= l, got l={l}, m={m}")
    if not (math.isfinite(a0) and a0 > 0.0):
        raise InvalidQuantumState(f"a0 must be a positive finite length, got a0={a0}")


def expected_radius(n: int, l: int, a0: float) -> float:
    """Closed-form <r> = a0/2 * (3n^2 - l(l+1))."""
    return 0.5 * a0 * (3 * n * n - l * (l + 1))


@dataclass(frozen=True)
class OrbitalWavefunction:
    """Precomputed hydrogen-like orbital for one (n, l, m, a0).

    Parameters
    ----------
    n, l, m : int
        Principal, azimuthal and magnetic quantum numbers.
    a0 : float
        Length scale (Bohr radius in the caller's units), a0 > 0.
    """

    n: int
    l: int
    m: int
    a0: float
    radial_norm: float = field(init=False, compare=False)
    angular_norm: float = field(init=False, compare=False)
    laguerre: Polynomial = field(init=False, repr=False, compare=False)
    legendre: Polynomial = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        validate_quantum_state(self.n, self.l, self.m, self.a0)
        n, l, m, a0 = self.n, self.l, self.m, self.a0
        m_abs = abs(m)

        radial_norm = math.sqrt(
            (2.0 / (n * a0)) ** 3 * factorial(n - l - 1) / (2.0 * n * factorial(n + l))
        )
        sign = -1.0 if (m_abs % 2 == 1) else 1.0
        angular_norm = sign * math.sqrt(
            (2 * l + 1) * factorial(l - m_abs) / (4.0 * math.pi * factorial(l + m_abs))
        )

        object.__setattr__(self, "radial_norm", radial_norm)
        object.__setattr__(self, "angular_norm", angular_norm)
        object.__setattr__(self, "laguerre", generalized_laguerre(n - l - 1, 2 * l + 1))
        object.__setattr__(self, "legendre", associated_legendre(l, m_abs))

    def radial(self, r: ArrayLike) -> ArrayLike:
        p = 2.0 * np.asarray(r, dtype=float) / (self.n * self.a0)
        value = self.radial_norm * self.laguerre.evaluate(p) * np.exp(-p / 2.0) * p**self.l
        return _as_scalar(value)

    def polar(self, theta: ArrayLike) -> ArrayLike:
        x = np.clip(np.cos(np.asarray(theta, dtype=float)), -1.0, 1.0)
        return _as_scalar(self.angular_norm * self.legendre.evaluate(x))

    def azimuthal(self, phi: ArrayLike) -> ArrayLike:
        # Re(exp(i m phi))
        return _as_scalar(np.cos(self.m * np.asarray(phi, dtype=float)))

    def angular(self, theta: ArrayLike, phi: ArrayLike) -> ArrayLike:
        return _as_scalar(np.multiply(self.polar(theta), self.azimuthal(phi)))

    def wavefunction(self, r: ArrayLike, theta: ArrayLike, phi: ArrayLike) -> ArrayLike:
        return _as_scalar(np.multiply(self.radial(r), self.angular(theta, phi)))

    def probability_density(self, r: ArrayLike, theta: ArrayLike, phi: ArrayLike) -> ArrayLike:
        return _as_scalar(np.square(self.wavefunction(r, theta, phi)))

    def radial_probability(self, r: ArrayLike) -> ArrayLike:
        """r^2 R(r)^2: the radial density including the spherical volume element."""
        rr = np.asarray(r, dtype=float)
        return _as_scalar(rr * rr * np.square(self.radial(rr)))

    def radial_normalization(self) -> float:
        return self._radial_moment(0)

    def radial_expectation(self) -> float:
        return self._radial_moment(1)

    def _radial_moment(self, power: int) -> float:
        # The density is negligible beyond ~80 n a0; the peak sits near n^2 a0.
        upper = 80.0 * self.n * self.a0
        value, _ = integrate.quad(
            lambda r: r**power * self.radial_probability(r),
            0.0,
            upper,
            points=(self.n * self.n * self.a0,),
            limit=200,
        )
        return float(value)


def _as_scalar(value: ArrayLike) -> ArrayLike:
    if np.ndim(value) == 0:
        return float(value)
    return value
