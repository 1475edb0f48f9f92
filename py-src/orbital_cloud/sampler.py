"""
sampler.py: inverse-transform sampling of hydrogen-like orbital clouds.

Each axis is tabulated over half of its symmetric range only:

- r in (0, extent/2]
- theta in (0, pi/2]   (|P_l^m(cos theta)|^2 is even about the equator)
- phi in (0, pi/2]     (cos^2(m phi) repeats in every quadrant)

The tables therefore describe the first octant. ``randomize_octant`` recovers
the full distribution by negating x, y and z independently.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Tuple, Union

import numpy as np

from .cdf import CDF, CDFTriple
from .errors import DistributionsNotBuilt, InvalidResolution
from .wavefunction import OrbitalWavefunction

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]

# Bohr radius in units of 10 pm.
BOHR_RADIUS = 5.29
GRID_LIMIT = 1000.0
# Warn when the tabulated radial mass falls below this share of the norm.
RADIAL_CAPTURE_WARNING = 0.9
HALF_PI = 0.5 * math.pi
TWO_PI = 2.0 * math.pi


class UniformRandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class GridConfig:
    extent: float = GRID_LIMIT
    bohr_radius: float = BOHR_RADIUS

    def __post_init__(self) -> None:
        if not (math.isfinite(self.extent) and self.extent > 0.0):
            raise ValueError(f"grid extent must be > 0, got {self.extent}")
        if not (math.isfinite(self.bohr_radius) and self.bohr_radius > 0.0):
            raise ValueError(f"bohr_radius must be > 0, got {self.bohr_radius}")

    @property
    def half_extent(self) -> float:
        return 0.5 * self.extent


@dataclass(frozen=True)
class PointCloud:
    points: np.ndarray
    weights: np.ndarray

    def __len__(self) -> int:
        return len(self.points)


def half_grid(half_limit: float, resolution: int) -> Tuple[np.ndarray, float]:
    """Nodes covering (0, half_limit] in ascending order, and their spacing.

    ``resolution`` counts nodes over the full symmetric range
    [-half_limit, half_limit]; only ceil(resolution / 2) of them are kept.
    """
    check_resolution(resolution)
    count = (resolution + resolution % 2) // 2
    step = 2.0 * half_limit / (resolution - 1)
    nodes = half_limit - step * np.arange(count)
    # rounding can leave the innermost node a hair below zero for odd resolutions
    return np.clip(nodes[::-1], 0.0, None), step


def check_resolution(resolution: int) -> None:
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
        raise InvalidResolution(f"resolution must be an integer, got {resolution!r}")
    if resolution < 2:
        raise InvalidResolution(f"resolution must be >= 2, got {resolution}")


def _accumulate(nodes: np.ndarray, density: Callable[[np.ndarray], np.ndarray]) -> CDF:
    # Trapezoid mass of each bucket (x_{i-1}, x_i]; the first bucket starts at 0.
    edges = np.concatenate(([0.0], nodes))
    d = np.asarray(density(edges), dtype=float)
    masses = 0.5 * (d[:-1] + d[1:]) * np.diff(edges)
    cdf = CDF()
    for x, mass in zip(nodes, masses):
        cdf.add_point(float(x), float(mass))
    return cdf


def build_distributions(
    n: int,
    l: int,
    m: int,
    scale: float,
    resolution: int,
    grid: Optional[GridConfig] = None,
) -> CDFTriple:
    grid = grid or GridConfig()
    check_resolution(resolution)
    wavefunction = OrbitalWavefunction(n, l, m, scale * grid.bohr_radius)
    return distributions_for(wavefunction, resolution, grid)


def distributions_for(wavefunction: OrbitalWavefunction, resolution: int, grid: GridConfig) -> CDFTriple:
    r_nodes, _ = half_grid(grid.half_extent, resolution)
    theta_nodes, _ = half_grid(HALF_PI, resolution)
    phi_nodes, _ = half_grid(HALF_PI, resolution)

    radial = _accumulate(r_nodes, wavefunction.radial_probability)
    polar = _accumulate(theta_nodes, lambda t: np.sin(t) * np.square(wavefunction.polar(t)))
    azimuthal = _accumulate(phi_nodes, lambda p: np.square(wavefunction.azimuthal(p)))

    distributions = CDFTriple(radial, polar, azimuthal)
    distributions.validate()
    if radial.total < RADIAL_CAPTURE_WARNING:
        logger.warning(
            f"Radial grid holds only {radial.total:.1%} of the n={wavefunction.n} l={wavefunction.l} density; "
            f"samples are clipped at r={grid.half_extent:.4g}. Increase the grid extent."
        )
    logger.debug(
        f"Built distributions n={wavefunction.n} l={wavefunction.l} m={wavefunction.m} "
        f"a0={wavefunction.a0:.4g} entries={len(radial)} radial_total={radial.total:.6g}"
    )
    return distributions


def randomize_octant(
    theta: ArrayLike,
    phi: ArrayLike,
    flip_x: Union[bool, np.ndarray],
    flip_y: Union[bool, np.ndarray],
    flip_z: Union[bool, np.ndarray],
) -> Tuple[ArrayLike, ArrayLike]:
    """Reflect a first-octant direction; each flip negates one Cartesian axis."""
    theta = np.where(flip_z, math.pi - np.asarray(theta, dtype=float), theta)
    phi = np.where(flip_x, math.pi - np.asarray(phi, dtype=float), phi)
    phi = np.where(flip_y, -phi, phi)
    phi = np.mod(phi, TWO_PI)
    if np.ndim(theta) == 0 and np.ndim(phi) == 0:
        return float(theta), float(phi)
    return theta, phi


def spherical_to_cartesian(r: ArrayLike, theta: ArrayLike, phi: ArrayLike) -> Tuple[ArrayLike, ArrayLike, ArrayLike]:
    if np.ndim(r) == 0 and np.ndim(theta) == 0 and np.ndim(phi) == 0:
        x = r * math.sin(theta) * math.cos(phi)
        y = r * math.sin(theta) * math.sin(phi)
        z = r * math.cos(theta)
        return x, y, z
    r, theta, phi = np.asarray(r), np.asarray(theta), np.asarray(phi)
    return r * np.sin(theta) * np.cos(phi), r * np.sin(theta) * np.sin(phi), r * np.cos(theta)


def sample(distributions: Optional[CDFTriple], rng: UniformRandomSource) -> Tuple[float, float, float]:
    if distributions is None:
        raise DistributionsNotBuilt("build_distributions must succeed before sampling")
    r = distributions.radial.inverse_transform(rng.random())
    theta = distributions.polar.inverse_transform(rng.random())
    phi = distributions.azimuthal.inverse_transform(rng.random())
    flips = (rng.random() < 0.5, rng.random() < 0.5, rng.random() < 0.5)
    theta, phi = randomize_octant(theta, phi, *flips)
    return r, theta, phi


def sample_many(
    distributions: Optional[CDFTriple],
    count: int,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    if distributions is None:
        raise DistributionsNotBuilt("build_distributions must succeed before sampling")
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    u = rng.random((count, 3))
    r = distributions.radial.inverse_transform_many(u[:, 0])
    theta = distributions.polar.inverse_transform_many(u[:, 1])
    phi = distributions.azimuthal.inverse_transform_many(u[:, 2])
    flips = rng.random((count, 3)) < 0.5
    theta, phi = randomize_octant(theta, phi, flips[:, 0], flips[:, 1], flips[:, 2])
    return r, np.asarray(theta), np.asarray(phi)


class OrbitalSampler:
    """Owns the distributions of one orbital configuration at a time.

    ``configure`` rebuilds only when (n, l, m, scale, resolution) changes;
    sampling before the first successful ``configure`` raises
    DistributionsNotBuilt.
    """

    def __init__(self, grid: Optional[GridConfig] = None, rng: Optional[np.random.Generator] = None) -> None:
        self.grid = grid or GridConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.wavefunction: Optional[OrbitalWavefunction] = None
        self.distributions: Optional[CDFTriple] = None
        self._key: Optional[Tuple[int, int, int, float, int]] = None

    def configure(self, n: int, l: int, m: int, scale: float, resolution: int) -> CDFTriple:
        key = (n, l, m, float(scale), resolution)
        if key == self._key and self.distributions is not None:
            return self.distributions

        check_resolution(resolution)
        wavefunction = OrbitalWavefunction(n, l, m, scale * self.grid.bohr_radius)
        distributions = distributions_for(wavefunction, resolution, self.grid)
        self.wavefunction, self.distributions, self._key = wavefunction, distributions, key
        logger.info(f"Orbital configured: n={n} l={l} m={m} scale={scale} resolution={resolution}")
        return distributions

    def sample(self) -> Tuple[float, float, float]:
        return sample(self.distributions, self.rng)

    def sample_points(self, count: int) -> np.ndarray:
        r, theta, phi = sample_many(self.distributions, count, self.rng)
        return np.column_stack(spherical_to_cartesian(r, theta, phi))

    def sample_cloud(self, count: int) -> PointCloud:
        r, theta, phi = sample_many(self.distributions, count, self.rng)
        points = np.column_stack(spherical_to_cartesian(r, theta, phi))
        density = np.asarray(self.wavefunction.probability_density(r, theta, phi), dtype=float)
        peak = density.max() if density.size else 0.0
        weights = density / peak if peak > 0.0 else np.zeros_like(density)
        return PointCloud(points=points.reshape(-1, 3), weights=weights.reshape(-1))
