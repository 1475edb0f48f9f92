from .cdf import CDF, CDFEntry, CDFTriple
from .errors import (
    DegenerateDistribution,
    DistributionsNotBuilt,
    DomainError,
    InvalidQuantumState,
    InvalidResolution,
    OrbitalCloudError,
    OutOfRangeFraction,
)
from .sampler import (
    BOHR_RADIUS,
    GRID_LIMIT,
    GridConfig,
    OrbitalSampler,
    PointCloud,
    build_distributions,
    randomize_octant,
    sample,
    sample_many,
    spherical_to_cartesian,
)
from .special_functions import Polynomial, associated_legendre, factorial, generalized_laguerre
from .wavefunction import OrbitalWavefunction, expected_radius

__version__ = "0.1.0"
