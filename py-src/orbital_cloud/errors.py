from __future__ import annotations


class OrbitalCloudError(Exception):
    """Base class for every error raised by orbital_cloud."""


class InvalidQuantumState(OrbitalCloudError, ValueError):
    pass


class InvalidResolution(OrbitalCloudError, ValueError):
    pass


class DomainError(OrbitalCloudError, ValueError):
    pass


class OutOfRangeFraction(OrbitalCloudError, ValueError):
    pass


class DegenerateDistribution(OrbitalCloudError, ValueError):
    pass


class DistributionsNotBuilt(OrbitalCloudError, RuntimeError):
    pass
