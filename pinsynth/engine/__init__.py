"""Building blocks of the PIN generator.

- checksum: Luhn check digit
- codec: 12-digit PIN encode/decode
- birth_number: non-personal serial band and sex digit sampling
- dates: uniform and truncated empirical birthdate sampling
- density: pluggable birthdate density estimation
- relations: grouping of repeated input PINs
- uniqueness: sampling without replacement
"""

from . import birth_number, checksum, codec, dates, relations
from .density import (
    DensityStrategy,
    DistributionEstimator,
    EstimatedDistribution,
    KernelDensityStrategy,
)
from .relations import Grouping
from .uniqueness import UniquenessEnforcer

__all__ = [
    "birth_number",
    "checksum",
    "codec",
    "dates",
    "relations",
    "DensityStrategy",
    "DistributionEstimator",
    "EstimatedDistribution",
    "KernelDensityStrategy",
    "Grouping",
    "UniquenessEnforcer",
]
