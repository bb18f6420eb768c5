"""
Empirical birthdate distribution for anonymization.

Birthdates are mapped to day ordinals (date.toordinal) and a smooth density
is fitted on that scale. The smoothing method sits behind DensityStrategy so
the truncation and resampling logic in dates.py does not depend on it.

Usage:
    estimator = DistributionEstimator()
    dist = estimator.fit(birthdates, is_male)
    ordinals = dist.density.sample(100, rng)
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol, Sequence, Union
import logging

import numpy as np
from scipy.stats import gaussian_kde

from ..errors import EstimationError

logger = logging.getLogger(__name__)

Bandwidth = Union[str, float]


# =============================================================================
# STRATEGY INTERFACE
# =============================================================================

class Density(Protocol):
    """A fitted one-dimensional density."""

    def sample(self, n: int, rng: np.random.Generator) -> np.ndarray:
        ...

    def pdf(self, x: np.ndarray) -> np.ndarray:
        ...


class DensityStrategy(Protocol):
    """Fits a Density to one-dimensional samples."""

    def fit(self, samples: np.ndarray) -> Density:
        ...


# =============================================================================
# GAUSSIAN KERNEL DENSITY
# =============================================================================

class KernelDensity:
    """Gaussian kernel density estimate (wraps scipy's gaussian_kde)."""

    def __init__(self, kde: gaussian_kde):
        self._kde = kde

    @property
    def bandwidth(self) -> float:
        """Kernel standard deviation on the ordinal (day) scale."""
        return float(np.sqrt(self._kde.covariance[0, 0]))

    def sample(self, n: int, rng: np.random.Generator) -> np.ndarray:
        if n == 0:
            return np.empty(0)
        return self._kde.resample(n, seed=rng)[0]

    def pdf(self, x: np.ndarray) -> np.ndarray:
        return self._kde(np.atleast_1d(x))


class KernelDensityStrategy:
    """
    Smooth density via Gaussian kernels.

    bandwidth: "scott", "silverman" or a scalar factor (see gaussian_kde).
    """

    def __init__(self, bandwidth: Bandwidth = "scott"):
        self.bandwidth = bandwidth

    def fit(self, samples: np.ndarray) -> KernelDensity:
        try:
            kde = gaussian_kde(samples, bw_method=self.bandwidth)
        except (np.linalg.LinAlgError, ValueError) as e:
            raise EstimationError(f"Kernel density fit failed: {e}") from e
        return KernelDensity(kde)


# =============================================================================
# ESTIMATOR
# =============================================================================

@dataclass(frozen=True)
class EstimatedDistribution:
    """Fitted birthdate density plus the observed male share."""
    density: Density
    male_prob: Optional[float]
    min_date: date
    max_date: date
    n_obs: int


class DistributionEstimator:
    """Fits an EstimatedDistribution to observed birthdates and sexes."""

    MIN_OBSERVATIONS = 2

    def __init__(self, strategy: Optional[DensityStrategy] = None):
        self.strategy = strategy or KernelDensityStrategy()

    def can_fit(self, birthdates: Sequence[date]) -> bool:
        """True if birthdates hold at least MIN_OBSERVATIONS distinct values."""
        return len(set(birthdates)) >= self.MIN_OBSERVATIONS

    def fit(
        self,
        birthdates: Sequence[date],
        is_male: Optional[Sequence[bool]] = None,
    ) -> EstimatedDistribution:
        """
        Fit the density of birthdates and compute the male share.

        Raises EstimationError with fewer than two observations, when all
        birthdates are identical, or when sex labels do not line up.
        """
        n = len(birthdates)
        if n < self.MIN_OBSERVATIONS:
            raise EstimationError(
                f"Need at least {self.MIN_OBSERVATIONS} birthdates to fit a density, got {n}"
            )

        ordinals = np.array([d.toordinal() for d in birthdates], dtype=float)
        if np.ptp(ordinals) == 0:
            raise EstimationError("All birthdates are identical; density is degenerate")

        male_prob = None
        if is_male is not None:
            if len(is_male) != n:
                raise EstimationError(
                    f"Got {len(is_male)} sex labels for {n} birthdates"
                )
            male_prob = float(np.mean(np.asarray(is_male, dtype=bool)))

        density = self.strategy.fit(ordinals)
        logger.debug(f"Fitted birthdate density on {n} observations")

        return EstimatedDistribution(
            density=density,
            male_prob=male_prob,
            min_date=date.fromordinal(int(ordinals.min())),
            max_date=date.fromordinal(int(ordinals.max())),
            n_obs=n,
        )
