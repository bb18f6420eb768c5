"""Generation and anonymization of non-personal PINs.

Quick Start:
    import pinsynth

    # 100 fake PINs born 1974-1994, a quarter of them men
    batch = pinsynth.generate(100, l_birth="1974-01-01", u_birth="1994-01-01",
                              male_prob=0.25, rng=12345)

    # Replace real PINs by fake ones with the same age and sex distribution
    fake = pinsynth.anonymize(real_pins, rng=12345)

Every PIN produced has a birth number (digits 9-11) in [880, 999], a range
that is valid but never assigned to an actual person.
"""

from datetime import date
from typing import List, Optional, Sequence, Union
import logging

import numpy as np

from .config import Config, get_config
from .engine import birth_number, codec, dates, relations
from .engine.density import DistributionEstimator, KernelDensityStrategy
from .engine.uniqueness import UniquenessEnforcer
from .errors import InvalidParameterError
from .types import DateLike, PinBatch, to_date

logger = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.Generator]


class Generator:
    """
    Composes the samplers, codec and uniqueness rules into generate() and
    anonymize().

    Randomness comes from the rng argument of each call (a seed or a numpy
    Generator). Without one, the instance's own generator is used, seeded
    from config.seed.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rng: RandomSource = None,
        estimator: Optional[DistributionEstimator] = None,
    ):
        self.config = config or get_config()
        self.rng = self._resolve_rng(rng if rng is not None else self.config.seed)
        self.estimator = estimator or DistributionEstimator(
            KernelDensityStrategy(self.config.sampling.bandwidth)
        )

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def generate(
        self,
        count: int,
        l_birth: Optional[DateLike] = None,
        u_birth: Optional[DateLike] = None,
        male_prob: Optional[float] = None,
        unique: Optional[bool] = None,
        rng: RandomSource = None,
    ) -> PinBatch:
        """Generate count fake PINs with birthdates uniform on [l_birth, u_birth].

        Args:
            count: Number of PINs (0 gives an empty batch)
            l_birth: Earliest birthdate (default 1900-01-01)
            u_birth: Latest birthdate (default today)
            male_prob: Probability that a PIN encodes a man (default 0.5)
            unique: Sample without replacement (default True)
            rng: Seed or numpy Generator for this call

        Returns:
            PinBatch marked non_personal
        """
        defaults = self.config.defaults
        count = self._check_count(count)
        lo = to_date(l_birth, "l_birth") if l_birth is not None else defaults.l_birth
        hi = to_date(u_birth, "u_birth") if u_birth is not None else (defaults.u_birth or date.today())
        dates.check_range(lo, hi)
        p = birth_number.check_probability(defaults.male_prob if male_prob is None else male_prob)
        unique = defaults.unique if unique is None else unique
        gen = self._call_rng(rng)

        def draw(k: int) -> List[str]:
            return self._encode_many(dates.sample_uniform(k, lo, hi, gen), p, gen)

        pins = self._enforcer(unique).fill(
            count, draw, capacity=dates.days_in_range(lo, hi) * birth_number.capacity(p)
        )
        logger.info(f"Generated {len(pins)} non-personal PINs ({lo} to {hi})")
        return PinBatch(pins=pins)

    def anonymize(
        self,
        source: Sequence[Union[str, int]],
        l_birth: Optional[DateLike] = None,
        u_birth: Optional[DateLike] = None,
        male_prob: Optional[float] = None,
        unique: Optional[bool] = None,
        keep_rel: Optional[bool] = None,
        rng: RandomSource = None,
    ) -> PinBatch:
        """Replace PINs by fake ones mimicking their age and sex distribution.

        Args:
            source: PINs to anonymize (12-digit strings or ints)
            l_birth, u_birth: Truncation bounds for birthdates (default from
                the source, see DefaultsConfig.bounds)
            male_prob: Probability of a man (default: observed in source)
            unique: Distinct output values across groups (default True)
            keep_rel: Equal input PINs map to equal output PINs (default True)
            rng: Seed or numpy Generator for this call

        Returns:
            PinBatch of len(source) PINs marked non_personal
        """
        defaults = self.config.defaults
        if len(source) == 0:
            return PinBatch(pins=[])

        fields = [codec.decode(pin) for pin in source]
        birthdates = [f.birthdate for f in fields]
        is_male = [f.is_male for f in fields]

        lo, hi = self._anonymization_bounds(birthdates, l_birth, u_birth)
        if male_prob is not None:
            male_prob = birth_number.check_probability(male_prob)
        unique = defaults.unique if unique is None else unique
        keep_rel = defaults.keep_rel if keep_rel is None else keep_rel
        gen = self._call_rng(rng)

        grouping = relations.group([codec.normalize(pin) for pin in source], keep_rel)

        if lo == hi:
            # Single-day window: no density needed
            p = sum(is_male) / len(is_male) if male_prob is None else male_prob

            def sample_dates(k: int) -> List[date]:
                return [lo] * k
        elif not self.estimator.can_fit(birthdates):
            # One distinct birthdate carries no shape; spread over the window
            p = sum(is_male) / len(is_male) if male_prob is None else male_prob
            logger.debug(f"Source has a single birthdate, sampling uniformly on {lo} to {hi}")

            def sample_dates(k: int) -> List[date]:
                return dates.sample_uniform(k, lo, hi, gen)
        else:
            distribution = self.estimator.fit(birthdates, is_male)
            p = distribution.male_prob if male_prob is None else male_prob

            def sample_dates(k: int) -> List[date]:
                return dates.sample_empirical(
                    k, distribution, lo, hi, gen, max_rounds=self.config.sampling.max_rounds
                )

        def draw(k: int) -> List[str]:
            return self._encode_many(sample_dates(k), p, gen)

        values = self._enforcer(unique).fill(
            grouping.n_groups, draw,
            capacity=dates.days_in_range(lo, hi) * birth_number.capacity(p),
        )
        pins = grouping.broadcast(values)
        logger.info(
            f"Anonymized {len(pins)} PINs into {grouping.n_groups} distinct values ({lo} to {hi})"
        )
        return PinBatch(pins=pins)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _anonymization_bounds(self, birthdates, l_birth, u_birth):
        oldest, youngest = min(birthdates), max(birthdates)
        if self.config.defaults.bounds == "year":
            oldest, youngest = date(oldest.year, 1, 1), date(youngest.year, 12, 31)

        lo = to_date(l_birth, "l_birth") if l_birth is not None else oldest
        hi = to_date(u_birth, "u_birth") if u_birth is not None else youngest
        dates.check_range(lo, hi)
        return lo, hi

    def _encode_many(self, birthdates: List[date], male_prob: float, gen: np.random.Generator) -> List[str]:
        bands, digits = birth_number.sample_many(len(birthdates), male_prob, gen)
        return [
            codec.encode(d, int(b), int(s))
            for d, b, s in zip(birthdates, bands, digits)
        ]

    def _enforcer(self, unique: bool) -> UniquenessEnforcer:
        return UniquenessEnforcer(unique, max_stalled_rounds=self.config.sampling.max_stalled_rounds)

    def _call_rng(self, rng: RandomSource) -> np.random.Generator:
        return self.rng if rng is None else self._resolve_rng(rng)

    @staticmethod
    def _resolve_rng(rng: RandomSource) -> np.random.Generator:
        if isinstance(rng, np.random.Generator):
            return rng
        return np.random.default_rng(rng)

    @staticmethod
    def _check_count(count) -> int:
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
            raise InvalidParameterError(f"count must be an integer, got {count!r}")
        if count < 0:
            raise InvalidParameterError(f"count must not be negative, got {count}")
        return int(count)


# =============================================================================
# DEFAULT INSTANCE
# =============================================================================

_generator: Optional[Generator] = None


def get_generator() -> Generator:
    """Get or create the process-wide generator."""
    global _generator
    if _generator is None:
        _generator = Generator()
    return _generator


def set_generator(generator: Optional[Generator]):
    """Replace the process-wide generator (None resets it)."""
    global _generator
    _generator = generator


def generate(
    count: int,
    l_birth: Optional[DateLike] = None,
    u_birth: Optional[DateLike] = None,
    male_prob: Optional[float] = None,
    unique: Optional[bool] = None,
    rng: RandomSource = None,
) -> PinBatch:
    """Generate fake PINs with the default generator. See Generator.generate."""
    return get_generator().generate(count, l_birth, u_birth, male_prob, unique, rng)


def anonymize(
    source: Sequence[Union[str, int]],
    l_birth: Optional[DateLike] = None,
    u_birth: Optional[DateLike] = None,
    male_prob: Optional[float] = None,
    unique: Optional[bool] = None,
    keep_rel: Optional[bool] = None,
    rng: RandomSource = None,
) -> PinBatch:
    """Anonymize PINs with the default generator. See Generator.anonymize."""
    return get_generator().anonymize(source, l_birth, u_birth, male_prob, unique, keep_rel, rng)
