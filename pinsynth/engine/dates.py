"""Birthdate sampling, uniform or from a fitted density truncated to bounds."""

from datetime import date
from typing import List
import logging

import numpy as np

from ..errors import InvalidParameterError, InvalidRangeError, SamplingError
from .density import EstimatedDistribution

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 100


def check_range(l_birth: date, u_birth: date):
    if l_birth > u_birth:
        raise InvalidRangeError(f"l_birth {l_birth} is after u_birth {u_birth}")


def days_in_range(l_birth: date, u_birth: date) -> int:
    """Number of calendar days in [l_birth, u_birth]."""
    check_range(l_birth, u_birth)
    return u_birth.toordinal() - l_birth.toordinal() + 1


def _check_count(n: int):
    if n < 0:
        raise InvalidParameterError(f"Cannot sample a negative number of dates: {n}")


def sample_uniform(
    n: int,
    l_birth: date,
    u_birth: date,
    rng: np.random.Generator,
) -> List[date]:
    """n dates drawn uniformly, with replacement, from [l_birth, u_birth]."""
    check_range(l_birth, u_birth)
    _check_count(n)
    ordinals = rng.integers(l_birth.toordinal(), u_birth.toordinal(), size=n, endpoint=True)
    return [date.fromordinal(int(o)) for o in ordinals]


def sample_empirical(
    n: int,
    distribution: EstimatedDistribution,
    l_birth: date,
    u_birth: date,
    rng: np.random.Generator,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
) -> List[date]:
    """
    n dates drawn from the fitted density, truncated to [l_birth, u_birth].

    Draws outside the bounds are discarded and redrawn. If values are still
    missing after max_rounds redraw rounds the bounds are treated as
    unreachable and SamplingError is raised.
    """
    check_range(l_birth, u_birth)
    _check_count(n)

    lo, hi = l_birth.toordinal(), u_birth.toordinal()
    if lo == hi:
        return [l_birth] * n

    accepted = np.empty(0, dtype=np.int64)
    for round_no in range(max_rounds + 1):
        missing = n - len(accepted)
        if missing == 0:
            break
        draws = np.rint(distribution.density.sample(missing, rng)).astype(np.int64)
        inside = draws[(draws >= lo) & (draws <= hi)]
        accepted = np.concatenate([accepted, inside])
        if round_no:
            logger.debug(f"Redraw round {round_no}: {missing - len(inside)} dates still outside bounds")
    else:
        missing = n - len(accepted)

    if missing:
        raise SamplingError(
            f"Could not draw {missing} of {n} birthdates inside [{l_birth}, {u_birth}] "
            f"after {max_rounds} redraw rounds"
        )

    return [date.fromordinal(int(o)) for o in accepted]
