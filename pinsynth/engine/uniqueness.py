"""Sampling without replacement over the bounded non-personal number space."""

from typing import Callable, List, Optional, Set
import logging

from ..errors import ExhaustionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_STALLED_ROUNDS = 50


class UniquenessEnforcer:
    """
    Collects n PINs from a candidate source, optionally all distinct.

    With unique=True a candidate that collides with an accepted PIN (or an
    earlier candidate of the same draw) is dropped and redrawn. The search
    gives up with ExhaustionError when the known capacity is too small, or
    after max_stalled_rounds consecutive draws that add nothing new.
    """

    MAX_OVERSAMPLE_SHIFT = 10

    def __init__(self, unique: bool = True, max_stalled_rounds: int = DEFAULT_MAX_STALLED_ROUNDS):
        self.unique = unique
        self.max_stalled_rounds = max_stalled_rounds

    def fill(
        self,
        n: int,
        draw: Callable[[int], List[str]],
        capacity: Optional[int] = None,
    ) -> List[str]:
        """Return n PINs produced by draw(k), which yields k fresh candidates."""
        if n == 0:
            return []
        if not self.unique:
            return list(draw(n))

        if capacity is not None and n > capacity:
            raise ExhaustionError(
                f"Requested {n} unique PINs but only {capacity} non-personal numbers exist "
                f"for the given birthdate range and sex distribution"
            )

        accepted: List[str] = []
        seen: Set[str] = set()
        stalled = 0
        rounds = 0

        while len(accepted) < n:
            before = len(accepted)
            # Oversample after a fruitless draw; the last few free numbers are rare
            k = (n - before) * 2 ** min(stalled, self.MAX_OVERSAMPLE_SHIFT)
            for pin in draw(k):
                if pin not in seen:
                    seen.add(pin)
                    accepted.append(pin)
                    if len(accepted) == n:
                        break

            rounds += 1
            if len(accepted) == before:
                stalled += 1
                if stalled >= self.max_stalled_rounds:
                    raise ExhaustionError(
                        f"Only {len(accepted)} of {n} unique PINs found; "
                        f"{stalled} consecutive draws produced no new number"
                    )
            else:
                stalled = 0

        if rounds > 1:
            logger.debug(f"Unique fill of {n} PINs needed {rounds} draws")
        return accepted
