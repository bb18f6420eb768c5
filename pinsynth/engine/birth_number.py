"""Sampling of non-personal birth numbers (digits 9-11).

The serial band is uniform on [88, 99]. For non-personal numbers it carries
no birthplace meaning, even for birth years before 1990.
"""

import math
from typing import Tuple

import numpy as np

from ..errors import InvalidParameterError

SERIAL_BANDS = np.arange(88, 100)
MALE_DIGITS = np.array([1, 3, 5, 7, 9])
FEMALE_DIGITS = np.array([0, 2, 4, 6, 8])


def check_probability(male_prob: float) -> float:
    """Validate a male probability, returning it as float."""
    try:
        p = float(male_prob)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"male_prob must be a number, got {male_prob!r}") from e
    if math.isnan(p) or not 0.0 <= p <= 1.0:
        raise InvalidParameterError(f"male_prob must lie in [0, 1], got {male_prob!r}")
    return p


def capacity(male_prob: float) -> int:
    """Distinct birth numbers reachable for a single birthdate."""
    p = check_probability(male_prob)
    digits = len(MALE_DIGITS) if p in (0.0, 1.0) else len(MALE_DIGITS) + len(FEMALE_DIGITS)
    return len(SERIAL_BANDS) * digits


def sample_many(
    n: int,
    male_prob: float,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    """Draw n (serial_band, sex_digit) pairs as two integer arrays."""
    p = check_probability(male_prob)

    bands = rng.choice(SERIAL_BANDS, size=n)
    is_male = rng.random(n) < p
    male = rng.choice(MALE_DIGITS, size=n)
    female = rng.choice(FEMALE_DIGITS, size=n)
    return bands, np.where(is_male, male, female)


def sample(male_prob: float, rng: np.random.Generator) -> Tuple[int, int]:
    """Draw a single (serial_band, sex_digit) pair."""
    bands, digits = sample_many(1, male_prob, rng)
    return int(bands[0]), int(digits[0])
