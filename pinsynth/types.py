"""Core types for PIN generation."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator, List, Tuple, Union

from .errors import InvalidParameterError


# Birth numbers (digits 9-11) in this interval are never assigned to a person
NON_PERSONAL_MIN = 880
NON_PERSONAL_MAX = 999

DateLike = Union[date, datetime, str]


class Sex(str, Enum):
    """Sex encoded by the parity of digit 11."""
    MALE = "male"        # odd
    FEMALE = "female"    # even


def to_date(value: DateLike, name: str = "date") -> date:
    """Coerce a date, datetime or ISO string (YYYY-MM-DD) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidParameterError(f"{name} is not an ISO date: {value!r}") from e
    raise InvalidParameterError(f"{name} must be a date or ISO string, got {type(value).__name__}")


@dataclass(frozen=True)
class PinFields:
    """The fields carried by a decoded PIN (check digit excluded)."""
    birthdate: date
    serial_band: int
    sex_digit: int

    @property
    def birth_number(self) -> int:
        """Three-digit number formed by digits 9-11."""
        return self.serial_band * 10 + self.sex_digit

    @property
    def is_male(self) -> bool:
        return self.sex_digit % 2 == 1

    @property
    def sex(self) -> Sex:
        return Sex.MALE if self.is_male else Sex.FEMALE

    @property
    def is_non_personal(self) -> bool:
        return NON_PERSONAL_MIN <= self.birth_number <= NON_PERSONAL_MAX

    def as_tuple(self) -> Tuple[date, int, int]:
        return (self.birthdate, self.serial_band, self.sex_digit)


@dataclass
class PinBatch:
    """Output of generate/anonymize.

    The `non_personal` marker lets downstream code filter or audit
    fabricated numbers.
    """
    pins: List[str] = field(default_factory=list)
    non_personal: bool = True

    def __len__(self) -> int:
        return len(self.pins)

    def __iter__(self) -> Iterator[str]:
        return iter(self.pins)

    def __getitem__(self, index):
        return self.pins[index]

    def fields(self) -> List[PinFields]:
        """Decode every PIN in the batch."""
        from .engine.codec import decode
        return [decode(p) for p in self.pins]

    def male_fraction(self) -> float:
        """Fraction of PINs encoding a male; 0.0 for an empty batch."""
        if not self.pins:
            return 0.0
        return sum(1 for p in self.pins if int(p[10]) % 2 == 1) / len(self.pins)
