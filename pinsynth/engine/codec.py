"""PIN encoding and decoding.

Only the canonical 12-digit form is handled here:

    YYYYMMDDBBSC      e.g. 198112189876
    YYYYMMDD-BBSC     same, with a separator before the birth number

B = serial band, S = sex digit (odd = male), C = Luhn check digit.
"""

import re
from datetime import date
from typing import Tuple, Union

from ..errors import DecodingError, EncodingError
from ..types import PinFields
from . import checksum

MIN_YEAR = 1000
MAX_YEAR = 9999

_PIN_PATTERN = re.compile(r'^(\d{8})-?(\d{4})$', re.ASCII)


def encode(birthdate: date, serial_band: int, sex_digit: int) -> str:
    """Build a 12-digit PIN, appending the check digit."""
    if not MIN_YEAR <= birthdate.year <= MAX_YEAR:
        raise EncodingError(f"Birthdate {birthdate} cannot be written as YYYYMMDD")
    if not 0 <= serial_band <= 99:
        raise EncodingError(f"Serial band must be in [0, 99], got {serial_band}")
    if not 0 <= sex_digit <= 9:
        raise EncodingError(f"Sex digit must be in [0, 9], got {sex_digit}")

    body = f"{birthdate:%Y%m%d}{serial_band:02d}{sex_digit}"
    return body + str(checksum.compute([int(c) for c in body]))


def normalize(pin: Union[str, int]) -> str:
    """Canonical 12-digit string for a PIN given as str or int."""
    if isinstance(pin, bool):
        raise DecodingError(f"Not a PIN: {pin!r}")
    if isinstance(pin, int):
        if not 0 <= pin <= 999_999_999_999:
            raise DecodingError(f"Integer PIN must have 12 digits: {pin}")
        pin = f"{pin:012d}"
    if not isinstance(pin, str):
        raise DecodingError(f"PIN must be str or int, got {type(pin).__name__}")

    match = _PIN_PATTERN.match(pin.strip())
    if not match:
        raise DecodingError(f"Not a 12-digit PIN: {pin!r}")
    return match.group(1) + match.group(2)


def decode(pin: Union[str, int]) -> PinFields:
    """Decode a PIN into its fields, validating date and checksum."""
    digits = normalize(pin)

    try:
        birthdate = date(int(digits[0:4]), int(digits[4:6]), int(digits[6:8]))
    except ValueError as e:
        raise DecodingError(f"Invalid birthdate in PIN {digits}: {e}") from e

    if not checksum.verify(digits):
        raise DecodingError(f"Checksum mismatch in PIN {digits}")

    return PinFields(
        birthdate=birthdate,
        serial_band=int(digits[8:10]),
        sex_digit=int(digits[10]),
    )


def decode_fields(pin: Union[str, int]) -> Tuple[date, int, int]:
    """(birthdate, serial_band, sex_digit), the argument order of encode()."""
    return decode(pin).as_tuple()


def is_non_personal(pin: Union[str, int]) -> bool:
    """True for a valid PIN whose birth number lies in [880, 999]."""
    try:
        return decode(pin).is_non_personal
    except DecodingError:
        return False
