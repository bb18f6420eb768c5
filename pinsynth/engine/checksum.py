"""
Luhn check digit for 12-digit PINs.

The check digit is computed over digits 1-11, but the two century digits
carry weight zero. The Luhn sum therefore runs over YYMMDDNNN exactly as on
the 10-digit form, so a 12-digit PIN and its 10-digit rendering share the
same check digit.
"""

from typing import Sequence, Union

# Digits 1-2 (century) are skipped by the checksum
CENTURY_DIGITS = 2


def luhn_digit(digits: Sequence[int]) -> int:
    """
    Luhn check digit for a digit sequence.
    Doubles digits at odd 1-based positions counted from the left.
    """
    total = 0
    for i, d in enumerate(digits):
        if i % 2 == 0:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return (10 - total % 10) % 10


def compute(digits_1_to_11: Sequence[int]) -> int:
    """
    Check digit (digit 12) for the first eleven digits of a PIN.

    Unlike plain Luhn over all eleven digits, the century digits are left
    out. Real PINs are issued this way: 19121212-1212 checks out, while
    luhn_digit over all eleven digits would give 1.
    """
    if len(digits_1_to_11) != 11:
        raise ValueError(f"expected 11 digits, got {len(digits_1_to_11)}")
    return luhn_digit(digits_1_to_11[CENTURY_DIGITS:])


def verify(pin: Union[str, Sequence[int]]) -> bool:
    """True if digit 12 matches the recomputed check digit."""
    if isinstance(pin, str):
        if len(pin) != 12 or not (pin.isascii() and pin.isdigit()):
            return False
        digits = [int(c) for c in pin]
    else:
        digits = list(pin)
        if len(digits) != 12:
            return False
    return compute(digits[:11]) == digits[11]
