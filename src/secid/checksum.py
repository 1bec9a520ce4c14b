"""
Checksum arithmetic shared by the check-digit identifier formats.

Every function here is pure and operates on digit sequences that the caller
has already reversed (rightmost character first). Character conversion goes
through one of two lookup tables:

- CHAR_TO_DIGIT: one value per character ('A' -> 10, '*' -> 36)
- CHAR_TO_DIGITS: digits map to themselves, letters and '*@#' expand to a
  (tens, ones) pair ('A' -> (1, 0))

Algorithms:
- luhn_sum_double_add_double: CUSIP, CEI
- luhn_sum_indexed: FIGI
- luhn_sum_standard: ISIN
- mod97: LEI, IBAN (ISO 7064 MOD 97-10)

Passing a character that is not in the relevant table raises KeyError; that
is a programming error in the caller, never a data error.
"""

from __future__ import annotations

import string
from typing import Sequence

# =============================================================================
# CHARACTER TABLES
# =============================================================================

_SPECIAL_CHARS = "*@#"

CHAR_TO_DIGIT: dict[str, int] = {
    char: value
    for value, char in enumerate(string.digits + string.ascii_uppercase + _SPECIAL_CHARS)
}

CHAR_TO_DIGITS: dict[str, int | tuple[int, int]] = {
    char: (value if value < 10 else divmod(value, 10))
    for char, value in CHAR_TO_DIGIT.items()
}


def reversed_digits_single(value: str) -> list[int]:
    """Map each character to one value, rightmost first."""
    return [CHAR_TO_DIGIT[char] for char in reversed(value)]


def reversed_digits_multi(value: str) -> list[int]:
    """Expand each character to its decimal digits, rightmost digit first."""
    digits: list[int] = []
    for char in value:
        mapped = CHAR_TO_DIGITS[char]
        if isinstance(mapped, tuple):
            digits.extend(mapped)
        else:
            digits.append(mapped)
    digits.reverse()
    return digits


# =============================================================================
# REDUCTIONS
# =============================================================================


def mod10(total: int) -> int:
    """Check digit that brings ``total`` up to the next multiple of ten."""
    return (10 - total % 10) % 10


def div10mod10(number: int) -> int:
    """Sum of the tens and ones digits of a value below 100."""
    return number // 10 + number % 10


def mod97(numeric: str) -> int:
    """ISO 7064 MOD 97-10 check value for a string of decimal digits."""
    return 98 - int(numeric) % 97


# =============================================================================
# LUHN VARIANTS
# =============================================================================


def luhn_sum_double_add_double(digits: Sequence[int]) -> int:
    """
    Luhn sum where both members of each pair are digit-summed.

    Digits are consumed in (even, odd) pairs; the even member is doubled.
    Values can exceed 9 before doubling (single-digit table), so both
    members go through div10mod10.
    """
    total = 0
    for index in range(0, len(digits), 2):
        even = digits[index]
        odd = digits[index + 1] if index + 1 < len(digits) else 0
        total += div10mod10(even * 2) + div10mod10(odd)
    return total


def luhn_sum_indexed(digits: Sequence[int]) -> int:
    """Luhn sum doubling every odd-indexed value, each value digit-summed."""
    total = 0
    for index, digit in enumerate(digits):
        if index % 2 == 1:
            digit *= 2
        total += div10mod10(digit)
    return total


def luhn_sum_standard(digits: Sequence[int]) -> int:
    """Classic Luhn sum over single decimal digits (doubled values > 9 lose 9)."""
    total = 0
    for index in range(0, len(digits), 2):
        doubled = digits[index] * 2
        if doubled > 9:
            doubled -= 9
        odd = digits[index + 1] if index + 1 < len(digits) else 0
        total += doubled + odd
    return total
