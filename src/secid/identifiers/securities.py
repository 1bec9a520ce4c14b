"""
Security identifiers: ISIN, CUSIP, CEI, SEDOL, FIGI, WKN, Valoren, CIK.

Check-digit formats:
- ISIN: Luhn over the letter-expanded body (ISO 6166)
- CUSIP / CEI: double-add-double Luhn over single values
- SEDOL: weighted sum (1, 3, 1, 7, 3, 9)
- FIGI: indexed Luhn; some two-letter prefixes are reserved

Plain formats:
- WKN: six characters, no I or O
- Valoren: 5-9 digits, canonical form zero-padded to 9
- CIK: 1-10 digits, canonical form zero-padded to 10
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from ..checksum import (
    CHAR_TO_DIGIT,
    luhn_sum_double_add_double,
    luhn_sum_indexed,
    luhn_sum_standard,
    mod10,
    reversed_digits_multi,
    reversed_digits_single,
)
from ..exceptions import InvalidFormatError
from .base import BaseIdentifier, CheckDigitMixin, optional_int

# Countries whose ISINs embed a CUSIP (CUSIP Global Services area)
CGS_COUNTRY_CODES = frozenset({
    "US", "CA", "KY", "BM", "VI", "VG", "UM", "TT", "SR", "GS", "SX", "VC",
    "MF", "LC", "KN", "BL", "PR", "PH", "PW", "MP", "FM", "YT", "MH", "HT",
    "GY", "GU", "GD", "DM", "CW", "BQ", "BZ", "BS", "AW", "AG", "AI", "AS",
    "AN",
})

ALNUM = re.compile(r"[A-Z0-9]+")


# =============================================================================
# ISIN / CUSIP / CEI
# =============================================================================


class ISIN(CheckDigitMixin, BaseIdentifier):
    """International Securities Identification Number."""

    key = "isin"
    full_name = "International Securities Identification Number"
    id_length = 12
    example = "US5949181045"
    charset = ALNUM
    id_pattern = re.compile(
        r"(?P<identifier>(?P<country_code>[A-Z]{2})(?P<nsin>[A-Z0-9]{9}))(?P<check_digit>[0-9])?"
    )

    country_code: str | None
    nsin: str | None

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.country_code = parts.get("country_code")
        self.nsin = parts.get("nsin")
        self.check_digit = optional_int(parts.get("check_digit"))

    def calculate_check_digit(self) -> int:
        self._require_format()
        return mod10(luhn_sum_standard(reversed_digits_multi(self.identifier)))

    @property
    def is_cgs(self) -> bool:
        """True if the NSIN is a CUSIP."""
        return self.country_code in CGS_COUNTRY_CODES

    def to_cusip(self) -> CUSIP:
        if not self.is_cgs:
            raise InvalidFormatError(
                f"{self.country_code!r} is not a CGS country code",
                code="invalid_format",
                identifier_type=self.key,
            )
        return CUSIP(self.nsin)

    def components(self) -> dict[str, Any]:
        return {
            "country_code": self.country_code,
            "nsin": self.nsin,
            "check_digit": self.check_digit,
        }


class CUSIP(CheckDigitMixin, BaseIdentifier):
    """CUSIP (and CINS, when the first character is a letter)."""

    key = "cusip"
    full_name = "Committee on Uniform Securities Identification Procedures"
    id_length = 9
    example = "037833100"
    charset = re.compile(r"[A-Z0-9*@#]+")
    id_pattern = re.compile(
        r"(?P<identifier>(?P<cusip6>[A-Z0-9]{5}[A-Z0-9*@#])(?P<issue>[A-Z0-9*@#]{2}))"
        r"(?P<check_digit>[0-9])?"
    )

    cusip6: str | None
    issue: str | None

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.cusip6 = parts.get("cusip6")
        self.issue = parts.get("issue")
        self.check_digit = optional_int(parts.get("check_digit"))

    def calculate_check_digit(self) -> int:
        self._require_format()
        return mod10(luhn_sum_double_add_double(reversed_digits_single(self.identifier)))

    @property
    def is_cins(self) -> bool:
        """CUSIP International Numbering System issues start with a letter."""
        return bool(self.cusip6) and not self.cusip6[0].isdigit()

    def to_isin(self, country_code: str) -> ISIN:
        """ISIN for this CUSIP in a CGS country, check digits restored."""
        country_code = country_code.upper()
        if country_code not in CGS_COUNTRY_CODES:
            raise InvalidFormatError(
                f"{country_code!r} is not a CGS country code",
                code="invalid_format",
                identifier_type=self.key,
            )
        check_digit = self.check_digit
        if check_digit is None:
            check_digit = self.calculate_check_digit()
        isin = ISIN(f"{country_code}{self.identifier}{check_digit}")
        isin.restore()
        return isin

    def components(self) -> dict[str, Any]:
        return {
            "cusip6": self.cusip6,
            "issue": self.issue,
            "check_digit": self.check_digit,
            "cins": self.is_cins,
        }


class CEI(CheckDigitMixin, BaseIdentifier):
    """CUSIP Entity Identifier."""

    key = "cei"
    full_name = "CUSIP Entity Identifier"
    id_length = 10
    example = "A0BCDEFGH1"
    charset = ALNUM
    id_pattern = re.compile(
        r"(?P<identifier>(?P<prefix>[A-Z])(?P<numeric>[0-9])(?P<entity_id>[A-Z0-9]{7}))"
        r"(?P<check_digit>[0-9])?"
    )

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.prefix = parts.get("prefix")
        self.numeric = parts.get("numeric")
        self.entity_id = parts.get("entity_id")
        self.check_digit = optional_int(parts.get("check_digit"))

    def calculate_check_digit(self) -> int:
        self._require_format()
        return mod10(luhn_sum_double_add_double(reversed_digits_single(self.identifier)))

    def components(self) -> dict[str, Any]:
        return {
            "prefix": self.prefix,
            "numeric": self.numeric,
            "entity_id": self.entity_id,
            "check_digit": self.check_digit,
        }


# =============================================================================
# SEDOL / FIGI
# =============================================================================


class SEDOL(CheckDigitMixin, BaseIdentifier):
    """Stock Exchange Daily Official List code (London Stock Exchange)."""

    key = "sedol"
    full_name = "Stock Exchange Daily Official List"
    id_length = 7
    example = "B0YBKJ7"
    charset = ALNUM
    id_pattern = re.compile(r"(?P<identifier>[0-9BCDFGHJKLMNPQRSTVWXYZ]{6})(?P<check_digit>[0-9])?")

    CHARACTER_WEIGHTS: ClassVar[tuple[int, ...]] = (1, 3, 1, 7, 3, 9)

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.check_digit = optional_int(parts.get("check_digit"))

    def calculate_check_digit(self) -> int:
        self._require_format()
        total = sum(
            CHAR_TO_DIGIT[char] * weight
            for char, weight in zip(self.identifier, self.CHARACTER_WEIGHTS)
        )
        return mod10(total)


class FIGI(CheckDigitMixin, BaseIdentifier):
    """Financial Instrument Global Identifier (Bloomberg Open Symbology)."""

    key = "figi"
    full_name = "Financial Instrument Global Identifier"
    id_length = 12
    example = "BBG000BLNNH6"
    charset = ALNUM
    id_pattern = re.compile(
        r"(?P<identifier>(?P<prefix>[B-DF-HJ-NP-TV-Z0-9]{2})G(?P<random_part>[B-DF-HJ-NP-TV-Z0-9]{8}))"
        r"(?P<check_digit>[0-9])?"
    )

    # Prefixes that would collide with ISIN country codes
    RESTRICTED_PREFIXES: ClassVar[frozenset[str]] = frozenset(
        {"BS", "BM", "GG", "GB", "GH", "KY", "VG"}
    )

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.prefix = parts.get("prefix")
        self.random_part = parts.get("random_part")
        self.check_digit = optional_int(parts.get("check_digit"))

    def valid_format(self) -> bool:
        return self.identifier is not None and self.prefix not in self.RESTRICTED_PREFIXES

    def calculate_check_digit(self) -> int:
        self._require_format()
        return mod10(luhn_sum_indexed(reversed_digits_single(self.identifier)))

    def _format_errors(self) -> list[str]:
        if self.identifier is not None and self.prefix in self.RESTRICTED_PREFIXES:
            return ["invalid_prefix"]
        return super()._format_errors()

    def _message(self, code: str) -> str:
        if code == "invalid_prefix":
            return f"Prefix {self.prefix!r} is reserved and not used by FIGI"
        return super()._message(code)

    def components(self) -> dict[str, Any]:
        return {
            "prefix": self.prefix,
            "random_part": self.random_part,
            "check_digit": self.check_digit,
        }


# =============================================================================
# WKN / VALOREN / CIK
# =============================================================================


class WKN(BaseIdentifier):
    """German securities identification code."""

    key = "wkn"
    full_name = "Wertpapierkennnummer"
    id_length = 6
    example = "514000"
    charset = ALNUM
    id_pattern = re.compile(r"(?P<identifier>[0-9A-HJ-NP-Z]{6})")


class _PaddedNumber(BaseIdentifier):
    """Numeric identifier whose canonical form is left-padded with zeros."""

    padded_length: ClassVar[int]

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.padding = parts.get("padding")

    def __str__(self) -> str:
        if self.identifier is None:
            return ""
        return self.identifier.rjust(self.padded_length, "0")

    def components(self) -> dict[str, Any]:
        return {"number": int(self.identifier)} if self.identifier else {}


class Valoren(_PaddedNumber):
    """Swiss security number."""

    key = "valoren"
    full_name = "Valoren Number"
    id_length = range(5, 10)
    example = "3886335"
    charset = re.compile(r"[0-9]+")
    id_pattern = re.compile(r"(?=[0-9]{5,9}\Z)(?P<padding>0*)(?P<identifier>[1-9][0-9]{4,8})")
    padded_length = 9

    ISIN_COUNTRY_CODES: ClassVar[frozenset[str]] = frozenset({"CH", "LI"})

    def to_isin(self, country_code: str = "CH") -> ISIN:
        """ISIN for this valoren (Switzerland or Liechtenstein)."""
        country_code = country_code.upper()
        if country_code not in self.ISIN_COUNTRY_CODES:
            raise InvalidFormatError(
                f"{country_code!r} is not a valid Valoren country code",
                code="invalid_format",
                identifier_type=self.key,
            )
        isin = ISIN(country_code + self.normalized())
        isin.restore()
        return isin


class CIK(_PaddedNumber):
    """SEC Central Index Key."""

    key = "cik"
    full_name = "Central Index Key"
    id_length = range(1, 11)
    example = "0001521365"
    charset = re.compile(r"[0-9]+")
    id_pattern = re.compile(r"(?=[0-9]{1,10}\Z)(?P<padding>0*)(?P<identifier>[1-9][0-9]{0,9})")
    padded_length = 10
