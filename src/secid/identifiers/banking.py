"""
Entity and account identifiers using ISO 7064 MOD 97-10 check digits.

- LEI: 18 alphanumerics followed by two check digits
- IBAN: country code, two check digits, then a country-specific BBAN
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from ..checksum import CHAR_TO_DIGIT, mod97
from . import iban_rules
from .base import BaseIdentifier, CheckDigitMixin, optional_int

_TWO_DIGITS = re.compile(r"[0-9]{2}")


def _numeric(value: str) -> str:
    """Replace letters by their two-digit values (A=10 ... Z=35)."""
    return "".join(str(CHAR_TO_DIGIT[char]) for char in value)


class LEI(CheckDigitMixin, BaseIdentifier):
    """Legal Entity Identifier (ISO 17442)."""

    key = "lei"
    full_name = "Legal Entity Identifier"
    id_length = 20
    example = "7LTWFZYICNSX8D621K86"
    charset = re.compile(r"[A-Z0-9]+")
    id_pattern = re.compile(
        r"(?P<identifier>(?P<lou_id>[0-9A-Z]{4})(?P<reserved>[0-9A-Z]{2})(?P<entity_id>[0-9A-Z]{12}))"
        r"(?P<check_digit>[0-9]{2})?"
    )
    check_digit_width = 2

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.lou_id = parts.get("lou_id")
        self.reserved = parts.get("reserved")
        self.entity_id = parts.get("entity_id")
        self.check_digit = optional_int(parts.get("check_digit"))

    def calculate_check_digit(self) -> int:
        self._require_format()
        return mod97(_numeric(self.identifier) + "00")

    def components(self) -> dict[str, Any]:
        return {
            "lou_id": self.lou_id,
            "reserved": self.reserved,
            "entity_id": self.entity_id,
            "check_digit": self.check_digit,
        }


class IBAN(CheckDigitMixin, BaseIdentifier):
    """
    International Bank Account Number (ISO 13616).

    ``identifier`` is the country code plus BBAN; the check digits are kept
    separately. BBANs are checked against ``iban_rules``: full structure for
    countries in COUNTRY_RULES, length only for LENGTH_ONLY_COUNTRIES, and
    nothing beyond the checksum for other countries.
    """

    key = "iban"
    full_name = "International Bank Account Number"
    id_length = range(15, 35)
    example = "GB29NWBK60161331926819"
    charset = re.compile(r"[A-Z0-9]+")
    id_pattern = re.compile(r"(?P<country_code>[A-Z]{2})(?P<rest>[A-Z0-9]{13,32})")
    check_digit_width = 2

    COMPONENT_NAMES: ClassVar[tuple[str, ...]] = (
        "bank_code",
        "branch_code",
        "account_number",
        "national_check",
    )

    country_code: str | None
    bban: str | None

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.country_code = parts.get("country_code")
        self.bban = None
        self.bank_code: str | None = None
        self.branch_code: str | None = None
        self.account_number: str | None = None
        self.national_check: str | None = None

        rest = parts.get("rest")
        if self.country_code is None or rest is None:
            return

        expected = iban_rules.expected_bban_length(self.country_code)
        if self._has_check_digits(rest, expected):
            self.check_digit = int(rest[:2])
            self.bban = rest[2:]
        else:
            self.check_digit = None
            self.bban = rest
        self.identifier = f"{self.country_code}{self.bban}"

        if self.valid_format():
            rule = self.country_rule
            if rule is not None:
                for name, value in rule.extract(self.bban).items():
                    setattr(self, name, value)

    @staticmethod
    def _has_check_digits(rest: str, expected: int | None) -> bool:
        if _TWO_DIGITS.fullmatch(rest[:2]) is None:
            return False
        if expected is None:
            return True
        return len(rest) == expected + 2 or len(rest) != expected

    @property
    def country_rule(self) -> iban_rules.CountryRule | None:
        return iban_rules.COUNTRY_RULES.get(self.country_code) if self.country_code else None

    @property
    def known_country(self) -> bool:
        return self.country_code in iban_rules.COUNTRY_RULES or (
            self.country_code in iban_rules.LENGTH_ONLY_COUNTRIES
        )

    def valid_bban_format(self) -> bool:
        if self.bban is None:
            return False
        rule = self.country_rule
        if rule is None:
            expected = iban_rules.LENGTH_ONLY_COUNTRIES.get(self.country_code)
            return expected is None or len(self.bban) == expected
        return len(self.bban) == rule.length and rule.format.fullmatch(self.bban) is not None

    def valid_format(self) -> bool:
        return self.identifier is not None and self.valid_bban_format()

    def calculate_check_digit(self) -> int:
        self._require_format()
        return mod97(_numeric(f"{self.bban}{self.country_code}00"))

    def _format_errors(self) -> list[str]:
        if self.identifier is not None and not self.valid_bban_format():
            return ["invalid_bban"]
        return super()._format_errors()

    def _message(self, code: str) -> str:
        if code == "invalid_bban":
            return f"BBAN format is invalid for country {self.country_code!r}"
        return super()._message(code)

    def __str__(self) -> str:
        if self.identifier is None:
            return ""
        if self.check_digit is None:
            return self.full_id
        return f"{self.country_code}{self.check_digit:02d}{self.bban}"

    def to_pretty(self) -> str | None:
        """Groups of four characters separated by spaces."""
        if not self.is_valid():
            return None
        value = str(self)
        return " ".join(value[i:i + 4] for i in range(0, len(value), 4))

    def components(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "country_code": self.country_code,
            "check_digit": self.check_digit,
            "bban": self.bban,
        }
        for name in self.COMPONENT_NAMES:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result

    @classmethod
    def supported_countries(cls) -> list[str]:
        return iban_rules.supported_countries()
