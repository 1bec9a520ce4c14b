"""BBAN rules per country for IBAN validation.

COUNTRY_RULES covers EU/EEA and a few neighbours with a full structure:
BBAN length, BBAN format, and (start, length) slices for the national
components. LENGTH_ONLY_COUNTRIES only pins the BBAN length. Countries in
neither table are accepted on the IBAN checksum alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class CountryRule:
    """BBAN structure for one country."""

    length: int
    format: re.Pattern[str]
    components: Mapping[str, tuple[int, int]] = field(default_factory=dict)

    def extract(self, bban: str) -> dict[str, str]:
        return {name: bban[start:start + size] for name, (start, size) in self.components.items()}


def _r(length: int, fmt: str | None = None, **components: tuple[int, int]) -> CountryRule:
    """Shorthand for defining a rule; format defaults to all digits."""
    return CountryRule(
        length=length,
        format=re.compile(fmt if fmt is not None else rf"[0-9]{{{length}}}"),
        components=MappingProxyType(components),
    )


_FR_FORMAT = r"[0-9]{10}[A-Z0-9]{11}[0-9]{2}"
_IT_FORMAT = r"[A-Z][0-9]{10}[A-Z0-9]{12}"
_BANK4_DIGITS14 = r"[A-Z]{4}[0-9]{14}"

COUNTRY_RULES: Mapping[str, CountryRule] = MappingProxyType({
    "AT": _r(16, bank_code=(0, 5), account_number=(5, 11)),
    "BE": _r(12, bank_code=(0, 3), account_number=(3, 7), national_check=(10, 2)),
    "BG": _r(18, _BANK4_DIGITS14, bank_code=(0, 4), branch_code=(4, 4), account_number=(10, 8)),
    "HR": _r(17, bank_code=(0, 7), account_number=(7, 10)),
    "CY": _r(24, r"[0-9]{8}[A-Z0-9]{16}", bank_code=(0, 3), branch_code=(3, 5), account_number=(8, 16)),
    "CZ": _r(20, bank_code=(0, 4), account_number=(4, 16)),
    "DK": _r(14, bank_code=(0, 4), account_number=(4, 10)),
    "EE": _r(16, bank_code=(0, 2), account_number=(2, 14)),
    "FI": _r(14, bank_code=(0, 3), account_number=(3, 11)),
    "FR": _r(23, _FR_FORMAT, bank_code=(0, 5), branch_code=(5, 5), account_number=(10, 11),
             national_check=(21, 2)),
    "DE": _r(18, bank_code=(0, 8), account_number=(8, 10)),
    "GR": _r(23, bank_code=(0, 3), branch_code=(3, 4), account_number=(7, 16)),
    "HU": _r(24, bank_code=(0, 3), branch_code=(3, 4), account_number=(7, 16), national_check=(23, 1)),
    "IS": _r(22, bank_code=(0, 4), branch_code=(4, 2), account_number=(6, 6)),
    "IE": _r(18, _BANK4_DIGITS14, bank_code=(0, 4), branch_code=(4, 6), account_number=(10, 8)),
    "IT": _r(23, _IT_FORMAT, national_check=(0, 1), bank_code=(1, 5), branch_code=(6, 5),
             account_number=(11, 12)),
    "LV": _r(17, r"[A-Z]{4}[A-Z0-9]{13}", bank_code=(0, 4), account_number=(4, 13)),
    "LI": _r(17, r"[0-9]{5}[A-Z0-9]{12}", bank_code=(0, 5), account_number=(5, 12)),
    "LT": _r(16, bank_code=(0, 5), account_number=(5, 11)),
    "LU": _r(16, r"[0-9]{3}[A-Z0-9]{13}", bank_code=(0, 3), account_number=(3, 13)),
    "MT": _r(27, r"[A-Z]{4}[0-9]{5}[A-Z0-9]{18}", bank_code=(0, 4), branch_code=(4, 5),
             account_number=(9, 18)),
    "MC": _r(23, _FR_FORMAT, bank_code=(0, 5), branch_code=(5, 5), account_number=(10, 11),
             national_check=(21, 2)),
    "NL": _r(14, r"[A-Z]{4}[0-9]{10}", bank_code=(0, 4), account_number=(4, 10)),
    "NO": _r(11, bank_code=(0, 4), account_number=(4, 6), national_check=(10, 1)),
    "PL": _r(24, bank_code=(0, 3), branch_code=(3, 4), national_check=(7, 1), account_number=(8, 16)),
    "PT": _r(21, bank_code=(0, 4), branch_code=(4, 4), account_number=(8, 11), national_check=(19, 2)),
    "RO": _r(20, r"[A-Z]{4}[A-Z0-9]{16}", bank_code=(0, 4), account_number=(4, 16)),
    "SM": _r(23, _IT_FORMAT, national_check=(0, 1), bank_code=(1, 5), branch_code=(6, 5),
             account_number=(11, 12)),
    "SK": _r(20, bank_code=(0, 4), account_number=(4, 16)),
    "SI": _r(15, bank_code=(0, 5), account_number=(5, 8), national_check=(13, 2)),
    "ES": _r(20, bank_code=(0, 4), branch_code=(4, 4), national_check=(8, 2), account_number=(10, 10)),
    "SE": _r(20, bank_code=(0, 3), account_number=(3, 17)),
    "CH": _r(17, r"[0-9]{5}[A-Z0-9]{12}", bank_code=(0, 5), account_number=(5, 12)),
    "GB": _r(18, _BANK4_DIGITS14, bank_code=(0, 4), branch_code=(4, 6), account_number=(10, 8)),
})

LENGTH_ONLY_COUNTRIES: Mapping[str, int] = MappingProxyType({
    "AD": 20,  # Andorra
    "AE": 19,  # UAE
    "AL": 24,  # Albania
    "AZ": 24,  # Azerbaijan
    "BA": 16,  # Bosnia and Herzegovina
    "BY": 24,  # Belarus
    "DO": 24,  # Dominican Republic
    "EG": 25,  # Egypt
    "GE": 18,  # Georgia
    "GI": 19,  # Gibraltar
    "GT": 24,  # Guatemala
    "IL": 19,  # Israel
    "IQ": 19,  # Iraq
    "JO": 26,  # Jordan
    "KW": 26,  # Kuwait
    "KZ": 16,  # Kazakhstan
    "LB": 24,  # Lebanon
    "LC": 28,  # Saint Lucia
    "MD": 20,  # Moldova
    "ME": 18,  # Montenegro
    "MK": 15,  # North Macedonia
    "MR": 23,  # Mauritania
    "MU": 26,  # Mauritius
    "PS": 25,  # Palestine
    "QA": 25,  # Qatar
    "RS": 18,  # Serbia
    "SA": 20,  # Saudi Arabia
    "SC": 27,  # Seychelles
    "ST": 21,  # Sao Tome and Principe
    "SV": 24,  # El Salvador
    "TL": 19,  # Timor-Leste
    "TN": 20,  # Tunisia
    "TR": 22,  # Turkey
    "UA": 25,  # Ukraine
    "VA": 18,  # Vatican City
    "VG": 20,  # British Virgin Islands
    "XK": 16,  # Kosovo
})


def expected_bban_length(country_code: str | None) -> int | None:
    rule = COUNTRY_RULES.get(country_code) if country_code else None
    if rule is not None:
        return rule.length
    return LENGTH_ONLY_COUNTRIES.get(country_code) if country_code else None


def supported_countries() -> list[str]:
    return sorted({*COUNTRY_RULES, *LENGTH_ONLY_COUNTRIES})
