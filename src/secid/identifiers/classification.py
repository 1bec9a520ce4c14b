"""
Instrument classification and naming codes.

- CFI (ISO 10962): six letters; category and group must be known codes
- FISN (ISO 18774): ``ISSUER/DESCRIPTION`` short name
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping

from .base import BaseIdentifier

# =============================================================================
# CFI
# =============================================================================

CATEGORIES: Mapping[str, str] = MappingProxyType({
    "E": "equity",
    "C": "collective_investment_vehicles",
    "D": "debt_instruments",
    "R": "entitlements",
    "O": "listed_options",
    "F": "futures",
    "S": "swaps",
    "H": "non_listed_options",
    "I": "spot",
    "J": "forwards",
    "K": "strategies",
    "L": "financing",
    "T": "referential_instruments",
    "M": "miscellaneous",
})

GROUPS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "E": MappingProxyType({
        "S": "common_shares",
        "P": "preferred_shares",
        "C": "convertible_common_shares",
        "F": "convertible_preferred_shares",
        "L": "limited_partnership_units",
        "D": "depositary_receipts",
        "Y": "structured_instruments",
        "M": "miscellaneous",
    }),
    "C": MappingProxyType({
        "I": "standard_investment_funds",
        "H": "hedge_funds",
        "B": "real_estate_investment_trusts",
        "E": "exchange_traded_funds",
        "S": "pension_funds",
        "F": "funds_of_funds",
        "P": "private_equity_funds",
        "M": "miscellaneous",
    }),
    "D": MappingProxyType({
        "B": "bonds",
        "C": "convertible_bonds",
        "W": "bonds_with_warrants",
        "T": "medium_term_notes",
        "Y": "money_market_instruments",
        "S": "structured_instruments",
        "E": "mortgage_backed_securities",
        "G": "asset_backed_securities",
        "A": "municipal_bonds",
        "N": "municipal_notes",
        "D": "depositary_receipts",
        "M": "miscellaneous",
    }),
    "R": MappingProxyType({
        "A": "allotment_rights",
        "S": "subscription_rights",
        "P": "purchase_rights",
        "W": "warrants",
        "F": "mini_future_certificates",
        "D": "depositary_receipts",
        "M": "miscellaneous",
    }),
    "O": MappingProxyType({"C": "call_options", "P": "put_options", "M": "miscellaneous"}),
    "F": MappingProxyType({
        "F": "financial_futures",
        "C": "commodities_futures",
        "M": "miscellaneous",
    }),
    "S": MappingProxyType({
        "R": "rates",
        "T": "commodities",
        "E": "equity",
        "C": "credit",
        "F": "foreign_exchange",
        "M": "miscellaneous",
    }),
    "H": MappingProxyType({"C": "call_options", "P": "put_options", "M": "miscellaneous"}),
    "I": MappingProxyType({"F": "foreign_exchange", "T": "commodities", "M": "miscellaneous"}),
    "J": MappingProxyType({
        "F": "foreign_exchange",
        "R": "rates",
        "T": "commodities",
        "E": "equity",
        "C": "credit",
        "M": "miscellaneous",
    }),
    "K": MappingProxyType({
        "R": "rates",
        "T": "commodities",
        "E": "equity",
        "C": "credit",
        "F": "foreign_exchange",
        "Y": "mixed",
        "M": "miscellaneous",
    }),
    "L": MappingProxyType({
        "S": "loan_lease",
        "R": "repurchase_agreements",
        "P": "securities_lending",
        "M": "miscellaneous",
    }),
    "T": MappingProxyType({
        "I": "currencies",
        "C": "commodities",
        "R": "interest_rates",
        "N": "indices",
        "B": "baskets",
        "D": "stock_dividends",
        "M": "miscellaneous",
    }),
    "M": MappingProxyType({"C": "combined_instruments", "M": "miscellaneous"}),
})


class CFI(BaseIdentifier):
    """
    Classification of Financial Instruments code.

    Positions 3-6 are attributes whose meaning depends on the category; the
    equity predicates below return False for any other category.
    """

    key = "cfi"
    full_name = "Classification of Financial Instruments"
    id_length = 6
    example = "ESVUFR"
    charset = re.compile(r"[A-Z]+")
    id_pattern = re.compile(
        r"(?P<identifier>(?P<category_code>[A-Z])(?P<group_code>[A-Z])"
        r"(?P<attr1>[A-Z])(?P<attr2>[A-Z])(?P<attr3>[A-Z])(?P<attr4>[A-Z]))"
    )

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.category_code = parts.get("category_code")
        self.group_code = parts.get("group_code")
        self.attr1 = parts.get("attr1")
        self.attr2 = parts.get("attr2")
        self.attr3 = parts.get("attr3")
        self.attr4 = parts.get("attr4")

    @property
    def category(self) -> str | None:
        return CATEGORIES.get(self.category_code) if self.category_code else None

    @property
    def group(self) -> str | None:
        if not self.category_code:
            return None
        return GROUPS.get(self.category_code, {}).get(self.group_code)

    def valid_format(self) -> bool:
        return self.identifier is not None and self.category is not None and self.group is not None

    def _format_errors(self) -> list[str]:
        if self.identifier is not None:
            if self.category is None:
                return ["invalid_category"]
            if self.group is None:
                return ["invalid_group"]
        return super()._format_errors()

    def _message(self, code: str) -> str:
        if code == "invalid_category":
            return f"Category code {self.category_code!r} is not a valid CFI category"
        if code == "invalid_group":
            return f"Group code {self.group_code!r} is not valid for category {self.category_code!r}"
        return super()._message(code)

    # Equity attributes

    @property
    def is_equity(self) -> bool:
        return self.category_code == "E"

    def _equity_attr(self, name: str, code: str) -> bool:
        return self.is_equity and getattr(self, name) == code

    @property
    def voting(self) -> bool:
        return self._equity_attr("attr1", "V")

    @property
    def non_voting(self) -> bool:
        return self._equity_attr("attr1", "N")

    @property
    def restricted_voting(self) -> bool:
        return self._equity_attr("attr1", "R")

    @property
    def enhanced_voting(self) -> bool:
        return self._equity_attr("attr1", "E")

    @property
    def restrictions(self) -> bool:
        return self._equity_attr("attr2", "T")

    @property
    def no_restrictions(self) -> bool:
        return self._equity_attr("attr2", "U")

    @property
    def fully_paid(self) -> bool:
        return self._equity_attr("attr3", "F")

    @property
    def nil_paid(self) -> bool:
        return self._equity_attr("attr3", "O")

    @property
    def partly_paid(self) -> bool:
        return self._equity_attr("attr3", "P")

    @property
    def bearer(self) -> bool:
        return self._equity_attr("attr4", "B")

    @property
    def registered(self) -> bool:
        return self._equity_attr("attr4", "R")

    def components(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "group": self.group,
            "attributes": [self.attr1, self.attr2, self.attr3, self.attr4],
        }


# =============================================================================
# FISN
# =============================================================================


class FISN(BaseIdentifier):
    """Financial Instrument Short Name."""

    key = "fisn"
    full_name = "Financial Instrument Short Name"
    id_length = range(3, 36)
    example = "APPLE INC/SH"
    charset = re.compile(r"[A-Z0-9 /]+")
    id_pattern = re.compile(
        r"(?P<identifier>(?P<issuer>[A-Z0-9 ]{1,15})/(?P<description>[A-Z0-9 ]{1,19}))"
    )

    # Spaces are part of the name; only hyphens are dropped by normalize()
    separators = re.compile(r"-")

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.issuer = parts.get("issuer")
        self.description = parts.get("description")

    def components(self) -> dict[str, Any]:
        return {"issuer": self.issuer, "description": self.description}
