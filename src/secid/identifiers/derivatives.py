"""OCC option symbols (OSI format).

Layout: underlying root padded with spaces to six characters, expiry as
YYMMDD, ``C`` or ``P``, and the strike in thousandths (mills) as eight digits::

    AAPL  210917C00150000   AAPL call, 2021-09-17, strike 150.000
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from .base import BaseIdentifier

_STRIKE_MILLS = re.compile(r"[0-9]{8}")


class OCC(BaseIdentifier):
    """Options Clearing Corporation option symbol."""

    key = "occ"
    full_name = "OCC Option Symbol"
    id_length = range(16, 22)
    example = "AAPL  210917C00150000"
    charset = re.compile(r"[A-Z0-9 ]+")
    id_pattern = re.compile(
        r"(?P<identifier>"
        r"(?P<initial>(?P<underlying>[0-9]?[A-Z]{1,5}[0-9]?)(?P<padding> *))"
        r"(?P<date>[0-9]{6})"
        r"(?P<option_type>[CP])"
        r"(?P<strike_mills>[0-9]{8}))"
    )

    underlying: str | None
    date_str: str | None
    option_type: str | None
    strike_mills: str | None

    def _assign(self, parts: dict[str, str | None]) -> None:
        self.initial = parts.get("initial")
        self.underlying = parts.get("underlying")
        self.date_str = parts.get("date")
        self.option_type = parts.get("option_type")
        self.strike_mills = parts.get("strike_mills")

    @property
    def expiry(self) -> date | None:
        """Expiration date, or None if absent or not a real calendar date."""
        if self.date_str is None:
            return None
        try:
            return datetime.strptime(self.date_str, "%y%m%d").date()
        except ValueError:
            return None

    @property
    def strike(self) -> Decimal | None:
        if self.strike_mills is None:
            return None
        return Decimal(int(self.strike_mills)) / 1000

    @property
    def is_call(self) -> bool:
        return self.option_type == "C"

    @property
    def is_put(self) -> bool:
        return self.option_type == "P"

    def is_valid(self) -> bool:
        return self.valid_format() and self.expiry is not None

    def _error_codes(self) -> list[str]:
        if not self.valid_format():
            return self._format_errors()
        if self.expiry is None:
            return ["invalid_date"]
        return []

    def _message(self, code: str) -> str:
        if code == "invalid_date":
            return f"Expiration date {self.date_str!r} is not a valid YYMMDD date"
        return super()._message(code)

    def __str__(self) -> str:
        if self.identifier is None:
            return ""
        return f"{self.underlying.ljust(6)}{self.date_str}{self.option_type}{self.strike_mills}"

    def components(self) -> dict[str, Any]:
        expiry = self.expiry
        return {
            "underlying": self.underlying,
            "expiry": expiry.isoformat() if expiry else None,
            "type": "call" if self.is_call else "put",
            "strike": str(self.strike),
        }

    @classmethod
    def build(
        cls,
        underlying: str,
        expiry: date | str,
        option_type: str,
        strike: int | float | Decimal | str,
    ) -> OCC:
        """
        Assemble a symbol from its parts.

        Args:
            underlying: Root symbol, e.g. "AAPL"
            expiry: Date or ISO date string
            option_type: "C" or "P"
            strike: Price (converted to mills) or an eight-digit mills string

        Raises:
            ValueError: strike is neither numeric nor eight digits
        """
        if isinstance(expiry, str):
            expiry = date.fromisoformat(expiry)

        if isinstance(strike, (int, float, Decimal)) and not isinstance(strike, bool):
            mills = int(Decimal(str(strike)) * 1000)
            strike_mills = f"{mills:08d}"
        elif isinstance(strike, str) and _STRIKE_MILLS.fullmatch(strike):
            strike_mills = strike
        else:
            raise ValueError("Strike must be numeric or an 8-digit mills string")

        symbol = f"{underlying.upper().ljust(6)}{expiry:%y%m%d}{option_type.upper()}{strike_mills}"
        return cls(symbol)
