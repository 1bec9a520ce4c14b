"""
Base classes for the concrete identifier formats.

Each format is a class. Parsing happens in ``__init__`` and never raises: an
unparseable value simply produces an instance whose ``is_valid()`` is False
and whose ``errors()`` explain why. ``descriptor()`` turns a class into the
plain FormatDescriptor record the detection engine consumes.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from ..descriptor import FormatDescriptor
from ..exceptions import (
    InvalidCheckDigitError,
    InvalidFormatError,
    InvalidStructureError,
)

# Characters dropped by the normalize() and pretty() class helpers
SEPARATORS = re.compile(r"[\s-]")

ERROR_MAP: dict[str, type[InvalidFormatError]] = {
    "invalid_check_digit": InvalidCheckDigitError,
    "invalid_prefix": InvalidStructureError,
    "invalid_category": InvalidStructureError,
    "invalid_group": InvalidStructureError,
    "invalid_bban": InvalidStructureError,
    "invalid_date": InvalidStructureError,
}


def error_class_for(code: str) -> type[InvalidFormatError]:
    """Exception raised by validate() for a given issue code."""
    return ERROR_MAP.get(code, InvalidFormatError)


@dataclass(frozen=True)
class ValidationIssue:
    """One reason a value is not a valid identifier."""

    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class BaseIdentifier(ABC):
    """
    Parsed identifier value.

    Subclasses set the class metadata and ``id_pattern`` (a regex with an
    ``identifier`` group covering the value minus any check digit) and read
    their named groups in ``_assign``.

    Attributes:
        full_id: Input after stripping and upper-casing
        identifier: Body of the identifier, or None if parsing failed
    """

    key: ClassVar[str] = "base"
    full_name: ClassVar[str] = ""
    id_length: ClassVar[int | range] = 0
    example: ClassVar[str] = ""
    charset: ClassVar[re.Pattern[str]]
    id_pattern: ClassVar[re.Pattern[str]]
    has_check_digit: ClassVar[bool] = False
    check_digit_width: ClassVar[int] = 0
    separators: ClassVar[re.Pattern[str]] = SEPARATORS

    def __init__(self, value: Any):
        self.full_id = self._prepare(value)
        match = self.id_pattern.fullmatch(self.full_id)
        parts = match.groupdict() if match else {}
        self.identifier: str | None = parts.get("identifier")
        self._assign(parts)

    @staticmethod
    def _prepare(value: Any) -> str:
        return ("" if value is None else str(value)).strip().upper()

    def _assign(self, parts: dict[str, str | None]) -> None:
        """Copy named groups onto the instance."""

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def valid_format(self) -> bool:
        return self.identifier is not None

    def is_valid(self) -> bool:
        return self.valid_format()

    def errors(self) -> list[ValidationIssue]:
        """Reasons this value is invalid; empty when valid."""
        return [ValidationIssue(code, self._message(code)) for code in self._error_codes()]

    def validate(self) -> BaseIdentifier:
        """Return self, or raise the exception mapped from the first issue."""
        issues = self.errors()
        if not issues:
            return self
        first = issues[0]
        raise error_class_for(first.code)(
            first.message, code=first.code, identifier_type=self.key
        )

    def _error_codes(self) -> list[str]:
        if self.valid_format():
            return []
        return self._format_errors()

    def _format_errors(self) -> list[str]:
        if not self._valid_length():
            return ["invalid_length"]
        if self.charset.fullmatch(self.full_id) is None:
            return ["invalid_characters"]
        return ["invalid_format"]

    def _valid_length(self) -> bool:
        if not self.full_id:
            return False
        if isinstance(self.id_length, range):
            return len(self.full_id) in self.id_length
        low = self.id_length - self.check_digit_width
        return low <= len(self.full_id) <= self.id_length

    def _message(self, code: str) -> str:
        name = type(self).__name__
        if code == "invalid_length":
            return f"Expected {_describe_length(self.id_length)} characters, got {len(self.full_id)}"
        if code == "invalid_characters":
            return f"Contains invalid characters for {name}"
        return f"Does not match {name} format"

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def normalized(self) -> str:
        """Canonical string form; raises if invalid."""
        self.validate()
        return str(self)

    def to_pretty(self) -> str | None:
        """Display form, or None if invalid."""
        if not self.is_valid():
            return None
        return str(self)

    def components(self) -> dict[str, Any]:
        return {}

    def as_dict(self) -> dict[str, Any]:
        valid = self.is_valid()
        return {
            "type": self.key,
            "full_id": self.full_id,
            "normalized": str(self) if valid else None,
            "valid": valid,
            "components": self.components() if valid else {},
        }

    def __str__(self) -> str:
        return self.identifier or ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.full_id!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseIdentifier):
            return NotImplemented
        return self.key == other.key and str(self) == str(other)

    def __hash__(self) -> int:
        return hash((self.key, str(self)))

    # -------------------------------------------------------------------------
    # Class-level helpers
    # -------------------------------------------------------------------------

    @classmethod
    def is_valid_id(cls, value: Any) -> bool:
        """True if ``value`` is a valid identifier of this type."""
        return cls(value).is_valid()

    @classmethod
    def normalize(cls, value: Any) -> str:
        """Canonical form of ``value`` after dropping spaces and hyphens."""
        return cls(cls.separators.sub("", cls._prepare(value))).normalized()

    @classmethod
    def pretty(cls, value: Any) -> str | None:
        return cls(cls.separators.sub("", cls._prepare(value))).to_pretty()

    @classmethod
    def descriptor(cls) -> FormatDescriptor:
        """Engine-facing record for this format."""
        return FormatDescriptor(
            key=cls.key,
            length=cls.id_length,
            charset=cls.charset,
            has_check_digit=cls.has_check_digit,
            validate=cls.is_valid_id,
            factory=cls,
            full_name=cls.full_name,
            example=cls.example,
        )


class CheckDigitMixin(ABC):
    """
    Check-digit behaviour for formats that end in one or more check digits.

    Mix in before BaseIdentifier. Subclasses parse ``check_digit`` in
    ``_assign`` and implement ``calculate_check_digit``.
    """

    has_check_digit: ClassVar[bool] = True
    check_digit_width: ClassVar[int] = 1

    check_digit: int | None = None

    @abstractmethod
    def calculate_check_digit(self) -> int:
        """Check digit computed from the identifier body."""

    def is_valid(self) -> bool:
        return self.valid_format() and self.check_digit == self.calculate_check_digit()

    def restore(self) -> str:
        """Replace the check digit with the computed one and return the full value."""
        self.check_digit = self.calculate_check_digit()
        return str(self)

    def _error_codes(self) -> list[str]:
        if not self.valid_format():
            return self._format_errors()
        if self.check_digit != self.calculate_check_digit():
            return ["invalid_check_digit"]
        return []

    def _message(self, code: str) -> str:
        if code == "invalid_check_digit":
            given = "" if self.check_digit is None else self._render_check_digit(self.check_digit)
            expected = self._render_check_digit(self.calculate_check_digit())
            return f"Check digit '{given}' is invalid, expected '{expected}'"
        return super()._message(code)

    def _render_check_digit(self, value: int) -> str:
        return str(value).rjust(self.check_digit_width, "0")

    def _require_format(self) -> None:
        if not self.valid_format():
            raise InvalidFormatError(
                f"{type(self).__name__} {self.full_id!r} is invalid and check digit cannot be calculated",
                code="invalid_format",
                identifier_type=self.key,
            )

    def __str__(self) -> str:
        if self.identifier is None:
            return ""
        if self.check_digit is None:
            return self.identifier
        return f"{self.identifier}{self._render_check_digit(self.check_digit)}"

    @classmethod
    def restore_id(cls, value: Any) -> str:
        """Value with its check digit computed and appended (or replaced)."""
        return cls(value).restore()

    @classmethod
    def compute_check_digit(cls, value: Any) -> int:
        return cls(value).calculate_check_digit()


def _describe_length(length: int | range) -> str:
    if isinstance(length, range):
        return f"{length.start}-{length.stop - 1}"
    return str(length)


def optional_int(value: str | None) -> int | None:
    return int(value) if value is not None else None
