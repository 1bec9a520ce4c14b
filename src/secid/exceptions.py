"""
Exceptions raised by secid.

Classifying a token never raises: a token nothing recognizes simply yields an
empty result. The classes below report the other failures, which are a badly
configured registry, a bad argument from the caller, and a value rejected by
one of the strict parsing helpers.

    SecIDError
    ├── RegistrationError
    ├── UnknownTypeError
    ├── InputTooLargeError
    ├── AmbiguousMatchError
    ├── ConfigurationError
    └── InvalidFormatError
        ├── InvalidCheckDigitError
        └── InvalidStructureError

Errors that reject a caller's argument also subclass ValueError, so code
that already catches ValueError keeps working.
"""

from __future__ import annotations

from typing import Any


class SecIDError(Exception):
    """
    Root of the secid exception tree.

    ``message`` is the short description and ``context`` says what the
    caller was doing. ``details`` holds machine-readable facts such as type
    keys or lengths. str() joins all three.
    """

    def __init__(
        self,
        message: str,
        context: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.context = context
        self.details = dict(details) if details else {}
        super().__init__(self._render())

    def _render(self) -> str:
        text = self.message
        if self.context:
            text += f". Context: {self.context}"
        if self.details:
            pairs = ", ".join(f"{name}={value!r}" for name, value in self.details.items())
            text += f". Details: {pairs}"
        return text


def _merge(kwargs: dict[str, Any], **facts: Any) -> dict[str, Any]:
    """Pull ``details`` out of kwargs and add the non-empty ``facts`` to it."""
    details = dict(kwargs.pop("details", None) or {})
    details.update({name: value for name, value in facts.items() if value})
    return details


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


class RegistrationError(SecIDError):
    """A descriptor was rejected by Registry.register()."""

    def __init__(self, message: str, key: str | None = None, **kwargs: Any):
        super().__init__(message, details=_merge(kwargs, key=key), **kwargs)
        self.key = key


class UnknownTypeError(SecIDError, ValueError):
    """A type key given by the caller is not registered."""

    def __init__(self, key: str, known: list[str] | None = None, **kwargs: Any):
        super().__init__(
            f"Unknown identifier type: {key!r}",
            details=_merge(kwargs, known=known),
            **kwargs,
        )
        self.key = key
        self.known = list(known or [])


# -----------------------------------------------------------------------------
# Caller arguments
# -----------------------------------------------------------------------------


class InputTooLargeError(SecIDError, ValueError):
    """Text handed to the scanner is longer than ``max_scan_length``."""

    def __init__(self, length: int, limit: int, **kwargs: Any):
        details = _merge(kwargs)
        details.update(length=length, limit=limit)
        super().__init__(
            f"Input of {length} characters exceeds scan limit of {limit}",
            details=details,
            **kwargs,
        )
        self.length = length
        self.limit = limit


class AmbiguousMatchError(SecIDError):
    """parse(..., on_ambiguous="raise") found more than one type for a token."""

    def __init__(self, token: str, candidates: list[str], **kwargs: Any):
        details = _merge(kwargs)
        details["candidates"] = candidates
        super().__init__(
            f"Ambiguous identifier {token!r} matches {', '.join(candidates)}",
            details=details,
            **kwargs,
        )
        self.token = token
        self.candidates = candidates


class ConfigurationError(SecIDError):
    """SECID_* settings failed validation."""


# -----------------------------------------------------------------------------
# Identifier values
# -----------------------------------------------------------------------------


class InvalidFormatError(SecIDError, ValueError):
    """
    A value is not a well-formed identifier of the requested type.

    ``code`` is the issue code behind the failure (``"invalid_format"``,
    ``"invalid_check_digit"``, ``"invalid_bban"``...) and ``identifier_type``
    is the type key that was tried.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        identifier_type: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            details=_merge(kwargs, code=code, type=identifier_type),
            **kwargs,
        )
        self.code = code
        self.identifier_type = identifier_type


class InvalidCheckDigitError(InvalidFormatError):
    """Layout is correct but the check digit does not verify."""


class InvalidStructureError(InvalidFormatError):
    """A component breaks a structural rule (country, month, range)."""
