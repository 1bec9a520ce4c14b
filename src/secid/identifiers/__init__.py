"""
Concrete identifier formats.

IDENTIFIER_CLASSES is in load order, which is the final tie-break when a
token matches more than one format.
"""

from __future__ import annotations

from ..descriptor import FormatDescriptor
from .banking import IBAN, LEI
from .base import BaseIdentifier, CheckDigitMixin, ValidationIssue, error_class_for
from .classification import CFI, FISN
from .derivatives import OCC
from .securities import CEI, CIK, CUSIP, FIGI, ISIN, SEDOL, WKN, Valoren

IDENTIFIER_CLASSES: tuple[type[BaseIdentifier], ...] = (
    ISIN,
    CUSIP,
    SEDOL,
    FIGI,
    LEI,
    IBAN,
    CIK,
    OCC,
    WKN,
    Valoren,
    CEI,
    CFI,
    FISN,
)


def default_descriptors() -> list[FormatDescriptor]:
    """Descriptors for every built-in format, in load order."""
    return [cls.descriptor() for cls in IDENTIFIER_CLASSES]


__all__ = [
    "BaseIdentifier",
    "CheckDigitMixin",
    "ValidationIssue",
    "error_class_for",
    "IDENTIFIER_CLASSES",
    "default_descriptors",
    "ISIN",
    "CUSIP",
    "SEDOL",
    "FIGI",
    "LEI",
    "IBAN",
    "CIK",
    "OCC",
    "WKN",
    "Valoren",
    "CEI",
    "CFI",
    "FISN",
]
