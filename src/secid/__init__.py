"""
SecID - financial identifier detection and extraction

This package provides:
- Identifier formats: ISIN, CUSIP, SEDOL, FIGI, LEI, IBAN, CIK, OCC, WKN,
  Valoren, CEI, CFI, FISN
- Detector: classify one token against every registered format
- Scanner: find identifiers in free text
- CLI: ``secid detect`` / ``secid scan``
"""

from secid.api import (
    Engine,
    detect,
    extract,
    get_engine,
    identifier_types,
    lookup,
    parse,
    parse_strict,
    register,
    reset_engine,
    scan,
    valid,
)
from secid.descriptor import FormatDescriptor, make_descriptor
from secid.detector import Detector
from secid.exceptions import (
    AmbiguousMatchError,
    ConfigurationError,
    InputTooLargeError,
    InvalidCheckDigitError,
    InvalidFormatError,
    InvalidStructureError,
    RegistrationError,
    SecIDError,
    UnknownTypeError,
)
from secid.identifiers import (
    CEI,
    CFI,
    CIK,
    CUSIP,
    FIGI,
    FISN,
    IBAN,
    ISIN,
    LEI,
    OCC,
    SEDOL,
    WKN,
    BaseIdentifier,
    Valoren,
)
from secid.registry import Registry
from secid.scanner import Match, Scanner

__version__ = "1.0.0"

__all__ = [
    # Convenience API
    "detect",
    "valid",
    "scan",
    "extract",
    "parse",
    "parse_strict",
    "lookup",
    "identifier_types",
    "register",
    "get_engine",
    "reset_engine",
    "Engine",
    # Engine
    "FormatDescriptor",
    "make_descriptor",
    "Registry",
    "Detector",
    "Scanner",
    "Match",
    # Formats
    "BaseIdentifier",
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
    # Exceptions
    "SecIDError",
    "RegistrationError",
    "UnknownTypeError",
    "InputTooLargeError",
    "AmbiguousMatchError",
    "ConfigurationError",
    "InvalidFormatError",
    "InvalidCheckDigitError",
    "InvalidStructureError",
]
