"""
Module-level convenience API over a shared default engine.

The default engine (registry, detector, scanner) is built on first use from
the built-in formats. Code that needs an isolated set of formats should
construct its own Registry, Detector and Scanner instead.

Usage:
    import secid

    secid.detect("037833100")          # ['cusip', 'valoren', 'cik']
    secid.parse("US5949181045")        # ISIN('US5949181045')
    secid.extract("Buy US5949181045")  # [Match(type='isin', ...)]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Literal

from .descriptor import FormatDescriptor
from .detector import Detector
from .exceptions import AmbiguousMatchError, InvalidFormatError, UnknownTypeError
from .identifiers import IDENTIFIER_CLASSES, BaseIdentifier, default_descriptors
from .registry import Registry
from .scanner import Match, Scanner

logger = logging.getLogger(__name__)

AmbiguityMode = Literal["first", "raise", "all"]
_AMBIGUITY_MODES = ("first", "raise", "all")


@dataclass(frozen=True)
class Engine:
    """A registry together with the detector and scanner built on it."""

    registry: Registry
    detector: Detector
    scanner: Scanner

    @classmethod
    def create(cls, descriptors: Iterable[FormatDescriptor] | None = None) -> Engine:
        registry = Registry(default_descriptors() if descriptors is None else descriptors)
        detector = Detector(registry)
        return cls(registry=registry, detector=detector, scanner=Scanner(registry, detector))


_engine: Engine | None = None
_engine_lock = threading.Lock()


def get_engine() -> Engine:
    """Shared engine over the built-in formats, built on first use."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = Engine.create()
                logger.debug("Default engine created with %d formats", len(_engine.registry))
    return _engine


def reset_engine() -> None:
    """Drop the shared engine (formats registered at runtime are lost)."""
    global _engine
    with _engine_lock:
        _engine = None


# =============================================================================
# DETECTION
# =============================================================================


def detect(token: Any) -> list[str]:
    """Every format key accepting ``token``, most specific first."""
    return get_engine().detector.detect(token)


def valid(token: Any, types: Iterable[str] | str | None = None) -> bool:
    """True if ``token`` is a valid identifier of any of ``types`` (default: any)."""
    return get_engine().detector.valid(token, types)


def scan(text: Any, types: Iterable[str] | str | None = None) -> Iterator[Match]:
    return get_engine().scanner.scan(text, types)


def extract(text: Any, types: Iterable[str] | str | None = None) -> list[Match]:
    return get_engine().scanner.extract(text, types)


# =============================================================================
# PARSING
# =============================================================================


def parse(
    token: Any,
    types: Iterable[str] | str | None = None,
    on_ambiguous: AmbiguityMode = "first",
) -> BaseIdentifier | list[BaseIdentifier] | None:
    """
    Parse ``token`` into an identifier instance.

    Args:
        token: Candidate identifier
        types: Restrict to these format keys
        on_ambiguous: "first" returns the most specific match (or None),
            "raise" raises AmbiguousMatchError when several formats match,
            "all" returns every match as a list

    Raises:
        ValueError: unknown ``on_ambiguous`` mode
        UnknownTypeError: ``types`` names an unregistered format
    """
    if on_ambiguous not in _AMBIGUITY_MODES:
        raise ValueError(
            f"Unknown on_ambiguous mode: {on_ambiguous!r} (expected one of {', '.join(_AMBIGUITY_MODES)})"
        )

    engine = get_engine()
    tables = engine.detector.tables
    allowed = tables.resolve_types(types)
    keys = [key for key in engine.detector.detect(token) if allowed is None or key in allowed]
    normalized = str(token).strip().upper() if token is not None else ""

    if on_ambiguous == "all":
        return [tables.by_key[key].build(normalized) for key in keys]
    if not keys:
        return None
    if on_ambiguous == "raise" and len(keys) > 1:
        raise AmbiguousMatchError(normalized, keys)
    return tables.by_key[keys[0]].build(normalized)


def parse_strict(
    token: Any,
    types: Iterable[str] | str | None = None,
) -> BaseIdentifier:
    """Like parse(on_ambiguous="raise") but raises InvalidFormatError on no match."""
    result = parse(token, types, on_ambiguous="raise")
    if result is None:
        raise InvalidFormatError("No identifier type matches the input", code="invalid_format")
    return result


# =============================================================================
# REGISTRY ACCESS
# =============================================================================


def lookup(key: str) -> type[BaseIdentifier]:
    """Identifier class for a built-in format key."""
    normalized = str(key).lower()
    for cls in IDENTIFIER_CLASSES:
        if cls.key == normalized:
            return cls
    raise UnknownTypeError(normalized, known=[cls.key for cls in IDENTIFIER_CLASSES])


def identifier_types() -> list[type[BaseIdentifier]]:
    """Built-in identifier classes in load order."""
    return list(IDENTIFIER_CLASSES)


def register(descriptor: FormatDescriptor) -> FormatDescriptor:
    """Add a format to the shared engine's registry."""
    return get_engine().registry.register(descriptor)
