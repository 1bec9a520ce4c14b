"""
Free-text identifier extraction.

One composite regex proposes candidates left to right. Each candidate has one
of three shapes:

- slash:  ``ISSUER NAME/DESCRIPTION`` (the only grammar using '/')
- spaced: ``AAPL  210917C00150000`` (space-padded option symbols)
- simple: 1-41 characters of ``[A-Z0-9*@#-]``, hyphens ignored

Candidates are bounded by lookarounds so tokens embedded in longer
alphanumeric runs, URLs, e-mail addresses and currency amounts are skipped;
'_' counts as a boundary. A candidate that classifies is emitted and scanning
resumes after it; a candidate that does not resumes one character past its
start, so overlapping tokenizations are still tried.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .config import get_settings
from .detector import Detector
from .exceptions import InputTooLargeError
from .registry import Registry
from .tables import LookupTables

logger = logging.getLogger(__name__)

CANDIDATE_RE = re.compile(
    r"""
    (?<![A-Za-z0-9*@\#/.$])
    (?:
        (?P<slash>
            [A-Za-z0-9](?:[A-Za-z0-9\ ]{0,13}[A-Za-z0-9])?
            /
            [A-Za-z0-9](?:[A-Za-z0-9\ ]{0,17}[A-Za-z0-9])?
        )
        |
        (?P<spaced>[A-Za-z]{1,6}\ {1,5}[0-9]{6}[CcPp][0-9]{8})
        |
        (?P<simple>[A-Za-z0-9*@\#](?:[A-Za-z0-9*@\#-]{0,39}[A-Za-z0-9*@\#])?)
    )
    (?![A-Za-z0-9*@\#.])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Match:
    """
    One identifier found in text.

    Attributes:
        type: Format key of the best-ranked matching format
        raw: Text exactly as it appeared (hyphens and case preserved)
        range: Half-open character interval [start, end) into the text
        identifier: Parsed value built by the format (normalized str if none)
    """

    type: str
    raw: str
    range: range
    identifier: Any

    def __post_init__(self) -> None:
        if self.range.step != 1 or self.range.start < 0:
            raise ValueError(f"Invalid match range: {self.range!r}")
        if len(self.range) != len(self.raw):
            raise ValueError(
                f"Invalid match: raw length {len(self.raw)} != range length {len(self.range)}"
            )

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.stop

    def __len__(self) -> int:
        return len(self.range)

    def overlaps(self, other: Match) -> bool:
        return not (self.end <= other.start or other.end <= self.start)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type,
            "raw": self.raw,
            "start": self.start,
            "end": self.end,
            "normalized": str(self.identifier),
        }


class Scanner:
    """
    Finds identifiers in free text.

    Shares pruning and table caching with a Detector over the same registry.
    """

    def __init__(
        self,
        registry: Registry,
        detector: Detector | None = None,
        max_length: int | None = None,
    ):
        if detector is not None and detector.registry is not registry:
            raise ValueError("Detector must be built on the same registry")
        self.registry = registry
        self.detector = detector or Detector(registry)
        self._max_length = max_length

    @property
    def max_length(self) -> int | None:
        """Input length cap; falls back to settings when not set explicitly."""
        if self._max_length is not None:
            return self._max_length
        return get_settings().scanner.max_scan_length

    def scan(
        self,
        text: Any,
        types: Iterable[str] | str | None = None,
    ) -> Iterator[Match]:
        """
        Lazily yield matches in text order.

        Arguments are checked immediately; the text itself is only examined
        as the returned iterator is consumed.

        Raises:
            UnknownTypeError: ``types`` names an unregistered format
            InputTooLargeError: text is longer than ``max_length``
        """
        source = "" if text is None else str(text)
        limit = self.max_length
        if limit is not None and len(source) > limit:
            raise InputTooLargeError(len(source), limit)

        tables = self.detector.tables
        allowed = tables.resolve_types(types)
        return self._iter_matches(source, tables, allowed)

    def extract(
        self,
        text: Any,
        types: Iterable[str] | str | None = None,
    ) -> list[Match]:
        """All matches in text order."""
        return list(self.scan(text, types))

    def _iter_matches(
        self,
        text: str,
        tables: LookupTables,
        allowed: frozenset[str] | None,
    ) -> Iterator[Match]:
        slash_keys = tables.slash_types
        spaced_keys = tables.space_only_types
        simple_keys = tables.simple_types
        if allowed is not None:
            slash_keys &= allowed
            spaced_keys &= allowed
            simple_keys &= allowed

        pos = 0
        length = len(text)
        while pos < length:
            candidate = CANDIDATE_RE.search(text, pos)
            if candidate is None:
                return

            raw = candidate.group(0)
            if candidate.group("slash") is not None:
                token, keys = raw.upper(), slash_keys
            elif candidate.group("spaced") is not None:
                token, keys = raw.upper(), spaced_keys
            else:
                token, keys = raw.replace("-", "").upper(), simple_keys

            desc = self.detector.best_match(token, tables, keys) if token else None
            if desc is None:
                pos = candidate.start() + 1
                continue

            yield Match(
                type=desc.key,
                raw=raw,
                range=range(candidate.start(), candidate.end()),
                identifier=desc.build(token),
            )
            pos = candidate.end()

    def __repr__(self) -> str:
        return f"Scanner(detector={self.detector!r}, max_length={self._max_length!r})"
