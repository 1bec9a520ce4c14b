"""
Single-token classification against every registered format.

detect() narrows the registry in three cheap stages before calling any
format's validate():

1. Special-character dispatch: '/' routes to slash-accepting formats, ' ' to
   space-accepting formats, '*@#' to formats accepting those characters.
2. Length lookup in a precomputed length -> formats table.
3. Charset pre-filter: the format's charset must match the whole token.

Survivors are validated and ranked most specific first:
(check-digit formats first, then narrower length ranges, then load order).
A typical token reaches validate() for one or two formats out of thirteen.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from .descriptor import FormatDescriptor
from .registry import Registry
from .tables import LookupTables

logger = logging.getLogger(__name__)


def normalize_token(token: Any) -> str:
    """Strip and upper-case a token; None becomes ''."""
    if token is None:
        return ""
    if not isinstance(token, str):
        token = str(token)
    return token.strip().upper()


class Detector:
    """
    Classifies tokens against a Registry.

    Lookup tables are derived from the registry and cached. The cache is keyed
    on the registry generation: when the registry grows, the next call builds
    a new LookupTables and swaps it in. Each call works from one local
    reference, so concurrent callers never see a partial rebuild.
    """

    def __init__(self, registry: Registry):
        self.registry = registry
        self._rebuild_lock = threading.Lock()
        self._tables = self._build_tables()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def detect(self, token: Any) -> list[str]:
        """
        Every format key accepting ``token``, most specific first.

        Args:
            token: Candidate identifier; None, blank and non-str values are
                accepted (non-str values go through str())

        Returns:
            Ordered list of type keys, empty when nothing matches
        """
        normalized = normalize_token(token)
        if not normalized:
            return []
        tables = self.tables
        return [d.key for d in self.matching(normalized, tables)]

    def valid(self, token: Any, types: Iterable[str] | str | None = None) -> bool:
        """True if ``token`` matches at least one of ``types`` (default: any)."""
        tables = self.tables
        allowed = tables.resolve_types(types)
        normalized = normalize_token(token)
        if not normalized:
            return False
        matches = self.matching(normalized, tables, allowed)
        return bool(matches)

    @property
    def tables(self) -> LookupTables:
        """Lookup tables for the current registry generation."""
        tables = self._tables
        if tables.generation != self.registry.generation:
            tables = self._refresh()
        return tables

    # -------------------------------------------------------------------------
    # Pruning (shared with the Scanner)
    # -------------------------------------------------------------------------

    def matching(
        self,
        token: str,
        tables: LookupTables,
        allowed: Iterable[str] | None = None,
        dispatch: bool = True,
    ) -> list[FormatDescriptor]:
        """
        Validated descriptors for an already-normalized token, ranked.

        Args:
            token: Stripped, upper-cased token
            tables: Snapshot to classify against
            allowed: Optional key restriction applied before validation
            dispatch: Apply special-character dispatch (the scanner does its
                own shape-based restriction and passes False)
        """
        keys = frozenset(allowed) if allowed is not None else None
        if dispatch:
            routed = tables.dispatch(token)
            if routed is not None:
                keys = routed if keys is None else keys & routed
        if keys is not None and not keys:
            return []

        survivors = [
            desc for desc in tables.candidates(token, keys)
            if self._safe_validate(desc, token)
        ]
        survivors.sort(key=tables.sort_key)
        return survivors

    def best_match(
        self,
        token: str,
        tables: LookupTables,
        allowed: Iterable[str] | None = None,
    ) -> FormatDescriptor | None:
        """Single best-ranked descriptor for ``token`` or None."""
        keys = frozenset(allowed) if allowed is not None else None
        if keys is not None and not keys:
            return None

        best: FormatDescriptor | None = None
        for desc in tables.candidates(token, keys):
            if best is not None and tables.sort_key(desc) > tables.sort_key(best):
                continue
            if self._safe_validate(desc, token):
                best = desc
        return best

    @staticmethod
    def _safe_validate(desc: FormatDescriptor, token: str) -> bool:
        """Run a format's validate(); any exception counts as no match."""
        try:
            return bool(desc.validate(token))
        except Exception:
            logger.warning(
                "Validator for %r raised on a %d-character token; treating as no match",
                desc.key,
                len(token),
                exc_info=True,
            )
            return False

    # -------------------------------------------------------------------------
    # Table cache
    # -------------------------------------------------------------------------

    def _build_tables(self) -> LookupTables:
        descriptors, generation = self.registry.snapshot()
        return LookupTables.build(descriptors, generation=generation)

    def _refresh(self) -> LookupTables:
        with self._rebuild_lock:
            tables = self._tables
            if tables.generation != self.registry.generation:
                tables = self._build_tables()
                self._tables = tables
                logger.debug("Detector tables rebuilt at generation %d", tables.generation)
            return tables

    def __repr__(self) -> str:
        return f"Detector(formats={len(self._tables.descriptors)}, generation={self._tables.generation})"
