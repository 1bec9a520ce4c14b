"""Lookup tables derived from a registry snapshot.

Tables are built in one go from a tuple of descriptors and never mutated.
When a registry grows, the Detector and Scanner build a fresh LookupTables
and replace their reference to it, so a reader holding the old object keeps
a complete, consistent view.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .descriptor import FormatDescriptor
from .exceptions import UnknownTypeError

logger = logging.getLogger(__name__)

SPECIAL_CHARS = "*@#"

PriorityKey = tuple[int, int, int]


@dataclass(frozen=True)
class LookupTables:
    """Candidate indexes and sort keys for one registry generation.

    Attributes:
        descriptors: All descriptors in load order
        by_key: Key to descriptor
        folded_keys: Case-folded key to registered key, for type filters
        by_length: Token length to candidate descriptors (load order)
        slash_types: Descriptors whose charset accepts '/'
        space_types: Descriptors whose charset accepts ' '
        space_only_types: Space-accepting descriptors that reject '/'
        special_types: Descriptors whose charset accepts any of '*@#'
        simple_types: Descriptors in neither the slash nor space-only set
        priority: Key to (check_digit_rank, range_size, load_index)
        generation: Registry generation the tables were built from
    """

    descriptors: tuple[FormatDescriptor, ...]
    by_key: Mapping[str, FormatDescriptor]
    folded_keys: Mapping[str, str]
    by_length: Mapping[int, tuple[FormatDescriptor, ...]]
    slash_types: frozenset[str]
    space_types: frozenset[str]
    space_only_types: frozenset[str]
    special_types: frozenset[str]
    simple_types: frozenset[str]
    priority: Mapping[str, PriorityKey]
    generation: int = 0

    @classmethod
    def build(
        cls,
        descriptors: Sequence[FormatDescriptor],
        generation: int = 0,
    ) -> LookupTables:
        """Derive every table from ``descriptors`` (load order preserved)."""
        snapshot = tuple(descriptors)

        by_length: dict[int, list[FormatDescriptor]] = {}
        for desc in snapshot:
            for length in desc.lengths:
                by_length.setdefault(length, []).append(desc)

        slash = frozenset(d.key for d in snapshot if d.accepts_char("/"))
        space = frozenset(d.key for d in snapshot if d.accepts_char(" "))
        space_only = space - slash
        special = frozenset(
            d.key for d in snapshot if any(d.accepts_char(c) for c in SPECIAL_CHARS)
        )
        simple = frozenset(d.key for d in snapshot) - slash - space_only

        priority = {
            desc.key: (0 if desc.has_check_digit else 1, desc.range_size, index)
            for index, desc in enumerate(snapshot)
        }

        logger.debug(
            "Built lookup tables for %d formats (generation %d)",
            len(snapshot),
            generation,
        )
        return cls(
            descriptors=snapshot,
            by_key=MappingProxyType({d.key: d for d in snapshot}),
            folded_keys=MappingProxyType({d.key.casefold(): d.key for d in snapshot}),
            by_length=MappingProxyType({k: tuple(v) for k, v in by_length.items()}),
            slash_types=slash,
            space_types=space,
            space_only_types=space_only,
            special_types=special,
            simple_types=simple,
            priority=MappingProxyType(priority),
            generation=generation,
        )

    def dispatch(self, token: str) -> frozenset[str] | None:
        """Restrict candidates by special characters, or None to allow all."""
        if "/" in token:
            return self.slash_types
        if " " in token:
            return self.space_types
        if any(c in token for c in SPECIAL_CHARS):
            return self.special_types
        return None

    def candidates(
        self,
        token: str,
        allowed: Iterable[str] | None = None,
    ) -> list[FormatDescriptor]:
        """Descriptors surviving length lookup, an optional key filter and charset."""
        by_length = self.by_length.get(len(token), ())
        if not by_length:
            return []
        allowed_keys = None if allowed is None else frozenset(allowed)
        return [
            desc
            for desc in by_length
            if (allowed_keys is None or desc.key in allowed_keys)
            and desc.charset.fullmatch(token) is not None
        ]

    def sort_key(self, desc: FormatDescriptor) -> PriorityKey:
        return self.priority[desc.key]

    def resolve_types(self, types: Iterable[str] | str | None) -> frozenset[str] | None:
        """Map a caller's type filter to registered keys, ignoring case.

        Returns None for "all types". Raises UnknownTypeError for any key that
        is not in this snapshot.
        """
        if types is None:
            return None
        if isinstance(types, str):
            types = [types]
        keys = set()
        for requested in types:
            name = str(requested)
            key = self.folded_keys.get(name.casefold())
            if key is None:
                raise UnknownTypeError(name, known=list(self.by_key))
            keys.add(key)
        return frozenset(keys)
