"""Ordered, append-only registry of format descriptors.

Registration order is load order, the final tie-break when a token matches
several formats. A registry only grows: existing entries are never replaced
or removed. Every successful ``register`` call publishes a new immutable
tuple and bumps ``generation``, which is how the Detector and Scanner notice
that their lookup tables are stale.

Usage::

    from secid.registry import Registry

    registry = Registry()
    registry.register(my_descriptor)
    registry["isin"]      # FormatDescriptor
    registry.generation   # 1
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator

from .descriptor import FormatDescriptor
from .exceptions import RegistrationError, UnknownTypeError
from .tables import SPECIAL_CHARS

logger = logging.getLogger(__name__)


class Registry:
    """Thread-safe collection of FormatDescriptor records.

    Readers never lock: ``descriptors`` returns whatever tuple is currently
    published. Writers serialize on an internal lock and validate the new
    descriptor before publishing, so a rejected registration leaves the
    registry untouched.
    """

    def __init__(self, descriptors: Iterable[FormatDescriptor] = ()):
        self._lock = threading.Lock()
        self._descriptors: tuple[FormatDescriptor, ...] = ()
        self._generation = 0
        for desc in descriptors:
            self.register(desc)

    @property
    def descriptors(self) -> tuple[FormatDescriptor, ...]:
        """Current snapshot in load order."""
        return self._descriptors

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> tuple[tuple[FormatDescriptor, ...], int]:
        """Descriptors and generation read together under the lock."""
        with self._lock:
            return self._descriptors, self._generation

    def register(self, desc: FormatDescriptor) -> FormatDescriptor:
        """Append ``desc`` after checking it against the current snapshot.

        Raises:
            RegistrationError: duplicate key, empty length range, or a charset
                that would make special-character dispatch ambiguous
        """
        with self._lock:
            _check_descriptor(desc, self._descriptors)
            self._descriptors = self._descriptors + (desc,)
            self._generation += 1
            generation = self._generation

        logger.debug("Registered format %r (generation %d)", desc.key, generation)
        return desc

    def keys(self) -> list[str]:
        return [d.key for d in self._descriptors]

    def get(self, key: str) -> FormatDescriptor | None:
        for desc in self._descriptors:
            if desc.key == key:
                return desc
        return None

    def __getitem__(self, key: str) -> FormatDescriptor:
        desc = self.get(key)
        if desc is None:
            raise UnknownTypeError(key, known=self.keys())
        return desc

    def __contains__(self, key: object) -> bool:
        return any(d.key == key for d in self._descriptors)

    def __iter__(self) -> Iterator[FormatDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"Registry(keys={self.keys()!r}, generation={self._generation})"


def _check_descriptor(
    desc: FormatDescriptor,
    existing: tuple[FormatDescriptor, ...],
) -> None:
    """Raise RegistrationError if ``desc`` cannot join ``existing``."""
    if not isinstance(desc, FormatDescriptor):
        raise RegistrationError(
            f"Expected a FormatDescriptor, got {type(desc).__name__}"
        )
    if not desc.key:
        raise RegistrationError("Format key must be a non-empty string")
    if not callable(desc.validate):
        raise RegistrationError("Format validate must be callable", key=desc.key)

    # Type filters match keys case-insensitively
    folded = desc.key.casefold()
    for other in existing:
        if other.key.casefold() == folded:
            raise RegistrationError(
                f"Format key {desc.key!r} already registered", key=desc.key
            )

    if isinstance(desc.length, range):
        if len(desc.length) == 0 or desc.length.step != 1:
            raise RegistrationError(
                f"Length range {desc.length!r} must be non-empty and contiguous",
                key=desc.key,
            )
        if desc.length.start < 1:
            raise RegistrationError("Lengths must be positive", key=desc.key)
    elif desc.length < 1:
        raise RegistrationError("Lengths must be positive", key=desc.key)

    # Stage-one dispatch picks one special-character class per token, so a
    # format may belong to at most one of them.
    special = any(desc.accepts_char(c) for c in SPECIAL_CHARS)
    structural = desc.accepts_char("/") or desc.accepts_char(" ")
    if special and structural:
        raise RegistrationError(
            "Charset may not accept both '*@#' and '/' or ' '",
            key=desc.key,
            details={"charset": desc.charset.pattern},
        )
