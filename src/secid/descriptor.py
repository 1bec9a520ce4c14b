"""Immutable format descriptors consumed by the detection engine.

A descriptor is the only thing the Detector and Scanner know about a format:
its key, accepted lengths, character set, whether it carries a check digit,
and a total ``validate`` predicate. Descriptors are frozen dataclasses so they
can be shared across registries and threads.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FormatDescriptor:
    """Immutable, hashable description of one identifier format.

    ``charset`` must match a whole token (it is applied with ``fullmatch``).
    ``factory``, ``full_name`` and ``example`` are metadata; the engine only
    uses ``factory`` to build the parsed value attached to a scanner match.
    """

    key: str
    length: int | range
    charset: re.Pattern[str]
    has_check_digit: bool
    validate: Callable[[str], bool]
    factory: Callable[[str], Any] | None = None
    full_name: str | None = None
    example: str | None = None

    @property
    def lengths(self) -> range:
        """Accepted token lengths as a range."""
        if isinstance(self.length, range):
            return self.length
        return range(self.length, self.length + 1)

    @property
    def range_size(self) -> int:
        """Number of accepted lengths (1 for a fixed-length format)."""
        return len(self.lengths)

    def accepts_char(self, char: str) -> bool:
        """True if ``char`` on its own satisfies the charset."""
        return self.charset.fullmatch(char) is not None

    def build(self, token: str) -> Any:
        """Parsed value for ``token``; the token itself when no factory is set."""
        if self.factory is None:
            return token
        return self.factory(token)

    def __repr__(self) -> str:
        return (
            f"FormatDescriptor(key={self.key!r}, length={self.length!r}, "
            f"has_check_digit={self.has_check_digit})"
        )


def make_descriptor(
    key: str,
    length: int | tuple[int, int],
    charset: str,
    validate: Callable[[str], bool],
    has_check_digit: bool = False,
    factory: Callable[[str], Any] | None = None,
    full_name: str | None = None,
    example: str | None = None,
) -> FormatDescriptor:
    """Shorthand for defining a descriptor.

    ``length`` is an int or an inclusive ``(low, high)`` pair.
    """
    if isinstance(length, tuple):
        low, high = length
        length = range(low, high + 1)
    return FormatDescriptor(
        key=key,
        length=length,
        charset=re.compile(charset),
        has_check_digit=has_check_digit,
        validate=validate,
        factory=factory,
        full_name=full_name,
        example=example,
    )
