"""
Shared test configuration for SecID.

Provides stub-descriptor factories for engine tests (so Detector/Scanner
behaviour can be checked without the real formats) and fixtures that reset
process-wide state: the default engine, cached settings, and handlers
installed on the ``secid`` logger.
"""

import logging
import re
from typing import Callable

import pytest

from secid.api import reset_engine
from secid.config import get_settings
from secid.descriptor import FormatDescriptor
from secid.identifiers import default_descriptors
from secid.registry import Registry


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# STATE RESET
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Each test starts with a fresh default engine, settings and logger."""
    reset_engine()
    get_settings.cache_clear()
    yield
    reset_engine()
    get_settings.cache_clear()
    package_logger = logging.getLogger("secid")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# =============================================================================
# DESCRIPTOR FACTORIES
# =============================================================================


def make_stub(
    key: str,
    length=6,
    charset: str = r"[A-Z0-9]+",
    has_check_digit: bool = False,
    validate: Callable[[str], bool] | None = None,
) -> FormatDescriptor:
    """
    Build a descriptor for engine tests.

    Args:
        key: Format key
        length: int, range, or inclusive (low, high) tuple
        charset: Whole-token regex
        has_check_digit: Ranking flag
        validate: Predicate (default: accept everything that reaches it)
    """
    if isinstance(length, tuple):
        length = range(length[0], length[1] + 1)
    return FormatDescriptor(
        key=key,
        length=length,
        charset=re.compile(charset),
        has_check_digit=has_check_digit,
        validate=validate or (lambda token: True),
    )


class CountingValidator:
    """Validator that records every token it is asked about."""

    def __init__(self, result: bool | Callable[[str], bool] = True):
        self.result = result
        self.calls: list[str] = []

    def __call__(self, token: str) -> bool:
        self.calls.append(token)
        if callable(self.result):
            return self.result(token)
        return self.result


@pytest.fixture
def stub_factory():
    """Fixture providing the make_stub factory function."""
    return make_stub


@pytest.fixture
def default_registry():
    """Fresh registry of the built-in formats."""
    return Registry(default_descriptors())


@pytest.fixture
def empty_registry():
    return Registry()
