"""
Tests for the format registry and the lookup tables derived from it.

Covers:
- Registration order and generation counting
- Rejection of invalid descriptors (registry left untouched)
- Candidate tables: by length, dispatch sets, shape sets, priority
"""

import re
import threading

import pytest

from secid.descriptor import FormatDescriptor, make_descriptor
from secid.exceptions import RegistrationError, UnknownTypeError
from secid.identifiers import default_descriptors
from secid.registry import Registry
from secid.tables import LookupTables

from conftest import make_stub


# =============================================================================
# DESCRIPTORS
# =============================================================================


class TestFormatDescriptor:
    """Test the descriptor record and its shorthand."""

    def test_fixed_length_as_range(self):
        """Test a fixed length exposes a one-element range."""
        desc = make_stub("x", length=6)
        assert desc.lengths == range(6, 7)
        assert desc.range_size == 1

    def test_length_range(self):
        """Test range_size counts accepted lengths."""
        desc = make_stub("x", length=(5, 9))
        assert desc.lengths == range(5, 10)
        assert desc.range_size == 5

    def test_make_descriptor_inclusive_tuple(self):
        """Test make_descriptor treats (low, high) as inclusive."""
        desc = make_descriptor("x", (1, 10), r"[0-9]+", validate=str.isdigit)
        assert desc.length == range(1, 11)
        assert desc.charset.pattern == r"[0-9]+"
        assert desc.has_check_digit is False

    def test_build_without_factory_returns_token(self):
        """Test build() falls back to the token itself."""
        assert make_stub("x").build("ABC123") == "ABC123"

    def test_build_with_factory(self):
        """Test build() delegates to the factory."""
        desc = make_descriptor("x", 3, r"[A-Z]+", validate=str.isalpha, factory=str.lower)
        assert desc.build("ABC") == "abc"

    def test_accepts_char(self):
        """Test single-character charset probing."""
        desc = make_stub("x", charset=r"[A-Z ]+")
        assert desc.accepts_char(" ")
        assert not desc.accepts_char("/")

    def test_descriptors_are_frozen(self):
        """Test descriptors cannot be mutated."""
        desc = make_stub("x")
        with pytest.raises(AttributeError):
            desc.key = "y"

    def test_repr_omits_callables(self):
        """Test repr shows key, length and check-digit flag."""
        assert repr(make_stub("x", length=6)) == (
            "FormatDescriptor(key='x', length=6, has_check_digit=False)"
        )


# =============================================================================
# REGISTRATION
# =============================================================================


class TestRegistration:
    """Test appending descriptors to a registry."""

    def test_empty_registry(self, empty_registry):
        """Test a new registry is empty at generation zero."""
        assert len(empty_registry) == 0
        assert empty_registry.generation == 0
        assert empty_registry.keys() == []

    def test_register_appends_in_order(self, empty_registry):
        """Test load order follows registration order."""
        empty_registry.register(make_stub("b"))
        empty_registry.register(make_stub("a"))
        assert empty_registry.keys() == ["b", "a"]

    def test_generation_increments(self, empty_registry):
        """Test each successful registration bumps the generation."""
        empty_registry.register(make_stub("a"))
        empty_registry.register(make_stub("b"))
        assert empty_registry.generation == 2

    def test_register_returns_descriptor(self, empty_registry):
        """Test register() hands back what it stored."""
        desc = make_stub("a")
        assert empty_registry.register(desc) is desc

    def test_constructor_registers_in_order(self):
        """Test the built-in load order."""
        registry = Registry(default_descriptors())
        assert registry.keys() == [
            "isin", "cusip", "sedol", "figi", "lei", "iban", "cik",
            "occ", "wkn", "valoren", "cei", "cfi", "fisn",
        ]
        assert registry.generation == 13

    def test_lookup(self, default_registry):
        """Test get, getitem and contains."""
        assert default_registry["isin"].key == "isin"
        assert default_registry.get("missing") is None
        assert "cusip" in default_registry
        assert "missing" not in default_registry

    def test_getitem_unknown_raises(self, default_registry):
        """Test unknown keys raise UnknownTypeError."""
        with pytest.raises(UnknownTypeError) as exc_info:
            default_registry["missing"]
        assert exc_info.value.key == "missing"
        assert "isin" in exc_info.value.known

    def test_iteration(self, default_registry):
        """Test iterating yields descriptors in load order."""
        assert [d.key for d in default_registry] == default_registry.keys()

    def test_snapshot_is_consistent(self, empty_registry):
        """Test snapshot() pairs descriptors with their generation."""
        empty_registry.register(make_stub("a"))
        descriptors, generation = empty_registry.snapshot()
        assert [d.key for d in descriptors] == ["a"]
        assert generation == 1

    def test_old_snapshot_unaffected_by_register(self, empty_registry):
        """Test published tuples are never mutated."""
        empty_registry.register(make_stub("a"))
        before = empty_registry.descriptors
        empty_registry.register(make_stub("b"))
        assert [d.key for d in before] == ["a"]

    def test_concurrent_registration(self, empty_registry):
        """Test concurrent writers neither lose nor duplicate entries."""
        def worker(prefix):
            for i in range(25):
                empty_registry.register(make_stub(f"{prefix}{i}"))

        threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(empty_registry) == 100
        assert empty_registry.generation == 100
        assert len(set(empty_registry.keys())) == 100


class TestRegistrationErrors:
    """Test invalid descriptors are rejected without side effects."""

    def test_duplicate_key(self, default_registry):
        """Test a duplicate key is rejected and nothing changes."""
        generation = default_registry.generation
        with pytest.raises(RegistrationError) as exc_info:
            default_registry.register(make_stub("isin"))
        assert exc_info.value.key == "isin"
        assert default_registry.generation == generation
        assert len(default_registry) == 13

    @pytest.mark.parametrize("key", ["ISIN", "Isin"])
    def test_duplicate_key_differing_in_case(self, default_registry, key):
        """Test keys that only differ in case collide."""
        with pytest.raises(RegistrationError, match="already registered"):
            default_registry.register(make_stub(key))
        assert len(default_registry) == 13

    def test_empty_length_range(self, empty_registry):
        """Test an empty length range is rejected."""
        with pytest.raises(RegistrationError, match="non-empty"):
            empty_registry.register(make_stub("x", length=range(5, 5)))

    def test_stepped_length_range(self, empty_registry):
        """Test a non-contiguous range is rejected."""
        with pytest.raises(RegistrationError):
            empty_registry.register(make_stub("x", length=range(2, 10, 2)))

    def test_zero_length(self, empty_registry):
        """Test lengths must be positive."""
        with pytest.raises(RegistrationError, match="positive"):
            empty_registry.register(make_stub("x", length=0))

    def test_empty_key(self, empty_registry):
        """Test the key must be non-empty."""
        with pytest.raises(RegistrationError):
            empty_registry.register(make_stub(""))

    def test_not_a_descriptor(self, empty_registry):
        """Test arbitrary objects are rejected."""
        with pytest.raises(RegistrationError, match="FormatDescriptor"):
            empty_registry.register({"key": "x"})

    def test_validate_not_callable(self, empty_registry):
        """Test validate must be callable."""
        desc = FormatDescriptor(
            key="x", length=3, charset=re.compile(r"[A-Z]+"),
            has_check_digit=False, validate=None,
        )
        with pytest.raises(RegistrationError, match="callable"):
            empty_registry.register(desc)

    @pytest.mark.parametrize("charset", [r"[A-Z*/]+", r"[A-Z@ ]+", r"[A-Z#/ ]+"])
    def test_special_and_structural_charset(self, empty_registry, charset):
        """Test a charset mixing '*@#' with '/' or ' ' is rejected."""
        with pytest.raises(RegistrationError, match="may not accept"):
            empty_registry.register(make_stub("x", charset=charset))
        assert len(empty_registry) == 0

    def test_registration_error_is_secid_error(self, empty_registry):
        """Test RegistrationError sits under the package base class."""
        from secid.exceptions import SecIDError

        with pytest.raises(SecIDError):
            empty_registry.register(make_stub("x", length=0))


# =============================================================================
# LOOKUP TABLES
# =============================================================================


class TestLookupTables:
    """Test tables built from the built-in formats."""

    @pytest.fixture
    def tables(self, default_registry):
        descriptors, generation = default_registry.snapshot()
        return LookupTables.build(descriptors, generation=generation)

    def test_generation_recorded(self, tables):
        """Test tables remember the generation they were built from."""
        assert tables.generation == 13

    def test_by_length_in_load_order(self, tables):
        """Test length buckets keep load order."""
        assert [d.key for d in tables.by_length[6]] == ["cik", "wkn", "valoren", "cfi", "fisn"]

    def test_by_length_covers_ranges(self, tables):
        """Test range formats appear under every accepted length."""
        assert "cik" in [d.key for d in tables.by_length[1]]
        assert "iban" in [d.key for d in tables.by_length[34]]
        assert 36 not in tables.by_length

    def test_slash_types(self, tables):
        """Test only FISN accepts '/'."""
        assert tables.slash_types == {"fisn"}

    def test_space_types(self, tables):
        """Test OCC and FISN accept ' '."""
        assert tables.space_types == {"occ", "fisn"}
        assert tables.space_only_types == {"occ"}

    def test_special_types(self, tables):
        """Test only CUSIP accepts '*@#'."""
        assert tables.special_types == {"cusip"}

    def test_simple_types(self, tables):
        """Test simple candidates exclude the slash and space-only formats."""
        assert "fisn" not in tables.simple_types
        assert "occ" not in tables.simple_types
        assert "isin" in tables.simple_types
        assert len(tables.simple_types) == 11

    def test_priority(self, tables):
        """Test priority is (check-digit rank, range size, load index)."""
        assert tables.priority["isin"] == (0, 1, 0)
        assert tables.priority["cik"] == (1, 10, 6)
        assert tables.priority["iban"] == (0, 20, 5)

    def test_dispatch(self, tables):
        """Test special-character routing."""
        assert tables.dispatch("APPLE INC/SH") == {"fisn"}
        assert tables.dispatch("AAPL  210917C00150000") == {"occ", "fisn"}
        assert tables.dispatch("12345*67") == {"cusip"}
        assert tables.dispatch("US5949181045") is None

    def test_candidates_apply_charset(self, tables):
        """Test the charset pre-filter removes non-matching formats."""
        keys = [d.key for d in tables.candidates("ESVUFR")]
        assert keys == ["wkn", "cfi", "fisn"]

    def test_candidates_with_filter(self, tables):
        """Test the key filter is applied before charset."""
        keys = [d.key for d in tables.candidates("514000", {"valoren"})]
        assert keys == ["valoren"]

    def test_candidates_unknown_length(self, tables):
        """Test lengths no format accepts give nothing."""
        assert tables.candidates("A" * 36) == []

    def test_resolve_types(self, tables):
        """Test type filters resolve to registered keys regardless of case."""
        assert tables.resolve_types(None) is None
        assert tables.resolve_types("ISIN") == {"isin"}
        assert tables.resolve_types(["isin", "Cusip"]) == {"isin", "cusip"}

    def test_resolve_types_mixed_case_key(self):
        """Test a key registered as 'MyFmt' resolves from any spelling."""
        tables = LookupTables.build([make_stub("MyFmt")])
        assert tables.resolve_types("MyFmt") == {"MyFmt"}
        assert tables.resolve_types(["myfmt", "MYFMT"]) == {"MyFmt"}

    def test_resolve_types_unknown(self, tables):
        """Test an unknown key raises even when mixed with known ones."""
        with pytest.raises(UnknownTypeError, match="'bogus'"):
            tables.resolve_types(["isin", "bogus"])

    def test_tables_are_read_only(self, tables):
        """Test mappings cannot be modified in place."""
        with pytest.raises(TypeError):
            tables.by_key["x"] = None
