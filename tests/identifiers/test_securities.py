"""
Tests for security identifiers: ISIN, CUSIP, CEI, SEDOL, FIGI, WKN, Valoren, CIK.

Real-world values:
- Microsoft: ISIN US5949181045, CUSIP 594918104
- Apple: ISIN US0378331005, CUSIP 037833100, FIGI BBG000B9XRY4
- Nestle: Valoren 3886335, ISIN CH0038863350
- BAE Systems: SEDOL 0263494
"""

import pytest

from secid.exceptions import (
    InvalidCheckDigitError,
    InvalidFormatError,
    InvalidStructureError,
)
from secid.identifiers import CEI, CIK, CUSIP, FIGI, ISIN, SEDOL, WKN, Valoren


# =============================================================================
# ISIN
# =============================================================================


class TestISIN:
    """Test ISIN parsing and check digits."""

    @pytest.mark.parametrize("value", [
        "US5949181045",
        "US0378331005",
        "CH0038863350",
        "us5949181045",
    ])
    def test_valid(self, value):
        assert ISIN.is_valid_id(value)

    def test_components(self):
        isin = ISIN("US5949181045")
        assert isin.country_code == "US"
        assert isin.nsin == "594918104"
        assert isin.check_digit == 5
        assert isin.components() == {
            "country_code": "US",
            "nsin": "594918104",
            "check_digit": 5,
        }

    def test_wrong_check_digit(self):
        isin = ISIN("US5949181046")
        assert not isin.is_valid()
        issue = isin.errors()[0]
        assert issue.code == "invalid_check_digit"
        assert issue.message == "Check digit '6' is invalid, expected '5'"

    def test_validate_raises_check_digit_error(self):
        with pytest.raises(InvalidCheckDigitError) as exc_info:
            ISIN("US5949181046").validate()
        assert exc_info.value.code == "invalid_check_digit"
        assert exc_info.value.identifier_type == "isin"

    def test_validate_returns_self(self):
        isin = ISIN("US5949181045")
        assert isin.validate() is isin

    def test_wrong_length(self):
        issue = ISIN("US59").errors()[0]
        assert issue.code == "invalid_length"
        assert issue.message == "Expected 12 characters, got 4"

    def test_invalid_characters(self):
        assert ISIN("US59491810-5").errors()[0].code == "invalid_characters"

    def test_invalid_structure(self):
        assert ISIN("1S5949181045").errors()[0].code == "invalid_format"

    def test_restore_missing_check_digit(self):
        assert ISIN.restore_id("US594918104") == "US5949181045"

    def test_restore_replaces_wrong_check_digit(self):
        assert ISIN.restore_id("US5949181049") == "US5949181045"

    def test_compute_check_digit(self):
        assert ISIN.compute_check_digit("US037833100") == 5

    def test_check_digit_of_invalid_value_raises(self):
        with pytest.raises(InvalidFormatError):
            ISIN.compute_check_digit("12")

    def test_normalize_drops_separators(self):
        assert ISIN.normalize("US-5949-1810-45") == "US5949181045"
        assert ISIN.normalize(" us 5949 1810 45 ") == "US5949181045"

    def test_normalize_invalid_raises(self):
        with pytest.raises(InvalidFormatError):
            ISIN.normalize("US5949181046")

    def test_pretty_invalid_is_none(self):
        assert ISIN.pretty("US5949181046") is None

    def test_to_cusip(self):
        assert ISIN("US5949181045").to_cusip() == CUSIP("594918104")

    def test_to_cusip_non_cgs_country(self):
        isin = ISIN("CH0038863350")
        assert not isin.is_cgs
        with pytest.raises(InvalidFormatError):
            isin.to_cusip()

    def test_equality_and_hash(self):
        assert ISIN("us5949181045") == ISIN("US5949181045")
        assert len({ISIN("US5949181045"), ISIN(" US5949181045 ")}) == 1
        assert ISIN("US5949181045") != CUSIP("594918104")

    def test_as_dict(self):
        data = ISIN("US5949181045").as_dict()
        assert data["type"] == "isin"
        assert data["valid"] is True
        assert data["normalized"] == "US5949181045"

    def test_as_dict_invalid(self):
        data = ISIN("garbage").as_dict()
        assert data["valid"] is False
        assert data["normalized"] is None
        assert data["components"] == {}

    def test_none_input(self):
        isin = ISIN(None)
        assert not isin.is_valid()
        assert str(isin) == ""
        assert isin.errors()[0].code == "invalid_length"

    def test_repr(self):
        assert repr(ISIN("us5949181045")) == "ISIN('US5949181045')"


# =============================================================================
# CUSIP / CEI
# =============================================================================


class TestCUSIP:
    """Test CUSIP parsing, CINS detection and ISIN conversion."""

    @pytest.mark.parametrize("value", ["037833100", "594918104", "023135106"])
    def test_valid(self, value):
        assert CUSIP.is_valid_id(value)

    def test_wrong_check_digit(self):
        assert not CUSIP.is_valid_id("037833105")

    def test_components(self):
        cusip = CUSIP("037833100")
        assert cusip.cusip6 == "037833"
        assert cusip.issue == "10"
        assert cusip.check_digit == 0
        assert not cusip.is_cins

    def test_restore(self):
        assert CUSIP.restore_id("03783310") == "037833100"

    def test_special_characters(self):
        """Test '*', '@' and '#' are accepted in the issuer and issue parts."""
        restored = CUSIP.restore_id("12345*67")
        assert restored[:8] == "12345*67"
        assert CUSIP.is_valid_id(restored)

    def test_cins(self):
        cusip = CUSIP(CUSIP.restore_id("G0052B10"))
        assert cusip.is_valid()
        assert cusip.is_cins

    def test_to_isin(self):
        isin = CUSIP("037833100").to_isin("us")
        assert isinstance(isin, ISIN)
        assert str(isin) == "US0378331005"
        assert isin.is_valid()

    def test_to_isin_without_check_digit(self):
        assert str(CUSIP("03783310").to_isin("US")) == "US0378331005"

    def test_to_isin_non_cgs_country(self):
        with pytest.raises(InvalidFormatError, match="CGS"):
            CUSIP("037833100").to_isin("GB")


class TestCEI:
    def test_valid(self):
        assert CEI.is_valid_id("A0BCDEFGH1")

    def test_wrong_check_digit(self):
        assert not CEI.is_valid_id("A0BCDEFGH2")

    def test_components(self):
        cei = CEI("A0BCDEFGH1")
        assert cei.components() == {
            "prefix": "A",
            "numeric": "0",
            "entity_id": "BCDEFGH",
            "check_digit": 1,
        }

    def test_structure(self):
        """Test the second character must be a digit."""
        assert CEI("AABCDEFGH1").errors()[0].code == "invalid_format"

    def test_restore(self):
        assert CEI.restore_id("A0BCDEFGH") == "A0BCDEFGH1"


# =============================================================================
# SEDOL / FIGI
# =============================================================================


class TestSEDOL:
    @pytest.mark.parametrize("value", ["B0YBKJ7", "0263494", "B19GKT4"])
    def test_valid(self, value):
        assert SEDOL.is_valid_id(value)

    def test_wrong_check_digit(self):
        assert SEDOL("B0YBKJ8").errors()[0].code == "invalid_check_digit"

    def test_vowels_rejected(self):
        """Test vowels never appear in a SEDOL."""
        assert SEDOL("A0YBKJ7").errors()[0].code == "invalid_format"

    def test_restore(self):
        assert SEDOL.restore_id("B0YBKJ") == "B0YBKJ7"


class TestFIGI:
    @pytest.mark.parametrize("value", ["BBG000BLNNH6", "BBG000H4FSM0"])
    def test_valid(self, value):
        assert FIGI.is_valid_id(value)

    def test_wrong_check_digit(self):
        assert not FIGI.is_valid_id("BBG000BLNNH7")

    def test_third_character_must_be_g(self):
        assert FIGI("BBX000BLNNH6").errors()[0].code == "invalid_format"

    def test_vowels_rejected(self):
        assert not FIGI.is_valid_id("BBG000ALNNH6")

    def test_restore(self):
        assert FIGI.restore_id("BBG000BLNNH") == "BBG000BLNNH6"
        assert FIGI.restore_id("BBG000H4FSM9") == "BBG000H4FSM0"

    @pytest.mark.parametrize("prefix", ["BS", "BM", "GG", "GB", "GH", "KY", "VG"])
    def test_restricted_prefix(self, prefix):
        figi = FIGI(f"{prefix}G000BLNNH6")
        assert not figi.is_valid()
        assert figi.errors()[0].code == "invalid_prefix"

    def test_restricted_prefix_raises_structure_error(self):
        with pytest.raises(InvalidStructureError):
            FIGI("BSG000BLNNH6").validate()

    def test_components(self):
        assert FIGI("BBG000BLNNH6").components() == {
            "prefix": "BB",
            "random_part": "000BLNNH",
            "check_digit": 6,
        }


# =============================================================================
# WKN / VALOREN / CIK
# =============================================================================


class TestWKN:
    @pytest.mark.parametrize("value", ["514000", "A0B1C2", "ESVUFR"])
    def test_valid(self, value):
        assert WKN.is_valid_id(value)

    @pytest.mark.parametrize("value", ["I00000", "O00000", "51400", "5140000"])
    def test_invalid(self, value):
        assert not WKN.is_valid_id(value)

    def test_no_check_digit(self):
        assert WKN.has_check_digit is False


class TestValoren:
    def test_valid(self):
        assert Valoren.is_valid_id("3886335")

    def test_canonical_form_padded(self):
        assert str(Valoren("3886335")) == "003886335"
        assert Valoren.normalize("3 886 335") == "003886335"

    def test_leading_zeros_accepted(self):
        assert Valoren("003886335") == Valoren("3886335")

    def test_length_limits(self):
        issue = Valoren("1234").errors()[0]
        assert issue.code == "invalid_length"
        assert issue.message == "Expected 5-9 characters, got 4"
        assert not Valoren.is_valid_id("1234567890")

    def test_all_zeros_rejected(self):
        assert Valoren("00000").errors()[0].code == "invalid_format"

    def test_to_isin(self):
        isin = Valoren("3886335").to_isin()
        assert str(isin) == "CH0038863350"
        assert isin.is_valid()

    def test_to_isin_liechtenstein(self):
        assert str(Valoren("3886335").to_isin("li")).startswith("LI003886335")

    def test_to_isin_other_country(self):
        with pytest.raises(InvalidFormatError):
            Valoren("3886335").to_isin("DE")

    def test_components(self):
        assert Valoren("3886335").components() == {"number": 3886335}


class TestCIK:
    def test_padded(self):
        assert str(CIK("320193")) == "0000320193"
        assert CIK("0000320193") == CIK("320193")

    def test_single_digit(self):
        assert CIK.is_valid_id("5")

    @pytest.mark.parametrize("value", ["0", "00000000000", "12345678901", "12A"])
    def test_invalid(self, value):
        assert not CIK.is_valid_id(value)

    def test_components(self):
        assert CIK("0000320193").components() == {"number": 320193}


# =============================================================================
# DESCRIPTORS
# =============================================================================


class TestDescriptors:
    """Test classes export engine descriptors."""

    def test_descriptor_fields(self):
        desc = ISIN.descriptor()
        assert desc.key == "isin"
        assert desc.length == 12
        assert desc.has_check_digit is True
        assert desc.example == "US5949181045"
        assert desc.validate("US5949181045") is True

    def test_descriptor_factory_builds_instance(self):
        assert isinstance(CUSIP.descriptor().build("037833100"), CUSIP)

    def test_range_descriptor(self):
        desc = Valoren.descriptor()
        assert desc.length == range(5, 10)
        assert desc.has_check_digit is False
