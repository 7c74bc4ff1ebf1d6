"""
Unit Tests for the Normalizer

These tests validate parsing of the provider's numeric encoding: comma
decimal separators, the "-" sentinel, and garbage input, none of which
may raise.
"""

from decimal import Decimal

import pytest

from tariff_sync.normalizer.normalize import clean_optional_text, parse_number


class TestParseNumber:
    """Tests for parse_number"""

    def test_comma_decimal_separator(self):
        """Comma is the fractional separator"""
        assert parse_number("1,5") == Decimal("1.5")
        assert parse_number("1,5") == 1.5

    def test_dot_decimal_separator(self):
        """A dot is accepted as well"""
        assert parse_number("11.25") == Decimal("11.25")

    def test_integer_string(self):
        assert parse_number("160") == Decimal("160")

    @pytest.mark.parametrize("value", ["-", "", "   ", " - ", None])
    def test_missing_markers_are_none(self, value):
        """Sentinel, empty and whitespace values mean "not offered\""""
        assert parse_number(value) is None

    @pytest.mark.parametrize("value", ["abc", "1,2,3", "12abc", "--", "NaN", "Infinity", "1e"])
    def test_garbage_is_none(self, value):
        """Anything that does not parse after substitution becomes None"""
        assert parse_number(value) is None

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_number("  0,1 ") == Decimal("0.1")

    def test_grouped_thousands(self):
        """Regular and non-breaking spaces used as group separators"""
        assert parse_number("1 234,5") == Decimal("1234.5")
        assert parse_number("1\u00a0234,5") == Decimal("1234.5")

    def test_zero_is_not_none(self):
        """Zero is a real tariff, distinct from "not offered\""""
        assert parse_number("0") == Decimal("0")
        assert parse_number("0,0") is not None

    def test_numeric_inputs_pass_through(self):
        assert parse_number(5) == Decimal("5")
        assert parse_number(2.5) == Decimal("2.5")
        assert parse_number(Decimal("3.10")) == Decimal("3.10")

    @pytest.mark.parametrize("value", [True, [], {}, object()])
    def test_unsupported_types_are_none(self, value):
        assert parse_number(value) is None

    def test_returns_decimal_type(self):
        """Tariffs are decimals, not floats"""
        assert isinstance(parse_number("46,4"), Decimal)


class TestCleanOptionalText:
    """Tests for clean_optional_text"""

    def test_strips_value(self):
        assert clean_optional_text("  2026-10-31 ") == "2026-10-31"

    @pytest.mark.parametrize("value", ["", "   ", None, 123])
    def test_empty_or_non_string_is_none(self, value):
        assert clean_optional_text(value) is None


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
