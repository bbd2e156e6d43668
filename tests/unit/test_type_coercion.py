"""
Unit tests for field coercion primitives.

Tests is_numeric, to_number and is_iso_timestamp, including property-based
checks with hypothesis.
"""

from datetime import timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.core.validators import is_iso_timestamp, is_numeric, to_number


class TestIsNumeric:
    """Tests for is_numeric"""

    def test_zero_is_numeric(self):
        """Zero is a number, not a missing value"""
        assert is_numeric(0) is True
        assert is_numeric("0") is True
        assert is_numeric(0.0) is True

    def test_empty_and_null_are_not_numeric(self):
        assert is_numeric("") is False
        assert is_numeric("   ") is False
        assert is_numeric(None) is False

    def test_numeric_strings(self):
        for value in ["9.99", "-10.5", "+3", ".5", "5.", "1.5e3", "2.5E-2", " 42 "]:
            assert is_numeric(value) is True, value

    def test_partial_numeric_prefix_rejected(self):
        """No prefix parsing: trailing garbage disqualifies"""
        for value in ["12abc", "abc12", "1,000", "1_000", "9.99.1", "$5", "e5", "nan", "NaN"]:
            assert is_numeric(value) is False, value

    def test_booleans_are_not_numeric(self):
        assert is_numeric(True) is False
        assert is_numeric(False) is False

    def test_nan_float_is_not_numeric(self):
        assert is_numeric(float("nan")) is False

    def test_other_types_are_not_numeric(self):
        assert is_numeric([1]) is False
        assert is_numeric({"value": 1}) is False

    def test_non_finite_values_are_not_numeric(self):
        for value in [float("inf"), float("-inf"), "1e400", "-1e400", "inf", "Infinity"]:
            assert is_numeric(value) is False, value

    def test_integers_beyond_float_range_are_not_numeric(self):
        """A 400-digit integer literal from a JSON partition"""
        huge = 10 ** 400
        assert is_numeric(huge) is False
        assert is_numeric(-huge) is False
        assert is_numeric(str(huge)) is False

    def test_non_ascii_digits_are_not_numeric(self):
        assert is_numeric("\uff11\uff12") is False
        assert is_numeric("\u0661\u0662") is False

    @given(st.floats(allow_nan=False, allow_infinity=False))
    def test_property_repr_of_any_finite_float_is_numeric(self, value):
        """Property test: the text form of every finite float is numeric"""
        assert is_numeric(repr(value))
        assert to_number(repr(value)) == value

    @given(st.integers(min_value=-10 ** 300, max_value=10 ** 300))
    def test_property_integers_are_numeric(self, value):
        assert is_numeric(value)
        assert is_numeric(str(value))

    @given(st.text(alphabet=st.characters(whitelist_categories=("Lu", "Ll")), min_size=1))
    def test_property_letters_only_are_not_numeric(self, value):
        # A lone "e"/"E" with no mantissa is not a number either
        assert is_numeric(value) is False


class TestToNumber:
    """Tests for to_number"""

    def test_string_coercion(self):
        assert to_number(" 9.99 ") == pytest.approx(9.99)
        assert to_number("3") == 3.0

    def test_number_passthrough(self):
        assert to_number(4) == 4.0
        assert isinstance(to_number(4), float)

    def test_non_numeric_raises(self):
        with pytest.raises(ValueError):
            to_number("abc")
        with pytest.raises(ValueError):
            to_number(None)

    def test_huge_integer_raises_value_error(self):
        with pytest.raises(ValueError):
            to_number(10 ** 400)
        with pytest.raises(ValueError):
            to_number("1e400")


class TestIsIsoTimestamp:
    """Tests for is_iso_timestamp"""

    def test_utc_zulu_timestamp(self):
        assert is_iso_timestamp("2024-01-15T10:30:00Z") is True

    def test_accepted_forms(self):
        for value in [
            "2024-01-15",
            "2024-01-15T10:30:00",
            "2024-01-15T10:30:00.123",
            "2024-01-15T10:30:00+02:00",
            "2024-01-15T10:30:00.000Z",
            "2024-01-15 10:30:00",
            "2024-01-15T10:30",
            "2024-01-15T10:30:00.5Z",
            "2024-01-15T10:30:00.123456789-05:30",
            "2024-01-15T10:30:00z",
        ]:
            assert is_iso_timestamp(value) is True, value

    def test_rejected_values(self):
        for value in ["not-a-date", "", "   ", None, "15/01/2024", "2024-13-01", "2024-02-30", 20240115]:
            assert is_iso_timestamp(value) is False, value

    def test_basic_and_week_forms_rejected(self):
        for value in ["20240115", "2024-W03-1", "2024-W03", "2024-015", "20240115T103000"]:
            assert is_iso_timestamp(value) is False, value

    def test_incomplete_or_malformed_times_rejected(self):
        for value in [
            "2024-01-15T10",
            "2024-01-15T",
            "2024-01-15T10:30:00.",
            "2024-01-15Z",
            "2024-01-15T25:00:00",
            "2024-01-15T10:60",
            "2024-01-15T10:30:00+24:00",
            "2024-01-15T10:30:00+0200",
            "2024-01-15x10:30:00",
        ]:
            assert is_iso_timestamp(value) is False, value

    def test_surrounding_whitespace_ignored(self):
        assert is_iso_timestamp(" 2024-01-15T10:30:00Z ") is True

    def test_non_ascii_digits_rejected(self):
        assert is_iso_timestamp("２０２４-01-15") is False

    @given(st.datetimes(timezones=st.none() | st.just(timezone.utc)))
    def test_property_isoformat_output_accepted(self, value):
        """Property test: datetime.isoformat() output is always accepted"""
        assert is_iso_timestamp(value.isoformat()) is True
        assert is_iso_timestamp(value.date().isoformat()) is True
