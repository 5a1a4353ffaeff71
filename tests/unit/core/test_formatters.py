"""
Tests for currency and date formatting.
"""

import math
from datetime import datetime

import pytest

from quotation_core.core.formatters import format_currency, format_date


class TestFormatCurrency:
    """Test format_currency."""

    def test_two_decimals_with_grouping(self):
        """Test amounts render with grouping and two decimals."""
        result = format_currency(1234.5)
        assert "1,234.50" in result
        assert result.startswith("₹")

    def test_indian_grouping_for_large_amounts(self):
        """Test en_IN groups lakhs and crores."""
        assert format_currency(1234567.891, no_symbol=True) == "12,34,567.89"

    def test_no_symbol(self):
        """Test the currency symbol can be stripped."""
        assert format_currency(1234.5, no_symbol=True) == "1,234.50"

    def test_other_locale_uses_usd(self):
        """Test non-Indian locales format US dollars."""
        result = format_currency(1234.5, locale="en_US")
        assert result == "$1,234.50"

    def test_nan_formats_as_zero(self):
        """Test NaN renders exactly like zero."""
        assert format_currency(math.nan) == format_currency(0)
        assert format_currency(float("nan"), no_symbol=True) == "0.00"

    def test_numeric_string_accepted(self):
        """Test numeric strings are formatted as numbers."""
        assert format_currency("2469", no_symbol=True) == "2,469.00"

    def test_none_raises(self):
        """Test None is rejected."""
        with pytest.raises(TypeError):
            format_currency(None)

    def test_non_numeric_string_raises(self):
        """Test text that is not a number is rejected."""
        with pytest.raises(ValueError):
            format_currency("twelve")


class TestFormatDate:
    """Test format_date."""

    @pytest.mark.parametrize("raw,expected", [
        ("15/03/2024", "15/03/2024"),
        ("2024-03-15", "15/03/2024"),
        ("2024-03-15T10:30:00", "15/03/2024"),
        ("2024-03-15T10:30:00Z", "15/03/2024"),
        ("2024-03-15T10:30:00.123+05:30", "15/03/2024"),
        ("15-03-2024", "15/03/2024"),
    ])
    def test_known_layouts(self, raw, expected):
        """Test supported layouts render as dd/mm/yyyy."""
        assert format_date(raw) == expected

    def test_datetime_instance(self):
        """Test datetime objects are formatted directly."""
        assert format_date(datetime(2024, 1, 5)) == "05/01/2024"

    def test_unparseable_returned_unchanged(self):
        """Test unknown input falls back to the raw string."""
        assert format_date("next Tuesday") == "next Tuesday"
        assert format_date("N/A") == "N/A"

    def test_empty_and_none(self):
        """Test empty input renders as an empty string."""
        assert format_date("") == ""
        assert format_date(None) == ""
