"""Tests for id-ID number, currency and date formatting."""

from datetime import date, datetime

import pytest

from sheetrag.service.formatting import format_currency, format_date, format_number


class TestFormatNumber:
    """Tests for format_number."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1000000, "1.000.000"),
            (1234567.5, "1.234.567,5"),
            (0, "0"),
            (999, "999"),
            (-2500, "-2.500"),
            (0.125, "0,125"),
        ],
    )
    def test_grouping_and_decimal_comma(self, value, expected):
        """Test thousands use dots and decimals use a comma."""
        assert format_number(value) == expected

    def test_rounds_to_three_fraction_digits(self):
        """Test values are rounded to at most three decimals."""
        assert format_number(1.23456) == "1,235"

    def test_non_finite_values(self):
        """Test NaN and infinities do not raise."""
        assert format_number(float("nan")) == "NaN"
        assert format_number(float("inf")) == "∞"
        assert format_number(float("-inf")) == "-∞"


def test_format_currency():
    """Test rupiah amounts carry the Rp prefix."""
    assert format_currency(1000000) == "Rp 1.000.000"


@pytest.mark.parametrize(
    "value,expected",
    [
        (date(2023, 3, 15), "15/3/2023"),
        (datetime(2024, 12, 1, 10, 30), "1/12/2024"),
    ],
)
def test_format_date(value, expected):
    """Test dates render day/month/year without padding."""
    assert format_date(value) == expected
