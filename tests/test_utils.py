"""
Formatting helper tests.
"""

from datetime import date

from erp_ui.utils import format_currency, format_date, parse_date, to_date_input


def test_parse_date_formats():
    """Test ISO dates, timestamps and the Swiss format."""
    assert parse_date("2025-03-31") == date(2025, 3, 31)
    assert parse_date("2025-03-31T10:00:00+00:00") == date(2025, 3, 31)
    assert parse_date("31.03.2025") == date(2025, 3, 31)
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date("tomorrow") is None


def test_format_date():
    assert format_date("2025-02-05") == "05.02.2025"
    assert format_date(None) == "—"


def test_to_date_input():
    assert to_date_input("05.02.2025") == "2025-02-05"
    assert to_date_input(None) == ""


def test_format_currency():
    """Test the Swiss thousands separator."""
    assert format_currency(1234.5) == "CHF 1'234.50"
    assert format_currency(None) == "CHF 0.00"
    assert format_currency(99, "EUR") == "EUR 99.00"
