"""
Utility functions for record formatting.

Provides helpers for:
- Date parsing (ISO and Swiss dd.mm.yyyy formats)
- Date and currency formatting for display
- Date input values for HTML date fields
"""

from datetime import date, datetime

DEFAULT_CURRENCY = "CHF"
EMPTY_LABEL = "—"


def parse_date(date_str: str | None) -> date | None:
    """
    Parse a date string to a date object.

    Args:
        date_str: ISO date or timestamp ("2025-03-31", "2025-03-31T10:00:00+00:00")
                  or Swiss format ("31.03.2025").

    Returns:
        date object if parsing succeeds, None otherwise
    """
    if date_str:
        date_str = date_str.strip()
    if not date_str:
        return None

    # Try ISO format first, with or without a time part
    try:
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        pass

    # Try dd.mm.yyyy (e.g., "31.03.2025")
    try:
        return datetime.strptime(date_str, "%d.%m.%Y").date()
    except ValueError:
        pass

    return None


def format_date(date_str: str | None) -> str:
    """Format a stored date for display (dd.mm.yyyy) or the empty label."""
    parsed = parse_date(date_str)
    if parsed is None:
        return EMPTY_LABEL
    return parsed.strftime("%d.%m.%Y")


def to_date_input(date_str: str | None) -> str:
    """Return the YYYY-MM-DD value expected by an HTML date input."""
    parsed = parse_date(date_str)
    return parsed.isoformat() if parsed else ""


def format_currency(value: float | None, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format a currency amount with the currency code prefix.

    Args:
        value: Numeric amount to format; None is treated as 0.
        currency: Currency code (e.g., 'CHF', 'EUR').

    Returns:
        Formatted string like "CHF 1'234.50".
    """
    return f"{currency} {float(value or 0):,.2f}".replace(",", "'")
