"""Calendar date helpers for report dates."""

from datetime import date

ITALIAN_MONTHS = [
    "gennaio",
    "febbraio",
    "marzo",
    "aprile",
    "maggio",
    "giugno",
    "luglio",
    "agosto",
    "settembre",
    "ottobre",
    "novembre",
    "dicembre",
]


def format_date_for_display(d: date) -> str:
    """Format a date the way it appears in report headers, e.g. `10 marzo 2024`."""
    return f"{d.day} {ITALIAN_MONTHS[d.month - 1]} {d.year}"


def parse_report_date(value: str) -> date:
    """Parse a stored `YYYY-MM-DD` report date as a calendar date.

    The value is never interpreted as a UTC instant, so no timezone offset
    can shift it to the neighbouring day.
    """
    return date.fromisoformat(value.strip()[:10])


def format_date_for_filename(d: date) -> str:
    """Format a date as `DD-MM-YYYY` for exported file names."""
    return f"{d.day:02d}-{d.month:02d}-{d.year}"
