"""Date window generation in the feed's request format."""

from __future__ import annotations

from datetime import date, timedelta

DATE_FORMAT = "%d/%m/%Y"


def format_feed_date(d: date) -> str:
    """Render a date as DD/MM/YYYY."""
    return d.strftime(DATE_FORMAT)


def generate_dates(days: int, today: date | None = None) -> list[str]:
    """Return ``days`` feed dates, starting today and stepping back one day at a time."""
    if days < 0:
        raise ValueError("days must not be negative")
    start = today or date.today()
    return [format_feed_date(start - timedelta(days=i)) for i in range(days)]
