"""Display formatting for amounts and timestamps (Kenyan shilling, en-KE)."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

CURRENCY_PREFIX = "KES"
DATE_FORMAT = "%d %b %Y, %H:%M"


def format_currency(amount: float) -> str:
    """``1250`` -> ``"KES 1,250.00"``; negatives as ``"-KES 5.00"``."""
    value = round(float(amount), 2)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_PREFIX} {abs(value):,.2f}"


def format_date(timestamp_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Format epoch milliseconds as ``"05 Mar 2024, 14:30"``.

    Without ``tz`` the local timezone is used.
    """
    moment = datetime.fromtimestamp(int(timestamp_ms) / 1000, tz=tz)
    return moment.strftime(DATE_FORMAT)


__all__ = ["CURRENCY_PREFIX", "DATE_FORMAT", "format_currency", "format_date"]
