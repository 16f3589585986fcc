"""Reporting periods and fare totals for the collections report."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Tuple

from .entities import FareCollection, TransactionStatus


class ReportPeriod(Enum):
    TODAY = "Today"
    THIS_WEEK = "This Week"
    THIS_MONTH = "This Month"
    LAST_MONTH = "Last Month"

    @property
    def title(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> "ReportPeriod":
        """Accept member names case-insensitively (``this_week``) or titles."""
        text = str(token or "").strip()
        for member in cls:
            if text.upper() == member.name or text.lower() == member.value.lower():
                return member
        raise ValueError(f"Unknown report period: {token!r}")


@dataclass(frozen=True)
class FareSummary:
    count: int = 0
    total: float = 0.0
    completed_total: float = 0.0


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def time_range_for_period(
    period: ReportPeriod, now: Optional[datetime] = None
) -> Tuple[int, int]:
    """Return the inclusive ``(start_ms, end_ms)`` window for ``period``.

    Day boundaries follow the timezone of ``now`` (local time when omitted).
    Weeks start on Monday. Every period ends at ``now`` except LAST_MONTH,
    which ends one millisecond before the first day of the current month.
    """
    current = now or datetime.now().astimezone()
    midnight = current.replace(hour=0, minute=0, second=0, microsecond=0)
    end_ms = _to_ms(current)

    if period is ReportPeriod.TODAY:
        start = midnight
    elif period is ReportPeriod.THIS_WEEK:
        start = midnight - timedelta(days=midnight.weekday())
    elif period is ReportPeriod.THIS_MONTH:
        start = midnight.replace(day=1)
    elif period is ReportPeriod.LAST_MONTH:
        month_start = midnight.replace(day=1)
        start = (month_start - timedelta(days=1)).replace(day=1)
        end_ms = _to_ms(month_start) - 1
    else:
        raise ValueError(f"Unsupported report period: {period!r}")
    return _to_ms(start), end_ms


def summarize_collections(collections: Iterable[FareCollection]) -> FareSummary:
    count = 0
    total = 0.0
    completed = 0.0
    for item in collections:
        count += 1
        total += item.amount
        if item.status is TransactionStatus.COMPLETED:
            completed += item.amount
    return FareSummary(count=count, total=round(total, 2), completed_total=round(completed, 2))


__all__ = ["FareSummary", "ReportPeriod", "summarize_collections", "time_range_for_period"]
