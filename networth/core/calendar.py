"""Calendar-month arithmetic shared by the projector and the history builder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month. Ordering is chronological."""

    year: int
    month: int  # 1..12

    @classmethod
    def of(cls, value: Union[date, datetime]) -> "YearMonth":
        # day-of-month is discarded
        return cls(year=value.year, month=value.month)

    def shift(self, months: int) -> "YearMonth":
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(year=index // 12, month=index % 12 + 1)

    def months_until(self, other: "YearMonth") -> int:
        """Number of months from self to other (negative if other is earlier)."""
        return (other.year - self.year) * 12 + (other.month - self.month)


def resolve_now(now: Optional[Union[date, datetime]] = None) -> datetime:
    """Return the reference "now", defaulting to the current UTC time."""
    if now is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            return now.astimezone(timezone.utc).replace(tzinfo=None)
        return now
    return datetime(now.year, now.month, now.day)


def offset_to_year_month(month_offset: int, now: Optional[Union[date, datetime]] = None) -> YearMonth:
    """Calendar month `month_offset` months away from the month containing now."""
    return YearMonth.of(resolve_now(now)).shift(month_offset)
