"""Civil-day ranges in the newsroom's fixed time zone.

All "days" a user sees are calendar days in India Standard Time (UTC+05:30).
The offset is a fixed constant rather than a named zone: it has no daylight
saving transitions, so consecutive day boundaries are always exactly 24h apart
and stepping whole days in UTC lands on the next civil midnight.

Ranges are half-open: ``start`` inclusive, ``end`` exclusive, both aware UTC
datetimes, ready for ``created_at >= start AND created_at < end``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol

IST = timezone(timedelta(hours=5, minutes=30), "IST")

_CIVIL_DAY_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class InvalidDateRange(ValueError):
    """Raised when a resolved range would be empty or inverted."""


@dataclass(frozen=True, slots=True)
class DateRange:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidDateRange(
                f"Range start {self.start.isoformat()} must be before end {self.end.isoformat()}"
            )


class RangeParams(Protocol):
    date: str | None
    from_: str | None
    to: str | None


def parse_civil_day(value: str | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` string; anything else (including 2024-02-30) is None."""
    if not value or not _CIVIL_DAY_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def civil_day_start_utc(day: date, *, tz: timezone = IST) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


def add_days(instant: datetime, days: int) -> datetime:
    # Whole UTC days; only valid for zones without DST (see module docstring).
    return instant + timedelta(days=days)


def civil_day_label(instant: datetime, *, tz: timezone = IST) -> str:
    """The ``YYYY-MM-DD`` civil day in ``tz`` that an aware instant falls on."""
    return instant.astimezone(tz).strftime("%Y-%m-%d")


def today_civil_date(*, now: datetime | None = None, tz: timezone = IST) -> date:
    current = now or datetime.now(timezone.utc)
    return current.astimezone(tz).date()


def civil_day_range(day: date, *, tz: timezone = IST) -> DateRange:
    start = civil_day_start_utc(day, tz=tz)
    return DateRange(start=start, end=add_days(start, 1))


def last_n_days(days: int, *, today: date | None = None, tz: timezone = IST) -> DateRange:
    """The ``days`` most recent civil days ending with (and including) today."""
    today_start = civil_day_start_utc(today or today_civil_date(tz=tz), tz=tz)
    return DateRange(start=add_days(today_start, -(days - 1)), end=add_days(today_start, 1))


def resolve_range(
    params: RangeParams,
    default_window_days: int,
    *,
    today: date | None = None,
    tz: timezone = IST,
) -> DateRange:
    """Resolve query parameters into a UTC range, falling back instead of failing.

    Precedence: ``date`` (one civil day), then ``from`` + ``to`` (inclusive of
    the ``to`` day), then ``from`` alone (``default_window_days`` from it),
    then the trailing window ending today. Unparseable values count as absent.
    Only an inverted combination raises :class:`InvalidDateRange`.
    """
    single = parse_civil_day(params.date)
    if single:
        return civil_day_range(single, tz=tz)

    start_day = parse_civil_day(params.from_)
    end_day = parse_civil_day(params.to)
    if start_day and end_day:
        start = civil_day_start_utc(start_day, tz=tz)
        return DateRange(start=start, end=add_days(civil_day_start_utc(end_day, tz=tz), 1))
    if start_day:
        start = civil_day_start_utc(start_day, tz=tz)
        return DateRange(start=start, end=add_days(start, default_window_days))

    return last_n_days(default_window_days, today=today, tz=tz)
