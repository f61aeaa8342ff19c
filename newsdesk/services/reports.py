"""Day-bucketed announcement reports.

Two shapes, picked by the effective department scope:

* one department: every announcement, grouped per civil day (expanded);
* all departments: per-day counts broken down by department (summary).

Both are returned newest day first. Days are civil days in the fixed zone of
:mod:`newsdesk.services.date_ranges`. The summary day key is computed inside the
query from the stored UTC instant, so the database session zone never matters;
expanded items are labelled from the same instant in Python.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import timezone

from sqlalchemy import Interval, func, literal, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from newsdesk.models.announcement import Announcement
from newsdesk.schemas.reports import (
    DayBucket,
    DepartmentCount,
    ExpandedDayBucket,
    ReportItem,
    SummaryDayBucket,
)
from newsdesk.services.date_ranges import IST, DateRange, civil_day_label
from newsdesk.services.scoping import ALL_DEPARTMENTS, DepartmentScope, is_all_departments

logger = logging.getLogger(__name__)


def civil_day_key(tz: timezone = IST):
    """SQL expression rendering ``created_at`` as the ``YYYY-MM-DD`` civil day in ``tz``."""
    offset = literal(tz.utcoffset(None), Interval())
    return func.to_char(func.timezone("UTC", Announcement.created_at) + offset, "YYYY-MM-DD")


def report_filters(effective_dept: DepartmentScope, date_range: DateRange) -> list:
    filters = [
        Announcement.created_at >= date_range.start,
        Announcement.created_at < date_range.end,
    ]
    if not is_all_departments(effective_dept):
        filters.append(Announcement.department == effective_dept)
    return filters


def expanded_statement(effective_dept: str, date_range: DateRange):
    return (
        select(Announcement)
        .options(selectinload(Announcement.files))
        .where(*report_filters(effective_dept, date_range))
        .order_by(Announcement.created_at.desc())
    )


def summary_statement(date_range: DateRange, *, tz: timezone = IST):
    day = civil_day_key(tz).label("day")
    return (
        select(day, Announcement.department, func.count().label("count"))
        .where(*report_filters(ALL_DEPARTMENTS, date_range))
        # By output name: Postgres won't match two separately bound copies of the day key.
        .group_by(literal_column("day"), Announcement.department)
    )


def fold_expanded(announcements, *, tz: timezone = IST) -> list[ExpandedDayBucket]:
    by_day: dict[str, list[Announcement]] = defaultdict(list)
    for announcement in announcements:
        by_day[civil_day_label(announcement.created_at, tz=tz)].append(announcement)
    buckets = []
    for day, items in by_day.items():
        items.sort(key=lambda a: a.created_at, reverse=True)
        buckets.append(
            ExpandedDayBucket(
                date=day,
                total=len(items),
                items=[ReportItem.model_validate(a) for a in items],
            )
        )
    buckets.sort(key=lambda b: b.date, reverse=True)
    return buckets


def fold_summary(rows) -> list[SummaryDayBucket]:
    by_day: dict[str, dict[str, int]] = defaultdict(dict)
    for day, department, count in rows:
        counts = by_day[day]
        counts[department] = counts.get(department, 0) + int(count)
    buckets = [
        SummaryDayBucket(
            date=day,
            total=sum(counts.values()),
            departments=[
                DepartmentCount(department=department, count=count)
                for department, count in sorted(counts.items())
            ],
        )
        for day, counts in by_day.items()
    ]
    buckets.sort(key=lambda b: b.date, reverse=True)
    return buckets


async def _execute(db: AsyncSession, stmt, cancel_event: asyncio.Event | None):
    if cancel_event is None:
        return await db.execute(stmt)
    query = asyncio.ensure_future(db.execute(stmt))
    cancelled = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait({query, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        query.cancel()
        raise
    finally:
        cancelled.cancel()
    if query not in done:
        query.cancel()
        raise asyncio.CancelledError("Report query abandoned")
    return query.result()


async def build_report(
    db: AsyncSession,
    effective_dept: DepartmentScope,
    date_range: DateRange,
    *,
    tz: timezone = IST,
    cancel_event: asyncio.Event | None = None,
) -> list[DayBucket]:
    """Run the report for an already-authorized scope and resolved range.

    Database errors propagate unchanged. When ``cancel_event`` is set before the
    query returns, the query is abandoned and ``asyncio.CancelledError`` raised.
    """
    if is_all_departments(effective_dept):
        result = await _execute(db, summary_statement(date_range, tz=tz), cancel_event)
        buckets: list[DayBucket] = fold_summary(result.all())
    else:
        result = await _execute(db, expanded_statement(effective_dept, date_range), cancel_event)
        buckets = fold_expanded(result.scalars().all(), tz=tz)
    logger.info(
        "Grouped report built",
        extra={
            "scope": str(effective_dept),
            "range_start": date_range.start.isoformat(),
            "range_end": date_range.end.isoformat(),
            "buckets": len(buckets),
        },
    )
    return buckets
