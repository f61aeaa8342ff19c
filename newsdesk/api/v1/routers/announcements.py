from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.api import deps
from newsdesk.core.settings import settings
from newsdesk.db.session import get_db
from newsdesk.schemas.announcements import AnnouncementOut, AnnouncementPage
from newsdesk.schemas.reports import DayBucket, ReportQuery
from newsdesk.services import announcements as announcement_service
from newsdesk.services.date_ranges import civil_day_range, parse_civil_day, resolve_range
from newsdesk.services.reports import build_report
from newsdesk.services.scoping import resolve_scope

router = APIRouter(prefix="/news", tags=["news"])


def report_query(
    dept: str | None = Query(None),
    date: str | None = Query(None),
    from_: str | None = Query(None, alias="from"),
    to: str | None = Query(None),
) -> ReportQuery:
    return ReportQuery(dept=dept, date=date, from_=from_, to=to)


@router.get("", response_model=AnnouncementPage, summary="List announcements")
async def list_announcements(
    page: int = Query(1, ge=1),
    dept: str | None = Query(None),
    date: str | None = Query(None),
    identity: deps.Identity = Depends(deps.get_identity),
    db: AsyncSession = Depends(get_db),
) -> AnnouncementPage:
    scope = resolve_scope(identity, dept)
    day = parse_civil_day(date)
    page_size = settings.news_page_size
    items, total = await announcement_service.list_announcements(
        db,
        scope,
        date_range=civil_day_range(day) if day else None,
        page=page,
        page_size=page_size,
    )
    return AnnouncementPage(
        page=page,
        page_size=page_size,
        count=len(items),
        total=total,
        has_next_page=page * page_size < total,
        items=[AnnouncementOut.model_validate(item) for item in items],
    )


@router.get("/grouped", response_model=list[DayBucket], summary="Announcements grouped by day")
async def grouped_announcements(
    query: ReportQuery = Depends(report_query),
    identity: deps.Identity = Depends(deps.get_identity),
    db: AsyncSession = Depends(get_db),
) -> list[DayBucket]:
    scope = resolve_scope(identity, query.dept)
    date_range = resolve_range(query, settings.report_default_window_days)
    return await build_report(db, scope, date_range)


@router.get("/{news_id}", response_model=AnnouncementOut, summary="Get an announcement")
async def get_announcement(
    news_id: UUID,
    identity: deps.Identity = Depends(deps.get_identity),
    db: AsyncSession = Depends(get_db),
) -> AnnouncementOut:
    announcement = await announcement_service.get_announcement(db, news_id)
    if not announcement:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    if not identity.is_admin and announcement.department != identity.department:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return AnnouncementOut.model_validate(announcement)
