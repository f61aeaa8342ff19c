from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from newsdesk.models.announcement import Announcement, AnnouncementFile
from newsdesk.schemas.announcements import AnnouncementDraft
from newsdesk.services.date_ranges import DateRange
from newsdesk.services.scoping import DepartmentScope, is_all_departments
from newsdesk.services.storage.adapter import StoredFile


def _list_filters(scope: DepartmentScope, date_range: DateRange | None) -> list:
    filters = []
    if not is_all_departments(scope):
        filters.append(Announcement.department == scope)
    if date_range is not None:
        filters.append(Announcement.created_at >= date_range.start)
        filters.append(Announcement.created_at < date_range.end)
    return filters


async def list_announcements(
    db: AsyncSession,
    scope: DepartmentScope,
    *,
    date_range: DateRange | None,
    page: int,
    page_size: int,
) -> tuple[list[Announcement], int]:
    filters = _list_filters(scope, date_range)
    count_stmt = select(func.count()).select_from(Announcement).where(*filters)
    total = (await db.execute(count_stmt)).scalar_one()

    stmt = (
        select(Announcement)
        .options(selectinload(Announcement.files))
        .where(*filters)
        .order_by(Announcement.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all()), int(total)


async def get_announcement(db: AsyncSession, announcement_id: UUID) -> Announcement | None:
    stmt = (
        select(Announcement)
        .options(selectinload(Announcement.files))
        .where(Announcement.id == announcement_id)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


def _file_row(stored: StoredFile, position: int) -> AnnouncementFile:
    return AnnouncementFile(
        position=position,
        storage_id=stored.storage_id,
        mime_type=stored.mime_type,
        embed_url=stored.embed_url,
        original_name=stored.original_name,
    )


async def create_announcement(
    db: AsyncSession,
    department: str,
    draft: AnnouncementDraft,
    first_file: StoredFile,
) -> Announcement:
    announcement = Announcement(
        department=department,
        title=draft.title,
        body=draft.body,
        created_at=datetime.now(timezone.utc),
    )
    announcement.files = [_file_row(first_file, 0)]
    db.add(announcement)
    await db.flush()
    return announcement


async def attach_file(db: AsyncSession, announcement: Announcement, stored: StoredFile) -> Announcement:
    """Append an attachment; existing attachments are never touched."""
    announcement.files.append(_file_row(stored, len(announcement.files)))
    await db.flush()
    return announcement
