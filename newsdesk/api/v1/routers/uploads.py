import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.api import deps
from newsdesk.db.session import get_db
from newsdesk.models.announcement import Announcement
from newsdesk.schemas.announcements import AnnouncementDraft, UploadResponse
from newsdesk.services import announcements as announcement_service
from newsdesk.services.scoping import is_all_departments, resolve_scope
from newsdesk.services.uploads import discard_upload, store_upload

router = APIRouter(tags=["uploads"])
logger = logging.getLogger(__name__)


def _target_department(identity: deps.Identity, requested: str | None) -> str:
    scope = resolve_scope(identity, requested)
    return identity.department if is_all_departments(scope) else scope


async def _existing_announcement(
    db: AsyncSession,
    identity: deps.Identity,
    news_id: str,
) -> Announcement:
    try:
        announcement_id = UUID(news_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="news_id invalid") from exc
    announcement = await announcement_service.get_announcement(db, announcement_id)
    if not announcement:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="news_id invalid")
    if not identity.is_admin and announcement.department != identity.department:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return announcement


@router.post("/upload", response_model=UploadResponse, status_code=201, summary="Upload an attachment")
async def upload_attachment(
    title: str = Form(""),
    body: str = Form(""),
    news_id: str | None = Form(None),
    department: str | None = Form(None),
    file: UploadFile = File(...),
    identity: deps.Identity = Depends(deps.get_identity),
    db: AsyncSession = Depends(get_db),
) -> UploadResponse:
    announcement = None
    draft = None
    if news_id:
        announcement = await _existing_announcement(db, identity, news_id)
        target = announcement.department
    else:
        try:
            draft = AnnouncementDraft(title=title, body=body)
        except ValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="title and body are required",
            ) from exc
        target = _target_department(identity, department)

    try:
        stored = await store_upload(identity.account_id, target, file)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        if announcement is not None:
            await announcement_service.attach_file(db, announcement, stored)
        else:
            announcement = await announcement_service.create_announcement(db, target, draft, stored)
        await db.commit()
    except SQLAlchemyError:
        await discard_upload(stored)
        raise
    logger.info(
        "Attachment saved",
        extra={"news_id": str(announcement.id), "file_count": len(announcement.files)},
    )
    return UploadResponse(news_id=announcement.id)
