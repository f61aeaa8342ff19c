from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class AnnouncementFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    storage_id: str
    mime_type: str
    embed_url: str
    original_name: str


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    department: str
    title: str
    body: str
    created_at: datetime
    files: list[AnnouncementFileOut] = []


class AnnouncementPage(BaseModel):
    page: int
    page_size: int
    count: int
    total: int
    has_next_page: bool
    items: list[AnnouncementOut]


class AnnouncementDraft(BaseModel):
    title: str
    body: str

    @field_validator("title", "body")
    @classmethod
    def non_empty(cls, v: str) -> str:
        value = (v or "").strip()
        if not value:
            raise ValueError("Value cannot be empty")
        return value


class UploadResponse(BaseModel):
    news_id: UUID
