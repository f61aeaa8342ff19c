from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from newsdesk.schemas.announcements import AnnouncementFileOut


class ReportQuery(BaseModel):
    """Raw report query parameters; every field is optional and unvalidated."""

    model_config = ConfigDict(populate_by_name=True)

    dept: str | None = None
    date: str | None = None
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None


class ReportItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    body: str
    department: str
    created_at: datetime
    files: list[AnnouncementFileOut] = []


class DepartmentCount(BaseModel):
    department: str
    count: int


class ExpandedDayBucket(BaseModel):
    kind: Literal["expanded"] = "expanded"
    date: str
    total: int
    items: list[ReportItem]


class SummaryDayBucket(BaseModel):
    kind: Literal["summary"] = "summary"
    date: str
    total: int
    departments: list[DepartmentCount]


DayBucket = Annotated[Union[ExpandedDayBucket, SummaryDayBucket], Field(discriminator="kind")]
