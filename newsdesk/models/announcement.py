import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from newsdesk.db.base import Base


class Announcement(Base):
    __tablename__ = "announcements"
    __table_args__ = (
        Index("ix_announcements_department_created_at", "department", "created_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    department = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    # Sole ordering and bucketing key; written once at creation.
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    files = relationship(
        "AnnouncementFile",
        back_populates="announcement",
        order_by="AnnouncementFile.position",
        cascade="all, delete-orphan",
    )


class AnnouncementFile(Base):
    __tablename__ = "announcement_files"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    announcement_id = Column(
        UUID(as_uuid=True),
        ForeignKey("announcements.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    storage_id = Column(String(1024), nullable=False)
    mime_type = Column(String(255), nullable=False)
    embed_url = Column(String(2048), nullable=False)
    original_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    announcement = relationship("Announcement", back_populates="files")
