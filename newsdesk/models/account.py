import uuid
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID

from newsdesk.db.base import Base


class AccountRole(str, Enum):
    ADMIN = "admin"
    DEPARTMENT = "department"


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'department')", name="ck_accounts_role"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), nullable=False, unique=True)
    department = Column(String(50), nullable=False, index=True)
    department_name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=AccountRole.DEPARTMENT.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN.value
