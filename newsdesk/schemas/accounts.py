from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

RESERVED_DEPARTMENT_CODE = "all"


class AccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    department: str
    department_name: str
    role: str
    created_at: datetime | None = None


class AccountCreate(BaseModel):
    username: str
    password: str
    department: str
    department_name: str

    @field_validator("username", "department", "department_name")
    @classmethod
    def non_empty(cls, v: str) -> str:
        value = (v or "").strip()
        if not value:
            raise ValueError("Value cannot be empty")
        return value

    @field_validator("department")
    @classmethod
    def not_reserved(cls, v: str) -> str:
        if v.strip().lower() == RESERVED_DEPARTMENT_CODE:
            raise ValueError(f"'{v}' is a reserved department code")
        return v


class PasswordReset(BaseModel):
    password: str


class DepartmentOut(BaseModel):
    department: str
    department_name: str
