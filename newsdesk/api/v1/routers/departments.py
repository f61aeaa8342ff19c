from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.db.session import get_db
from newsdesk.schemas.accounts import DepartmentOut
from newsdesk.services import accounts as account_service

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=list[DepartmentOut], summary="List departments")
async def list_departments(db: AsyncSession = Depends(get_db)) -> list[DepartmentOut]:
    rows = await account_service.list_departments(db)
    return [DepartmentOut(department=code, department_name=name) for code, name in rows]
