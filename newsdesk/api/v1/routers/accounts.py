from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.api import deps
from newsdesk.db.session import get_db
from newsdesk.models.account import Account
from newsdesk.schemas.accounts import AccountCreate, AccountOut, PasswordReset
from newsdesk.services import accounts as account_service

router = APIRouter(prefix="/accounts", tags=["accounts"])


async def _get_account_or_404(db: AsyncSession, account_id: UUID) -> Account:
    account = await account_service.get_account(db, account_id)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account


@router.get("", response_model=list[AccountOut], summary="List accounts")
async def list_accounts(
    _: deps.Identity = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[AccountOut]:
    return await account_service.list_accounts(db)


@router.post("", response_model=AccountOut, status_code=201, summary="Create a department account")
async def create_account(
    payload: AccountCreate,
    _: deps.Identity = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db),
) -> AccountOut:
    try:
        return await account_service.create_department_account(db, payload)
    except account_service.AccountExists as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists") from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.patch("/{account_id}/password", response_model=AccountOut, summary="Reset an account password")
async def reset_password(
    account_id: UUID,
    payload: PasswordReset,
    _: deps.Identity = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db),
) -> AccountOut:
    account = await _get_account_or_404(db, account_id)
    try:
        return await account_service.reset_password(db, account, payload.password)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete("/{account_id}", status_code=204, summary="Delete a department account")
async def delete_account(
    account_id: UUID,
    _: deps.Identity = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db),
) -> None:
    account = await _get_account_or_404(db, account_id)
    try:
        await account_service.delete_department_account(db, account)
    except account_service.ProtectedAccount as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return None
