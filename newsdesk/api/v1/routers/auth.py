import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.api import deps
from newsdesk.core.limiter import limiter
from newsdesk.core.security import create_access_token
from newsdesk.core.settings import settings
from newsdesk.db.session import get_db
from newsdesk.schemas.accounts import AccountOut
from newsdesk.schemas.auth import LoginRequest, Token
from newsdesk.services import accounts as account_service

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
@limiter.limit(lambda: f"{settings.rate_limit_per_minute}/minute")
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Token:
    account = await account_service.authenticate(db, credentials.username, credentials.password)
    if not account:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Failed login", extra={"username": credentials.username, "client_ip": client_ip})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token(
        str(account.id),
        role=account.role,
        department=account.department,
    )
    return Token(access_token=token)


@router.get("/me", response_model=AccountOut)
async def read_current_account(
    identity: deps.Identity = Depends(deps.get_identity),
    db: AsyncSession = Depends(get_db),
) -> AccountOut:
    try:
        account_id = UUID(identity.account_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token missing or invalid") from exc
    account = await account_service.get_account(db, account_id)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return AccountOut.model_validate(account)
