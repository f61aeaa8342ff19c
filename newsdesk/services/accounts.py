import logging
from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.core.security import get_password_hash, verify_password
from newsdesk.models.account import Account, AccountRole
from newsdesk.schemas.accounts import AccountCreate

logger = logging.getLogger(__name__)


class AccountExists(ValueError):
    pass


class ProtectedAccount(ValueError):
    pass


async def get_account(db: AsyncSession, account_id: UUID | str) -> Account | None:
    result = await db.execute(select(Account).where(Account.id == account_id))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, username: str, password: str) -> Account | None:
    result = await db.execute(select(Account).where(Account.username == username))
    account = result.scalar_one_or_none()
    if not account or not verify_password(password, account.hashed_password):
        return None
    return account


async def list_accounts(db: AsyncSession) -> list[Account]:
    admins_first = case((Account.role == AccountRole.ADMIN.value, 0), else_=1)
    result = await db.execute(select(Account).order_by(admins_first, Account.username))
    return list(result.scalars().all())


async def create_department_account(db: AsyncSession, payload: AccountCreate) -> Account:
    """Create a department account. The role is never taken from the caller."""
    account = Account(
        username=payload.username,
        department=payload.department,
        department_name=payload.department_name,
        hashed_password=get_password_hash(payload.password),
        role=AccountRole.DEPARTMENT.value,
    )
    db.add(account)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise AccountExists(f"Username {payload.username!r} is taken") from exc
    await db.commit()
    await db.refresh(account)
    logger.info("Account created", extra={"account_id": str(account.id), "account_department": account.department})
    return account


async def reset_password(db: AsyncSession, account: Account, password: str) -> Account:
    account.hashed_password = get_password_hash(password)
    db.add(account)
    await db.commit()
    logger.info("Password reset", extra={"account_id": str(account.id)})
    return account


async def delete_department_account(db: AsyncSession, account: Account) -> None:
    if account.is_admin:
        raise ProtectedAccount("Admin accounts cannot be deleted")
    await db.delete(account)
    await db.commit()
    logger.info("Account deleted", extra={"account_id": str(account.id)})


async def list_departments(db: AsyncSession) -> list[tuple[str, str]]:
    stmt = (
        select(Account.department, Account.department_name)
        .where(Account.role == AccountRole.DEPARTMENT.value)
        .distinct()
        .order_by(Account.department, Account.department_name)
    )
    result = await db.execute(stmt)
    return [(department, name) for department, name in result.all()]
