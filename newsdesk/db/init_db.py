import asyncio
import logging

from sqlalchemy import select

from newsdesk.core.security import get_password_hash
from newsdesk.core.settings import settings
from newsdesk.db.session import AsyncSessionLocal
from newsdesk.models.account import Account, AccountRole

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Seed the admin account when a seed password is configured."""
    if not settings.seed_admin_password:
        logger.info("No seed admin password configured; skipping seed")
        return

    async with AsyncSessionLocal() as session:
        stmt = select(Account).where(Account.username == settings.seed_admin_username)
        result = await session.execute(stmt)
        if result.scalar_one_or_none():
            logger.info("Admin account already exists")
            return

        session.add(
            Account(
                username=settings.seed_admin_username,
                department=settings.seed_admin_department,
                department_name=settings.seed_admin_department_name,
                hashed_password=get_password_hash(settings.seed_admin_password),
                role=AccountRole.ADMIN.value,
            )
        )
        await session.commit()
        logger.info("Admin account created", extra={"username": settings.seed_admin_username})


if __name__ == "__main__":
    asyncio.run(init_db())
