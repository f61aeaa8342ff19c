"""Create an account from the command line.

    python -m scripts.create_account CS_ADMIN_1 --department CS --department-name "Computer Science"
"""

import argparse
import asyncio
import getpass

from sqlalchemy import select

from newsdesk.core.security import get_password_hash
from newsdesk.db.session import AsyncSessionLocal
from newsdesk.models.account import Account, AccountRole
from newsdesk.schemas.accounts import RESERVED_DEPARTMENT_CODE


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a newsdesk account")
    parser.add_argument("username")
    parser.add_argument("--department", required=True, help="Short department code, e.g. CS")
    parser.add_argument("--department-name", required=True)
    parser.add_argument("--admin", action="store_true", help="Create an admin account")
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args()


async def create_account(args: argparse.Namespace, password: str) -> None:
    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(Account).where(Account.username == args.username))
        if existing.scalar_one_or_none():
            print(f"Account {args.username} already exists.")
            return

        role = AccountRole.ADMIN if args.admin else AccountRole.DEPARTMENT
        session.add(
            Account(
                username=args.username,
                department=args.department.strip(),
                department_name=args.department_name.strip(),
                hashed_password=get_password_hash(password),
                role=role.value,
            )
        )
        await session.commit()
        print(f"Created {role.value} account {args.username} for {args.department}.")


def main() -> None:
    args = _parse_args()
    if args.department.strip().lower() == RESERVED_DEPARTMENT_CODE:
        raise SystemExit(f"'{args.department}' is a reserved department code")
    password = args.password or getpass.getpass("Password: ")
    asyncio.run(create_account(args, password))


if __name__ == "__main__":
    main()
