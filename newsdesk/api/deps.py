from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from newsdesk.core.context import set_department
from newsdesk.core.security import decode_token
from newsdesk.models.account import AccountRole


@dataclass(frozen=True, slots=True)
class Identity:
    account_id: str
    role: str
    department: str

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN.value


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def identity_from_claims(payload: dict) -> Identity:
    subject = payload.get("sub")
    department = payload.get("dept")
    if not subject or not isinstance(department, str) or not department:
        raise ValueError("Invalid token")
    role = payload.get("role")
    if role != AccountRole.ADMIN.value:
        role = AccountRole.DEPARTMENT.value
    return Identity(account_id=str(subject), role=role, department=department)


async def get_identity(token: str = Depends(oauth2_scheme)) -> Identity:
    """Decode the bearer token into the caller's identity; the claims are trusted as-is."""
    try:
        identity = identity_from_claims(decode_token(token, expected_type="access"))
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing or invalid",
        ) from exc
    set_department(identity.department)
    return identity


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admins only")
    return identity
