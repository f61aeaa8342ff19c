from datetime import timedelta

import pytest
from jose import jwt

from newsdesk.core import security
from newsdesk.core.settings import settings


def test_password_hash_and_verify() -> None:
    hashed = security.get_password_hash("Password123!")
    assert hashed != "Password123!"
    assert security.verify_password("Password123!", hashed)
    assert not security.verify_password("Password124!", hashed)


def test_short_password_is_rejected() -> None:
    with pytest.raises(ValueError):
        security.get_password_hash("short")


def test_access_token_claims() -> None:
    token = security.create_access_token("account-1", role="admin", department="ADMIN")
    claims = security.decode_token(token, expected_type="access")
    assert claims["sub"] == "account-1"
    assert claims["role"] == "admin"
    assert claims["dept"] == "ADMIN"
    assert claims["type"] == "access"


def test_expired_token_is_rejected() -> None:
    token = security.create_access_token(
        "account-1", role="department", department="CS", expires_delta=timedelta(seconds=-5)
    )
    with pytest.raises(ValueError):
        security.decode_token(token)


def test_token_signed_with_other_key_is_rejected() -> None:
    forged = jwt.encode({"sub": "x", "role": "admin", "dept": "CS", "type": "access"}, "other-key", algorithm="HS256")
    with pytest.raises(ValueError):
        security.decode_token(forged)


def test_unexpected_token_type_is_rejected() -> None:
    token = jwt.encode(
        {"sub": "x", "role": "admin", "dept": "CS", "type": "refresh"},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(ValueError):
        security.decode_token(token, expected_type="access")
