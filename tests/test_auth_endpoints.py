import pytest
from fastapi.testclient import TestClient

from newsdesk.api import deps
from newsdesk.core.security import decode_token
from newsdesk.main import app
from newsdesk.models.account import Account

from conftest import FakeResult, entity_handler, make_account


def test_login_issues_token_with_role_and_department(client, fake_db) -> None:
    account = make_account(username="cs_desk", password="Password123!", department="CS")
    fake_db.on_execute(entity_handler(Account, FakeResult(scalar=account)))

    response = client.post("/api/v1/auth/login", json={"username": "cs_desk", "password": "Password123!"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    claims = decode_token(body["access_token"], expected_type="access")
    assert claims["sub"] == str(account.id)
    assert claims["role"] == "department"
    assert claims["dept"] == "CS"


def test_login_wrong_password(client, fake_db) -> None:
    account = make_account(password="Password123!")
    fake_db.on_execute(entity_handler(Account, FakeResult(scalar=account)))

    response = client.post("/api/v1/auth/login", json={"username": account.username, "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_unknown_user(client) -> None:
    response = client.post("/api/v1/auth/login", json={"username": "ghost", "password": "Password123!"})
    assert response.status_code == 401


def test_login_missing_fields_is_validation_error(client) -> None:
    response = client.post("/api/v1/auth/login", json={"username": "ghost"})
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_token_round_trips_through_get_identity(client, fake_db) -> None:
    account = make_account(role="admin", department="ADMIN", username="root")
    fake_db.on_execute(entity_handler(Account, FakeResult(scalar=account)))
    token = client.post(
        "/api/v1/auth/login", json={"username": "root", "password": "Password123!"}
    ).json()["access_token"]

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["username"] == "root"
    assert response.json()["role"] == "admin"


def test_me_for_deleted_account(client, login_as, dept_identity) -> None:
    login_as(dept_identity)
    assert client.get("/api/v1/auth/me").status_code == 404


def test_me_without_token(override_deps) -> None:
    assert TestClient(app).get("/api/v1/auth/me").status_code == 401


def test_unknown_role_claim_is_treated_as_department() -> None:
    identity = deps.identity_from_claims({"sub": "abc", "role": "superuser", "dept": "CS"})
    assert identity.role == "department"
    assert not identity.is_admin


@pytest.mark.parametrize(
    "claims",
    [{"role": "admin", "dept": "CS"}, {"sub": "abc", "role": "admin"}, {"sub": "abc", "dept": ""}],
)
def test_claims_missing_subject_or_department_are_rejected(claims) -> None:
    with pytest.raises(ValueError):
        deps.identity_from_claims(claims)
