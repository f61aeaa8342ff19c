import pytest

from newsdesk.services.scoping import ALL_DEPARTMENTS, is_all_departments, resolve_scope

from conftest import make_identity


@pytest.mark.parametrize("requested", [None, "", "CS", "HR", "all", " HR "])
def test_department_identity_is_pinned_to_own_department(requested) -> None:
    identity = make_identity(department="CS")
    assert resolve_scope(identity, requested) == "CS"


def test_admin_without_department_sees_everything() -> None:
    identity = make_identity(role="admin", department="ADMIN")
    assert resolve_scope(identity) == ALL_DEPARTMENTS
    assert resolve_scope(identity, "   ") == ALL_DEPARTMENTS
    assert is_all_departments(resolve_scope(identity, None))


def test_admin_can_narrow_to_one_department() -> None:
    identity = make_identity(role="admin", department="ADMIN")
    assert resolve_scope(identity, " HR ") == "HR"
    assert not is_all_departments("HR")


def test_all_departments_marker_is_not_a_department_code() -> None:
    assert ALL_DEPARTMENTS != "all"
    assert not is_all_departments("all")


def test_department_called_all_stays_pinned() -> None:
    identity = make_identity(department="all")
    scope = resolve_scope(identity)
    assert scope == "all"
    assert not is_all_departments(scope)


def test_admin_asking_for_all_gets_that_department() -> None:
    identity = make_identity(role="admin", department="ADMIN")
    assert resolve_scope(identity, "all") == "all"
    assert not is_all_departments(resolve_scope(identity, "all"))
