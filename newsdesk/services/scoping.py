from __future__ import annotations

from enum import Enum
from typing import Union

from newsdesk.api import deps


class AllDepartments(Enum):
    """Scope marker for every department; never equal to any department code."""

    ALL = "all"

    def __str__(self) -> str:
        return "<all departments>"


ALL_DEPARTMENTS = AllDepartments.ALL

DepartmentScope = Union[str, AllDepartments]


def resolve_scope(identity: deps.Identity, requested_dept: str | None = None) -> DepartmentScope:
    """Return the department a query may touch, or ``ALL_DEPARTMENTS``.

    Department identities are pinned to their own department whatever they
    request; admins get the requested department, or everything when none is given.
    """
    if not identity.is_admin:
        return identity.department
    requested = (requested_dept or "").strip()
    return requested or ALL_DEPARTMENTS


def is_all_departments(scope: DepartmentScope) -> bool:
    return scope is ALL_DEPARTMENTS
