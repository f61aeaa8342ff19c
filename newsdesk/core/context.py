import contextvars

_department: contextvars.ContextVar[str] = contextvars.ContextVar("department", default="-")
_request_id: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


def set_department(department: str) -> None:
    _department.set(department)


def get_department() -> str:
    return _department.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


def clear_context() -> None:
    _department.set("-")
    _request_id.set("-")
