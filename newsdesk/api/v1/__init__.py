from fastapi import APIRouter

from newsdesk.api.v1.routers import (
    accounts,
    announcements,
    auth,
    departments,
    events,
    health,
    uploads,
)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(accounts.router)
api_router.include_router(departments.router)
api_router.include_router(announcements.router)
api_router.include_router(uploads.router)
api_router.include_router(events.router)

__all__ = ["api_router"]
