from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.middleware import SlowAPIMiddleware

from newsdesk.api.v1 import api_router
from newsdesk.core.errors import register_exception_handlers
from newsdesk.core.limiter import limiter
from newsdesk.core.logging import configure_logging
from newsdesk.core.settings import settings
from newsdesk.events import register_event_handlers
from newsdesk.middlewares.request_context import RequestContextMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Newsdesk", version="0.1.0")
    register_exception_handlers(app)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api/v1")
    if settings.storage_provider == "local":
        media_dir = Path(settings.local_upload_dir)
        media_dir.mkdir(parents=True, exist_ok=True)
        app.mount("/media", StaticFiles(directory=media_dir), name="media")
    register_event_handlers(app)
    return app


app = create_app()
