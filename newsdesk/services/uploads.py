"""Server-side leg of the attachment upload.

The browser-to-server leg is finished by the time ``store_upload`` runs; this
module parks the file on disk, pushes it to the storage backend and reports
progress for both legs on the uploader's progress channel.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import time
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from newsdesk.core.settings import settings
from newsdesk.services import upload_progress
from newsdesk.services.local_uploads import save_upload
from newsdesk.services.storage.adapter import StorageAdapter, StoredFile
from newsdesk.services.storage.key_generator import KeyGenerator
from newsdesk.services.storage.service import get_storage_adapter

logger = logging.getLogger(__name__)


async def _relay_progress(account_id: str, events: asyncio.Queue) -> None:
    """Publish storage progress in the order the copy reported it, until ``None``."""
    while True:
        event = await events.get()
        if event is None:
            return
        await upload_progress.publish_progress(account_id, event)


def guess_mime_type(filename: str, declared: str | None = None) -> str:
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or declared or "application/octet-stream"


async def store_upload(
    account_id: str,
    department: str,
    file: UploadFile,
    *,
    adapter: StorageAdapter | None = None,
) -> StoredFile:
    adapter = adapter or get_storage_adapter()
    tmp_path, original_name = await save_upload(
        file,
        Path(settings.upload_tmp_dir),
        max_size_bytes=settings.max_upload_size_mb * 1024 * 1024,
    )
    try:
        await upload_progress.publish_progress(
            account_id, {"file": original_name, "phase": "upload", "pct": 100}
        )

        mime_type = guess_mime_type(original_name, file.content_type)
        object_key = KeyGenerator.announcement_file_key(department, uuid4(), original_name)
        loop = asyncio.get_running_loop()
        events: asyncio.Queue = asyncio.Queue()
        started = time.monotonic()

        def on_progress(loaded: int, total: int) -> None:
            event = upload_progress.upload_event(
                original_name, loaded, total, time.monotonic() - started
            )
            loop.call_soon_threadsafe(events.put_nowait, event)

        relay = asyncio.ensure_future(_relay_progress(account_id, events))
        try:
            storage_id = await run_in_threadpool(
                adapter.upload_file, tmp_path, object_key, mime_type, on_progress
            )
        finally:
            # Queued behind every event the worker thread handed over.
            events.put_nowait(None)
            await relay
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.info(
        "Attachment stored",
        extra={
            "provider": adapter.provider,
            "object_key": object_key,
            "mime_type": mime_type,
        },
    )
    return StoredFile(
        storage_id=storage_id,
        mime_type=mime_type,
        embed_url=adapter.embed_url(object_key, mime_type),
        original_name=original_name,
    )


async def discard_upload(stored: StoredFile, *, adapter: StorageAdapter | None = None) -> None:
    """Remove an object whose announcement record was never saved."""
    adapter = adapter or get_storage_adapter()
    await run_in_threadpool(adapter.delete_object, stored.storage_id)
    logger.warning("Attachment discarded", extra={"storage_id": stored.storage_id})
