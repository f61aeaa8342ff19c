"""Parking incoming attachments on local disk before they go to storage."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

READ_CHUNK = 1024 * 1024

# Leading bytes expected for extensions whose content we can recognise.
FILE_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    ".pdf": (b"%PDF",),
    ".png": (b"\x89PNG\r\n\x1a\n",),
    ".jpg": (b"\xff\xd8\xff",),
    ".jpeg": (b"\xff\xd8\xff",),
    ".gif": (b"GIF87a", b"GIF89a"),
    ".webp": (b"RIFF",),
    ".docx": (b"PK\x03\x04", b"PK\x05\x06"),
    ".xlsx": (b"PK\x03\x04", b"PK\x05\x06"),
    ".pptx": (b"PK\x03\x04", b"PK\x05\x06"),
    ".zip": (b"PK\x03\x04", b"PK\x05\x06"),
}

# Rendered inline by browsers, so they could run script from an embed URL.
BLOCKED_EXTENSIONS = frozenset({".html", ".htm", ".svg", ".xhtml", ".js", ".mjs", ".xml"})


def check_file_head(head: bytes, ext: str) -> None:
    """Raise ValueError for blocked extensions or content that contradicts the extension."""
    if ext in BLOCKED_EXTENSIONS:
        raise ValueError(f"File type '{ext}' is not allowed because it may contain executable content")
    signatures = FILE_SIGNATURES.get(ext)
    if signatures and not head.startswith(signatures):
        raise ValueError(f"File content does not match the expected format for '{ext}'")


def safe_filename(filename: str | None, fallback: str = "upload.bin") -> str:
    if not filename:
        return fallback
    return Path(filename).name or fallback


async def save_upload(
    file: UploadFile,
    tmp_dir: Path,
    max_size_bytes: int = 0,
) -> tuple[Path, str]:
    """Stream ``file`` into a uniquely named file under ``tmp_dir``.

    Returns the temp path and the client's file name (directory parts removed).
    A rejected upload leaves nothing behind.
    """
    tmp_dir = tmp_dir.resolve()
    tmp_dir.mkdir(parents=True, exist_ok=True)
    original_name = safe_filename(file.filename)
    ext = Path(original_name).suffix.lower()
    dest = tmp_dir / f"{uuid4().hex}{ext}"

    written = 0
    try:
        with dest.open("wb") as handle:
            while True:
                chunk = await file.read(READ_CHUNK)
                if not chunk:
                    break
                if written == 0:
                    check_file_head(chunk, ext)
                written += len(chunk)
                if max_size_bytes and written > max_size_bytes:
                    raise ValueError(f"File exceeds maximum allowed size of {max_size_bytes // (1024 * 1024)} MB")
                handle.write(chunk)
    except ValueError:
        dest.unlink(missing_ok=True)
        raise
    finally:
        await file.close()

    return dest, original_name
