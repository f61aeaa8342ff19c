from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import quote

CHUNK_SIZE = 1024 * 1024

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True, slots=True)
class StoredFile:
    storage_id: str
    mime_type: str
    embed_url: str
    original_name: str


def _copy_in_chunks(source: Path, handle, on_progress: ProgressCallback | None) -> None:
    total = source.stat().st_size
    loaded = 0
    with source.open("rb") as reader:
        while True:
            chunk = reader.read(CHUNK_SIZE)
            if not chunk:
                break
            handle.write(chunk)
            loaded += len(chunk)
            if on_progress:
                on_progress(loaded, total)


class StorageAdapter(ABC):
    provider: str = "local"
    bucket: str | None = None

    @abstractmethod
    def upload_file(
        self,
        source: Path,
        object_key: str,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Copy ``source`` into storage, reporting ``(bytes_sent, total_bytes)``.

        Blocking; run it off the event loop. Returns the storage id.
        """

    @abstractmethod
    def embed_url(self, object_key: str, content_type: str) -> str:
        pass

    @abstractmethod
    def delete_object(self, object_key: str):
        pass


class LocalFileSystemAdapter(StorageAdapter):
    def __init__(self, base_path: str, base_url: str):
        self.base_path = Path(base_path)
        self.base_url = base_url.rstrip("/")
        self.provider = "local"
        self.bucket = "local"
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve_safe_path(self, object_key: str) -> Path:
        if "\\" in object_key:
            raise ValueError("Invalid object key")
        key_path = PurePosixPath(object_key)
        if key_path.is_absolute() or ".." in key_path.parts:
            raise ValueError("Invalid object key")
        base = self.base_path.resolve()
        resolved = (base / Path(object_key)).resolve()
        if resolved != base and base not in resolved.parents:
            raise ValueError("Invalid object key")
        return resolved

    def upload_file(
        self,
        source: Path,
        object_key: str,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        path = self._resolve_safe_path(object_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            _copy_in_chunks(source, handle, on_progress)
        return object_key

    def embed_url(self, object_key: str, content_type: str) -> str:
        return f"{self.base_url}/media/{quote(object_key)}"

    def delete_object(self, object_key: str):
        path = self._resolve_safe_path(object_key)
        if path.exists():
            path.unlink()


class GCSStorageAdapter(StorageAdapter):
    def __init__(self, bucket: str):
        # Lazy import to avoid requiring credentials unless used
        from google.cloud import storage

        self.provider = "gcs"
        self.bucket = bucket
        self.client = storage.Client()
        self._bucket_ref = self.client.bucket(bucket)

    def upload_file(
        self,
        source: Path,
        object_key: str,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        blob = self._bucket_ref.blob(object_key)
        with blob.open("wb", content_type=content_type, chunk_size=CHUNK_SIZE * 8) as handle:
            _copy_in_chunks(source, handle, on_progress)
        # Attachments are embedded directly by browsers.
        blob.make_public()
        return object_key

    def embed_url(self, object_key: str, content_type: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket}/{quote(object_key)}"

    def delete_object(self, object_key: str):
        blob = self._bucket_ref.blob(object_key)
        blob.delete()
