from __future__ import annotations

import asyncio
import json
from pathlib import Path

from resizer.storage.base import ObjectStore, StorageError, StorageErrorKind, StoredObject

_META_SUFFIX = ".meta.json"


class LocalObjectStore(ObjectStore):
    """Filesystem-backed store for local development. Content type lives in a sidecar file."""

    def __init__(self, base_dir: Path, public_base_url: str = "/files") -> None:
        self.base_dir = base_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        if any(part in (".", "..") for part in key.split("/")):
            raise StorageError(StorageErrorKind.FORBIDDEN, key, "dot segment in key")
        path = (self.base_dir / key).resolve()
        if not path.is_relative_to(self.base_dir.resolve()):
            raise StorageError(StorageErrorKind.FORBIDDEN, key, "key escapes storage root")
        return path

    def object_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    async def check_object(self, key: str) -> bool:
        return self._path(key).is_file()

    async def download_object(self, key: str) -> StoredObject:
        path = self._path(key)
        meta_path = path.with_name(path.name + _META_SUFFIX)

        def _read() -> StoredObject:
            body = path.read_bytes()
            content_type = "application/octet-stream"
            if meta_path.is_file():
                content_type = json.loads(meta_path.read_text()).get("content_type", content_type)
            return StoredObject(body=body, content_type=content_type)

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, _read)
        except FileNotFoundError as exc:
            raise StorageError(StorageErrorKind.NOT_FOUND, key) from exc
        except PermissionError as exc:
            raise StorageError(StorageErrorKind.FORBIDDEN, key, str(exc)) from exc
        except OSError as exc:
            raise StorageError(StorageErrorKind.UNKNOWN, key, str(exc)) from exc

    async def upload_object(self, key: str, body: bytes, content_type: str) -> None:
        path = self._path(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(body)
            path.with_name(path.name + _META_SUFFIX).write_text(
                json.dumps({"content_type": content_type})
            )

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _write)
        except OSError as exc:
            raise StorageError(StorageErrorKind.UNKNOWN, key, str(exc)) from exc
