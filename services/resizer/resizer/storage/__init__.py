from __future__ import annotations

from pathlib import Path

from resizer.config import Settings
from resizer.storage.base import ObjectStore, StorageError, StorageErrorKind, StoredObject


def build_object_store(settings: Settings) -> ObjectStore:
    """Instantiate the backend selected by STORAGE_BACKEND."""
    if settings.storage_backend == "local":
        from resizer.storage.local import LocalObjectStore

        return LocalObjectStore(
            Path(settings.local_storage_dir) / settings.s3_bucket_name,
            public_base_url=f"{settings.local_public_base_url.rstrip('/')}/{settings.s3_bucket_name}",
        )

    from resizer.storage.s3 import S3ObjectStore

    return S3ObjectStore(settings)


__all__ = [
    "ObjectStore",
    "StorageError",
    "StorageErrorKind",
    "StoredObject",
    "build_object_store",
]
