"""
Object store contract consumed by the resolver.

Adapters translate backend-specific failures into ``StorageError`` with a
``StorageErrorKind``, so the resolver switches on kind and never imports a
backend exception type.
"""
from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageErrorKind(str, enum.Enum):
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    BAD_REQUEST = "BAD_REQUEST"
    UNKNOWN = "UNKNOWN"


class StorageError(Exception):
    def __init__(self, kind: StorageErrorKind, key: str, message: str = "") -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.value} for {key}" + (f": {message}" if message else ""))


@dataclass(frozen=True)
class StoredObject:
    body: bytes
    content_type: str


class ObjectStore(ABC):
    @abstractmethod
    def object_url(self, key: str) -> str:
        """Public URL for a key. Pure, no I/O."""

    @abstractmethod
    async def check_object(self, key: str) -> bool:
        """True if the key exists, False if not. Raises StorageError only on backend failure."""

    @abstractmethod
    async def download_object(self, key: str) -> StoredObject:
        """Fetch an object with its content type. Raises StorageError (NOT_FOUND, FORBIDDEN, UNKNOWN)."""

    @abstractmethod
    async def upload_object(self, key: str, body: bytes, content_type: str) -> None:
        """Store an object, overwriting any existing one. Raises StorageError (BAD_REQUEST, UNKNOWN)."""
