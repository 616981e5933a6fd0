"""
Resizer service: request dependencies.

Settings and the object store are built once in the app lifespan and kept on
``app.state``; routes read them from there.
"""
from fastapi import Request

from resizer.config import Settings
from resizer.storage import ObjectStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store
