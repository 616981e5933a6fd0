"""
Resizer: request resolution.

Decides, per request, whether to redirect to the original object, redirect to
an already stored resized variant, or produce that variant now:

  1. Validate the path (``<name>.<ext>``); no storage call on failure.
  2. Check the original exists.
  3. Parse ``w``/``h``/``m`` query values.
  4. No dimensions → redirect to the original. Nothing is downloaded.
  5. Resized key exists → redirect to it (cache hit).
  6. Otherwise download the original, resize, upload under the resized key
     and redirect to it (cache miss).

The store is the only cache. Nothing is kept in memory between requests and
no lock is taken: two concurrent misses for the same key both resize and both
upload, and the store keeps whichever write lands last.
"""
from __future__ import annotations

import asyncio
import enum
import logging
import re
from dataclasses import dataclass

from resizer.config import Settings
from resizer.exceptions import (
    ImageForbidden,
    ImageNotFound,
    ImageTooLarge,
    InternalError,
    InvalidQuery,
)
from resizer.keys import original_key, parse_image_slug, resized_key
from resizer.storage.base import ObjectStore, StorageError, StorageErrorKind
from resizer.transform import DEFAULT_FILTER, ResampleFilter, resize_bytes

logger = logging.getLogger(__name__)

QUERY_WIDTH = "w"
QUERY_HEIGHT = "h"
QUERY_FILTER = "m"

_INT_RE = re.compile(r"[+-]?[0-9]+")


class Outcome(str, enum.Enum):
    ORIGINAL = "original"
    CACHE_HIT = "hit"
    CACHE_MISS = "miss"


@dataclass(frozen=True)
class ImageRequest:
    """Raw request values. Query values stay unparsed until the original is known to exist."""

    path: str
    width: str | None = None
    height: str | None = None
    resample: str | None = None
    request_id: str | None = None


@dataclass(frozen=True)
class Redirect:
    url: str
    key: str
    outcome: Outcome


def parse_dimension(param: str, raw: str | None, max_value: int) -> int | None:
    """None when omitted; an explicit value must be an integer in 1..max_value."""
    if raw is None:
        return None
    if not _INT_RE.fullmatch(raw):
        raise InvalidQuery(param, "must be an integer")
    value = int(raw)
    if value <= 0:
        raise InvalidQuery(param, "must be larger than 0")
    if value > max_value:
        raise InvalidQuery(param, f"must not exceed {max_value}")
    return value


def parse_resample(raw: str | None) -> ResampleFilter:
    if raw is None:
        return DEFAULT_FILTER
    try:
        return ResampleFilter(raw.lower())
    except ValueError:
        allowed = ", ".join(f.value for f in ResampleFilter)
        raise InvalidQuery(QUERY_FILTER, f"must be one of {allowed}") from None


async def resolve(request: ImageRequest, store: ObjectStore, settings: Settings) -> Redirect:
    """Resolve a request to a redirect target; raises the HTTP exception to return otherwise."""
    identity = parse_image_slug(request.path)
    src_key = original_key(identity, settings.folder_original)

    if not await _exists(store, src_key, request):
        raise ImageNotFound()

    width = parse_dimension(QUERY_WIDTH, request.width, settings.max_dimension)
    height = parse_dimension(QUERY_HEIGHT, request.height, settings.max_dimension)
    resample = parse_resample(request.resample)

    if width is None and height is None:
        logger.debug("Original requested: %s", src_key)
        return Redirect(store.object_url(src_key), src_key, Outcome.ORIGINAL)

    dst_key = resized_key(
        identity,
        width,
        height,
        settings.folder_resized,
        variant=None if resample is DEFAULT_FILTER else resample.value,
    )
    if await _exists(store, dst_key, request):
        logger.debug("Cache hit: %s", dst_key)
        return Redirect(store.object_url(dst_key), dst_key, Outcome.CACHE_HIT)

    # ── Cache miss ───────────────────────────────────────────────────────────
    try:
        original = await store.download_object(src_key)
    except StorageError as exc:
        if exc.kind is StorageErrorKind.NOT_FOUND:
            raise ImageNotFound() from exc
        if exc.kind is StorageErrorKind.FORBIDDEN:
            raise ImageForbidden() from exc
        _log_failure("Download", src_key, request)
        raise InternalError() from exc

    loop = asyncio.get_running_loop()
    try:
        body, fmt = await loop.run_in_executor(
            None,
            lambda: resize_bytes(
                original.body, width, height, resample, jpeg_quality=settings.jpeg_quality,
            ),
        )
    except Exception as exc:  # undecodable input or any Pillow failure
        _log_failure("Resize", src_key, request)
        raise InternalError() from exc

    # Keep the original content type unless the store never recorded one
    content_type = original.content_type
    if not content_type.startswith("image/"):
        content_type = fmt.content_type
    try:
        await store.upload_object(dst_key, body, content_type)
    except StorageError as exc:
        if exc.kind is StorageErrorKind.BAD_REQUEST:
            logger.warning("Upload rejected for %s (%d bytes)", dst_key, len(body))
            raise ImageTooLarge() from exc
        _log_failure("Upload", dst_key, request)
        raise InternalError() from exc

    logger.info("Resized %s -> %s", src_key, dst_key)
    return Redirect(store.object_url(dst_key), dst_key, Outcome.CACHE_MISS)


async def _exists(store: ObjectStore, key: str, request: ImageRequest) -> bool:
    try:
        return await store.check_object(key)
    except StorageError as exc:
        _log_failure("Existence check", key, request)
        raise InternalError() from exc


def _log_failure(action: str, key: str, request: ImageRequest) -> None:
    # Called from inside an except block so the traceback is attached
    logger.exception("%s failed for %s (request_id=%s)", action, key, request.request_id)
