"""
Resizer: HTTP routes.

Public, unauthenticated. Every successful response is a 303 redirect to the
object's public URL; errors are plain text.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from resizer import resolver
from resizer.config import Settings
from resizer.dependencies import get_object_store, get_settings
from resizer.storage import ObjectStore
from shared.middleware import get_request_id

router = APIRouter(tags=["images"])

REDIRECT_STATUS = status.HTTP_303_SEE_OTHER


@router.get(
    "/{image_slug}",
    status_code=REDIRECT_STATUS,
    response_class=RedirectResponse,
    summary="Redirect to an original or resized image",
    description=(
        "Redirects to the original object when neither w nor h is given. "
        "Otherwise redirects to the resized variant, creating and storing it "
        "first if it does not exist yet."
    ),
    responses={
        400: {"description": "Invalid image path or query parameter"},
        403: {"description": "Original image is not readable"},
        404: {"description": "Original image does not exist"},
        413: {"description": "Resized image rejected by storage"},
        500: {"description": "Storage or image processing failure"},
    },
)
async def get_image(
    request: Request,
    image_slug: str,
    w: str | None = Query(default=None, description="Target width in pixels"),
    h: str | None = Query(default=None, description="Target height in pixels"),
    m: str | None = Query(
        default=None, description="Resampling filter: nearest, bilinear, bicubic or lanczos"
    ),
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    image_request = resolver.ImageRequest(
        path=image_slug,
        width=w,
        height=h,
        resample=m,
        request_id=get_request_id(request),
    )
    target = await resolver.resolve(image_request, store, settings)
    return RedirectResponse(url=target.url, status_code=REDIRECT_STATUS)
