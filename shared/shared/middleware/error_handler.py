import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_TEXT = "Internal Server Error"


def plain_text_error(exc: StarletteHTTPException) -> PlainTextResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return PlainTextResponse(detail, status_code=exc.status_code, headers=exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Registered with ``app.add_exception_handler`` so routed errors are plain text too."""
    return plain_text_error(exc)


async def error_text_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        return plain_text_error(exc)
    except Exception:
        logger.exception(
            "Unhandled exception (request_id=%s)",
            getattr(request.state, "request_id", None),
        )
        return PlainTextResponse(
            INTERNAL_ERROR_TEXT,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
