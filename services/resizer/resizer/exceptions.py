"""
Resizer service: domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site. Details are plain text and never
carry backend error text; the app renders them as ``text/plain`` bodies.
"""
from fastapi import HTTPException, status


# ── Caller errors ────────────────────────────────────────────────────────────

class InvalidImagePath(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid image path",
        )


class InvalidQuery(HTTPException):
    """Raised for a non-numeric, non-positive or out-of-range query value."""

    def __init__(self, param: str, reason: str) -> None:
        self.param = param
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid query parameter {param}: {reason}",
        )


# ── Storage-signalled ────────────────────────────────────────────────────────

class ImageNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found",
        )


class ImageForbidden(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )


class ImageTooLarge(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Request Entity Too Large",
        )


# ── Everything else ──────────────────────────────────────────────────────────

class InternalError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        )
