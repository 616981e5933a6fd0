from shared.middleware.request_id import REQUEST_ID_HEADER, get_request_id, request_id_middleware
from shared.middleware.error_handler import error_text_middleware, http_exception_handler

__all__ = [
    "REQUEST_ID_HEADER",
    "get_request_id",
    "request_id_middleware",
    "error_text_middleware",
    "http_exception_handler",
]
