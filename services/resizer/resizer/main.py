import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from resizer.config import Settings
from resizer.rate_limit import limiter
from resizer.router import router as image_router
from resizer.storage import ObjectStore, build_object_store
from shared.middleware import error_text_middleware, http_exception_handler, request_id_middleware

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Image Resizer

On-demand resizing gateway in front of an object store.

* **Originals**: `GET /cat.jpeg` redirects to the stored original.
* **Resized variants**: `GET /cat.jpeg?w=600` redirects to
  `resized/cat/w600h0.jpeg`, creating it from the original on first request.
  A missing dimension keeps the aspect ratio; both dimensions stretch.

All redirects use `303 See Other`. Errors are plain text.
"""


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def load_settings() -> Settings:
    return Settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(levelname)s:%(name)s: %(message)s")
    for noisy in ("botocore", "aiobotocore", "aioboto3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def create_app(
    settings: Settings | None = None,
    object_store: ObjectStore | None = None,
) -> FastAPI:
    # Missing bucket/folder settings raise here, before the server accepts traffic
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.object_store = object_store or build_object_store(settings)
        logger.info(
            "Serving bucket %s (%s backend): originals=%s resized=%s",
            settings.s3_bucket_name,
            settings.storage_backend,
            settings.folder_original,
            settings.folder_resized,
        )
        yield

    app = FastAPI(
        title="Image Resizer",
        version="1.0.0",
        description=_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(error_text_middleware)
    app.middleware("http")(request_id_middleware)
    if settings.cors_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_methods=["GET"],
            allow_headers=["*"],
            max_age=600,
        )

    # Registered before the image router so /health is not taken as an image slug
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    @limiter.exempt
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="resizer")

    app.include_router(image_router)

    return app
