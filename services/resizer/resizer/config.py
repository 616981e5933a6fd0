from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> list[str]:
    """Load .env from the repository root (when running from services/resizer) then local .env."""
    base = Path(__file__).resolve().parent.parent.parent.parent  # repo root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage layout (required, startup fails without them) ───────────────
    s3_bucket_name: str = Field(min_length=1)
    folder_original: str = Field(min_length=1)
    folder_resized: str = Field(min_length=1)

    storage_backend: Literal["s3", "local"] = "s3"

    # ── AWS ───────────────────────────────────────────────────────────────────
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "ca-west-1"
    s3_endpoint_url: str = ""  # S3-compatible stores (MinIO, LocalStack)
    public_base_url: str = ""  # CDN in front of the bucket; blank = virtual-hosted S3 URL

    # ── Local backend (development only) ─────────────────────────────────────
    local_storage_dir: str = "./storage"
    local_public_base_url: str = "/files"

    # ── Image processing ─────────────────────────────────────────────────────
    jpeg_quality: int = Field(default=90, ge=1, le=95)
    max_dimension: int = Field(default=10_000, gt=0)

    # ── HTTP ─────────────────────────────────────────────────────────────────
    env_name: str = "development"
    cors_origins: str = ""
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @field_validator("folder_original", "folder_resized")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        stripped = value.strip().strip("/")
        if not stripped:
            raise ValueError("folder prefix must not be empty")
        return stripped

    @property
    def cors_origins_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]
