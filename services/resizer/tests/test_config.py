from pathlib import Path

import pytest
from pydantic import ValidationError

from resizer.config import Settings
from resizer.main import create_app

REQUIRED = ("S3_BUCKET_NAME", "FOLDER_ORIGINAL", "FOLDER_RESIZED")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    # No local .env to pick values up from
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_required_settings_missing(clean_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValidationError) as exc_info:
        Settings()
    missing = {err["loc"][0] for err in exc_info.value.errors()}
    assert missing == {"s3_bucket_name", "folder_original", "folder_resized"}


def test_app_fails_fast_without_bucket(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("FOLDER_ORIGINAL", "original")
    clean_env.setenv("FOLDER_RESIZED", "resized")
    with pytest.raises(ValidationError):
        create_app()


def test_settings_from_env(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("S3_BUCKET_NAME", "images")
    clean_env.setenv("FOLDER_ORIGINAL", "/original/")
    clean_env.setenv("FOLDER_RESIZED", "cache/resized")
    settings = Settings()
    assert settings.s3_bucket_name == "images"
    assert settings.folder_original == "original"
    assert settings.folder_resized == "cache/resized"
    assert settings.storage_backend == "s3"


def test_empty_folder_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, s3_bucket_name="b", folder_original="/", folder_resized="resized")


def test_cors_origins_list() -> None:
    settings = Settings(
        _env_file=None,
        s3_bucket_name="b",
        folder_original="o",
        folder_resized="r",
        cors_origins="https://a.example, https://b.example,",
    )
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
