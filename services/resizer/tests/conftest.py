from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from resizer.config import Settings
from resizer.main import create_app
from tests.helpers import TEST_BUCKET, RecordingStore, make_image


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        s3_bucket_name=TEST_BUCKET,
        folder_original="original",
        folder_resized="resized",
        storage_backend="s3",
    )


@pytest.fixture
def store() -> RecordingStore:
    s = RecordingStore()
    s.put("original/cat.jpeg", make_image("JPEG", 300, 200), "image/jpeg")
    s.put("original/dog.png", make_image("PNG", 300, 300), "image/png")
    s.put("original/bird.jpg", make_image("JPEG", 120, 240), "image/jpeg")
    return s


@pytest.fixture
def client(settings: Settings, store: RecordingStore) -> Generator[TestClient, None, None]:
    app = create_app(settings, object_store=store)
    with TestClient(app, follow_redirects=False) as c:
        yield c
