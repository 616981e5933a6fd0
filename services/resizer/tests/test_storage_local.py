from pathlib import Path

import pytest

from resizer.config import Settings
from resizer.storage import StorageError, StorageErrorKind, build_object_store
from resizer.storage.local import LocalObjectStore
from tests.helpers import make_image


@pytest.mark.asyncio
async def test_upload_then_download_round_trip(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    body = make_image("PNG", 8, 8)

    assert await store.check_object("resized/dog/w8h0.png") is False
    await store.upload_object("resized/dog/w8h0.png", body, "image/png")
    assert await store.check_object("resized/dog/w8h0.png") is True

    stored = await store.download_object("resized/dog/w8h0.png")
    assert stored.body == body
    assert stored.content_type == "image/png"


@pytest.mark.asyncio
async def test_upload_overwrites(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    await store.upload_object("a/b.jpeg", b"first", "image/jpeg")
    await store.upload_object("a/b.jpeg", b"second", "image/jpeg")
    assert (await store.download_object("a/b.jpeg")).body == b"second"


@pytest.mark.asyncio
async def test_download_missing(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    with pytest.raises(StorageError) as exc_info:
        await store.download_object("original/none.png")
    assert exc_info.value.kind is StorageErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_key_cannot_escape_root(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path / "root")
    with pytest.raises(StorageError) as exc_info:
        await store.download_object("../outside.png")
    assert exc_info.value.kind is StorageErrorKind.FORBIDDEN


def test_object_url(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path, public_base_url="/files/bucket/")
    assert store.object_url("original/cat.jpeg") == "/files/bucket/original/cat.jpeg"


def test_build_local_store(settings: Settings, tmp_path: Path) -> None:
    settings = settings.model_copy(
        update={"storage_backend": "local", "local_storage_dir": str(tmp_path)}
    )
    store = build_object_store(settings)
    assert isinstance(store, LocalObjectStore)
    assert store.base_dir == tmp_path / "test-bucket"
    assert store.object_url("original/cat.jpeg") == "/files/test-bucket/original/cat.jpeg"


@pytest.mark.asyncio
async def test_download_without_sidecar_defaults_content_type(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    (tmp_path / "original").mkdir()
    (tmp_path / "original" / "cat.jpeg").write_bytes(b"raw")

    stored = await store.download_object("original/cat.jpeg")
    assert stored.body == b"raw"
    assert stored.content_type == "application/octet-stream"


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["resized/../w10h0.png", "resized/./w10h0.png"])
async def test_dot_segments_are_refused(tmp_path: Path, key: str) -> None:
    store = LocalObjectStore(tmp_path)
    with pytest.raises(StorageError) as exc_info:
        await store.upload_object(key, b"x", "image/png")
    assert exc_info.value.kind is StorageErrorKind.FORBIDDEN
    assert not (tmp_path / "w10h0.png").exists()
    assert not (tmp_path / "resized" / "w10h0.png").exists()
