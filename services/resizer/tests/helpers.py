import io

from PIL import Image

from resizer.storage import ObjectStore, StorageError, StorageErrorKind, StoredObject

TEST_BUCKET = "test-bucket"


def make_image(fmt: str, width: int, height: int, mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, (width, height), color="orange" if mode == "RGB" else 0).save(buf, format=fmt)
    return buf.getvalue()


def image_size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as img:
        return img.size


class RecordingStore(ObjectStore):
    """In-memory store that records every call and can be told to fail."""

    def __init__(self, bucket: str = TEST_BUCKET) -> None:
        self.bucket = bucket
        self.objects: dict[str, StoredObject] = {}
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], Exception] = {}

    def put(self, key: str, body: bytes, content_type: str) -> None:
        self.objects[key] = StoredObject(body=body, content_type=content_type)

    def fail(self, action: str, key: str, kind: StorageErrorKind) -> None:
        self._failures[(action, key)] = StorageError(kind, key, "injected")

    def fail_with(self, action: str, key: str, exc: Exception) -> None:
        self._failures[(action, key)] = exc

    def count(self, action: str) -> int:
        return sum(1 for a, _ in self.calls if a == action)

    def _record(self, action: str, key: str) -> None:
        self.calls.append((action, key))
        exc = self._failures.get((action, key))
        if exc is not None:
            raise exc

    def object_url(self, key: str) -> str:
        return f"https://test.test/{self.bucket}/{key}"

    async def check_object(self, key: str) -> bool:
        self._record("check", key)
        return key in self.objects

    async def download_object(self, key: str) -> StoredObject:
        self._record("download", key)
        try:
            return self.objects[key]
        except KeyError:
            raise StorageError(StorageErrorKind.NOT_FOUND, key) from None

    async def upload_object(self, key: str, body: bytes, content_type: str) -> None:
        self._record("upload", key)
        self.put(key, body, content_type)
