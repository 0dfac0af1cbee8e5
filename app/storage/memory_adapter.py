"""In-process blob store.

No network calls. Used for local development (``BLOB_STORE_BACKEND=memory``)
and as a realistic stand-in in tests. Contents vanish with the process.
"""

import threading
from collections.abc import Iterator

from app.storage.blob_store import BaseBlobStore, object_name
from app.storage.exceptions import BlobNotFoundError

_CHUNK_SIZE = 64 * 1024


class InMemoryBlobStore(BaseBlobStore):
    """Dictionary-backed blob store keyed by object name."""

    def __init__(self, bucket: str = "documents") -> None:
        self._bucket = bucket
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def put(self, owner_key: str, file_name: str, data: bytes, content_type: str) -> str:
        name = object_name(owner_key, file_name)
        with self._lock:
            self._objects[name] = (bytes(data), content_type)
        return f"/{self._bucket}/{name}"

    def get(self, owner_key: str, file_name: str) -> Iterator[bytes]:
        data = self._lookup(owner_key, file_name)
        return iter([data[i : i + _CHUNK_SIZE] for i in range(0, len(data), _CHUNK_SIZE)])

    def stat(self, owner_key: str, file_name: str) -> int:
        return len(self._lookup(owner_key, file_name))

    def delete(self, owner_key: str, file_name: str) -> None:
        with self._lock:
            self._objects.pop(object_name(owner_key, file_name), None)

    def contains(self, owner_key: str, file_name: str) -> bool:
        with self._lock:
            return object_name(owner_key, file_name) in self._objects

    def _lookup(self, owner_key: str, file_name: str) -> bytes:
        name = object_name(owner_key, file_name)
        with self._lock:
            entry = self._objects.get(name)
        if entry is None:
            raise BlobNotFoundError(f"Object {name} not found")
        return entry[0]
