import io
from collections.abc import Iterator
from typing import Any, ClassVar

import urllib3
from minio import Minio
from minio.error import MinioException, S3Error

from app.logging.logger import Log
from app.storage.blob_store import BaseBlobStore, object_name
from app.storage.exceptions import (
    BlobNotFoundError,
    BlobPermissionError,
    BlobStoreError,
    BlobTransientError,
)

STREAM_CHUNK_SIZE = 64 * 1024


class MinioBlobStore(BaseBlobStore):
    """Blob store backed by an S3-compatible MinIO bucket."""

    NOT_FOUND_CODES: ClassVar[frozenset[str]] = frozenset(
        {"NoSuchKey", "NoSuchBucket", "NoSuchObject"}
    )
    PERMISSION_CODES: ClassVar[frozenset[str]] = frozenset(
        {"AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch", "AllAccessDisabled"}
    )

    def __init__(
        self,
        *,
        client: Minio,
        bucket: str,
        create_bucket: bool = False,
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._bucket_checked = not create_bucket

    @classmethod
    def from_credentials(
        cls,
        *,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool,
        bucket: str,
        create_bucket: bool = False,
    ) -> "MinioBlobStore":
        client = Minio(endpoint, access_key=access_key, secret_key=secret_key, secure=secure)
        return cls(client=client, bucket=bucket, create_bucket=create_bucket)

    def put(self, owner_key: str, file_name: str, data: bytes, content_type: str) -> str:
        name = object_name(owner_key, file_name)
        try:
            self._ensure_bucket()
            self._client.put_object(
                bucket_name=self._bucket,
                object_name=name,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (MinioException, urllib3.exceptions.HTTPError, OSError) as exc:
            raise self._translate(exc, name) from exc
        Log.debug(f"Stored {len(data)} bytes as {self._bucket}/{name}")
        return f"/{self._bucket}/{name}"

    def get(self, owner_key: str, file_name: str) -> Iterator[bytes]:
        name = object_name(owner_key, file_name)
        try:
            response = self._client.get_object(bucket_name=self._bucket, object_name=name)
        except (MinioException, urllib3.exceptions.HTTPError, OSError) as exc:
            raise self._translate(exc, name) from exc
        return self._stream(response, name)

    def stat(self, owner_key: str, file_name: str) -> int:
        name = object_name(owner_key, file_name)
        try:
            info = self._client.stat_object(bucket_name=self._bucket, object_name=name)
        except (MinioException, urllib3.exceptions.HTTPError, OSError) as exc:
            raise self._translate(exc, name) from exc
        return int(info.size or 0)

    def delete(self, owner_key: str, file_name: str) -> None:
        name = object_name(owner_key, file_name)
        try:
            self._client.remove_object(bucket_name=self._bucket, object_name=name)
        except (MinioException, urllib3.exceptions.HTTPError, OSError) as exc:
            error = self._translate(exc, name)
            if isinstance(error, BlobNotFoundError):
                return
            raise error from exc

    def _ensure_bucket(self) -> None:
        if self._bucket_checked:
            return
        if not self._client.bucket_exists(bucket_name=self._bucket):
            Log.info(f"Creating bucket {self._bucket}")
            self._client.make_bucket(bucket_name=self._bucket)
        self._bucket_checked = True

    def _stream(self, response: Any, name: str) -> Iterator[bytes]:
        try:
            yield from response.stream(STREAM_CHUNK_SIZE)
        except (urllib3.exceptions.HTTPError, OSError) as exc:
            raise BlobTransientError(f"Stream of {name} interrupted: {exc}") from exc
        finally:
            response.close()
            response.release_conn()

    @classmethod
    def _translate(cls, exc: Exception, name: str) -> BlobStoreError:
        if isinstance(exc, S3Error):
            if exc.code in cls.NOT_FOUND_CODES:
                return BlobNotFoundError(f"Object {name} not found")
            if exc.code in cls.PERMISSION_CODES:
                return BlobPermissionError(f"Access to {name} denied: {exc.code}")
            return BlobTransientError(f"Object store error for {name}: {exc.code}")
        return BlobTransientError(f"Object store unreachable for {name}: {exc}")
