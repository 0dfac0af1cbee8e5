from app.config.settings import Settings
from app.storage.blob_store import BaseBlobStore
from app.storage.memory_adapter import InMemoryBlobStore
from app.storage.minio_adapter import MinioBlobStore
from app.storage.staging import LocalStagingStore


class BlobStoreFactory:
    """Creates the configured blob store adapter."""

    BACKENDS: tuple[str, ...] = ("minio", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStore:
        backend = settings.blob_store_backend.lower()
        if backend == "memory":
            return InMemoryBlobStore(bucket=settings.minio_bucket)
        if backend == "minio":
            return MinioBlobStore.from_credentials(
                endpoint=settings.minio_endpoint,
                access_key=settings.minio_access_key,
                secret_key=settings.minio_secret_key,
                secure=settings.minio_secure,
                bucket=settings.minio_bucket,
                create_bucket=settings.minio_create_bucket,
            )
        raise ValueError(
            f"Unknown blob store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )


def create_staging_store(settings: Settings) -> LocalStagingStore:
    return LocalStagingStore(settings.staging_dir)
