"""Decides which storage tier serves a document's bytes."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from app.database.models import Document
from app.logging.logger import Log
from app.orchestrator.exceptions import StorageReadFailedError
from app.storage.blob_store import BaseBlobStore
from app.storage.exceptions import BlobNotFoundError, BlobStoreError
from app.storage.staging import LocalStagingStore, safe_file_name


class Tier(Enum):
    LOCAL = "local"
    REMOTE = "remote"


ANALYZE_ORDER: tuple[Tier, ...] = (Tier.LOCAL, Tier.REMOTE)
DOWNLOAD_ORDER: tuple[Tier, ...] = (Tier.REMOTE, Tier.LOCAL)


def blob_address(document: Document) -> tuple[str, str]:
    """The (owner key, file name) pair a document's object is stored under."""
    return document.id, safe_file_name(document.original_file_name)


@dataclass
class ResolvedContent:
    """Where the bytes were found.

    ``path`` is set for the local tier; ``chunks`` is an already opened
    stream for the remote tier.
    """

    tier: Tier
    path: Path | None = None
    chunks: Iterator[bytes] | None = None


class ContentResolver:
    """Walks storage tiers in a caller-given order until one has the bytes."""

    def __init__(self, staging: LocalStagingStore, blob_store: BaseBlobStore) -> None:
        self._staging = staging
        self._blob_store = blob_store

    def resolve(self, document: Document, order: Sequence[Tier]) -> ResolvedContent | None:
        """Return the first tier that can serve *document*, or None.

        A missing remote object moves on to the next tier. Any other blob
        store failure stops resolution.

        Raises:
            StorageReadFailedError: if the blob store fails for a reason
                other than the object being absent.
        """
        if not document.has_storage():
            Log.warning(f"Document {document.id} records no storage location")
            return None
        for tier in order:
            if tier is Tier.LOCAL:
                resolved = self._resolve_local(document)
            else:
                resolved = self._resolve_remote(document)
            if resolved is not None:
                Log.debug(f"Document {document.id} resolved from {tier.value} tier")
                return resolved
        return None

    def _resolve_local(self, document: Document) -> ResolvedContent | None:
        if not self._staging.exists(document.local_path):
            return None
        return ResolvedContent(tier=Tier.LOCAL, path=Path(str(document.local_path)))

    def _resolve_remote(self, document: Document) -> ResolvedContent | None:
        if not document.remote_key:
            return None
        owner_key, file_name = blob_address(document)
        try:
            chunks = self._blob_store.get(owner_key, file_name)
        except BlobNotFoundError:
            Log.warning(
                f"Document {document.id} has remote key {document.remote_key} "
                "but the object is missing"
            )
            return None
        except BlobStoreError as exc:
            raise StorageReadFailedError(
                f"Blob store read failed for document {document.id}"
            ) from exc
        return ResolvedContent(tier=Tier.REMOTE, chunks=chunks)
