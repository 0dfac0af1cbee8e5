from abc import ABC, abstractmethod
from collections.abc import Iterator


def object_name(owner_key: str, file_name: str) -> str:
    """Objects are addressed by (owner, file name), never by a free path."""
    return f"documents/{owner_key}/{file_name}"


class BaseBlobStore(ABC):
    """Contract for remote object store adapters.

    ``owner_key`` is the id of the entity owning the object (the document),
    ``file_name`` the name the object was uploaded under.
    """

    @abstractmethod
    def put(self, owner_key: str, file_name: str, data: bytes, content_type: str) -> str:
        """Store *data* and return the remote key.

        Raises:
            BlobPermissionError: if the store refuses the write.
            BlobTransientError: on network or server failures.
        """

    @abstractmethod
    def get(self, owner_key: str, file_name: str) -> Iterator[bytes]:
        """Open an object for streaming.

        Existence is checked before this returns, so a missing object raises
        here rather than on the first chunk.

        Raises:
            BlobNotFoundError: if the object does not exist.
            BlobTransientError: on network or server failures.
        """

    @abstractmethod
    def stat(self, owner_key: str, file_name: str) -> int:
        """Return the stored size in bytes.

        Raises:
            BlobNotFoundError: if the object does not exist.
            BlobTransientError: on network or server failures.
        """

    @abstractmethod
    def delete(self, owner_key: str, file_name: str) -> None:
        """Remove an object. Deleting a missing object is not an error.

        Raises:
            BlobPermissionError: if the store refuses the delete.
            BlobTransientError: on network or server failures.
        """
