class StorageError(Exception):
    """Base exception for both storage tiers."""


class StagingError(StorageError):
    """Raised when the local staging directory cannot be used."""


class StagingWriteError(StagingError):
    """Raised when bytes cannot be written to the staging directory."""


class StagingReadError(StagingError):
    """Raised when a staged file cannot be read."""


class StagingSizeLimitError(StagingError):
    """Raised when a stream grows past the configured size ceiling."""


class BlobStoreError(StorageError):
    """Base exception for remote object store failures."""


class BlobNotFoundError(BlobStoreError):
    """Raised when the addressed object does not exist."""


class BlobPermissionError(BlobStoreError):
    """Raised when the store rejects the credentials or the operation."""


class BlobTransientError(BlobStoreError):
    """Raised on network or server-side failures that may succeed on retry."""
