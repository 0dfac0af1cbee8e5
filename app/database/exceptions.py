class RepositoryError(Exception):
    """Base exception for repository-level failures."""


class DocumentNotFoundError(RepositoryError):
    """Raised when an update targets a document row that does not exist."""
