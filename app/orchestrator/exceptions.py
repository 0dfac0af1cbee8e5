class OrchestratorError(Exception):
    """Base for every error a document operation surfaces to its caller.

    ``code`` is a stable machine-readable string; ``retryable`` tells the
    caller whether repeating the same request may succeed.
    """

    code = "internal_error"
    retryable = False


class InvalidInputError(OrchestratorError):
    code = "invalid_input"


class PayloadTooLargeError(InvalidInputError):
    code = "payload_too_large"


class NotFoundError(OrchestratorError):
    code = "not_found"


class ForbiddenError(OrchestratorError):
    code = "forbidden"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class ContentUnavailableError(OrchestratorError):
    """The document exists but no storage tier can produce its bytes."""

    code = "content_unavailable"


class StorageWriteFailedError(OrchestratorError):
    code = "storage_write_failed"
    retryable = True


class StorageReadFailedError(OrchestratorError):
    code = "storage_read_failed"
    retryable = True


class ExtractionFailedError(OrchestratorError):
    code = "extraction_failed"


class AnalysisServiceFailedError(OrchestratorError):
    code = "analysis_service_failed"
    retryable = True


class PersistenceFailedError(OrchestratorError):
    code = "persistence_failed"
    retryable = True
