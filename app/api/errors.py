from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.logging.logger import Log
from app.orchestrator.exceptions import (
    AnalysisServiceFailedError,
    ContentUnavailableError,
    ExtractionFailedError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    OrchestratorError,
    PayloadTooLargeError,
    PersistenceFailedError,
    StorageReadFailedError,
    StorageWriteFailedError,
)

# Checked in order; subclasses before their bases.
STATUS_CODES: tuple[tuple[type[OrchestratorError], int], ...] = (
    (PayloadTooLargeError, 413),
    (InvalidInputError, 400),
    (NotFoundError, 404),
    (ForbiddenError, 403),
    (ContentUnavailableError, 410),
    (StorageWriteFailedError, 503),
    (StorageReadFailedError, 503),
    (ExtractionFailedError, 422),
    (AnalysisServiceFailedError, 502),
    (PersistenceFailedError, 503),
)


def status_code_for(exc: OrchestratorError) -> int:
    for error_type, code in STATUS_CODES:
        if isinstance(exc, error_type):
            return code
    return 500


async def orchestrator_error_handler(request: Request, exc: OrchestratorError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        Log.error(f"{request.method} {request.url.path} failed with {exc.code}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": exc.code, "retryable": exc.retryable},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrchestratorError, orchestrator_error_handler)  # type: ignore[arg-type]
