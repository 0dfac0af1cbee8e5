from fastapi import Header, HTTPException, Request, status

from app.orchestrator.orchestrator import DocumentOrchestrator

OWNER_HEADER = "X-Owner-Id"


def get_orchestrator(request: Request) -> DocumentOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return orchestrator


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str:
    """Owner identity as set by the authenticating gateway."""
    owner_id = (x_owner_id or "").strip()
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {OWNER_HEADER} header",
        )
    return owner_id
