from fastapi import APIRouter

from app.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Service health status")
def read_health() -> HealthResponse:
    return HealthResponse(status="ok")
