"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from lane_notifier.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness check.

    Never touches Docker, Lane or object storage.

    Returns:
        Healthy status with the current time.
    """
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc))
