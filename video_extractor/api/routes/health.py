"""
Health check endpoint.

Used by the container platform to know the process is alive. It does not
check Slack or FFmpeg: the Socket Mode connection reconnects on its own,
and a restart wouldn't fix a missing binary.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel

from ..dependencies import SettingsDep

router = APIRouter()


class HealthResponse(BaseModel):
    """Liveness response."""
    status: str
    service: str


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """Returns 200 while the process is running."""
    return HealthResponse(status="ok", service=settings.service_name)
