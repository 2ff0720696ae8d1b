"""Health check endpoint."""

from fastapi import APIRouter

from legal_rag.dependencies import SettingsDep
from legal_rag.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the API",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """Check API health and return status.

    Args:
        settings: Injected application settings.

    Returns:
        HealthResponse: Health status information.
    """
    return HealthResponse(
        status="healthy",
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )
