"""Health check endpoints."""

from fastapi import APIRouter, Request, status
from fastapi.responses import ORJSONResponse

from src.config import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - checks if the application is running."""
    return {"status": "alive"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, str | bool] | ORJSONResponse:
    """Readiness probe - the document store must answer a ping."""
    settings = get_settings()
    store = getattr(request.app.state, "store", None)
    database_ok = store is not None and await store.ping()

    body: dict[str, str | bool] = {
        "status": "ready" if database_ok else "unavailable",
        "environment": settings.environment,
        "database": database_ok,
    }
    if not database_ok:
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body
        )
    return body


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
