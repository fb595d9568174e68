"""System endpoints for health checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..core.config import Settings
from ..core.dependencies import get_app_settings, get_storage
from ..storage import Storage

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/health", summary="Service health check")
async def health_check(
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> JSONResponse:
    """Check the health of the API and its database."""
    database_ok = storage.ping()
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if database_ok else "degraded",
            "database": "ok" if database_ok else "unavailable",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.APP_VERSION,
            "app_name": settings.APP_NAME,
        },
    )
