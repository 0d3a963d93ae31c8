from fastapi import APIRouter, Depends

from fairshare.core.config import Settings
from fairshare.routers.deps import get_app_settings

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness check")
async def health(settings: Settings = Depends(get_app_settings)):
    return {"status": "ok", "environment": settings.environment}
