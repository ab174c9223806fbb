"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import redis.asyncio as redis

from config import remote_store_configured, settings
from services.persistence import PersistenceService, get_persistence_service

router = APIRouter()


@router.get("/health")
async def health_check(service: PersistenceService = Depends(get_persistence_service)):
    """
    Health check endpoint.
    Reports which content backend is active and whether it answers.
    """
    health_status = {
        "status": "healthy",
        "api": "up",
        "backend": service.mode,
        "remote_store": "not_configured",
        "redis": "unknown",
    }

    if service.remote is not None:
        try:
            await service.remote.ping()
            health_status["remote_store"] = "up"
        except Exception as e:
            health_status["remote_store"] = f"down: {str(e)}"
            health_status["status"] = "degraded"
    elif remote_store_configured():
        health_status["remote_store"] = "init_failed"
        health_status["status"] = "degraded"

    try:
        r = redis.from_url(settings.REDIS_URL)
        await r.ping()
        await r.aclose()
        health_status["redis"] = "up"
    except Exception as e:
        health_status["redis"] = f"down: {str(e)}"

    return health_status


@router.get("/health/ready")
async def readiness_check(service: PersistenceService = Depends(get_persistence_service)):
    """Kubernetes-style readiness probe."""
    if remote_store_configured() and service.remote is None:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "backend": service.mode, "reason": "remote store failed to initialize"},
        )
    return {"ready": True, "backend": service.mode}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}
