"""Administrative maintenance endpoints."""

import logging

from fastapi import APIRouter, Depends

from routers.auth_scope import AuthContext, get_auth_context
from routers.errors import to_http_exception
from services.persistence import PersistenceService, get_persistence_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/reset-statistics")
async def reset_statistics(
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Zero views and shares and clear ratings and comments on every video."""
    try:
        count = await service.reset_all()
    except Exception as exc:
        raise to_http_exception(exc, "Failed to reset statistics.") from exc
    logger.warning("Statistics reset on %d videos requested by %s", count, auth.user_id)
    return {"status": "reset", "video_count": count, "backend": service.mode}
