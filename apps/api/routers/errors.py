"""Translation of content-layer failures into HTTP errors."""

import logging

from fastapi import HTTPException

from content.errors import (
    CompressionTimeout,
    CorruptAsset,
    OversizedAsset,
    RecordNotFound,
    RemoteUnavailable,
)

logger = logging.getLogger(__name__)


def to_http_exception(exc: Exception, fallback_detail: str) -> HTTPException:
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, RecordNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, OversizedAsset):
        return HTTPException(status_code=413, detail=str(exc))
    if isinstance(exc, (CorruptAsset, ValueError)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, CompressionTimeout):
        return HTTPException(status_code=504, detail=str(exc))
    if isinstance(exc, RemoteUnavailable):
        logger.error("%s: %s", fallback_detail, exc)
        return HTTPException(status_code=503, detail="Content store is unavailable. Try again later.")
    logger.error("%s", fallback_detail, exc_info=exc)
    return HTTPException(status_code=500, detail=fallback_detail)
