"""Thumbnail compression and share-link preview endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from config import settings
from content.images import compress_image, ensure_within_ceiling
from content.links import normalize_share_link
from routers.auth_scope import AuthContext, get_auth_context
from routers.errors import to_http_exception

router = APIRouter()


@router.post("/thumbnail")
async def compress_thumbnail(
    file: UploadFile = File(...),
    auth: AuthContext = Depends(get_auth_context),
):
    """Compress an uploaded image into an embedded JPEG that fits on a record."""
    raw = await file.read()
    try:
        thumbnail = await compress_image(
            raw,
            max_width=settings.IMAGE_MAX_WIDTH,
            quality=settings.IMAGE_JPEG_QUALITY,
            timeout_seconds=settings.IMAGE_TIMEOUT_SECONDS,
        )
        ensure_within_ceiling(thumbnail, settings.THUMBNAIL_MAX_CHARS)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to process image.") from exc
    return {
        "thumbnail": thumbnail,
        "size": len(thumbnail),
        "original_size": len(raw),
        "filename": file.filename,
    }


@router.get("/normalize-link")
async def normalize_link(url: str):
    """Preview the embeddable URL for a pasted share link (null when unrecognized)."""
    embed_url = normalize_share_link(url)
    return {"url": url, "embed_url": embed_url, "valid": embed_url is not None}
