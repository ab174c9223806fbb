"""
Video gallery endpoints: listing, publishing, metadata edits and visitor
interactions (ratings, comments, view and share counters).
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from content.links import normalize_share_link
from content.models import Comment, NewVideoRecord, VideoMetadataPatch, VideoRecord
from content.stats import average_rating, most_engaged, most_viewed, summarize
from routers.auth_scope import AuthContext, get_auth_context
from routers.errors import to_http_exception
from routers.rate_limit import rate_limit
from services.persistence import PersistenceService, get_persistence_service

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateVideoRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    source_link: str = Field(min_length=1, max_length=2000)
    caption: str = Field(default="", max_length=5000)
    thumbnail: str = ""


class UpdateVideoRequest(BaseModel):
    # Interaction fields sent by stale clients are ignored.
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    source_link: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    caption: Optional[str] = Field(default=None, max_length=5000)
    thumbnail: Optional[str] = None


class RatingRequest(BaseModel):
    value: int = Field(ge=1, le=5)


class CommentRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)
    author: Optional[str] = Field(default=None, max_length=120)
    reaction: Optional[str] = Field(default=None, max_length=16)


class VideoResponse(VideoRecord):
    average_rating: float = 0


def _serialize_video(video: VideoRecord) -> VideoResponse:
    return VideoResponse(**video.model_dump(), average_rating=average_rating(video.ratings))


def _ranking_entry(video: VideoRecord) -> Dict[str, Any]:
    return {
        "id": video.id,
        "title": video.title,
        "view_count": video.view_count,
        "share_count": video.share_count,
        "comment_count": len(video.comments),
        "average_rating": average_rating(video.ratings),
    }


def _embed_url_or_422(source_link: str) -> str:
    embed_url = normalize_share_link(source_link)
    if embed_url is None:
        raise HTTPException(
            status_code=422,
            detail="Unrecognized share link. Paste a Google Drive or YouTube link.",
        )
    return embed_url


@router.get("/", response_model=List[VideoResponse])
async def list_videos(service: PersistenceService = Depends(get_persistence_service)):
    """All videos, newest first."""
    videos = await service.list()
    return [_serialize_video(video) for video in videos]


@router.get("/stats")
async def video_statistics(
    limit: int = 5,
    service: PersistenceService = Depends(get_persistence_service),
):
    """Engagement and view rankings for the statistics dashboard."""
    videos = await service.list()
    limit = max(1, min(limit, 50))
    return {
        "summary": summarize(videos),
        "most_engaged": [_ranking_entry(video) for video in most_engaged(videos, limit)],
        "most_viewed": [_ranking_entry(video) for video in most_viewed(videos, limit)],
    }


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(video_id: str, service: PersistenceService = Depends(get_persistence_service)):
    for video in await service.list():
        if video.id == video_id:
            return _serialize_video(video)
    raise HTTPException(status_code=404, detail="Video not found")


@router.post("/", response_model=VideoResponse)
async def create_video(
    request: CreateVideoRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Publish a video on behalf of the authenticated uploader."""
    embed_url = _embed_url_or_422(request.source_link)
    record = NewVideoRecord(
        title=request.title.strip(),
        source_link=request.source_link.strip(),
        embed_url=embed_url,
        thumbnail=request.thumbnail,
        caption=request.caption,
        uploaded_by=auth.as_uploader(),
    )
    try:
        video = await service.create(record)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to publish video.") from exc
    logger.info("Video %s published by %s", video.id, auth.user_id)
    return _serialize_video(video)


@router.patch("/{video_id}")
async def update_video(
    video_id: str,
    request: UpdateVideoRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Edit title, caption, link or thumbnail. Ratings, comments and counters are untouched."""
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if "source_link" in changes:
        changes["embed_url"] = _embed_url_or_422(changes["source_link"])
    patch = VideoMetadataPatch(**changes)
    try:
        await service.update(video_id, patch)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to update video.") from exc
    return {"status": "updated", "video_id": video_id}


@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        await service.delete(video_id)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to delete video.") from exc
    logger.info("Video %s deleted by %s", video_id, auth.user_id)
    return {"status": "deleted", "video_id": video_id}


@router.post("/{video_id}/ratings")
async def rate_video(
    video_id: str,
    request: RatingRequest,
    _rate_limit: None = Depends(rate_limit("rating", limit=10, window_seconds=3600)),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        await service.append_rating(video_id, request.value)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to save rating.") from exc
    return {"status": "ok", "video_id": video_id}


@router.post("/{video_id}/comments", response_model=Comment)
async def comment_on_video(
    video_id: str,
    request: CommentRequest,
    _rate_limit: None = Depends(rate_limit("comment", limit=20, window_seconds=3600)),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        return await service.append_comment(video_id, request.text, request.author, request.reaction)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to save comment.") from exc


@router.post("/{video_id}/views")
async def record_view(
    video_id: str,
    _rate_limit: None = Depends(rate_limit("view", limit=120, window_seconds=3600)),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        await service.increment_view(video_id)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to record view.") from exc
    return {"status": "ok", "video_id": video_id}


@router.post("/{video_id}/shares")
async def record_share(
    video_id: str,
    _rate_limit: None = Depends(rate_limit("share", limit=60, window_seconds=3600)),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        await service.increment_share(video_id)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to record share.") from exc
    return {"status": "ok", "video_id": video_id}
