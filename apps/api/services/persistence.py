"""
Persistence router for gallery content.

The backend is chosen once at startup: the remote store when it is configured
and reachable, otherwise the local cache. Reads from the remote store fall
back to the local snapshot on any failure; writes never fall back, so a
failed remote mutation always reaches the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from config import Settings, remote_store_configured, settings as app_settings
from content.models import (
    AboutContent,
    Comment,
    LecturerRecord,
    NewVideoRecord,
    VideoMetadataPatch,
    VideoRecord,
)
from database import Base, create_engine_for, create_session_maker
from services.content_store import ContentStore
from services.local_store import LocalContentStore
from services.remote_store import RemoteContentStore

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class StoreConfig:
    """Explicit backend configuration, resolved once from settings."""
    database_url: str
    local_cache_dir: str
    max_embedded_chars: int
    mirror_remote_reads: bool = True
    auto_create_schema: bool = True

    @property
    def remote_configured(self) -> bool:
        return remote_store_configured(self.database_url)

    @classmethod
    def from_settings(cls, source: Settings) -> "StoreConfig":
        return cls(
            database_url=source.DATABASE_URL,
            local_cache_dir=source.LOCAL_CACHE_DIR,
            max_embedded_chars=source.THUMBNAIL_MAX_CHARS,
            mirror_remote_reads=source.MIRROR_REMOTE_READS,
            auto_create_schema=source.AUTO_CREATE_DB_SCHEMA,
        )


class PersistenceService:
    """Routes content operations to the backend selected at startup."""

    def __init__(
        self,
        local: LocalContentStore,
        remote: Optional[ContentStore] = None,
        mirror_remote_reads: bool = False,
        engine: Optional[AsyncEngine] = None,
    ):
        self.local = local
        self.remote = remote
        self.mirror_remote_reads = mirror_remote_reads
        self._engine = engine

    @property
    def backend(self) -> ContentStore:
        return self.remote if self.remote is not None else self.local

    @property
    def mode(self) -> str:
        return self.backend.name

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    # Reads

    async def list(self) -> List[VideoRecord]:
        if self.remote is None:
            return await self.local.list_videos()
        try:
            videos = await self.remote.list_videos()
        except Exception:
            logger.exception("Remote video list failed; serving local cache snapshot")
            return await self.local.list_videos()
        if self.mirror_remote_reads:
            try:
                await self.local.replace_videos(videos)
            except OSError as exc:
                logger.warning("Could not mirror remote snapshot to local cache: %s", exc)
        return videos

    async def list_lecturers(self) -> List[LecturerRecord]:
        if self.remote is None:
            return await self.local.list_lecturers()
        try:
            return await self.remote.list_lecturers()
        except Exception:
            logger.exception("Remote lecturer list failed; serving local cache snapshot")
            return await self.local.list_lecturers()

    async def get_about(self) -> AboutContent:
        if self.remote is None:
            return await self.local.get_about()
        try:
            return await self.remote.get_about()
        except Exception:
            logger.exception("Remote about content read failed; serving local cache snapshot")
            return await self.local.get_about()

    # Writes

    async def create(self, record: NewVideoRecord) -> VideoRecord:
        return await self.backend.create_video(record)

    async def update(self, video_id: str, patch: VideoMetadataPatch) -> None:
        await self.backend.update_video(video_id, patch)

    async def delete(self, video_id: str) -> None:
        await self.backend.delete_video(video_id)

    async def append_rating(self, video_id: str, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            raise ValueError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}.")
        await self.backend.append_rating(video_id, value)

    async def append_comment(
        self,
        video_id: str,
        text: str,
        author: Optional[str] = None,
        reaction: Optional[str] = None,
    ) -> Comment:
        body = (text or "").strip()
        if not body:
            raise ValueError("Comment text is required.")
        comment = Comment(text=body, author=(author or "").strip() or "Anonymous", reaction=reaction or None)
        await self.backend.append_comment(video_id, comment)
        return comment

    async def increment_view(self, video_id: str) -> None:
        await self.backend.increment_view(video_id)

    async def increment_share(self, video_id: str) -> None:
        await self.backend.increment_share(video_id)

    async def reset_all(self) -> int:
        count = await self.backend.reset_all()
        logger.info("Statistics reset on %d videos (%s backend)", count, self.mode)
        return count

    async def create_lecturer(self, record: LecturerRecord) -> LecturerRecord:
        return await self.backend.create_lecturer(record)

    async def update_lecturer(self, record: LecturerRecord) -> None:
        await self.backend.update_lecturer(record)

    async def delete_lecturer(self, lecturer_id: str) -> None:
        await self.backend.delete_lecturer(lecturer_id)

    async def save_about(self, content: AboutContent) -> None:
        await self.backend.save_about(content)


async def build_persistence_service(config: StoreConfig) -> PersistenceService:
    """Select the backend once: remote if configured and reachable, else local."""
    local = LocalContentStore(config.local_cache_dir, max_embedded_chars=config.max_embedded_chars)
    if not config.remote_configured:
        logger.warning("No remote store configured; running on the local cache only.")
        return PersistenceService(local)

    engine = create_engine_for(config.database_url)
    remote = RemoteContentStore(create_session_maker(engine), max_embedded_chars=config.max_embedded_chars)
    try:
        if config.auto_create_schema:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        await remote.ping()
    except Exception as exc:
        logger.error("Remote store initialization failed, using local cache: %s", exc)
        await engine.dispose()
        return PersistenceService(local)

    logger.info("Remote store initialized.")
    return PersistenceService(
        local,
        remote=remote,
        mirror_remote_reads=config.mirror_remote_reads,
        engine=engine,
    )


def get_persistence_service(request: Request) -> PersistenceService:
    """FastAPI dependency returning the service built during app startup."""
    service = getattr(request.app.state, "persistence", None)
    if service is None:
        config = StoreConfig.from_settings(app_settings)
        service = PersistenceService(
            LocalContentStore(config.local_cache_dir, max_embedded_chars=config.max_embedded_chars)
        )
        request.app.state.persistence = service
    return service
