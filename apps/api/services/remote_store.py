"""
Remote document store backend (async SQLAlchemy).

One row per video/lecturer plus a singleton about row. Ratings and comments
are stored as child rows, so concurrent appends from different writers are
independent inserts and both survive. Counters are bumped with an in-place
`SET x = x + 1`, which needs no prior read and commutes under concurrency.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from content.errors import RecordNotFound, RemoteUnavailable
from content.models import (
    AboutContent,
    Comment,
    IMMUTABLE_FIELDS,
    INTERACTION_FIELDS,
    LecturerRecord,
    NewVideoRecord,
    VideoMetadataPatch,
    VideoRecord,
    now_ms,
)
from content.sanitize import sanitize, sanitize_record
from models.about_content import ABOUT_CONTENT_ID, AboutPageContent
from models.lecturer import Lecturer
from models.video import Video
from models.video_comment import VideoComment
from models.video_rating import VideoRating
from services.content_store import ContentStore

logger = logging.getLogger(__name__)


def _to_record(video: Video) -> VideoRecord:
    return VideoRecord(
        id=video.id,
        title=video.title,
        source_link=video.source_link,
        embed_url=video.embed_url,
        thumbnail=video.thumbnail or "",
        caption=video.caption or "",
        created_at=int(video.created_at or 0),
        ratings=[rating.value for rating in video.ratings],
        comments=[
            Comment(
                id=comment.comment_id,
                text=comment.text,
                author=comment.author or "Anonymous",
                created_at=int(comment.created_at or 0),
                reaction=comment.reaction,
            )
            for comment in video.comments
        ],
        view_count=int(video.view_count or 0),
        share_count=int(video.share_count or 0),
        uploaded_by=video.uploaded_by,
    )


def _to_lecturer(row: Lecturer) -> LecturerRecord:
    return LecturerRecord(
        id=row.id,
        name=row.name,
        nip=row.nip or "",
        bio=row.bio or "",
        photo_url=row.photo_url or "",
    )


class RemoteContentStore(ContentStore):
    name = "remote"

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], **kwargs):
        super().__init__(**kwargs)
        self._session_maker = session_maker

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_maker() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            raise RemoteUnavailable(f"Remote store request failed: {exc}") from exc

    async def ping(self) -> None:
        """Round-trip a trivial query; raises RemoteUnavailable when unreachable."""
        async with self._session() as session:
            await session.execute(text("SELECT 1"))

    async def _require_video(self, session: AsyncSession, video_id: str) -> None:
        found = await session.scalar(select(Video.id).where(Video.id == video_id))
        if found is None:
            raise RecordNotFound("videos", video_id)

    async def _increment(self, video_id: str, column) -> None:
        async with self._session() as session:
            result = await session.execute(
                update(Video)
                .where(Video.id == video_id)
                .values({column: column + 1})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise RecordNotFound("videos", video_id)
            await session.commit()

    # Videos

    async def list_videos(self) -> List[VideoRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(Video)
                .options(selectinload(Video.ratings), selectinload(Video.comments))
                .order_by(Video.created_at.desc())
            )
            return [_to_record(video) for video in result.scalars().all()]

    async def create_video(self, record: NewVideoRecord) -> VideoRecord:
        self._guard_image(record.thumbnail)
        payload = sanitize_record(record)
        async with self._session() as session:
            video = Video(**payload)
            session.add(video)
            await session.commit()
            video_id = video.id
        logger.info("Created remote video %s", video_id)
        return VideoRecord(id=video_id, **record.model_dump())

    async def update_video(self, video_id: str, patch: VideoMetadataPatch) -> None:
        self._guard_image(patch.thumbnail)
        payload = {
            key: value
            for key, value in sanitize(patch.model_dump(exclude_unset=True)).items()
            if key not in INTERACTION_FIELDS and key not in IMMUTABLE_FIELDS
        }
        async with self._session() as session:
            if not payload:
                await self._require_video(session, video_id)
                return
            result = await session.execute(
                update(Video)
                .where(Video.id == video_id)
                .values(**payload)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise RecordNotFound("videos", video_id)
            await session.commit()

    async def delete_video(self, video_id: str) -> None:
        async with self._session() as session:
            await session.execute(delete(VideoRating).where(VideoRating.video_id == video_id))
            await session.execute(delete(VideoComment).where(VideoComment.video_id == video_id))
            await session.execute(delete(Video).where(Video.id == video_id))
            await session.commit()

    async def append_rating(self, video_id: str, value: int) -> None:
        async with self._session() as session:
            await self._require_video(session, video_id)
            session.add(VideoRating(video_id=video_id, value=value, created_at=now_ms()))
            await session.commit()

    async def append_comment(self, video_id: str, comment: Comment) -> None:
        payload = sanitize_record(comment)
        async with self._session() as session:
            await self._require_video(session, video_id)
            session.add(
                VideoComment(
                    comment_id=payload["id"],
                    video_id=video_id,
                    text=payload["text"],
                    author=payload.get("author", "Anonymous"),
                    reaction=payload.get("reaction"),
                    created_at=payload["created_at"],
                )
            )
            await session.commit()

    async def increment_view(self, video_id: str) -> None:
        await self._increment(video_id, Video.view_count)

    async def increment_share(self, video_id: str) -> None:
        await self._increment(video_id, Video.share_count)

    async def reset_all(self) -> int:
        # Single transaction: readers see either the old state or the fully reset one.
        async with self._session() as session:
            count = await session.scalar(select(func.count()).select_from(Video))
            await session.execute(delete(VideoRating))
            await session.execute(delete(VideoComment))
            await session.execute(
                update(Video)
                .values(view_count=0, share_count=0)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        logger.info("Reset statistics on %d remote videos", count or 0)
        return int(count or 0)

    # Lecturers

    async def list_lecturers(self) -> List[LecturerRecord]:
        async with self._session() as session:
            result = await session.execute(select(Lecturer).order_by(Lecturer.created_at, Lecturer.id))
            return [_to_lecturer(row) for row in result.scalars().all()]

    async def create_lecturer(self, record: LecturerRecord) -> LecturerRecord:
        self._guard_image(record.photo_url)
        payload = sanitize_record(record, exclude={"id"})
        async with self._session() as session:
            row = Lecturer(**payload)
            session.add(row)
            await session.commit()
            return record.model_copy(update={"id": row.id})

    async def update_lecturer(self, record: LecturerRecord) -> None:
        self._guard_image(record.photo_url)
        payload = sanitize_record(record, exclude={"id"})
        async with self._session() as session:
            result = await session.execute(
                update(Lecturer)
                .where(Lecturer.id == record.id)
                .values(**payload)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise RecordNotFound("lecturers", record.id)
            await session.commit()

    async def delete_lecturer(self, lecturer_id: str) -> None:
        async with self._session() as session:
            await session.execute(delete(Lecturer).where(Lecturer.id == lecturer_id))
            await session.commit()

    # About page

    async def get_about(self) -> AboutContent:
        async with self._session() as session:
            row = await session.get(AboutPageContent, ABOUT_CONTENT_ID)
            if row is None:
                return AboutContent()
            return AboutContent(
                title=row.title,
                body=row.body or "",
                contact_email=row.contact_email,
                updated_at=int(row.updated_at or 0),
            )

    async def save_about(self, content: AboutContent) -> None:
        payload = sanitize_record(content)
        async with self._session() as session:
            row = await session.get(AboutPageContent, ABOUT_CONTENT_ID)
            if row is None:
                row = AboutPageContent(id=ABOUT_CONTENT_ID)
                session.add(row)
            row.title = payload["title"]
            row.body = payload.get("body", "")
            row.contact_email = payload.get("contact_email")
            row.updated_at = payload.get("updated_at", now_ms())
            await session.commit()
