"""
On-device JSON cache backend.

Each collection is one JSON file under the cache directory. Every operation
is a read-modify-write of the whole collection. Writers inside this process
are serialized by a lock; separate processes sharing the directory are not
coordinated, so this backend is only safe for a single session.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from content.errors import RecordNotFound
from content.models import (
    AboutContent,
    Comment,
    IMMUTABLE_FIELDS,
    INTERACTION_FIELDS,
    LecturerRecord,
    NewVideoRecord,
    VideoMetadataPatch,
    VideoRecord,
    new_id,
)
from content.seed import demo_videos
from services.content_store import ContentStore

logger = logging.getLogger(__name__)

VIDEOS_FILE = "videos.json"
LECTURERS_FILE = "lecturers.json"
ABOUT_FILE = "about.json"

_MISSING = object()


class LocalContentStore(ContentStore):
    name = "local"

    def __init__(self, cache_dir: str, seed_demo_data: bool = True, **kwargs: Any):
        super().__init__(**kwargs)
        self.cache_dir = Path(cache_dir)
        self.seed_demo_data = seed_demo_data
        self._lock = asyncio.Lock()

    # File I/O

    def _path(self, name: str) -> Path:
        return self.cache_dir / name

    def _read_json(self, name: str) -> Any:
        """Return parsed JSON, _MISSING when the file does not exist, or None if unreadable."""
        fp = self._path(name)
        if not fp.exists():
            return _MISSING
        try:
            with open(fp, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Local cache file %s is unreadable: %s", fp, exc)
            return None

    def _write_json(self, name: str, data: Any) -> None:
        fp = self._path(name)
        fp.parent.mkdir(parents=True, exist_ok=True)
        tmp = fp.with_suffix(fp.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp, fp)

    def _load_videos_sync(self) -> List[VideoRecord]:
        data = self._read_json(VIDEOS_FILE)
        if data is _MISSING:
            if not self.seed_demo_data:
                return []
            seeded = demo_videos()
            try:
                self._save_videos_sync(seeded)
            except OSError as exc:
                logger.warning("Could not persist demo videos to %s: %s", self.cache_dir, exc)
            else:
                logger.info("Seeded local cache with %d demo videos", len(seeded))
            return seeded
        if not isinstance(data, list):
            return []
        videos: List[VideoRecord] = []
        for item in data:
            try:
                videos.append(VideoRecord.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed cached video: %s", exc)
        return videos

    def _save_videos_sync(self, videos: List[VideoRecord]) -> None:
        self._write_json(VIDEOS_FILE, [video.model_dump(mode="json") for video in videos])

    def _load_lecturers_sync(self) -> List[LecturerRecord]:
        data = self._read_json(LECTURERS_FILE)
        if not isinstance(data, list):
            return []
        lecturers: List[LecturerRecord] = []
        for item in data:
            try:
                lecturers.append(LecturerRecord.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed cached lecturer: %s", exc)
        return lecturers

    def _save_lecturers_sync(self, lecturers: List[LecturerRecord]) -> None:
        self._write_json(LECTURERS_FILE, [lecturer.model_dump(mode="json") for lecturer in lecturers])

    async def _load_videos(self) -> List[VideoRecord]:
        return await asyncio.to_thread(self._load_videos_sync)

    async def _save_videos(self, videos: List[VideoRecord]) -> None:
        await asyncio.to_thread(self._save_videos_sync, videos)

    async def _mutate_video(self, video_id: str, change: Callable[[VideoRecord], VideoRecord]) -> None:
        async with self._lock:
            videos = await self._load_videos()
            for index, video in enumerate(videos):
                if video.id == video_id:
                    videos[index] = change(video)
                    break
            else:
                raise RecordNotFound("videos", video_id)
            await self._save_videos(videos)

    # Videos

    async def list_videos(self) -> List[VideoRecord]:
        async with self._lock:
            videos = await self._load_videos()
        return sorted(videos, key=lambda video: video.created_at, reverse=True)

    async def replace_videos(self, videos: List[VideoRecord]) -> None:
        """Overwrite the cached collection with a snapshot from elsewhere."""
        async with self._lock:
            await self._save_videos(list(videos))

    async def create_video(self, record: NewVideoRecord) -> VideoRecord:
        self._guard_image(record.thumbnail)
        video = VideoRecord(id=new_id(), **record.model_dump())
        async with self._lock:
            videos = await self._load_videos()
            await self._save_videos([video, *videos])
        return video

    async def update_video(self, video_id: str, patch: VideoMetadataPatch) -> None:
        self._guard_image(patch.thumbnail)
        updates = {
            field: getattr(patch, field)
            for field in patch.model_fields_set
            if getattr(patch, field) is not None
            and field not in INTERACTION_FIELDS
            and field not in IMMUTABLE_FIELDS
        }
        await self._mutate_video(video_id, lambda video: video.model_copy(update=updates))

    async def delete_video(self, video_id: str) -> None:
        async with self._lock:
            videos = await self._load_videos()
            await self._save_videos([video for video in videos if video.id != video_id])

    async def append_rating(self, video_id: str, value: int) -> None:
        await self._mutate_video(
            video_id,
            lambda video: video.model_copy(update={"ratings": [*video.ratings, value]}),
        )

    async def append_comment(self, video_id: str, comment: Comment) -> None:
        await self._mutate_video(
            video_id,
            lambda video: video.model_copy(update={"comments": [*video.comments, comment]}),
        )

    async def increment_view(self, video_id: str) -> None:
        await self._mutate_video(
            video_id,
            lambda video: video.model_copy(update={"view_count": video.view_count + 1}),
        )

    async def increment_share(self, video_id: str) -> None:
        await self._mutate_video(
            video_id,
            lambda video: video.model_copy(update={"share_count": video.share_count + 1}),
        )

    async def reset_all(self) -> int:
        cleared = {"view_count": 0, "share_count": 0, "ratings": [], "comments": []}
        async with self._lock:
            videos = await self._load_videos()
            await self._save_videos([video.model_copy(update=cleared) for video in videos])
        logger.info("Reset statistics on %d cached videos", len(videos))
        return len(videos)

    # Lecturers

    async def list_lecturers(self) -> List[LecturerRecord]:
        async with self._lock:
            return await asyncio.to_thread(self._load_lecturers_sync)

    async def create_lecturer(self, record: LecturerRecord) -> LecturerRecord:
        self._guard_image(record.photo_url)
        async with self._lock:
            lecturers = await asyncio.to_thread(self._load_lecturers_sync)
            await asyncio.to_thread(self._save_lecturers_sync, [*lecturers, record])
        return record

    async def update_lecturer(self, record: LecturerRecord) -> None:
        self._guard_image(record.photo_url)
        async with self._lock:
            lecturers = await asyncio.to_thread(self._load_lecturers_sync)
            index = _index_of(lecturers, record.id)
            if index is None:
                raise RecordNotFound("lecturers", record.id)
            lecturers[index] = record
            await asyncio.to_thread(self._save_lecturers_sync, lecturers)

    async def delete_lecturer(self, lecturer_id: str) -> None:
        async with self._lock:
            lecturers = await asyncio.to_thread(self._load_lecturers_sync)
            remaining = [lecturer for lecturer in lecturers if lecturer.id != lecturer_id]
            await asyncio.to_thread(self._save_lecturers_sync, remaining)

    # About page

    async def get_about(self) -> AboutContent:
        data = await asyncio.to_thread(self._read_json, ABOUT_FILE)
        if isinstance(data, dict):
            try:
                return AboutContent.model_validate(data)
            except ValidationError as exc:
                logger.warning("Cached about content is malformed: %s", exc)
        return AboutContent()

    async def save_about(self, content: AboutContent) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write_json, ABOUT_FILE, content.model_dump(mode="json"))


def _index_of(records: List[LecturerRecord], record_id: str) -> Optional[int]:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None
