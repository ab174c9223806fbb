"""Storage strategy interface shared by the local and remote backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from content.images import MAX_EMBEDDED_CHARS, ensure_within_ceiling
from content.models import (
    AboutContent,
    Comment,
    LecturerRecord,
    NewVideoRecord,
    VideoMetadataPatch,
    VideoRecord,
)


class ContentStore(ABC):
    """Operation set implemented by every storage backend."""

    name = "store"

    def __init__(self, max_embedded_chars: int = MAX_EMBEDDED_CHARS):
        self.max_embedded_chars = max_embedded_chars

    def _guard_image(self, embedded: str | None) -> None:
        ensure_within_ceiling(embedded, self.max_embedded_chars)

    # Videos

    @abstractmethod
    async def list_videos(self) -> List[VideoRecord]:
        """All videos, newest first."""

    @abstractmethod
    async def create_video(self, record: NewVideoRecord) -> VideoRecord:
        ...

    @abstractmethod
    async def update_video(self, video_id: str, patch: VideoMetadataPatch) -> None:
        """Apply a metadata-only partial update."""

    @abstractmethod
    async def delete_video(self, video_id: str) -> None:
        ...

    @abstractmethod
    async def append_rating(self, video_id: str, value: int) -> None:
        ...

    @abstractmethod
    async def append_comment(self, video_id: str, comment: Comment) -> None:
        ...

    @abstractmethod
    async def increment_view(self, video_id: str) -> None:
        ...

    @abstractmethod
    async def increment_share(self, video_id: str) -> None:
        ...

    @abstractmethod
    async def reset_all(self) -> int:
        """Zero counters and clear ratings/comments on every video. Returns the video count."""

    # Lecturers

    @abstractmethod
    async def list_lecturers(self) -> List[LecturerRecord]:
        ...

    @abstractmethod
    async def create_lecturer(self, record: LecturerRecord) -> LecturerRecord:
        ...

    @abstractmethod
    async def update_lecturer(self, record: LecturerRecord) -> None:
        """Overwrite the stored lecturer with `record`."""

    @abstractmethod
    async def delete_lecturer(self, lecturer_id: str) -> None:
        ...

    # About page

    @abstractmethod
    async def get_about(self) -> AboutContent:
        ...

    @abstractmethod
    async def save_about(self, content: AboutContent) -> None:
        ...
