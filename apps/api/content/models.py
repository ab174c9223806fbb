"""
Content record schemas shared by both storage backends.
"""

import time
import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


INTERACTION_FIELDS = frozenset({"ratings", "comments", "view_count", "share_count"})
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


class Uploader(BaseModel):
    """Attribution for the account that published a video."""
    id: str
    name: str
    avatar: Optional[str] = None


class Comment(BaseModel):
    id: str = Field(default_factory=new_id)
    text: str
    author: str = "Anonymous"
    created_at: int = Field(default_factory=now_ms)
    reaction: Optional[str] = None


class NewVideoRecord(BaseModel):
    """Payload for publishing a video. Interaction fields always start empty."""
    title: str
    source_link: str
    embed_url: str
    thumbnail: str = ""
    caption: str = ""
    created_at: int = Field(default_factory=now_ms)
    uploaded_by: Optional[Uploader] = None


class VideoRecord(BaseModel):
    id: str
    title: str
    source_link: str
    embed_url: str
    thumbnail: str = ""
    caption: str = ""
    created_at: int = Field(default_factory=now_ms)
    ratings: List[int] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    view_count: int = 0
    share_count: int = 0
    uploaded_by: Optional[Uploader] = None


class VideoMetadataPatch(BaseModel):
    """
    Metadata-only edit. Interaction fields and immutable fields are not part
    of this shape, so stale values from a client are dropped on parse.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    source_link: Optional[str] = None
    embed_url: Optional[str] = None
    thumbnail: Optional[str] = None
    caption: Optional[str] = None
    uploaded_by: Optional[Uploader] = None


class LecturerRecord(BaseModel):
    """Teaching staff entry. NIP is the staff registration number."""
    id: str = Field(default_factory=new_id)
    name: str
    nip: str = ""
    bio: str = ""
    photo_url: str = ""


class AboutContent(BaseModel):
    title: str = "Digital Archive of Visual Works"
    body: str = (
        "An online exhibition space for documentary films produced by visual "
        "communication design students."
    )
    contact_email: Optional[str] = None
    updated_at: int = Field(default_factory=now_ms)
