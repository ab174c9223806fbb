"""Share-link normalization to embeddable playback URLs."""

from __future__ import annotations

import re
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit


DRIVE_FILE_ID_RE = re.compile(r"/d/([a-zA-Z0-9_-]+)")
VIDEO_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

DRIVE_PREVIEW_URL = "https://drive.google.com/file/d/{file_id}/preview"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"


def _split(link: str):
    if "://" not in link:
        link = f"https://{link}"
    try:
        return urlsplit(link)
    except ValueError:
        return None


def _youtube_video_id(link: str) -> str:
    parts = _split(link)
    if parts is None:
        return ""
    host = (parts.hostname or "").lower()
    if host.endswith("youtu.be"):
        return parts.path.strip("/").split("/", 1)[0]
    if host.endswith("youtube.com"):
        values = parse_qs(parts.query).get("v") or [""]
        return values[0].strip()
    return ""


def normalize_share_link(link: Any) -> Optional[str]:
    """
    Map a pasted Drive or YouTube share link to its embeddable URL.

    Returns None for anything unrecognized; never raises.
    """
    text = str(link or "").strip()
    if not text:
        return None

    match = DRIVE_FILE_ID_RE.search(text)
    if match:
        return DRIVE_PREVIEW_URL.format(file_id=match.group(1))

    lowered = text.lower()
    if "drive.google.com" in lowered and "preview" in lowered:
        return text

    if "youtube.com" in lowered or "youtu.be" in lowered:
        video_id = _youtube_video_id(text)
        if video_id and VIDEO_ID_RE.match(video_id):
            return YOUTUBE_EMBED_URL.format(video_id=video_id)
    return None
