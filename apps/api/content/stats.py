"""Derived engagement metrics over video records."""

from typing import Any, Dict, List, Sequence

from content.models import VideoRecord


def average_rating(ratings: Sequence[int]) -> float:
    """Arithmetic mean rounded to one decimal place; 0 for no ratings."""
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings), 1)


def engagement_score(video: VideoRecord) -> int:
    # comments + shares
    return len(video.comments) + int(video.share_count or 0)


def most_engaged(videos: Sequence[VideoRecord], limit: int = 5) -> List[VideoRecord]:
    return sorted(videos, key=engagement_score, reverse=True)[: max(limit, 0)]


def most_viewed(videos: Sequence[VideoRecord], limit: int = 5) -> List[VideoRecord]:
    return sorted(videos, key=lambda video: int(video.view_count or 0), reverse=True)[: max(limit, 0)]


def summarize(videos: Sequence[VideoRecord]) -> Dict[str, Any]:
    """Collection-wide totals for the statistics dashboard."""
    all_ratings = [value for video in videos for value in video.ratings]
    return {
        "video_count": len(videos),
        "total_views": sum(int(video.view_count or 0) for video in videos),
        "total_shares": sum(int(video.share_count or 0) for video in videos),
        "total_comments": sum(len(video.comments) for video in videos),
        "total_ratings": len(all_ratings),
        "average_rating": average_rating(all_ratings),
    }
