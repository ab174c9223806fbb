"""Models package."""

from .video import Video
from .video_rating import VideoRating
from .video_comment import VideoComment
from .lecturer import Lecturer
from .about_content import AboutPageContent
