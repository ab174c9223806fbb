"""Single rating appended to a video."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base


class VideoRating(Base):
    """One row per rating; insertion order is the list order."""

    __tablename__ = "video_ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    video_id = Column(String, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Integer, nullable=False)
    created_at = Column(BigInteger, nullable=False)

    video = relationship("Video", back_populates="ratings")
