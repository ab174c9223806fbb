"""Video document stored in the remote store."""

from sqlalchemy import BigInteger, Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base


class Video(Base):
    """Published gallery video. Ratings and comments live in child tables."""

    __tablename__ = "videos"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    source_link = Column(String, nullable=False)
    embed_url = Column(String, nullable=False)
    thumbnail = Column(Text, nullable=False, default="")
    caption = Column(Text, nullable=False, default="")
    created_at = Column(BigInteger, nullable=False, index=True)  # epoch millis
    view_count = Column(Integer, nullable=False, default=0)
    share_count = Column(Integer, nullable=False, default=0)
    uploaded_by = Column(JSON, nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    ratings = relationship("VideoRating", back_populates="video", order_by="VideoRating.id")
    comments = relationship("VideoComment", back_populates="video", order_by="VideoComment.id")
