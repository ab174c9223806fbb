"""Visitor comment appended to a video."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base


class VideoComment(Base):
    """One row per comment. `comment_id` is the client-visible identifier."""

    __tablename__ = "video_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(String, nullable=False, unique=True)
    video_id = Column(String, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    author = Column(String, nullable=False, default="Anonymous")
    reaction = Column(String, nullable=True)
    created_at = Column(BigInteger, nullable=False)

    video = relationship("Video", back_populates="comments")
