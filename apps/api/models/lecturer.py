"""Lecturer profile model."""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func
import uuid

from database import Base


class Lecturer(Base):
    __tablename__ = "lecturers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    nip = Column(String, nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    photo_url = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
