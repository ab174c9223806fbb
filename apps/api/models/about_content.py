"""Singleton about-page content."""

from sqlalchemy import BigInteger, Column, String, Text

from database import Base


ABOUT_CONTENT_ID = "about"


class AboutPageContent(Base):
    """Single row keyed by ABOUT_CONTENT_ID; edits overwrite it."""

    __tablename__ = "about_content"

    id = Column(String, primary_key=True, default=ABOUT_CONTENT_ID)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False, default="")
    contact_email = Column(String, nullable=True)
    updated_at = Column(BigInteger, nullable=False)
