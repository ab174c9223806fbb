"""Routers package."""

from . import (
    health,
    auth,
    videos,
    lecturers,
    about,
    admin,
    media,
)
