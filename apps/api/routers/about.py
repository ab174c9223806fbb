"""About page content endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from content.models import AboutContent
from routers.auth_scope import AuthContext, get_auth_context
from routers.errors import to_http_exception
from services.persistence import PersistenceService, get_persistence_service

router = APIRouter()


class AboutRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    body: str = Field(default="", max_length=20000)
    contact_email: Optional[str] = Field(default=None, max_length=320)


@router.get("/", response_model=AboutContent)
async def get_about(service: PersistenceService = Depends(get_persistence_service)):
    return await service.get_about()


@router.put("/", response_model=AboutContent)
async def save_about(
    request: AboutRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Replace the about page content."""
    content = AboutContent(**request.model_dump())
    try:
        await service.save_about(content)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to save about content.") from exc
    return content
