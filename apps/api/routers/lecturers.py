"""Lecturer directory endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from content.models import LecturerRecord
from routers.auth_scope import AuthContext, get_auth_context
from routers.errors import to_http_exception
from services.persistence import PersistenceService, get_persistence_service

router = APIRouter()


class LecturerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    nip: str = Field(default="", max_length=64)
    bio: str = Field(default="", max_length=5000)
    photo_url: str = Field(min_length=1)


@router.get("/", response_model=List[LecturerRecord])
async def list_lecturers(service: PersistenceService = Depends(get_persistence_service)):
    return await service.list_lecturers()


@router.post("/", response_model=LecturerRecord)
async def create_lecturer(
    request: LecturerRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        return await service.create_lecturer(LecturerRecord(**request.model_dump()))
    except Exception as exc:
        raise to_http_exception(exc, "Failed to add lecturer.") from exc


@router.put("/{lecturer_id}", response_model=LecturerRecord)
async def replace_lecturer(
    lecturer_id: str,
    request: LecturerRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    """Overwrite a lecturer entry with the submitted fields."""
    record = LecturerRecord(id=lecturer_id, **request.model_dump())
    try:
        await service.update_lecturer(record)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to update lecturer.") from exc
    return record


@router.delete("/{lecturer_id}")
async def delete_lecturer(
    lecturer_id: str,
    auth: AuthContext = Depends(get_auth_context),
    service: PersistenceService = Depends(get_persistence_service),
):
    try:
        await service.delete_lecturer(lecturer_id)
    except Exception as exc:
        raise to_http_exception(exc, "Failed to delete lecturer.") from exc
    return {"status": "deleted", "lecturer_id": lecturer_id}
