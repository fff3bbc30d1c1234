"""
FastAPI router for school endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from core.db import Database, get_database
from core.settings import Settings, get_settings

from . import schemas
from . import service

router = APIRouter()


@router.post(
    "/addSchool",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SchoolCreatedResponse,
)
async def add_school(
    request: Request,
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> schemas.SchoolCreatedResponse:
    """
    Register a school from a multipart form.

    Fields: name, address, city, state, contact, email_id, image (file).
    """
    upload_dir = service.prepare_upload_dir(settings)

    # Parse manually: missing fields are reported together with the other
    # validation messages instead of as a framework 422.
    form = await request.form()
    try:
        return await service.register_school(form, db=db, settings=settings, upload_dir=upload_dir)
    finally:
        await form.close()


@router.get("/showSchools", response_model=list[schemas.SchoolListItem])
async def show_schools(
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> list[schemas.SchoolListItem]:
    """
    List every school with its image as a data URI.
    """
    return await service.list_schools(db=db, settings=settings)
