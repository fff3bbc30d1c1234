"""
Schools "service layer".

This file holds the intake and listing flows, independent of FastAPI routing:
- Stage the uploaded image with a size limit
- Validate the submitted fields
- Insert / list rows and shape the responses
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from starlette.datastructures import FormData, UploadFile

from core import errors
from core.db import Database
from core.settings import Settings

from . import images, repository, schemas, staging, validation

logger = logging.getLogger(__name__)


def prepare_upload_dir(settings: Settings) -> Path:
    """
    Make sure the staging directory exists before the body is parsed.
    """
    try:
        return staging.ensure_upload_dir(settings.upload_dir)
    except staging.SetupError as exc:
        raise errors.setup_failed(exc) from exc


def first_values(form: FormData) -> dict[str, Any]:
    """
    Collapse repeated form keys to their first value.
    """
    return {key: form.getlist(key)[0] for key in form.keys()}


async def _stage_image(value: Any, upload_dir: Path, max_bytes: int) -> staging.StagedFile | None:
    # A plain string under "image" means no file was attached.
    if not isinstance(value, UploadFile):
        return None
    try:
        return await staging.stage_upload(value, upload_dir, max_bytes)
    except staging.UploadTooLarge as exc:
        logger.info("school_upload_rejected max_bytes=%s", exc.max_bytes)
        raise errors.upload_rejected(str(exc)) from exc


async def register_school(
    form: FormData,
    *,
    db: Database,
    settings: Settings,
    upload_dir: Path,
) -> schemas.SchoolCreatedResponse:
    """
    Stage, validate and insert one school submission.

    The staged file is removed on every path; removal problems are only logged.
    """
    fields = first_values(form)
    staged: staging.StagedFile | None = None

    try:
        staged = await _stage_image(fields.get("image"), upload_dir, settings.max_image_bytes)

        result = validation.validate_intake(fields, staged)
        if isinstance(result, validation.InvalidIntake):
            logger.info("school_validation_failed violations=%s", len(result.violations))
            raise errors.validation_failed(list(result.violations))

        image_bytes = staging.read_staged(result.image)
        school_id = await repository.insert_school(
            db,
            name=result.name,
            address=result.address,
            city=result.city,
            state=result.state,
            contact=result.contact,
            email_id=result.email_id,
            image=image_bytes,
        )
    except errors.ApiError:
        raise
    except Exception as exc:
        logger.exception("school_insert_failed")
        raise errors.internal_error(exc, settings) from exc
    finally:
        staging.discard_staged(staged)

    logger.info(
        "school_created id=%s filename=%s content_type=%s image_bytes=%s",
        school_id,
        result.image.filename,
        result.image.content_type,
        len(image_bytes),
    )
    return schemas.SchoolCreatedResponse(id=school_id)


def _to_list_item(row: dict[str, Any]) -> schemas.SchoolListItem:
    return schemas.SchoolListItem(
        id=int(row["id"]),
        name=str(row["name"]),
        address=str(row["address"]),
        city=str(row["city"]),
        state=row.get("state"),
        image=images.image_field(row.get("image")),
    )


async def list_schools(*, db: Database, settings: Settings) -> list[schemas.SchoolListItem]:
    try:
        rows = await repository.list_schools(db)
    except Exception as exc:
        logger.exception("school_list_failed")
        raise errors.internal_error(exc, settings) from exc

    return [_to_list_item(row) for row in rows]
