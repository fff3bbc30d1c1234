"""
Staged upload files.

An uploaded image is copied into the upload directory under a unique name,
read back for the insert and then removed. Concurrent requests never share
a staged path.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MiB


class SetupError(RuntimeError):
    pass


class UploadTooLarge(RuntimeError):
    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"maxFileSize exceeded: image is larger than {max_bytes} bytes.")
        self.max_bytes = max_bytes


@dataclass(frozen=True)
class StagedFile:
    path: Path
    filename: str
    content_type: str | None
    size_bytes: int


def ensure_upload_dir(upload_dir: Path) -> Path:
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("upload_dir_create_failed path=%s error=%s", upload_dir, exc)
        raise SetupError(f"Could not create upload directory {upload_dir}: {exc}") from exc
    return upload_dir


def _staged_name(filename: str) -> str:
    # Keep the client's extension, never its name.
    ext = Path(filename).suffix.lower()
    if not ext.isascii() or len(ext) > 10:
        ext = ""
    return f"{uuid4().hex}{ext}"


async def stage_upload(upload: UploadFile, upload_dir: Path, max_bytes: int) -> StagedFile | None:
    """
    Copy an upload into `upload_dir`, enforcing `max_bytes`.

    Returns None when no bytes arrived (no file chosen, or an empty file).
    """
    filename = upload.filename or ""
    path = upload_dir / _staged_name(filename)
    size = 0

    try:
        with open(path, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadTooLarge(max_bytes)
                out.write(chunk)
    except BaseException:
        _remove_quietly(path)
        raise

    # Browsers send an empty part when no file is chosen; an empty file is no image either.
    if size == 0:
        _remove_quietly(path)
        return None

    return StagedFile(
        path=path,
        filename=filename,
        content_type=upload.content_type,
        size_bytes=size,
    )


def read_staged(staged: StagedFile) -> bytes:
    return staged.path.read_bytes()


def discard_staged(staged: StagedFile | None) -> None:
    """
    Delete a staged file. Failures are logged, never raised.
    """
    if staged is None:
        return
    _remove_quietly(staged.path)


def _remove_quietly(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        return
    except OSError:
        logger.exception("staged_file_cleanup_failed path=%s", path)
