"""
Temporary upload storage.

Multipart uploads are spooled to the upload directory under a unique name,
handed to the processing step by path, and deleted afterwards. Deletion is
best-effort: failures are logged, never retried.
"""

import os
import time
import random
import logging
from dataclasses import dataclass

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ..config import get_settings
from ..errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/jpg", "image/webp"})

_CHUNK_SIZE = 1024 * 1024


@dataclass
class UploadedFile:
    """One spooled upload; lives only as long as its request."""
    path: str
    original_name: str
    size: int
    mime_type: str


def _unique_filename(fieldname: str, original_name: str) -> str:
    _, ext = os.path.splitext(original_name or "")
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{fieldname}-{suffix}{ext.lower()}"


async def save_upload(upload: UploadFile | None, fieldname: str = "image") -> UploadedFile:
    """
    Validate and write an uploaded image to the upload directory.

    Raises:
        ValidationError: no file, disallowed MIME type, or file over the size
            limit. Nothing is left on disk when this is raised.
    """
    if upload is None or not upload.filename:
        raise ValidationError("No image provided")

    mime_type = (upload.content_type or "").lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError("Invalid file type. Only JPEG, PNG, JPG, and WEBP are allowed.")

    settings = get_settings()
    max_bytes = settings.upload_max_bytes
    os.makedirs(settings.upload_dir, exist_ok=True)
    path = os.path.join(settings.upload_dir, _unique_filename(fieldname, upload.filename))

    size = 0
    f = await run_in_threadpool(open, path, "wb")
    try:
        while True:
            chunk = await upload.read(_CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                raise ValidationError(
                    f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
                )
            await run_in_threadpool(f.write, chunk)
    except Exception:
        f.close()
        remove_quietly(path)
        raise
    f.close()

    logger.debug("[uploads] Spooled %s -> %s (%d bytes)", upload.filename, path, size)
    return UploadedFile(path=path, original_name=upload.filename, size=size, mime_type=mime_type)


def read_upload(uploaded: UploadedFile) -> bytes:
    """Read a spooled upload back into memory (blocking; run in the thread pool)."""
    with open(uploaded.path, "rb") as f:
        return f.read()


def remove_quietly(path: str | None) -> None:
    """Delete a temp file, logging (not raising) on failure."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error("[uploads] Failed to delete temp file %s: %s", path, e)
