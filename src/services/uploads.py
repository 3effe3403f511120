"""Local staging of uploaded product images."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import anyio
from fastapi import UploadFile

from src.config import get_settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpg", "image/jpeg"}

SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "YB", "ZB"]


@dataclass
class StagedUpload:
    """An uploaded file written to the local staging directory."""

    path: Path
    original_name: str
    content_type: str
    size: int


def format_file_size(num_bytes: int, decimal: int | None = 2) -> str:
    """Human-readable size in base-1000 units, e.g. ``1.5 KB``.

    A precision of 0 or None falls back to 2 decimal places. Trailing zeros
    are trimmed.
    """
    if num_bytes == 0:
        return "0 Bytes"
    places = decimal or 2
    index = min(int(math.floor(math.log(num_bytes) / math.log(1000))), len(SIZE_UNITS) - 1)
    value = f"{num_bytes / 1000**index:.{places}f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[index]}"


def staged_filename(original_name: str, now: datetime | None = None) -> str:
    """Timestamp-prefixed file name safe for the staging directory."""
    timestamp = (now or datetime.now(UTC)).isoformat(timespec="milliseconds")
    timestamp = timestamp.replace("+00:00", "Z").replace(":", "-")
    return f"{timestamp}-{Path(original_name).name}"


async def stage_upload(file: UploadFile | None) -> StagedUpload | None:
    """Write an accepted image upload to disk.

    Returns None when there is no file or its type is not an accepted image;
    such uploads are ignored rather than rejected.
    """
    if file is None or not file.filename:
        return None
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        logger.info(f"Ignoring upload {file.filename} with type {file.content_type}")
        return None

    upload_dir = Path(get_settings().upload_dir)
    await anyio.Path(upload_dir).mkdir(parents=True, exist_ok=True)

    data = await file.read()
    path = upload_dir / staged_filename(file.filename)
    await anyio.Path(path).write_bytes(data)

    return StagedUpload(
        path=path,
        original_name=file.filename,
        content_type=file.content_type,
        size=len(data),
    )
