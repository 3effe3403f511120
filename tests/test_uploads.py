"""Upload staging and size formatting tests."""

import io
from datetime import UTC, datetime

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from src.services.uploads import format_file_size, stage_upload, staged_filename


@pytest.mark.parametrize(
    ("num_bytes", "decimal", "expected"),
    [
        (0, 2, "0 Bytes"),
        (999, 2, "999 Bytes"),
        (1000, 2, "1 KB"),
        (1500, 2, "1.5 KB"),
        (2_345_678, 2, "2.35 MB"),
        (1_234_567, 1, "1.2 MB"),
        (1_234_567, 0, "1.23 MB"),
        (3_000_000_000, 2, "3 GB"),
    ],
)
def test_format_file_size(num_bytes, decimal, expected):
    assert format_file_size(num_bytes, decimal) == expected


def test_staged_filename():
    now = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)
    assert staged_filename("photo.png", now) == "2024-01-02T03-04-05.678Z-photo.png"


def test_staged_filename_strips_directories():
    now = datetime(2024, 1, 2, tzinfo=UTC)
    assert staged_filename("../../etc/evil.png", now).endswith("-evil.png")
    assert "/" not in staged_filename("../../etc/evil.png", now)


def make_upload(filename: str, content: bytes, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.asyncio
async def test_stage_upload_writes_image():
    staged = await stage_upload(make_upload("shelf.jpg", b"jpeg-bytes", "image/jpeg"))

    assert staged is not None
    assert staged.original_name == "shelf.jpg"
    assert staged.content_type == "image/jpeg"
    assert staged.size == len(b"jpeg-bytes")
    assert staged.path.read_bytes() == b"jpeg-bytes"
    staged.path.unlink()


@pytest.mark.asyncio
async def test_stage_upload_ignores_other_types():
    assert await stage_upload(make_upload("doc.pdf", b"%PDF", "application/pdf")) is None


@pytest.mark.asyncio
async def test_stage_upload_without_file():
    assert await stage_upload(None) is None
