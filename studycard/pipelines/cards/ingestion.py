"""Upload ingestion helpers for card images."""

from __future__ import annotations

import mimetypes
from typing import Final

from fastapi import HTTPException, UploadFile, status

_ALLOWED_CONTENT_TYPES: Final[set[str]] = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
}


def resolve_image_content_type(image_file: UploadFile) -> str:
    """Accept common image uploads regardless of whether the client set a content-type."""

    content_type = image_file.content_type
    if (not content_type or content_type == "application/octet-stream") and image_file.filename:
        guessed_type, _ = mimetypes.guess_type(image_file.filename)
        content_type = guessed_type

    content_type = content_type or "image/jpeg"

    if content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only JPEG, PNG, WebP or GIF images are supported",
        )
    return content_type


async def read_image_bytes(image_file: UploadFile) -> bytes:
    """Load the upload fully into memory, rejecting empty payloads."""

    image_bytes = await image_file.read()
    await image_file.close()

    if not image_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded image file is empty",
        )
    return image_bytes


__all__ = ["resolve_image_content_type", "read_image_bytes"]
