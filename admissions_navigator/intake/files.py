"""Turn an academic-record image file into an inline payload."""

from __future__ import annotations

import base64
import os
from pathlib import Path
from typing import Optional

from .schemas import SUPPORTED_IMAGE_TYPES, ImagePayload


_EXTENSION_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


class UnsupportedImageError(ValueError):
    """Only PNG, JPG and WEBP files are accepted."""


def image_payload_from_bytes(data: bytes, mime_type: Optional[str]) -> ImagePayload:
    mime_type = (mime_type or "").split(";")[0].strip().lower()
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    if mime_type not in SUPPORTED_IMAGE_TYPES:
        raise UnsupportedImageError(f"Unsupported image type {mime_type or '(unknown)'!r}; use PNG, JPG or WEBP.")
    if not data:
        raise UnsupportedImageError("Image file is empty.")
    return ImagePayload(mime_type=mime_type, data=base64.b64encode(data).decode("ascii"))


def load_image_payload(path: str | os.PathLike) -> ImagePayload:
    path = Path(path)
    mime_type = _EXTENSION_TYPES.get(path.suffix.lower())
    if mime_type is None:
        raise UnsupportedImageError(f"Unsupported file extension {path.suffix!r}; use PNG, JPG or WEBP.")
    return image_payload_from_bytes(path.read_bytes(), mime_type)
