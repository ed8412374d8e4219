"""Image intake for document analysis.

Reads still images, identifies their MIME type with Pillow and turns raw bytes
into the inline ``image_url`` content block the chat model accepts.
"""

import asyncio
import base64
import io
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from appphoto_ai.errors import InvalidImageError


def is_image_mime(mime_type: str | None) -> bool:
    """Check if a declared MIME type names an image."""
    return bool(mime_type) and mime_type.lower().startswith("image/")


def detect_image_mime(data: bytes) -> str | None:
    """Identify the MIME type of an image payload.

    Args:
        data: Raw file bytes

    Returns:
        MIME type such as ``image/png``, or None if Pillow cannot read the bytes
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
    except (UnidentifiedImageError, OSError):
        return None
    if not image_format:
        return None
    return Image.MIME.get(image_format.upper())


async def read_image_file(path: Path) -> tuple[bytes, str]:
    """Read an image from disk without blocking the event loop.

    Args:
        path: Path to the image file

    Returns:
        Tuple of (bytes, MIME type)

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidImageError: If the file is not a readable image
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    data = await asyncio.to_thread(path.read_bytes)
    mime_type = detect_image_mime(data)
    if not mime_type:
        raise InvalidImageError(f"Not a supported image file: {path.name}")
    return data, mime_type


async def encode_image_part(image: bytes, mime_type: str) -> dict[str, Any]:
    """Encode image bytes as an inline ``image_url`` content block.

    The payload is base64-encoded off the event loop; large scans take a
    noticeable moment to encode.

    Args:
        image: Raw image bytes, forwarded without validation
        mime_type: Declared MIME type of the bytes

    Returns:
        Content block with a ``data:`` URI
    """
    encoded = await asyncio.to_thread(base64.b64encode, image)
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{mime_type};base64,{encoded.decode('ascii')}"},
    }
