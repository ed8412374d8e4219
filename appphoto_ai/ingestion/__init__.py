"""Image intake helpers."""

from appphoto_ai.ingestion.images import (
    detect_image_mime,
    encode_image_part,
    is_image_mime,
    read_image_file,
)

__all__ = ["detect_image_mime", "encode_image_part", "is_image_mime", "read_image_file"]
