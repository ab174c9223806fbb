"""
Thumbnail compression pipeline.

Uploaded images are decoded, scaled down to a bounded width, re-encoded as
JPEG and returned as a self-contained data URI so they can be stored inline
on the record.
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from content.errors import CompressionTimeout, CorruptAsset, OversizedAsset

logger = logging.getLogger(__name__)

MAX_WIDTH = 800
JPEG_QUALITY = 60
TIMEOUT_SECONDS = 10.0
MAX_EMBEDDED_CHARS = 950000
DATA_URI_PREFIX = "data:image/jpeg;base64,"


def target_size(width: int, height: int, max_width: int = MAX_WIDTH) -> Tuple[int, int]:
    """Output dimensions: capped at max_width with the aspect ratio preserved."""
    if width <= max_width:
        return width, height
    scale = max_width / width
    return max_width, max(1, round(height * scale))


def compress_image_bytes(raw: bytes, max_width: int = MAX_WIDTH, quality: int = JPEG_QUALITY) -> bytes:
    """Decode, resize and re-encode an image as JPEG bytes."""
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.load()
            image = ImageOps.exif_transpose(image)
            if image.mode != "RGB":
                image = image.convert("RGB")
            size = target_size(image.width, image.height, max_width)
            if size != image.size:
                image = image.resize(size, Image.Resampling.LANCZOS)
            output = io.BytesIO()
            image.save(output, format="JPEG", quality=quality, optimize=True)
            return output.getvalue()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise CorruptAsset("Image file is corrupt or not a supported format.") from exc


def to_data_uri(jpeg_bytes: bytes) -> str:
    return DATA_URI_PREFIX + base64.b64encode(jpeg_bytes).decode("ascii")


async def compress_image(
    raw: bytes,
    max_width: int = MAX_WIDTH,
    quality: int = JPEG_QUALITY,
    timeout_seconds: float = TIMEOUT_SECONDS,
) -> str:
    """Compress an uploaded image into an embedded JPEG data URI within a deadline."""
    if not raw:
        raise CorruptAsset("Image file is empty.")
    try:
        jpeg_bytes = await asyncio.wait_for(
            asyncio.to_thread(compress_image_bytes, raw, max_width, quality),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("Image compression exceeded %.1fs for %d input bytes", timeout_seconds, len(raw))
        raise CompressionTimeout("Timed out while processing the image.") from exc
    logger.debug("Compressed image %d -> %d bytes", len(raw), len(jpeg_bytes))
    return to_data_uri(jpeg_bytes)


def ensure_within_ceiling(embedded: str | None, limit: int = MAX_EMBEDDED_CHARS) -> None:
    """Reject an embedded image that would exceed the per-record ceiling."""
    if embedded and len(embedded) > limit:
        raise OversizedAsset(len(embedded), limit)
