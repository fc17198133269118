# src/syskit/images/optimize.py

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import FileOperationError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("JPEG", "PNG", "WEBP")


def png_compress_level(quality: int) -> int:
    """Map a 0-100 quality to zlib level: higher quality -> less compression work."""
    return min(9, max(0, 9 - int(quality / 10 + 0.5)))


def optimize_image(path: str | Path, quality: int = 80) -> bool:
    """
    Re-encode a JPEG, PNG or WEBP image in place.

    JPEG/WEBP use `quality` directly; PNG is lossless and only its compression level changes.
    """
    p = Path(path)
    if not p.is_file():
        raise FileOperationError(f"File not found: {p}")

    quality = min(100, max(0, int(quality)))

    try:
        with Image.open(p) as im:
            fmt = (im.format or "").upper()
            if fmt not in SUPPORTED_FORMATS:
                raise UnsupportedFormatError(f"Unsupported image format: {fmt or 'unknown'}")
            im.load()
            image = im.copy()
    except UnidentifiedImageError as exc:
        raise UnsupportedFormatError(f"Unsupported image format: {p}") from exc

    before = p.stat().st_size

    if fmt == "JPEG":
        if image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")
        image.save(p, "JPEG", quality=quality, optimize=True)
    elif fmt == "PNG":
        image.save(p, "PNG", compress_level=png_compress_level(quality))
    else:
        image.save(p, "WEBP", quality=quality)

    logger.info("Optimized %s (%s) %s -> %s bytes", p, fmt, before, p.stat().st_size)
    return True
