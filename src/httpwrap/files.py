"""Helpers for persisting response bodies and decoding images."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def write_file(path: Union[str, Path], data: bytes) -> bool:
    """
    Write a byte buffer to a file, replacing any existing content.

    Never raises for I/O problems; a failure is logged and reported
    through the return value.

    Args:
        path: Destination file path (parent directory must exist)
        data: Bytes to write

    Returns:
        True if the whole buffer was written, False otherwise
    """
    path = Path(path)
    try:
        with path.open("wb") as f:
            f.write(data)
    except OSError as e:
        logger.warning(f"Failed to write {path}: {e}")
        return False

    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return True


def image_from_bytes(data: bytes) -> Image.Image | None:
    """
    Decode an image, auto-detecting its format (PNG, JPEG, GIF, ...).

    Args:
        data: Encoded image bytes, e.g. an HttpResult's content

    Returns:
        Fully loaded PIL image, or None if the bytes are not a decodable image
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"Could not decode image from {len(data)} bytes: {e}")
        return None
    return image
