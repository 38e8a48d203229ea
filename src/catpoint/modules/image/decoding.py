"""
Helpers turning image files or encoded bytes into numpy arrays.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import imageio.v3 as iio
import numpy as np


def decode_image(image_bytes: bytes, content_type: str | None = None) -> np.ndarray:
    """
    Decode PNG/JPEG/GIF bytes, using the MIME type as an extension hint.

    Without a hint imageio picks the format from the encoded header.
    """
    with io.BytesIO(image_bytes) as buffer:
        extension: str | None = None
        if content_type:
            if "png" in content_type:
                extension = ".png"
            elif "jpeg" in content_type or "jpg" in content_type:
                extension = ".jpg"
            elif "gif" in content_type:
                extension = ".gif"
        return iio.imread(buffer, extension=extension)


def read_image(path: str | Path) -> np.ndarray:
    return iio.imread(Path(path))


def as_array(image: Any, content_type: str | None = None) -> np.ndarray:
    """
    Coerce arrays, encoded bytes or file paths into an array.

    ``content_type`` is only used for encoded bytes.
    """
    if isinstance(image, np.ndarray):
        return image
    if isinstance(image, bytes | bytearray | memoryview):
        return decode_image(bytes(image), content_type)
    if isinstance(image, str | Path):
        return read_image(image)
    raise TypeError(f"Unsupported image type: {type(image).__name__}")


__all__ = ["as_array", "decode_image", "read_image"]
