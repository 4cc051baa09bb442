"""Decoding of uploaded image payloads into numpy arrays.

Requests carry images either as Base64 strings (JSON body) or as raw
multipart file bytes. Both paths end up as an RGB ``uint8`` array.
"""

import base64
import binascii
import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from idcard_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class ImageDecodeError(ValueError):
    """Raised when a payload cannot be turned into an image."""


def _strip_data_uri(data: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix if present."""
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


def decode_bytes(data: bytes) -> np.ndarray:
    """Decode raw image bytes into an RGB array.

    Args:
        data: Encoded image file contents (PNG, JPEG, TIFF, BMP, ...).

    Returns:
        Image as an ``(H, W, 3)`` uint8 array in RGB order.

    Raises:
        ImageDecodeError: If the payload is empty or not a readable image.
    """
    if not data:
        raise ImageDecodeError("Image payload is empty.")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(f"Unable to decode image: {exc}") from exc

    array = np.array(rgb)
    logger.debug("Decoded image %dx%d", array.shape[1], array.shape[0])
    return array


def decode_base64(data: str) -> np.ndarray:
    """Decode a Base64-encoded image string into an RGB array.

    Args:
        data: Base64 text, optionally prefixed with a data URI header.

    Returns:
        Image as an ``(H, W, 3)`` uint8 array in RGB order.

    Raises:
        ImageDecodeError: If the text is not valid Base64 or not an image.
    """
    payload = "".join(_strip_data_uri(data.strip()).split())
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError(
            "The input is not a valid Base-64 string."
        ) from exc
    return decode_bytes(raw)
