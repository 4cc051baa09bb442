"""Contrast and sharpening filters for ID card photos.

CLAHE lifts faint print on glossy cards; an unsharp mask then restores
the character edges that the equalisation softens.
"""

from datetime import datetime
from pathlib import Path

import cv2
import numpy as np

from idcard_ocr.utils.logger import get_logger

logger = get_logger(__name__)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an RGB image to grayscale, passing grayscale through.

    Args:
        image: Input image (RGB or grayscale).

    Returns:
        Grayscale image.
    """
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    return image


def apply_clahe(
    image: np.ndarray,
    clip_limit: float = 2.0,
    tile_size: int = 8,
) -> np.ndarray:
    """Enhance contrast using CLAHE (Contrast Limited Adaptive Histogram Equalization).

    Args:
        image: Input image (RGB or grayscale).
        clip_limit: Threshold for contrast limiting.
        tile_size: Size of the grid for histogram equalization.

    Returns:
        Contrast-enhanced grayscale image.
    """
    gray = to_gray(image)
    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(tile_size, tile_size))
    result = clahe.apply(gray)
    logger.debug("Applied CLAHE (clip=%.1f, tile=%d)", clip_limit, tile_size)
    return result


def unsharp_mask(
    image: np.ndarray,
    sigma: float = 3.0,
    amount: float = 1.5,
) -> np.ndarray:
    """Sharpen edges by subtracting a Gaussian-blurred copy.

    Computes ``amount * image + (1 - amount) * blurred``, so the default
    amount of 1.5 weights the blur at -0.5.

    Args:
        image: Input grayscale image.
        sigma: Gaussian sigma; the kernel size is derived from it.
        amount: Weight of the original image.

    Returns:
        Sharpened image with the same shape and dtype as the input.
    """
    blurred = cv2.GaussianBlur(image, (0, 0), sigma)
    result = cv2.addWeighted(image, amount, blurred, 1.0 - amount, 0)
    logger.debug("Applied unsharp mask (sigma=%.1f, amount=%.2f)", sigma, amount)
    return result


def save_debug_image(image: np.ndarray, directory: Path) -> Path:
    """Write an enhanced image to a timestamped PNG for inspection.

    Args:
        image: Image to save (grayscale or RGB).
        directory: Target directory, created if missing.

    Returns:
        Path of the written file.

    Raises:
        OSError: If the image could not be written.
    """
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    path = directory / f"enhanced_{stamp}.png"

    to_write = cv2.cvtColor(image, cv2.COLOR_RGB2BGR) if image.ndim == 3 else image
    if not cv2.imwrite(str(path), to_write):
        raise OSError(f"Failed to write enhanced image to {path}")

    logger.info("Saved enhanced image to %s", path)
    return path
