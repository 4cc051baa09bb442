"""Image enhancement pipeline run before OCR.

Orchestrates grayscale conversion, CLAHE, and unsharp masking with
quality metrics tracking.
"""

from dataclasses import dataclass
from pathlib import Path

import cv2
import numpy as np

from idcard_ocr.utils.config import EnhancementConfig
from idcard_ocr.utils.logger import get_logger

from .filters import apply_clahe, save_debug_image, unsharp_mask

logger = get_logger(__name__)


@dataclass
class QualityMetrics:
    """Before/after image quality measurements."""

    sharpness_before: float
    sharpness_after: float
    contrast_before: float
    contrast_after: float


def calculate_sharpness(image: np.ndarray) -> float:
    """Calculate image sharpness using Laplacian variance.

    Args:
        image: Input image (RGB or grayscale).

    Returns:
        Sharpness score (higher means sharper).
    """
    gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY) if image.ndim == 3 else image
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())


def calculate_contrast(image: np.ndarray) -> float:
    """Calculate image contrast as the standard deviation of pixel intensities.

    Args:
        image: Input image (RGB or grayscale).

    Returns:
        Contrast score (higher means more contrast).
    """
    gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY) if image.ndim == 3 else image
    return float(gray.std())


class EnhancementPipeline:
    """Contrast and sharpening pre-pass for ID card images.

    The output is always a grayscale image of the same height and width
    as the input.

    Args:
        config: Enhancement configuration.
    """

    def __init__(self, config: EnhancementConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray) -> tuple[np.ndarray, QualityMetrics]:
        """Run the enhancement pipeline on an image.

        Args:
            image: Input ID card image (RGB or grayscale).

        Returns:
            Tuple of (enhanced_image, quality_metrics).
        """
        metrics = QualityMetrics(
            sharpness_before=calculate_sharpness(image),
            contrast_before=calculate_contrast(image),
            sharpness_after=0.0,
            contrast_after=0.0,
        )

        result = apply_clahe(
            image,
            clip_limit=self.config.clahe_clip_limit,
            tile_size=self.config.clahe_tile_size,
        )
        result = unsharp_mask(
            result,
            sigma=self.config.unsharp_sigma,
            amount=self.config.unsharp_amount,
        )

        if self.config.save_enhanced:
            save_debug_image(result, Path(self.config.enhanced_dir))

        metrics.sharpness_after = calculate_sharpness(result)
        metrics.contrast_after = calculate_contrast(result)

        logger.info(
            "Enhancement complete: sharpness %.1f->%.1f, contrast %.1f->%.1f",
            metrics.sharpness_before,
            metrics.sharpness_after,
            metrics.contrast_before,
            metrics.contrast_after,
        )
        return result, metrics
