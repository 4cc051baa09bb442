"""Unified ID card processing pipeline.

Combines image decoding, optional enhancement, OCR, and rule-based
field extraction behind one interface. Each pipeline version fixes
which of those steps run and with which settings.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import numpy as np

from idcard_ocr.extraction.rule_extractor import RuleExtractor, RuleSet
from idcard_ocr.preprocessing.pipeline import EnhancementPipeline, QualityMetrics
from idcard_ocr.utils.config import AppConfig
from idcard_ocr.utils.logger import get_logger

from .image_loader import decode_base64, decode_bytes
from .tesseract_engine import (
    SPARSE_LSTM_PROFILE,
    STANDARD_PROFILE,
    RecognitionProfile,
    TesseractEngine,
)

logger = get_logger(__name__)


class PipelineVersion(StrEnum):
    """Processing pipeline behind each API version."""

    V1 = "v1"
    V2 = "v2"
    V3 = "v3"


@dataclass(frozen=True)
class PipelineSpec:
    """Steps and settings for one pipeline version."""

    enhance: bool
    profile: RecognitionProfile
    rule_set: RuleSet


PIPELINES: dict[PipelineVersion, PipelineSpec] = {
    PipelineVersion.V1: PipelineSpec(
        enhance=False, profile=STANDARD_PROFILE, rule_set=RuleSet.NONE
    ),
    PipelineVersion.V2: PipelineSpec(
        enhance=False, profile=STANDARD_PROFILE, rule_set=RuleSet.LABELLED
    ),
    PipelineVersion.V3: PipelineSpec(
        enhance=True, profile=SPARSE_LSTM_PROFILE, rule_set=RuleSet.NORMALIZED
    ),
}


@dataclass
class DocumentResult:
    """Processing results for a single image."""

    source_file: str
    version: PipelineVersion
    text: str
    fields: dict[str, str] = field(default_factory=dict)
    quality_metrics: QualityMetrics | None = None


class DocumentProcessor:
    """End-to-end ID card processing pipeline.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.enhancement = EnhancementPipeline(config.enhancement)
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
            tessdata_dir=config.ocr.tessdata_dir,
        )

    def process(
        self,
        source: Path | bytes | str,
        version: PipelineVersion = PipelineVersion.V2,
        filename: str = "image",
    ) -> DocumentResult:
        """Process one image through the selected pipeline.

        Args:
            source: Path to an image file, raw image bytes, or a Base64
                encoded image string.
            version: Pipeline version to run.
            filename: Display name for the source image.

        Returns:
            Recognised text and extracted fields.

        Raises:
            ImageDecodeError: If the source is not a readable image.
            pytesseract.TesseractError: If OCR fails.
        """
        spec = PIPELINES[PipelineVersion(version)]
        logger.info("Processing %s with pipeline %s", filename, version)

        image = self._load_image(source)
        return self.process_image(image, version, filename, spec)

    def process_image(
        self,
        image: np.ndarray,
        version: PipelineVersion,
        filename: str = "image",
        spec: PipelineSpec | None = None,
    ) -> DocumentResult:
        """Run enhancement, OCR, and extraction on an already decoded image."""
        spec = spec or PIPELINES[PipelineVersion(version)]

        metrics = None
        if spec.enhance:
            image, metrics = self.enhancement.process(image)

        ocr_result = self.ocr_engine.extract_text(image, profile=spec.profile)
        logger.debug("Extracted text from %s: %s", filename, ocr_result.text)

        fields = RuleExtractor(spec.rule_set).extract(ocr_result.text)

        return DocumentResult(
            source_file=filename,
            version=PipelineVersion(version),
            text=ocr_result.text,
            fields=fields,
            quality_metrics=metrics,
        )

    @staticmethod
    def _load_image(source: Path | bytes | str) -> np.ndarray:
        """Decode an image from a path, raw bytes, or Base64 text."""
        if isinstance(source, bytes):
            return decode_bytes(source)
        if isinstance(source, Path):
            return decode_bytes(source.read_bytes())
        return decode_base64(source)
