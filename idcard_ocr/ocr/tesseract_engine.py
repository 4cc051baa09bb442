"""Tesseract OCR engine wrapper.

Runs pytesseract with a named recognition profile (engine mode, page
segmentation mode, character whitelist) and returns the trimmed text.
"""

import shutil
from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from idcard_ocr.utils.logger import get_logger

logger = get_logger(__name__)

# Tesseract --oem values
OEM_LSTM_ONLY = 1
OEM_DEFAULT = 3

# Tesseract --psm values
PSM_AUTO = 3
PSM_SPARSE_TEXT = 11

ID_CARD_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-:"
)


@dataclass(frozen=True)
class RecognitionProfile:
    """Tesseract settings applied to a single recognition call."""

    name: str
    oem: int = OEM_DEFAULT
    psm: int = PSM_AUTO
    char_whitelist: str | None = None

    def to_config(self, tessdata_dir: str | None = None) -> str:
        """Render the profile as a pytesseract ``config`` string.

        Args:
            tessdata_dir: Optional directory holding ``*.traineddata`` files.

        Returns:
            Command-line flags understood by the tesseract binary.
        """
        parts = []
        if tessdata_dir:
            parts.append(f'--tessdata-dir "{tessdata_dir}"')
        parts.append(f"--oem {self.oem}")
        parts.append(f"--psm {self.psm}")
        if self.char_whitelist:
            parts.append(f"-c tessedit_char_whitelist={self.char_whitelist}")
        return " ".join(parts)


STANDARD_PROFILE = RecognitionProfile(name="standard")

SPARSE_LSTM_PROFILE = RecognitionProfile(
    name="sparse_lstm",
    oem=OEM_LSTM_ONLY,
    psm=PSM_SPARSE_TEXT,
    char_whitelist=ID_CARD_WHITELIST,
)


@dataclass
class OCRResult:
    """OCR output for one image."""

    text: str
    language: str
    profile: str
    config: str


class TesseractEngine:
    """Wrapper around Tesseract OCR for ID card text extraction.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Default OCR language code.
        tessdata_dir: Directory with language models, if not the system one.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        tessdata_dir: str | None = None,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.tessdata_dir = tessdata_dir

    @staticmethod
    def is_available() -> bool:
        """Return whether the configured tesseract binary can be found."""
        return shutil.which(pytesseract.pytesseract.tesseract_cmd) is not None

    def extract_text(
        self,
        image: np.ndarray,
        profile: RecognitionProfile = STANDARD_PROFILE,
        lang: str | None = None,
    ) -> OCRResult:
        """Recognise the text in an image.

        Args:
            image: Input image as a numpy array (RGB or grayscale).
            profile: Recognition settings to apply.
            lang: OCR language code. Defaults to the engine default.

        Returns:
            OCRResult holding the whitespace-trimmed text.

        Raises:
            pytesseract.TesseractError: If the tesseract process fails.
        """
        lang = lang or self.default_lang
        config = profile.to_config(self.tessdata_dir)

        pil_image = Image.fromarray(image)
        text = pytesseract.image_to_string(pil_image, lang=lang, config=config)
        text = text.strip()

        logger.info(
            "OCR (%s) recognised %d characters",
            profile.name,
            len(text),
        )
        return OCRResult(
            text=text,
            language=lang,
            profile=profile.name,
            config=config,
        )
