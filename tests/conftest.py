"""Shared test fixtures for the ID card OCR test suite."""

import base64
import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def encode_png(image: np.ndarray) -> bytes:
    """Encode a numpy image as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(image).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a simple synthetic RGB test image."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (255, 255, 255)
    return image


@pytest.fixture
def png_bytes(sample_color_image: np.ndarray) -> bytes:
    """PNG-encoded bytes of the color sample image."""
    return encode_png(sample_color_image)


@pytest.fixture
def png_base64(png_bytes: bytes) -> str:
    """Base64 text of the PNG sample image."""
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def labelled_card_text() -> str:
    """OCR text from a card whose labels sit on their own lines."""
    return (
        "Government of the People's Republic\n"
        "National ID Card\n"
        "Name\n"
        "MD ABDUR RAHIM\n"
        "Date of Birth 29 Jan 1967\n"
        "ID NO: 1234567890\n"
        "Blood Group: AB+"
    )


@pytest.fixture
def sparse_card_text() -> str:
    """OCR text as produced by the sparse-text LSTM profile."""
    return (
        "NationalIDCard\n"
        "Name: MD KARIM 5HAIE\n"
        "Date of Birth: 29 Jan 1967\n"
        "ID NO: 19671234567890123"
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
