"""Configuration management for the ID card OCR service.

Loads and validates YAML configuration with sensible defaults
for image enhancement, OCR, and the HTTP server.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class EnhancementConfig(BaseModel):
    """Configuration for the contrast/sharpening pre-pass."""

    clahe_clip_limit: float = 2.0
    clahe_tile_size: int = 8
    unsharp_sigma: float = 3.0
    unsharp_amount: float = 1.5
    save_enhanced: bool = False
    enhanced_dir: str = "EnhancedImages"


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    tessdata_dir: str | None = None
    default_lang: str = "eng"


class ServerConfig(BaseModel):
    """Configuration for the uvicorn server."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    enhancement: EnhancementConfig = Field(default_factory=EnhancementConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
