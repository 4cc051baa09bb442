"""Tests for configuration loading and validation."""

from pathlib import Path

import yaml

from idcard_ocr.utils.config import (
    AppConfig,
    EnhancementConfig,
    OCRConfig,
    ServerConfig,
    load_config,
)


class TestEnhancementConfig:
    """Tests for EnhancementConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = EnhancementConfig()
        assert cfg.clahe_clip_limit == 2.0
        assert cfg.clahe_tile_size == 8
        assert cfg.unsharp_sigma == 3.0
        assert cfg.unsharp_amount == 1.5
        assert cfg.save_enhanced is False
        assert cfg.enhanced_dir == "EnhancedImages"

    def test_override(self) -> None:
        cfg = EnhancementConfig(save_enhanced=True, clahe_clip_limit=3.5)
        assert cfg.save_enhanced is True
        assert cfg.clahe_clip_limit == 3.5


class TestOCRConfig:
    """Tests for OCRConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.default_lang == "eng"
        assert cfg.tesseract_cmd is None
        assert cfg.tessdata_dir is None

    def test_custom_tessdata(self) -> None:
        cfg = OCRConfig(tessdata_dir="tessdata-main", default_lang="ben")
        assert cfg.tessdata_dir == "tessdata-main"
        assert cfg.default_lang == "ben"


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.enhancement, EnhancementConfig)
        assert isinstance(cfg.ocr, OCRConfig)
        assert isinstance(cfg.server, ServerConfig)
        assert cfg.server.port == 8000
        assert cfg.log_level == "INFO"

    def test_nested_override(self) -> None:
        cfg = AppConfig(
            enhancement=EnhancementConfig(unsharp_sigma=1.0),
            log_level="DEBUG",
        )
        assert cfg.enhancement.unsharp_sigma == 1.0
        assert cfg.log_level == "DEBUG"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_shipped_config(self, config_dir: Path) -> None:
        cfg = load_config(config_dir / "config.yaml")
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"
        assert cfg.enhancement.save_enhanced is False

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "enhancement": {"save_enhanced": True, "enhanced_dir": "debug"},
            "ocr": {"default_lang": "deu"},
            "server": {"port": 9000},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.enhancement.save_enhanced is True
        assert cfg.enhancement.enhanced_dir == "debug"
        assert cfg.ocr.default_lang == "deu"
        assert cfg.server.port == 9000
        assert cfg.log_level == "DEBUG"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        cfg = load_config(config_file)
        assert isinstance(cfg, AppConfig)

    def test_load_none_defaults_to_standard_path(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, AppConfig)
