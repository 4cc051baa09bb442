"""Application entry point for the ID card OCR API server."""

import uvicorn

from idcard_ocr.api.app import app
from idcard_ocr.utils.config import AppConfig, load_config
from idcard_ocr.utils.logger import setup_logging


def main(config: AppConfig | None = None) -> None:
    """Start the FastAPI application server."""
    config = config or load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
