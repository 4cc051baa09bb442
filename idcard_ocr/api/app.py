"""FastAPI application for the ID card OCR API.

Exposes three generations of the extraction endpoint plus a health
check. v1 takes Base64 JSON and returns raw text, v2 and v3 take
multipart uploads and also return the extracted card fields.
"""

from typing import Annotated

from fastapi import Body, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from idcard_ocr import __version__
from idcard_ocr.ocr.document_processor import (
    DocumentProcessor,
    DocumentResult,
    PipelineVersion,
)
from idcard_ocr.ocr.tesseract_engine import TesseractEngine
from idcard_ocr.utils.config import load_config
from idcard_ocr.utils.logger import get_logger

from .schemas import (
    Base64ImagesRequest,
    ErrorResponse,
    FieldExtractionResponse,
    HealthResponse,
    OcrTextResponse,
)

logger = get_logger(__name__)

MISSING_BASE64_MESSAGE = (
    "Invalid request. Both images must be provided in Base64 format."
)
MISSING_UPLOAD_MESSAGE = "Invalid request. Both images must be provided."
MISSING_UPLOAD_MESSAGE_V3 = "Both images must be provided."
PROCESSING_FAILED_MESSAGE = "An error occurred while processing the images."
PROCESSING_FAILED_MESSAGE_V3 = "Error processing images."

_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/tiff",
    "image/bmp",
    "image/gif",
    "image/webp",
    "application/octet-stream",
}


class ProcessingError(Exception):
    """Decoding, enhancement, or OCR failed for an image."""

    status_code = 500

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


app = FastAPI(
    title="ID Card OCR API",
    description="Recognise text on ID card images and extract card fields",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTP errors as a ``{"message"}`` body instead of ``{"detail"}``."""
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ProcessingError)
async def processing_error_handler(
    request: Request, exc: ProcessingError
) -> JSONResponse:
    """Render pipeline failures with the message/error body."""
    body = ErrorResponse(message=exc.message, error=exc.error)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
    )


def _get_processor() -> DocumentProcessor:
    """Build a processor from the current configuration."""
    return DocumentProcessor(load_config())


def _check_upload(file: UploadFile | None, missing_message: str) -> UploadFile:
    """Reject a missing upload or one with a non-image content type."""
    if file is None:
        raise HTTPException(status_code=400, detail=missing_message)
    if file.content_type:
        media_type = file.content_type.split(";")[0].strip().lower()
        if media_type not in _ALLOWED_CONTENT_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type: {file.content_type}",
            )
    return file


async def _process_pair(
    sources: tuple[bytes | str, bytes | str],
    filenames: tuple[str, str],
    version: PipelineVersion,
    failure_message: str,
) -> tuple[DocumentResult, DocumentResult]:
    """Run both images through one pipeline, mapping failures to a 500."""
    try:
        processor = _get_processor()
        first = await run_in_threadpool(
            processor.process, sources[0], version, filenames[0]
        )
        second = await run_in_threadpool(
            processor.process, sources[1], version, filenames[1]
        )
    except Exception as exc:
        logger.error("Pipeline %s failed: %s", version, exc)
        raise ProcessingError(failure_message, error=str(exc)) from exc
    return first, second


async def _extract_fields(
    image1: UploadFile | None,
    image2: UploadFile | None,
    version: PipelineVersion,
    missing_message: str,
    failure_message: str,
) -> FieldExtractionResponse:
    """Shared body of the multipart field extraction endpoints."""
    image1 = _check_upload(image1, missing_message)
    image2 = _check_upload(image2, missing_message)

    try:
        content1 = await image1.read()
        content2 = await image2.read()
    except Exception as exc:
        logger.error("Reading uploads failed: %s", exc)
        raise ProcessingError(failure_message, error=str(exc)) from exc

    first, second = await _process_pair(
        (content1, content2),
        (image1.filename or "image1", image2.filename or "image2"),
        version,
        failure_message,
    )
    return FieldExtractionResponse(
        image1_data=first.fields,
        image2_data=second.fields,
        text1=first.text,
        text2=second.text,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=TesseractEngine.is_available(),
    )


@app.post(
    "/api/ocr/extract",
    response_model=OcrTextResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def extract_text(
    request: Annotated[Base64ImagesRequest | None, Body()] = None,
) -> OcrTextResponse:
    """Recognise the text on two Base64-encoded images.

    Args:
        request: JSON body holding both images as Base64 strings.

    Returns:
        The trimmed OCR text of each image.
    """
    if request is None or not request.image_base64_1 or not request.image_base64_2:
        raise HTTPException(status_code=400, detail=MISSING_BASE64_MESSAGE)

    first, second = await _process_pair(
        (request.image_base64_1, request.image_base64_2),
        ("image1", "image2"),
        PipelineVersion.V1,
        PROCESSING_FAILED_MESSAGE,
    )
    return OcrTextResponse(image1_ocr_text=first.text, image2_ocr_text=second.text)


@app.post(
    "/api/ocrv2/extract",
    response_model=FieldExtractionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def extract_fields_v2(
    image1: Annotated[UploadFile | None, File()] = None,
    image2: Annotated[UploadFile | None, File()] = None,
) -> FieldExtractionResponse:
    """Extract card fields from two uploaded images using labelled-line rules."""
    return await _extract_fields(
        image1,
        image2,
        PipelineVersion.V2,
        MISSING_UPLOAD_MESSAGE,
        PROCESSING_FAILED_MESSAGE,
    )


@app.post(
    "/api/ocrv3/extract",
    response_model=FieldExtractionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def extract_fields_v3(
    image1: Annotated[UploadFile | None, File()] = None,
    image2: Annotated[UploadFile | None, File()] = None,
) -> FieldExtractionResponse:
    """Extract card fields from two uploaded images.

    Images are contrast-enhanced and sharpened first, recognised with the
    LSTM engine in sparse-text mode, and matched with the normalized-text
    rules.
    """
    return await _extract_fields(
        image1,
        image2,
        PipelineVersion.V3,
        MISSING_UPLOAD_MESSAGE_V3,
        PROCESSING_FAILED_MESSAGE_V3,
    )
