"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class Base64ImagesRequest(BaseModel):
    """Request body for the Base64 endpoint.

    Both fields are optional at the schema level so that a missing image
    produces the service's own 400 message rather than a 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_base64_1: str | None = Field(default=None, alias="imageBase64_1")
    image_base64_2: str | None = Field(default=None, alias="imageBase64_2")


class OcrTextResponse(BaseModel):
    """Response schema for the text-only endpoint."""

    image1_ocr_text: str
    image2_ocr_text: str


class FieldExtractionResponse(BaseModel):
    """Response schema for the field extraction endpoints."""

    image1_data: dict[str, str]
    image2_data: dict[str, str]
    text1: str
    text2: str


class ErrorResponse(BaseModel):
    """Response schema for 400 and 500 errors."""

    message: str
    error: str | None = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
