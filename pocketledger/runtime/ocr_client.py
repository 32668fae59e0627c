"""Runtime helpers for the OCR HTTP collaborator (OCR.space compatible)."""

import asyncio
import json
import time
from pathlib import Path
from typing import Any

import httpx

from pocketledger.receipt.ocr_helpers import resize_image_bytes
from pocketledger.runtime.config import OCRSettings
from pocketledger.runtime.logging import get_logger
from pocketledger.runtime.paths import get_paths

logger = get_logger(__name__)


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def build_ocr_form(settings: OCRSettings) -> dict[str, str]:
    """Form fields sent alongside the image."""
    return {
        "apikey": settings.api_key,
        "language": settings.language,
        "isOverlayRequired": "false",
        "detectOrientation": "true",
        "scale": "true",
        "OCREngine": str(settings.engine),
    }


def prepare_upload(image_bytes: bytes, settings: OCRSettings) -> bytes:
    """Resize the image for upload, falling back to the original bytes if Pillow cannot read it."""
    try:
        return resize_image_bytes(image_bytes, max_dimension=settings.max_dimension)
    except OSError as exc:
        # PIL.UnidentifiedImageError is an OSError; PDFs and odd formats go up unchanged.
        logger.debug("Could not resize upload, sending original bytes: %s", exc)
        return image_bytes


def _decode_response(response: httpx.Response) -> dict[str, Any]:
    if response.status_code != 200:
        logger.error("OCR service error: %s", response.status_code)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")
    try:
        payload = response.json()
    except ValueError as e:
        raise OCRServiceUnavailable("OCR service returned invalid JSON") from e
    if not isinstance(payload, dict):
        raise OCRServiceUnavailable("OCR service returned an unexpected payload")
    return payload


def call_ocr_service(image_bytes: bytes, filename: str, settings: OCRSettings) -> dict[str, Any]:
    """
    Send an image to the OCR service and return its JSON payload.

    Raises:
        OCRServiceUnavailable: on transport failure, non-200 status or non-JSON body.
    """
    logger.info("Sending receipt to OCR service at %s...", settings.url)
    upload = prepare_upload(image_bytes, settings)

    try:
        start_time = time.time()
        response = httpx.post(
            settings.url,
            data=build_ocr_form(settings),
            files={"file": (filename, upload, "image/jpeg")},
            timeout=settings.timeout,
        )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    return _decode_response(response)


async def call_ocr_service_async(image_bytes: bytes, filename: str, settings: OCRSettings) -> dict[str, Any]:
    """Async variant of ``call_ocr_service`` for the HTTP API."""
    # Pillow decoding blocks; keep it off the event loop.
    loop = asyncio.get_running_loop()
    upload = await loop.run_in_executor(None, prepare_upload, image_bytes, settings)
    try:
        async with httpx.AsyncClient(timeout=settings.timeout) as client:
            response = await client.post(
                settings.url,
                data=build_ocr_form(settings),
                files={"file": (filename, upload, "image/jpeg")},
            )
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    return _decode_response(response)


def save_ocr_json(ocr_result: dict[str, Any], receipt_name: str, output_dir: Path | None = None) -> Path:
    """Save OCR result JSON for debugging."""
    output_dir = output_dir or get_paths().receipts_ocr_json
    output_dir.mkdir(parents=True, exist_ok=True)
    ocr_json_path = output_dir / f"{Path(receipt_name).stem}.json"
    ocr_json_path.write_text(json.dumps(ocr_result, indent=2))
    logger.debug("OCR JSON saved to: %s", ocr_json_path)
    return ocr_json_path
