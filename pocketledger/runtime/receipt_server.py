"""FastAPI server for parsing receipt uploads and OCR text."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pocketledger.receipt.ocr_helpers import describe_ocr_error, extract_parsed_text
from pocketledger.receipt.text_parser import EmptyReceiptTextError, parse_receipt_text
from pocketledger.runtime.config import load_settings
from pocketledger.runtime.logging import get_logger
from pocketledger.runtime.ocr_client import OCRServiceUnavailable, call_ocr_service_async

logger = get_logger(__name__)

SCAN_FAILED = "Could not read receipt"

app = FastAPI(title="pocketledger receipts")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def _parsed(text: str) -> dict[str, Any]:
    receipt = parse_receipt_text(text)
    return {"status": "success", "receipt": receipt.to_dict()}


@app.post("/parse")
async def parse_text(request: Request) -> JSONResponse:
    """Parse OCR text that was recognized elsewhere."""
    try:
        body = await request.json()
    except ValueError:
        return _error("Request body must be JSON", 400)

    text = body.get("text") if isinstance(body, dict) else None
    if text is not None and not isinstance(text, str):
        return _error("'text' must be a string", 400)

    try:
        return JSONResponse(_parsed(text))
    except EmptyReceiptTextError:
        return _error("Receipt text is empty", 422)


@app.post("/scan")
async def scan_receipt(request: Request) -> JSONResponse:
    """Receive a receipt image, OCR it and return the parsed receipt."""
    form = await request.form()

    upload = None
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value))
        if hasattr(value, "read"):
            upload = value
            break

    if upload is None:
        return _error("No file found in request", 400)

    contents = await upload.read()
    filename = getattr(upload, "filename", None) or "receipt.jpg"

    try:
        payload = await call_ocr_service_async(contents, filename, load_settings().ocr)
    except OCRServiceUnavailable as exc:
        logger.error("OCR service unavailable: %s", exc)
        return _error(SCAN_FAILED, 502)

    text = extract_parsed_text(payload)
    if text is None:
        logger.warning("%s: %s", SCAN_FAILED, describe_ocr_error(payload))
        return _error(SCAN_FAILED, 502)

    result = _parsed(text)
    logger.info("Parsed upload %s: %d item(s)", filename, len(result["receipt"]["items"]))
    return JSONResponse(result)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
