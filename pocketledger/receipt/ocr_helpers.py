"""Pure OCR helpers: image preparation and OCR response unpacking."""

import io
from typing import Any

# OCR.space rejects large uploads on the free tier; keep images modest.
MAX_IMAGE_DIMENSION = 2000
JPEG_QUALITY = 85


def resize_image_bytes(image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION) -> bytes:
    """
    Normalize a receipt photo for upload.

    Applies EXIF orientation, shrinks the image so neither side exceeds
    ``max_dimension`` (keeping aspect ratio), and re-encodes it as JPEG.

    Args:
        image_bytes: Image data as bytes
        max_dimension: Maximum allowed dimension (width or height)

    Returns:
        JPEG image bytes
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))
    img = ImageOps.exif_transpose(img)

    width, height = img.size
    if width > max_dimension or height > max_dimension:
        if width > height:
            new_width = max_dimension
            new_height = int(height * (max_dimension / width))
        else:
            new_height = max_dimension
            new_width = int(width * (max_dimension / height))
        img = img.resize((new_width, new_height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return buffer.getvalue()


def extract_parsed_text(payload: dict[str, Any]) -> str | None:
    """
    Return the recognized text from an OCR.space style response.

    Returns None when processing errored or no non-blank text came back.
    """
    if not isinstance(payload, dict) or payload.get("IsErroredOnProcessing"):
        return None
    results = payload.get("ParsedResults") or []
    if not results or not isinstance(results[0], dict):
        return None
    text = results[0].get("ParsedText")
    if not isinstance(text, str) or not text.strip():
        return None
    return text


def describe_ocr_error(payload: dict[str, Any]) -> str:
    """Best-effort human readable error from an OCR response."""
    message = payload.get("ErrorMessage") if isinstance(payload, dict) else None
    if isinstance(message, list):
        message = "; ".join(str(part) for part in message)
    return str(message) if message else "OCR returned no text"
