from __future__ import annotations

import io

from PIL import Image

from pocketledger.receipt.ocr_helpers import describe_ocr_error, extract_parsed_text, resize_image_bytes


def _png_bytes(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


def test_resize_image_bytes_caps_longest_side() -> None:
    resized = resize_image_bytes(_png_bytes(3000, 1000), max_dimension=2000)

    img = Image.open(io.BytesIO(resized))
    assert img.format == "JPEG"
    assert img.size == (2000, 666)


def test_resize_image_bytes_keeps_small_images() -> None:
    resized = resize_image_bytes(_png_bytes(400, 800), max_dimension=2000)

    assert Image.open(io.BytesIO(resized)).size == (400, 800)


def test_extract_parsed_text() -> None:
    payload = {"IsErroredOnProcessing": False, "ParsedResults": [{"ParsedText": "Burger 9.00\r\n"}]}

    assert extract_parsed_text(payload) == "Burger 9.00\r\n"


def test_extract_parsed_text_rejects_errors_and_blank_text() -> None:
    assert extract_parsed_text({"IsErroredOnProcessing": True, "ParsedResults": [{"ParsedText": "x"}]}) is None
    assert extract_parsed_text({"ParsedResults": [{"ParsedText": "  \n "}]}) is None
    assert extract_parsed_text({"ParsedResults": []}) is None
    assert extract_parsed_text({}) is None


def test_describe_ocr_error() -> None:
    assert describe_ocr_error({"ErrorMessage": ["File failed validation", "Size too big"]}) == (
        "File failed validation; Size too big"
    )
    assert describe_ocr_error({"ErrorMessage": "Timed out"}) == "Timed out"
    assert describe_ocr_error({}) == "OCR returned no text"
