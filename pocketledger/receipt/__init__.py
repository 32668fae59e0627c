"""Receipt OCR text parsing."""

from .line_classifier import LINE_RULES, LineClassification, classify_line
from .price_parser import find_rightmost_price, parse_price_token
from .text_parser import EmptyReceiptTextError, parse_receipt_text

__all__ = [
    "LINE_RULES",
    "EmptyReceiptTextError",
    "LineClassification",
    "classify_line",
    "find_rightmost_price",
    "parse_price_token",
    "parse_receipt_text",
]
