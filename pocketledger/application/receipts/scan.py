"""Receipt scan workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pocketledger.receipt.ocr_helpers import describe_ocr_error, extract_parsed_text
from pocketledger.receipt.text_parser import parse_receipt_text
from pocketledger.runtime.config import OCRSettings
from pocketledger.runtime.logging import get_logger
from pocketledger.runtime.ocr_client import OCRServiceUnavailable, call_ocr_service, save_ocr_json

if TYPE_CHECKING:
    from pocketledger.domain.receipt import ParsedReceipt

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "ocr_unavailable",
    "no_text",
    "parsed",
]

SCAN_FAILURE_MESSAGE = "Could not read receipt"


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running the receipt scan workflow."""

    image_path: Path
    ocr: OCRSettings
    save_ocr_output: bool = True
    ocr_output_dir: Path | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from the receipt scan workflow."""

    status: ScanStatus
    receipt: ParsedReceipt | None = None
    ocr_text: str | None = None
    ocr_json_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "parsed"


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: OCR -> text check -> parse.

    The text parser only runs when OCR produced non-blank text; every other
    outcome is reported as a scan failure.
    """
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    try:
        payload = call_ocr_service(request.image_path.read_bytes(), request.image_path.name, request.ocr)
    except OCRServiceUnavailable as exc:
        return ReceiptScanResult(status="ocr_unavailable", error=str(exc))

    ocr_json_path = None
    if request.save_ocr_output:
        ocr_json_path = save_ocr_json(payload, request.image_path.name, request.ocr_output_dir)

    text = extract_parsed_text(payload)
    if text is None:
        error = describe_ocr_error(payload)
        logger.warning("%s: %s", SCAN_FAILURE_MESSAGE, error)
        return ReceiptScanResult(
            status="no_text",
            ocr_json_path=ocr_json_path,
            error=f"{SCAN_FAILURE_MESSAGE}: {error}",
        )

    receipt = parse_receipt_text(text)
    logger.info("Parsed receipt: %d item(s), total %s", len(receipt.items), receipt.total)
    return ReceiptScanResult(
        status="parsed",
        receipt=receipt,
        ocr_text=text,
        ocr_json_path=ocr_json_path,
    )
