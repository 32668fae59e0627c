"""Receipt application workflows."""

from .scan import SCAN_FAILURE_MESSAGE, ReceiptScanRequest, ReceiptScanResult, ScanStatus, run_receipt_scan

__all__ = [
    "SCAN_FAILURE_MESSAGE",
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "ScanStatus",
    "run_receipt_scan",
]
