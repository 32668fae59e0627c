"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from pocketledger.domain.receipt import ParsedReceipt
from pocketledger.runtime import get_logger, load_settings

logger = get_logger(__name__)


def print_receipt(receipt: ParsedReceipt, as_json: bool = False) -> None:
    """Display a parsed receipt for review."""
    if as_json:
        print(json.dumps(receipt.to_dict(), indent=2))
        return

    print("=" * 60)
    print("PARSED RECEIPT")
    print("=" * 60)
    print(f"Items ({len(receipt.items)}):")
    for i, item in enumerate(receipt.items, 1):
        qty_str = f" x{item.quantity}" if item.quantity > 1 else ""
        print(f"  {i}. {item.name}{qty_str} - {item.price:.2f}")
    if receipt.tax:
        percent = f" ({receipt.tax_percent}%)" if receipt.tax_percent is not None else ""
        print(f"Tax: {receipt.tax:.2f}{percent}")
    if receipt.tip:
        print(f"Tip: {receipt.tip:.2f}")
    print(f"Total: {receipt.total:.2f}")
    print("=" * 60)


def cmd_parse_text(args: argparse.Namespace) -> int:
    """Parse OCR text from a file (or stdin with '-')."""
    from pocketledger.receipt.text_parser import EmptyReceiptTextError, parse_receipt_text

    if args.file == "-":
        text = sys.stdin.read()
    else:
        path = Path(args.file)
        if not path.exists():
            print(f"Error: file not found: {path}")
            return 1
        text = path.read_text(encoding="utf-8")

    try:
        receipt = parse_receipt_text(text)
    except EmptyReceiptTextError:
        print("Could not read receipt: no text")
        return 1

    print_receipt(receipt, as_json=args.json)
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """OCR a receipt image and print the parsed result."""
    from pocketledger.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    settings = load_settings(args.config)
    result = run_receipt_scan(ReceiptScanRequest(image_path=Path(args.image), ocr=settings.ocr))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        return 1

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        return 1

    if result.status == "no_text" or result.receipt is None:
        print(result.error or "Could not read receipt")
        return 1

    print_receipt(result.receipt, as_json=args.json)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the HTTP API."""
    import uvicorn

    from pocketledger.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/scan | /parse | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0
