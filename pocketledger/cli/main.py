#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Sequence

from pocketledger.runtime import configure_logging, load_settings, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pocketledger personal finance CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse-text <file|->        Parse OCR text into a structured receipt
  scan <image>               OCR a receipt image and parse it
  recurring run [--now]      Backfill due recurring transactions
  export beancount           Export ledger transactions as Beancount
  serve [--host] [--port]    Start the receipt HTTP API
""",
    )
    parser.add_argument("--config", default=None, help="Path to config.toml (default: ~/.pocketledger/config.toml)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse-text", help="Parse OCR text into a structured receipt")
    parse_parser.add_argument("file", help="Text file with OCR output, or '-' for stdin")
    parse_parser.add_argument("--json", action="store_true", help="Print the receipt as JSON")

    scan_parser = subparsers.add_parser("scan", help="OCR a receipt image and parse it")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--json", action="store_true", help="Print the receipt as JSON")

    recurring_parser = subparsers.add_parser("recurring", help="Recurring transaction commands")
    recurring_subparsers = recurring_parser.add_subparsers(dest="recurring_command", help="Recurring command")
    run_parser = recurring_subparsers.add_parser("run", help="Backfill due recurring transactions")
    run_parser.add_argument("--now", default=None, help="ISO timestamp to treat as now (default: current time)")
    run_parser.add_argument("--ledger", default=None, help="Ledger JSON path (default: from config)")

    export_parser = subparsers.add_parser("export", help="Export ledger data")
    export_subparsers = export_parser.add_subparsers(dest="export_format", help="Export format")
    beancount_parser = export_subparsers.add_parser("beancount", help="Export as Beancount text")
    beancount_parser.add_argument("--output", "-o", default=None, help="Output file (default: stdout)")
    beancount_parser.add_argument("--currency", default=None, help="Currency code (default: from config)")
    beancount_parser.add_argument("--ledger", default=None, help="Ledger JSON path (default: from config)")

    serve_parser = subparsers.add_parser("serve", help="Start the receipt HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(load_settings(args.config).log_level)
    if args.debug:
        set_log_level(logging.DEBUG)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse-text":
        from pocketledger.cli.receipt import cmd_parse_text

        return cmd_parse_text(args)
    if args.command == "scan":
        from pocketledger.cli.receipt import cmd_scan

        return cmd_scan(args)
    if args.command == "serve":
        from pocketledger.cli.receipt import cmd_serve

        return cmd_serve(args)

    if args.command == "recurring":
        if args.recurring_command == "run":
            from pocketledger.cli.ledger import cmd_recurring_run

            return cmd_recurring_run(args)
        print("Usage: pocketledger recurring run [--now ISO]")
        return 1

    if args.command == "export":
        if args.export_format == "beancount":
            from pocketledger.cli.ledger import cmd_export_beancount

            return cmd_export_beancount(args)
        print("Usage: pocketledger export beancount [--output PATH]")
        return 1

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
