"""Ledger command handlers: recurring generation and export."""

import argparse
from datetime import datetime
from pathlib import Path

from pocketledger.domain.transaction import parse_timestamp
from pocketledger.ledger.store import LedgerStore
from pocketledger.runtime import get_logger, load_settings

logger = get_logger(__name__)


def _store(args: argparse.Namespace) -> LedgerStore:
    settings = load_settings(args.config)
    path = Path(args.ledger) if getattr(args, "ledger", None) else settings.ledger_path
    return LedgerStore(path)


def cmd_recurring_run(args: argparse.Namespace) -> int:
    """Backfill due recurring transactions into the ledger."""
    from pocketledger.application.recurring import run_recurring_generation

    try:
        now = parse_timestamp(args.now) if args.now else datetime.now().astimezone()
    except ValueError:
        print(f"Invalid --now timestamp: {args.now}")
        return 1

    store = _store(args)
    result = run_recurring_generation(store, now)
    print(f"Generated {len(result.new_transactions)} transaction(s)")
    for rule_id, update in result.rule_updates.items():
        state = "active" if update.active else "deactivated"
        last = update.last_generated.isoformat() if update.last_generated else "never"
        print(f"  {rule_id}: last generated {last} ({state})")
    return 0


def cmd_export_beancount(args: argparse.Namespace) -> int:
    """Write the ledger's transactions as Beancount text."""
    from pocketledger.ledger.beancount_export import format_beancount

    settings = load_settings(args.config)
    store = _store(args)
    content = format_beancount(store.list_transactions(), currency=args.currency or settings.currency)

    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        logger.info("Beancount export written to %s", args.output)
    else:
        print(content)
    return 0
