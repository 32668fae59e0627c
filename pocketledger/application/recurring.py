"""Recurring-rule workflows over the ledger store."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pocketledger.domain.recurring import CreationResult, GenerationResult, generate_due_occurrences
from pocketledger.domain.transaction import Frequency, RecurringTransaction, TransactionType
from pocketledger.ledger.store import LedgerStore
from pocketledger.runtime.logging import get_logger

logger = get_logger(__name__)


def run_recurring_generation(store: LedgerStore, now: datetime) -> GenerationResult:
    """Catch every stored rule up to ``now`` and persist the result in one commit.

    Safe to call on every hydration: a second call with the same ``now``
    generates nothing.
    """
    rules = store.list_recurring()
    result = generate_due_occurrences(rules, now)
    added = store.apply_generation(result)
    logger.info("Hydration run over %d rule(s) booked %d transaction(s)", len(rules), added)
    return result


def create_recurring_rule(
    store: LedgerStore,
    *,
    amount: Decimal,
    type: TransactionType,
    category: str,
    payment_method: str,
    frequency: Frequency,
    start_date: datetime,
    now: datetime,
    description: str = "",
    end_date: datetime | None = None,
    rule_id: str | None = None,
) -> CreationResult:
    """Create an active rule and immediately book its backlog."""
    rule = RecurringTransaction(
        id=rule_id or str(uuid.uuid4()),
        amount=amount,
        type=type,
        category=category,
        payment_method=payment_method,
        description=description,
        frequency=frequency,
        start_date=start_date,
        end_date=end_date,
        active=True,
    )
    return store.add_recurring(rule, now)
