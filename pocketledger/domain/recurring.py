"""Recurring-transaction generation.

Both entry points are pure with respect to their arguments: the caller passes
``now`` explicitly and persists the returned transactions and rule updates.

- ``generate_due_occurrences`` runs on every ledger hydration.
- ``materialize_on_create`` runs when a new rule is saved.

They share ``_walk_rule`` so a rule created today and a rule caught up on the
next load produce the same occurrences.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from pocketledger.domain.recurrence import UnsupportedFrequencyError, end_of_day, next_occurrence
from pocketledger.domain.transaction import FREQUENCIES, RecurringTransaction, Transaction

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


@dataclass(frozen=True)
class RuleUpdate:
    """Checkpoint/activity change for one rule after a generation run."""

    last_generated: datetime | None
    active: bool


@dataclass
class GenerationResult:
    new_transactions: list[Transaction] = field(default_factory=list)
    rule_updates: dict[str, RuleUpdate] = field(default_factory=dict)


@dataclass(frozen=True)
class CreationResult:
    new_transactions: list[Transaction]
    finalized_rule: RecurringTransaction


def _new_id() -> str:
    return str(uuid.uuid4())


def apply_rule_update(rule: RecurringTransaction, update: RuleUpdate | None) -> RecurringTransaction:
    """Return ``rule`` with a generation update folded in."""
    if update is None:
        return rule
    return replace(rule, last_generated=update.last_generated, active=update.active)


def _materialize(
    rule: RecurringTransaction,
    occurrence: datetime,
    created_at: datetime,
    id_factory: IdFactory,
) -> Transaction:
    return Transaction(
        id=id_factory(),
        amount=rule.amount,
        type=rule.type,
        category=rule.category,
        payment_method=rule.payment_method,
        description=rule.description,
        date=occurrence,
        created_at=created_at,
        recurring_id=rule.id,
    )


def _as_aware(ts: datetime | None) -> datetime | None:
    # Naive timestamps are local wall-clock time.
    if ts is None or ts.tzinfo is not None:
        return ts
    return ts.astimezone()


def _align_timezones(rule: RecurringTransaction, now: datetime) -> tuple[RecurringTransaction, datetime]:
    """Make ``rule`` and ``now`` comparable when naive and aware timestamps are mixed."""
    stamps = [ts for ts in (now, rule.start_date, rule.end_date, rule.last_generated) if ts is not None]
    aware = [ts.tzinfo is not None for ts in stamps]
    if all(aware) or not any(aware):
        return rule, now
    aligned = replace(
        rule,
        start_date=_as_aware(rule.start_date),
        end_date=_as_aware(rule.end_date),
        last_generated=_as_aware(rule.last_generated),
    )
    return aligned, _as_aware(now)


def _walk_rule(
    rule: RecurringTransaction,
    now: datetime,
    id_factory: IdFactory,
) -> tuple[list[Transaction], RuleUpdate | None]:
    """
    Materialize every occurrence of ``rule`` due by the end of ``now``'s day.

    Returns the generated transactions and the rule update to persist, or
    ``None`` when the rule does not change.
    """
    if not rule.active:
        return [], None
    if rule.frequency not in FREQUENCIES:
        raise UnsupportedFrequencyError(f"Unsupported recurrence frequency: {rule.frequency!r} (rule {rule.id})")

    rule, now = _align_timezones(rule, now)

    horizon = end_of_day(now)
    # The end date covers its whole calendar day.
    end_bound = end_of_day(rule.end_date) if rule.end_date is not None else None

    if end_bound is not None and end_bound < horizon:
        logger.info("Recurring rule %s expired on %s; deactivating", rule.id, rule.end_date.date())
        return [], RuleUpdate(last_generated=rule.last_generated, active=False)

    generated: list[Transaction] = []
    checkpoint = rule.last_generated
    if checkpoint is None:
        if rule.start_date > horizon:
            return [], None
        if end_bound is not None and rule.start_date > end_bound:
            return [], None
        # First-ever firing lands on the start date itself.
        generated.append(_materialize(rule, rule.start_date, now, id_factory))
        checkpoint = rule.start_date

    while True:
        candidate = next_occurrence(checkpoint, rule.frequency, anchor=rule.start_date)
        if candidate > horizon:
            break
        if end_bound is not None and candidate > end_bound:
            break
        generated.append(_materialize(rule, candidate, now, id_factory))
        checkpoint = candidate

    if not generated:
        return [], None

    logger.debug("Recurring rule %s generated %d occurrence(s) up to %s", rule.id, len(generated), checkpoint)
    return generated, RuleUpdate(last_generated=checkpoint, active=True)


def generate_due_occurrences(
    rules: Iterable[RecurringTransaction],
    now: datetime,
    *,
    id_factory: IdFactory | None = None,
) -> GenerationResult:
    """
    Backfill every missed occurrence of every active rule up to ``now``.

    Running again with the returned updates applied and the same ``now``
    yields no new transactions.
    """
    id_factory = id_factory or _new_id
    result = GenerationResult()
    for rule in rules:
        transactions, update = _walk_rule(rule, now, id_factory)
        result.new_transactions.extend(transactions)
        if update is not None:
            result.rule_updates[rule.id] = update

    if result.new_transactions or result.rule_updates:
        logger.info(
            "Recurring run generated %d transaction(s), updated %d rule(s)",
            len(result.new_transactions),
            len(result.rule_updates),
        )
    return result


def materialize_on_create(
    rule: RecurringTransaction,
    now: datetime,
    *,
    id_factory: IdFactory | None = None,
) -> CreationResult:
    """Generate the backlog of a freshly saved rule, including its start date."""
    transactions, update = _walk_rule(rule, now, id_factory or _new_id)
    return CreationResult(new_transactions=transactions, finalized_rule=apply_rule_update(rule, update))
