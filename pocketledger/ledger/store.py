"""JSON-file ledger store for transactions, budgets and recurring rules.

The whole ledger is one JSON document::

    {"transactions": [...], "budgets": [...], "recurring": [...]}

Every mutation loads the document, changes it in memory and commits it with a
write to a sibling temporary file followed by ``os.replace``. A generation run
(new transactions plus rule checkpoints) is one commit, so a rule never
advances past occurrences that were not persisted.
"""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from pocketledger.domain.recurring import (
    CreationResult,
    GenerationResult,
    apply_rule_update,
    materialize_on_create,
)
from pocketledger.domain.transaction import Budget, BudgetPeriod, RecurringTransaction, Transaction, TransactionType
from pocketledger.runtime.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")


class LedgerRecordNotFound(KeyError):
    """Raised when a record id does not exist in the ledger."""


@dataclass(frozen=True)
class Balance:
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass
class LedgerSnapshot:
    transactions: list[Transaction] = field(default_factory=list)
    budgets: list[Budget] = field(default_factory=list)
    recurring: list[RecurringTransaction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LedgerSnapshot:
        return cls(
            transactions=[Transaction.from_dict(item) for item in data.get("transactions", [])],
            budgets=[Budget.from_dict(item) for item in data.get("budgets", [])],
            recurring=[RecurringTransaction.from_dict(item) for item in data.get("recurring", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "budgets": [b.to_dict() for b in self.budgets],
            "recurring": [r.to_dict() for r in self.recurring],
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _adjust_budgets(budgets: list[Budget], transaction: Transaction, sign: int) -> list[Budget]:
    """Add (sign=1) or remove (sign=-1) an expense from matching budgets' spent."""
    if transaction.type != "expense":
        return budgets
    adjusted = []
    for budget in budgets:
        if budget.category == transaction.category:
            spent = max(ZERO, budget.spent + sign * transaction.amount)
            budget = replace(budget, spent=spent)
        adjusted.append(budget)
    return adjusted


def _index_of(records: list[Any], record_id: str, kind: str) -> int:
    for i, record in enumerate(records):
        if record.id == record_id:
            return i
    raise LedgerRecordNotFound(f"{kind} not found: {record_id}")


class LedgerStore:
    """Persistent ledger backed by a single JSON document."""

    def __init__(
        self,
        path: Path | str,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.path = Path(path)
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_id

    # --- persistence ---

    def load(self) -> LedgerSnapshot:
        """Read the ledger document; a missing file is an empty ledger."""
        if not self.path.exists():
            return LedgerSnapshot()
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return LedgerSnapshot.from_dict(data)

    def _commit(self, snapshot: LedgerSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(tmp_name, self.path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    # --- transactions ---

    def list_transactions(self) -> list[Transaction]:
        return self.load().transactions

    def add_transaction(
        self,
        *,
        amount: Decimal,
        type: TransactionType,
        category: str,
        payment_method: str,
        description: str = "",
        date: datetime | None = None,
    ) -> Transaction:
        """Book a manual transaction; expenses count toward matching budgets."""
        now = self._clock()
        transaction = Transaction(
            id=self._id_factory(),
            amount=amount,
            type=type,
            category=category,
            payment_method=payment_method,
            description=description,
            date=date or now,
            created_at=now,
        )
        snapshot = self.load()
        snapshot.transactions.insert(0, transaction)
        snapshot.budgets = _adjust_budgets(snapshot.budgets, transaction, +1)
        self._commit(snapshot)
        return transaction

    def update_transaction(self, transaction_id: str, **changes: Any) -> Transaction:
        snapshot = self.load()
        index = _index_of(snapshot.transactions, transaction_id, "Transaction")
        old = snapshot.transactions[index]
        updated = replace(old, **changes)
        snapshot.transactions[index] = updated
        snapshot.budgets = _adjust_budgets(snapshot.budgets, old, -1)
        snapshot.budgets = _adjust_budgets(snapshot.budgets, updated, +1)
        self._commit(snapshot)
        return updated

    def delete_transaction(self, transaction_id: str) -> Transaction:
        snapshot = self.load()
        index = _index_of(snapshot.transactions, transaction_id, "Transaction")
        removed = snapshot.transactions.pop(index)
        snapshot.budgets = _adjust_budgets(snapshot.budgets, removed, -1)
        self._commit(snapshot)
        return removed

    @staticmethod
    def _insert_missing(snapshot: LedgerSnapshot, transactions: Iterable[Transaction]) -> int:
        known = {t.id for t in snapshot.transactions}
        fresh: list[Transaction] = []
        for transaction in transactions:
            if transaction.id in known:
                continue
            known.add(transaction.id)
            fresh.append(transaction)
            snapshot.budgets = _adjust_budgets(snapshot.budgets, transaction, +1)
        snapshot.transactions[:0] = fresh
        return len(fresh)

    def insert_if_absent(self, transactions: Iterable[Transaction]) -> int:
        """Insert transactions whose id is not already stored; returns how many were added."""
        snapshot = self.load()
        added = self._insert_missing(snapshot, transactions)
        if added:
            self._commit(snapshot)
        return added

    def balance(self) -> Balance:
        income = ZERO
        expense = ZERO
        for transaction in self.load().transactions:
            if transaction.type == "income":
                income += transaction.amount
            else:
                expense += transaction.amount
        return Balance(income=income, expense=expense, net=income - expense)

    # --- budgets ---

    def list_budgets(self) -> list[Budget]:
        return self.load().budgets

    def add_budget(self, *, category: str, amount: Decimal, period: BudgetPeriod = "monthly") -> Budget:
        budget = Budget(id=self._id_factory(), category=category, amount=amount, period=period)
        snapshot = self.load()
        snapshot.budgets.append(budget)
        self._commit(snapshot)
        return budget

    def update_budget(self, budget_id: str, **changes: Any) -> Budget:
        snapshot = self.load()
        index = _index_of(snapshot.budgets, budget_id, "Budget")
        updated = replace(snapshot.budgets[index], **changes)
        snapshot.budgets[index] = updated
        self._commit(snapshot)
        return updated

    def delete_budget(self, budget_id: str) -> Budget:
        snapshot = self.load()
        index = _index_of(snapshot.budgets, budget_id, "Budget")
        removed = snapshot.budgets.pop(index)
        self._commit(snapshot)
        return removed

    # --- recurring rules ---

    def list_recurring(self) -> list[RecurringTransaction]:
        return self.load().recurring

    def add_recurring(self, rule: RecurringTransaction, now: datetime) -> CreationResult:
        """Save a rule and book its backlog in the same commit."""
        snapshot = self.load()
        if any(existing.id == rule.id for existing in snapshot.recurring):
            raise ValueError(f"Recurring rule already exists: {rule.id}")
        result = materialize_on_create(rule, now, id_factory=self._id_factory)
        snapshot.recurring.append(result.finalized_rule)
        self._insert_missing(snapshot, result.new_transactions)
        self._commit(snapshot)
        logger.info("Saved recurring rule %s with %d backfilled transaction(s)", rule.id, len(result.new_transactions))
        return result

    def update_recurring(self, rule_id: str, **changes: Any) -> RecurringTransaction:
        snapshot = self.load()
        index = _index_of(snapshot.recurring, rule_id, "Recurring rule")
        updated = replace(snapshot.recurring[index], **changes)
        snapshot.recurring[index] = updated
        self._commit(snapshot)
        return updated

    def delete_recurring(self, rule_id: str) -> RecurringTransaction:
        """Remove a rule; transactions it already generated stay in the ledger."""
        snapshot = self.load()
        index = _index_of(snapshot.recurring, rule_id, "Recurring rule")
        removed = snapshot.recurring.pop(index)
        self._commit(snapshot)
        return removed

    def apply_generation(self, result: GenerationResult) -> int:
        """Append generated transactions and advance rule checkpoints in one commit."""
        if not result.new_transactions and not result.rule_updates:
            return 0
        snapshot = self.load()
        added = self._insert_missing(snapshot, result.new_transactions)
        snapshot.recurring = [
            apply_rule_update(rule, result.rule_updates.get(rule.id)) for rule in snapshot.recurring
        ]
        self._commit(snapshot)
        return added
