"""Core domain models and pure engines for pocketledger.

Usage:
    from pocketledger.domain import ParsedReceipt, RecurringTransaction, generate_due_occurrences
"""

from pocketledger.domain.receipt import ParsedReceipt, ParsedReceiptItem
from pocketledger.domain.recurrence import UnsupportedFrequencyError, end_of_day, next_occurrence
from pocketledger.domain.recurring import (
    CreationResult,
    GenerationResult,
    RuleUpdate,
    apply_rule_update,
    generate_due_occurrences,
    materialize_on_create,
)
from pocketledger.domain.transaction import Budget, RecurringTransaction, Transaction

__all__ = [
    "Budget",
    "CreationResult",
    "GenerationResult",
    "ParsedReceipt",
    "ParsedReceiptItem",
    "RecurringTransaction",
    "RuleUpdate",
    "Transaction",
    "UnsupportedFrequencyError",
    "apply_rule_update",
    "end_of_day",
    "generate_due_occurrences",
    "materialize_on_create",
    "next_occurrence",
]
