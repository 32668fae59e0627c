"""Ledger record models: transactions, recurring rules and budgets.

Records serialize to the camelCase JSON shape used by the ledger document,
with money as strings and timestamps as ISO-8601.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, get_args

TransactionType = Literal["income", "expense"]
Frequency = Literal["daily", "weekly", "monthly", "yearly"]
BudgetPeriod = Literal["weekly", "monthly", "yearly"]

TRANSACTION_TYPES: tuple[str, ...] = get_args(TransactionType)
FREQUENCIES: tuple[str, ...] = get_args(Frequency)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` means UTC."""
    if isinstance(value, datetime):
        return value
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def _optional_timestamp(value: str | datetime | None) -> datetime | None:
    if value is None or value == "":
        return None
    return parse_timestamp(value)


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats from JSON keep their printed digits.
    return Decimal(str(value))


def _check_type(value: str) -> TransactionType:
    if value not in TRANSACTION_TYPES:
        raise ValueError(f"Unknown transaction type: {value!r}")
    return value  # type: ignore[return-value]


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Decimal
    type: TransactionType
    category: str
    payment_method: str
    description: str
    date: datetime
    created_at: datetime
    recurring_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(
            id=str(data["id"]),
            amount=_decimal(data["amount"]),
            type=_check_type(data["type"]),
            category=data.get("category", "uncategorized"),
            payment_method=data.get("paymentMethod", "other"),
            description=data.get("description", ""),
            date=parse_timestamp(data["date"]),
            created_at=parse_timestamp(data.get("createdAt") or data["date"]),
            recurring_id=data.get("recurringId"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "amount": str(self.amount),
            "type": self.type,
            "category": self.category,
            "paymentMethod": self.payment_method,
            "description": self.description,
            "date": format_timestamp(self.date),
            "createdAt": format_timestamp(self.created_at),
        }
        if self.recurring_id is not None:
            result["recurringId"] = self.recurring_id
        return result


@dataclass(frozen=True)
class RecurringTransaction:
    """A template the recurring engine turns into dated transactions."""

    id: str
    amount: Decimal
    type: TransactionType
    category: str
    payment_method: str
    description: str
    frequency: Frequency
    start_date: datetime
    end_date: datetime | None = None
    # Timestamp of the latest materialized occurrence; None means never generated.
    last_generated: datetime | None = None
    active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecurringTransaction:
        return cls(
            id=str(data["id"]),
            amount=_decimal(data["amount"]),
            type=_check_type(data["type"]),
            category=data.get("category", "uncategorized"),
            payment_method=data.get("paymentMethod", "other"),
            description=data.get("description", ""),
            frequency=data["frequency"],
            start_date=parse_timestamp(data["startDate"]),
            end_date=_optional_timestamp(data.get("endDate")),
            last_generated=_optional_timestamp(data.get("lastGenerated")),
            active=bool(data.get("active", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "amount": str(self.amount),
            "type": self.type,
            "category": self.category,
            "paymentMethod": self.payment_method,
            "description": self.description,
            "frequency": self.frequency,
            "startDate": format_timestamp(self.start_date),
            "active": self.active,
        }
        if self.end_date is not None:
            result["endDate"] = format_timestamp(self.end_date)
        if self.last_generated is not None:
            result["lastGenerated"] = format_timestamp(self.last_generated)
        return result


@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    amount: Decimal
    period: BudgetPeriod = "monthly"
    spent: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Budget:
        return cls(
            id=str(data["id"]),
            category=data["category"],
            amount=_decimal(data["amount"]),
            period=data.get("period", "monthly"),
            spent=_decimal(data.get("spent", "0")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "amount": str(self.amount),
            "period": self.period,
            "spent": str(self.spent),
        }
