"""Data models for receipt scanning."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def _json_number(value: Decimal) -> int | float:
    # Whole amounts such as 48637 stay integers on the wire.
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class ParsedReceiptItem:
    """A single line item on a receipt."""

    name: str
    price: Decimal  # per-unit
    quantity: int = 1
    line_total: Decimal | None = None  # price printed on the receipt row

    @property
    def total(self) -> Decimal:
        if self.line_total is not None:
            return self.line_total
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "price": _json_number(self.price),
            "quantity": self.quantity,
        }


@dataclass
class ParsedReceipt:
    """Structured receipt assembled from OCR text."""

    items: list[ParsedReceiptItem] = field(default_factory=list)
    tax: Decimal = Decimal("0")
    tax_percent: Decimal | None = None
    tip: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    subtotal: Decimal | None = None

    @property
    def items_total(self) -> Decimal:
        return sum((item.total for item in self.items), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by the transaction form."""
        return {
            "items": [item.to_dict() for item in self.items],
            "tax": _json_number(self.tax),
            "taxPercent": _json_number(self.tax_percent) if self.tax_percent is not None else None,
            "tip": _json_number(self.tip),
            "total": _json_number(self.total),
        }
