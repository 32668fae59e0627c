"""Assemble a structured receipt from raw OCR text."""

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce

from pocketledger.domain.receipt import ParsedReceipt, ParsedReceiptItem

from .line_classifier import LineClassification, classify_line

ZERO = Decimal("0")


class EmptyReceiptTextError(ValueError):
    """Raised when there is no OCR text to parse."""


@dataclass(frozen=True)
class _AssemblyState:
    """Accumulator threaded through the per-line fold."""

    items: tuple[ParsedReceiptItem, ...] = ()
    tax: Decimal = ZERO
    tax_percent: Decimal | None = None
    tip: Decimal = ZERO
    total: Decimal = ZERO
    subtotal: Decimal | None = None
    subtotal_seen: bool = False


def _apply(state: _AssemblyState, result: LineClassification) -> _AssemblyState:
    # Later summary lines overwrite earlier ones; OCR sometimes repeats them.
    if result.kind == "tax":
        assert result.amount is not None
        if result.percent is not None:
            return replace(state, tax=result.amount, tax_percent=result.percent)
        return replace(state, tax=result.amount)
    if result.kind == "tip":
        assert result.amount is not None
        return replace(state, tip=result.amount)
    if result.kind == "total":
        assert result.amount is not None
        return replace(state, total=result.amount)
    if result.kind == "subtotal":
        return replace(state, subtotal=result.amount, subtotal_seen=True)
    if result.kind == "item":
        assert result.name is not None and result.unit_price is not None
        item = ParsedReceiptItem(
            name=result.name,
            price=result.unit_price,
            quantity=result.quantity,
            line_total=result.amount,
        )
        return replace(state, items=state.items + (item,))
    return state


def _fold_line(state: _AssemblyState, line: str) -> _AssemblyState:
    return _apply(state, classify_line(line, subtotal_seen=state.subtotal_seen))


def split_receipt_lines(text: str) -> list[str]:
    """Split OCR text into trimmed, non-blank lines."""
    return [stripped for stripped in (line.strip() for line in text.splitlines()) if stripped]


def _derive_tax_percent(tax: Decimal, subtotal: Decimal | None) -> Decimal | None:
    if subtotal is None or subtotal <= 0 or tax == 0:
        return None
    return (tax / subtotal * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def parse_receipt_text(text: str | None) -> ParsedReceipt:
    """
    Parse raw OCR text into a ParsedReceipt.

    Lines that cannot be classified contribute nothing. When the text carries
    no percentage, the tax percent is derived from tax and subtotal. When no
    total line was read, the total is the item sum plus tax and tip.

    Raises:
        EmptyReceiptTextError: if ``text`` is None, empty or only whitespace.
    """
    if text is None or not text.strip():
        raise EmptyReceiptTextError("Receipt text is empty")

    state = reduce(_fold_line, split_receipt_lines(text), _AssemblyState())

    receipt = ParsedReceipt(
        items=list(state.items),
        tax=state.tax,
        tax_percent=state.tax_percent,
        tip=state.tip,
        total=state.total,
        subtotal=state.subtotal,
    )
    if receipt.tax_percent is None:
        receipt.tax_percent = _derive_tax_percent(receipt.tax, receipt.subtotal)
    if receipt.total == 0 and receipt.items:
        receipt.total = receipt.items_total + receipt.tax + receipt.tip
    return receipt
