from __future__ import annotations

from decimal import Decimal

import pytest

from pocketledger.receipt.line_classifier import LINE_RULES, classify_line


def test_rule_precedence_order_is_explicit() -> None:
    assert [rule.name for rule in LINE_RULES] == [
        "credit",
        "tax",
        "tip",
        "total",
        "subtotal",
        "skip_keyword",
        "header",
        "after_subtotal",
        "item",
    ]


def test_tax_line_captures_percent() -> None:
    result = classify_line("Tax 10% 5.00")

    assert result.kind == "tax"
    assert result.amount == Decimal("5.00")
    assert result.percent == Decimal("10")


def test_tax_line_without_percent() -> None:
    result = classify_line("PPN 6.864")

    assert result.kind == "tax"
    assert result.amount == Decimal("6864")
    assert result.percent is None


def test_quantity_prefix_item_divides_line_total() -> None:
    result = classify_line("2x Burger 9.00")

    assert result.kind == "item"
    assert result.name == "Burger"
    assert result.quantity == 2
    assert result.unit_price == Decimal("4.50")
    assert result.amount == Decimal("9.00")


@pytest.mark.parametrize(
    ("line", "name", "quantity", "unit_price"),
    [
        ("Burger x 3 12.00", "Burger", 3, Decimal("4")),
        ("Burger x3 12.00", "Burger", 3, Decimal("4")),
        ("3 Coffee 13.50", "Coffee", 3, Decimal("4.50")),
        ("Fries 3.25", "Fries", 1, Decimal("3.25")),
        ("Nasi Goreng Rp 48.637", "Nasi Goreng", 1, Decimal("48637")),
        ("123456789 COKE ZERO 17.19", "COKE ZERO", 1, Decimal("17.19")),
    ],
)
def test_item_quantity_patterns(line: str, name: str, quantity: int, unit_price: Decimal) -> None:
    result = classify_line(line)

    assert result.kind == "item"
    assert result.name == name
    assert result.quantity == quantity
    assert result.unit_price == unit_price


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("Tip 2.00", "tip"),
        ("Gratuity 15% 6.00", "tip"),
        ("Service Charge 5.00", "tip"),
        ("GRAND TOTAL 29.75", "total"),
        ("Amount Due 29.75", "total"),
        ("Balance 29.75", "total"),
        ("SUBTOTAL 45.00", "subtotal"),
        ("Sub Total 45.00", "subtotal"),
        ("Sub  Total 45.00", "subtotal"),
        ("SUB - TOTAL 45.00", "subtotal"),
        ("Items: 3 45.00", "subtotal"),
        ("Cash 50.00", "skip"),
        ("Change 20.25", "skip"),
        ("VISA ****1234", "skip"),
        ("Thank you 10.00", "skip"),
        ("Discount 2.50", "skip"),
        ("Total items 12", "skip"),
        ("12/05/2024 14:32", "skip"),
        ("Ref: 00412", "skip"),
    ],
)
def test_summary_and_noise_lines(line: str, kind: str) -> None:
    assert classify_line(line).kind == kind


def test_tax_wins_over_total_keyword() -> None:
    assert classify_line("Total Tax 3.00").kind == "tax"


def test_lines_after_subtotal_are_skipped() -> None:
    assert classify_line("Coffee 4.50", subtotal_seen=True).kind == "skip"
    assert classify_line("Coffee 4.50", subtotal_seen=False).kind == "item"


def test_summary_lines_still_count_after_subtotal() -> None:
    assert classify_line("Tip 2.00", subtotal_seen=True).kind == "tip"
    assert classify_line("Tax 1.50", subtotal_seen=True).kind == "tax"
    assert classify_line("Total 20.00", subtotal_seen=True).kind == "total"


@pytest.mark.parametrize(
    "line",
    [
        "Burger",
        ":3",
        "x 4.00",
        "4.00",
        "0812 3456 7890",
    ],
)
def test_unusable_lines_are_not_actionable(line: str) -> None:
    assert classify_line(line).kind == "none"


@pytest.mark.parametrize(
    "line",
    [
        "Voucher -2.00",
        "Coupon -$2.00",
        "Coupon $-2.00",
        "Refund (3.50)",
        "Bottle deposit 0.25-",
        "Bag return −1.20",
    ],
)
def test_credit_rows_are_skipped(line: str) -> None:
    assert classify_line(line).kind == "skip"


def test_detached_dash_is_not_a_credit() -> None:
    result = classify_line("Burger - 9.00")

    assert result.kind == "item"
    assert result.name == "Burger"
    assert result.amount == Decimal("9.00")
