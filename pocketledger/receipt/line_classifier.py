"""Classification of a single OCR text line.

Every line is tested against ``LINE_RULES`` in order and the first rule whose
predicate matches decides the outcome:

    credit -> tax -> tip -> total -> subtotal -> skip keyword -> header
        -> after subtotal -> item

The order matters: "Voucher -2.00" would otherwise be an item, "Tax 10% 5.00"
also looks like an item, "Sub Total" also contains "Total", and anything
printed below the subtotal block is payment detail rather than an item.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from .price_parser import PriceToken, find_rightmost_price

LineKind = Literal["tax", "tip", "total", "subtotal", "skip", "item", "none"]

TAX_KEYWORDS = re.compile(r"\b(?:tax|vat|gst|hst|pst|pajak|ppn|pb\s?1)\b", re.IGNORECASE)

TIP_KEYWORDS = re.compile(
    r"\b(?:tips?|gratuity|service\s*(?:charge|chg)|svc\.?(?:\s*(?:charge|chg))?|layanan)\b",
    re.IGNORECASE,
)

# Item-count and savings totals are not the amount due.
TOTAL_KEYWORDS = re.compile(
    r"\b(?:grand\s*total|total|amount\s*(?:due|payable)|balance(?:\s*due)?)\b"
    r"(?!\s*(?:items?|qty|quantity|discounts?|savings?|saved)\b)",
    re.IGNORECASE,
)

# OCR often splits "Subtotal" with several spaces or a hyphen.
SUB_TOTAL_WORD = re.compile(r"\bsub[\s-]*total\b", re.IGNORECASE)
SUBTOTAL_KEYWORDS = re.compile(rf"{SUB_TOTAL_WORD.pattern}|\bitems?\s*:\s*\d+", re.IGNORECASE)

SKIP_KEYWORDS = re.compile(
    r"\b(?:"
    # payment and change
    r"change|kembali(?:an)?|cash|tunai|card|visa|master\s*card|amex|debit|credit|"
    # courtesy lines
    r"thank\s*you|terima\s*kasih|"
    # receipt metadata
    r"receipt|struk|invoice|date|time|tanggal|jam|staff|cashier|kasir|server|waiter|"
    r"table|meja|order|guests?|pax|covers?|tel|phone|telp|www|"
    # adjustments and loyalty
    r"discounts?|disc|diskon|promo|rounding|round\s*adj(?:ustment)?|pembulatan|"
    r"sav(?:ings?|ed)|points?|member|"
    r"total\s*(?:items?|qty|quantity)"
    r")\b",
    re.IGNORECASE,
)

HEADER_PATTERNS = (
    # 12/05/2024, 2024-05-12, 12.05.24
    re.compile(r"\b\d{1,4}[/.-]\d{1,2}[/.-]\d{2,4}\b"),
    # 14:32 or 14:32:05
    re.compile(r"\b\d{1,2}:\d{2}(?::\d{2})?\b"),
    # #0042
    re.compile(r"(?:^|\s)#\s*\d+"),
    # No. 123, Ref: 4567, TRX#889
    re.compile(r"\b(?:no|nr|ref|trx|txn|inv|bill|chk)\s*[.:#]\s*\d+", re.IGNORECASE),
)

# Tried in order on the text before the price.
QUANTITY_PATTERNS = (
    # "2x Burger", "2 x Burger"
    re.compile(r"^(?P<qty>\d+)\s*[x×]\s+(?P<name>\S.*)$", re.IGNORECASE),
    # "Burger x 2", "Burger x2"
    re.compile(r"^(?P<name>.*\S)\s+[x×]\s*(?P<qty>\d+)$", re.IGNORECASE),
    # "2 Burger"
    re.compile(r"^(?P<qty>\d{1,3})\s+(?P<name>\S.*)$"),
)

MIN_ITEM_NAME_LENGTH = 2

_LEADING_SKU = re.compile(r"^\d{6,}\s+")
_TRAILING_JUNK = re.compile(r"[\s:=@*\-]+$")
_HAS_LETTER = re.compile(r"[^\W\d_]")
_PERCENT = re.compile(r"(\d+(?:[.,]\d+)?)\s*%")
# A minus or opening parenthesis glued to the amount marks a credit: "-2.00", "-$2.00", "(2.00)", "2.00-".
_CREDIT_BEFORE = re.compile(r"[-\u2212(](?:(?:Rp\.?|IDR|USD|EUR|[$€£¥₹])\s*)?$", re.IGNORECASE)
_CREDIT_AFTER = re.compile(r"^[-\u2212]")


@dataclass(frozen=True)
class LineClassification:
    """Outcome of classifying one receipt line."""

    kind: LineKind
    amount: Decimal | None = None
    percent: Decimal | None = None
    name: str | None = None
    quantity: int = 1
    unit_price: Decimal | None = None


NOT_ACTIONABLE = LineClassification(kind="none")
SKIPPED = LineClassification(kind="skip")


@dataclass(frozen=True)
class LineContext:
    """One line with its validated right-most price."""

    line: str
    price: PriceToken
    subtotal_seen: bool = False

    @property
    def amount(self) -> Decimal:
        assert self.price.value is not None
        return self.price.value

    @property
    def before_price(self) -> str:
        return self.line[: self.price.start].strip()


@dataclass(frozen=True)
class LineRule:
    """A predicate/handler pair; a handler returning None means ``none``."""

    name: str
    matches: Callable[[LineContext], bool]
    handle: Callable[[LineContext], LineClassification | None]


def _keyword(pattern: re.Pattern[str]) -> Callable[[LineContext], bool]:
    return lambda ctx: pattern.search(ctx.line) is not None


def _tax(ctx: LineContext) -> LineClassification:
    percent = None
    percent_match = _PERCENT.search(ctx.line)
    if percent_match:
        percent = Decimal(percent_match.group(1).replace(",", "."))
    return LineClassification(kind="tax", amount=ctx.amount, percent=percent)


def _amount_of(kind: LineKind) -> Callable[[LineContext], LineClassification]:
    return lambda ctx: LineClassification(kind=kind, amount=ctx.amount)


def _is_credit(ctx: LineContext) -> bool:
    before = ctx.line[: ctx.price.start]
    after = ctx.line[ctx.price.end :]
    return _CREDIT_BEFORE.search(before) is not None or _CREDIT_AFTER.match(after) is not None


def _is_amount_due(ctx: LineContext) -> bool:
    return TOTAL_KEYWORDS.search(ctx.line) is not None and SUB_TOTAL_WORD.search(ctx.line) is None


def _looks_like_header(ctx: LineContext) -> bool:
    return any(pattern.search(ctx.line) for pattern in HEADER_PATTERNS)


def _split_quantity(text: str) -> tuple[str, int]:
    """Split ``text`` into (name, quantity); quantity defaults to 1."""
    for pattern in QUANTITY_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        quantity = int(match.group("qty"))
        if quantity < 1:
            continue
        return match.group("name").strip(), quantity
    return text, 1


def _item(ctx: LineContext) -> LineClassification | None:
    before = ctx.before_price
    if not before or SKIP_KEYWORDS.search(before):
        return None

    text = _LEADING_SKU.sub("", before)
    text = _TRAILING_JUNK.sub("", text)
    name, quantity = _split_quantity(text)
    name = _TRAILING_JUNK.sub("", name).strip()

    if len(name) < MIN_ITEM_NAME_LENGTH or not _HAS_LETTER.search(name):
        return None

    # The printed price is the row total; divide back to the unit price.
    return LineClassification(
        kind="item",
        amount=ctx.amount,
        name=name,
        quantity=quantity,
        unit_price=ctx.amount / quantity,
    )


LINE_RULES: tuple[LineRule, ...] = (
    LineRule("credit", _is_credit, lambda ctx: SKIPPED),
    LineRule("tax", _keyword(TAX_KEYWORDS), _tax),
    LineRule("tip", _keyword(TIP_KEYWORDS), _amount_of("tip")),
    LineRule("total", _is_amount_due, _amount_of("total")),
    LineRule("subtotal", _keyword(SUBTOTAL_KEYWORDS), _amount_of("subtotal")),
    LineRule("skip_keyword", _keyword(SKIP_KEYWORDS), lambda ctx: SKIPPED),
    LineRule("header", _looks_like_header, lambda ctx: SKIPPED),
    LineRule("after_subtotal", lambda ctx: ctx.subtotal_seen, lambda ctx: SKIPPED),
    LineRule("item", lambda ctx: True, _item),
)


def classify_line(line: str, subtotal_seen: bool = False) -> LineClassification:
    """
    Classify one trimmed OCR line.

    Args:
        line: A single non-empty text line.
        subtotal_seen: Whether a subtotal line appeared earlier on the receipt.
    """
    price = find_rightmost_price(line)
    if price is None or price.value is None:
        return NOT_ACTIONABLE

    ctx = LineContext(line=line, price=price, subtotal_seen=subtotal_seen)
    for rule in LINE_RULES:
        if rule.matches(ctx):
            return rule.handle(ctx) or NOT_ACTIONABLE
    return NOT_ACTIONABLE
