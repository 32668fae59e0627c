"""Locale-ambiguous price token parsing.

Receipts mix ``1.234,56`` (EU), ``1,234.56`` (US) and cent-less thousands such
as ``48,637`` or ``Rp 48.637`` with no per-line locale signal. The rule used
here:

- if the last separator is followed by exactly three digits, every separator
  is a thousands grouping (``22.739`` -> 22739);
- otherwise the last separator is the decimal point and earlier ones are
  groupings (``1.234,56`` -> 1234.56, ``10,50`` -> 10.50).

Tokens with fewer than two digits are rejected; single stray digits are
usually customer counts or OCR noise.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

MIN_PRICE_DIGITS = 2

CURRENCY_GLYPHS = re.compile(r"(?:Rp\.?|IDR|USD|EUR|[$€£¥₹])", re.IGNORECASE)

# Digits with optional ./, groupings, optionally led by a currency glyph.
# Numbers directly followed by "%" are percentages, not prices.
PRICE_PATTERN = re.compile(
    r"(?:(?:Rp\.?|IDR|USD|EUR|[$€£¥₹])\s*)?"
    r"(?<![\d.,])(?P<number>\d+(?:[.,]\d+)*)"
    r"(?![.,]?\d)(?!\s*%)",
    re.IGNORECASE,
)

_NUMERIC_CORE = re.compile(r"\d+(?:[.,]\d+)*")
_SEPARATORS = re.compile(r"[.,]")


@dataclass(frozen=True)
class PriceToken:
    """A price-pattern match within a line."""

    raw: str
    start: int
    end: int
    value: Decimal | None  # None when the token was rejected


def parse_price_token(raw: str) -> Decimal | None:
    """
    Convert a price string such as ``$12.34`` or ``48,637`` to a Decimal.

    Returns:
        A positive Decimal, or None when the token has fewer than two digits,
        carries no digits at all, or is not positive.
    """
    if not raw:
        return None
    stripped = CURRENCY_GLYPHS.sub("", raw)
    stripped = re.sub(r"\s+", "", stripped)
    match = _NUMERIC_CORE.search(stripped)
    if not match:
        return None
    core = match.group(0)

    digits = _SEPARATORS.sub("", core)
    if len(digits) < MIN_PRICE_DIGITS:
        return None

    last_sep = max(core.rfind("."), core.rfind(","))
    if last_sep == -1:
        normalized = digits
    else:
        suffix = core[last_sep + 1 :]
        if len(suffix) == 3:
            normalized = digits
        else:
            normalized = f"{digits[: -len(suffix)]}.{suffix}"

    try:
        value = Decimal(normalized)
    except InvalidOperation:
        return None
    if not value.is_finite() or value <= 0:
        return None
    return value


def find_rightmost_price(line: str) -> PriceToken | None:
    """
    Return the right-most price-looking token in ``line``.

    Receipt prices are right-aligned; leading numbers are more often
    quantities or codes.
    """
    matches = list(PRICE_PATTERN.finditer(line))
    if not matches:
        return None
    last = matches[-1]
    raw = last.group(0)
    return PriceToken(raw=raw, start=last.start(), end=last.end(), value=parse_price_token(raw))
