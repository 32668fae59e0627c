"""Export ledger transactions as Beancount entries."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from beancount.core import amount, data, flags
from beancount.core.number import D
from beancount.parser import printer

from pocketledger.domain.transaction import Transaction

CREDIT_ACCOUNT = "Liabilities:CreditCard"

# Known payment method ids from the app's defaults.
PAYMENT_METHOD_ACCOUNTS = {
    "cash": "Assets:Cash",
    "credit": CREDIT_ACCOUNT,
    "debit": "Assets:Bank:Checking",
    "transfer": "Assets:Bank:Checking",
    "digital": "Assets:DigitalWallet",
    "other": "Assets:Other",
}


def account_component(name: str) -> str:
    """Turn a free-form label into a valid Beancount account component."""
    words = re.findall(r"[A-Za-z0-9]+", name)
    component = "".join(word[:1].upper() + word[1:] for word in words)
    if not component:
        return "Uncategorized"
    if not component[0].isalpha():
        component = "X" + component
    return component


def category_account(transaction: Transaction) -> str:
    root = "Income" if transaction.type == "income" else "Expenses"
    return f"{root}:{account_component(transaction.category)}"


def funding_account(transaction: Transaction) -> str:
    known = PAYMENT_METHOD_ACCOUNTS.get(transaction.payment_method)
    if known is not None:
        return known
    return f"Assets:{account_component(transaction.payment_method)}"


def _postings(transaction: Transaction, currency: str) -> list[data.Posting]:
    value = D(str(transaction.amount))
    # Income credits the income account; expenses debit the expense account.
    sign = -1 if transaction.type == "income" else 1
    return [
        data.Posting(category_account(transaction), amount.Amount(sign * value, currency), None, None, None, None),
        data.Posting(funding_account(transaction), amount.Amount(-sign * value, currency), None, None, None, None),
    ]


def to_beancount_entries(
    transactions: Iterable[Transaction],
    currency: str = "USD",
    include_open_directives: bool = True,
) -> list[data.Directive]:
    """
    Map ledger transactions to Beancount directives, oldest first.

    With ``include_open_directives`` an ``Open`` is emitted for every account
    on the earliest transaction date, so the output loads on its own.
    """
    ordered = sorted(transactions, key=lambda t: (t.date, t.created_at))
    entries: list[data.Directive] = []
    opened: dict[str, date] = {}
    for index, transaction in enumerate(ordered):
        meta = data.new_metadata("pocketledger", index, {"pocketledger-id": transaction.id})
        if transaction.recurring_id is not None:
            meta["recurring-id"] = transaction.recurring_id
        postings = _postings(transaction, currency)
        for posting in postings:
            opened.setdefault(posting.account, transaction.date.date())
        entries.append(
            data.Transaction(
                meta=meta,
                date=transaction.date.date(),
                flag=flags.FLAG_OKAY,
                payee=None,
                narration=transaction.description,
                tags=frozenset(),
                links=frozenset(),
                postings=postings,
            )
        )

    if not include_open_directives or not entries:
        return entries

    first_date = min(opened.values())
    opens: list[data.Directive] = [
        data.Open(data.new_metadata("pocketledger", 0), first_date, account, [currency], None)
        for account in sorted(opened)
    ]
    return opens + entries


def format_beancount(
    transactions: Iterable[Transaction],
    currency: str = "USD",
    include_open_directives: bool = True,
) -> str:
    """Render transactions as Beancount text."""
    entries = to_beancount_entries(transactions, currency, include_open_directives)
    return "\n".join(printer.format_entry(entry) for entry in entries)
