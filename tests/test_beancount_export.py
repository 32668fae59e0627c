from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from beancount import loader
from beancount.core import data

from pocketledger.domain.transaction import Transaction
from pocketledger.ledger.beancount_export import (
    account_component,
    category_account,
    format_beancount,
    funding_account,
    to_beancount_entries,
)


def _txn(txn_id: str, amount: str, type: str, category: str, payment_method: str, day: int, **extra: object) -> Transaction:
    when = datetime(2024, 1, day, 12, 0, tzinfo=timezone.utc)
    return Transaction(
        id=txn_id,
        amount=Decimal(amount),
        type=type,  # type: ignore[arg-type]
        category=category,
        payment_method=payment_method,
        description=extra.pop("description", ""),  # type: ignore[arg-type]
        date=when,
        created_at=when,
        **extra,  # type: ignore[arg-type]
    )


SAMPLE = [
    _txn("t3", "12.00", "expense", "groceries", "Apple Pay", 5, description="Corner shop"),
    _txn("t1", "2000", "income", "salary", "transfer", 1, description="Payroll"),
    _txn("t2", "45.25", "expense", "Dining Out", "credit", 3, description="Dinner", recurring_id="dinner-club"),
]


def test_account_component_normalizes_labels() -> None:
    assert account_component("dining out") == "DiningOut"
    assert account_component("7-eleven") == "X7Eleven"
    assert account_component("!!!") == "Uncategorized"


def test_account_mapping() -> None:
    salary, dinner = SAMPLE[1], SAMPLE[2]

    assert category_account(salary) == "Income:Salary"
    assert category_account(dinner) == "Expenses:DiningOut"
    assert funding_account(dinner) == "Liabilities:CreditCard"
    assert funding_account(SAMPLE[0]) == "Assets:ApplePay"


def test_entries_are_sorted_and_balanced() -> None:
    entries = to_beancount_entries(SAMPLE, include_open_directives=False)

    assert all(isinstance(entry, data.Transaction) for entry in entries)
    assert [entry.meta["pocketledger-id"] for entry in entries] == ["t1", "t2", "t3"]
    for entry in entries:
        assert sum(posting.units.number for posting in entry.postings) == 0

    dinner = entries[1]
    assert dinner.meta["recurring-id"] == "dinner-club"
    assert [(p.account, p.units.number) for p in dinner.postings] == [
        ("Expenses:DiningOut", Decimal("45.25")),
        ("Liabilities:CreditCard", Decimal("-45.25")),
    ]


def test_open_directives_cover_every_account() -> None:
    entries = to_beancount_entries(SAMPLE)

    opens = [entry for entry in entries if isinstance(entry, data.Open)]
    assert {entry.account for entry in opens} == {
        "Income:Salary",
        "Assets:Bank:Checking",
        "Expenses:DiningOut",
        "Liabilities:CreditCard",
        "Expenses:Groceries",
        "Assets:ApplePay",
    }
    assert {entry.date.isoformat() for entry in opens} == {"2024-01-01"}


def test_formatted_output_loads_cleanly() -> None:
    text = format_beancount(SAMPLE, currency="EUR")

    entries, errors, _options = loader.load_string(text)

    assert errors == []
    transactions = [entry for entry in entries if isinstance(entry, data.Transaction)]
    assert len(transactions) == 3
    assert {p.units.currency for t in transactions for p in t.postings} == {"EUR"}


def test_empty_ledger_exports_nothing() -> None:
    assert to_beancount_entries([]) == []
    assert format_beancount([]) == ""
