"""Local ledger persistence and export."""

from pocketledger.ledger.store import Balance, LedgerRecordNotFound, LedgerSnapshot, LedgerStore

__all__ = [
    "Balance",
    "LedgerRecordNotFound",
    "LedgerSnapshot",
    "LedgerStore",
]
