"""pocketledger: receipt OCR parsing, recurring transactions and a local ledger."""

__version__ = "0.1.0"
