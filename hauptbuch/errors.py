"""Errors raised at the posting boundary of the ledger."""
from __future__ import annotations

from decimal import Decimal


class LedgerError(ValueError):
    """Base class for records rejected before they enter the ledger."""


class UnbalancedTransactionError(LedgerError):
    def __init__(self, transaction_id: str, debit_total: Decimal, credit_total: Decimal) -> None:
        self.transaction_id = transaction_id
        self.debit_total = debit_total
        self.credit_total = credit_total
        super().__init__(
            f"Transaction '{transaction_id}' debits and credits must balance: "
            f"debits={debit_total} credits={credit_total}"
        )


class MissingAccountError(LedgerError):
    def __init__(self, account_ref: str, context: str | None = None) -> None:
        self.account_ref = account_ref
        message = f"Account '{account_ref}' does not exist"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class EmptyTransactionError(LedgerError):
    """A transaction needs at least two lines."""


class DuplicateRecordError(LedgerError):
    """A record with the same id or reference was already posted."""


class AlreadyReversedError(LedgerError):
    """The transaction was reversed before and cannot be reversed again."""


class NothingToPostError(LedgerError):
    """The computed posting carries no amount."""


__all__ = [
    "AlreadyReversedError",
    "DuplicateRecordError",
    "EmptyTransactionError",
    "LedgerError",
    "MissingAccountError",
    "NothingToPostError",
    "UnbalancedTransactionError",
]
