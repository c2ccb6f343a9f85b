"""Checks applied to a transaction before it enters the ledger."""
from __future__ import annotations

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from hauptbuch.accounting.balances import index_accounts
from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.errors import EmptyTransactionError, MissingAccountError, UnbalancedTransactionError
from hauptbuch.models import Account, JournalLine, Transaction


def quantize(value: Decimal | float | int | str) -> Decimal:
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def normalize_line(line: JournalLine) -> JournalLine:
    return replace(line, debit=quantize(line.debit), credit=quantize(line.credit))


def validate_transaction(
    transaction: Transaction,
    accounts: Iterable[Account],
    settings: Optional[LedgerSettings] = None,
) -> Transaction:
    """Return the transaction with amounts rounded to cents, or raise.

    Raises:
        EmptyTransactionError: fewer than two lines.
        MissingAccountError: a line refers to an account that does not exist.
        UnbalancedTransactionError: debits and credits differ by more than
            the configured balance tolerance.
    """
    settings = settings or get_settings()
    accounts_by_id = index_accounts(accounts)
    if len(transaction.lines) < 2:
        raise EmptyTransactionError(
            f"Transaction '{transaction.id}' requires at least two lines"
        )
    for line in transaction.lines:
        if line.account_id not in accounts_by_id:
            raise MissingAccountError(line.account_id, f"transaction '{transaction.id}'")

    normalized = replace(transaction, lines=tuple(normalize_line(line) for line in transaction.lines))
    if not normalized.is_balanced(settings.balance_tolerance):
        raise UnbalancedTransactionError(
            transaction.id, normalized.total_debit, normalized.total_credit
        )
    return normalized


__all__ = ["normalize_line", "quantize", "validate_transaction"]
