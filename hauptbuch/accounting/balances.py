"""Full-history account balances."""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from hauptbuch.models import ZERO, Account, AccountType, JournalLine, Transaction

LOGGER = logging.getLogger(__name__)


def account_balance(
    account_id: str, transactions: Iterable[Transaction], account_type: AccountType
) -> Decimal:
    """Return the signed balance of one account over the complete history.

    Debit-normal accounts (assets, expenses) accumulate ``debit - credit``,
    every other type ``credit - debit``. Reversal lines carry negative
    amounts and are summed like any other line.
    """
    balance = ZERO
    for transaction in transactions:
        for line in transaction.lines:
            if line.account_id == account_id:
                balance += account_type.signed(line.debit, line.credit)
    return balance


def contact_balance(
    contact_id: str,
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    end_date: Optional[date] = None,
) -> Decimal:
    """Return the open balance of a customer or vendor on its receivable/payable lines."""
    accounts_by_id = index_accounts(accounts)
    balance = ZERO
    for transaction in transactions:
        if transaction.contact_id != contact_id:
            continue
        if end_date and transaction.date > end_date:
            continue
        for line in transaction.lines:
            account = accounts_by_id.get(line.account_id)
            if account is None:
                LOGGER.debug("Skipping line on unknown account %s", line.account_id)
                continue
            if account.type in (AccountType.ASSET, AccountType.LIABILITY):
                balance += account.type.signed(line.debit, line.credit)
    return balance


def index_accounts(accounts: Iterable[Account]) -> Dict[str, Account]:
    if isinstance(accounts, Mapping):
        return dict(accounts)
    return {account.id: account for account in accounts}


class PostingIndex:
    """Lines grouped per account, built once per report.

    Statements query many accounts against the same history; scanning the
    history once keeps report building linear in the number of lines.
    """

    def __init__(self, transactions: Sequence[Transaction]) -> None:
        self._transactions = list(transactions)
        self._lines: Dict[str, List[Tuple[Transaction, JournalLine]]] = defaultdict(list)
        for transaction in self._transactions:
            for line in transaction.lines:
                self._lines[line.account_id].append((transaction, line))

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def lines_for(self, account_id: str) -> List[Tuple[Transaction, JournalLine]]:
        return self._lines.get(account_id, [])

    def account_ids(self) -> List[str]:
        return list(self._lines)


__all__ = ["PostingIndex", "account_balance", "contact_balance", "index_accounts"]
