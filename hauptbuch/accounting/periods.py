"""Period-aware ledger statistics (Summen- und Saldenliste).

Every figure is derived as of a target date and split into three parts:

* the opening balance, carried forward from earlier fiscal years and
  from opening-balance postings inside the target fiscal year,
* the turnover of the target fiscal year up to the target date,
* the turnover of the target calendar month.

Postings dated after the target date are ignored entirely.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from hauptbuch.accounting.balances import PostingIndex, index_accounts
from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.models import (
    Account,
    AccountType,
    JournalLine,
    LedgerStats,
    Transaction,
    TransactionKind,
    TrialBalanceRow,
)

LOGGER = logging.getLogger(__name__)


def fiscal_year_of(value: date, start_month: int = 1) -> int:
    """Fiscal years are labelled by the calendar year they start in."""
    return value.year - 1 if value.month < start_month else value.year


def fiscal_year_start(fiscal_year: int, start_month: int = 1) -> date:
    return date(fiscal_year, start_month, 1)


def fiscal_year_end(fiscal_year: int, start_month: int = 1) -> date:
    return fiscal_year_start(fiscal_year + 1, start_month) - timedelta(days=1)


def is_opening_transaction(
    transaction: Transaction, settings: Optional[LedgerSettings] = None
) -> bool:
    """Return whether a transaction books opening balances.

    The typed ``OPENING_BALANCE`` kind is authoritative. Records imported
    from older data carry no kind; for those the reference prefix ("EB...")
    and the German carry-forward keywords in the description are used as a
    compatibility fallback, which can be switched off in the settings.
    """
    if transaction.kind is TransactionKind.OPENING_BALANCE:
        return True
    settings = settings or get_settings()
    if transaction.kind is not None or not settings.legacy_opening_detection:
        return False
    reference = (transaction.reference or "").upper()
    if reference.startswith(settings.opening_reference_prefix.upper()):
        return True
    description = transaction.description.lower()
    return any(keyword in description for keyword in settings.opening_keywords)


def account_ledger_stats(
    account_id: str,
    transactions: Iterable[Transaction],
    account_type: AccountType,
    target_date: date,
    settings: Optional[LedgerSettings] = None,
) -> LedgerStats:
    """Return the trial-balance figures of a general-ledger account."""
    if isinstance(transactions, PostingIndex):
        postings = transactions.lines_for(account_id)
    else:
        postings = [
            (transaction, line)
            for transaction in transactions
            for line in transaction.lines
            if line.account_id == account_id
        ]
    return _account_stats(postings, account_type, target_date, settings or get_settings())


def _account_stats(
    postings: Iterable[Tuple[Transaction, JournalLine]],
    account_type: AccountType,
    target_date: date,
    settings: LedgerSettings,
) -> LedgerStats:
    start_month = settings.fiscal_year_start_month
    current_year = fiscal_year_of(target_date, start_month)
    stats = LedgerStats()
    opening_flags: Dict[str, bool] = {}

    for transaction, line in postings:
        if transaction.date > target_date:
            continue
        year = fiscal_year_of(transaction.date, start_month)
        if transaction.id not in opening_flags:
            opening_flags[transaction.id] = is_opening_transaction(transaction, settings)
        is_opening = opening_flags[transaction.id]

        if year < current_year:
            # Income and expense accounts start every fiscal year at zero.
            if account_type.is_balance_sheet:
                stats.opening_balance += account_type.signed(line.debit, line.credit)
        elif is_opening:
            stats.opening_balance += account_type.signed(line.debit, line.credit)
        else:
            _add_turnover(stats, transaction, line, target_date)

    stats.ending_balance = stats.opening_balance + account_type.signed(
        stats.debit_ytd, stats.credit_ytd
    )
    return stats


def contact_ledger_stats(
    contact_id: str,
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    target_date: date,
    settings: Optional[LedgerSettings] = None,
) -> LedgerStats:
    """Return the trial-balance figures of a customer or vendor sub-ledger.

    Only lines on receivable/payable style accounts (assets and liabilities)
    count. A counterparty with any posting on a liability account is treated
    as a creditor and its ending balance is reported credit-positive.
    """
    settings = settings or get_settings()
    accounts_by_id = index_accounts(accounts)
    start_month = settings.fiscal_year_start_month
    current_year = fiscal_year_of(target_date, start_month)
    own = [transaction for transaction in transactions if transaction.contact_id == contact_id]

    is_creditor = any(
        accounts_by_id.get(line.account_id) is not None
        and accounts_by_id[line.account_id].type is AccountType.LIABILITY
        for transaction in own
        for line in transaction.lines
    )

    stats = LedgerStats()
    for transaction in own:
        if transaction.date > target_date:
            continue
        year = fiscal_year_of(transaction.date, start_month)
        is_opening = is_opening_transaction(transaction, settings)
        for line in transaction.lines:
            account = accounts_by_id.get(line.account_id)
            if account is None:
                LOGGER.debug("Skipping line on unknown account %s", line.account_id)
                continue
            if account.type not in (AccountType.ASSET, AccountType.LIABILITY):
                continue
            if year < current_year or is_opening:
                stats.opening_balance += account.type.signed(line.debit, line.credit)
            else:
                _add_turnover(stats, transaction, line, target_date)

    role = AccountType.LIABILITY if is_creditor else AccountType.ASSET
    stats.ending_balance = stats.opening_balance + role.signed(stats.debit_ytd, stats.credit_ytd)
    return stats


def trial_balance(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    target_date: date,
    settings: Optional[LedgerSettings] = None,
) -> List[TrialBalanceRow]:
    """Return one row per account with activity, ordered by account code."""
    settings = settings or get_settings()
    index = transactions if isinstance(transactions, PostingIndex) else PostingIndex(list(transactions))
    rows = []
    for account in sorted(index_accounts(accounts).values(), key=lambda item: item.code):
        stats = _account_stats(index.lines_for(account.id), account.type, target_date, settings)
        if stats.has_activity:
            rows.append(TrialBalanceRow(account=account, stats=stats))
    return rows


def _add_turnover(
    stats: LedgerStats, transaction: Transaction, line: JournalLine, target_date: date
) -> None:
    stats.debit_ytd += line.debit
    stats.credit_ytd += line.credit
    if (transaction.date.year, transaction.date.month) == (target_date.year, target_date.month):
        stats.debit_month += line.debit
        stats.credit_month += line.credit


__all__ = [
    "account_ledger_stats",
    "contact_ledger_stats",
    "fiscal_year_end",
    "fiscal_year_of",
    "fiscal_year_start",
    "is_opening_transaction",
    "trial_balance",
]
