"""Advance VAT return (Umsatzsteuer-Voranmeldung) figures."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional

from hauptbuch.accounting.balances import PostingIndex, index_accounts
from hauptbuch.accounting.classification import accounts_with_prefix, find_account_by_code
from hauptbuch.accounting.periods import account_ledger_stats, fiscal_year_of
from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.models import ZERO, Account, Transaction

LOGGER = logging.getLogger(__name__)

CENT = Decimal("0.01")
SETTLEMENT_PREFIXES = ("1000", "1200", "1210", "1400", "1600")


@dataclass(frozen=True)
class VatReturn:
    report_date: date
    base_standard: Decimal
    base_reduced: Decimal
    base_exempt: Decimal
    output_tax_standard: Decimal
    output_tax_reduced: Decimal
    input_tax: Decimal

    @property
    def output_tax(self) -> Decimal:
        return self.output_tax_standard + self.output_tax_reduced

    @property
    def payable(self) -> Decimal:
        """Positive: owed to the tax office. Negative: refund."""
        return self.output_tax - self.input_tax


@dataclass
class VatBreakdownRow:
    account: Account
    net_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def prefix_balance(
    prefix: str,
    accounts: Iterable[Account],
    postings: PostingIndex,
    report_date: date,
    settings: LedgerSettings,
) -> Decimal:
    """Sum the analyzer ending balances of all accounts whose code starts with ``prefix``."""
    total = ZERO
    for account in accounts_with_prefix(accounts, prefix):
        stats = account_ledger_stats(
            account.id, postings, account.type, report_date, settings=settings
        )
        total += stats.ending_balance
    return total


def vat_return(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    report_date: date,
    settings: Optional[LedgerSettings] = None,
) -> VatReturn:
    settings = settings or get_settings()
    accounts = list(index_accounts(accounts).values())
    postings = transactions if isinstance(transactions, PostingIndex) else PostingIndex(transactions)

    def balance(prefix: str) -> Decimal:
        return prefix_balance(prefix, accounts, postings, report_date, settings)

    base_standard = balance(settings.vat_standard_prefix)
    base_reduced = balance(settings.vat_reduced_prefix)
    return VatReturn(
        report_date=report_date,
        base_standard=base_standard,
        base_reduced=base_reduced,
        base_exempt=balance(settings.vat_exempt_prefix),
        output_tax_standard=_quantize(base_standard * settings.vat_standard_rate),
        output_tax_reduced=_quantize(base_reduced * settings.vat_reduced_rate),
        input_tax=balance(settings.input_tax_prefix),
    )


def vat_reconciliation(
    tax_account_code: str,
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    fiscal_year: int,
    settings: Optional[LedgerSettings] = None,
) -> List[VatBreakdownRow]:
    """Break the postings on one tax account down by the account carrying the net amount.

    Only the first line of each transaction that is neither on the tax
    account nor on a cash, bank, receivable or payable account is used
    as the base line.
    """
    settings = settings or get_settings()
    by_id = index_accounts(accounts)
    tax_account = find_account_by_code(by_id.values(), tax_account_code)
    if tax_account is None:
        LOGGER.debug("Tax account %s not found; empty reconciliation", tax_account_code)
        return []

    breakdown: Dict[str, VatBreakdownRow] = {}
    for transaction in transactions:
        if fiscal_year_of(transaction.date, settings.fiscal_year_start_month) != fiscal_year:
            continue
        tax_line = next(
            (line for line in transaction.lines if line.account_id == tax_account.id), None
        )
        if tax_line is None:
            continue
        base_line = next(
            (
                line
                for line in transaction.lines
                if line.account_id != tax_account.id
                and not _is_settlement_account(by_id.get(line.account_id))
            ),
            None,
        )
        if base_line is None or base_line.account_id not in by_id:
            continue
        row = breakdown.get(base_line.account_id)
        if row is None:
            row = breakdown[base_line.account_id] = VatBreakdownRow(
                account=by_id[base_line.account_id]
            )
        row.net_amount += base_line.debit if base_line.debit > ZERO else base_line.credit
        row.tax_amount += tax_line.debit if tax_line.debit > ZERO else tax_line.credit
    return list(breakdown.values())


def _is_settlement_account(account: Optional[Account]) -> bool:
    return account is not None and account.code.startswith(SETTLEMENT_PREFIXES)


__all__ = ["VatBreakdownRow", "VatReturn", "prefix_balance", "vat_reconciliation", "vat_return"]
