"""Ledger storage interface and the in-memory reference ledger."""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from hauptbuch.accounting.charts.skr03 import seed_accounts
from hauptbuch.accounting.controlling import ProjectStats, cost_center_totals, project_stats
from hauptbuch.accounting.depreciation import build_depreciation_transaction
from hauptbuch.accounting.invoices import OpenItem, invoice_payment_status, open_items
from hauptbuch.accounting.periods import trial_balance
from hauptbuch.accounting.reversal import reverse_invoice, reverse_transaction
from hauptbuch.accounting.statements import BalanceSheet, IncomeStatement, StatementBuilder
from hauptbuch.accounting.validation import validate_transaction
from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.errors import DuplicateRecordError
from hauptbuch.models import (
    Account,
    Asset,
    Invoice,
    PaymentStatus,
    Settlement,
    Transaction,
    TrialBalanceRow,
)

LOGGER = logging.getLogger(__name__)


class LedgerRepository(Protocol):
    """Read/append access to the books; implemented by the caller's storage."""

    def accounts(self) -> Sequence[Account]: ...

    def transactions(self) -> Sequence[Transaction]: ...

    def invoices(self) -> Sequence[Invoice]: ...

    def assets(self) -> Sequence[Asset]: ...

    def append(self, transaction: Transaction) -> Transaction: ...


class InMemoryLedger:
    """Single-writer ledger kept in memory.

    Every posting is validated before it is appended; calculations run
    against snapshots of the stored records.
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        seed_chart: bool = False,
    ) -> None:
        self.settings = settings or get_settings()
        self._accounts: Dict[str, Account] = {}
        self._transactions: List[Transaction] = []
        self._invoices: Dict[str, Invoice] = {}
        self._assets: Dict[str, Asset] = {}
        self._settlements: List[Settlement] = []
        if seed_chart:
            for account in seed_accounts():
                self.add_account(account)

    # ------------------------------------------------------------------
    # Repository interface
    # ------------------------------------------------------------------
    def accounts(self) -> List[Account]:
        return sorted(self._accounts.values(), key=lambda account: account.code)

    def transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def invoices(self) -> List[Invoice]:
        return list(self._invoices.values())

    def assets(self) -> List[Asset]:
        return list(self._assets.values())

    def settlements(self) -> List[Settlement]:
        return list(self._settlements)

    def append(self, transaction: Transaction) -> Transaction:
        return self.post(transaction)

    # ------------------------------------------------------------------
    # Master data
    # ------------------------------------------------------------------
    def get_account(self, account_id: str) -> Account:
        try:
            return self._accounts[account_id]
        except KeyError as exc:
            raise KeyError(f"Unknown account '{account_id}'") from exc

    def add_account(self, account: Account) -> Account:
        if account.id in self._accounts:
            raise DuplicateRecordError(f"Account '{account.id}' already exists")
        self._accounts[account.id] = account
        return account

    def add_invoice(self, invoice: Invoice) -> Invoice:
        if invoice.id in self._invoices:
            raise DuplicateRecordError(f"Invoice '{invoice.number}' already exists")
        self._invoices[invoice.id] = invoice
        return invoice

    def get_invoice(self, invoice_id: str) -> Invoice:
        try:
            return self._invoices[invoice_id]
        except KeyError as exc:
            raise KeyError(f"Unknown invoice '{invoice_id}'") from exc

    def add_asset(self, asset: Asset) -> Asset:
        if asset.id in self._assets:
            raise DuplicateRecordError(f"Asset '{asset.id}' already exists")
        self.get_account(asset.gl_account_id)
        self._assets[asset.id] = asset
        return asset

    def record_settlement(self, settlement: Settlement) -> Settlement:
        self.get_invoice(settlement.invoice_id)
        self._settlements.append(settlement)
        LOGGER.info("Recorded settlement of %s for invoice %s", settlement.amount, settlement.invoice_id)
        return settlement

    # ------------------------------------------------------------------
    # Journal
    # ------------------------------------------------------------------
    def get_transaction(self, transaction_id: str) -> Transaction:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        raise KeyError(f"Unknown transaction '{transaction_id}'")

    def post(self, transaction: Transaction) -> Transaction:
        if any(existing.id == transaction.id for existing in self._transactions):
            raise DuplicateRecordError(f"Transaction '{transaction.id}' already posted")
        transaction = validate_transaction(transaction, self._accounts, settings=self.settings)
        self._transactions.append(transaction)
        LOGGER.info(
            "Posted transaction %s (%s) over %d lines",
            transaction.id,
            transaction.reference or transaction.description,
            len(transaction.lines),
        )
        return transaction

    def reverse(
        self, transaction_id: str, reason: str, on: Optional[date] = None
    ) -> Transaction:
        """Post the storno of a stored transaction and flag the original."""
        reversal = reverse_transaction(self.get_transaction(transaction_id), reason, date=on)
        storno = self.post(reversal.storno)
        self._replace_transaction(reversal.original)
        return storno

    def cancel_invoice(
        self,
        invoice_id: str,
        reason: str,
        comment: Optional[str] = None,
        on: Optional[date] = None,
    ) -> Transaction:
        invoice = self.get_invoice(invoice_id)
        result = reverse_invoice(invoice, self._transactions, reason, comment=comment, date=on)
        storno = self.post(result.storno)
        self._replace_transaction(result.original)
        self._invoices[invoice.id] = result.invoice
        return storno

    def post_depreciation(self, year: int) -> Transaction:
        reference = f"AfA-{year}"
        if any(
            existing.reference == reference and not existing.is_reversed
            for existing in self._transactions
        ):
            raise DuplicateRecordError(f"Depreciation for {year} was already posted")
        transaction = build_depreciation_transaction(
            self._assets.values(), self._accounts, year, settings=self.settings
        )
        return self.post(transaction)

    def _replace_transaction(self, transaction: Transaction) -> None:
        for position, existing in enumerate(self._transactions):
            if existing.id == transaction.id:
                self._transactions[position] = transaction
                return
        raise KeyError(f"Unknown transaction '{transaction.id}'")

    # ------------------------------------------------------------------
    # Reporting helpers
    # ------------------------------------------------------------------
    def statements(self) -> StatementBuilder:
        return StatementBuilder(self.accounts(), self._transactions, settings=self.settings)

    def trial_balance(self, target_date: date) -> List[TrialBalanceRow]:
        return trial_balance(self.accounts(), self._transactions, target_date, settings=self.settings)

    def income_statement(self, fiscal_year: int, compare_to_previous: bool = False) -> IncomeStatement:
        return self.statements().income_statement(fiscal_year, compare_to_previous=compare_to_previous)

    def balance_sheet(self, fiscal_year: int, compare_to_previous: bool = False) -> BalanceSheet:
        return self.statements().balance_sheet(fiscal_year, compare_to_previous=compare_to_previous)

    def invoice_status(self, invoice_id: str, today: Optional[date] = None) -> PaymentStatus:
        return invoice_payment_status(
            self.get_invoice(invoice_id), self._settlements, today=today, settings=self.settings
        )

    def open_items(self, today: Optional[date] = None) -> List[OpenItem]:
        return open_items(self.invoices(), self._settlements, today=today, settings=self.settings)

    def project_stats(self, project_id: str, budget: Optional[Decimal] = None) -> ProjectStats:
        return project_stats(project_id, self.accounts(), self._transactions, budget=budget)

    def cost_center_totals(self) -> Dict[str, Decimal]:
        return cost_center_totals(self.accounts(), self._transactions)


def load_ledger(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction] = (),
    settings: Optional[LedgerSettings] = None,
) -> InMemoryLedger:
    """Build a ledger from existing records, validating every transaction."""
    ledger = InMemoryLedger(settings=settings)
    for account in accounts:
        ledger.add_account(account)
    for transaction in transactions:
        ledger.post(transaction)
    return ledger


__all__ = ["InMemoryLedger", "LedgerRepository", "load_ledger"]
