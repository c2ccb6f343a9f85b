"""Pydantic schemas validating caller-supplied ledger data.

Field names are accepted in snake_case or camelCase so JSON exported by
bookkeeping front ends can be loaded unchanged.
"""
from __future__ import annotations

import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hauptbuch.accounting.engine import InMemoryLedger
from hauptbuch.config import LedgerSettings
from hauptbuch.models import (
    Account,
    AccountType,
    Asset,
    AssetStatus,
    Invoice,
    JournalLine,
    Settlement,
    Transaction,
    TransactionKind,
)


def _to_decimal(value: Decimal | float | int | str | None) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


class LedgerModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountModel(LedgerModel):
    id: str = Field(..., description="Unique account identifier")
    code: str
    name: str
    type: AccountType
    description: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _upper_type(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    def to_domain(self) -> Account:
        return Account(
            id=self.id, code=self.code, name=self.name, type=self.type, description=self.description
        )


class JournalLineModel(LedgerModel):
    account_id: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    cost_center_id: Optional[str] = None
    project_id: Optional[str] = None

    @field_validator("debit", "credit", mode="before")
    @classmethod
    def _normalize_amount(cls, value: Decimal | float | int | str | None) -> Decimal:
        return _to_decimal(value)

    def to_domain(self) -> JournalLine:
        return JournalLine(
            account_id=self.account_id,
            debit=self.debit,
            credit=self.credit,
            cost_center_id=self.cost_center_id,
            project_id=self.project_id,
        )


class TransactionModel(LedgerModel):
    id: str
    date: datetime.date
    description: str = ""
    lines: List[JournalLineModel]
    kind: Optional[TransactionKind] = Field(default=None, alias="type")
    reference: Optional[str] = None
    contact_id: Optional[str] = None
    invoice_id: Optional[str] = None
    reverses_id: Optional[str] = None
    reversal_reason: Optional[str] = Field(default=None, alias="stornoReason")
    is_reversed: bool = False

    @field_validator("kind", mode="before")
    @classmethod
    def _upper_kind(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            return value.upper() or None
        return value

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.date,
            description=self.description,
            lines=tuple(line.to_domain() for line in self.lines),
            kind=self.kind,
            reference=self.reference,
            contact_id=self.contact_id,
            invoice_id=self.invoice_id,
            reverses_id=self.reverses_id,
            reversal_reason=self.reversal_reason,
            is_reversed=self.is_reversed,
        )


class InvoiceModel(LedgerModel):
    id: str
    number: str
    date: datetime.date
    due_date: datetime.date
    contact_id: str
    net_amount: Decimal
    tax_amount: Decimal
    gross_amount: Decimal
    tax_rate: Decimal = Decimal("0")
    transaction_id: Optional[str] = None
    description: str = ""
    is_reversed: bool = False
    dunning_level: int = 0

    @field_validator("net_amount", "tax_amount", "gross_amount", "tax_rate", mode="before")
    @classmethod
    def _normalize_amount(cls, value: Decimal | float | int | str | None) -> Decimal:
        return _to_decimal(value)

    def to_domain(self) -> Invoice:
        return Invoice(**self.model_dump())


class AssetModel(LedgerModel):
    id: str
    gl_account_id: str
    purchase_date: datetime.date
    cost: Decimal
    useful_life_years: int = Field(..., ge=0)
    residual_value: Decimal = Decimal("0")
    status: AssetStatus = AssetStatus.ACTIVE
    name: str = ""
    inventory_number: Optional[str] = None

    @field_validator("cost", "residual_value", mode="before")
    @classmethod
    def _normalize_amount(cls, value: Decimal | float | int | str | None) -> Decimal:
        return _to_decimal(value)

    @field_validator("status", mode="before")
    @classmethod
    def _upper_status(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    def to_domain(self) -> Asset:
        return Asset(**self.model_dump())


class SettlementModel(LedgerModel):
    invoice_id: str
    amount: Decimal
    date: datetime.date
    transaction_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _normalize_amount(cls, value: Decimal | float | int | str | None) -> Decimal:
        return _to_decimal(value)

    def to_domain(self) -> Settlement:
        return Settlement(**self.model_dump())


class LedgerSnapshot(LedgerModel):
    """A complete export of the books."""

    accounts: List[AccountModel] = Field(default_factory=list)
    transactions: List[TransactionModel] = Field(default_factory=list)
    invoices: List[InvoiceModel] = Field(default_factory=list)
    assets: List[AssetModel] = Field(default_factory=list)
    settlements: List[SettlementModel] = Field(default_factory=list)

    def domain_accounts(self) -> List[Account]:
        return [account.to_domain() for account in self.accounts]

    def domain_transactions(self) -> List[Transaction]:
        return [transaction.to_domain() for transaction in self.transactions]

    def domain_invoices(self) -> List[Invoice]:
        return [invoice.to_domain() for invoice in self.invoices]

    def domain_assets(self) -> List[Asset]:
        return [asset.to_domain() for asset in self.assets]

    def domain_settlements(self) -> List[Settlement]:
        return [settlement.to_domain() for settlement in self.settlements]

    def to_ledger(self, settings: Optional[LedgerSettings] = None) -> InMemoryLedger:
        """Load the snapshot into a ledger, validating every transaction."""
        ledger = InMemoryLedger(settings=settings)
        for account in self.domain_accounts():
            ledger.add_account(account)
        for transaction in self.domain_transactions():
            ledger.post(transaction)
        for invoice in self.domain_invoices():
            ledger.add_invoice(invoice)
        for asset in self.domain_assets():
            ledger.add_asset(asset)
        for settlement in self.domain_settlements():
            ledger.record_settlement(settlement)
        return ledger


__all__ = [
    "AccountModel",
    "AssetModel",
    "InvoiceModel",
    "JournalLineModel",
    "LedgerSnapshot",
    "SettlementModel",
    "TransactionModel",
]
