"""Immutable ledger records consumed by the engine."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

ZERO = Decimal("0")


class AccountType(str, Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_normal(self) -> bool:
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    @property
    def is_balance_sheet(self) -> bool:
        return self in (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY)

    def signed(self, debit: Decimal, credit: Decimal) -> Decimal:
        """Return the movement on the account's normal-balance side."""
        if self.is_debit_normal:
            return debit - credit
        return credit - debit


class TransactionKind(str, Enum):
    STANDARD = "STANDARD"
    OPENING_BALANCE = "OPENING_BALANCE"
    PAYROLL = "PAYROLL"
    CLOSING = "CLOSING"
    CORRECTION = "CORRECTION"
    DEPRECIATION = "DEPRECIATION"
    CREDIT_CARD = "CREDIT_CARD"
    REVERSAL = "REVERSAL"


class PaymentState(str, Enum):
    OPEN = "OPEN"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CREDIT_NOTE = "CREDIT_NOTE"
    REVERSED = "REVERSED"


class AssetStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    SCRAPPED = "SCRAPPED"


@dataclass(frozen=True)
class Account:
    """A ledger account of the chart of accounts."""

    id: str
    code: str
    name: str
    type: AccountType
    description: Optional[str] = None


@dataclass(frozen=True)
class JournalLine:
    """A single debit/credit line. Negative amounts reverse a prior posting."""

    account_id: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    cost_center_id: Optional[str] = None
    project_id: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """A posted journal entry. Never edited once posted except for ``is_reversed``."""

    id: str
    date: date
    description: str
    lines: Tuple[JournalLine, ...]
    kind: Optional[TransactionKind] = None
    reference: Optional[str] = None
    contact_id: Optional[str] = None
    invoice_id: Optional[str] = None
    reverses_id: Optional[str] = None
    reversal_reason: Optional[str] = None
    is_reversed: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    def is_balanced(self, tolerance: Decimal = Decimal("0.01")) -> bool:
        return abs(self.total_debit - self.total_credit) <= tolerance


@dataclass(frozen=True)
class Invoice:
    """An outgoing or incoming invoice; a negative gross amount is a credit note."""

    id: str
    number: str
    date: date
    due_date: date
    contact_id: str
    net_amount: Decimal
    tax_amount: Decimal
    gross_amount: Decimal
    transaction_id: Optional[str] = None
    description: str = ""
    tax_rate: Decimal = ZERO
    is_reversed: bool = False
    dunning_level: int = 0

    @property
    def is_credit_note(self) -> bool:
        return self.gross_amount < ZERO


@dataclass(frozen=True)
class Asset:
    """A fixed asset in the asset register."""

    id: str
    gl_account_id: str
    purchase_date: date
    cost: Decimal
    useful_life_years: int
    residual_value: Decimal = ZERO
    status: AssetStatus = AssetStatus.ACTIVE
    name: str = ""
    inventory_number: Optional[str] = None


@dataclass(frozen=True)
class Settlement:
    """An amount paid against one invoice."""

    invoice_id: str
    amount: Decimal
    date: date
    transaction_id: Optional[str] = None


@dataclass
class LedgerStats:
    """Trial-balance figures of one account or counterparty as of a date."""

    opening_balance: Decimal = ZERO
    debit_month: Decimal = ZERO
    credit_month: Decimal = ZERO
    debit_ytd: Decimal = ZERO
    credit_ytd: Decimal = ZERO
    ending_balance: Decimal = ZERO

    @property
    def has_activity(self) -> bool:
        return any(
            value != ZERO
            for value in (self.opening_balance, self.debit_ytd, self.credit_ytd, self.ending_balance)
        )


@dataclass(frozen=True)
class TrialBalanceRow:
    account: Account
    stats: LedgerStats


@dataclass(frozen=True)
class DepreciationResult:
    current: Decimal
    accumulated: Decimal
    book_value: Decimal


@dataclass(frozen=True)
class PaymentStatus:
    paid_amount: Decimal
    remaining_amount: Decimal
    status: PaymentState
    days_overdue: int


@dataclass(frozen=True)
class Reversal:
    """The flagged original together with its mirror posting."""

    original: Transaction
    storno: Transaction


__all__ = [
    "ZERO",
    "Account",
    "AccountType",
    "Asset",
    "AssetStatus",
    "DepreciationResult",
    "Invoice",
    "JournalLine",
    "LedgerStats",
    "PaymentState",
    "PaymentStatus",
    "Reversal",
    "Settlement",
    "Transaction",
    "TransactionKind",
    "TrialBalanceRow",
]
