"""Double-entry bookkeeping calculations for German charts of accounts."""

from .classification import ChartMapping, CodeRangeRule, StatementLine, classify_account
from .balances import PostingIndex, account_balance, contact_balance
from .periods import (
    account_ledger_stats,
    contact_ledger_stats,
    fiscal_year_of,
    is_opening_transaction,
    trial_balance,
)
from .charts import get_chart, register_chart
from .statements import BalanceSheet, IncomeStatement, StatementBuilder, balance_sheet, income_statement
from .vat import VatReturn, vat_reconciliation, vat_return
from .depreciation import (
    asset_register,
    build_depreciation_transaction,
    depreciate,
    depreciation_schedule,
    group_by_account,
)
from .invoices import (
    invoice_payment_status,
    invoice_status_from_transactions,
    open_items,
    settlements_from_transactions,
)
from .reversal import reverse_invoice, reverse_transaction
from .controlling import ProjectStats, cost_center_totals, project_stats
from .validation import validate_transaction
from .engine import InMemoryLedger, LedgerRepository, load_ledger

__all__ = [
    "BalanceSheet",
    "ChartMapping",
    "CodeRangeRule",
    "InMemoryLedger",
    "IncomeStatement",
    "LedgerRepository",
    "PostingIndex",
    "ProjectStats",
    "StatementBuilder",
    "StatementLine",
    "VatReturn",
    "account_balance",
    "account_ledger_stats",
    "asset_register",
    "balance_sheet",
    "build_depreciation_transaction",
    "classify_account",
    "contact_balance",
    "contact_ledger_stats",
    "cost_center_totals",
    "depreciate",
    "depreciation_schedule",
    "fiscal_year_of",
    "get_chart",
    "group_by_account",
    "income_statement",
    "invoice_payment_status",
    "invoice_status_from_transactions",
    "is_opening_transaction",
    "load_ledger",
    "open_items",
    "project_stats",
    "register_chart",
    "reverse_invoice",
    "reverse_transaction",
    "settlements_from_transactions",
    "trial_balance",
    "validate_transaction",
    "vat_reconciliation",
    "vat_return",
]
