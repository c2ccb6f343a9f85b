"""Profit-and-loss statement and balance sheet derived from the ledger."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from hauptbuch.accounting.balances import PostingIndex, index_accounts
from hauptbuch.accounting.charts import get_chart
from hauptbuch.accounting.classification import ChartMapping, StatementLine, accounts_by_category
from hauptbuch.accounting.periods import (
    account_ledger_stats,
    fiscal_year_end,
    fiscal_year_of,
    fiscal_year_start,
)
from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.models import ZERO, Account, AccountType, Transaction

LOGGER = logging.getLogger(__name__)

INCOME_TYPES = frozenset({AccountType.REVENUE})
EXPENSE_TYPES = frozenset({AccountType.EXPENSE})
ASSET_TYPES = frozenset({AccountType.ASSET})
EQUITY_AND_LIABILITY_TYPES = frozenset({AccountType.LIABILITY, AccountType.EQUITY})

BALANCE_TOLERANCE = Decimal("0.05")


@dataclass(frozen=True)
class AccountAmount:
    account: Account
    amount: Decimal


@dataclass(frozen=True)
class StatementRow:
    id: str
    label: str
    amount: Decimal
    parent: Optional[str] = None
    accounts: Tuple[AccountAmount, ...] = ()


@dataclass(frozen=True)
class IncomeStatement:
    fiscal_year: int
    report_date: date
    income: Tuple[StatementRow, ...]
    expenses: Tuple[StatementRow, ...]
    total_income: Decimal
    total_expenses: Decimal
    net_result: Decimal
    previous: Optional["IncomeStatement"] = None

    def row(self, line_id: str) -> StatementRow:
        return _find_row(self.income + self.expenses, line_id)


@dataclass(frozen=True)
class BalanceSheet:
    fiscal_year: int
    report_date: date
    assets: Tuple[StatementRow, ...]
    equity_and_liabilities: Tuple[StatementRow, ...]
    total_assets: Decimal
    total_equity_and_liabilities: Decimal
    retained_earnings: Decimal
    net_result: Decimal
    previous: Optional["BalanceSheet"] = None

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_assets - self.total_equity_and_liabilities) < BALANCE_TOLERANCE

    def row(self, line_id: str) -> StatementRow:
        return _find_row(self.assets + self.equity_and_liabilities, line_id)


class StatementBuilder:
    """Aggregates account balances into statement lines.

    The transaction history is indexed per account once; every category
    total then reads only the lines of its own accounts.
    """

    def __init__(
        self,
        accounts: Iterable[Account],
        transactions: Iterable[Transaction],
        chart: Optional[ChartMapping] = None,
        settings: Optional[LedgerSettings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.chart = chart or get_chart(settings=self.settings)
        self.accounts = list(index_accounts(accounts).values())
        if isinstance(transactions, PostingIndex):
            self.index = transactions
        else:
            self.index = PostingIndex(list(transactions))
        self._by_category = accounts_by_category(self.accounts, self.chart)

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    def resolve_period(
        self, fiscal_year: Optional[int] = None, report_date: Optional[date] = None
    ) -> Tuple[int, date]:
        start_month = self.settings.fiscal_year_start_month
        if report_date is None:
            if fiscal_year is None:
                raise ValueError("Either fiscal_year or report_date is required")
            report_date = fiscal_year_end(fiscal_year, start_month)
        elif fiscal_year is None:
            fiscal_year = fiscal_year_of(report_date, start_month)
        elif fiscal_year_of(report_date, start_month) != fiscal_year:
            raise ValueError(f"Report date {report_date} is outside fiscal year {fiscal_year}")
        return fiscal_year, report_date

    def account_amounts(
        self, category: str, types: FrozenSet[AccountType], report_date: date
    ) -> List[AccountAmount]:
        amounts = []
        for account in self._by_category.get(category, []):
            if account.type not in types:
                continue
            stats = account_ledger_stats(
                account.id, self.index, account.type, report_date, settings=self.settings
            )
            amounts.append(AccountAmount(account=account, amount=stats.ending_balance))
        return amounts

    def category_total(
        self, category: str, types: FrozenSet[AccountType], report_date: date
    ) -> Decimal:
        """Sum the ending balances of all accounts of ``types`` mapped to ``category``.

        Income and expense accounts only carry the fiscal year of
        ``report_date``; balance sheet accounts are cumulative.
        """
        return sum(
            (item.amount for item in self.account_amounts(category, types, report_date)), ZERO
        )

    def prior_years_result(self, fiscal_year: int) -> Decimal:
        """Return the accumulated result of all fiscal years before ``fiscal_year``."""
        cutoff = fiscal_year_start(fiscal_year, self.settings.fiscal_year_start_month)
        result = ZERO
        for account in self.accounts:
            if account.type not in (AccountType.REVENUE, AccountType.EXPENSE):
                continue
            for transaction, line in self.index.lines_for(account.id):
                if transaction.date < cutoff:
                    result += line.credit - line.debit
        return result

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def income_statement(
        self,
        fiscal_year: Optional[int] = None,
        report_date: Optional[date] = None,
        compare_to_previous: bool = False,
    ) -> IncomeStatement:
        fiscal_year, report_date = self.resolve_period(fiscal_year, report_date)
        income = tuple(
            self._leaf_row(line, INCOME_TYPES, report_date) for line in self.chart.income_lines
        )
        expenses = tuple(
            self._leaf_row(line, EXPENSE_TYPES, report_date) for line in self.chart.expense_lines
        )
        total_income = sum((row.amount for row in income), ZERO)
        total_expenses = sum((row.amount for row in expenses), ZERO)
        previous = None
        if compare_to_previous:
            previous = self.income_statement(fiscal_year=fiscal_year - 1)
        return IncomeStatement(
            fiscal_year=fiscal_year,
            report_date=report_date,
            income=income,
            expenses=expenses,
            total_income=total_income,
            total_expenses=total_expenses,
            net_result=total_income - total_expenses,
            previous=previous,
        )

    def balance_sheet(
        self,
        fiscal_year: Optional[int] = None,
        report_date: Optional[date] = None,
        compare_to_previous: bool = False,
    ) -> BalanceSheet:
        fiscal_year, report_date = self.resolve_period(fiscal_year, report_date)
        net_result = self.income_statement(fiscal_year, report_date).net_result
        retained = self.prior_years_result(fiscal_year)
        injected = {
            self.chart.retained_earnings_line: retained,
            self.chart.net_result_line: net_result,
        }

        assets = self._section(self.chart.asset_lines, ASSET_TYPES, report_date, {})
        passiva = self._section(
            self.chart.equity_and_liability_lines,
            EQUITY_AND_LIABILITY_TYPES,
            report_date,
            injected,
        )
        total_assets = sum((row.amount for row in assets if row.parent is None), ZERO)
        total_passiva = sum((row.amount for row in passiva if row.parent is None), ZERO)

        previous = None
        if compare_to_previous:
            previous = self.balance_sheet(fiscal_year=fiscal_year - 1)
        sheet = BalanceSheet(
            fiscal_year=fiscal_year,
            report_date=report_date,
            assets=assets,
            equity_and_liabilities=passiva,
            total_assets=total_assets,
            total_equity_and_liabilities=total_passiva,
            retained_earnings=retained,
            net_result=net_result,
            previous=previous,
        )
        if not sheet.is_balanced:
            LOGGER.warning(
                "Balance sheet %s does not balance: assets=%s equity_and_liabilities=%s",
                report_date,
                total_assets,
                total_passiva,
            )
        return sheet

    def _leaf_row(
        self,
        line: StatementLine,
        types: FrozenSet[AccountType],
        report_date: date,
        extra: Decimal = ZERO,
    ) -> StatementRow:
        details = [
            item for item in self.account_amounts(line.id, types, report_date) if item.amount != ZERO
        ]
        amount = sum((item.amount for item in details), ZERO) + extra
        return StatementRow(
            id=line.id,
            label=line.label,
            amount=amount,
            parent=line.parent,
            accounts=tuple(details),
        )

    def _section(
        self,
        lines: Sequence[StatementLine],
        types: FrozenSet[AccountType],
        report_date: date,
        injected: Dict[str, Decimal],
    ) -> Tuple[StatementRow, ...]:
        parents = {line.parent for line in lines if line.parent}
        rows: Dict[str, StatementRow] = {}
        for line in lines:
            if line.id not in parents:
                rows[line.id] = self._leaf_row(
                    line, types, report_date, injected.get(line.id, ZERO)
                )
        # Roll group totals up from their children, deepest first.
        for line in sorted(
            (line for line in lines if line.id in parents),
            key=lambda item: _depth(item, lines),
            reverse=True,
        ):
            amount = sum(
                (rows[child.id].amount for child in lines if child.parent == line.id), ZERO
            )
            rows[line.id] = StatementRow(
                id=line.id, label=line.label, amount=amount, parent=line.parent
            )
        return tuple(rows[line.id] for line in lines)


def income_statement(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    fiscal_year: Optional[int] = None,
    report_date: Optional[date] = None,
    chart: Optional[ChartMapping] = None,
    settings: Optional[LedgerSettings] = None,
    compare_to_previous: bool = False,
) -> IncomeStatement:
    builder = StatementBuilder(accounts, transactions, chart=chart, settings=settings)
    return builder.income_statement(fiscal_year, report_date, compare_to_previous)


def balance_sheet(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    fiscal_year: Optional[int] = None,
    report_date: Optional[date] = None,
    chart: Optional[ChartMapping] = None,
    settings: Optional[LedgerSettings] = None,
    compare_to_previous: bool = False,
) -> BalanceSheet:
    builder = StatementBuilder(accounts, transactions, chart=chart, settings=settings)
    return builder.balance_sheet(fiscal_year, report_date, compare_to_previous)


def category_total(
    category: str,
    account_type: AccountType,
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    report_date: date,
    chart: Optional[ChartMapping] = None,
    settings: Optional[LedgerSettings] = None,
) -> Decimal:
    builder = StatementBuilder(accounts, transactions, chart=chart, settings=settings)
    return builder.category_total(category, frozenset({account_type}), report_date)


def _depth(line: StatementLine, lines: Sequence[StatementLine]) -> int:
    by_id = {item.id: item for item in lines}
    depth = 0
    while line.parent and line.parent in by_id:
        line = by_id[line.parent]
        depth += 1
    return depth


def _find_row(rows: Sequence[StatementRow], line_id: str) -> StatementRow:
    for row in rows:
        if row.id == line_id:
            return row
    raise KeyError(f"Unknown statement line '{line_id}'")


__all__ = [
    "AccountAmount",
    "BalanceSheet",
    "IncomeStatement",
    "StatementBuilder",
    "StatementRow",
    "balance_sheet",
    "category_total",
    "income_statement",
]
