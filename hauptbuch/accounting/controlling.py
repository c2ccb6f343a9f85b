"""Cost accounting over posted lines: project results and cost-center costs."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Iterator, Optional, Tuple

from hauptbuch.accounting.balances import index_accounts
from hauptbuch.models import ZERO, Account, AccountType, JournalLine, Transaction

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectStats:
    """Actual costs and revenue booked on one project (Kostenträger)."""

    project_id: str
    actuals: Decimal
    revenue: Decimal
    budget: Optional[Decimal] = None

    @property
    def margin(self) -> Decimal:
        return self.revenue - self.actuals

    @property
    def remaining_budget(self) -> Optional[Decimal]:
        if self.budget is None:
            return None
        return self.budget - self.actuals

    @property
    def is_over_budget(self) -> bool:
        remaining = self.remaining_budget
        return remaining is not None and remaining < ZERO


def _dated_lines(
    transactions: Iterable[Transaction],
    start_date: Optional[date],
    end_date: Optional[date],
) -> Iterator[JournalLine]:
    for transaction in transactions:
        if start_date and transaction.date < start_date:
            continue
        if end_date and transaction.date > end_date:
            continue
        yield from transaction.lines


def project_stats(
    project_id: str,
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    budget: Optional[Decimal] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ProjectStats:
    """Sum expense (debit - credit) and revenue (credit - debit) lines tagged with a project.

    Lines on balance sheet accounts carry no result and are ignored.
    """
    accounts_by_id = index_accounts(accounts)
    actuals = ZERO
    revenue = ZERO
    for line in _dated_lines(transactions, start_date, end_date):
        if line.project_id != project_id:
            continue
        account = accounts_by_id.get(line.account_id)
        if account is None:
            LOGGER.debug("Skipping project line on unknown account %s", line.account_id)
            continue
        if account.type is AccountType.EXPENSE:
            actuals += line.debit - line.credit
        elif account.type is AccountType.REVENUE:
            revenue += line.credit - line.debit
    return ProjectStats(project_id=project_id, actuals=actuals, revenue=revenue, budget=budget)


def cost_center_totals(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, Decimal]:
    """Return expense costs per cost center, ordered by cost center id."""
    accounts_by_id = index_accounts(accounts)
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for line in _dated_lines(transactions, start_date, end_date):
        if not line.cost_center_id:
            continue
        account = accounts_by_id.get(line.account_id)
        if account is None or account.type is not AccountType.EXPENSE:
            continue
        totals[line.cost_center_id] += line.debit - line.credit
    return dict(sorted(totals.items()))


def project_ids(transactions: Iterable[Transaction]) -> Tuple[str, ...]:
    seen = {
        line.project_id
        for transaction in transactions
        for line in transaction.lines
        if line.project_id
    }
    return tuple(sorted(seen))


__all__ = ["ProjectStats", "cost_center_totals", "project_ids", "project_stats"]
