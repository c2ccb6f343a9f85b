"""Straight-line depreciation (lineare AfA) and the yearly asset posting."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from hauptbuch.accounting.balances import index_accounts
from hauptbuch.accounting.classification import find_account_by_code
from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.errors import MissingAccountError, NothingToPostError
from hauptbuch.models import (
    ZERO,
    Account,
    Asset,
    DepreciationResult,
    JournalLine,
    Transaction,
    TransactionKind,
)

LOGGER = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def depreciation_schedule(asset: Asset) -> List[Tuple[int, Decimal]]:
    """Return ``(year, amount)`` for every calendar year with depreciation.

    The first year is depreciated pro rata by month including the month
    of purchase. The year after the last full year takes what is left of
    the depreciable base, including the rounding remainder of the
    earlier years, so the schedule adds up to ``cost - residual_value``.
    """
    if asset.useful_life_years <= 0:
        return []
    base = max(asset.cost - asset.residual_value, ZERO)
    rate = base / asset.useful_life_years
    first_year = asset.purchase_date.year
    final_year = first_year + asset.useful_life_years

    schedule = []
    accumulated = ZERO
    for year in range(first_year, final_year + 1):
        remaining = base - accumulated
        if year == first_year:
            months = 13 - asset.purchase_date.month
            amount = _quantize(rate / 12 * months)
        elif year < final_year:
            amount = _quantize(rate)
        else:
            amount = remaining
        amount = max(min(amount, remaining), ZERO)
        accumulated += amount
        schedule.append((year, amount))
    return schedule


def depreciate(asset: Asset, year: int) -> DepreciationResult:
    """Return current, accumulated and book value of an asset for ``year``."""
    if asset.useful_life_years <= 0:
        return DepreciationResult(current=ZERO, accumulated=ZERO, book_value=asset.cost)
    if year < asset.purchase_date.year:
        return DepreciationResult(current=ZERO, accumulated=ZERO, book_value=ZERO)

    current = ZERO
    accumulated = ZERO
    for schedule_year, amount in depreciation_schedule(asset):
        if schedule_year > year:
            break
        accumulated += amount
        if schedule_year == year:
            current = amount
    book_value = max(asset.cost - accumulated, ZERO)
    return DepreciationResult(current=current, accumulated=accumulated, book_value=book_value)


@dataclass(frozen=True)
class AssetRegisterRow:
    asset: Asset
    account_code: str
    account_name: str
    rate_percent: Optional[Decimal]
    result: DepreciationResult


@dataclass
class AccountGroup:
    """Anlagenspiegel line: all assets booked on one GL account."""

    account_id: str
    account_code: str
    account_name: str
    cost: Decimal = ZERO
    current: Decimal = ZERO
    book_value: Decimal = ZERO


def asset_register(
    assets: Iterable[Asset], accounts: Iterable[Account], year: int
) -> List[AssetRegisterRow]:
    accounts_by_id = index_accounts(accounts)
    rows = []
    for asset in assets:
        account = accounts_by_id.get(asset.gl_account_id)
        if account is None:
            LOGGER.debug("Asset %s is booked on unknown account %s", asset.id, asset.gl_account_id)
        rate = None
        if asset.useful_life_years > 0:
            rate = (Decimal(100) / asset.useful_life_years).quantize(Decimal("0.1"), ROUND_HALF_UP)
        rows.append(
            AssetRegisterRow(
                asset=asset,
                account_code=account.code if account else "???",
                account_name=account.name if account else "Unbekannt",
                rate_percent=rate,
                result=depreciate(asset, year),
            )
        )
    return rows


def group_by_account(rows: Iterable[AssetRegisterRow]) -> List[AccountGroup]:
    groups: Dict[str, AccountGroup] = {}
    for row in rows:
        group = groups.get(row.asset.gl_account_id)
        if group is None:
            group = groups[row.asset.gl_account_id] = AccountGroup(
                account_id=row.asset.gl_account_id,
                account_code=row.account_code,
                account_name=row.account_name,
            )
        group.cost += row.asset.cost
        group.current += row.result.current
        group.book_value += row.result.book_value
    return sorted(groups.values(), key=lambda group: group.account_code)


def build_depreciation_transaction(
    assets: Iterable[Asset],
    accounts: Iterable[Account],
    year: int,
    new_id: Optional[str] = None,
    settings: Optional[LedgerSettings] = None,
) -> Transaction:
    """Build the collective year-end depreciation posting.

    The depreciation expense account is debited with the total; every
    asset account is credited with the depreciation of its assets.
    """
    settings = settings or get_settings()
    accounts_by_id = index_accounts(accounts)
    groups = group_by_account(asset_register(assets, accounts_by_id, year))
    total = sum((group.current for group in groups), ZERO)
    if total <= ZERO:
        raise NothingToPostError(f"No depreciation to post for {year}")

    expense_code = settings.depreciation_expense_code
    expense_account = find_account_by_code(accounts_by_id.values(), expense_code)
    if expense_account is None:
        raise MissingAccountError(expense_code, "depreciation expense account")

    lines = [JournalLine(account_id=expense_account.id, debit=total)]
    for group in groups:
        if group.current <= ZERO:
            continue
        if group.account_id not in accounts_by_id:
            raise MissingAccountError(group.account_id, "asset account")
        lines.append(JournalLine(account_id=group.account_id, credit=group.current))

    transaction = Transaction(
        id=new_id or str(uuid.uuid4()),
        date=date(year, 12, 31),
        description=f"Jahresabschreibung {year} gem. Anlagenverzeichnis",
        lines=tuple(lines),
        kind=TransactionKind.DEPRECIATION,
        reference=f"AfA-{year}",
    )
    LOGGER.info("Built depreciation posting %s for %s over %d accounts", total, year, len(lines) - 1)
    return transaction


__all__ = [
    "AccountGroup",
    "AssetRegisterRow",
    "asset_register",
    "build_depreciation_transaction",
    "depreciate",
    "depreciation_schedule",
    "group_by_account",
]
