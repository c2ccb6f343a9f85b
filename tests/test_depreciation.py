from datetime import date
from decimal import Decimal

import pytest

from hauptbuch.accounting.depreciation import (
    asset_register,
    build_depreciation_transaction,
    depreciate,
    depreciation_schedule,
    group_by_account,
)
from hauptbuch.errors import MissingAccountError, NothingToPostError
from hauptbuch.models import Asset, TransactionKind

MACHINES = "0200000"
OFFICE = "0420000"


@pytest.fixture()
def machine() -> Asset:
    return Asset(
        id="a-1",
        gl_account_id=MACHINES,
        purchase_date=date(2023, 10, 20),
        cost=Decimal("45000"),
        useful_life_years=6,
        name="CNC-Fräse",
    )


@pytest.fixture()
def desk() -> Asset:
    return Asset(
        id="a-2",
        gl_account_id=OFFICE,
        purchase_date=date(2024, 3, 1),
        cost=Decimal("1000"),
        useful_life_years=3,
        residual_value=Decimal("100"),
        name="Schreibtisch",
    )


def test_first_year_is_pro_rata_by_month(machine: Asset) -> None:
    result = depreciate(machine, 2023)
    assert result.current == Decimal("1875.00")
    assert result.accumulated == Decimal("1875.00")
    assert result.book_value == Decimal("43125.00")


def test_full_year_after_purchase(machine: Asset) -> None:
    result = depreciate(machine, 2024)
    assert result.current == Decimal("7500.00")
    assert result.accumulated == Decimal("9375.00")


def test_terminal_year_takes_the_rest(machine: Asset) -> None:
    terminal = depreciate(machine, 2029)
    assert terminal.current == Decimal("5625.00")
    assert terminal.book_value == Decimal("0")
    after = depreciate(machine, 2031)
    assert after.current == Decimal("0")
    assert after.accumulated == Decimal("45000")


def test_year_before_purchase(machine: Asset) -> None:
    result = depreciate(machine, 2022)
    assert (result.current, result.accumulated, result.book_value) == (0, 0, 0)


def test_schedule_sums_to_depreciable_base(desk: Asset) -> None:
    schedule = depreciation_schedule(desk)
    assert [year for year, _ in schedule] == [2024, 2025, 2026, 2027]
    assert sum(amount for _, amount in schedule) == Decimal("900")
    assert depreciate(desk, 2027).book_value == Decimal("100")


def test_rounding_remainder_lands_in_final_year() -> None:
    asset = Asset(
        id="a-3",
        gl_account_id=OFFICE,
        purchase_date=date(2024, 1, 15),
        cost=Decimal("1000"),
        useful_life_years=3,
    )
    schedule = depreciation_schedule(asset)
    assert [amount for _, amount in schedule] == [
        Decimal("333.33"),
        Decimal("333.33"),
        Decimal("333.33"),
        Decimal("0.01"),
    ]
    for year in range(2024, 2030):
        assert depreciate(asset, year).book_value >= 0


def test_zero_useful_life_is_not_depreciated() -> None:
    asset = Asset(
        id="land",
        gl_account_id="0050000",
        purchase_date=date(2020, 5, 1),
        cost=Decimal("80000"),
        useful_life_years=0,
    )
    for year in (2019, 2020, 2030):
        result = depreciate(asset, year)
        assert result.current == 0
        assert result.book_value == Decimal("80000")


def test_register_and_account_groups(machine: Asset, desk: Asset, accounts) -> None:
    rows = asset_register([desk, machine], accounts, 2024)
    assert rows[1].account_code == MACHINES
    assert rows[1].rate_percent == Decimal("16.7")
    groups = group_by_account(rows)
    assert [group.account_code for group in groups] == [MACHINES, OFFICE]
    assert groups[0].current == Decimal("7500.00")
    assert groups[1].current == Decimal("250.00")
    assert groups[1].cost == Decimal("1000")


def test_depreciation_posting(machine: Asset, desk: Asset, accounts, settings) -> None:
    transaction = build_depreciation_transaction(
        [machine, desk], accounts, 2024, new_id="afa", settings=settings
    )
    assert transaction.kind is TransactionKind.DEPRECIATION
    assert transaction.date == date(2024, 12, 31)
    assert transaction.reference == "AfA-2024"
    assert transaction.description == "Jahresabschreibung 2024 gem. Anlagenverzeichnis"
    assert transaction.is_balanced()
    expense = transaction.lines[0]
    assert expense.account_id == "4830000"
    assert expense.debit == Decimal("7750.00")
    assert {line.account_id: line.credit for line in transaction.lines[1:]} == {
        MACHINES: Decimal("7500.00"),
        OFFICE: Decimal("250.00"),
    }


def test_posting_requires_expense_account(machine: Asset, accounts, settings) -> None:
    without_expense = [account for account in accounts if account.code != "4830000"]
    with pytest.raises(MissingAccountError):
        build_depreciation_transaction([machine], without_expense, 2024, settings=settings)


def test_nothing_to_post(machine: Asset, accounts, settings) -> None:
    with pytest.raises(NothingToPostError):
        build_depreciation_transaction([machine], accounts, 2040, settings=settings)
