import logging
from datetime import date
from decimal import Decimal

import pytest

from hauptbuch.accounting.statements import (
    StatementBuilder,
    balance_sheet,
    category_total,
    income_statement,
)
from hauptbuch.accounting.vat import vat_reconciliation, vat_return
from hauptbuch.models import AccountType, TransactionKind

BANK = "1200000"
CAPITAL = "0800000"
REVENUE = "8400000"
OUTPUT_VAT = "1776000"
INPUT_VAT = "1576000"
RENT = "4210000"
GOODS = "3400000"


@pytest.fixture()
def books(make_transaction):
    return [
        make_transaction(
            "eb-2023",
            date(2023, 1, 1),
            [(BANK, "10000", "0"), (CAPITAL, "0", "10000")],
            kind=TransactionKind.OPENING_BALANCE,
        ),
        make_transaction(
            "ar-2023",
            date(2023, 3, 15),
            [(BANK, "1190", "0"), (REVENUE, "0", "1000"), (OUTPUT_VAT, "0", "190")],
        ),
        make_transaction("rent-2023", date(2023, 4, 1), [(RENT, "400", "0"), (BANK, "0", "400")]),
        make_transaction(
            "ar-2024",
            date(2024, 2, 20),
            [(BANK, "2380", "0"), (REVENUE, "0", "2000"), (OUTPUT_VAT, "0", "380")],
        ),
        make_transaction(
            "er-2024",
            date(2024, 5, 8),
            [(GOODS, "100", "0"), (INPUT_VAT, "19", "0"), (BANK, "0", "119")],
        ),
        make_transaction("ar-2025", date(2025, 1, 10), [(BANK, "5000", "0"), (REVENUE, "0", "5000")]),
    ]


def test_income_statement_excludes_later_years(accounts, books, settings) -> None:
    statement = income_statement(accounts, books, fiscal_year=2023, settings=settings)
    assert statement.row("revenue").amount == Decimal("1000")
    assert statement.row("other_cost").amount == Decimal("400")
    assert statement.total_income == Decimal("1000")
    assert statement.total_expenses == Decimal("400")
    assert statement.net_result == Decimal("600")


def test_category_total_for_single_year(accounts, books, settings) -> None:
    total = category_total(
        "revenue", AccountType.REVENUE, accounts, books, date(2023, 12, 31), settings=settings
    )
    assert total == Decimal("1000")


def test_income_statement_rows_list_contributing_accounts(accounts, books, settings) -> None:
    statement = income_statement(accounts, books, fiscal_year=2024, settings=settings)
    material = statement.row("material")
    assert material.amount == Decimal("100")
    assert [item.account.code for item in material.accounts] == [GOODS]
    assert statement.row("personnel").accounts == ()


def test_income_statement_compares_to_previous_year(accounts, books, settings) -> None:
    statement = income_statement(
        accounts, books, fiscal_year=2024, settings=settings, compare_to_previous=True
    )
    assert statement.net_result == Decimal("1900")
    assert statement.previous is not None
    assert statement.previous.fiscal_year == 2023
    assert statement.previous.net_result == Decimal("600")


def test_balance_sheet_rolls_prior_results_into_carryforward(accounts, books, settings) -> None:
    sheet = balance_sheet(accounts, books, fiscal_year=2024, settings=settings)
    assert sheet.retained_earnings == Decimal("600")
    assert sheet.net_result == Decimal("1900")
    assert sheet.row("pas_A_I").amount == Decimal("10000")
    assert sheet.row("pas_A_II").amount == Decimal("600")
    assert sheet.row("pas_A_III").amount == Decimal("1900")
    assert sheet.row("pas_A").amount == Decimal("12500")
    assert sheet.row("pas_C_III").amount == Decimal("570")
    assert sheet.row("act_B_III").amount == Decimal("13051")
    assert sheet.row("act_B").amount == Decimal("13070")
    assert sheet.total_assets == Decimal("13070")
    assert sheet.total_equity_and_liabilities == Decimal("13070")
    assert sheet.is_balanced


def test_balance_sheet_places_carryforward_and_provisions(
    accounts, books, make_transaction, settings
) -> None:
    books.append(
        make_transaction(
            "gv-2024", date(2024, 1, 2), [(BANK, "300", "0"), ("0860000", "0", "300")]
        )
    )
    books.append(
        make_transaction(
            "pension-2024", date(2024, 12, 31), [(RENT, "200", "0"), ("0950000", "0", "200")]
        )
    )
    sheet = balance_sheet(accounts, books, fiscal_year=2024, settings=settings)
    assert sheet.row("pas_A_I").amount == Decimal("10000")
    assert sheet.row("pas_A_II").amount == Decimal("900")
    assert sheet.row("pas_A_III").amount == Decimal("1700")
    assert sheet.row("pas_B").amount == Decimal("200")
    assert sheet.is_balanced


def test_balance_sheet_compares_to_previous_year(accounts, books, settings) -> None:
    sheet = balance_sheet(
        accounts, books, fiscal_year=2024, settings=settings, compare_to_previous=True
    )
    previous = sheet.previous
    assert previous is not None
    assert previous.retained_earnings == Decimal("0")
    assert previous.net_result == Decimal("600")
    assert previous.total_assets == Decimal("10790")
    assert previous.is_balanced


def test_unbalanced_books_are_flagged(accounts, books, settings, make_transaction, caplog) -> None:
    books.append(make_transaction("broken", date(2024, 6, 1), [(BANK, "50", "0")]))
    with caplog.at_level(logging.WARNING):
        sheet = balance_sheet(accounts, books, fiscal_year=2024, settings=settings)
    assert not sheet.is_balanced
    assert "does not balance" in caplog.text


def test_report_date_must_lie_in_fiscal_year(accounts, books, settings) -> None:
    builder = StatementBuilder(accounts, books, settings=settings)
    with pytest.raises(ValueError):
        builder.income_statement(fiscal_year=2024, report_date=date(2023, 6, 30))
    with pytest.raises(ValueError):
        builder.income_statement()


def test_mid_year_report(accounts, books, settings) -> None:
    builder = StatementBuilder(accounts, books, settings=settings)
    statement = builder.income_statement(report_date=date(2024, 3, 31))
    assert statement.fiscal_year == 2024
    assert statement.total_expenses == Decimal("0")
    assert statement.total_income == Decimal("2000")


def test_vat_return(accounts, books, settings) -> None:
    result = vat_return(accounts, books, date(2024, 12, 31), settings=settings)
    assert result.base_standard == Decimal("2000")
    assert result.base_reduced == Decimal("0")
    assert result.output_tax_standard == Decimal("380.00")
    assert result.output_tax == Decimal("380.00")
    assert result.input_tax == Decimal("19")
    assert result.payable == Decimal("361.00")


def test_vat_output_tax_is_rounded_to_cents(accounts, make_transaction, settings) -> None:
    books = [
        make_transaction(
            "ar",
            date(2024, 7, 1),
            [("1400000", "10.71", "0"), ("8300000", "0", "10.01"), ("1771000", "0", "0.70")],
        )
    ]
    result = vat_return(accounts, books, date(2024, 12, 31), settings=settings)
    assert result.base_reduced == Decimal("10.01")
    assert result.output_tax_reduced == Decimal("0.70")


def test_vat_reconciliation_groups_by_base_account(accounts, books, settings) -> None:
    rows = vat_reconciliation(OUTPUT_VAT, accounts, books, 2024, settings=settings)
    assert len(rows) == 1
    assert rows[0].account.code == REVENUE
    assert rows[0].net_amount == Decimal("2000")
    assert rows[0].tax_amount == Decimal("380")


def test_vat_reconciliation_unknown_tax_account(accounts, books, settings) -> None:
    assert vat_reconciliation("1779999", accounts, books, 2024, settings=settings) == []
