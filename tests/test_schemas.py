from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hauptbuch.models import AccountType, AssetStatus, TransactionKind
from hauptbuch.schemas import AccountModel, AssetModel, LedgerSnapshot, TransactionModel


def test_transaction_from_camel_case_json() -> None:
    model = TransactionModel.model_validate(
        {
            "id": "tx-1",
            "date": "2024-01-01",
            "type": "opening_balance",
            "description": "Eröffnungsbilanz",
            "reference": "EB-2024",
            "lines": [
                {"accountId": "1200000", "debit": 1000.1, "credit": 0},
                {"accountId": "0800000", "debit": "", "credit": "1000.10"},
            ],
        }
    )
    transaction = model.to_domain()
    assert transaction.kind is TransactionKind.OPENING_BALANCE
    assert transaction.date == date(2024, 1, 1)
    assert transaction.lines[0].debit == Decimal("1000.1")
    assert transaction.lines[1].debit == Decimal("0")
    assert transaction.is_balanced()


def test_account_type_is_case_insensitive() -> None:
    account = AccountModel(id="1", code="1200000", name="Bank", type="asset").to_domain()
    assert account.type is AccountType.ASSET


def test_asset_rejects_negative_life() -> None:
    with pytest.raises(ValidationError):
        AssetModel(
            id="a", glAccountId="0420000", purchaseDate="2024-01-01", cost=100, usefulLifeYears=-1
        )


def test_asset_status_from_plain_string() -> None:
    asset = AssetModel(
        id="a",
        gl_account_id="0420000",
        purchase_date="2024-01-01",
        cost="999.99",
        useful_life_years=3,
        status="sold",
    ).to_domain()
    assert asset.status is AssetStatus.SOLD
    assert asset.cost == Decimal("999.99")


def test_snapshot_loads_into_ledger(settings) -> None:
    snapshot = LedgerSnapshot.model_validate(
        {
            "accounts": [
                {"id": "bank", "code": "1200000", "name": "Bank", "type": "ASSET"},
                {"id": "erl", "code": "8400000", "name": "Erlöse 19% USt", "type": "REVENUE"},
                {"id": "ust", "code": "1776000", "name": "Umsatzsteuer 19%", "type": "LIABILITY"},
            ],
            "transactions": [
                {
                    "id": "tx-1",
                    "date": "2024-03-01",
                    "description": "Barverkauf",
                    "lines": [
                        {"accountId": "bank", "debit": 119, "credit": 0},
                        {"accountId": "erl", "debit": 0, "credit": 100},
                        {"accountId": "ust", "debit": 0, "credit": 19},
                    ],
                }
            ],
            "invoices": [
                {
                    "id": "inv-1",
                    "number": "RE-1",
                    "date": "2024-03-01",
                    "dueDate": "2024-03-15",
                    "contactId": "kunde-1",
                    "netAmount": 100,
                    "taxAmount": 19,
                    "grossAmount": 119,
                    "transactionId": "tx-1",
                }
            ],
            "settlements": [{"invoiceId": "inv-1", "amount": 119, "date": "2024-03-01"}],
        }
    )
    ledger = snapshot.to_ledger(settings=settings)
    assert len(ledger.transactions()) == 1
    assert ledger.invoice_status("inv-1", today=date(2024, 4, 1)).remaining_amount == 0
    statement = ledger.income_statement(2024)
    assert statement.row("revenue").amount == Decimal("100")
