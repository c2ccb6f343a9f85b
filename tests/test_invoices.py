from datetime import date
from decimal import Decimal

import pytest

from hauptbuch.accounting.invoices import (
    invoice_payment_status,
    invoice_status_from_transactions,
    open_items,
    settlements_from_transactions,
)
from hauptbuch.models import Invoice, PaymentState, Settlement


@pytest.fixture()
def invoice() -> Invoice:
    return Invoice(
        id="inv-1",
        number="RE-2024-001",
        date=date(2024, 5, 1),
        due_date=date(2024, 5, 15),
        contact_id="kunde-1",
        net_amount=Decimal("5000.00"),
        tax_amount=Decimal("950.00"),
        gross_amount=Decimal("5950.00"),
        transaction_id="tx-inv-1",
        tax_rate=Decimal("19"),
    )


def test_unpaid_invoice_before_due_date_is_open(invoice: Invoice, settings) -> None:
    status = invoice_payment_status(invoice, [], today=date(2024, 5, 10), settings=settings)
    assert status.status is PaymentState.OPEN
    assert status.remaining_amount == Decimal("5950.00")
    assert status.paid_amount == Decimal("0")
    assert status.days_overdue == -5


def test_unpaid_invoice_after_due_date_is_overdue(invoice: Invoice, settings) -> None:
    status = invoice_payment_status(invoice, [], today=date(2024, 6, 14), settings=settings)
    assert status.status is PaymentState.OVERDUE
    assert status.remaining_amount == Decimal("5950.00")
    assert status.days_overdue == 30


def test_partial_payment(invoice: Invoice, settings) -> None:
    settlements = [Settlement(invoice_id="inv-1", amount=Decimal("2000"), date=date(2024, 5, 20))]
    status = invoice_payment_status(invoice, settlements, today=date(2024, 6, 1), settings=settings)
    assert status.status is PaymentState.PARTIAL
    assert status.remaining_amount == Decimal("3950.00")


def test_paid_within_tolerance(invoice: Invoice, settings) -> None:
    settlements = [
        Settlement(invoice_id="inv-1", amount=Decimal("5000"), date=date(2024, 5, 20)),
        Settlement(invoice_id="inv-1", amount=Decimal("949.97"), date=date(2024, 5, 21)),
        Settlement(invoice_id="other", amount=Decimal("100"), date=date(2024, 5, 21)),
    ]
    status = invoice_payment_status(invoice, settlements, today=date(2024, 7, 1), settings=settings)
    assert status.status is PaymentState.PAID
    assert status.days_overdue == 0
    assert status.paid_amount == Decimal("5949.97")


def test_overpayment_never_leaves_negative_remainder(invoice: Invoice, settings) -> None:
    settlements = [Settlement(invoice_id="inv-1", amount=Decimal("6000"), date=date(2024, 5, 20))]
    status = invoice_payment_status(invoice, settlements, today=date(2024, 7, 1), settings=settings)
    assert status.remaining_amount == Decimal("0")
    assert status.status is PaymentState.PAID


def test_credit_note(invoice: Invoice, settings) -> None:
    credit_note = Invoice(
        id="gs-1",
        number="GS-2024-001",
        date=date(2024, 5, 2),
        due_date=date(2024, 5, 2),
        contact_id="kunde-1",
        net_amount=Decimal("-100"),
        tax_amount=Decimal("-19"),
        gross_amount=Decimal("-119"),
    )
    settlements = [Settlement(invoice_id="gs-1", amount=Decimal("-119"), date=date(2024, 5, 3))]
    status = invoice_payment_status(credit_note, settlements, today=date(2025, 1, 1), settings=settings)
    assert status.status is PaymentState.CREDIT_NOTE
    assert (status.paid_amount, status.remaining_amount, status.days_overdue) == (0, 0, 0)


def test_legacy_settlements_from_linked_transactions(invoice: Invoice, make_transaction, settings) -> None:
    transactions = [
        make_transaction(
            "tx-inv-1",
            date(2024, 5, 1),
            [("1400000", "5950", "0"), ("8400000", "0", "5000"), ("1776000", "0", "950")],
            invoice_id="inv-1",
        ),
        make_transaction(
            "tx-pay-1",
            date(2024, 5, 12),
            [("1200000", "3000", "0"), ("1400000", "0", "3000")],
            invoice_id="inv-1",
        ),
    ]
    settlements = settlements_from_transactions(invoice, transactions)
    assert [(item.transaction_id, item.amount) for item in settlements] == [
        ("tx-pay-1", Decimal("3000"))
    ]
    status = invoice_status_from_transactions(
        invoice, transactions, today=date(2024, 5, 13), settings=settings
    )
    assert status.status is PaymentState.PARTIAL
    assert status.remaining_amount == Decimal("2950.00")


def test_open_items_skip_paid_and_reversed(invoice: Invoice, settings) -> None:
    paid = Invoice(
        id="inv-2",
        number="RE-2024-002",
        date=date(2024, 4, 1),
        due_date=date(2024, 4, 15),
        contact_id="kunde-2",
        net_amount=Decimal("100"),
        tax_amount=Decimal("19"),
        gross_amount=Decimal("119"),
    )
    cancelled = Invoice(
        id="inv-3",
        number="RE-2024-003",
        date=date(2024, 4, 1),
        due_date=date(2024, 4, 1),
        contact_id="kunde-2",
        net_amount=Decimal("100"),
        tax_amount=Decimal("19"),
        gross_amount=Decimal("119"),
        is_reversed=True,
    )
    settlements = [Settlement(invoice_id="inv-2", amount=Decimal("119"), date=date(2024, 4, 10))]
    items = open_items([paid, invoice, cancelled], settlements, today=date(2024, 6, 1), settings=settings)
    assert [item.invoice.number for item in items] == ["RE-2024-001"]
    assert items[0].status.status is PaymentState.OVERDUE
