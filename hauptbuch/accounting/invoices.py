"""Open-item tracking: payment status of invoices."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from hauptbuch.config import LedgerSettings, get_settings
from hauptbuch.models import (
    ZERO,
    Invoice,
    PaymentState,
    PaymentStatus,
    Settlement,
    Transaction,
)

LOGGER = logging.getLogger(__name__)

TWO = Decimal("2")


def invoice_payment_status(
    invoice: Invoice,
    settlements: Iterable[Settlement],
    today: Optional[date] = None,
    settings: Optional[LedgerSettings] = None,
) -> PaymentStatus:
    """Return how much of an invoice is paid and whether it is overdue.

    Only settlements recorded for ``invoice.id`` count. Credit notes
    (negative gross amount) and cancelled invoices are never open.
    """
    if invoice.is_reversed:
        return PaymentStatus(
            paid_amount=ZERO, remaining_amount=ZERO, status=PaymentState.REVERSED, days_overdue=0
        )
    if invoice.is_credit_note:
        return PaymentStatus(
            paid_amount=ZERO, remaining_amount=ZERO, status=PaymentState.CREDIT_NOTE, days_overdue=0
        )
    tolerance = (settings or get_settings()).payment_tolerance
    today = today or date.today()

    paid = sum(
        (settlement.amount for settlement in settlements if settlement.invoice_id == invoice.id),
        ZERO,
    )
    remaining = max(ZERO, invoice.gross_amount - paid)
    days_overdue = (today - invoice.due_date).days

    if remaining < tolerance:
        status = PaymentState.PAID
        days_overdue = 0
    elif paid > tolerance:
        status = PaymentState.PARTIAL
    elif days_overdue > 0:
        status = PaymentState.OVERDUE
    else:
        status = PaymentState.OPEN
    return PaymentStatus(
        paid_amount=paid, remaining_amount=remaining, status=status, days_overdue=days_overdue
    )


def settlements_from_transactions(
    invoice: Invoice, transactions: Iterable[Transaction]
) -> List[Settlement]:
    """Infer settlements from transactions linked to the invoice.

    Legacy data has no settlement records. Each linked transaction other
    than the one that booked the invoice counts with half the sum of its
    debits and credits. This is only exact for two-line postings; split
    or multi-invoice payments are misattributed. The storno of the
    booking itself is not a payment.
    """
    settlements = []
    for transaction in transactions:
        if transaction.invoice_id != invoice.id or transaction.id == invoice.transaction_id:
            continue
        if invoice.transaction_id and transaction.reverses_id == invoice.transaction_id:
            continue
        amount = (transaction.total_debit + transaction.total_credit) / TWO
        settlements.append(
            Settlement(
                invoice_id=invoice.id,
                amount=amount,
                date=transaction.date,
                transaction_id=transaction.id,
            )
        )
    if settlements:
        LOGGER.debug(
            "Inferred %d settlement(s) for invoice %s from linked transactions",
            len(settlements),
            invoice.number,
        )
    return settlements


def invoice_status_from_transactions(
    invoice: Invoice,
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
    settings: Optional[LedgerSettings] = None,
) -> PaymentStatus:
    settlements = settlements_from_transactions(invoice, transactions)
    return invoice_payment_status(invoice, settlements, today=today, settings=settings)


@dataclass(frozen=True)
class OpenItem:
    invoice: Invoice
    status: PaymentStatus


def open_items(
    invoices: Iterable[Invoice],
    settlements: Iterable[Settlement],
    today: Optional[date] = None,
    settings: Optional[LedgerSettings] = None,
) -> List[OpenItem]:
    """List the invoices that still await payment (Offene-Posten-Liste)."""
    settlements = list(settlements)
    items = []
    for invoice in invoices:
        status = invoice_payment_status(invoice, settlements, today=today, settings=settings)
        if status.status in (PaymentState.PAID, PaymentState.CREDIT_NOTE, PaymentState.REVERSED):
            continue
        items.append(OpenItem(invoice=invoice, status=status))
    return sorted(items, key=lambda item: (item.invoice.due_date, item.invoice.number))


__all__ = [
    "OpenItem",
    "invoice_payment_status",
    "invoice_status_from_transactions",
    "open_items",
    "settlements_from_transactions",
]
