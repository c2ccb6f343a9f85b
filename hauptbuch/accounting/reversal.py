"""Generalstorno: reversing postings with negative amounts on the original side."""
from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from hauptbuch.errors import AlreadyReversedError
from hauptbuch.models import ZERO, Invoice, JournalLine, Reversal, Transaction, TransactionKind

LOGGER = logging.getLogger(__name__)


def _negate(line: JournalLine) -> JournalLine:
    # Negating zero keeps the unused side at a plain zero.
    return replace(
        line,
        debit=-line.debit if line.debit else ZERO,
        credit=-line.credit if line.credit else ZERO,
    )


def reverse_transaction(
    original: Transaction,
    reason: str,
    date: Optional[datetime.date] = None,
    new_id: Optional[str] = None,
    reference: Optional[str] = None,
    description: Optional[str] = None,
) -> Reversal:
    """Return the storno posting for ``original`` and the original flagged as reversed.

    Every line is repeated on the same side with the negated amount, so
    debit and credit turnover of the affected accounts shrink instead of
    growing on the opposite side.
    """
    if original.is_reversed:
        raise AlreadyReversedError(f"Transaction '{original.id}' has already been reversed")

    storno = Transaction(
        id=new_id or str(uuid.uuid4()),
        date=date or original.date,
        description=description or f"STORNO ({reason}): {original.description}",
        lines=tuple(_negate(line) for line in original.lines),
        kind=TransactionKind.REVERSAL,
        reference=reference or f"STO-{original.reference or original.id}",
        contact_id=original.contact_id,
        invoice_id=original.invoice_id,
        reverses_id=original.id,
        reversal_reason=reason,
    )
    LOGGER.info("Reversing transaction %s with %s", original.id, storno.id)
    return Reversal(original=replace(original, is_reversed=True), storno=storno)


@dataclass(frozen=True)
class InvoiceReversal:
    invoice: Invoice
    original: Transaction
    storno: Transaction


def reverse_invoice(
    invoice: Invoice,
    transactions: Iterable[Transaction],
    reason: str,
    comment: Optional[str] = None,
    date: Optional[datetime.date] = None,
    new_id: Optional[str] = None,
) -> InvoiceReversal:
    """Cancel an invoice by reversing the transaction that booked it."""
    if invoice.is_reversed:
        raise AlreadyReversedError(f"Invoice '{invoice.number}' has already been reversed")
    original = next(
        (transaction for transaction in transactions if transaction.id == invoice.transaction_id),
        None,
    )
    if original is None:
        raise KeyError(
            f"Transaction '{invoice.transaction_id}' of invoice '{invoice.number}' does not exist"
        )

    full_reason = f"{reason}: {comment}" if comment else reason
    reversal = reverse_transaction(
        original,
        full_reason,
        date=date,
        new_id=new_id,
        reference=f"STO-{invoice.number}",
        description=f"STORNO ({reason}): {invoice.number} - {invoice.description}",
    )
    storno = replace(
        reversal.storno,
        invoice_id=invoice.id,
        contact_id=reversal.storno.contact_id or invoice.contact_id,
    )
    return InvoiceReversal(
        invoice=replace(invoice, is_reversed=True), original=reversal.original, storno=storno
    )


__all__ = ["InvoiceReversal", "reverse_invoice", "reverse_transaction"]
