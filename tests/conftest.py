from datetime import date
from decimal import Decimal
from typing import Callable, List, Tuple

import pytest

from hauptbuch.accounting.charts.skr03 import seed_accounts
from hauptbuch.accounting.engine import InMemoryLedger
from hauptbuch.config import LedgerSettings
from hauptbuch.models import Account, JournalLine, Transaction

LineSpec = Tuple[str, str, str]


@pytest.fixture()
def settings() -> LedgerSettings:
    return LedgerSettings(_env_file=None)


@pytest.fixture()
def accounts() -> List[Account]:
    return seed_accounts()


@pytest.fixture()
def ledger(settings: LedgerSettings) -> InMemoryLedger:
    return InMemoryLedger(settings=settings, seed_chart=True)


@pytest.fixture()
def make_transaction() -> Callable[..., Transaction]:
    """Build a transaction from ``(account_id, debit, credit)`` tuples."""

    def factory(transaction_id: str, on: date, lines: List[LineSpec], **fields) -> Transaction:
        journal_lines = tuple(
            JournalLine(account_id=account_id, debit=Decimal(debit), credit=Decimal(credit))
            for account_id, debit, credit in lines
        )
        fields.setdefault("description", transaction_id)
        return Transaction(id=transaction_id, date=on, lines=journal_lines, **fields)

    return factory
