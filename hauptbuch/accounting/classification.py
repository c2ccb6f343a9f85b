"""Mapping of chart-of-accounts codes to financial statement lines."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from hauptbuch.models import Account, AccountType

LOGGER = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


@dataclass(frozen=True)
class CodeRangeRule:
    """Assign accounts of one type whose code falls into ``low..high`` to a category."""

    account_type: AccountType
    low: int
    high: int
    category: str
    name_excludes: Optional[str] = None

    def matches(self, account: Account, number: int) -> bool:
        if account.type is not self.account_type:
            return False
        if not self.low <= number <= self.high:
            return False
        return not (self.name_excludes and self.name_excludes.lower() in account.name.lower())


@dataclass(frozen=True)
class StatementLine:
    id: str
    label: str
    parent: Optional[str] = None


@dataclass(frozen=True)
class ChartMapping:
    """Declarative classification table for one chart of accounts.

    Rules are evaluated in order against the first four digits of the
    account code; the first match wins. Accounts no rule matches fall back
    to the default category of their type.
    """

    name: str
    rules: Tuple[CodeRangeRule, ...]
    defaults: Mapping[AccountType, str]
    income_lines: Tuple[StatementLine, ...]
    expense_lines: Tuple[StatementLine, ...]
    asset_lines: Tuple[StatementLine, ...]
    equity_and_liability_lines: Tuple[StatementLine, ...]
    retained_earnings_line: str
    net_result_line: str
    code_digits: int = 4
    labels: Dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not self.labels:
            every_line = (
                self.income_lines
                + self.expense_lines
                + self.asset_lines
                + self.equity_and_liability_lines
            )
            object.__setattr__(self, "labels", {line.id: line.label for line in every_line})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChartMapping":
        """Build a mapping from plain data, e.g. a parsed JSON or TOML document."""

        def lines(key: str) -> Tuple[StatementLine, ...]:
            return tuple(StatementLine(**item) for item in data.get(key, ()))

        rules = tuple(
            CodeRangeRule(
                account_type=AccountType(item["account_type"]),
                low=int(item["low"]),
                high=int(item["high"]),
                category=item["category"],
                name_excludes=item.get("name_excludes"),
            )
            for item in data["rules"]
        )
        defaults = {AccountType(key): value for key, value in data["defaults"].items()}
        return cls(
            name=data["name"],
            rules=rules,
            defaults=defaults,
            income_lines=lines("income_lines"),
            expense_lines=lines("expense_lines"),
            asset_lines=lines("asset_lines"),
            equity_and_liability_lines=lines("equity_and_liability_lines"),
            retained_earnings_line=data["retained_earnings_line"],
            net_result_line=data["net_result_line"],
            code_digits=int(data.get("code_digits", 4)),
        )

    def children_of(self, line_id: str) -> List[StatementLine]:
        return [
            line
            for line in self.asset_lines + self.equity_and_liability_lines
            if line.parent == line_id
        ]


def code_number(code: str, digits: int = 4) -> Optional[int]:
    """Return the numeric value of the leading ``digits`` of an account code."""
    head = code.strip()[:digits]
    if not head.isdigit():
        return None
    return int(head)


def classify_account(account: Account, chart: ChartMapping) -> str:
    """Return the statement category id for an account."""
    number = code_number(account.code, chart.code_digits)
    if number is not None:
        for rule in chart.rules:
            if rule.matches(account, number):
                return rule.category
    else:
        LOGGER.debug("Account %s has a non-numeric code %r", account.id, account.code)
    return chart.defaults.get(account.type, UNCATEGORIZED)


def accounts_by_category(
    accounts: Iterable[Account], chart: ChartMapping
) -> Dict[str, List[Account]]:
    grouped: Dict[str, List[Account]] = {}
    for account in accounts:
        grouped.setdefault(classify_account(account, chart), []).append(account)
    return grouped


def find_account_by_code(accounts: Iterable[Account], code: str) -> Optional[Account]:
    """Find an account by its code, accepting zero-padded long codes.

    ``"4830"`` matches both an account coded ``4830`` and one coded
    ``4830000`` in a seven-digit chart.
    """
    padded = None
    for account in accounts:
        if account.code == code:
            return account
        if padded is None and account.code.startswith(code) and set(account.code[len(code):]) <= {"0"}:
            padded = account
    return padded


def accounts_with_prefix(accounts: Iterable[Account], prefix: str) -> List[Account]:
    return [account for account in accounts if account.code.startswith(prefix)]


__all__ = [
    "UNCATEGORIZED",
    "ChartMapping",
    "CodeRangeRule",
    "StatementLine",
    "accounts_by_category",
    "accounts_with_prefix",
    "classify_account",
    "code_number",
    "find_account_by_code",
]
