"""Table, summary and pie views over loaded transactions."""
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from spendflow.analysis.categorizer import classify
from spendflow.analysis.models import Transaction
from spendflow.utils.exceptions import ValidationError

SORT_KEYS = ("date", "description", "amount")
ASC = "asc"
DESC = "desc"
PIE_SLICES = 8


@dataclass(frozen=True)
class SummaryStats:
    count: int
    income: Decimal
    expenses: Decimal  # sum of negative amounts, so <= 0
    balance: Decimal


@dataclass(frozen=True)
class PieSlice:
    label: str
    value: Decimal
    pct: float


@dataclass(frozen=True)
class ExpensePie:
    total: Decimal
    slices: List[PieSlice]


@dataclass(frozen=True)
class SortState:
    """Current table ordering."""

    key: str = "date"
    direction: str = DESC

    def __post_init__(self):
        if self.key not in SORT_KEYS:
            raise ValidationError(f"Unknown sort key: {self.key}")
        if self.direction not in (ASC, DESC):
            raise ValidationError(f"Unknown sort direction: {self.direction}")

    def toggle(self, key: str) -> "SortState":
        """A new key starts descending; the same key flips direction."""
        if key != self.key:
            return SortState(key, DESC)
        return SortState(key, ASC if self.direction == DESC else DESC)


def summary_stats(transactions: List[Transaction]) -> SummaryStats:
    income = sum((txn.amount for txn in transactions if txn.amount > 0), Decimal(0))
    expenses = sum((txn.amount for txn in transactions if txn.amount < 0), Decimal(0))
    return SummaryStats(
        count=len(transactions),
        income=income,
        expenses=expenses,
        balance=income + expenses
    )


def expense_pie(transactions: List[Transaction], limit: int = PIE_SLICES) -> ExpensePie:
    """
    Top expense categories with their share of the shown total.

    Args:
        transactions: Loaded transactions
        limit: Maximum number of slices

    Returns:
        ExpensePie; percentages are relative to the sum of the kept slices
    """
    totals: Dict[str, Decimal] = OrderedDict()
    for txn in transactions:
        if txn.amount >= 0:
            continue
        category = classify(txn.description)
        totals[category] = totals.get(category, Decimal(0)) + abs(txn.amount)

    entries = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]
    total = sum((value for _, value in entries), Decimal(0))
    slices = [
        PieSlice(label, value, float(value / total * 100) if total else 0.0)
        for label, value in entries
    ]
    return ExpensePie(total=total, slices=slices)


def _sort_value(txn: Transaction, key: str):
    if key == "date":
        return txn.date
    if key == "description":
        return txn.description.casefold()
    return txn.amount


def filter_and_sort(transactions: List[Transaction], query: str = "", sort: SortState = SortState()) -> List[Transaction]:
    """Case-insensitive description search followed by a stable sort."""
    needle = (query or "").strip().lower()
    rows = [txn for txn in transactions if needle in txn.description.lower()] if needle else list(transactions)
    return sorted(rows, key=lambda txn: _sort_value(txn, sort.key), reverse=sort.direction == DESC)
