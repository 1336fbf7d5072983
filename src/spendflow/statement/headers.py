"""Map header labels to column roles."""
import re
from dataclasses import dataclass
from typing import List, Pattern

NOT_FOUND = -1

# Column names seen in Kaspi, Halyk and similar exports
DATE_LABELS = re.compile(r"date|дата")
DESCRIPTION_LABELS = re.compile(r"description|назначение|категория|details|контрагент")
AMOUNT_LABELS = re.compile(r"amount|сумма|итого|total")
CREDIT_LABELS = re.compile(r"credit|поступление|приход")
DEBIT_LABELS = re.compile(r"debit|списание|расход")
CURRENCY_LABELS = re.compile(r"currency|валюта")


@dataclass(frozen=True)
class ColumnMap:
    """Column index per role, NOT_FOUND when absent."""
    date: int = NOT_FOUND
    description: int = NOT_FOUND
    amount: int = NOT_FOUND
    credit: int = NOT_FOUND
    debit: int = NOT_FOUND
    currency: int = NOT_FOUND

    @property
    def has_amount(self) -> bool:
        """A unified signed-amount column wins over credit/debit."""
        return self.amount != NOT_FOUND


def _find(labels: List[str], pattern: Pattern) -> int:
    for index, label in enumerate(labels):
        if pattern.search(label):
            return index
    return NOT_FOUND


def resolve_headers(header: List[str]) -> ColumnMap:
    """Resolve column roles from the first row's labels."""
    labels = [(label or "").lower() for label in header]
    return ColumnMap(
        date=_find(labels, DATE_LABELS),
        description=_find(labels, DESCRIPTION_LABELS),
        amount=_find(labels, AMOUNT_LABELS),
        credit=_find(labels, CREDIT_LABELS),
        debit=_find(labels, DEBIT_LABELS),
        currency=_find(labels, CURRENCY_LABELS),
    )
