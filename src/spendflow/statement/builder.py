"""Build canonical transactions from delimited rows."""
import re
from decimal import Decimal
from typing import Iterable, List, Optional

from spendflow.analysis.models import Transaction
from spendflow.utils.logger import get_logger
from .delimited import parse_delimited
from .headers import ColumnMap, NOT_FOUND, resolve_headers
from .normalizers import parse_date, parse_money

logger = get_logger()

PLACEHOLDER_DESCRIPTION = "-"
_TENGE_CURRENCY = re.compile(r"KZT|₸|Т|ТГ")


def _cell(row: List[str], index: int) -> Optional[str]:
    """Return row[index], or None for a missing role or a short row."""
    if index == NOT_FOUND or index >= len(row):
        return None
    return row[index]


def sort_transactions(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Sort ascending by date."""
    return sorted(transactions, key=lambda txn: txn.date)


class TransactionBuilder:
    """Turns parsed rows into transactions, dropping rows that fail to parse."""

    def build(self, rows: List[List[str]]) -> List[Transaction]:
        """
        Build transactions from rows.

        Args:
            rows: Parsed rows, the first one being the header

        Returns:
            Transactions sorted by date; empty when there is no data row
        """
        if len(rows) <= 1:
            return []

        header = rows[0]
        columns = resolve_headers(header)
        logger.debug(f"Resolved columns: {columns}")

        transactions = [
            txn for txn in (self.parse_row(row, header, columns) for row in rows[1:])
            if txn is not None
        ]

        dropped = len(rows) - 1 - len(transactions)
        if dropped:
            logger.debug(f"Dropped {dropped} of {len(rows) - 1} rows without a valid date or amount")

        return sort_transactions(transactions)

    def parse_row(self, row: List[str], header: List[str], columns: ColumnMap) -> Optional[Transaction]:
        """
        Parse one data row.

        Args:
            row: Data row fields
            header: Header labels
            columns: Resolved column roles

        Returns:
            Transaction, or None when the date or amount is unusable
        """
        date_text = _cell(row, columns.date)
        if date_text is None:
            date_text = _cell(row, 0)

        description = _cell(row, columns.description)
        if description is None:
            description = _cell(row, 1)

        amount = self._resolve_amount(row, columns)

        currency = (_cell(row, columns.currency) or "").upper()
        if currency and not _TENGE_CURRENCY.search(currency):
            logger.debug(f"Non-tenge currency {currency} kept as literal amount")

        txn_date = parse_date(date_text)
        if txn_date is None:
            return None
        if amount is None or not amount.is_finite() or amount == 0:
            return None

        return Transaction(
            date=txn_date,
            description=description or PLACEHOLDER_DESCRIPTION,
            amount=amount,
            raw_fields={label: (_cell(row, j) or "") for j, label in enumerate(header)},
        )

    def _resolve_amount(self, row: List[str], columns: ColumnMap) -> Optional[Decimal]:
        if columns.has_amount:
            return parse_money(_cell(row, columns.amount))

        # Separate credit and debit columns; blank cells count as zero
        credit = parse_money(_cell(row, columns.credit)) or Decimal(0)
        debit = parse_money(_cell(row, columns.debit)) or Decimal(0)
        return credit if credit != 0 else -abs(debit)


def parse_transactions(text: str) -> List[Transaction]:
    """Parse delimited statement text into sorted transactions."""
    return TransactionBuilder().build(parse_delimited(text))
