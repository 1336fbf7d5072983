"""Match statement text lines (Kaspi-style) into transactions."""
import re
from datetime import date
from typing import Iterable, List, Optional

from spendflow.analysis.models import Transaction
from spendflow.statement.normalizers import parse_money
from spendflow.utils.logger import get_logger

logger = get_logger()

TRANSACTION_KINDS = ("Purchases", "Transfers", "Replenishment", "Withdrawals", "Others")

STATEMENT_LINE = re.compile(
    r"(?P<date>\b\d{2}\.\d{2}\.(?:\d{4}|\d{2})\b)\s+"
    r"(?P<sign>[+-])\s*"
    r"(?P<amount>[\d\s]+[.,]\d{2})\s*₸?\s+"
    r"(?P<kind>" + "|".join(TRANSACTION_KINDS) + r")\s+"
    r"(?P<description>.+)$",
    re.IGNORECASE,
)


def _parse_statement_date(value: str) -> Optional[date]:
    day, month, year = value.split(".")
    if len(year) == 2:
        year = f"20{year}"
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


class StatementLineExtractor:
    """Extracts transactions from plain-text statement lines."""

    def extract(self, lines: Iterable[str]) -> List[Transaction]:
        """
        Extract transactions from lines, skipping lines that do not match.

        The result keeps line order; sort it with sort_transactions().
        """
        transactions = []
        skipped = 0

        for line in lines:
            txn = self.parse_line(line)
            if txn is None:
                skipped += 1
                continue
            transactions.append(txn)

        logger.info(f"Matched {len(transactions)} statement lines ({skipped} skipped)")
        return transactions

    def parse_line(self, line: str) -> Optional[Transaction]:
        """Parse one line, None when it is not a transaction line."""
        match = STATEMENT_LINE.search(line.strip())
        if not match:
            return None

        txn_date = _parse_statement_date(match.group("date"))
        amount = parse_money(match.group("amount"))
        if txn_date is None or amount is None or amount == 0:
            return None
        if match.group("sign") == "-":
            amount = -amount

        description = re.sub(r"\s{2,}", " ", match.group("description")).strip()

        return Transaction(
            date=txn_date,
            description=description,
            amount=amount,
            raw_fields={"kind": match.group("kind"), "line": line},
        )
