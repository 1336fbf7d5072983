"""Transaction aggregation module."""
from decimal import Decimal
from collections import defaultdict
from typing import Dict, List, Optional

from .models import AggregateSummary, CategoryTotal, MonthTotals, Transaction
from .categorizer import INCOME_CATEGORY, categorize
from spendflow.utils.logger import get_logger
from spendflow.utils.exceptions import ValidationError
from spendflow.utils.formatting import whole_units

logger = get_logger()


def round_units(value: Decimal) -> int:
    """Round to whole tenge, half away from zero."""
    return whole_units(value)


class Aggregator:
    """Aggregates transactions by month and category."""

    def aggregate(self, transactions: Optional[List[Transaction]]) -> AggregateSummary:
        """
        Aggregate transactions.

        Totals accumulate unrounded and are rounded once when emitted.

        Args:
            transactions: Loaded transactions (may be empty)

        Returns:
            AggregateSummary object

        Raises:
            ValidationError: If no transaction list was loaded
        """
        if transactions is None:
            raise ValidationError("Cannot aggregate before transactions are loaded")

        income = Decimal(0)
        expense = Decimal(0)
        by_month: Dict[str, Dict[str, Decimal]] = defaultdict(
            lambda: {"income": Decimal(0), "expense": Decimal(0)}
        )
        by_category: Dict[str, Decimal] = defaultdict(Decimal)

        for txn in transactions:
            bucket = by_month[txn.year_month]
            if txn.is_income:
                bucket["income"] += txn.amount
                income += txn.amount
            else:
                bucket["expense"] -= txn.amount
                expense -= txn.amount

            category = categorize(txn)
            by_category[category] += Decimal(0) if txn.is_income else -txn.amount

        months = [
            MonthTotals(
                year_month=key,
                income=round_units(values["income"]),
                expense=round_units(values["expense"])
            )
            for key, values in sorted(by_month.items())
        ]

        categories = [
            CategoryTotal(category=name, total_expense=round_units(total))
            for name, total in sorted(by_category.items(), key=lambda item: item[1], reverse=True)
            if name != INCOME_CATEGORY
        ]

        income_total = round_units(income)
        expense_total = round_units(expense)

        logger.info(
            f"Aggregated {len(transactions)} transactions into {len(months)} months "
            f"and {len(categories)} expense categories"
        )

        return AggregateSummary(
            income=income_total,
            expense=expense_total,
            net=income_total - expense_total,
            by_month=months,
            by_category=categories
        )
