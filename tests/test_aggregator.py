"""Tests for transaction aggregator."""
import unittest
from datetime import date
from decimal import Decimal

from spendflow.analysis.aggregator import Aggregator
from spendflow.analysis.models import CategoryTotal, MonthTotals, Transaction
from spendflow.statement.builder import parse_transactions
from spendflow.utils.exceptions import ValidationError


class TestAggregator(unittest.TestCase):
    """Test Aggregator functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.aggregator = Aggregator()

    def test_sample_statement(self):
        transactions = parse_transactions(
            "date,description,amount\n2024-01-05,Magnum Grocery,-15000\n2024-01-07,Salary,300000"
        )
        summary = self.aggregator.aggregate(transactions)

        self.assertEqual(summary.income, 300000)
        self.assertEqual(summary.expense, 15000)
        self.assertEqual(summary.net, 285000)
        self.assertEqual(summary.by_category, [CategoryTotal("Продукты", 15000)])
        self.assertEqual(summary.by_month, [MonthTotals("2024-01", 300000, 15000)])

    def test_months_ascending_categories_descending(self):
        transactions = [
            Transaction(date(2024, 1, 3), "Netflix", Decimal("-3000")),
            Transaction(date(2023, 12, 30), "Magnum", Decimal("-20000")),
            Transaction(date(2024, 1, 10), "Taxi", Decimal("-5000")),
        ]
        summary = self.aggregator.aggregate(transactions)

        self.assertEqual([m.year_month for m in summary.by_month], ["2023-12", "2024-01"])
        self.assertEqual(
            [c.category for c in summary.by_category],
            ["Продукты", "Транспорт", "Развлечения"]
        )

    def test_rounding_after_accumulation(self):
        """Fractions add up before rounding to whole tenge."""
        transactions = [
            Transaction(date(2024, 1, 1), "Magnum", Decimal("-100.40")),
            Transaction(date(2024, 1, 2), "Magnum", Decimal("-100.40")),
        ]
        summary = self.aggregator.aggregate(transactions)
        self.assertEqual(summary.expense, 201)
        self.assertEqual(summary.by_category[0].total_expense, 201)

    def test_net_is_income_minus_expense(self):
        transactions = [
            Transaction(date(2024, 1, 1), "Salary", Decimal("1000.5")),
            Transaction(date(2024, 1, 2), "Magnum", Decimal("-0.5")),
        ]
        summary = self.aggregator.aggregate(transactions)
        self.assertEqual(summary.net, summary.income - summary.expense)

    def test_idempotent(self):
        transactions = [
            Transaction(date(2024, 1, 1), "Salary", Decimal("1000")),
            Transaction(date(2024, 2, 2), "Magnum", Decimal("-300")),
        ]
        self.assertEqual(self.aggregator.aggregate(transactions), self.aggregator.aggregate(transactions))

    def test_huge_amounts_round_without_error(self):
        transactions = [
            Transaction(date(2024, 1, 1), "Salary", Decimal("1E+40")),
            Transaction(date(2024, 1, 2), "Magnum", Decimal("-5E+30")),
        ]
        summary = self.aggregator.aggregate(transactions)

        self.assertEqual(summary.income, 10 ** 40)
        self.assertEqual(summary.expense, 5 * 10 ** 30)
        self.assertEqual(summary.net, 10 ** 40 - 5 * 10 ** 30)
        self.assertEqual(summary.by_month[0].expense, summary.expense)

    def test_empty_list(self):
        summary = self.aggregator.aggregate([])
        self.assertEqual((summary.income, summary.expense, summary.net), (0, 0, 0))
        self.assertEqual(summary.by_month, [])
        self.assertEqual(summary.by_category, [])

    def test_not_loaded_raises_error(self):
        with self.assertRaises(ValidationError):
            self.aggregator.aggregate(None)


if __name__ == "__main__":
    unittest.main()
