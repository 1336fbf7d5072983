"""Tests for header label resolution."""
import unittest

from spendflow.statement.headers import NOT_FOUND, resolve_headers


class TestResolveHeaders(unittest.TestCase):
    """Test column role detection."""

    def test_english_unified_amount(self):
        columns = resolve_headers(["Date", "Description", "Amount"])
        self.assertEqual((columns.date, columns.description, columns.amount), (0, 1, 2))
        self.assertTrue(columns.has_amount)
        self.assertEqual(columns.credit, NOT_FOUND)

    def test_russian_credit_debit(self):
        columns = resolve_headers(["Дата операции", "Назначение платежа", "Поступление", "Списание", "Валюта"])
        self.assertEqual(columns.date, 0)
        self.assertEqual(columns.description, 1)
        self.assertEqual(columns.credit, 2)
        self.assertEqual(columns.debit, 3)
        self.assertEqual(columns.currency, 4)
        self.assertFalse(columns.has_amount)

    def test_first_matching_column_wins(self):
        columns = resolve_headers(["Сумма", "Итого"])
        self.assertEqual(columns.amount, 0)

    def test_unknown_labels(self):
        columns = resolve_headers(["foo", "bar"])
        self.assertEqual(columns.date, NOT_FOUND)
        self.assertEqual(columns.description, NOT_FOUND)
        self.assertFalse(columns.has_amount)


if __name__ == "__main__":
    unittest.main()
