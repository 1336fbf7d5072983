"""Tests for the analysis session state machine."""
import dataclasses
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from spendflow.analysis.insights import build_local_insight
from spendflow.config.settings import AppSettings
from spendflow.orchestrator.session import (
    CSV_UNRECOGNIZED_HINT,
    PDF_EMPTY_HINT,
    SessionState,
    SpendSession,
)
from spendflow.utils.exceptions import LLMError, ParseError, PDFError, ValidationError

SAMPLE_CSV = "date,description,amount\n2024-01-05,Magnum Grocery,-15000\n2024-01-07,Salary,300000"


class FakeRemote:
    def __init__(self, on_fetch=None, error=None):
        self.on_fetch = on_fetch
        self.error = error

    def fetch_insight(self, transactions):
        if self.on_fetch:
            self.on_fetch()
        if self.error:
            raise self.error
        return build_local_insight(transactions)


class TestSpendSession(unittest.TestCase):
    """Test SpendSession loading and analysis."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.settings = AppSettings.load()
        self.session = SpendSession(self.settings)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_initial_state(self):
        self.assertEqual(self.session.state, SessionState.NO_DATA)
        self.assertIsNone(self.session.transactions)
        with self.assertRaises(ValidationError):
            self.session.summary()
        with self.assertRaises(ValidationError):
            self.session.run_local()

    def test_load_csv_text(self):
        transactions = self.session.load_csv_text(SAMPLE_CSV)

        self.assertEqual(len(transactions), 2)
        self.assertEqual(self.session.state, SessionState.LOADED)
        self.assertEqual(self.session.hint, "Импортировано операций: 2")
        self.assertEqual(self.session.summary().net, 285000)

    def test_unrecognized_csv_is_loaded_but_empty(self):
        self.session.load_csv_text("hello\nworld")

        self.assertEqual(self.session.state, SessionState.LOADED)
        self.assertEqual(self.session.transactions, [])
        self.assertEqual(self.session.hint, CSV_UNRECOGNIZED_HINT)
        self.assertEqual(self.session.summary().income, 0)

    def test_local_then_reload_discards_insight(self):
        self.session.load_csv_text(SAMPLE_CSV)
        self.session.run_local()
        self.assertEqual(self.session.state, SessionState.LOCAL_INSIGHT)

        self.session.load_csv_text(SAMPLE_CSV)
        self.assertEqual(self.session.state, SessionState.LOADED)
        self.assertIsNone(self.session.insight)

    def test_remote_insight(self):
        self.session.load_csv_text(SAMPLE_CSV)
        result = self.session.run_remote(FakeRemote())

        self.assertEqual(result.source, "remote")
        self.assertEqual(self.session.state, SessionState.REMOTE_INSIGHT)

    def test_remote_failure_gives_local_insight(self):
        self.session.load_csv_text(SAMPLE_CSV)
        result = self.session.run_remote(FakeRemote(error=LLMError("500")))

        self.assertEqual(result.source, "local")
        self.assertIn("500", result.warning)
        self.assertEqual(self.session.state, SessionState.LOCAL_INSIGHT)

    def test_stale_remote_result_discarded(self):
        """A load that happens while the remote call runs wins."""
        self.session.load_csv_text(SAMPLE_CSV)
        remote = FakeRemote(on_fetch=lambda: self.session.load_csv_text("date,description,amount\n2024-02-01,Taxi,-900"))

        result = self.session.run_remote(remote)

        self.assertIsNone(result)
        self.assertEqual(self.session.state, SessionState.LOADED)
        self.assertEqual(len(self.session.transactions), 1)

    def test_load_csv_file_cp1251(self):
        path = self.test_dir / "statement.csv"
        path.write_bytes("Дата;Описание;Сумма\n05.01.2024;Магазин;-1 500,00\n".encode("cp1251"))

        transactions = self.session.load_file(path)

        self.assertEqual(len(transactions), 1)
        self.assertEqual(transactions[0].description, "Магазин")

    def test_load_csv_file_too_large(self):
        session = SpendSession(dataclasses.replace(self.settings, import_max_file_size_mb=0))
        path = self.test_dir / "statement.csv"
        path.write_text(SAMPLE_CSV, encoding="utf-8")

        self.assertEqual(session.load_file(path), [])
        self.assertTrue(session.hint.startswith("CSV ошибка:"))
        self.assertEqual(session.state, SessionState.LOADED)

    def test_load_csv_file_undecodable(self):
        session = SpendSession(dataclasses.replace(self.settings, csv_encodings=["utf-8"]))
        path = self.test_dir / "statement.csv"
        path.write_bytes(b"date,description,amount\n2024-01-05,\xff\xfe,-100\n")

        with self.assertRaises(ParseError):
            session._read_csv(path)

        self.assertEqual(session.load_file(path), [])
        self.assertEqual(session.hint, "CSV ошибка: не удалось определить кодировку (utf-8)")
        self.assertEqual(session.state, SessionState.LOADED)

    def test_load_missing_csv_file(self):
        self.session.load_file(self.test_dir / "missing.csv")
        self.assertTrue(self.session.hint.startswith("CSV ошибка:"))

    def test_load_pdf_file(self):
        lines = [
            "Выписка Kaspi Gold",
            "07.01.24 + 300 000,00 ₸ Replenishment Зарплата",
            "05.01.24 - 15 000,00 ₸ Purchases Magnum Astana",
        ]
        with mock.patch.object(self.session.pdf_processor, "extract_lines", return_value=lines):
            transactions = self.session.load_file(self.test_dir / "statement.PDF")

        self.assertEqual([t.description for t in transactions], ["Magnum Astana", "Зарплата"])
        self.assertEqual(self.session.hint, "Импортировано операций: 2")

    def test_load_pdf_without_matches(self):
        with mock.patch.object(self.session.pdf_processor, "extract_lines", return_value=["Нет операций"]):
            self.session.load_file(self.test_dir / "scan.pdf")

        self.assertEqual(self.session.transactions, [])
        self.assertEqual(self.session.hint, PDF_EMPTY_HINT)

    def test_load_pdf_error(self):
        with mock.patch.object(self.session.pdf_processor, "extract_lines", side_effect=PDFError("too short")):
            self.session.load_file(self.test_dir / "scan.pdf")

        self.assertEqual(self.session.hint, "PDF ошибка: too short")
        self.assertEqual(self.session.state, SessionState.LOADED)

    def test_generation_increments(self):
        self.session.load_csv_text(SAMPLE_CSV)
        self.session.load_csv_text(SAMPLE_CSV)
        self.assertEqual(self.session.generation, 2)


if __name__ == "__main__":
    unittest.main()
