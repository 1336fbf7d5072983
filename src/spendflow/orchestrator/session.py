"""Caller-owned analysis session: load a statement, summarize, build insights.

One session holds at most one loaded statement. Every load bumps a generation
counter, so an insight computed for an older load is dropped instead of being
attached to newer data.
"""
from enum import Enum
from pathlib import Path
from typing import List, Optional

from spendflow.analysis.aggregator import Aggregator
from spendflow.analysis.insights import build_local_insight, build_summary_tips, insight_with_fallback
from spendflow.analysis.models import AggregateSummary, InsightResult, Transaction
from spendflow.config.settings import AppSettings, get_settings
from spendflow.pdf.processor import PDFProcessor
from spendflow.pdf.statement_lines import StatementLineExtractor
from spendflow.statement.builder import parse_transactions, sort_transactions
from spendflow.utils.exceptions import ParseError, PDFError, ValidationError
from spendflow.utils.logger import get_logger, set_source_context

logger = get_logger()

INITIAL_HINT = "Загрузите CSV или PDF (текстовый, не скан)."
IMPORTED_HINT = "Импортировано операций: {count}"
CSV_UNRECOGNIZED_HINT = "Не удалось распознать CSV. Проверьте, чтобы это был именно CSV."
PDF_EMPTY_HINT = "Из PDF ничего не извлечено. Возможно, это скан (нужен OCR)."
CSV_ERROR_HINT = "CSV ошибка: {reason}"
PDF_ERROR_HINT = "PDF ошибка: {reason}"


class SessionState(Enum):
    NO_DATA = "no_data"
    LOADED = "loaded"
    LOCAL_INSIGHT = "local_insight"
    REMOTE_INSIGHT = "remote_insight"


class SpendSession:
    """Holds the loaded transactions, the user hint and the current insight."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self.settings = settings or get_settings()
        self.transactions: Optional[List[Transaction]] = None
        self.hint = INITIAL_HINT
        self.insight: Optional[InsightResult] = None
        self.generation = 0

        self.aggregator = Aggregator()
        self.pdf_processor = PDFProcessor(self.settings.pdf_min_text_length)
        self.line_extractor = StatementLineExtractor()

    @property
    def state(self) -> SessionState:
        if self.transactions is None:
            return SessionState.NO_DATA
        if self.insight is None:
            return SessionState.LOADED
        if self.insight.source == "remote":
            return SessionState.REMOTE_INSIGHT
        return SessionState.LOCAL_INSIGHT

    # Loading

    def load_file(self, path: Path) -> List[Transaction]:
        """Load a CSV or PDF statement, choosing the reader by extension."""
        path = Path(path)
        if path.suffix.lower() == ".pdf":
            return self.load_pdf_file(path)
        return self.load_csv_file(path)

    def load_csv_text(self, text: str) -> List[Transaction]:
        """Parse delimited statement text and make it the session data."""
        transactions = parse_transactions(text)
        if not transactions:
            return self._replace([], CSV_UNRECOGNIZED_HINT)
        return self._replace(transactions, IMPORTED_HINT.format(count=len(transactions)))

    def load_csv_file(self, path: Path) -> List[Transaction]:
        path = Path(path)
        set_source_context(path.name)
        try:
            return self.load_csv_text(self._read_csv(path))
        except (OSError, ParseError, ValidationError) as e:
            logger.error(f"Failed to read CSV {path.name}: {e}")
            return self._replace([], CSV_ERROR_HINT.format(reason=e))
        finally:
            set_source_context(None)

    def load_pdf_file(self, path: Path) -> List[Transaction]:
        path = Path(path)
        set_source_context(path.name)
        try:
            lines = self.pdf_processor.extract_lines(path)
        except PDFError as e:
            logger.error(f"Failed to read PDF {path.name}: {e}")
            return self._replace([], PDF_ERROR_HINT.format(reason=e))
        finally:
            set_source_context(None)
        return self.load_statement_lines(lines)

    def load_statement_lines(self, lines: List[str]) -> List[Transaction]:
        """Match already-extracted statement lines and make them the session data."""
        transactions = sort_transactions(self.line_extractor.extract(lines))
        if not transactions:
            return self._replace([], PDF_EMPTY_HINT)
        return self._replace(transactions, IMPORTED_HINT.format(count=len(transactions)))

    def _read_csv(self, path: Path) -> str:
        max_bytes = self.settings.import_max_file_size_mb * 1024 * 1024
        size = path.stat().st_size
        if size > max_bytes:
            raise ValidationError(
                f"файл {size // (1024 * 1024)} МБ больше лимита {self.settings.import_max_file_size_mb} МБ"
            )

        data = path.read_bytes()
        for encoding in self.settings.csv_encodings:
            try:
                text = data.decode(encoding)
                logger.debug(f"Decoded {path.name} as {encoding}")
                return text
            except UnicodeDecodeError:
                continue
        raise ParseError(f"не удалось определить кодировку ({', '.join(self.settings.csv_encodings)})")

    def _replace(self, transactions: List[Transaction], hint: str) -> List[Transaction]:
        self.generation += 1
        self.transactions = transactions
        self.insight = None
        self.hint = hint
        logger.info(f"Load #{self.generation}: {len(transactions)} transactions ({hint})")
        return transactions

    # Analysis

    def _require_data(self) -> List[Transaction]:
        if self.transactions is None:
            raise ValidationError("No statement loaded")
        return self.transactions

    def summary(self) -> AggregateSummary:
        return self.aggregator.aggregate(self._require_data())

    def summary_tips(self) -> List[str]:
        return build_summary_tips(self.summary())

    def run_local(self) -> InsightResult:
        """Compute the offline insight for the loaded data."""
        transactions = self._require_data()
        self.insight = InsightResult(value=build_local_insight(transactions), source="local")
        return self.insight

    def run_remote(self, remote=None) -> Optional[InsightResult]:
        """
        Request the remote insight, falling back to the local one.

        Args:
            remote: Remote producer (RemoteInsightClient) or None

        Returns:
            InsightResult, or None when a newer load superseded this request
        """
        transactions = self._require_data()
        generation = self.generation

        result = insight_with_fallback(transactions, remote)

        if generation != self.generation:
            logger.info(f"Discarding insight for load #{generation}, current load is #{self.generation}")
            return None
        self.insight = result
        return result
