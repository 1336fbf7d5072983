"""PDF text extraction for text-based bank statements."""
from pathlib import Path
from typing import Callable, List, Optional

import pdfplumber
import pypdf

from spendflow.utils.logger import get_logger
from spendflow.utils.exceptions import PDFError
from .text_normalizer import LineNormalizer

logger = get_logger()

PageReader = Callable[[Path], List[Optional[str]]]


def pdfplumber_pages(pdf_path: Path) -> List[Optional[str]]:
    with pdfplumber.open(pdf_path) as pdf:
        return [page.extract_text() for page in pdf.pages]


def pypdf_pages(pdf_path: Path) -> List[Optional[str]]:
    with open(pdf_path, "rb") as f:
        return [page.extract_text() for page in pypdf.PdfReader(f).pages]


class PDFProcessor:
    """Extracts text from PDF files."""

    MIN_TEXT_LENGTH = 50
    # Tried in order; later engines only run when earlier ones come up short
    ENGINES = (("pdfplumber", pdfplumber_pages), ("pypdf", pypdf_pages))

    def __init__(self, min_text_length: int = MIN_TEXT_LENGTH):
        """
        Initialize PDF processor.

        Args:
            min_text_length: Shorter extractions are treated as scans
        """
        self.min_text_length = min_text_length
        self.normalizer = LineNormalizer()

    def extract_text(self, pdf_path: Path) -> str:
        """
        Extract text from PDF file.

        Args:
            pdf_path: Path to PDF file

        Returns:
            Extracted text

        Raises:
            PDFError: If every engine fails or the text is too short
        """
        text = None
        for engine, read_pages in self.ENGINES:
            text = self._join_pages(engine, read_pages, pdf_path)
            if self.validate_extraction(text):
                break
            logger.info(f"{engine} extracted {len(text) if text else 0} chars from {pdf_path.name}")
        else:
            raise PDFError(
                f"Extracted text too short ({len(text) if text else 0} chars, minimum {self.min_text_length}). "
                f"File may be scanned or corrupted."
            )

        logger.info(f"Successfully extracted {len(text)} characters from {pdf_path.name}")
        return text

    def extract_lines(self, pdf_path: Path) -> List[str]:
        """Extract text and split it into cleaned, non-empty lines."""
        return self.normalizer.lines(self.extract_text(pdf_path))

    def validate_extraction(self, text: Optional[str]) -> bool:
        return bool(text) and len(text) >= self.min_text_length

    @staticmethod
    def _join_pages(engine: str, read_pages: PageReader, pdf_path: Path) -> Optional[str]:
        """Run one engine over every page; None when it fails or finds nothing."""
        try:
            page_texts = read_pages(pdf_path)
        except Exception as e:
            logger.warning(f"{engine} extraction failed for {pdf_path.name}: {e}")
            return None

        text_parts = []
        for i, page_text in enumerate(page_texts, 1):
            if page_text:
                text_parts.append(page_text)
            else:
                logger.debug(f"{engine}: page {i} extracted no text")
        return "\n".join(text_parts) or None
