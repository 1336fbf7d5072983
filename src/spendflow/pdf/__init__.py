"""PDF statement processing module."""
from .processor import PDFProcessor
from .text_normalizer import LineNormalizer
from .statement_lines import StatementLineExtractor

__all__ = ["PDFProcessor", "LineNormalizer", "StatementLineExtractor"]
