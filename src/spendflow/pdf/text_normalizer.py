"""Line cleanup for text extracted from PDF statements."""
import re
import unicodedata
from typing import List

from spendflow.utils.logger import get_logger

logger = get_logger()


class LineNormalizer:
    """Normalizes statement text into matchable lines."""

    # Whole-line page markers only, so transaction lines are never touched
    ARTIFACTS = [
        r"^[ \t]*(?:страница|стр\.|page)\s*\d+(?:\s*(?:из|of|/)\s*\d+)?[ \t]*$",
        r"^[ \t]*\d+[ \t]*/[ \t]*\d+[ \t]*$",
    ]

    def normalize(self, text: str) -> str:
        """
        Normalize extracted text.

        Args:
            text: Raw extracted text

        Returns:
            Normalized text
        """
        if not text:
            return ""

        text = unicodedata.normalize("NFC", text)
        text = self.strip_artifacts(text)
        text = self._clean_whitespace(text)

        logger.debug(f"Normalized text to {len(text)} characters")
        return text

    def lines(self, text: str) -> List[str]:
        """Normalize and split into non-empty lines."""
        return [line for line in self.normalize(text).split("\n") if line]

    def strip_artifacts(self, text: str) -> str:
        """Remove page-number lines."""
        for pattern in self.ARTIFACTS:
            text = re.sub(pattern, "", text, flags=re.MULTILINE | re.IGNORECASE)
        return text

    def _clean_whitespace(self, text: str) -> str:
        """Collapse runs of spaces and trim every line."""
        text = text.replace("\r\n", "\n")
        text = re.sub(r"[ \t\u00a0\u202f]+", " ", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return "\n".join(line.strip() for line in text.split("\n"))
