"""Logging infrastructure with source-file context."""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


class SourceContextFilter(logging.Filter):
    """Add the statement file being processed to log records."""

    def __init__(self):
        super().__init__()
        self.source: Optional[str] = None

    def filter(self, record):
        """Add source to record."""
        record.source = self.source or "-"
        return True


def default_log_dir() -> Path:
    """Resolve the log directory from the environment."""
    explicit = os.getenv("SPENDFLOW_LOG_DIR")
    if explicit:
        return Path(explicit)

    local_app_data = os.getenv("LOCALAPPDATA")
    if local_app_data:
        return Path(local_app_data) / "SpendFlow" / "logs"

    return Path.home() / ".spendflow" / "logs"


class SpendFlowLogger:
    """Centralized logging manager."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        max_file_size_mb: int = 10,
        backup_count: int = 30
    ):
        self.source_filter = SourceContextFilter()

        self.logger = logging.getLogger("spendflow")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.propagate = False

        # Remove existing handlers
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [source:%(source)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(self.source_filter)
        self.logger.addHandler(console_handler)

        self.log_dir = log_dir or default_log_dir()
        self.log_file: Optional[Path] = None
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.warning(f"Log directory {self.log_dir} unavailable ({e}), logging to console only")
            return

        self.log_file = self.log_dir / "spendflow.log"
        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(self.source_filter)
        self.logger.addHandler(file_handler)

    def set_source_context(self, source: Optional[str]):
        """Set current source file for logging."""
        self.source_filter.source = source

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[SpendFlowLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = SpendFlowLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 30
) -> logging.Logger:
    """Rebuild the global logger from settings."""
    global _logger_instance
    _logger_instance = SpendFlowLogger(log_level, log_dir, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def set_source_context(source: Optional[str]):
    """Set source-file context for logging."""
    global _logger_instance
    if _logger_instance:
        _logger_instance.set_source_context(source)
