"""Utility modules."""
from .logger import get_logger, configure_logging, set_source_context
from .exceptions import (
    SpendFlowError,
    ConfigError,
    NetworkError,
    PDFError,
    ParseError,
    LLMError,
    ValidationError,
    RetryableError,
    RetryableNetworkError,
    RetryableLLMError
)
from .retry import retry_with_backoff

__all__ = [
    "get_logger",
    "configure_logging",
    "set_source_context",
    "SpendFlowError",
    "ConfigError",
    "NetworkError",
    "PDFError",
    "ParseError",
    "LLMError",
    "ValidationError",
    "RetryableError",
    "RetryableNetworkError",
    "RetryableLLMError",
    "retry_with_backoff"
]
