"""Custom exception classes for SpendFlow."""


class SpendFlowError(Exception):
    """Base exception for SpendFlow."""
    pass


class ConfigError(SpendFlowError):
    """Configuration-related errors."""
    pass


class NetworkError(SpendFlowError):
    """Network and API-related errors."""
    pass


class PDFError(SpendFlowError):
    """PDF text extraction errors."""
    pass


class ParseError(SpendFlowError):
    """Statement file could not be read as text."""
    pass


class LLMError(SpendFlowError):
    """Remote insight service errors."""
    pass


class ValidationError(SpendFlowError):
    """Data validation and call-contract errors."""
    pass


# Retryable errors
class RetryableError(SpendFlowError):
    """Base class for errors that should trigger retry."""
    pass


class RetryableNetworkError(RetryableError, NetworkError):
    """Network errors that can be retried."""
    pass


class RetryableLLMError(RetryableError, LLMError):
    """Remote service errors that can be retried."""
    pass
