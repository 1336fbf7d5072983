"""SpendFlow: bank statement import, spending summaries and insights."""
__version__ = "0.1.0"
