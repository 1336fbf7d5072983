"""Delimited statement (CSV) ingestion."""
from .delimited import guess_delimiter, parse_delimited
from .headers import ColumnMap, NOT_FOUND, resolve_headers
from .normalizers import parse_date, parse_money
from .builder import TransactionBuilder, parse_transactions, sort_transactions

__all__ = [
    "guess_delimiter",
    "parse_delimited",
    "ColumnMap",
    "NOT_FOUND",
    "resolve_headers",
    "parse_date",
    "parse_money",
    "TransactionBuilder",
    "parse_transactions",
    "sort_transactions",
]
