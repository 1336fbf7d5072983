"""Session and view layer."""
from .session import SessionState, SpendSession
from .views import ExpensePie, PieSlice, SortState, SummaryStats, expense_pie, filter_and_sort, summary_stats

__all__ = [
    "SessionState",
    "SpendSession",
    "ExpensePie",
    "PieSlice",
    "SortState",
    "SummaryStats",
    "expense_pie",
    "filter_and_sort",
    "summary_stats",
]
