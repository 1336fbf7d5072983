"""Categorization, aggregation and insights."""
from .models import (
    Transaction,
    MonthTotals,
    CategoryTotal,
    AggregateSummary,
    InsightCategory,
    Insight,
    InsightResult,
)
from .categorizer import CATEGORY_RULES, CATEGORY_NAMES, INCOME_CATEGORY, OTHER_CATEGORY, classify, categorize
from .aggregator import Aggregator
from .insights import build_local_insight, build_summary_tips, insight_with_fallback

__all__ = [
    "Transaction",
    "MonthTotals",
    "CategoryTotal",
    "AggregateSummary",
    "InsightCategory",
    "Insight",
    "InsightResult",
    "CATEGORY_RULES",
    "CATEGORY_NAMES",
    "INCOME_CATEGORY",
    "OTHER_CATEGORY",
    "classify",
    "categorize",
    "Aggregator",
    "build_local_insight",
    "build_summary_tips",
    "insight_with_fallback",
]
