"""Data models for transactions, summaries and insights."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_EXAMPLES = 3


@dataclass(frozen=True)
class Transaction:
    """One normalized money movement. Positive amount is inflow, negative is outflow."""
    date: date
    description: str
    amount: Decimal
    raw_fields: Optional[Dict[str, str]] = field(default=None, compare=False, repr=False)

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def year_month(self) -> str:
        return f"{self.date.year:04d}-{self.date.month:02d}"


@dataclass(frozen=True)
class MonthTotals:
    """Income and expense for one YYYY-MM bucket."""
    year_month: str
    income: int
    expense: int


@dataclass(frozen=True)
class CategoryTotal:
    """Total expense for one category."""
    category: str
    total_expense: int


@dataclass(frozen=True)
class AggregateSummary:
    """Aggregated transaction data."""
    income: int
    expense: int
    net: int
    by_month: List[MonthTotals]
    by_category: List[CategoryTotal]


class InsightCategory(BaseModel):
    """Pydantic schema for one insight category."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Category label")
    total: float = Field(description="Absolute total in tenge")
    kind: Literal["expense", "income"]
    examples: List[str] = Field(default_factory=list, description="Up to 3 sample descriptions")

    @field_validator("examples")
    @classmethod
    def _limit_examples(cls, value: List[str]) -> List[str]:
        return value[:MAX_EXAMPLES]


class Insight(BaseModel):
    """Category breakdown plus advisory habits, produced locally or remotely."""
    model_config = ConfigDict(frozen=True)

    categories: List[InsightCategory]
    habits: List[str]


@dataclass(frozen=True)
class InsightResult:
    """The current insight and where it came from."""
    value: Insight
    source: Literal["local", "remote"]
    warning: Optional[str] = None
