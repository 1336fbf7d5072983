"""Keyword categorization of transaction descriptions."""
import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from .models import Transaction

INCOME_CATEGORY = "Поступления"
OTHER_CATEGORY = "Другое"


@dataclass(frozen=True)
class CategoryRule:
    """A category label and the patterns that select it."""
    name: str
    patterns: Tuple[Pattern, ...]

    def matches(self, description: str) -> bool:
        return any(pattern.search(description) for pattern in self.patterns)


def _rule(name: str, *patterns: str) -> CategoryRule:
    return CategoryRule(name, tuple(re.compile(p, re.IGNORECASE) for p in patterns))


# Evaluated top to bottom, first match wins. The last rule matches everything.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    _rule("Продукты", r"magnum", r"small", r"grocery", r"market", r"super"),
    _rule("Обеды/кафе", r"coffee", r"kafe", r"cafe", r"restaurant", r"burger", r"pizza", r"doner", r"kfc", r"mc"),
    _rule("Транспорт", r"taxi", r"bolt", r"yandex", r"bus", r"metro", r"fuel", r"gas", r"petrol", r"ai-?92|ai-?95"),
    _rule("Связь/интернет", r"tele2", r"activ", r"beeline", r"kcell", r"inet", r"internet", r"wifi"),
    _rule("Шоппинг", r"sulpak", r"technodom", r"wildberries", r"wb", r"ozon", r"lamoda", r"store", r"shop"),
    _rule("Здоровье", r"apteka", r"drug", r"pharm", r"clinic", r"hospital", r"med"),
    _rule("Коммунальные", r"kommun", r"electric", r"water", r"heat", r"egov"),
    _rule("Развлечения", r"cinema", r"kino", r"netflix", r"youtube", r"music", r"game", r"steam"),
    _rule("Образование", r"course", r"edu", r"school", r"univer", r"udemy", r"coursera"),
    _rule(OTHER_CATEGORY, r".*"),
)

CATEGORY_NAMES: Tuple[str, ...] = tuple(rule.name for rule in CATEGORY_RULES)


def classify(description: str) -> str:
    """Return the first matching category name for a description."""
    text = description or ""
    for rule in CATEGORY_RULES:
        if rule.matches(text):
            return rule.name
    return OTHER_CATEGORY


def categorize(transaction: Transaction) -> str:
    """Income goes to the synthetic income bucket, expenses are classified."""
    if transaction.is_income:
        return INCOME_CATEGORY
    return classify(transaction.description)
