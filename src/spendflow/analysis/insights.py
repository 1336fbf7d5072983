"""Local insight engine, summary tips and the remote fallback policy."""
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, List

from .models import AggregateSummary, Insight, InsightCategory, InsightResult, MAX_EXAMPLES, Transaction
from .categorizer import INCOME_CATEGORY, classify
from .aggregator import round_units
from spendflow.utils.exceptions import SpendFlowError
from spendflow.utils.formatting import format_tenge
from spendflow.utils.logger import get_logger

logger = get_logger()

# Expense-share thresholds: (category, share of total expense, advice)
SHARE_RULES = (
    ("Обеды/кафе", Decimal("0.15"),
     "Снизить траты на кафе: готовить дома 2-3 раза в неделю, брать обеды с собой."),
    ("Продукты", Decimal("0.35"),
     "Составлять список покупок и план питания на неделю, чтобы меньше покупать импульсивно."),
    ("Связь/интернет", Decimal("0.08"),
     "Проверить тарифы у оператора: часто есть пакет дешевле при автооплате или годовой оплате."),
    ("Развлечения", Decimal("0.10"),
     "Ограничить подписки и микроплатежи: раз в месяц проводить аудит активных подписок."),
    ("Транспорт", Decimal("0.12"),
     "Чаще использовать общественный транспорт или каршеринг, объединять поездки и планировать маршруты."),
    ("Шоппинг", Decimal("0.10"),
     "Правило 24 часов: если вещь не первой необходимости, подождать сутки перед покупкой."),
)

UTILITIES_MARKER = "коммун"
UTILITIES_HABIT = "Для коммунальных: платить без просрочек и вести учет показаний, чтобы не было штрафов и переплат."

SAVINGS_RATIO_LIMIT = Decimal("0.9")
SAVINGS_RATE_HABIT = "Низкая норма сбережений: попробуйте метод 50/30/20 (50% на базовые нужды, 30% на жизнь, 20% в накопления)."

MIN_HABITS = 3
FILLER_HABITS = (
    "Ввести лимиты по категориям и напоминание о достижении 80% лимита.",
    "Автоматически переводить 10-15% дохода в накопления в день зарплаты.",
)

LOW_SAVINGS_TIP = "Низкая норма сбережений (<10%). Попробуйте правило 50/30/20 или настройте автоперевод в копилку."
SUBSCRIPTIONS_TIP = "Подписки и развлечения: отключите неиспользуемые, переходите на годовой тариф, так дешевле."
SPIKE_TIP = "В последний месяц расходы выросли более чем на 30% к среднему. Проверьте разовые крупные траты."
ENTERTAINMENT_CATEGORY = "Развлечения"
SPIKE_FACTOR = Decimal("1.3")

FALLBACK_WARNING = "AI недоступен • применён локальный анализ ({reason})"


def build_local_insight(transactions: List[Transaction]) -> Insight:
    """
    Build the offline insight from transactions.

    Args:
        transactions: Loaded transactions

    Returns:
        Insight with category totals and habits
    """
    totals: Dict[str, Decimal] = OrderedDict()
    examples: Dict[str, List[str]] = {}

    for txn in transactions:
        name = INCOME_CATEGORY if txn.is_income else classify(txn.description)
        totals[name] = totals.get(name, Decimal(0)) + abs(txn.amount)
        samples = examples.setdefault(name, [])
        description = txn.description.strip()
        if len(samples) < MAX_EXAMPLES and description:
            samples.append(description)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    categories = [
        InsightCategory(
            name=name,
            total=float(round_units(total)),
            kind="income" if name == INCOME_CATEGORY else "expense",
            examples=examples[name]
        )
        for name, total in ranked
    ]

    income = totals.get(INCOME_CATEGORY, Decimal(0))
    total_expense = sum(
        (total for name, total in totals.items() if name != INCOME_CATEGORY),
        Decimal(0)
    )

    habits = _habits(totals, income, total_expense)
    return Insight(categories=categories, habits=habits)


def _habits(totals: Dict[str, Decimal], income: Decimal, total_expense: Decimal) -> List[str]:
    def share(name: str) -> Decimal:
        if not total_expense:
            return Decimal(0)
        return totals.get(name, Decimal(0)) / total_expense

    habits = [advice for name, limit, advice in SHARE_RULES if share(name) > limit]

    if any(UTILITIES_MARKER in name.lower() for name in totals):
        habits.append(UTILITIES_HABIT)
    if total_expense > 0 and income > 0 and total_expense / income > SAVINGS_RATIO_LIMIT:
        habits.append(SAVINGS_RATE_HABIT)

    if len(habits) < MIN_HABITS:
        habits.extend(FILLER_HABITS)
    return habits


def build_summary_tips(summary: AggregateSummary) -> List[str]:
    """Short tips shown under the aggregate summary."""
    tips = []

    rate = Decimal(100) * (summary.income - summary.expense) / summary.income if summary.income > 0 else Decimal(0)
    if rate < 10:
        tips.append(LOW_SAVINGS_TIP)

    top = summary.by_category[:3]
    if top:
        tips.append(
            f"Самая крупная категория: {top[0].category} ({format_tenge(top[0].total_expense)}). "
            f"Проверьте регулярные платежи и ищите акции."
        )
    if any(entry.category == ENTERTAINMENT_CATEGORY for entry in top):
        tips.append(SUBSCRIPTIONS_TIP)

    last3 = summary.by_month[-3:]
    if len(last3) == 3:
        average_previous = Decimal(last3[0].expense + last3[1].expense) / 2
        if average_previous and last3[2].expense > average_previous * SPIKE_FACTOR:
            tips.append(SPIKE_TIP)

    return tips


def insight_with_fallback(transactions: List[Transaction], remote=None) -> InsightResult:
    """
    Ask the remote producer for an insight, falling back to the local one.

    Args:
        transactions: Loaded transactions
        remote: Object with fetch_insight(transactions) -> Insight, or None
            when no remote service is configured

    Returns:
        InsightResult; source is "local" with a warning when the remote
        producer failed
    """
    if remote is None:
        reason = "remote insight service is not configured"
    else:
        try:
            value = remote.fetch_insight(transactions)
            logger.info(f"Remote insight received: {len(value.categories)} categories")
            return InsightResult(value=value, source="remote")
        except SpendFlowError as e:
            reason = str(e)
        except Exception as e:
            logger.exception("Unexpected remote insight failure")
            reason = str(e) or type(e).__name__

    logger.warning(f"Remote insight failed, using local analysis: {reason}")
    return InsightResult(
        value=build_local_insight(transactions),
        source="local",
        warning=FALLBACK_WARNING.format(reason=reason)
    )
