"""Command-line entry point."""
import sys
import argparse
from pathlib import Path
from typing import Optional

from spendflow.config.manager import LOG_LEVELS, Config, ConfigManager
from spendflow.config.settings import AppSettings, get_settings
from spendflow.llm.remote_insights import RemoteInsightClient
from spendflow.orchestrator.session import SpendSession
from spendflow.orchestrator.views import SORT_KEYS, ASC, DESC, SortState, expense_pie, filter_and_sort, summary_stats
from spendflow.analysis.models import AggregateSummary, InsightResult
from spendflow.utils.exceptions import ConfigError
from spendflow.utils.formatting import format_tenge
from spendflow.utils.logger import configure_logging, get_logger

logger = get_logger()


def _load_config() -> Optional[Config]:
    """Load user configuration; a broken file is reported and ignored."""
    try:
        return ConfigManager().load_config()
    except ConfigError as e:
        logger.error(f"Ignoring user configuration: {e}")
        return None


def _build_remote(config: Optional[Config], settings: AppSettings) -> Optional[RemoteInsightClient]:
    """Remote client, or None when the configuration does not allow one."""
    if config is None:
        logger.warning("No user configuration found, remote insight disabled")
        return None

    is_valid, message = ConfigManager().validate_config(config)
    if not is_valid:
        logger.warning(f"Remote insight disabled: {message}")
        return None

    return RemoteInsightClient.from_settings(config.gemini_api_key, settings, model_name=config.model_name)


def _print_summary(summary: AggregateSummary) -> None:
    print(f"\nДоходы:  {format_tenge(summary.income)}")
    print(f"Расходы: {format_tenge(summary.expense)}")
    print(f"Итого:   {format_tenge(summary.net)}")

    if summary.by_month:
        print("\nПо месяцам:")
        print(f"{'Месяц':<10} {'Доходы':>16} {'Расходы':>16}")
        for month in summary.by_month:
            print(f"{month.year_month:<10} {format_tenge(month.income):>16} {format_tenge(month.expense):>16}")

    if summary.by_category:
        print("\nПо категориям:")
        for entry in summary.by_category:
            print(f"  {entry.category:<20} {format_tenge(entry.total_expense):>16}")


def _print_transactions(session: SpendSession, query: str, sort: SortState) -> None:
    rows = filter_and_sort(session.transactions, query, sort)
    stats = summary_stats(rows)
    print(f"\nОпераций: {stats.count}  доходы {format_tenge(stats.income)}  "
          f"расходы {format_tenge(stats.expenses)}  баланс {format_tenge(stats.balance)}")
    for txn in rows:
        print(f"{txn.date.isoformat():<12} {txn.description[:50]:<50} {format_tenge(txn.amount):>16}")


def _print_pie(session: SpendSession) -> None:
    pie = expense_pie(session.transactions)
    if not pie.slices:
        return
    print("\nСтруктура расходов:")
    for piece in pie.slices:
        print(f"  {piece.label:<20} {format_tenge(piece.value):>16} {piece.pct:5.1f}%")


def _print_insight(result: InsightResult) -> None:
    label = "AI" if result.source == "remote" else "локальный анализ"
    print(f"\nИнсайты ({label}):")
    if result.warning:
        print(f"  ! {result.warning}")
    for category in result.value.categories:
        examples = f" ({'; '.join(category.examples)})" if category.examples else ""
        print(f"  {category.name:<20} {format_tenge(category.total):>16} {category.kind}{examples}")
    if result.value.habits:
        print("\nПривычки:")
        for habit in result.value.habits:
            print(f"  - {habit}")


def analyze_command(args: argparse.Namespace, settings: AppSettings, config: Optional[Config]) -> int:
    """Load one statement and print the full report."""
    path = Path(args.file)
    if not path.exists():
        print(f"Файл не найден: {path}")
        return 1

    session = SpendSession(settings)
    session.load_file(path)
    print(session.hint)
    if not session.transactions:
        return 1

    _print_transactions(session, args.query, SortState(args.sort, ASC if args.asc else DESC))
    _print_summary(session.summary())
    _print_pie(session)

    tips = session.summary_tips()
    if tips:
        print("\nСоветы:")
        for tip in tips:
            print(f"  - {tip}")

    if args.remote:
        result = session.run_remote(_build_remote(config, settings))
    else:
        result = session.run_local()
    if result is not None:
        _print_insight(result)
    return 0


def main(argv=None):
    """Main entry point for SpendFlow."""
    parser = argparse.ArgumentParser(description="SpendFlow bank statement analyzer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a CSV or PDF statement")
    analyze.add_argument("file", help="Path to a CSV or text-based PDF statement")
    analyze.add_argument("--remote", action="store_true", help="Ask Gemini for insights (falls back to local analysis)")
    analyze.add_argument("--query", default="", help="Only list transactions whose description contains this text")
    analyze.add_argument("--sort", choices=SORT_KEYS, default="date", help="Transaction table sort key (default: date)")
    analyze.add_argument("--asc", action="store_true", help="Sort ascending (default: descending)")

    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    config = _load_config()
    log_level = config.log_level if config and config.log_level.upper() in LOG_LEVELS else settings.log_level
    configure_logging(
        log_level,
        max_file_size_mb=settings.log_max_file_size_mb,
        backup_count=settings.log_backup_count
    )

    try:
        exit_code = analyze_command(args, settings, config)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
