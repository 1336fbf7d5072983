"""Date and money normalizers for statement fields."""
import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from dateutil import parser as dtparse

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DAY_FIRST_DATE = re.compile(r"^(\d{2})[./](\d{2})[./](\d{4})")
_FOUR_DIGIT_YEAR = re.compile(r"\d{4}")
_YEAR_FIRST = re.compile(r"^\d{4}\D")
_DATE_TOKENS = re.compile(r"[0-9A-Za-zА-Яа-яЁё]+")

_CURRENCY_MARKERS = re.compile(r"₸|тенге|тг|tg|kzt")
_MILLION = re.compile(r"млн|мил|million|mln")
_THOUSAND = re.compile(r"тыс|thousand")
_NOT_NUMERIC = re.compile(r"[^0-9.,+\-–—]")
_RANGE = re.compile(r"^([\d.,]+)[-–—]([\d.,]+)$")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

MILLION = Decimal(1_000_000)
THOUSAND = Decimal(1_000)
WHOLE = Decimal(1)
# Larger magnitudes are treated as garbage, not money
MAX_AMOUNT_DIGITS = 18


def _build_date(year: str, month: str, day: str) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Parse a statement date.

    Tries ISO (YYYY-MM-DD...), then day-first DD.MM.YYYY or DD/MM/YYYY,
    then a generic parse for strings that carry a four-digit year.

    Args:
        text: Raw date cell

    Returns:
        Calendar date, or None when unparseable
    """
    if not text:
        return None
    value = text.strip()

    match = _ISO_DATE.match(value)
    if match:
        return _build_date(match.group(1), match.group(2), match.group(3))

    match = _DAY_FIRST_DATE.match(value)
    if match:
        return _build_date(match.group(3), match.group(2), match.group(1))

    # Bare numbers would otherwise be completed from today's date
    if not _FOUR_DIGIT_YEAR.search(value) or len(_DATE_TOKENS.findall(value)) < 3:
        return None

    try:
        if _YEAR_FIRST.match(value):
            return dtparse.parse(value, yearfirst=True, dayfirst=False).date()
        return dtparse.parse(value, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None


def _normalize_separators(number: str) -> str:
    """Turn decimal commas into points and drop thousands commas."""
    if "," in number and "." in number:
        return number.replace(",", "")
    if number.count(",") > 1:
        return number.replace(",", "")
    return number.replace(",", ".")


def _to_decimal(number: str) -> Optional[Decimal]:
    match = _NUMBER.search(number)
    if not match:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def parse_money(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a money string into a signed amount.

    Handles thousands separators, currency markers, decimal commas,
    magnitude words ("тыс", "млн") and ranges ("600-700 тысяч" is the mean).
    Scaled values are rounded to whole tenge.

    Args:
        text: Raw amount cell or phrase

    Returns:
        Decimal amount, or None when no number is found or it has
        more than MAX_AMOUNT_DIGITS integer digits
    """
    if text is None:
        return None

    value = re.sub(r"\s", "", str(text).lower()).replace("−", "-")
    value = _CURRENCY_MARKERS.sub("", value)

    if _MILLION.search(value):
        multiplier = MILLION
    elif _THOUSAND.search(value):
        multiplier = THOUSAND
    else:
        multiplier = None

    number = _NOT_NUMERIC.sub("", value)
    if not number:
        return None

    range_match = _RANGE.match(number)
    if range_match:
        low = _to_decimal(_normalize_separators(range_match.group(1)))
        high = _to_decimal(_normalize_separators(range_match.group(2)))
        if low is None or high is None:
            return None
        amount = (low + high) / 2
    else:
        amount = _to_decimal(_normalize_separators(number))
        if amount is None:
            return None

    if multiplier is not None:
        amount *= multiplier
    if not amount.is_finite() or amount.adjusted() >= MAX_AMOUNT_DIGITS:
        return None
    if multiplier is not None or range_match:
        amount = amount.quantize(WHOLE, rounding=ROUND_HALF_UP)

    return amount
