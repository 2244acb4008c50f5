"""
Month-granularity date helpers.

Usage:
    from subtracker.utils.months import parse_year_month, format_year_month

    parse_year_month("2025-07")          -> date(2025, 7, 1)
    format_year_month(date(2025, 7, 1))  -> "2025-07"
    months_inclusive(date(2024, 1, 1), date(2024, 12, 1)) -> 12
"""
import re
from datetime import date

from subtracker.domain.errors import ValidationError

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_year_month(value: str) -> date:
    """
    Разобрать строку "YYYY-MM" в дату (первое число месяца)

    Raises:
        ValidationError: если строка не в формате YYYY-MM
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid month {value!r}: expected YYYY-MM")

    match = _YEAR_MONTH_RE.match(value.strip())
    if not match:
        raise ValidationError(f"Invalid month {value!r}: expected YYYY-MM")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"Invalid month {value!r}: expected YYYY-MM")

    return date(year, month, 1)


def format_year_month(value: date) -> str:
    """date -> "YYYY-MM" (день отбрасывается)"""
    return f"{value.year:04d}-{value.month:02d}"


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def month_index(value: date) -> int:
    """Порядковый номер месяца: year * 12 + month."""
    return value.year * 12 + value.month


def months_inclusive(start: date, end: date) -> int:
    """
    Number of whole months in [start, end], both bounds inclusive.

    Returns 0 when end is before start.
    """
    return max(month_index(end) - month_index(start) + 1, 0)
