"""
Validation utilities
"""
from uuid import UUID

from subtracker.domain.errors import ValidationError
from subtracker.domain.subscription import PAGE_SIZE
from subtracker.utils.months import parse_year_month, format_year_month


def validate_year_month(value: str) -> str:
    """
    Валидировать и нормализовать месяц "YYYY-MM" (raise exception при ошибке)

    Args:
        value: Строка с месяцем

    Returns:
        Нормализованная строка (без пробелов по краям)

    Raises:
        ValidationError: если формат не YYYY-MM

    Example:
        >>> validate_year_month(" 2025-07 ")
        "2025-07"
        >>> validate_year_month("2025-7")
        ValidationError: Invalid month '2025-7': expected YYYY-MM
    """
    return format_year_month(parse_year_month(value))


def parse_user_id(value: str) -> UUID:
    """
    Разобрать UUID пользователя

    Raises:
        ValidationError: если строка не является UUID
    """
    try:
        return UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(f"Invalid user id {value!r}: expected UUID")


def validate_service_name(value: str) -> str:
    """Strip surrounding whitespace; empty names are rejected."""
    name = (value or "").strip()
    if not name:
        raise ValidationError("service_name must not be empty")
    return name


# OFFSET (page - 1) * PAGE_SIZE must fit a signed 64-bit integer
MAX_PAGE = (2**63 - 1) // PAGE_SIZE


def validate_page(page: int) -> int:
    if page < 1:
        raise ValidationError(f"Invalid page {page}: pages start at 1")
    if page > MAX_PAGE:
        raise ValidationError(f"Invalid page {page}: must not exceed {MAX_PAGE}")
    return page
