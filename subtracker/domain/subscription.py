"""
Subscription domain entity and total-cost arithmetic
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from subtracker.domain.errors import ValidationError
from subtracker.utils.months import first_of_month, months_inclusive

PAGE_SIZE = 10
# price column is a 32-bit INTEGER
MAX_PRICE = 2**31 - 1


@dataclass(frozen=True)
class Subscription:
    """
    Subscription domain entity (value type)

    Одна запись = подписка одного пользователя на один сервис.
    Натуральный ключ: (user_id, service_name).

    Даты хранятся с точностью до месяца (всегда 1-е число).
    end_date = None означает, что подписка всё ещё активна.
    """
    user_id: UUID
    service_name: str
    price: int  # за месяц, в минимальных единицах валюты
    start_date: date
    end_date: Optional[date] = None

    def __post_init__(self):
        # frozen dataclass: нормализуем через object.__setattr__
        object.__setattr__(self, "start_date", first_of_month(self.start_date))
        if self.end_date is not None:
            object.__setattr__(self, "end_date", first_of_month(self.end_date))

    @classmethod
    def create(
        cls,
        user_id: UUID,
        service_name: str,
        price: int,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> "Subscription":
        """
        Создать подписку с валидацией полей

        Raises:
            ValidationError: пустое имя сервиса, цена вне [0, MAX_PRICE],
                start_date позже end_date
        """
        name = (service_name or "").strip()
        if not name:
            raise ValidationError("service_name must not be empty")
        if isinstance(price, bool) or not isinstance(price, int):
            raise ValidationError("price must be an integer")
        if price < 0:
            raise ValidationError("price must not be negative")
        if price > MAX_PRICE:
            raise ValidationError(f"price must not exceed {MAX_PRICE}")

        sub = cls(
            user_id=user_id,
            service_name=name,
            price=price,
            start_date=start_date,
            end_date=end_date,
        )
        if sub.end_date is not None and sub.start_date > sub.end_date:
            raise ValidationError("start_date must not be after end_date")
        return sub

    @property
    def key(self) -> tuple[UUID, str]:
        return self.user_id, self.service_name

    def with_terms(
        self,
        price: int,
        start_date: date,
        end_date: Optional[date],
    ) -> "Subscription":
        """Новые цена/даты, ключ (user_id, service_name) не меняется."""
        return Subscription.create(
            user_id=self.user_id,
            service_name=self.service_name,
            price=price,
            start_date=start_date,
            end_date=end_date,
        )

    def overlaps(self, query_start: date, query_end: date) -> bool:
        """Active in at least one month of [query_start, query_end]."""
        if self.start_date > first_of_month(query_end):
            return False
        return self.end_date is None or self.end_date >= first_of_month(query_start)

    def billable_months(self, query_start: date, query_end: date) -> int:
        """
        Количество оплачиваемых месяцев внутри окна запроса

        Активный интервал подписки [start_date, end_date or query_end]
        обрезается окном [query_start, query_end]; обе границы включительно.
        """
        query_start = first_of_month(query_start)
        query_end = first_of_month(query_end)
        effective_start = max(self.start_date, query_start)
        effective_end = min(self.end_date or query_end, query_end)
        return months_inclusive(effective_start, effective_end)

    def cost_within(self, query_start: date, query_end: date) -> int:
        return self.price * self.billable_months(query_start, query_end)


@dataclass(frozen=True)
class TotalSubscriptionCost:
    total_cost: int = 0

    @classmethod
    def compute(
        cls,
        subscriptions: Iterable[Subscription],
        query_start: date,
        query_end: date,
    ) -> "TotalSubscriptionCost":
        """Sum price * billable months over the subscriptions overlapping the window."""
        total = sum(
            sub.cost_within(query_start, query_end)
            for sub in subscriptions
            if sub.overlaps(query_start, query_end)
        )
        return cls(total_cost=total)


def validate_window(query_start: date, query_end: date) -> tuple[date, date]:
    """Нормализовать окно запроса и проверить порядок границ."""
    query_start = first_of_month(query_start)
    query_end = first_of_month(query_end)
    if query_start > query_end:
        raise ValidationError("start_date must not be after end_date")
    return query_start, query_end
