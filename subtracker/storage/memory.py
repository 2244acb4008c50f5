"""
In-memory subscription storage (tests, local runs without PostgreSQL)
"""
import logging
import threading
from datetime import date
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from subtracker.domain.errors import DuplicateSubscriptionError, NotFoundError
from subtracker.domain.subscription import (
    PAGE_SIZE,
    Subscription,
    TotalSubscriptionCost,
    validate_window,
)
from subtracker.storage.base import SubscriptionStorage
from subtracker.utils.validation import validate_page

logger = logging.getLogger(__name__)


class InMemorySubscriptionStorage(SubscriptionStorage):
    """
    Dict-backed implementation of SubscriptionStorage

    Ключ словаря — (user_id, service_name), как первичный ключ таблицы.
    """

    def __init__(self):
        self._rows: Dict[Tuple[UUID, str], Subscription] = {}
        self._lock = threading.Lock()

    def get_subscription(self, user_id: UUID, service_name: str) -> Optional[Subscription]:
        with self._lock:
            return self._rows.get((user_id, service_name))

    def create_subscription(self, subscription: Subscription) -> Subscription:
        with self._lock:
            if subscription.key in self._rows:
                raise DuplicateSubscriptionError(
                    f"Subscription {subscription.service_name!r} already exists "
                    f"for user {subscription.user_id}"
                )
            self._rows[subscription.key] = subscription
        logger.info("Created subscription %s/%s", subscription.user_id, subscription.service_name)
        return subscription

    def update_subscription(self, subscription: Subscription) -> Subscription:
        with self._lock:
            if subscription.key not in self._rows:
                raise NotFoundError(
                    f"Subscription {subscription.service_name!r} not found "
                    f"for user {subscription.user_id}"
                )
            self._rows[subscription.key] = subscription
        logger.info("Updated subscription %s/%s", subscription.user_id, subscription.service_name)
        return subscription

    def delete_subscription(self, user_id: UUID, service_name: str) -> None:
        with self._lock:
            removed = self._rows.pop((user_id, service_name), None)
        logger.info("Deleted subscription %s/%s (existed=%s)", user_id, service_name, removed is not None)

    def list_subscriptions(self, user_id: UUID, page: int) -> List[Subscription]:
        validate_page(page)
        with self._lock:
            rows = [sub for sub in self._rows.values() if sub.user_id == user_id]

        # start_date DESC, service_name ASC (как ORDER BY в SQL-реализации)
        rows.sort(key=lambda s: s.service_name)
        rows.sort(key=lambda s: s.start_date, reverse=True)

        offset = (page - 1) * PAGE_SIZE
        return rows[offset:offset + PAGE_SIZE]

    def subscription_total_cost(
        self,
        user_id: UUID,
        service_name: Optional[str],
        start_date: date,
        end_date: date,
    ) -> TotalSubscriptionCost:
        start_date, end_date = validate_window(start_date, end_date)
        with self._lock:
            rows = [
                sub for sub in self._rows.values()
                if sub.user_id == user_id
                and (service_name is None or sub.service_name == service_name)
            ]
        return TotalSubscriptionCost.compute(rows, start_date, end_date)
