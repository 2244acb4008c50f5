"""
Subscription storage interface.

The API layer depends only on this contract, so the SQL implementation
can be swapped for the in-memory one in tests and local runs.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from subtracker.domain.subscription import Subscription, TotalSubscriptionCost


class SubscriptionStorage(ABC):
    """Interface for subscription persistence operations."""

    @abstractmethod
    def get_subscription(self, user_id: UUID, service_name: str) -> Optional[Subscription]:
        """
        Get subscription by its natural key.

        Args:
            user_id: Subscriber UUID
            service_name: Service name

        Returns:
            Subscription if found, None otherwise

        Raises:
            StorageError: on store failure
        """

    @abstractmethod
    def create_subscription(self, subscription: Subscription) -> Subscription:
        """
        Persist a new subscription.

        Returns:
            The same subscription

        Raises:
            DuplicateSubscriptionError: key already exists
            StorageError: on store failure
        """

    @abstractmethod
    def update_subscription(self, subscription: Subscription) -> Subscription:
        """
        Replace price / start_date / end_date of the row with the same key.

        Returns:
            The updated subscription

        Raises:
            NotFoundError: no row with this key
            StorageError: on store failure
        """

    @abstractmethod
    def delete_subscription(self, user_id: UUID, service_name: str) -> None:
        """
        Delete subscription. Deleting a missing key is not an error.

        Raises:
            StorageError: on store failure
        """

    @abstractmethod
    def list_subscriptions(self, user_id: UUID, page: int) -> List[Subscription]:
        """
        List a page of the user's subscriptions.

        Args:
            user_id: Subscriber UUID
            page: 1-based page number, PAGE_SIZE records per page

        Returns:
            Subscriptions ordered by start_date descending

        Raises:
            ValidationError: page < 1
            StorageError: on store failure
        """

    @abstractmethod
    def subscription_total_cost(
        self,
        user_id: UUID,
        service_name: Optional[str],
        start_date: date,
        end_date: date,
    ) -> TotalSubscriptionCost:
        """
        Aggregate monthly cost over [start_date, end_date].

        Args:
            user_id: Subscriber UUID
            service_name: Restrict to one service, or None for all
            start_date: First month of the window (inclusive)
            end_date: Last month of the window (inclusive)

        Returns:
            TotalSubscriptionCost (0 when nothing qualifies)

        Raises:
            ValidationError: start_date after end_date
            StorageError: on store failure
        """

    def ping(self) -> None:
        """Readiness check; raises StorageError when the store is unreachable."""
