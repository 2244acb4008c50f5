"""
Subscription repository - SQL implementation of SubscriptionStorage

Каждая операция открывает свою session (одно соединение из пула) и
закрывает её по завершении или при ошибке.
"""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterator, List, Optional
from uuid import UUID

from sqlalchemy import case, delete, extract, func, or_, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from subtracker.domain.errors import DuplicateSubscriptionError, NotFoundError, StorageError
from subtracker.domain.subscription import (
    PAGE_SIZE,
    Subscription,
    TotalSubscriptionCost,
    validate_window,
)
from subtracker.infrastructure.db.models import SubscriptionModel
from subtracker.storage.base import SubscriptionStorage
from subtracker.utils.months import month_index
from subtracker.utils.validation import validate_page

logger = logging.getLogger(__name__)


def _month_index_expr(column):
    """SQL: year * 12 + month (portable, EXTRACT on PostgreSQL / STRFTIME on SQLite)"""
    return extract("year", column) * 12 + extract("month", column)


class SqlSubscriptionStorage(SubscriptionStorage):
    """
    SQLAlchemy implementation of subscription storage.

    Handles Subscription persistence in PostgreSQL (SQLite in tests).
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Args:
            session_factory: sessionmaker bound to the application engine
        """
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """Session for one operation: commit on success, wrap SQLAlchemy errors."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(f"error in {operation}: {exc}") from exc
        finally:
            session.close()

    @staticmethod
    def _to_entity(model: SubscriptionModel) -> Subscription:
        return Subscription(
            user_id=model.user_id,
            service_name=model.service_name,
            price=model.price,
            start_date=model.start_date,
            end_date=model.end_date,
        )

    def get_subscription(self, user_id: UUID, service_name: str) -> Optional[Subscription]:
        logger.debug("get_subscription user_id=%s service_name=%s", user_id, service_name)
        stmt = select(SubscriptionModel).where(
            SubscriptionModel.user_id == user_id,
            SubscriptionModel.service_name == service_name,
        )
        with self._session("get_subscription") as session:
            model = session.execute(stmt).scalar_one_or_none()
            return self._to_entity(model) if model else None

    def create_subscription(self, subscription: Subscription) -> Subscription:
        with self._session("create_subscription") as session:
            session.add(
                SubscriptionModel(
                    user_id=subscription.user_id,
                    service_name=subscription.service_name,
                    price=subscription.price,
                    start_date=subscription.start_date,
                    end_date=subscription.end_date,
                )
            )
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicateSubscriptionError(
                    f"Subscription {subscription.service_name!r} already exists "
                    f"for user {subscription.user_id}"
                ) from exc

        logger.info("Created subscription %s/%s", subscription.user_id, subscription.service_name)
        return subscription

    def update_subscription(self, subscription: Subscription) -> Subscription:
        stmt = (
            update(SubscriptionModel)
            .where(
                SubscriptionModel.user_id == subscription.user_id,
                SubscriptionModel.service_name == subscription.service_name,
            )
            .values(
                price=subscription.price,
                start_date=subscription.start_date,
                end_date=subscription.end_date,
            )
        )
        with self._session("update_subscription") as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError(
                    f"Subscription {subscription.service_name!r} not found "
                    f"for user {subscription.user_id}"
                )

        logger.info("Updated subscription %s/%s", subscription.user_id, subscription.service_name)
        return subscription

    def delete_subscription(self, user_id: UUID, service_name: str) -> None:
        stmt = delete(SubscriptionModel).where(
            SubscriptionModel.user_id == user_id,
            SubscriptionModel.service_name == service_name,
        )
        with self._session("delete_subscription") as session:
            deleted = session.execute(stmt).rowcount

        logger.info("Deleted subscription %s/%s (rows=%d)", user_id, service_name, deleted)

    def list_subscriptions(self, user_id: UUID, page: int) -> List[Subscription]:
        validate_page(page)
        stmt = (
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id)
            .order_by(SubscriptionModel.start_date.desc(), SubscriptionModel.service_name.asc())
            .limit(PAGE_SIZE)
            .offset((page - 1) * PAGE_SIZE)
        )
        with self._session("list_subscriptions") as session:
            return [self._to_entity(model) for model in session.execute(stmt).scalars()]

    def subscription_total_cost(
        self,
        user_id: UUID,
        service_name: Optional[str],
        start_date: date,
        end_date: date,
    ) -> TotalSubscriptionCost:
        """
        Одним запросом: SUM(price * месяцев пересечения с окном)

        Пересечение: [max(start_date, q_start), min(coalesce(end_date, q_end), q_end)],
        обе границы включительно, считаем в номерах месяцев (year * 12 + month).
        """
        query_start, query_end = validate_window(start_date, end_date)
        q_start = month_index(query_start)
        q_end = month_index(query_end)

        start_idx = _month_index_expr(SubscriptionModel.start_date)
        end_idx = _month_index_expr(SubscriptionModel.end_date)

        effective_start = case((start_idx > q_start, start_idx), else_=q_start)
        effective_end = case(
            (SubscriptionModel.end_date.is_(None), q_end),
            (end_idx < q_end, end_idx),
            else_=q_end,
        )
        months = effective_end - effective_start + 1

        stmt = select(func.coalesce(func.sum(SubscriptionModel.price * months), 0)).where(
            SubscriptionModel.user_id == user_id,
            SubscriptionModel.start_date <= query_end,
            or_(SubscriptionModel.end_date.is_(None), SubscriptionModel.end_date >= query_start),
        )
        if service_name is not None:
            stmt = stmt.where(SubscriptionModel.service_name == service_name)

        with self._session("subscription_total_cost") as session:
            total = session.execute(stmt).scalar_one()

        return TotalSubscriptionCost(total_cost=int(total))

    def ping(self) -> None:
        with self._session("ping") as session:
            session.execute(text("SELECT 1"))
