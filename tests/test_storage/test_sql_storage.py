"""
SqlSubscriptionStorage specifics: persisted rows, error wrapping, readiness ping
"""
from datetime import date

import pytest
from sqlalchemy import select

from subtracker.domain.errors import StorageError
from subtracker.domain.subscription import Subscription
from subtracker.infrastructure.db.models import SubscriptionModel
from subtracker.infrastructure.db.repository import SqlSubscriptionStorage
from subtracker.infrastructure.db.session import Base, Database


def _sub(user_id, **kwargs):
    fields = dict(service_name="VK Music", price=299, start_date=date(2025, 7, 1), end_date=date(2026, 7, 1))
    fields.update(kwargs)
    return Subscription.create(user_id=user_id, **fields)


def test_row_stored_as_first_of_month_dates(sql_storage, database, user_id):
    sql_storage.create_subscription(_sub(user_id, start_date=date(2025, 7, 19)))

    with database.session_factory() as session:
        row = session.execute(select(SubscriptionModel)).scalar_one()

    assert row.user_id == user_id
    assert row.service_name == "VK Music"
    assert row.start_date == date(2025, 7, 1)
    assert row.end_date == date(2026, 7, 1)
    assert row.created_at is not None


def test_open_ended_stored_as_null(sql_storage, database, user_id):
    sql_storage.create_subscription(_sub(user_id, end_date=None))

    with database.session_factory() as session:
        row = session.execute(select(SubscriptionModel)).scalar_one()

    assert row.end_date is None


def test_total_cost_filter_by_service_name(sql_storage, user_id):
    sql_storage.create_subscription(_sub(user_id))
    sql_storage.create_subscription(_sub(user_id, service_name="Kinopoisk", price=399))

    total = sql_storage.subscription_total_cost(user_id, "Kinopoisk", date(2025, 7, 1), date(2025, 9, 1))

    assert total.total_cost == 399 * 3


def test_total_cost_is_plain_int(sql_storage, user_id):
    sql_storage.create_subscription(_sub(user_id))

    total = sql_storage.subscription_total_cost(user_id, None, date(2025, 7, 1), date(2025, 7, 1))

    assert type(total.total_cost) is int
    assert total.total_cost == 299


def test_ping_ok(sql_storage):
    sql_storage.ping()


@pytest.fixture
def broken_storage(sql_storage, database):
    """Storage без таблицы — любой запрос падает в БД"""
    Base.metadata.drop_all(database.engine)
    return sql_storage


@pytest.mark.parametrize("call", [
    lambda s, u: s.get_subscription(u, "VK Music"),
    lambda s, u: s.create_subscription(_sub(u)),
    lambda s, u: s.update_subscription(_sub(u)),
    lambda s, u: s.delete_subscription(u, "VK Music"),
    lambda s, u: s.list_subscriptions(u, 1),
    lambda s, u: s.subscription_total_cost(u, None, date(2025, 1, 1), date(2025, 2, 1)),
])
def test_database_failure_wrapped_in_storage_error(broken_storage, user_id, call):
    with pytest.raises(StorageError) as exc_info:
        call(broken_storage, user_id)

    assert exc_info.value.__cause__ is not None


def test_ping_fails_when_database_unreachable():
    unreachable = Database("sqlite:////nonexistent-dir/subscriptions.db")
    storage = SqlSubscriptionStorage(unreachable.session_factory)

    with pytest.raises(StorageError):
        storage.ping()
