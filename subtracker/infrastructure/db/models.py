"""
SQLAlchemy ORM models
"""
import uuid
from datetime import date as date_type

from sqlalchemy import String, Integer, Date, TIMESTAMP, DateTime, Uuid, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from subtracker.infrastructure.db.session import Base


class SubscriptionModel(Base):
    """
    Subscription row: one user's subscription to one service

    Первичный ключ (user_id, service_name) — не больше одной записи
    на пару пользователь + сервис.
    """
    __tablename__ = "subscriptions"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    service_name: Mapped[str] = mapped_column(String(255), primary_key=True)

    price: Mapped[int] = mapped_column(Integer, nullable=False)  # per month, minor units
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)  # 1st of month
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)  # NULL = still active

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_subscriptions_user_start", "user_id", "start_date"),
    )
