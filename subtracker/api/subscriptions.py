"""
Subscription API endpoints
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from subtracker.api.deps import get_storage
from subtracker.domain.subscription import MAX_PRICE, Subscription
from subtracker.storage.base import SubscriptionStorage
from subtracker.utils.months import format_year_month, parse_year_month
from subtracker.utils.validation import validate_service_name, validate_year_month


router = APIRouter(tags=["subscriptions"])


# === Request/Response models ===

class SubscriptionTermsRequest(BaseModel):
    price: int = Field(ge=0, le=MAX_PRICE)  # per month, minor units
    start_date: str  # YYYY-MM
    end_date: Optional[str] = None  # YYYY-MM, None = still active

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_month(cls, v: Optional[str]) -> Optional[str]:
        """Валидация месяца (YYYY-MM)"""
        if v is None:
            return v
        return validate_year_month(v)


class CreateSubscriptionRequest(SubscriptionTermsRequest):
    id: UUID
    service_name: str

    @field_validator("service_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_service_name(v)


class UpdateSubscriptionRequest(SubscriptionTermsRequest):
    # id / service_name из тела игнорируются: ключ берётся из пути
    model_config = ConfigDict(extra="ignore")


class SubscriptionResponse(BaseModel):
    id: UUID
    service_name: str
    price: int
    start_date: str
    end_date: Optional[str] = None

    @classmethod
    def from_entity(cls, sub: Subscription) -> "SubscriptionResponse":
        return cls(
            id=sub.user_id,
            service_name=sub.service_name,
            price=sub.price,
            start_date=format_year_month(sub.start_date),
            end_date=format_year_month(sub.end_date) if sub.end_date else None,
        )


class TotalCostResponse(BaseModel):
    total_cost: int


# === Helper function ===

def _optional_month(value: Optional[str]):
    return parse_year_month(value) if value is not None else None


# === Endpoints ===

@router.get("/subscription/total-cost", response_model=TotalCostResponse)
def get_subscription_total_cost(
    user_id: UUID = Query(alias="userID"),
    start_date: str = Query(),
    end_date: str = Query(),
    service_name: Optional[str] = Query(default=None),
    storage: SubscriptionStorage = Depends(get_storage),
):
    """Суммарная стоимость подписок пользователя за период [start_date, end_date]"""
    total = storage.subscription_total_cost(
        user_id=user_id,
        service_name=(service_name or "").strip() or None,  # пустое = все сервисы
        start_date=parse_year_month(start_date),
        end_date=parse_year_month(end_date),
    )
    return TotalCostResponse(total_cost=total.total_cost)


@router.get("/subscription/{user_id}/{service_name}", response_model=SubscriptionResponse)
def get_subscription(
    user_id: UUID,
    service_name: str,
    storage: SubscriptionStorage = Depends(get_storage),
):
    """Получить подписку"""
    sub = storage.get_subscription(user_id, validate_service_name(service_name))
    if sub is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return SubscriptionResponse.from_entity(sub)


@router.post("/subscription", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def create_subscription(
    req: CreateSubscriptionRequest,
    storage: SubscriptionStorage = Depends(get_storage),
):
    """Создать подписку"""
    sub = Subscription.create(
        user_id=req.id,
        service_name=req.service_name,
        price=req.price,
        start_date=parse_year_month(req.start_date),
        end_date=_optional_month(req.end_date),
    )
    created = storage.create_subscription(sub)
    return SubscriptionResponse.from_entity(created)


@router.put("/subscription/{user_id}/{service_name}", response_model=SubscriptionResponse)
def update_subscription(
    user_id: UUID,
    service_name: str,
    req: UpdateSubscriptionRequest,
    storage: SubscriptionStorage = Depends(get_storage),
):
    """Обновить цену и даты подписки"""
    sub = Subscription.create(
        user_id=user_id,
        service_name=service_name,
        price=req.price,
        start_date=parse_year_month(req.start_date),
        end_date=_optional_month(req.end_date),
    )
    updated = storage.update_subscription(sub)
    return SubscriptionResponse.from_entity(updated)


@router.delete("/subscription/{user_id}/{service_name}")
def delete_subscription(
    user_id: UUID,
    service_name: str,
    storage: SubscriptionStorage = Depends(get_storage),
):
    """Удалить подписку (повторное удаление — не ошибка)"""
    storage.delete_subscription(user_id, validate_service_name(service_name))
    return {"status": "deleted"}


@router.get("/subscriptions", response_model=list[SubscriptionResponse])
def list_subscriptions(
    user_id: UUID = Query(alias="userID"),
    page: int = Query(default=1),
    storage: SubscriptionStorage = Depends(get_storage),
):
    """Список подписок пользователя, по 10 на страницу, новые первыми"""
    subs = storage.list_subscriptions(user_id, page)
    return [SubscriptionResponse.from_entity(s) for s in subs]
