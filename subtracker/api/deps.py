"""
FastAPI dependencies (storage handle)
"""
from fastapi import Request

from subtracker.storage.base import SubscriptionStorage


def get_storage(request: Request) -> SubscriptionStorage:
    """
    Storage, переданный в create_app() при старте приложения

    Usage:
        @router.get("/subscriptions")
        def list_subscriptions(storage: SubscriptionStorage = Depends(get_storage)):
            ...
    """
    return request.app.state.storage
