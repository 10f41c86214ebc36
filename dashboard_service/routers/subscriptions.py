# Dashboard Service - Subscriptions Router
from fastapi import APIRouter, Depends

from dashboard_service.dependencies import get_store, guarded
from dashboard_service.handlers import SubscriptionsHandler
from dashboard_service.store.base import RecordStore

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("/metrics")
async def subscription_metrics(store: RecordStore = Depends(get_store)):
    """Subscription counts by status, type and last activity date."""
    handler = SubscriptionsHandler(store)
    return await guarded(handler.metrics(), "Failed to fetch subscription metrics")


@router.get("")
async def list_subscriptions(store: RecordStore = Depends(get_store)):
    handler = SubscriptionsHandler(store)
    return await guarded(handler.subscriptions(), "Failed to fetch subscriptions")
