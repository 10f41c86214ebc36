# Subscriptions Handler
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping

from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)

NO_ACTIVITY = "No Activity"


def subscription_metrics(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Counts by status and type, plus subscriptions grouped by last activity date."""
    items = list(items)
    by_date: Dict[str, int] = {}
    for item in items:
        key = item.get("LastActivityDate") or NO_ACTIVITY
        by_date[key] = by_date.get(key, 0) + 1

    return {
        "totalSubscriptions": len(items),
        "activeSubscriptions": sum(1 for item in items if item.get("SubscriptionStatus") == "Active"),
        "pendingSubscriptions": sum(1 for item in items if item.get("SubscriptionStatus") == "Pending"),
        "individualSubscriptions": sum(1 for item in items if item.get("SubscriptionType") == "Individual"),
        "groupSubscriptions": sum(1 for item in items if item.get("SubscriptionType") == "Group"),
        "subscriptionsByDate": by_date,
    }


class SubscriptionsHandler:
    """Subscription table queries."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def subscriptions(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.store.scan_subscriptions)

    async def metrics(self) -> Dict[str, Any]:
        items = await asyncio.to_thread(self.store.scan_subscriptions)
        logger.info(f"[SubscriptionsHandler] Computing metrics over {len(items)} subscriptions")
        return subscription_metrics(items)
