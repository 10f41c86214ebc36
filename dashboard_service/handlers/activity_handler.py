# Activity Handler
"""
User list, raw activity log and the period summary.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from dashboard_service.analytics.normalizer import filter_activity_by_date_range
from dashboard_service.analytics.summary import Granularity, previous_period_range, summarize_activity
from dashboard_service.handlers.validation import optional_date_range, parse_choice
from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)


class ActivityHandler:
    """Activity log queries."""

    def __init__(self, store: RecordStore):
        self.store = store

    # ==================== Users ====================

    async def users(self) -> List[str]:
        user_ids = await asyncio.to_thread(self.store.list_user_ids)
        logger.info(f"[ActivityHandler] Found {len(user_ids)} users")
        return user_ids

    # ==================== Activity ====================

    async def activity(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Activity items for a user, filtered by date when both bounds are given."""
        date_range = optional_date_range(start_date, end_date)
        items = await asyncio.to_thread(self.store.scan_activity, user_id)
        if date_range is None:
            return items
        return filter_activity_by_date_range(items, *date_range)

    async def summary(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        granularity: str = Granularity.DAILY.value,
    ) -> Dict[str, Any]:
        """
        Summarize activity and compare it with the preceding period.

        Without a date range the whole log is summarized and the previous
        period is empty.
        """
        granularity = parse_choice(granularity, Granularity, "granularity")
        date_range = optional_date_range(start_date, end_date)

        items = await asyncio.to_thread(self.store.scan_activity, user_id)
        if date_range is None:
            return summarize_activity(items, (), granularity)

        start, end = date_range
        previous_start, previous_end = previous_period_range(start, end)
        current = filter_activity_by_date_range(items, start, end)
        previous = filter_activity_by_date_range(items, previous_start, previous_end)

        logger.info(f"[ActivityHandler] Summary {start}..{end}: {len(current)} current, "
                    f"{len(previous)} previous ({previous_start}..{previous_end})")
        return summarize_activity(current, previous, granularity, start, previous_start)
