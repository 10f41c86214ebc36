# Prompts Handler
"""
Prompt log listing and prompt analytics.

Every statistics operation shares the same fetch: scan the prompt log
(optionally for one user), then keep items inside the requested timestamp
window when both dates are given.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from dashboard_service.analytics import prompt_stats
from dashboard_service.analytics.normalizer import filter_prompts_by_date_range
from dashboard_service.errors import InvalidParametersError
from dashboard_service.handlers.validation import optional_date_range, parse_non_negative_int
from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

StatsFn = Callable[[Iterable[Mapping[str, Any]]], Dict[str, Any]]


class PromptsHandler:
    """Prompt log queries."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def _fetch_prompts(
        self,
        user_id: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
        search_term: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        date_range = optional_date_range(start_date, end_date)
        items = await asyncio.to_thread(self.store.scan_prompts, user_id, search_term)
        if date_range is None:
            return items

        filtered = filter_prompts_by_date_range(items, *date_range)
        logger.info(f"[PromptsHandler] {len(filtered)} of {len(items)} prompts between {start_date} and {end_date}")
        return filtered

    # ==================== Listing ====================

    async def list_prompts(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        search_term: Optional[str] = None,
        limit: Optional[str] = None,
        page: Optional[str] = None,
        include_empty: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Newest-first page of prompt log items."""
        limit_value = parse_non_negative_int(limit, "limit", DEFAULT_PAGE_SIZE)
        page_value = parse_non_negative_int(page, "page", 1)
        if limit_value < 1 or page_value < 1:
            raise InvalidParametersError("Invalid pagination. limit and page must be positive integers")

        items = await self._fetch_prompts(user_id, start_date, end_date, search_term)
        return prompt_stats.paginate_prompts(
            items,
            page=page_value,
            limit=limit_value,
            include_empty=(include_empty or "").lower() == "true",
        )

    # ==================== Statistics ====================

    async def _stats(
        self,
        stats_fn: StatsFn,
        user_id: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> Dict[str, Any]:
        items = await self._fetch_prompts(user_id, start_date, end_date)
        return stats_fn(items)

    async def analysis(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.analyze_prompts, user_id, start_date, end_date)

    async def categories(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.category_breakdown, user_id, start_date, end_date)

    async def category_distribution(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.category_distribution, user_id, start_date, end_date)

    async def type_distribution(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.type_distribution, user_id, start_date, end_date)

    async def length_distribution(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.length_distribution, user_id, start_date, end_date)

    async def patterns(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.prompt_patterns, user_id, start_date, end_date)

    async def response_quality(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.response_quality, user_id, start_date, end_date)

    async def time_analysis(self, user_id=None, start_date=None, end_date=None) -> Dict[str, Any]:
        return await self._stats(prompt_stats.time_analysis, user_id, start_date, end_date)
