# Trends Handler
"""
Trend analytics over the activity log.

Each operation validates its parameters, fetches candidate items from the
store, re-applies the inclusive date-range filter and hands the result to
the analytics core.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from dashboard_service.analytics.aggregate import DEFAULT_ADOPTION_WINDOW_DAYS, adoption_windows, compare_periods
from dashboard_service.analytics.bucketing import bucket_records
from dashboard_service.analytics.correlation import correlate
from dashboard_service.analytics.csv_export import export_csv, export_filename
from dashboard_service.analytics.models import (
    AdoptionComparison,
    CorrelationResult,
    ExportType,
    Interval,
    Metric,
    TrendSeries,
)
from dashboard_service.analytics.normalizer import filter_activity_by_date_range, parse_calendar_date
from dashboard_service.analytics.trends import compute_trends
from dashboard_service.errors import InvalidParametersError, NotFoundError
from dashboard_service.handlers.validation import (
    optional_date_range,
    parse_choice,
    parse_non_negative_int,
    require_date_range,
)
from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)

# Keeps both adoption windows inside the representable date range
MAX_ADOPTION_WINDOW_DAYS = 3650


class TrendsHandler:
    """Productivity, adoption and correlation trends."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def _fetch_activity(
        self,
        user_id: Optional[str],
        start_date: str,
        end_date: str,
    ) -> List[Dict[str, Any]]:
        items = await asyncio.to_thread(self.store.scan_activity, user_id, start_date, end_date)
        filtered = filter_activity_by_date_range(items, start_date, end_date)
        logger.info(f"[TrendsHandler] {len(filtered)} of {len(items)} activity items in {start_date}..{end_date}")
        return filtered

    async def productivity(
        self,
        start_date: Optional[str],
        end_date: Optional[str],
        interval: str = Interval.DAY.value,
        user_id: Optional[str] = None,
    ) -> TrendSeries:
        """Productivity trends bucketed by day, week or month."""
        start, end = require_date_range(start_date, end_date)
        interval = parse_choice(interval, Interval, "interval")

        items = await self._fetch_activity(user_id, start.isoformat(), end.isoformat())
        return compute_trends(bucket_records(items, interval))

    async def adoption(
        self,
        user_id: Optional[str],
        days_before_after: Optional[str] = None,
    ) -> AdoptionComparison:
        """
        Compare a user's metrics before and after their first recorded activity.

        The before and after windows are fetched in parallel.
        """
        if not user_id:
            raise InvalidParametersError("User ID is required")
        days = parse_non_negative_int(
            days_before_after, "daysBeforeAfter", DEFAULT_ADOPTION_WINDOW_DAYS, max_value=MAX_ADOPTION_WINDOW_DAYS
        )

        date_items = await asyncio.to_thread(self.store.scan_activity_dates, user_id)
        dates = [parse_calendar_date(item.get("Date")) for item in date_items]
        dates = [d for d in dates if d is not None]
        if not dates:
            raise NotFoundError("No activity data found for this user")

        adoption_date = min(dates)
        (before_start, before_end), (after_start, after_end) = adoption_windows(adoption_date, days)

        before_items, after_items = await asyncio.gather(
            asyncio.to_thread(self.store.scan_activity, user_id, before_start.isoformat(), before_end.isoformat()),
            asyncio.to_thread(self.store.scan_activity, user_id, after_start.isoformat(), after_end.isoformat()),
        )

        logger.info(f"[TrendsHandler] Adoption for {user_id}: adopted {adoption_date}, "
                    f"{len(before_items)} before / {len(after_items)} after")
        return compare_periods(adoption_date, before_items, after_items, days)

    async def correlation(
        self,
        start_date: Optional[str],
        end_date: Optional[str],
        metric: str = Metric.AI_CODE_LINES.value,
    ) -> CorrelationResult:
        """Correlation of the target metric with the other metrics over daily buckets."""
        start, end = require_date_range(start_date, end_date)
        target = parse_choice(metric, Metric, "metric")

        items = await self._fetch_activity(None, start.isoformat(), end.isoformat())
        return correlate(items, target)

    async def export(
        self,
        export_type: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
        user_id: Optional[str] = None,
    ) -> Tuple[str, str]:
        """
        Render a trend report as CSV.

        Returns:
            (csv_text, filename)
        """
        if not export_type:
            raise InvalidParametersError("Type, start date, and end date are required")
        start, end = require_date_range(start_date, end_date, "Type, start date, and end date are required")
        export_type = parse_choice(export_type, ExportType, "type")
        if export_type == ExportType.ADOPTION and not user_id:
            raise InvalidParametersError("User ID is required for adoption export")

        start_iso, end_iso = start.isoformat(), end.isoformat()
        items = await self._fetch_activity(user_id, start_iso, end_iso)
        return export_csv(export_type, items, user_id), export_filename(export_type, start_iso, end_iso)

    async def activity(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Raw activity items; the date filter applies only when both dates are given."""
        date_range = optional_date_range(start_date, end_date)
        if date_range is None:
            return await asyncio.to_thread(self.store.scan_activity, user_id)
        start, end = date_range
        return await self._fetch_activity(user_id, start.isoformat(), end.isoformat())
