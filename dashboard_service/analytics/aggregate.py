"""
Aggregate and Adoption Comparison Calculator

Reduces activity records to summary totals and compares two such summaries,
e.g. a user's usage in the window before and after they adopted the
assistant.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from dashboard_service.analytics.models import (
    ActivityRecord,
    AdoptionComparison,
    AggregateMetrics,
    PeriodMetrics,
)
from dashboard_service.analytics.normalizer import (
    ActivityItem,
    DateLike,
    filter_activity_by_date_range,
    parse_calendar_date,
    to_date,
)
from dashboard_service.analytics.trends import calculate_growth_rate

DEFAULT_ADOPTION_WINDOW_DAYS = 30

Records = Iterable[Union[ActivityRecord, Mapping[str, Any]]]


def aggregate(records: Records) -> AggregateMetrics:
    """Sum the core metrics and count distinct users and active days."""
    totals = AggregateMetrics()
    users = set()
    days = set()

    for item in records:
        record = ActivityRecord.coerce(item)
        totals.ai_code_lines += record.ai_code_lines
        totals.chat_interactions += record.chat_messages_interacted
        totals.inline_suggestions += record.inline_suggestions_count
        totals.inline_acceptances += record.inline_acceptance_count
        users.add(record.user_id)
        days.add(record.date)

    totals.unique_users = len(users)
    totals.days_active = len(days)
    return totals


def _as_mapping(metrics: Union[AggregateMetrics, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(metrics, AggregateMetrics):
        return metrics.model_dump(by_alias=True)
    return metrics


def percentage_change(
    before: Union[AggregateMetrics, Mapping[str, Any]],
    after: Union[AggregateMetrics, Mapping[str, Any]],
) -> Dict[str, float]:
    """
    Percentage change per field from ``before`` to ``after``.

    Uses the same zero-baseline rule as growth rates: 100 when the field
    grew from zero, 0 when it stayed at zero.
    """
    before_values = _as_mapping(before)
    after_values = _as_mapping(after)
    return {
        key: calculate_growth_rate(value, after_values.get(key, 0))
        for key, value in before_values.items()
    }


def find_adoption_date(records: Records) -> Optional[date]:
    """Earliest parsable record date, or None if no record has one."""
    dates = [parse_calendar_date(ActivityRecord.coerce(item).date) for item in records]
    dates = [d for d in dates if d is not None]
    return min(dates) if dates else None


def adoption_windows(
    adoption_date: DateLike,
    days: int = DEFAULT_ADOPTION_WINDOW_DAYS,
) -> Tuple[Tuple[date, date], Tuple[date, date]]:
    """
    Inclusive (start, end) windows around an adoption date.

    Before: [adoption - days, adoption - 1 day]
    After:  [adoption, adoption + days]

    The adoption day itself belongs to the "after" window.
    """
    anchor = to_date(adoption_date)
    before = (anchor - timedelta(days=days), anchor - timedelta(days=1))
    after = (anchor, anchor + timedelta(days=days))
    return before, after


def split_adoption_periods(
    records: Records,
    adoption_date: DateLike,
    days: int = DEFAULT_ADOPTION_WINDOW_DAYS,
) -> Tuple[List[ActivityItem], List[ActivityItem]]:
    """Slice records into the before and after adoption windows."""
    records = list(records)
    (before_start, before_end), (after_start, after_end) = adoption_windows(adoption_date, days)
    return (
        filter_activity_by_date_range(records, before_start, before_end),
        filter_activity_by_date_range(records, after_start, after_end),
    )


def compare_periods(
    adoption_date: DateLike,
    before_records: Records,
    after_records: Records,
    days: int = DEFAULT_ADOPTION_WINDOW_DAYS,
) -> AdoptionComparison:
    """
    Build the adoption comparison from records already fetched per window.

    Records outside their window are discarded before aggregation.
    """
    (before_start, before_end), (after_start, after_end) = adoption_windows(adoption_date, days)

    before_metrics = aggregate(filter_activity_by_date_range(before_records, before_start, before_end))
    after_metrics = aggregate(filter_activity_by_date_range(after_records, after_start, after_end))

    return AdoptionComparison(
        adoption_date=to_date(adoption_date).isoformat(),
        before_period=PeriodMetrics(
            start_date=before_start.isoformat(),
            end_date=before_end.isoformat(),
            metrics=before_metrics,
        ),
        after_period=PeriodMetrics(
            start_date=after_start.isoformat(),
            end_date=after_end.isoformat(),
            metrics=after_metrics,
        ),
        percentage_changes=percentage_change(before_metrics, after_metrics),
    )


def compare_adoption(
    records: Records,
    days: int = DEFAULT_ADOPTION_WINDOW_DAYS,
    adoption_date: Optional[DateLike] = None,
) -> Optional[AdoptionComparison]:
    """
    Compare usage before and after adoption.

    Args:
        records: A user's activity records
        days: Window length on each side of the adoption date
        adoption_date: Anchor date; defaults to the earliest record date

    Returns:
        AdoptionComparison, or None when no anchor can be determined
    """
    records = list(records)
    anchor = to_date(adoption_date) if adoption_date is not None else find_adoption_date(records)
    if anchor is None:
        return None
    return compare_periods(anchor, records, records, days)
