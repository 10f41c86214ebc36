"""
Activity Summary Calculator

Summarizes a period of activity: totals, acceptance rate, per-user and
per-period breakdowns, and the acceptance-rate series of the current period
next to the previous period of equal length.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from dashboard_service.analytics.models import ActivityRecord
from dashboard_service.analytics.normalizer import DateLike, parse_calendar_date, to_date


class Granularity(str, Enum):
    """Summary period granularity"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def previous_period_range(start_date: DateLike, end_date: DateLike) -> Tuple[date, date]:
    """The window of the same length ending the day before ``start_date``."""
    start = to_date(start_date)
    end = to_date(end_date)
    period_days = (end - start).days + 1
    return start - timedelta(days=period_days), start - timedelta(days=1)


def period_key(day: date, granularity: Granularity) -> str:
    granularity = Granularity(granularity)
    if granularity == Granularity.WEEKLY:
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if granularity == Granularity.MONTHLY:
        return day.strftime("%Y-%m")
    return day.isoformat()


def _acceptance_rate(acceptances: int, suggestions: int) -> float:
    return acceptances / suggestions * 100 if suggestions > 0 else 0


def summarize_activity(
    current: Iterable[Union[ActivityRecord, Mapping[str, Any]]],
    previous: Iterable[Union[ActivityRecord, Mapping[str, Any]]] = (),
    granularity: Union[Granularity, str] = Granularity.DAILY,
    current_start: Optional[DateLike] = None,
    previous_start: Optional[DateLike] = None,
) -> Dict[str, Any]:
    """
    Summarize current-period activity against the previous period.

    Args:
        current: Records of the requested period
        previous: Records of the preceding period of equal length
        granularity: Period key granularity for the breakdowns
        current_start: First day of the current period
        previous_start: First day of the previous period; previous records
            are shifted by (current_start - previous_start) so both series
            share the same period keys

    Returns:
        Summary dict with camelCase keys
    """
    granularity = Granularity(granularity)

    totals = {
        "aiCodeLines": 0,
        "chatInteractions": 0,
        "inlineSuggestions": 0,
        "inlineAcceptances": 0,
    }
    by_user: Dict[str, Dict[str, Any]] = {}
    by_date: Dict[str, Dict[str, Any]] = {}
    sort_dates: Dict[str, date] = {}

    for item in current:
        record = ActivityRecord.coerce(item)
        day = parse_calendar_date(record.date)
        if day is None:
            continue

        contribution = {
            "aiCodeLines": record.ai_code_lines,
            "chatInteractions": record.chat_messages_interacted,
            "inlineSuggestions": record.inline_suggestions_count,
            "inlineAcceptances": record.inline_acceptance_count,
        }

        user_entry = by_user.setdefault(record.user_id, {"userId": record.user_id, **{k: 0 for k in totals}})
        key = period_key(day, granularity)
        date_entry = by_date.setdefault(key, {"date": key, **{k: 0 for k in totals}, "acceptanceRate": 0})
        sort_dates[key] = min(sort_dates.get(key, day), day)

        for metric, value in contribution.items():
            totals[metric] += value
            user_entry[metric] += value
            date_entry[metric] += value

    for entry in by_date.values():
        entry["acceptanceRate"] = _acceptance_rate(entry["inlineAcceptances"], entry["inlineSuggestions"])

    previous_by_date: Dict[str, Dict[str, int]] = {}
    offset = timedelta(0)
    if current_start is not None and previous_start is not None:
        offset = to_date(current_start) - to_date(previous_start)

    for item in previous:
        record = ActivityRecord.coerce(item)
        day = parse_calendar_date(record.date)
        if day is None:
            continue
        key = period_key(day + offset, granularity)
        entry = previous_by_date.setdefault(key, {"inlineSuggestions": 0, "inlineAcceptances": 0})
        entry["inlineSuggestions"] += record.inline_suggestions_count
        entry["inlineAcceptances"] += record.inline_acceptance_count

    ordered_dates: List[Dict[str, Any]] = sorted(by_date.values(), key=lambda entry: sort_dates[entry["date"]])

    return {
        "totalAICodeLines": totals["aiCodeLines"],
        "totalChatInteractions": totals["chatInteractions"],
        "totalInlineSuggestions": totals["inlineSuggestions"],
        "totalInlineAcceptances": totals["inlineAcceptances"],
        "acceptanceRate": _acceptance_rate(totals["inlineAcceptances"], totals["inlineSuggestions"]),
        "byUser": list(by_user.values()),
        "byDate": ordered_dates,
        "acceptanceRateTimeSeries": {
            "current": {entry["date"]: entry["acceptanceRate"] for entry in ordered_dates},
            "previous": {
                key: _acceptance_rate(entry["inlineAcceptances"], entry["inlineSuggestions"])
                for key, entry in sorted(previous_by_date.items())
            },
            "granularity": granularity.value,
        },
    }
