"""
Time-Bucketing Engine

Groups activity records into day, ISO-week or month buckets and sums the
usage metrics of each bucket.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Set, Union

from dashboard_service.analytics.models import ActivityRecord, Bucket, Interval
from dashboard_service.analytics.normalizer import parse_calendar_date

logger = logging.getLogger(__name__)


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def bucket_key(record: ActivityRecord, interval: Interval) -> str:
    """
    Bucket key for a record.

    Day keys are the stored date string verbatim, so dates stored in
    different formats land in different buckets.
    """
    interval = Interval(interval)
    record_date = parse_calendar_date(record.date)
    if record_date is None:
        raise ValueError(f"Invalid activity date: {record.date!r}")

    if interval == Interval.WEEK:
        return week_start(record_date).isoformat()
    if interval == Interval.MONTH:
        return record_date.strftime("%Y-%m")
    return record.date


def parse_bucket_key(key: str) -> date:
    """Parse a bucket key (day, week start or YYYY-MM month) into a sortable date."""
    parsed = parse_calendar_date(key)
    if parsed is None and len(key) == 7:
        parsed = parse_calendar_date(f"{key}-01")
    if parsed is None:
        raise ValueError(f"Bucket key is not a date: {key!r}")
    return parsed


def bucket_records(
    records: Iterable[Union[ActivityRecord, Mapping[str, Any]]],
    interval: Interval = Interval.DAY,
) -> Dict[str, Bucket]:
    """
    Fold activity records into buckets keyed by time interval.

    Args:
        records: Activity records or raw store items
        interval: Bucket granularity (day, week or month)

    Returns:
        Buckets keyed by bucket key, in first-seen order. Use
        ``sorted_buckets`` for chronological order.
    """
    totals: Dict[str, Dict[str, int]] = {}
    users: Dict[str, Set[str]] = {}

    for item in records:
        record = ActivityRecord.coerce(item)
        try:
            key = bucket_key(record, interval)
        except ValueError:
            logger.warning(f"Skipping activity record with unparsable date: user={record.user_id} date={record.date!r}")
            continue

        if key not in totals:
            totals[key] = {
                "ai_code_lines": 0,
                "chat_interactions": 0,
                "inline_suggestions": 0,
                "inline_acceptances": 0,
            }
            users[key] = set()

        bucket = totals[key]
        bucket["ai_code_lines"] += record.ai_code_lines
        bucket["chat_interactions"] += record.chat_messages_interacted
        bucket["inline_suggestions"] += record.inline_suggestions_count
        bucket["inline_acceptances"] += record.inline_acceptance_count
        users[key].add(record.user_id)

    # Unique users are counted once all records are folded
    return {
        key: Bucket(key=key, unique_users=len(users[key]), **values)
        for key, values in totals.items()
    }


def sorted_buckets(buckets: Union[Mapping[str, Bucket], Iterable[Bucket]]) -> List[Bucket]:
    """Buckets in ascending order of the date their key denotes."""
    values = buckets.values() if isinstance(buckets, Mapping) else buckets
    return sorted(values, key=lambda bucket: parse_bucket_key(bucket.key))


def bucket_series(
    records: Iterable[Union[ActivityRecord, Mapping[str, Any]]],
    interval: Interval = Interval.DAY,
) -> List[Bucket]:
    """Bucket records and return them in chronological order."""
    return sorted_buckets(bucket_records(records, interval))
