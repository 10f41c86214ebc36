"""
Record Normalizer

Reconciles the heterogeneous encodings found in stored activity and prompt
items into comparable values:
- Timestamps stored as an ISO string, a wire-wrapped ``{"S": ...}`` value,
  or under the alternate ``timeStamp`` attribute
- Calendar dates stored as ``YYYY-MM-DD``, ``MM/DD/YYYY`` or ``MM-DD-YYYY``
- Counters stored as numbers, numeric strings, or not at all

Every handler filters by date through the two range filters below so that
boundary handling is identical across endpoints.
"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Union

from dashboard_service.analytics.models import ActivityRecord

logger = logging.getLogger(__name__)

PRIMARY_TIMESTAMP_FIELD = "TimeStamp"
ALTERNATE_TIMESTAMP_FIELD = "timeStamp"

DateLike = Union[date, datetime, str]
ActivityItem = Union[ActivityRecord, Mapping[str, Any]]


def unwrap_string(value: Any) -> Optional[str]:
    """Return the string carried by ``value`` (plain or ``{"S": ...}``), else None."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and isinstance(value.get("S"), str):
        return value["S"]
    return None


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into a naive UTC datetime.

    Offset-aware values are converted to UTC; naive values are taken as-is.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # Handle ISO format with Z suffix
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def normalize_timestamp(record: Mapping[str, Any]) -> Optional[datetime]:
    """
    Resolve the timestamp of a prompt record.

    Tries, in order:
        1. ``TimeStamp`` as an ISO string
        2. ``TimeStamp`` as ``{"S": <ISO string>}``
        3. ``timeStamp`` as an ISO string

    Returns None when no candidate resolves. Callers treat None as
    "exclude from range filters".
    """
    primary = record.get(PRIMARY_TIMESTAMP_FIELD)
    if isinstance(primary, str):
        return parse_instant(primary)
    if isinstance(primary, Mapping) and isinstance(primary.get("S"), str):
        return parse_instant(primary["S"])

    alternate = record.get(ALTERNATE_TIMESTAMP_FIELD)
    if isinstance(alternate, str):
        return parse_instant(alternate)

    return None


def normalize_count(raw: Any) -> int:
    """Coerce a stored counter to a non-negative integer; anything unusable is 0."""
    if isinstance(raw, Mapping):
        raw = raw.get("N", raw.get("S"))

    if raw is None or isinstance(raw, bool):
        return 0

    try:
        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                return 0
            try:
                value = int(text)
            except ValueError:
                value = int(Decimal(text))
        elif isinstance(raw, (int, float, Decimal)):
            value = int(raw)
        else:
            return 0
    except (ValueError, TypeError, OverflowError, InvalidOperation):
        return 0

    return max(value, 0)


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Parse an activity ``Date`` attribute.

    Accepts YYYY-MM-DD (or any ISO datetime), MM/DD/YYYY and MM-DD-YYYY,
    optionally wrapped as ``{"S": ...}``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = unwrap_string(value)
    if not text:
        return None
    text = text.strip()

    if "/" in text:
        formats = ("%m/%d/%Y",)
    elif len(text) >= 5 and text[2] == "-" and text[5:6] == "-":
        formats = ("%m-%d-%Y",)
    else:
        formats = ()

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        # Full ISO datetimes only; trailing text after the date is rejected
        instant = parse_instant(text)
        return instant.date() if instant else None


def to_date(value: DateLike) -> date:
    """Coerce a range bound into a date, raising ValueError when it is not one."""
    parsed = parse_calendar_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed


def filter_activity_by_date_range(
    records: Iterable[ActivityItem],
    start_date: DateLike,
    end_date: DateLike,
) -> List[ActivityItem]:
    """
    Keep activity records whose date falls within [start_date, end_date].

    Both bounds are inclusive whole days. Items are returned unchanged (raw
    store items stay raw). Records with an unparsable date are dropped with
    a warning.
    """
    start = to_date(start_date)
    end = to_date(end_date)

    filtered: List[ActivityItem] = []
    for item in records:
        record = ActivityRecord.coerce(item)
        record_date = parse_calendar_date(record.date)
        if record_date is None:
            logger.warning(f"Activity record has no valid date, excluding: user={record.user_id} date={record.date!r}")
            continue
        if start <= record_date <= end:
            filtered.append(item)
    return filtered


def filter_prompts_by_date_range(
    items: Iterable[Mapping[str, Any]],
    start_date: DateLike,
    end_date: DateLike,
) -> List[Mapping[str, Any]]:
    """
    Keep prompt items whose timestamp falls within
    [start_date 00:00:00, end_date 23:59:59.999999].

    Items without a resolvable timestamp are dropped with a warning.
    """
    start = datetime.combine(to_date(start_date), time.min)
    end = datetime.combine(to_date(end_date), time.max)

    filtered = []
    for item in items:
        timestamp = normalize_timestamp(item)
        if timestamp is None:
            logger.warning(f"Prompt item has no valid timestamp, excluding: user={item.get('UserId')}")
            continue
        if start <= timestamp <= end:
            filtered.append(item)
    return filtered
