"""
Query parameter validation shared by the handlers.

Raises InvalidParametersError before any store access happens.
"""

from datetime import date
from enum import Enum
from typing import Optional, Tuple, Type, TypeVar

from dashboard_service.analytics.normalizer import parse_calendar_date
from dashboard_service.errors import InvalidParametersError

E = TypeVar("E", bound=Enum)

DATE_FORMAT_MESSAGE = "Invalid date format. Use YYYY-MM-DD, MM/DD/YYYY or MM-DD-YYYY"


def require_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
    message: str = "Start date and end date are required",
) -> Tuple[date, date]:
    """
    Both dates present and parsable.

    Returns the parsed bounds; callers pass ``isoformat()`` of these on to the
    store so that every accepted input format queries the same range. A
    reversed range simply matches nothing.
    """
    if not start_date or not end_date:
        raise InvalidParametersError(message)

    start = parse_calendar_date(start_date)
    end = parse_calendar_date(end_date)
    if start is None or end is None:
        raise InvalidParametersError(DATE_FORMAT_MESSAGE)
    return start, end


def optional_date_range(start_date: Optional[str], end_date: Optional[str]) -> Optional[Tuple[date, date]]:
    """A validated range when both dates are given, otherwise None."""
    if start_date and end_date:
        return require_date_range(start_date, end_date)
    return None


def parse_choice(value: str, choices: Type[E], name: str) -> E:
    """Enum member for ``value`` or an INVALID_PARAMETERS error listing the options."""
    try:
        return choices(value)
    except ValueError:
        options = ", ".join(choice.value for choice in choices)
        raise InvalidParametersError(f"Invalid {name}. Must be one of: {options}") from None


def parse_non_negative_int(
    value: Optional[str],
    name: str,
    default: int,
    max_value: Optional[int] = None,
) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidParametersError(f"Invalid {name}. Must be a non-negative integer") from None
    if parsed < 0:
        raise InvalidParametersError(f"Invalid {name}. Must be a non-negative integer")
    if max_value is not None and parsed > max_value:
        raise InvalidParametersError(f"Invalid {name}. Must not exceed {max_value}")
    return parsed
