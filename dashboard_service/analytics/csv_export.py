"""
CSV projection of trend reports.

Each report is a header row followed by one row per day or metric,
newline-separated with no trailing newline.
"""

import csv
import io
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from dashboard_service.analytics.aggregate import aggregate
from dashboard_service.analytics.bucketing import bucket_series
from dashboard_service.analytics.correlation import METRIC_FIELDS, correlation_matrix
from dashboard_service.analytics.models import ActivityRecord, ExportType, Interval

PRODUCTIVITY_HEADERS = [
    "Date",
    "AI Code Lines",
    "Chat Interactions",
    "Inline Suggestions",
    "Inline Acceptances",
    "Acceptance Rate (%)",
]

Records = Iterable[Union[ActivityRecord, Mapping[str, Any]]]


def to_csv(rows: Iterable[Sequence[Any]]) -> str:
    """Comma-join rows; fields containing delimiters or quotes are quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def productivity_csv(records: Records) -> str:
    """Daily metrics with the acceptance rate to two decimals."""
    rows: List[List[Any]] = [PRODUCTIVITY_HEADERS]
    for day in bucket_series(records, Interval.DAY):
        rows.append([
            day.key,
            day.ai_code_lines,
            day.chat_interactions,
            day.inline_suggestions,
            day.inline_acceptances,
            f"{day.acceptance_rate:.2f}",
        ])
    return to_csv(rows)


def adoption_csv(records: Records, user_id: str) -> str:
    """Aggregate metrics for one user as Metric,Value rows."""
    user_records = [
        record for record in (ActivityRecord.coerce(item) for item in records)
        if record.user_id == user_id
    ]
    metrics = aggregate(user_records).model_dump(by_alias=True)
    return to_csv([["Metric", "Value"], *metrics.items()])


def correlation_csv(records: Records) -> str:
    """Correlation matrix: one row per target metric, one column per metric."""
    metrics = list(METRIC_FIELDS)
    matrix = correlation_matrix(records)
    rows: List[List[Any]] = [["Target Metric", *metrics]]
    for metric in metrics:
        rows.append([metric, *(matrix[metric][column] for column in metrics)])
    return to_csv(rows)


def export_csv(export_type: Union[ExportType, str], records: Records, user_id: Optional[str] = None) -> str:
    """Render the requested report type."""
    export_type = ExportType(export_type)
    if export_type == ExportType.PRODUCTIVITY:
        return productivity_csv(records)
    if export_type == ExportType.ADOPTION:
        if not user_id:
            raise ValueError("User ID is required for adoption export")
        return adoption_csv(records, user_id)
    return correlation_csv(records)


def export_filename(export_type: Union[ExportType, str], start_date: str, end_date: str) -> str:
    return f"{ExportType(export_type).value}-trends-{start_date}-to-{end_date}.csv"
