"""
Correlation Calculator

Pearson correlation between a target metric's daily series and each of the
other metrics' daily series. Days without any activity have no bucket and
are absent from the series rather than counted as zero.
"""

import math
from typing import Any, Dict, Iterable, Mapping, Sequence, Union

from dashboard_service.analytics.bucketing import bucket_series
from dashboard_service.analytics.models import ActivityRecord, CorrelationResult, Interval, Metric, Number

# Metric enum value -> Bucket attribute
METRIC_FIELDS = {
    Metric.AI_CODE_LINES.value: "ai_code_lines",
    Metric.CHAT_INTERACTIONS.value: "chat_interactions",
    Metric.INLINE_SUGGESTIONS.value: "inline_suggestions",
    Metric.INLINE_ACCEPTANCES.value: "inline_acceptances",
}


def pearson_correlation(x: Sequence[Number], y: Sequence[Number]) -> float:
    """
    Pearson's r using the sum-based formula.

    Returns 0 when either series has zero variance (including empty series).
    """
    if len(x) != len(y):
        raise ValueError(f"Series lengths differ: {len(x)} != {len(y)}")

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_x2 = sum(a * a for a in x)
    sum_y2 = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    variance_product = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if variance_product <= 0:
        return 0
    return numerator / math.sqrt(variance_product)


def daily_metric_values(records: Iterable[Union[ActivityRecord, Mapping[str, Any]]]):
    """Chronological day keys and per-metric daily series."""
    days = bucket_series(records, Interval.DAY)
    values = {
        metric: [getattr(day, field) for day in days]
        for metric, field in METRIC_FIELDS.items()
    }
    return [day.key for day in days], values


def correlate(
    records: Iterable[Union[ActivityRecord, Mapping[str, Any]]],
    target_metric: Union[Metric, str] = Metric.AI_CODE_LINES,
) -> CorrelationResult:
    """
    Correlate ``target_metric`` with every other metric over daily buckets.

    Records are always re-bucketed by day here, whatever granularity the
    caller uses elsewhere.
    """
    target = Metric(target_metric).value
    time_points, values = daily_metric_values(records)

    correlations = {
        metric: pearson_correlation(values[target], series)
        for metric, series in values.items()
        if metric != target
    }

    return CorrelationResult(
        target_metric=target,
        correlations=correlations,
        time_points=time_points,
        values=values,
    )


def correlation_matrix(
    records: Iterable[Union[ActivityRecord, Mapping[str, Any]]],
) -> Dict[str, Dict[str, float]]:
    """Pairwise correlations of all metrics; the diagonal is 1."""
    _, values = daily_metric_values(records)
    return {
        row: {
            column: 1 if row == column else pearson_correlation(values[row], values[column])
            for column in values
        }
        for row in values
    }
