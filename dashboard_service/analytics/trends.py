"""
Productivity Trend Calculator

Turns chronologically ordered buckets into per-metric series:
- Raw values
- Trailing moving averages (window of up to 7 buckets)
- Point-to-point growth rates (%)
- Totals across the whole series
"""

from typing import List, Mapping, Optional, Sequence, Union

from dashboard_service.analytics.bucketing import sorted_buckets
from dashboard_service.analytics.models import Bucket, MetricSeries, MetricTotals, Number, TrendSeries

MOVING_AVERAGE_WINDOW = 7

BASE_METRICS = ("ai_code_lines", "chat_interactions", "inline_suggestions", "inline_acceptances")
TREND_METRICS = BASE_METRICS + ("acceptance_rate",)


def calculate_growth_rate(previous: Number, current: Number) -> float:
    """
    Growth from ``previous`` to ``current`` as a percentage.

    A zero baseline yields 100 when the current value is positive and 0
    otherwise.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return (current - previous) / previous * 100


def moving_averages(values: Sequence[Number], window_size: int) -> List[float]:
    """Right-aligned trailing means over ``values[max(0, i - window_size + 1) .. i]``."""
    averages = []
    for index in range(len(values)):
        window = values[max(0, index - window_size + 1):index + 1]
        averages.append(sum(window) / len(window))
    return averages


def growth_rates(values: Sequence[Number]) -> List[Optional[float]]:
    """Growth rate per point; the first point has no predecessor and is None."""
    rates: List[Optional[float]] = []
    for index, value in enumerate(values):
        if index == 0:
            rates.append(None)
        else:
            rates.append(calculate_growth_rate(values[index - 1], value))
    return rates


def compute_trends(buckets: Union[Sequence[Bucket], Mapping[str, Bucket]]) -> TrendSeries:
    """
    Calculate productivity trends.

    Args:
        buckets: Buckets in ascending chronological order, or a mapping of
            buckets (as returned by ``bucket_records``) which is sorted here

    Returns:
        TrendSeries with raw values, moving averages, growth rates and totals
    """
    ordered = sorted_buckets(buckets) if isinstance(buckets, Mapping) else list(buckets)
    if not ordered:
        return TrendSeries()

    window_size = min(MOVING_AVERAGE_WINDOW, len(ordered))

    # Acceptance rate is derived once per bucket and reused below
    raw = {metric: [getattr(bucket, metric) for bucket in ordered] for metric in TREND_METRICS}

    return TrendSeries(
        time_points=[bucket.key for bucket in ordered],
        metrics=MetricSeries(**raw),
        moving_averages=MetricSeries(**{
            metric: moving_averages(values, window_size) for metric, values in raw.items()
        }),
        growth_rates=MetricSeries(**{
            metric: growth_rates(values) for metric, values in raw.items()
        }),
        totals=MetricTotals(**{metric: sum(raw[metric]) for metric in BASE_METRICS}),
    )
