"""
Usage analytics core.

Pure functions over activity and prompt records already fetched from the
store: bucketing, trends, adoption comparison, correlation, prompt
classification and CSV projection. Nothing in this package performs I/O.
"""

from dashboard_service.analytics.aggregate import (
    aggregate,
    compare_adoption,
    compare_periods,
    percentage_change,
)
from dashboard_service.analytics.bucketing import bucket_records, bucket_series, sorted_buckets
from dashboard_service.analytics.correlation import correlate, pearson_correlation
from dashboard_service.analytics.csv_export import export_csv
from dashboard_service.analytics.models import (
    ActivityRecord,
    AdoptionComparison,
    AggregateMetrics,
    Bucket,
    CorrelationResult,
    ExportType,
    Interval,
    Metric,
    PromptCategory,
    TrendSeries,
)
from dashboard_service.analytics.normalizer import normalize_count, normalize_timestamp
from dashboard_service.analytics.prompts import (
    BROAD_TAXONOMY,
    NARROW_TAXONOMY,
    categorize,
    extract_topics,
    score_quality,
)
from dashboard_service.analytics.trends import calculate_growth_rate, compute_trends

__all__ = [
    'ActivityRecord',
    'AdoptionComparison',
    'AggregateMetrics',
    'Bucket',
    'CorrelationResult',
    'ExportType',
    'Interval',
    'Metric',
    'PromptCategory',
    'TrendSeries',
    'BROAD_TAXONOMY',
    'NARROW_TAXONOMY',
    'aggregate',
    'bucket_records',
    'bucket_series',
    'calculate_growth_rate',
    'categorize',
    'compare_adoption',
    'compare_periods',
    'compute_trends',
    'correlate',
    'export_csv',
    'extract_topics',
    'normalize_count',
    'normalize_timestamp',
    'pearson_correlation',
    'percentage_change',
    'score_quality',
    'sorted_buckets',
]
