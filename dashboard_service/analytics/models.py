"""
Data models for usage analytics.

These models provide a consistent structure for aggregate data that can be
serialized to JSON (camelCase keys) and consumed by the dashboard frontend.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Interval(str, Enum):
    """Time bucket granularity"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Metric(str, Enum):
    """Bucketed usage metrics"""
    AI_CODE_LINES = "aiCodeLines"
    CHAT_INTERACTIONS = "chatInteractions"
    INLINE_SUGGESTIONS = "inlineSuggestions"
    INLINE_ACCEPTANCES = "inlineAcceptances"


class ExportType(str, Enum):
    """CSV report types"""
    PRODUCTIVITY = "productivity"
    ADOPTION = "adoption"
    CORRELATION = "correlation"


class PromptCategory(str, Enum):
    """Closed set of prompt categories"""
    CODE_GENERATION = "Code Generation"
    CODE_EXPLANATION = "Code Explanation"
    DEBUGGING = "Debugging"
    DOCUMENTATION = "Documentation"
    BEST_PRACTICES = "Best Practices"
    ARCHITECTURE = "Architecture"
    TESTING = "Testing"
    DEVOPS = "DevOps"
    DATABASE = "Database"
    SECURITY = "Security"
    UI_UX = "UI/UX"
    API = "API"
    PERFORMANCE = "Performance"
    LEARNING = "Learning"
    API_USAGE = "API Usage"
    OTHER = "Other"
    UNKNOWN = "Unknown"


# Store attribute names for activity log items
ACTIVITY_COUNT_FIELDS = {
    "chat_ai_code_lines": "Chat_AICodeLines",
    "chat_messages_interacted": "Chat_MessagesInteracted",
    "inline_ai_code_lines": "Inline_AICodeLines",
    "inline_suggestions_count": "Inline_SuggestionsCount",
    "inline_acceptance_count": "Inline_AcceptanceCount",
}


class ActivityRecord(CamelModel):
    """Per-user, per-day activity entry"""
    user_id: Optional[str] = Field(None, description="User identifier")
    date: str = Field("", description="Calendar date exactly as stored")
    chat_ai_code_lines: int = Field(0, ge=0)
    chat_messages_interacted: int = Field(0, ge=0)
    inline_ai_code_lines: int = Field(0, ge=0)
    inline_suggestions_count: int = Field(0, ge=0)
    inline_acceptance_count: int = Field(0, ge=0)

    @property
    def ai_code_lines(self) -> int:
        return self.chat_ai_code_lines + self.inline_ai_code_lines

    @classmethod
    def coerce(cls, item: Union["ActivityRecord", Mapping[str, Any]]) -> "ActivityRecord":
        """Build a record from a raw store item, tolerating missing or malformed fields."""
        if isinstance(item, cls):
            return item

        from dashboard_service.analytics.normalizer import normalize_count, unwrap_string

        user_id = item.get("UserId")
        if user_id is not None and not isinstance(user_id, str):
            user_id = unwrap_string(user_id) or str(user_id)

        return cls(
            user_id=user_id,
            date=unwrap_string(item.get("Date")) or "",
            **{
                field: normalize_count(item.get(store_field))
                for field, store_field in ACTIVITY_COUNT_FIELDS.items()
            },
        )


class Bucket(CamelModel):
    """Metrics summed over one time bucket"""
    key: str = Field(..., description="Bucket key (day, ISO week start, or month)")
    ai_code_lines: int = 0
    chat_interactions: int = 0
    inline_suggestions: int = 0
    inline_acceptances: int = 0
    unique_users: int = 0

    @property
    def acceptance_rate(self) -> float:
        if self.inline_suggestions > 0:
            return self.inline_acceptances / self.inline_suggestions * 100
        return 0


class MetricSeries(CamelModel):
    """Parallel per-metric arrays aligned with TrendSeries.time_points"""
    ai_code_lines: List[Optional[Number]] = Field(default_factory=list)
    chat_interactions: List[Optional[Number]] = Field(default_factory=list)
    inline_suggestions: List[Optional[Number]] = Field(default_factory=list)
    inline_acceptances: List[Optional[Number]] = Field(default_factory=list)
    acceptance_rate: List[Optional[Number]] = Field(default_factory=list)


class MetricTotals(CamelModel):
    ai_code_lines: int = 0
    chat_interactions: int = 0
    inline_suggestions: int = 0
    inline_acceptances: int = 0


class TrendSeries(CamelModel):
    """Productivity trends over ordered buckets"""
    time_points: List[str] = Field(default_factory=list)
    metrics: MetricSeries = Field(default_factory=MetricSeries)
    moving_averages: MetricSeries = Field(default_factory=MetricSeries)
    growth_rates: MetricSeries = Field(default_factory=MetricSeries)
    totals: MetricTotals = Field(default_factory=MetricTotals)


class AggregateMetrics(CamelModel):
    """Scalar reduction of an activity record set"""
    ai_code_lines: int = 0
    chat_interactions: int = 0
    inline_suggestions: int = 0
    inline_acceptances: int = 0
    unique_users: int = 0
    days_active: int = 0


class PeriodMetrics(CamelModel):
    start_date: str
    end_date: str
    metrics: AggregateMetrics


class AdoptionComparison(CamelModel):
    """Before/after adoption comparison for a user"""
    adoption_date: str
    before_period: PeriodMetrics
    after_period: PeriodMetrics
    percentage_changes: Dict[str, float] = Field(default_factory=dict)


class CorrelationResult(CamelModel):
    """Pearson correlation of a target metric against the other metrics"""
    target_metric: str
    correlations: Dict[str, float] = Field(default_factory=dict)
    time_points: List[str] = Field(default_factory=list)
    values: Dict[str, List[int]] = Field(default_factory=dict)


class QualityScore(BaseModel):
    """Heuristic prompt quality score"""
    score: int = Field(..., ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)


class Topic(BaseModel):
    word: str
    count: int


class PromptRecord(CamelModel):
    """A logged prompt/response pair"""
    user_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    prompt: str = ""
    response: str = ""
    chat_trigger_type: Optional[str] = None

    @classmethod
    def coerce(cls, item: Union["PromptRecord", Mapping[str, Any]]) -> "PromptRecord":
        if isinstance(item, cls):
            return item

        from dashboard_service.analytics.normalizer import normalize_timestamp, unwrap_string

        return cls(
            user_id=unwrap_string(item.get("UserId")),
            timestamp=normalize_timestamp(item),
            prompt=unwrap_string(item.get("Prompt")) or "",
            response=unwrap_string(item.get("Response")) or "",
            chat_trigger_type=unwrap_string(item.get("ChatTriggerType")),
        )
