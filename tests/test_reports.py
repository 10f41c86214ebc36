"""
Tests for CSV export, the activity summary and subscription metrics.
"""

from datetime import date

import pytest

from dashboard_service.analytics.csv_export import (
    PRODUCTIVITY_HEADERS,
    export_csv,
    export_filename,
    productivity_csv,
    to_csv,
)
from dashboard_service.analytics.models import ExportType
from dashboard_service.analytics.summary import Granularity, period_key, previous_period_range, summarize_activity
from dashboard_service.handlers.subscriptions_handler import subscription_metrics


class TestCsvExport:
    """CSV reports"""

    def test_two_day_productivity(self):
        items = [
            {"UserId": "u", "Date": "2024-01-01", "Chat_AICodeLines": 10, "Inline_SuggestionsCount": 20,
             "Inline_AcceptanceCount": 15},
            {"UserId": "u", "Date": "2024-01-02", "Chat_AICodeLines": 5, "Inline_SuggestionsCount": 3,
             "Inline_AcceptanceCount": 1},
        ]
        lines = productivity_csv(items).split("\n")

        assert len(lines) == 3
        assert lines[0] == ",".join(PRODUCTIVITY_HEADERS)
        assert all(len(line.split(",")) == 6 for line in lines)
        assert lines[1] == "2024-01-01,10,0,20,15,75.00"
        assert lines[2].endswith("33.33")

    def test_empty_productivity_is_header_only(self):
        assert productivity_csv([]) == ",".join(PRODUCTIVITY_HEADERS)

    def test_fields_with_commas_are_quoted(self):
        assert to_csv([["a,b", 'say "hi"', 3]]) == '"a,b","say ""hi""",3'

    def test_adoption_rows(self, activity_items):
        lines = export_csv(ExportType.ADOPTION, activity_items, "alice").split("\n")
        assert lines[0] == "Metric,Value"
        assert "aiCodeLines,25" in lines
        assert "uniqueUsers,1" in lines

    def test_adoption_requires_user(self, activity_items):
        with pytest.raises(ValueError):
            export_csv("adoption", activity_items)

    def test_correlation_matrix_aligned(self, activity_items):
        lines = export_csv("correlation", activity_items).split("\n")
        header = lines[0].split(",")
        assert header == ["Target Metric", "aiCodeLines", "chatInteractions", "inlineSuggestions", "inlineAcceptances"]
        for row_index, line in enumerate(lines[1:], start=1):
            assert line.split(",")[row_index] == "1"

    def test_filename(self):
        assert export_filename("productivity", "2024-01-01", "2024-01-31") == \
            "productivity-trends-2024-01-01-to-2024-01-31.csv"


class TestSummary:
    """Activity summary"""

    def test_previous_period(self):
        assert previous_period_range("2024-01-08", "2024-01-14") == (date(2024, 1, 1), date(2024, 1, 7))

    def test_period_keys(self):
        day = date(2024, 1, 3)
        assert period_key(day, Granularity.DAILY) == "2024-01-03"
        assert period_key(day, Granularity.WEEKLY) == "2024-W01"
        assert period_key(day, Granularity.MONTHLY) == "2024-01"

    def test_totals_and_breakdowns(self, activity_items):
        summary = summarize_activity(activity_items)

        assert summary["totalAICodeLines"] == 43
        assert summary["totalInlineSuggestions"] == 81
        assert summary["totalInlineAcceptances"] == 57
        assert summary["acceptanceRate"] == pytest.approx(57 / 81 * 100)
        assert [entry["userId"] for entry in summary["byUser"]] == ["alice", "bob", "carol"]
        assert [entry["date"] for entry in summary["byDate"]] == [
            "2024-01-01", "2024-01-02", "2024-01-05", "2024-01-08",
        ]

    def test_previous_series_aligned(self):
        current = [{"UserId": "u", "Date": "2024-01-08", "Inline_SuggestionsCount": 10, "Inline_AcceptanceCount": 5}]
        previous = [{"UserId": "u", "Date": "2024-01-01", "Inline_SuggestionsCount": 4, "Inline_AcceptanceCount": 4}]

        summary = summarize_activity(current, previous, "daily", "2024-01-08", "2024-01-01")
        series = summary["acceptanceRateTimeSeries"]
        assert series["current"] == {"2024-01-08": 50}
        assert series["previous"] == {"2024-01-08": 100}
        assert series["granularity"] == "daily"

    def test_empty(self):
        summary = summarize_activity([])
        assert summary["acceptanceRate"] == 0
        assert summary["byDate"] == []


class TestSubscriptionMetrics:
    """Subscription counts"""

    def test_counts(self, subscription_items):
        metrics = subscription_metrics(subscription_items)
        assert metrics == {
            "totalSubscriptions": 4,
            "activeSubscriptions": 3,
            "pendingSubscriptions": 1,
            "individualSubscriptions": 1,
            "groupSubscriptions": 3,
            "subscriptionsByDate": {"2024-01-01": 2, "2024-01-02": 1, "No Activity": 1},
        }

    def test_empty(self):
        assert subscription_metrics([])["subscriptionsByDate"] == {}
