"""
API endpoint tests against the in-memory store.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from dashboard_service.config import Settings
from dashboard_service.main import create_app
from dashboard_service.store.memory import InMemoryStore


class TestServiceEndpoints:
    """Root and health"""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "Developer Productivity Dashboard API"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestActivityEndpoints:
    """Users, activity and summary"""

    def test_users(self, client):
        assert client.get("/api/users").json() == ["alice", "bob", "carol"]

    def test_activity_filtered(self, client):
        response = client.get("/api/activity", params={"userId": "bob", "startDate": "2024-01-01",
                                                       "endDate": "2024-01-03"})
        assert response.status_code == 200
        assert [item["Date"] for item in response.json()] == ["2024-01-02"]

    def test_activity_invalid_date(self, client):
        response = client.get("/api/activity", params={"startDate": "nope", "endDate": "2024-01-03"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PARAMETERS"

    def test_summary(self, client):
        response = client.get("/api/activity/summary", params={"startDate": "2024-01-08", "endDate": "2024-01-14"})
        body = response.json()
        assert response.status_code == 200
        assert body["totalAICodeLines"] == 1
        # Previous week shifted onto the current week
        assert "2024-01-09" in body["acceptanceRateTimeSeries"]["previous"]

    def test_summary_invalid_granularity(self, client):
        response = client.get("/api/activity/summary", params={"granularity": "hourly"})
        assert response.status_code == 400


class TestAuthorization:
    """Bearer header check on the summary endpoint"""

    @pytest.fixture
    def secured_client(self, memory_store):
        app = create_app(settings=Settings(bypass_auth=False), store=memory_store)
        with TestClient(app) as test_client:
            yield test_client

    def test_missing_header(self, secured_client):
        response = secured_client.get("/api/activity/summary")
        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header is required", "code": "UNAUTHORIZED"}

    def test_wrong_scheme(self, secured_client):
        response = secured_client.get("/api/activity/summary", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid authorization format"

    def test_bearer_accepted(self, secured_client):
        response = secured_client.get("/api/activity/summary", headers={"Authorization": "Bearer token"})
        assert response.status_code == 200

    def test_other_endpoints_open(self, secured_client):
        assert secured_client.get("/api/users").status_code == 200


class TestTrendEndpoints:
    """Productivity, adoption, correlation and export"""

    def test_productivity(self, client):
        response = client.get("/api/trends/productivity", params={"startDate": "2024-01-01", "endDate": "2024-01-05"})
        body = response.json()
        assert response.status_code == 200
        assert body["timePoints"] == ["2024-01-01", "2024-01-02", "2024-01-05"]
        assert body["totals"]["aiCodeLines"] == 42
        assert body["growthRates"]["aiCodeLines"][0] is None

    def test_productivity_weekly(self, client):
        response = client.get("/api/trends/productivity", params={
            "startDate": "2024-01-01", "endDate": "2024-01-31", "interval": "week",
        })
        assert response.json()["timePoints"] == ["2024-01-01", "2024-01-08"]

    def test_productivity_requires_dates(self, client):
        response = client.get("/api/trends/productivity")
        assert response.status_code == 400
        assert response.json() == {"error": "Start date and end date are required", "code": "INVALID_PARAMETERS"}

    def test_productivity_invalid_interval(self, client):
        response = client.get("/api/trends/productivity", params={
            "startDate": "2024-01-01", "endDate": "2024-01-05", "interval": "year",
        })
        assert response.status_code == 400
        assert "interval" in response.json()["error"]

    @pytest.mark.parametrize("start,end", [("01/01/2024", "01/05/2024"), ("01-01-2024", "01-05-2024")])
    def test_productivity_us_date_bounds(self, client, start, end):
        response = client.get("/api/trends/productivity", params={"startDate": start, "endDate": end})
        assert response.status_code == 200
        assert response.json()["timePoints"] == ["2024-01-01", "2024-01-02", "2024-01-05"]

    def test_productivity_empty_range(self, client):
        response = client.get("/api/trends/productivity", params={"startDate": "2023-01-01", "endDate": "2023-01-05"})
        assert response.status_code == 200
        assert response.json()["timePoints"] == []

    def test_adoption(self, client):
        response = client.get("/api/trends/adoption", params={"userId": "alice", "daysBeforeAfter": "7"})
        body = response.json()
        assert response.status_code == 200
        assert body["adoptionDate"] == "2024-01-01"
        assert body["afterPeriod"]["metrics"]["aiCodeLines"] == 25
        assert body["beforePeriod"]["metrics"]["aiCodeLines"] == 0
        assert body["percentageChanges"]["aiCodeLines"] == 100

    def test_adoption_requires_user(self, client):
        assert client.get("/api/trends/adoption").status_code == 400

    def test_adoption_window_too_large(self, client):
        response = client.get("/api/trends/adoption", params={"userId": "alice", "daysBeforeAfter": "1000000"})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid daysBeforeAfter. Must not exceed 3650",
            "code": "INVALID_PARAMETERS",
        }

    def test_adoption_unknown_user(self, client):
        response = client.get("/api/trends/adoption", params={"userId": "nobody"})
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_correlation(self, client):
        response = client.get("/api/trends/correlation", params={
            "startDate": "2024-01-01", "endDate": "2024-01-31", "metric": "inlineSuggestions",
        })
        body = response.json()
        assert body["targetMetric"] == "inlineSuggestions"
        assert "inlineSuggestions" not in body["correlations"]

    def test_correlation_invalid_metric(self, client):
        response = client.get("/api/trends/correlation", params={
            "startDate": "2024-01-01", "endDate": "2024-01-31", "metric": "bogus",
        })
        assert response.status_code == 400

    def test_export_productivity(self, client):
        response = client.get("/api/trends/export", params={
            "type": "productivity", "startDate": "2024-01-01", "endDate": "2024-01-02",
        })
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == \
            "attachment; filename=productivity-trends-2024-01-01-to-2024-01-02.csv"
        assert len(response.text.split("\n")) == 3

    def test_export_us_date_bounds(self, client):
        response = client.get("/api/trends/export", params={
            "type": "productivity", "startDate": "01/01/2024", "endDate": "01/02/2024",
        })
        assert response.status_code == 200
        assert response.headers["content-disposition"] == \
            "attachment; filename=productivity-trends-2024-01-01-to-2024-01-02.csv"
        assert len(response.text.split("\n")) == 3

    def test_export_adoption_requires_user(self, client):
        response = client.get("/api/trends/export", params={
            "type": "adoption", "startDate": "2024-01-01", "endDate": "2024-01-02",
        })
        assert response.status_code == 400

    def test_export_invalid_type(self, client):
        response = client.get("/api/trends/export", params={
            "type": "pdf", "startDate": "2024-01-01", "endDate": "2024-01-02",
        })
        assert response.status_code == 400

    def test_trend_activity(self, client):
        assert len(client.get("/api/trends/activity").json()) == 5


class TestPromptEndpoints:
    """Prompt log and analytics"""

    def test_list(self, client):
        body = client.get("/api/prompts").json()
        assert body["total"] == 3
        assert body["page"] == 1
        assert body["limit"] == 50

    def test_list_date_and_search(self, client):
        body = client.get("/api/prompts", params={
            "startDate": "2024-01-01", "endDate": "2024-01-01", "searchTerm": "test",
        }).json()
        assert body["total"] == 1

    def test_list_invalid_limit(self, client):
        assert client.get("/api/prompts", params={"limit": "lots"}).status_code == 400

    @pytest.mark.parametrize("path", [
        "/api/prompts/analysis",
        "/api/prompts/categories",
        "/api/prompts/category-distribution",
        "/api/prompts/type-distribution",
        "/api/prompts/length-distribution",
        "/api/prompts/patterns",
        "/api/prompts/response-quality",
        "/api/prompts/time-analysis",
    ])
    def test_stats_endpoints(self, client, path):
        response = client.get(path, params={"userId": "alice"})
        assert response.status_code == 200
        assert isinstance(response.json(), dict)

    def test_category_distribution_user_filter(self, client):
        body = client.get("/api/prompts/category-distribution", params={"userId": "bob"}).json()
        assert body["total"] == 1


class TestSubscriptionEndpoints:
    """Subscription listing and metrics"""

    def test_list(self, client):
        assert len(client.get("/api/subscriptions").json()) == 4

    def test_metrics(self, client):
        body = client.get("/api/subscriptions/metrics").json()
        assert body["activeSubscriptions"] == 3
        assert body["subscriptionsByDate"]["No Activity"] == 1


class TestStoreFailures:
    """Unexpected store errors become INTERNAL_SERVER_ERROR"""

    def test_store_error(self, settings):
        store = MagicMock(spec=InMemoryStore)
        store.scan_subscriptions.side_effect = RuntimeError("connection reset")
        app = create_app(settings=settings, store=store)

        with TestClient(app) as test_client:
            response = test_client.get("/api/subscriptions/metrics")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch subscription metrics", "code": "INTERNAL_SERVER_ERROR"}
