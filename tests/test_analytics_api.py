from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_data_source, get_response_cache
from app.main import app
from app.services.data_store import DataSource
from app.services.response_cache import InMemoryResponseCache


class CountingSource(DataSource):
    def __init__(self):
        self.loads = 0
        self.restaurants = [
            {"id": 1, "name": "Tandoori Treats", "cuisine": "North Indian", "location": "Bangalore"},
            {"id": 2, "name": "Sushi Bay", "cuisine": "Japanese", "location": "Mumbai"},
            {"id": 3, "name": "Dragon Wok", "cuisine": "Chinese", "location": "Bangalore"},
        ]
        recent = (datetime.now() - timedelta(days=1)).replace(microsecond=0).isoformat()
        self.orders = [
            {"id": 1, "restaurant_id": 1, "order_amount": 20.0, "order_time": "2025-06-22T09:15:00"},
            {"id": 2, "restaurant_id": 1, "order_amount": 30.0, "order_time": "2025-06-22T09:45:00"},
            {"id": 3, "restaurant_id": 2, "order_amount": 120.5, "order_time": "2025-06-23T19:10:00"},
            {"id": 4, "restaurant_id": 3, "order_amount": 64.25, "order_time": recent},
        ]

    def fetch_raw_restaurants(self):
        return self.restaurants

    def fetch_raw_orders(self):
        return self.orders

    def load(self):
        self.loads += 1
        return super().load()


@pytest.fixture(name="api_client")
def client_fixture():
    source = CountingSource()
    cache = InMemoryResponseCache(300)

    app.dependency_overrides[get_data_source] = lambda: source
    app.dependency_overrides[get_response_cache] = lambda: cache

    with TestClient(app) as client:
        client.source = source  # type: ignore[attr-defined]
        yield client

    app.dependency_overrides.clear()


def test_analytics_for_a_single_day(api_client: TestClient) -> None:
    response = api_client.get(
        "/analytics",
        params={"startDate": "2025-06-22", "endDate": "2025-06-22", "restaurant_id": "1"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["summary"] == {"total_revenue": 50.0, "total_orders": 2, "average_order_value": 25.0}
    assert payload["daily_trends"] == [
        {"date": "2025-06-22", "orders": 2, "revenue": 50.0, "peak_hour": "09:00 - 10:00"}
    ]
    assert payload["top_restaurants"] == [{"name": "Tandoori Treats", "revenue": 50.0}]
    assert len(payload["peak_hours"]) == 7
    assert payload["peak_hours"][0][0] == "09:00 - 10:00"


@pytest.mark.parametrize(
    "params, message",
    [
        ({"startHour": "5", "endHour": "24"}, "Hour must be between 0 and 23"),
        ({"minAmount": "100", "maxAmount": "50"}, "Minimum amount cannot be greater than maximum"),
        ({"minAmount": "abc", "maxAmount": "50"}, "amount must be numeric"),
        ({"startDate": "2099-01-01", "endDate": "2099-01-02"}, "Dates cannot be in the future"),
        ({"startDate": "2025-06-30", "endDate": "2025-06-01"}, "Start date cannot be after end date"),
        ({"startDate": "June 1", "endDate": "2025-06-01"}, "Invalid date format"),
    ],
)
def test_invalid_filters_are_rejected(api_client: TestClient, params, message) -> None:
    response = api_client.get("/analytics", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_rejected_requests_are_not_cached(api_client: TestClient) -> None:
    first = api_client.get("/analytics?startHour=5&endHour=24")
    second = api_client.get("/analytics?startHour=5&endHour=24")

    assert first.status_code == second.status_code == 400
    assert "X-Cache" not in second.headers
    assert api_client.source.loads == 0  # type: ignore[attr-defined]


def test_repeated_request_is_served_from_cache(api_client: TestClient) -> None:
    first = api_client.get("/analytics?minAmount=10&maxAmount=100")
    second = api_client.get("/analytics?minAmount=10&maxAmount=100")

    assert first.headers["X-Cache"] == "MISS"
    assert second.headers["X-Cache"] == "HIT"
    assert first.content == second.content
    assert second.headers["content-type"].startswith("application/json")
    assert api_client.source.loads == 1  # type: ignore[attr-defined]


def test_parameter_order_yields_a_distinct_entry(api_client: TestClient) -> None:
    api_client.get("/analytics?minAmount=10&maxAmount=100")
    response = api_client.get("/analytics?maxAmount=100&minAmount=10")

    assert response.headers["X-Cache"] == "MISS"


def test_trends_only_cover_recent_orders(api_client: TestClient) -> None:
    response = api_client.get("/trends")

    assert response.status_code == 200
    payload = response.json()
    assert set(payload) == {"hourly", "daily", "weekly"}
    assert sum(bucket["orders"] for bucket in payload["daily"].values()) == 1
    assert "2025-06-22" not in payload["daily"]
    assert list(payload["weekly"].values()) == [{"orders": 1, "revenue": 64.25}]


def test_statistics(api_client: TestClient) -> None:
    response = api_client.get("/statistics")

    assert response.status_code == 200
    payload = response.json()
    assert payload["restaurant_performance"]["1"] == {
        "name": "Tandoori Treats",
        "total_revenue": 50.0,
        "total_orders": 2,
        "average_order_value": 25.0,
    }
    assert payload["peak_hours"]["0"][0] == "09"
    assert payload["growth_metrics"] == []


def test_malformed_dataset_fails_the_request(api_client: TestClient) -> None:
    api_client.source.orders = [  # type: ignore[attr-defined]
        {"id": 1, "restaurant_id": 1, "order_amount": 5, "order_time": "yesterday"},
    ]

    response = api_client.get("/statistics")

    assert response.status_code == 500
    assert response.json() == {"error": "Malformed order record at index 0"}


def test_restaurant_listing(api_client: TestClient) -> None:
    response = api_client.get("/restaurants", params={"location": "Bangalore", "sortBy": "name", "per_page": "1"})

    assert response.status_code == 200
    payload = response.json()
    assert [restaurant["name"] for restaurant in payload["data"]] == ["Dragon Wok"]
    assert payload["meta"] == {"current_page": 1, "per_page": 1, "total_items": 2, "total_pages": 2}


def test_restaurant_listing_rejects_unknown_sort(api_client: TestClient) -> None:
    response = api_client.get("/restaurants?sortBy=rating")

    assert response.status_code == 400
    assert response.json() == {"error": "sortBy must be one of: id, name, cuisine, location"}


def test_unknown_path_returns_json_404(api_client: TestClient) -> None:
    response = api_client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found"}


def test_dashboard_renders(api_client: TestClient) -> None:
    response = api_client.get("/dashboard", params={"restaurant_id": "1"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Restaurant Analytics" in response.text
    assert "09:00 - 10:00" in response.text
    assert "Sushi Bay" in response.text


def test_dashboard_shows_validation_error(api_client: TestClient) -> None:
    response = api_client.get("/dashboard", params={"startHour": "5", "endHour": "30"})

    assert response.status_code == 400
    assert "Hour must be between 0 and 23" in response.text


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
