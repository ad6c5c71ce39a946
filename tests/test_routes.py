"""Tests for the HTTP API."""
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from tripengine.api.routes import get_catalog_client, get_trips_client
from tripengine.main import app
from tripengine.services.catalog import CatalogClient

from conftest import BASE_URL, make_trip


def catalog_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/categories/city/lis"):
        return httpx.Response(200, json=[
            {"id": "tram", "name": "Tram 28", "pricePerHour": 10, "pricePerDay": 60},
            {"id": "sintra", "name": "Sintra Day Trip", "pricePerDay": 80},
        ])
    return httpx.Response(404, json={"message": "Not found"})


@pytest.fixture
def client(trips_client) -> TestClient:
    catalog_client = CatalogClient(
        base_url=BASE_URL,
        headers={},
        transport=httpx.MockTransport(catalog_handler),
    )
    app.dependency_overrides[get_trips_client] = lambda: trips_client
    app.dependency_overrides[get_catalog_client] = lambda: catalog_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client) -> str:
    return client.post("/api/session").json()["session_id"]


def utc_today():
    return datetime.now(timezone.utc).date()


class TestSession:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_create_and_get(self, client, session_id):
        summary = client.get(f"/api/session/{session_id}").json()

        assert summary["session_id"] == session_id
        assert summary["booking_active"] is False

    def test_unknown_session(self, client):
        assert client.get("/api/session/nope").status_code == 404


class TestCatalogRoutes:
    def test_list_by_category(self, client):
        trips = client.get("/api/catalog/trips", params={"category": "beach"}).json()["trips"]

        assert trips
        assert all(trip["category"] == "beach" for trip in trips)

    def test_categories_with_counts(self, client):
        categories = client.get("/api/catalog/categories").json()["categories"]

        assert [c["id"] for c in categories] == ["adventure", "beach", "mountain", "cultural", "city-tours"]
        assert sum(c["count"] for c in categories) == 5

    def test_unknown_category(self, client):
        assert client.get("/api/catalog/trips", params={"category": "space"}).status_code == 400

    def test_get_trip(self, client):
        trip = client.get("/api/catalog/trips/trip-001").json()

        assert trip["maxTravelers"] == 12
        assert client.get("/api/catalog/trips/nope").status_code == 404


class TestSelectionRoutes:
    """Test the "book new trip" flow end to end."""

    def test_select_and_submit(self, client, session_id, fake_service):
        response = client.post(f"/api/selections/{session_id}/city", json={"city_id": "lis"})
        assert [a["id"] for a in response.json()["activities"]] == ["tram", "sintra"]

        client.post(f"/api/selections/{session_id}/tram/toggle")
        summary = client.patch(
            f"/api/selections/{session_id}/tram",
            json={"duration_value": 3, "quantity": 2},
        ).json()
        assert summary["total_price"] == 60

        response = client.post(f"/api/selections/{session_id}/submit", json={"duration_days": 2})

        assert response.status_code == 200
        assert response.json()["totalCost"] == 60
        assert fake_service.calls("POST", "/trips") == 1
        assert client.get(f"/api/selections/{session_id}").json()["selections"] == []

    def test_patch_clamps_to_one(self, client, session_id):
        client.post(f"/api/selections/{session_id}/city", json={"city_id": "lis"})
        client.post(f"/api/selections/{session_id}/sintra/toggle")

        summary = client.patch(f"/api/selections/{session_id}/sintra", json={"quantity": 0}).json()

        assert summary["selections"][0]["quantity"] == 1

    def test_empty_submit_rejected_without_remote_call(self, client, session_id, fake_service):
        client.post(f"/api/selections/{session_id}/city", json={"city_id": "lis"})

        response = client.post(f"/api/selections/{session_id}/submit", json={})

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "selected_activities"
        assert fake_service.requests == []

    def test_rejected_submit_keeps_selections(self, client, session_id, fake_service):
        client.post(f"/api/selections/{session_id}/city", json={"city_id": "lis"})
        client.post(f"/api/selections/{session_id}/tram/toggle")
        fake_service.fail("POST", "/trips", 400)

        response = client.post(f"/api/selections/{session_id}/submit", json={})

        assert response.status_code == 409
        assert len(client.get(f"/api/selections/{session_id}").json()["selections"]) == 1

    def test_unknown_city(self, client, session_id):
        response = client.post(f"/api/selections/{session_id}/city", json={"city_id": "nowhere"})

        assert response.status_code == 404


class TestBookingRoutes:
    """Test the provider-package booking flow."""

    def test_book_trip(self, client, session_id):
        booking = client.post(f"/api/booking/{session_id}/start", json={"trip_id": "trip-001"}).json()["booking"]
        assert booking["selectedDateId"] == "d1"

        booking = client.patch(f"/api/booking/{session_id}", json={
            "selected_date_id": "d2",
            "travelers": 2,
            "traveler_info": {
                "first_name": "Ana",
                "last_name": "Silva",
                "email": "ana@example.com",
                "phone": "+351900000000",
            },
        }).json()["booking"]
        assert booking["priceBreakdown"]["basePrice"] == pytest.approx(1899 * 1.2)

        booked = client.post(f"/api/booking/{session_id}/complete").json()

        assert booked["confirmationCode"].startswith("TP-")
        assert client.get(f"/api/booking/{session_id}").json()["booking"] is None
        assert client.get(f"/api/booking/{session_id}/booked").json()["booked_trips"][0]["id"] == booked["id"]

    def test_sold_out_date(self, client, session_id):
        client.post(f"/api/booking/{session_id}/start", json={"trip_id": "trip-001"})

        response = client.patch(f"/api/booking/{session_id}", json={"selected_date_id": "d3"})

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "selected_date_id"

    def test_incomplete_traveler_info(self, client, session_id):
        client.post(f"/api/booking/{session_id}/start", json={"trip_id": "trip-001"})

        response = client.post(f"/api/booking/{session_id}/complete")

        assert response.status_code == 400
        assert client.get(f"/api/booking/{session_id}").json()["booking"] is not None

    def test_trip_without_dates_starts_nothing(self, client, session_id):
        response = client.post(f"/api/booking/{session_id}/start", json={"trip_id": "trip-005"})

        assert response.json()["booking"] is None


class TestTripRoutes:
    """Test the trip list, prompts and editing."""

    def test_list_with_start_prompt(self, client, session_id, fake_service):
        fake_service.trips["trip-1"] = make_trip("trip-1", start=utc_today())

        body = client.get(f"/api/trips/{session_id}").json()

        assert body["total"] == 1
        assert body["prompt"]["kind"] == "start"
        assert body["prompt"]["trip"]["id"] == "trip-1"

        confirmed = client.post(
            f"/api/trips/{session_id}/prompt/confirm",
            json={"trip_id": "trip-1", "kind": "start"},
        ).json()

        assert confirmed["trip"]["status"] == "ONGOING"
        assert confirmed["prompt"] is None

    def test_prompt_must_have_been_shown(self, client, session_id, fake_service):
        fake_service.trips["trip-1"] = make_trip("trip-1", start=utc_today() + timedelta(days=3))
        client.get(f"/api/trips/{session_id}")

        response = client.post(
            f"/api/trips/{session_id}/prompt/confirm",
            json={"trip_id": "trip-1", "kind": "start"},
        )

        assert response.status_code == 404

    def test_decline_complete_then_extend(self, client, session_id, fake_service):
        fake_service.trips["trip-1"] = make_trip(
            "trip-1", status="ONGOING", start=utc_today() - timedelta(days=4), duration_days=2
        )
        assert client.get(f"/api/trips/{session_id}").json()["prompt"]["kind"] == "complete"

        draft = client.post(
            f"/api/trips/{session_id}/prompt/decline",
            json={"trip_id": "trip-1", "kind": "complete"},
        ).json()["draft"]
        assert draft["duration_days"] == 2

        client.patch(f"/api/edit/{session_id}", json={"duration_days": 10})
        trip = client.put(f"/api/edit/{session_id}").json()

        assert trip["durationDays"] == 10
        assert trip["status"] == "ONGOING"
        assert client.get(f"/api/trips/{session_id}").json()["prompt"] is None

    def test_edit_activity_recomputes_totals(self, client, session_id, fake_service):
        fake_service.trips["trip-1"] = make_trip("trip-1", start=utc_today() + timedelta(days=10))
        client.get(f"/api/trips/{session_id}")
        client.post(f"/api/trips/{session_id}/trip-1/edit")

        draft = client.patch(
            f"/api/edit/{session_id}/activities/0",
            json={"duration_value": 3},
        ).json()["draft"]

        assert draft["activities"][0]["total_price"] == 60
        assert draft["grand_total"] == 60
        assert fake_service.calls("PUT", "/trips/trip-1") == 0

    def test_cancel_then_delete(self, client, session_id, fake_service):
        fake_service.trips["trip-1"] = make_trip("trip-1", start=utc_today() + timedelta(days=10))
        client.get(f"/api/trips/{session_id}")

        cancelled = client.post(f"/api/trips/{session_id}/trip-1/cancel").json()
        assert cancelled["status"] == "CANCELLED"

        assert client.delete(f"/api/trips/{session_id}/trip-1").json() == {"deleted": "trip-1"}
        assert fake_service.calls("PUT", "/trips/trip-1/cancel") == 2

    def test_completed_trip_cannot_be_edited(self, client, session_id, fake_service):
        fake_service.trips["trip-1"] = make_trip("trip-1", status="COMPLETED", start=utc_today() - timedelta(days=10))
        client.get(f"/api/trips/{session_id}")

        response = client.post(f"/api/trips/{session_id}/trip-1/edit")

        assert response.status_code == 400

    def test_service_down(self, client, session_id, fake_service):
        fake_service.fail("GET", "/trips", "network")

        response = client.get(f"/api/trips/{session_id}")

        assert response.status_code == 502
        assert "internet connection" in response.json()["detail"]
