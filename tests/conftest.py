"""Shared pytest fixtures: a fake trips service behind httpx.MockTransport and a fixed clock."""
import json
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import httpx
import pytest

from tripengine.services.clock import FixedClock
from tripengine.services.trips_client import TripsClient


BASE_URL = "http://trips.test/api/v1"
TODAY = date(2026, 3, 15)


def make_trip(
    trip_id: str,
    status: str = "PLANNED",
    start: date = TODAY,
    duration_days: int = 3,
    activities: Optional[list[dict]] = None,
    **extra
) -> dict:
    """Trip as the remote service sends it."""
    activities = activities if activities is not None else [
        {
            "activityId": "act-1",
            "activityName": "City Walk",
            "durationType": "HOURS",
            "durationValue": 1,
            "quantity": 1,
            "unitPrice": 20.0,
            "subtotal": 20.0,
        }
    ]
    trip = {
        "id": trip_id,
        "userId": "user-1",
        "cityId": "city-1",
        "cityName": "Lisbon",
        "country": "Portugal",
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=duration_days - 1)).isoformat(),
        "durationDays": duration_days,
        "status": status,
        "selectedActivities": activities,
        "totalCost": sum(a["subtotal"] for a in activities),
        "currency": "USD",
    }
    trip.update(extra)
    return trip


class FakeTripsService:
    """In-memory stand-in for the remote trips service."""

    def __init__(self, trips: Optional[list[dict]] = None):
        self.trips: dict[str, dict] = {t["id"]: t for t in trips or []}
        self.requests: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], object] = {}
        self.cancel_returns_body = True
        self._next_id = 100

    def fail(self, method: str, path: str, outcome):
        """Make the next matching call fail with a status code or 'network' / 'timeout'."""
        self.failures[(method, path)] = outcome

    def calls(self, method: str, path: str) -> int:
        return self.requests.count((method, path))

    def _recompute(self, trip: dict):
        for item in trip["selectedActivities"]:
            item["subtotal"] = item["unitPrice"] * item["durationValue"] * item["quantity"]
        trip["totalCost"] = sum(item["subtotal"] for item in trip["selectedActivities"])
        start = date.fromisoformat(trip["startDate"])
        trip["endDate"] = (start + timedelta(days=trip["durationDays"] - 1)).isoformat()

    def _apply_payload(self, trip: dict, payload: dict):
        trip["cityId"] = payload["cityId"]
        trip["startDate"] = payload["startDate"]
        trip["durationDays"] = payload["durationDays"]
        trip["selectedActivities"] = [
            {
                "activityId": a["activityId"],
                "activityName": a.get("activityName", ""),
                "durationType": a["durationType"],
                "durationValue": a["durationValue"],
                "quantity": a["quantity"],
                "unitPrice": a.get("unitPrice", 0.0),
                "subtotal": 0.0,
            }
            for a in payload["selectedActivities"]
        ]
        self._recompute(trip)

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path.removeprefix("/api/v1")
        self.requests.append((method, path))

        outcome = self.failures.pop((method, path), None)
        if outcome == "network":
            raise httpx.ConnectError("connection refused", request=request)
        if outcome == "timeout":
            raise httpx.ReadTimeout("timed out", request=request)
        if isinstance(outcome, int):
            return httpx.Response(outcome, json={"message": "Invalid activity id"})

        parts = path.strip("/").split("/")
        payload = json.loads(request.content) if request.content else None

        if parts == ["trips"] and method == "GET":
            return httpx.Response(200, json=list(self.trips.values()))
        if parts == ["trips"] and method == "POST":
            trip_id = f"trip-{self._next_id}"
            self._next_id += 1
            trip = make_trip(trip_id, activities=[])
            self._apply_payload(trip, payload)
            self.trips[trip_id] = trip
            return httpx.Response(201, json=trip)
        if parts == ["trips", "preview"] and method == "POST":
            trip = make_trip("preview", activities=[])
            self._apply_payload(trip, payload)
            subtotal = trip["totalCost"]
            return httpx.Response(200, json={
                "cityName": "Lisbon",
                "countryName": "Portugal",
                "startDate": trip["startDate"],
                "endDate": trip["endDate"],
                "durationDays": trip["durationDays"],
                "activities": [],
                "subtotal": subtotal,
                "taxes": round(subtotal * 0.1),
                "serviceFee": round(subtotal * 0.05),
                "totalPrice": subtotal + round(subtotal * 0.1) + round(subtotal * 0.05),
            })

        trip = self.trips.get(parts[1]) if len(parts) >= 2 else None
        if trip is None:
            return httpx.Response(404, json={"message": "Trip not found"})

        if len(parts) == 2 and method == "GET":
            return httpx.Response(200, json=trip)
        if len(parts) == 2 and method == "PUT":
            self._apply_payload(trip, payload)
            return httpx.Response(200, json=trip)
        if parts[2:] == ["start"]:
            trip["status"] = "ONGOING"
            return httpx.Response(200, json=trip)
        if parts[2:] == ["complete"]:
            trip["status"] = "COMPLETED"
            return httpx.Response(200, json=trip)
        if parts[2:] == ["cancel"]:
            trip["status"] = "CANCELLED"
            if self.cancel_returns_body:
                return httpx.Response(200, json=trip)
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def fake_service() -> FakeTripsService:
    return FakeTripsService()


@pytest.fixture
def trips_client(fake_service) -> TripsClient:
    return TripsClient(
        base_url=BASE_URL,
        timeout=5,
        headers={},
        transport=httpx.MockTransport(fake_service.handler),
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 15, 9, 30, tzinfo=timezone.utc))
