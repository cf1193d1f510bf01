"""
Integration tests for the booking, unit, business and ledger endpoints.

Requests go through the real application with the session factory pointed at
a fresh in-memory database.
"""

from __future__ import annotations

import time
from decimal import Decimal
from typing import Any, Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.main import app
from stayhub.models.businesses import Business
from stayhub.models.pricing import PricingRule
from stayhub.models.units import Unit


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client: TestClient, unit: Unit, guest_id: str = "u-guest-1", **extra: Any) -> dict[str, Any]:
    response = client.post(
        "/bookings",
        json={
            "business_id": unit.business_id,
            "unit_id": unit.id,
            "guest_id": guest_id,
            "check_in": "2024-12-24",
            "check_out": "2024-12-26",
            **extra,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


IDENTITY = {"identity_number": "3174000000000001", "nationality": "ID", "phone": "+628111"}


@pytest.mark.integration
def test_full_stay_through_the_api(client: TestClient, deluxe: Unit) -> None:
    booking = _create(client, deluxe)
    booking_id = booking["id"]
    assert booking["status"] == "PENDING"
    assert Decimal(booking["total_price"]) == Decimal("3025000")

    assert client.post(f"/bookings/{booking_id}/transitions", json={"action": "approve"}).json()["status"] == "CONFIRMED"
    assert client.put(f"/bookings/{booking_id}/payment", json={"verified": True}).json()["verified_payment"] is True
    checked_in = client.post(
        f"/bookings/{booking_id}/transitions", json={"action": "check_in", "identity": IDENTITY}
    )
    assert checked_in.json()["status"] == "CHECKED_IN"
    completed = client.post(
        f"/bookings/{booking_id}/transitions", json={"action": "check_out", "damage_note": "None"}
    )
    assert completed.json()["status"] == "COMPLETED"

    settlement = client.post(f"/bookings/{booking_id}/settlement")
    assert settlement.status_code == 200
    assert Decimal(settlement.json()["amount"]) == Decimal("151250")
    assert client.post(f"/bookings/{booking_id}/settlement").json()["id"] == settlement.json()["id"]

    history = client.get(f"/bookings/{booking_id}/history").json()
    assert [entry["action"] for entry in history][:5] == ["create", "approve", "verify_payment", "check_in", "check_out"]

    ledger = client.get("/ledger", params={"business_id": deluxe.business_id}).json()
    assert Decimal(ledger["gtv"]) == Decimal("3025000")
    assert Decimal(ledger["platform_commission"]) == Decimal("151250")

    unit = client.get(f"/businesses/{deluxe.business_id}/units").json()[0]
    assert unit["status"] == "dirty"
    assert unit["available"] is False


@pytest.mark.integration
def test_invalid_transition_maps_to_409(client: TestClient, deluxe: Unit) -> None:
    booking = _create(client, deluxe)

    response = client.post(
        f"/bookings/{booking['id']}/transitions", json={"action": "check_in", "identity": IDENTITY}
    )

    assert response.status_code == 409
    assert response.json()["error"] == "invalid_transition"


@pytest.mark.integration
def test_unknown_action_is_a_validation_error(client: TestClient, deluxe: Unit) -> None:
    booking = _create(client, deluxe)

    response = client.post(f"/bookings/{booking['id']}/transitions", json={"action": "teleport"})

    assert response.status_code == 422


@pytest.mark.integration
def test_not_found_maps_to_404(client: TestClient) -> None:
    response = client.get("/bookings/BK-MISSING")

    assert response.status_code == 404
    assert response.json() == {"error": "booking_not_found", "detail": "Booking BK-MISSING not found"}


@pytest.mark.integration
def test_walk_in_via_api(client: TestClient, deluxe: Unit) -> None:
    booking = _create(client, deluxe, guest_id="u-walkin")

    assert booking["status"] == "CONFIRMED"
    assert booking["verified_payment"] is True


@pytest.mark.integration
def test_invalid_dates_map_to_422(client: TestClient, deluxe: Unit) -> None:
    response = client.post(
        "/bookings",
        json={
            "business_id": deluxe.business_id,
            "unit_id": deluxe.id,
            "guest_id": "g",
            "check_in": "2024-12-26",
            "check_out": "2024-12-24",
        },
    )

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_date_range"


@pytest.mark.integration
def test_quote_endpoint(client: TestClient, deluxe: Unit, weekend_surge: PricingRule) -> None:
    response = client.get(
        f"/units/{deluxe.id}/quote", params={"check_in": "2024-12-24", "check_out": "2024-12-27"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["nights"] == 3
    assert Decimal(data["room_total"]) == Decimal("4500000")
    assert Decimal(data["adjusted_total"]) == Decimal("5175000")
    assert Decimal(data["grand_total"]) == Decimal("5200000")
    assert data["adjustments"][0]["name"] == "Weekend Surge"


@pytest.mark.integration
def test_promotion_endpoint(client: TestClient, deluxe: Unit, make_promotion: Any) -> None:
    make_promotion("WELCOME10", deluxe.business_id, "10", start_date=None, end_date=None)
    booking = _create(client, deluxe)

    first = client.post(f"/bookings/{booking['id']}/promotion", json={"code": "WELCOME10"})
    second = client.post(f"/bookings/{booking['id']}/promotion", json={"code": "WELCOME10"})

    assert first.status_code == 200
    assert Decimal(first.json()["total_price"]) == Decimal("2722500")
    assert second.status_code == 409
    assert second.json()["error"] == "promotion_already_applied"


@pytest.mark.integration
def test_unit_and_business_endpoints(client: TestClient, hotel: Business) -> None:
    created = client.post(
        f"/businesses/{hotel.id}/units", json={"name": "Garden Villa", "price": "2500000", "capacity": 4}
    )
    assert created.status_code == 201
    unit_id = created.json()["id"]

    blocked = client.put(f"/units/{unit_id}/status", json={"status": "blocked"})
    assert blocked.json()["available"] is False

    entitlements = client.get(f"/businesses/{hotel.id}/entitlements").json()
    assert entitlements["plan"] == "Premium"
    assert entitlements["unit_quota"] is None
    assert "BOOKING" in entitlements["modules"]

    suspended = client.put(f"/businesses/{hotel.id}/status", json={"status": "suspended"})
    assert suspended.json()["status"] == "suspended"
    invalid = client.put(f"/businesses/{hotel.id}/status", json={"status": "rejected"})
    assert invalid.status_code == 409

    plan = client.put(f"/businesses/{hotel.id}/plan", json={"plan": "Pro"})
    assert plan.json()["subscription"] == "Pro"
    assert Decimal(client.get("/ledger").json()["subscription_revenue"]) == Decimal("499000")


@pytest.mark.integration
def test_slow_operation_times_out_with_504(client: TestClient, deluxe: Unit) -> None:
    booking = _create(client, deluxe)

    def slow(*args: Any, **kwargs: Any) -> None:
        time.sleep(0.5)

    with patch("stayhub.routes._runner.SERVICE_TIMEOUT_SECONDS", 0.05), patch(
        "stayhub.services.reservations.get_booking_or_raise", side_effect=slow
    ):
        response = client.get(f"/bookings/{booking['id']}")

    assert response.status_code == 504


@pytest.mark.integration
def test_unexpected_error_maps_to_500(client: TestClient) -> None:
    with patch("stayhub.services.reservations.get_booking_or_raise", side_effect=RuntimeError("boom")):
        response = client.get("/bookings/anything")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.mark.integration
def test_platform_charges_and_transaction_listing(client: TestClient, hotel: Business) -> None:
    created = client.post(
        "/ledger/charges", json={"business_id": hotel.id, "type": "ad_promotion", "amount": "250000"}
    )
    refused = client.post(
        "/ledger/charges", json={"business_id": hotel.id, "type": "commission", "amount": "1"}
    )

    assert created.status_code == 201
    assert refused.status_code == 422
    [tx] = client.get("/ledger/transactions", params={"business_id": hotel.id}).json()
    assert tx["type"] == "ad_promotion"
    assert Decimal(client.get("/ledger").json()["ad_revenue"]) == Decimal("250000")


@pytest.mark.integration
def test_owner_marketing_endpoints(client: TestClient, deluxe: Unit) -> None:
    business_id = deluxe.business_id
    created = client.post(
        f"/businesses/{business_id}/promotions",
        json={"code": "liburan25", "type": "percentage", "discount_value": "25"},
    )
    duplicate = client.post(
        f"/businesses/{business_id}/promotions",
        json={"code": "LIBURAN25", "type": "fixed", "discount_value": "1000"},
    )
    assert created.status_code == 201
    assert created.json()["code"] == "LIBURAN25"
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "promotion_code_taken"

    toggled = client.post(f"/promotions/{created.json()['id']}/toggle")
    assert toggled.json()["is_active"] is False
    assert client.get(f"/businesses/{business_id}/promotions", params={"active_only": True}).json() == []

    rule = client.post(
        f"/businesses/{business_id}/pricing-rules",
        json={"name": "Weekend Markup", "scope": "weekend", "adjustment_type": "fixed", "value": "150000"},
    )
    assert rule.status_code == 201
    quoted = client.get(f"/units/{deluxe.id}/quote", params={"check_in": "2024-12-24", "check_out": "2024-12-26"})
    assert Decimal(quoted.json()["adjusted_total"]) == Decimal("3150000")

    off = client.post(f"/pricing-rules/{rule.json()['id']}/toggle", json={"actor": "owner-1"})
    assert off.json()["is_active"] is False
    assert [r["is_active"] for r in client.get(f"/businesses/{business_id}/pricing-rules").json()] == [False]
    assert client.post("/pricing-rules/9999/toggle").status_code == 404


@pytest.mark.integration
def test_featured_listing_and_penalty_endpoints(client: TestClient, hotel: Business) -> None:
    requested = client.post(f"/businesses/{hotel.id}/featured-request")
    assert requested.json()["is_featured_requested"] is True
    assert [b["id"] for b in client.get("/featured-requests").json()] == [hotel.id]

    approved = client.put(f"/businesses/{hotel.id}/featured", json={"approve": True, "actor": "admin-1"})
    assert approved.json()["is_featured"] is True
    assert client.put(f"/businesses/{hotel.id}/featured", json={"approve": False}).status_code == 409
    assert Decimal(client.get("/ledger").json()["ad_revenue"]) == Decimal("250000")

    penalised = client.post(f"/businesses/{hotel.id}/penalties", json={"reason": "Fake review"})
    assert penalised.json()["penalty_count"] == 1
    assert client.post(f"/businesses/{hotel.id}/penalties", json={"reason": ""}).status_code == 422
