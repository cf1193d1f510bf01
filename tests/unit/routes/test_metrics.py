"""
Unit tests for the metrics endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from stayhub.main import app
from stayhub.metrics import (
    booking_transitions,
    bookings_created,
    commission_settled,
    promotions_applied,
)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.mark.unit
def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


@pytest.mark.unit
def test_metrics_endpoint_contains_engine_metrics(client: TestClient) -> None:
    bookings_created.labels(channel="guest").inc()
    booking_transitions.labels(action="approve", result="ok").inc()
    commission_settled.inc(151250)
    promotions_applied.labels(type="percentage").inc()

    body = client.get("/metrics").text

    assert "stayhub_bookings_created_total" in body
    assert 'stayhub_booking_transitions_total{action="approve",result="ok"}' in body
    assert "stayhub_commission_settled_rupiah_total " in body
    assert 'stayhub_promotions_applied_total{type="percentage"}' in body
    assert "stayhub_quote_duration_seconds" in body
    assert "stayhub_entity_locks_in_use 0.0" in body


@pytest.mark.unit
def test_tenant_ids_never_become_metric_labels(client: TestClient) -> None:
    body = client.get("/metrics").text

    assert "business_id=" not in body
