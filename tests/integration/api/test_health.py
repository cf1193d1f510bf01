"""
Integration tests for health and readiness endpoints.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.main import app


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.integration
def test_health_endpoint_returns_ok(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
def test_ready_when_database_and_modules_loaded(client: TestClient) -> None:
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ready",
        "checks": {"database": "ok", "category_modules": "ok"},
    }


@pytest.mark.integration
def test_not_ready_without_category_modules(client: TestClient, session_factory: sessionmaker) -> None:
    with session_factory() as session:
        session.execute(text("DELETE FROM category_modules"))
        session.commit()

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["category_modules"] == "empty"


@pytest.mark.integration
def test_not_ready_when_database_unreachable(client: TestClient) -> None:
    broken = MagicMock(side_effect=RuntimeError("connection refused"))
    app.dependency_overrides[get_session_factory] = lambda: broken

    response = client.get("/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not ready"
    assert data["checks"]["database"] == "failed"
