"""
Unit tests for FastAPI dependency injection.
"""

from __future__ import annotations

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from stayhub.db.engine import SessionLocal
from stayhub.dependencies import get_session_factory


@pytest.mark.unit
def test_default_factory_is_application_session_factory() -> None:
    assert get_session_factory() is SessionLocal


@pytest.mark.unit
def test_factory_can_be_overridden(session_factory: sessionmaker) -> None:
    app = FastAPI()

    @app.get("/select-one")
    def select_one(factory: sessionmaker = Depends(get_session_factory)) -> dict[str, int]:
        with factory() as session:
            return {"value": session.execute(text("SELECT 1")).scalar_one()}

    app.dependency_overrides[get_session_factory] = lambda: session_factory

    response = TestClient(app).get("/select-one")

    assert response.status_code == 200
    assert response.json() == {"value": 1}
