"""
Liveness and readiness checks.

``/ready`` only reports ready once the database answers and the category
module matrix has been loaded, since no booking can be created without it.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.orm import sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.models.businesses import CategoryModule

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness check. Returns 200 while the process is serving.

    Example:
        >>> GET /health
        {"status": "ok"}
    """
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check(factory: sessionmaker = Depends(get_session_factory)) -> JSONResponse:
    """
    Readiness check.

    Returns 503 while the database is unreachable or the module matrix is empty.

    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok", "category_modules": "ok"}}
    """
    checks: dict[str, str] = {}
    try:
        with factory() as session:
            session.execute(text("SELECT 1"))
            checks["database"] = "ok"
            rows = session.execute(select(func.count()).select_from(CategoryModule)).scalar_one()
            checks["category_modules"] = "ok" if rows else "empty"
    except Exception as e:
        logger.error("readiness_check_failed", reason="database_not_accessible", error=str(e))
        checks["database"] = "failed"

    if all(value == "ok" for value in checks.values()) and "category_modules" in checks:
        return JSONResponse(content={"status": "ready", "checks": checks})

    return JSONResponse(status_code=503, content={"status": "not ready", "checks": checks})
