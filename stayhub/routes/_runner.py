"""
Internal helpers for route handlers.

The engine is synchronous. Handlers hand it a unit of work through
``run_in_session``, which opens a session in a worker thread and bounds the
call with ``SERVICE_TIMEOUT_SECONDS``.
"""

from __future__ import annotations

import asyncio
from typing import Callable, TypeVar

import structlog
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from stayhub.config import SERVICE_TIMEOUT_SECONDS
from stayhub.db.session import session_scope
from stayhub.errors import StayHubError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def run_in_session(
    factory: sessionmaker,
    work: Callable[[Session], T],
    operation: str,
    timeout: float | None = None,
) -> T:
    """
    Run ``work(session)`` in a worker thread with a deadline.

    ``work`` should return plain data or response schemas; ORM objects are
    detached once the session closes.

    Args:
        factory: Session factory from the dependency
        work: Callable receiving an open session
        operation: Name used in logs
        timeout: Seconds before giving up, defaults to SERVICE_TIMEOUT_SECONDS

    Raises:
        StayHubError: engine errors pass through to the exception handler
        HTTPException: 504 on timeout, 422 on invalid input, 500 otherwise
    """

    def _call() -> T:
        with session_scope(factory) as session:
            return work(session)

    deadline = SERVICE_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        return await asyncio.wait_for(asyncio.to_thread(_call), timeout=deadline)
    except StayHubError:
        raise
    except asyncio.TimeoutError:
        logger.error("service_timeout", operation=operation, timeout=deadline)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=f"{operation} did not complete within {deadline:g}s",
        )
    except ValueError as e:
        logger.warning("invalid_request", operation=operation, error=str(e))
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except Exception as e:
        logger.exception("operation_failed", operation=operation, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


async def stayhub_error_handler(request: Request, exc: StayHubError) -> JSONResponse:
    """Render engine errors as ``{"error": code, "detail": message}``."""
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": exc.message})
