"""
FastAPI dependency injection providers.

Route handlers receive a session factory rather than a session: the engine
work runs in a worker thread, and the session is opened and closed there.
Tests override ``get_session_factory`` with a factory bound to a fresh
in-memory database through ``app.dependency_overrides``.
"""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from stayhub.db.engine import SessionLocal


def get_session_factory() -> sessionmaker:
    """
    Provide the application's session factory.

    Example:
        >>> @router.get("/bookings/{booking_id}")
        >>> async def read_booking(
        ...     booking_id: str,
        ...     factory: sessionmaker = Depends(get_session_factory),
        ... ):
        ...     ...

    Testing Example:
        >>> app.dependency_overrides[get_session_factory] = lambda: test_factory
    """
    return SessionLocal
