"""
Session helpers shared by the services and the HTTP layer.

Every engine operation is one unit of work: the service mutates ORM objects,
appends audit rows and commits once through ``commit_or_conflict``. A lost
optimistic-lock race surfaces as ``ConcurrentModification`` instead of a raw
SQLAlchemy error.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import structlog
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from stayhub.errors import ConcurrentModification

logger = structlog.get_logger(__name__)


def commit_or_conflict(session: Session, entity_type: str, entity_id: str) -> None:
    """
    Commit the session, translating version conflicts.

    Args:
        session: Session holding the pending change
        entity_type: Kind of entity being changed (for the error message)
        entity_id: Identifier of the entity being changed

    Raises:
        ConcurrentModification: if another writer committed first
    """
    try:
        session.commit()
    except StaleDataError:
        session.rollback()
        logger.warning("concurrent_modification", entity_type=entity_type, entity_id=entity_id)
        raise ConcurrentModification(
            f"{entity_type.capitalize()} {entity_id} was modified concurrently; reload and retry"
        )


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """
    Provide a session that is rolled back on error and always closed.

    Args:
        factory: Session factory; defaults to the application's SessionLocal
    """
    if factory is None:
        from stayhub.db.engine import SessionLocal

        factory = SessionLocal

    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
