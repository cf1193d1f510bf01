from typing import Any, Optional

import structlog
from sqlalchemy.orm import Session

from stayhub.config import DEBUG
from stayhub.models.ledger import AuditLog

logger = structlog.get_logger(__name__)


def log_audit(
    session: Session,
    entity_type: str,
    entity_id: str,
    action: str,
    message: str,
    actor: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> AuditLog:
    """
    Append one audit entry to the session.

    The entry is committed together with the change it describes, so a
    rolled-back transition leaves no trail behind.

    Args:
        session: Active ORM session (the caller owns the commit)
        entity_type: Kind of entity, e.g. "booking"
        entity_id: Identifier of the entity
        action: Machine-readable action name, e.g. "approve"
        message: Human-readable summary
        actor: Staff/owner/admin id performing the action, if known
        details: Structured extra data (JSON-serialisable)
    """
    entry = AuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        actor=actor,
        message=message,
        details=details or {},
    )
    session.add(entry)

    if DEBUG:
        logger.debug("audit_appended", entity_type=entity_type, entity_id=entity_id, action=action)

    return entry
