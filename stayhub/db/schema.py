"""Schema bootstrap for the in-process store and fresh databases."""

import structlog
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from stayhub.models.base import Base
from stayhub.models.businesses import Business, CategoryModule  # noqa: F401
from stayhub.models.bookings import Booking  # noqa: F401
from stayhub.models.enums import SystemModule
from stayhub.models.ledger import AuditLog, Transaction  # noqa: F401
from stayhub.models.pricing import PricingRule, Promotion  # noqa: F401
from stayhub.models.units import Unit  # noqa: F401

logger = structlog.get_logger(__name__)

DEFAULT_CATEGORY_MODULES: dict[str, list[SystemModule]] = {
    "Hotel": [
        SystemModule.BOOKING,
        SystemModule.INVENTORY,
        SystemModule.PAYMENT,
        SystemModule.TEAM,
        SystemModule.MARKETING,
        SystemModule.REVIEWS,
    ],
    "Homestay": [
        SystemModule.BOOKING,
        SystemModule.INVENTORY,
        SystemModule.PAYMENT,
        SystemModule.REVIEWS,
    ],
    "Kost": [
        SystemModule.MONTHLY_RENTAL,
        SystemModule.INVENTORY,
        SystemModule.PAYMENT,
        SystemModule.REVIEWS,
    ],
    "Rental": [SystemModule.BOOKING, SystemModule.PAYMENT, SystemModule.REVIEWS],
    "Property Sales": [SystemModule.SALES_PURCHASE, SystemModule.REVIEWS],
}


def init_db(engine: Engine) -> None:
    """
    Create all tables and load the default category module matrix.

    Existing category rows are left untouched so admin edits survive a
    restart against a persistent database.

    Args:
        engine: SQLAlchemy engine to create the schema on
    """
    Base.metadata.create_all(engine)

    with Session(engine) as session, session.begin():
        if session.execute(select(CategoryModule).limit(1)).first() is not None:
            return
        session.add_all(
            CategoryModule(category=category, module=module)
            for category, modules in DEFAULT_CATEGORY_MODULES.items()
            for module in modules
        )

    logger.info("schema_initialized", categories=len(DEFAULT_CATEGORY_MODULES))
