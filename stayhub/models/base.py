from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Tenants, units, pricing rules, promotions, bookings, ledger entries and
    audit rows all share this metadata so a single ``create_all`` or Alembic
    revision covers the whole marketplace schema.
    """

    pass
