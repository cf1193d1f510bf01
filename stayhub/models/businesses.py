"""SQLAlchemy models for tenants and the category-to-module configuration."""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from stayhub.models.base import Base
from stayhub.models.enums import BusinessStatus, SubscriptionPlan, SystemModule, stored_as_value
from stayhub.utils.datetime import utc_now


class Business(Base):
    """
    ORM model for a hospitality tenant (hotel, homestay, kost, ...).

    The category decides which functional modules apply; the subscription
    plan decides unit quota and platform commission. ``commission_rate`` and
    ``service_fee`` are optional per-tenant overrides of the plan and
    platform defaults.
    """

    __tablename__ = "businesses"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(String(64), nullable=True, index=True)
    category = Column(String(64), nullable=False, index=True)
    subscription = Column(
        stored_as_value(SubscriptionPlan),
        nullable=False,
        default=SubscriptionPlan.BASIC,
    )
    subscription_expiry = Column(Date, nullable=True)
    is_trial = Column(Boolean, nullable=False, default=False)
    status = Column(
        stored_as_value(BusinessStatus),
        nullable=False,
        default=BusinessStatus.PENDING,
    )
    commission_rate = Column(Numeric(5, 4), nullable=True)
    service_fee = Column(Numeric(14, 2), nullable=True)
    penalty_count = Column(Integer, nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_featured_requested = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    units = relationship("Unit", back_populates="business", order_by="Unit.id")


class CategoryModule(Base):
    """One enabled module for one business category, editable by the platform admin."""

    __tablename__ = "category_modules"

    category = Column(String(64), primary_key=True)
    module = Column(stored_as_value(SystemModule), primary_key=True)
