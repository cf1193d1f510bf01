"""SQLAlchemy models for dynamic pricing rules and promotion codes."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)

from stayhub.models.base import Base
from stayhub.models.enums import AdjustmentType, RuleScope, stored_as_value


class PricingRule(Base):
    """
    Dynamic pricing rule owned by one business.

    The autoincrement ``id`` doubles as insertion order, which is the order
    rules are accumulated in when a stay is priced.
    """

    __tablename__ = "pricing_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(
        String(64), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    scope = Column(stored_as_value(RuleScope), nullable=False)
    adjustment_type = Column(stored_as_value(AdjustmentType), nullable=False)
    value = Column(Numeric(14, 2), nullable=False)  # signed
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)


class Promotion(Base):
    """Voucher code a business hands out; applied explicitly to one booking."""

    __tablename__ = "promotions"
    __table_args__ = (UniqueConstraint("business_id", "code", name="uq_promotions_business_code"),)

    id = Column(String(64), primary_key=True)
    business_id = Column(
        String(64), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    code = Column(String(64), nullable=False, index=True)
    type = Column(stored_as_value(AdjustmentType), nullable=False)
    discount_value = Column(Numeric(14, 2), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=True)
