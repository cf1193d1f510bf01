from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from stayhub.models.base import Base
from stayhub.models.enums import UnitStatus, stored_as_value


class Unit(Base):
    """
    ORM model for a rentable room or property instance.

    ``available`` is the public-availability flag shown on the marketplace.
    Status changes always re-derive it, so a blocked, dirty or maintenance
    unit is never bookable.
    """

    __tablename__ = "units"

    id = Column(String(64), primary_key=True)
    business_id = Column(
        String(64), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    type = Column(String(64), nullable=True)
    price = Column(Numeric(14, 2), nullable=False)
    capacity = Column(Integer, nullable=False, default=1)
    amenities = Column(JSON, nullable=False, default=list)
    status = Column(
        stored_as_value(UnitStatus),
        nullable=False,
        default=UnitStatus.READY,
    )
    available = Column(Boolean, nullable=False, default=True)
    check_in_policy = Column(Text, nullable=True)
    check_out_policy = Column(Text, nullable=True)
    cancellation_policy = Column(Text, nullable=True)

    business = relationship("Business", back_populates="units")
