"""Enumerations shared by the ORM models, services and API schemas."""

from enum import Enum

from sqlalchemy import Enum as SAEnum


class SubscriptionPlan(str, Enum):
    BASIC = "Basic"
    PRO = "Pro"
    PREMIUM = "Premium"


class BusinessStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


class SystemModule(str, Enum):
    BOOKING = "BOOKING"
    MONTHLY_RENTAL = "MONTHLY_RENTAL"
    SALES_PURCHASE = "SALES_PURCHASE"
    INVENTORY = "INVENTORY"
    PAYMENT = "PAYMENT"
    TEAM = "TEAM"
    MARKETING = "MARKETING"
    REVIEWS = "REVIEWS"


class UnitStatus(str, Enum):
    READY = "ready"
    CLEANING = "cleaning"
    DIRTY = "dirty"
    MAINTENANCE = "maintenance"
    BLOCKED = "blocked"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AdjustmentType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class RuleScope(str, Enum):
    WEEKEND = "weekend"
    SEASONAL = "seasonal"


class TransactionType(str, Enum):
    COMMISSION = "commission"
    SUBSCRIPTION = "subscription"
    AD_PROMOTION = "ad_promotion"


def stored_as_value(enum_cls: type[Enum]) -> SAEnum:
    """Column type persisting an enum by its value rather than its member name."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )
