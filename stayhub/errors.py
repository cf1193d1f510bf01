"""
Error taxonomy for the reservation engine.

Every error here is recoverable and caller-visible. Services raise them;
the HTTP layer maps them onto status codes through ``status_code`` and a
stable machine-readable ``code``.
"""

from __future__ import annotations


class StayHubError(Exception):
    """Base class for all engine errors."""

    status_code = 400
    code = "stayhub_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(StayHubError):
    status_code = 404
    code = "not_found"


class BusinessNotFound(NotFound):
    code = "business_not_found"

    def __init__(self, business_id: str) -> None:
        super().__init__(f"Business {business_id} not found")
        self.business_id = business_id


class UnitNotFound(NotFound):
    code = "unit_not_found"

    def __init__(self, unit_id: str) -> None:
        super().__init__(f"Unit {unit_id} not found")
        self.unit_id = unit_id


class BookingNotFound(NotFound):
    code = "booking_not_found"

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class PromotionNotFound(NotFound):
    code = "promotion_not_found"

    def __init__(self, promotion_code: str) -> None:
        super().__init__(f"Promotion {promotion_code} not found")
        self.promotion_code = promotion_code


class PricingRuleNotFound(NotFound):
    code = "pricing_rule_not_found"

    def __init__(self, rule_id: int) -> None:
        super().__init__(f"Pricing rule {rule_id} not found")
        self.rule_id = rule_id


class InvalidTransition(StayHubError):
    """A state machine guard was violated."""

    status_code = 409
    code = "invalid_transition"


class ConcurrentModification(StayHubError):
    """Another writer changed the entity between read and commit."""

    status_code = 409
    code = "concurrent_modification"


class InvalidDateRange(StayHubError):
    status_code = 422
    code = "invalid_date_range"


class QuotaExceeded(StayHubError):
    status_code = 422
    code = "quota_exceeded"


class InvalidPromotionScope(StayHubError):
    status_code = 422
    code = "invalid_promotion_scope"


class PromotionExpired(StayHubError):
    status_code = 422
    code = "promotion_expired"


class PromotionCodeTaken(StayHubError):
    status_code = 409
    code = "promotion_code_taken"


class PromotionAlreadyApplied(StayHubError):
    status_code = 409
    code = "promotion_already_applied"


class UnitUnavailable(StayHubError):
    status_code = 422
    code = "unit_unavailable"


class PaymentNotVerified(StayHubError):
    status_code = 422
    code = "payment_not_verified"


class ModuleNotEnabled(StayHubError):
    status_code = 422
    code = "module_not_enabled"
