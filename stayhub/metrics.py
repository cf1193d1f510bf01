"""
Prometheus metrics for the reservation engine.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from stayhub.metrics import booking_transitions
    >>> booking_transitions.labels(action="approve", result="ok").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

from stayhub.services.locks import held_lock_count

# =============================================================================
# Booking Metrics
# =============================================================================

bookings_created = Counter(
    "stayhub_bookings_created_total",
    "Total number of bookings created",
    ["channel"],
)
"""
Counter for created bookings.

Labels:
    channel: guest (self-service, starts PENDING) or walk_in (desk, starts CONFIRMED)
"""

booking_transitions = Counter(
    "stayhub_booking_transitions_total",
    "Total booking lifecycle actions attempted",
    ["action", "result"],
)
"""
Counter for lifecycle actions.

Labels:
    action: approve, reject, cancel, check_in, check_out, reschedule
    result: ok, or rejected when the state machine refused the action
"""

# =============================================================================
# Pricing Metrics
# =============================================================================

promotions_applied = Counter(
    "stayhub_promotions_applied_total",
    "Total promotion codes applied to bookings",
    ["type"],
)
"""
Counter for applied promotions.

Labels:
    type: percentage or fixed
"""

quote_duration = Histogram(
    "stayhub_quote_duration_seconds",
    "Time spent computing a price quote in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, float("inf")),
)

# =============================================================================
# Ledger Metrics
# =============================================================================

commission_settled = Counter(
    "stayhub_commission_settled_rupiah_total",
    "Total platform commission recorded in the ledger, in Rupiah",
)

# =============================================================================
# Concurrency Metrics
# =============================================================================

entity_locks_in_use = Gauge(
    "stayhub_entity_locks_in_use",
    "Entity locks currently held or awaited in this process",
)
entity_locks_in_use.set_function(held_lock_count)
