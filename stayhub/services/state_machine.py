"""
Reservation lifecycle rules.

Pure functions over ``BookingStatus``: no session, no side effects. The
reservation service asks this module where an action leads and handles the
persistence and the side effects of getting there.

    PENDING -> CONFIRMED -> CHECKED_IN -> COMPLETED
       |           |
       +-----------+--> CANCELLED

COMPLETED and CANCELLED are terminal.
"""

from __future__ import annotations

from enum import Enum

from stayhub.errors import InvalidTransition
from stayhub.models.enums import BookingStatus


class BookingAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    RESCHEDULE = "reschedule"


TERMINAL_STATES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})

# action -> (allowed source states, target state); None keeps the current state
TRANSITIONS: dict[BookingAction, tuple[frozenset[BookingStatus], BookingStatus | None]] = {
    BookingAction.APPROVE: (frozenset({BookingStatus.PENDING}), BookingStatus.CONFIRMED),
    BookingAction.REJECT: (frozenset({BookingStatus.PENDING}), BookingStatus.CANCELLED),
    BookingAction.CANCEL: (
        frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
        BookingStatus.CANCELLED,
    ),
    BookingAction.CHECK_IN: (frozenset({BookingStatus.CONFIRMED}), BookingStatus.CHECKED_IN),
    BookingAction.CHECK_OUT: (frozenset({BookingStatus.CHECKED_IN}), BookingStatus.COMPLETED),
    BookingAction.RESCHEDULE: (frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}), None),
}


def is_terminal(status: BookingStatus) -> bool:
    return status in TERMINAL_STATES


def allowed_actions(status: BookingStatus) -> list[BookingAction]:
    """Actions that may be attempted from ``status``, in declaration order."""
    return [action for action, (sources, _) in TRANSITIONS.items() if status in sources]


def next_status(status: BookingStatus, action: BookingAction) -> BookingStatus:
    """
    Resolve the state an action leads to.

    Args:
        status: Current booking state
        action: Requested action

    Returns:
        BookingStatus: the target state (unchanged for reschedule)

    Raises:
        InvalidTransition: if the action is not allowed from ``status``
    """
    sources, target = TRANSITIONS[action]
    if status not in sources:
        allowed = ", ".join(s.value for s in sorted(sources, key=lambda s: s.value))
        raise InvalidTransition(
            f"Cannot {action.value} a booking in {status.value} (allowed from: {allowed})"
        )
    return status if target is None else target
