"""UTC date and time utilities."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    All persisted timestamps (booking creation, ledger entries, audit rows)
    go through this helper so they are comparable across tenants.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """
    Return the current calendar date in UTC.

    Used as the default "as of" date for promotion validity windows and
    subscription expiry checks.
    """
    return utc_now().date()
