"""Business clock: "today" and timestamps in the fixed business timezone."""

import os
from datetime import date, datetime, timedelta, tzinfo, UTC
from typing import Optional

from dateutil import tz

DEFAULT_TIMEZONE = "Asia/Kolkata"


class BusinessClock:
    """Clock that reports calendar dates in a single business timezone.

    All "today" and "previous day" calculations go through this class so
    that server-local time never decides which day an entry belongs to.
    """

    def __init__(self, timezone: tzinfo):
        self.timezone = timezone

    def now(self) -> datetime:
        """Return the current UTC timestamp."""
        return datetime.now(UTC)

    def today(self) -> date:
        """Return the current calendar date in the business timezone."""
        return self.now().astimezone(self.timezone).date()

    def previous_day(self, day: date) -> date:
        return day - timedelta(days=1)

    def next_day(self, day: date) -> date:
        return day + timedelta(days=1)


class FixedClock(BusinessClock):
    """Clock frozen at a given instant, for tests and back-dated scripts."""

    def __init__(self, instant: datetime, timezone: Optional[tzinfo] = None):
        super().__init__(timezone or tz.gettz(DEFAULT_TIMEZONE))
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> None:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self.instant = self.instant + timedelta(**kwargs)


def create_business_clock(timezone_name: Optional[str] = None) -> BusinessClock:
    """Create a clock for the business timezone.

    Args:
        timezone_name: IANA timezone name. If None, checks TILLBOOK_TIMEZONE
            environment variable, then defaults to Asia/Kolkata

    Raises:
        ValueError: If the timezone name is unknown
    """
    if timezone_name is None:
        timezone_name = os.environ.get("TILLBOOK_TIMEZONE", DEFAULT_TIMEZONE)

    timezone = tz.gettz(timezone_name)
    if timezone is None:
        raise ValueError(f"Unknown timezone '{timezone_name}'")
    return BusinessClock(timezone)
