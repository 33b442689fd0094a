"""Clock collaborators supplying "today" as a DateKey."""
from datetime import date

from kondate.domain.Plan import to_date_key


class Clock:
    """System clock: the local calendar date of the server process."""

    def today(self) -> str:
        return to_date_key(date.today())


class FixedClock(Clock):
    """Always reports the same day. Used by tests and date overrides."""

    def __init__(self, day):
        self._today = to_date_key(day)

    def today(self) -> str:
        return self._today


SYSTEM_CLOCK = Clock()
