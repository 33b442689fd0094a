"""Plan domain entities: calendar-day keys, per-day meal slots and the rolling plan window."""
import re
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from kondate.utilities.constants import ISO_DATE_FORMAT, SLOTS

# A bare date, or a date followed by a "T" or space and a time part
_DATE_KEY_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})(?:[T ]\d.*)?\Z")


def to_date_key(value) -> str:
    """Normalize a date-like value to its canonical ``YYYY-MM-DD`` key.

    Accepts ``date``/``datetime`` objects, ISO date strings and ISO timestamp
    strings (the time part is discarded). Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date().strftime(ISO_DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(ISO_DATE_FORMAT)
    if isinstance(value, str):
        match = _DATE_KEY_PATTERN.match(value.strip())
        if match:
            try:
                return datetime.strptime(match.group(1), ISO_DATE_FORMAT).date().strftime(ISO_DATE_FORMAT)
            except ValueError:
                pass
    raise ValueError(f"Not a calendar date: {value!r}")


def is_date_key(value) -> bool:
    try:
        to_date_key(value)
    except ValueError:
        return False
    return True


def parse_date_key(key: str) -> date:
    return datetime.strptime(to_date_key(key), ISO_DATE_FORMAT).date()


def add_days(key: str, days: int) -> str:
    return (parse_date_key(key) + timedelta(days=days)).strftime(ISO_DATE_FORMAT)


class DaySlots:
    """Free-text breakfast / lunch / dinner entries for one day. Missing means empty."""

    def __init__(self, breakfast: Optional[str] = "", lunch: Optional[str] = "", dinner: Optional[str] = ""):
        self.breakfast = breakfast or ""
        self.lunch = lunch or ""
        self.dinner = dinner or ""

    @staticmethod
    def from_dict(data) -> "DaySlots":
        '''Creates DaySlots from a dictionary. Ignores unknown keys and non-string values.'''
        d = data if isinstance(data, dict) else {}
        values = {}
        for slot in SLOTS:
            v = d.get(slot)
            values[slot] = v if isinstance(v, str) else ""
        return DaySlots(**values)

    def to_dict(self) -> Dict[str, str]:
        return {slot: getattr(self, slot) for slot in SLOTS}

    def is_empty(self) -> bool:
        return not any(getattr(self, slot).strip() for slot in SLOTS)

    def copy(self) -> "DaySlots":
        return DaySlots(self.breakfast, self.lunch, self.dinner)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DaySlots):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.breakfast, self.lunch, self.dinner))

    def __str__(self) -> str:
        return f"DaySlots(breakfast={self.breakfast!r}, lunch={self.lunch!r}, dinner={self.dinner!r})"

    __repr__ = __str__


class PlanWindow:
    """Ordered mapping of DateKey -> DaySlots.

    Keys are kept in insertion order; a migrated window holds exactly the
    consecutive days starting at "today".
    """

    def __init__(self, days: Optional[Iterable[Tuple[str, DaySlots]]] = None):
        self._days: Dict[str, DaySlots] = {}
        for key, slots in (days or []):
            self[key] = slots

    def __setitem__(self, key, slots: DaySlots) -> None:
        if not isinstance(slots, DaySlots):
            slots = DaySlots.from_dict(slots)
        self._days[to_date_key(key)] = slots

    def __getitem__(self, key) -> DaySlots:
        return self._days[to_date_key(key)]

    def __contains__(self, key) -> bool:
        try:
            return to_date_key(key) in self._days
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._days)

    def __len__(self) -> int:
        return len(self._days)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlanWindow):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def keys(self) -> List[str]:
        return list(self._days.keys())

    def items(self) -> List[Tuple[str, DaySlots]]:
        return list(self._days.items())

    def get(self, key, default: Optional[DaySlots] = None) -> Optional[DaySlots]:
        try:
            return self._days.get(to_date_key(key), default)
        except ValueError:
            return default

    @staticmethod
    def from_dict(data) -> "PlanWindow":
        '''Builds a window from a ``{DateKey: slots}`` mapping, skipping keys that are not dates.'''
        window = PlanWindow()
        if not isinstance(data, dict):
            return window
        for key in sorted(k for k in data if is_date_key(k)):
            window[key] = DaySlots.from_dict(data[key])
        return window

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {key: slots.to_dict() for key, slots in self._days.items()}

    def __str__(self) -> str:
        return f"PlanWindow({', '.join(self._days)})"

    __repr__ = __str__
