"""ArchiveRecord domain entity: one day's meals after the day has left the plan window."""
from typing import Optional

from kondate.domain.Plan import DaySlots, to_date_key


def archive_id(plan_id: str, date_key: str) -> str:
    """Deterministic identifier so archiving the same day twice targets the same document."""
    return f"archive-{plan_id}-{to_date_key(date_key)}"


class ArchiveRecord:
    __slots__ = ("plan_id", "date_key", "slots", "saved_at")

    def __init__(self, date_key: str, slots: DaySlots, plan_id: Optional[str] = None, saved_at: Optional[str] = None):
        object.__setattr__(self, "date_key", to_date_key(date_key))
        object.__setattr__(self, "slots", slots.copy() if isinstance(slots, DaySlots) else DaySlots.from_dict(slots))
        object.__setattr__(self, "plan_id", plan_id)
        object.__setattr__(self, "saved_at", saved_at)

    def __setattr__(self, name, value):
        raise AttributeError("ArchiveRecord is immutable")

    @property
    def id(self) -> Optional[str]:
        if not self.plan_id:
            return None
        return archive_id(self.plan_id, self.date_key)

    @staticmethod
    def from_dict(data) -> "ArchiveRecord":
        d = data if isinstance(data, dict) else {}
        return ArchiveRecord(
            d.get("date", ""),
            DaySlots.from_dict(d.get("meals")),
            plan_id=d.get("planId"),
            saved_at=d.get("savedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "planId": self.plan_id,
            "date": self.date_key,
            "meals": self.slots.to_dict(),
            "savedAt": self.saved_at,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, ArchiveRecord):
            return NotImplemented
        return (self.plan_id, self.date_key, self.slots) == (other.plan_id, other.date_key, other.slots)

    def __hash__(self):
        return hash((self.plan_id, self.date_key, self.slots))

    def __str__(self) -> str:
        return f"ArchiveRecord({self.plan_id}, {self.date_key}, {self.slots})"

    __repr__ = __str__
