"""Sliding-window migration for the rolling meal plan.

The plan always covers ``WINDOW_DAYS`` consecutive calendar days starting at
today. When the calendar moves on, days that fell behind the window are
turned into archive records and the remaining days are carried over.

Rules:
  - A day strictly before today and outside the new window is archived.
  - A day present in both the old plan and the new window is copied verbatim.
  - A new-window day missing from the old plan starts with empty slots.
  - A day at or after today that is not in the new window (clock skew,
    manual edits) is dropped: not archived, not kept. It is reported in
    ``MigrationResult.dropped``.

``migrate`` performs no I/O; persisting the result is the caller's job
(see ``kondate.logic.window.service``).
"""
import logging
from typing import List, Optional

from kondate.domain.ArchiveRecord import ArchiveRecord
from kondate.domain.Plan import DaySlots, PlanWindow, add_days, to_date_key
from kondate.utilities.constants import WINDOW_DAYS

logger = logging.getLogger(__name__)


def compute_window(reference_date, days: int = WINDOW_DAYS) -> List[str]:
    """Return the DateKeys of the window starting at ``reference_date`` (inclusive)."""
    start = to_date_key(reference_date)
    return [add_days(start, offset) for offset in range(days)]


class MigrationResult:
    def __init__(self, archived: List[ArchiveRecord], new_plan: PlanWindow,
                 dropped: Optional[List[str]] = None, changed: bool = False, shifted: bool = False):
        self.archived = archived
        self.new_plan = new_plan
        self.dropped = dropped or []
        # changed: the stored plan needs rewriting. shifted: the window start moved forward.
        self.changed = changed
        self.shifted = shifted

    @property
    def archived_keys(self) -> List[str]:
        return [record.date_key for record in self.archived]

    def __str__(self) -> str:
        return (f"MigrationResult(archived={self.archived_keys}, window={self.new_plan.keys()}, "
                f"dropped={self.dropped}, changed={self.changed}, shifted={self.shifted})")

    __repr__ = __str__


def migrate(old_plan: PlanWindow, today, plan_id: Optional[str] = None) -> MigrationResult:
    """Move ``old_plan`` onto the window starting at ``today``.

    Args:
        old_plan: previously stored window (may be empty or hold stale keys)
        today: current DateKey (or any value ``to_date_key`` accepts)
        plan_id: optional identifier stamped on the archive records
    Returns:
        MigrationResult with the archive records (ascending date), the new
        window and the keys dropped as future anomalies.
    """
    today_key = to_date_key(today)
    new_keys = compute_window(today_key)
    window_keys = set(new_keys)

    archived: List[ArchiveRecord] = []
    dropped: List[str] = []
    old_keys = sorted(old_plan)
    for key in old_keys:
        if key in window_keys:
            continue
        # ISO keys compare chronologically as strings
        if key < today_key:
            archived.append(ArchiveRecord(key, old_plan[key], plan_id=plan_id))
        else:
            dropped.append(key)

    new_plan = PlanWindow()
    for key in new_keys:
        existing = old_plan.get(key)
        new_plan[key] = existing.copy() if existing is not None else DaySlots()

    changed = bool(archived or dropped) or new_plan.to_dict() != old_plan.to_dict()
    shifted = bool(old_keys) and old_keys[0] < new_keys[0]
    if dropped:
        logger.warning("Dropping plan days outside the window that are not in the past: %s (today=%s)",
                       dropped, today_key)
    if shifted:
        logger.info("Window moved to %s..%s: archived=%d dropped=%d",
                    new_keys[0], new_keys[-1], len(archived), len(dropped))
    return MigrationResult(archived, new_plan, dropped=dropped, changed=changed, shifted=shifted)


__all__ = ["compute_window", "migrate", "MigrationResult"]
