"""Roll a stored plan forward to today's window.

Order of effects:
  1. read the plan document (missing -> empty plan)
  2. convert legacy documents to date keys
  3. migrate against the clock's today
  4. append archive records
  5. write the new window (only when the migration changed something)
  6. publish plan.shifted when the window start moved forward

Archive records are written before the plan. If the process stops between
the two, the next run reads the old plan again, re-derives the same
archive ids (already stored, skipped) and completes the plan write.
"""
import logging
from typing import Optional

from kondate.events.event_helpers import publish_plan_shifted
from kondate.infra.Archive_Repository import ArchiveRepository
from kondate.infra.Plan_Repository import PlanRepository
from kondate.logic.window.clock import Clock, SYSTEM_CLOCK
from kondate.logic.window.legacy import LEGACY, detect_shape, to_plan_window
from kondate.logic.window.migrator import MigrationResult, migrate

logger = logging.getLogger(__name__)


def roll_forward(plan_id: str,
                 plans: Optional[PlanRepository] = None,
                 archives: Optional[ArchiveRepository] = None,
                 clock: Optional[Clock] = None) -> MigrationResult:
    plans = plans or PlanRepository()
    archives = archives or ArchiveRepository(plans.store)
    today = (clock or SYSTEM_CLOCK).today()

    doc = plans.read_document(plan_id)
    if doc is None:
        logger.info("No stored plan for %s; starting empty", plan_id)
    old_plan = to_plan_window(doc, fallback_start=today)
    result = migrate(old_plan, today, plan_id=plan_id)

    written = 0
    for record in result.archived:
        if archives.append(record):
            written += 1

    # Legacy documents are rewritten in the date-keyed shape even when the days match
    must_write = result.changed or (doc is not None and detect_shape(doc) == LEGACY)
    if doc is not None and must_write:
        plans.write(plan_id, result.new_plan)
    if doc is not None and result.shifted:
        publish_plan_shifted(plan_id, result.archived_keys, result.dropped, result.new_plan.keys())

    logger.debug("roll_forward %s today=%s archived=%d (new=%d) changed=%s shifted=%s",
                 plan_id, today, len(result.archived), written, result.changed, result.shifted)
    return result


__all__ = ["roll_forward"]
