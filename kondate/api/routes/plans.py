from typing import Optional

from fastapi import APIRouter, HTTPException, Response

from kondate.api import context
from kondate.events.event_helpers import publish_notice, publish_plan_cleared, publish_plan_saved
from kondate.infra.Document_Store import StoreError
from kondate.infra.pdf_utils import generate_pdf_for_window
from kondate.logic.window.migrator import MigrationResult
from kondate.logic.window.service import roll_forward
from kondate.utilities.validators import PlanWindowInput
import logging

router = APIRouter(prefix="/api/plans", tags=["plans"])
logger = logging.getLogger(__name__)


def _plan_payload(plan_id: str, result: MigrationResult, found: bool) -> dict:
    return {
        "planId": plan_id,
        "found": found,
        "window": result.new_plan.keys(),
        "days": result.new_plan.to_dict(),
        "archived": result.archived_keys,
        "dropped": result.dropped,
        "shifted": found and result.shifted,
    }


def _store_failure(action: str, e: StoreError, plan_id: Optional[str] = None) -> HTTPException:
    logger.error("%s failed for plan %s: %s", action, plan_id, e)
    publish_notice("save_failed" if action != "load" else "load_failed", plan_id=plan_id)
    return HTTPException(status_code=503, detail=f"Storage error: {e}")


@router.get("/{plan_id}")
def get_plan(plan_id: str):
    """Return the plan window after rolling it forward to today."""
    plans, archives, _ = context.repositories()
    try:
        result = roll_forward(plan_id, plans, archives, context.get_clock())
        found = plans.read_document(plan_id) is not None
    except StoreError as e:
        raise _store_failure("load", e, plan_id)
    payload = _plan_payload(plan_id, result, found)
    payload["lastUpdated"] = plans.last_updated(plan_id) if found else None
    return payload


@router.put("/{plan_id}")
def save_plan(plan_id: str, payload: PlanWindowInput):
    """Replace the stored plan, then roll it forward so stale days go to history."""
    plans, archives, _ = context.repositories()
    window = payload.to_window()
    try:
        plans.write(plan_id, window)
        result = roll_forward(plan_id, plans, archives, context.get_clock())
    except StoreError as e:
        raise _store_failure("save", e, plan_id)
    publish_plan_saved(plan_id, result.new_plan.keys())
    publish_notice("saved", plan_id=plan_id, detail=f"ID: {plan_id}")
    return _plan_payload(plan_id, result, True)


@router.delete("/{plan_id}")
def clear_plan(plan_id: str):
    plans, _, _ = context.repositories()
    try:
        deleted = plans.delete(plan_id)
    except StoreError as e:
        raise _store_failure("clear", e, plan_id)
    publish_plan_cleared(plan_id)
    publish_notice("cleared", plan_id=plan_id)
    return {"success": True, "deleted": deleted}


@router.post("/{plan_id}/shift")
def shift_plan(plan_id: str):
    """Date-shift check (page focus). "Today" always comes from the server clock."""
    plans, archives, _ = context.repositories()
    try:
        result = roll_forward(plan_id, plans, archives, context.get_clock())
        found = plans.read_document(plan_id) is not None
    except StoreError as e:
        raise _store_failure("shift", e, plan_id)
    return _plan_payload(plan_id, result, found)


@router.get("/{plan_id}/history")
def plan_history(plan_id: str):
    """Archived days of this plan, newest first."""
    _, archives, _ = context.repositories()
    try:
        records = archives.list_for_plan(plan_id)
    except StoreError as e:
        raise _store_failure("load", e, plan_id)
    return {
        "planId": plan_id,
        "count": len(records),
        "entries": [dict(r.to_dict(), id=r.id) for r in records],
    }


@router.get("/{plan_id}/export_pdf")
def export_pdf(plan_id: str):
    plans, archives, _ = context.repositories()
    try:
        result = roll_forward(plan_id, plans, archives, context.get_clock())
    except StoreError as e:
        raise _store_failure("load", e, plan_id)
    pdf_bytes = generate_pdf_for_window(plan_id, result.new_plan)
    filename = f"meal_plan_{plan_id}_{result.new_plan.keys()[0]}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
