"""Plan persistence: one document per plan id in the ``mealPlans`` collection."""
import logging
from typing import Optional

from kondate.domain.Plan import PlanWindow
from kondate.infra.Document_Store import DocumentStore, DocumentNotFound, SERVER_TIMESTAMP
from kondate.logic.window.legacy import to_plan_window
from kondate.utilities.constants import PLANS_COLLECTION, LAST_UPDATED_FIELD

logger = logging.getLogger(__name__)


class PlanRepository:
    def __init__(self, store: Optional[DocumentStore] = None):
        self.store = store or DocumentStore()

    def read_document(self, plan_id: str) -> Optional[dict]:
        """Raw stored document (either shape) or None."""
        return self.store.get(PLANS_COLLECTION, plan_id)

    def read(self, plan_id: str, fallback_start=None) -> PlanWindow:
        """Return the stored window, converting legacy documents. Raises DocumentNotFound."""
        doc = self.read_document(plan_id)
        if doc is None:
            raise DocumentNotFound(PLANS_COLLECTION, plan_id)
        return to_plan_window(doc, fallback_start=fallback_start)

    def write(self, plan_id: str, window: PlanWindow) -> dict:
        """Replace the plan document with ``window`` and stamp lastUpdated."""
        doc = window.to_dict()
        doc[LAST_UPDATED_FIELD] = SERVER_TIMESTAMP
        saved = self.store.set(PLANS_COLLECTION, plan_id, doc)
        logger.info("Saved plan %s (%s)", plan_id, ", ".join(window.keys()))
        return saved

    def last_updated(self, plan_id: str) -> Optional[str]:
        doc = self.read_document(plan_id)
        return doc.get(LAST_UPDATED_FIELD) if doc else None

    def delete(self, plan_id: str) -> bool:
        deleted = self.store.delete(PLANS_COLLECTION, plan_id)
        if deleted:
            logger.info("Deleted plan %s", plan_id)
        return deleted
