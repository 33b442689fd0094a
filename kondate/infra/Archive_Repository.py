"""Archive persistence: one document per (plan id, day) in ``dailyMealHistory``.

Records are append-only. Appending a record whose id already exists leaves
the stored record untouched, so re-running a migration never duplicates or
rewrites history.
"""
import logging
from typing import List, Optional

from kondate.domain.ArchiveRecord import ArchiveRecord, archive_id
from kondate.infra.Document_Store import DocumentStore, SERVER_TIMESTAMP
from kondate.utilities.constants import HISTORY_COLLECTION

logger = logging.getLogger(__name__)


class ArchiveRepository:
    def __init__(self, store: Optional[DocumentStore] = None):
        self.store = store or DocumentStore()

    @staticmethod
    def archive_id(plan_id: str, date_key: str) -> str:
        return archive_id(plan_id, date_key)

    def append(self, record: ArchiveRecord) -> bool:
        """Store ``record`` unless it was archived before. Returns True when written."""
        if not record.plan_id:
            raise ValueError("Archive records need a plan id")
        doc = record.to_dict()
        doc["savedAt"] = SERVER_TIMESTAMP
        written = self.store.create_if_absent(HISTORY_COLLECTION, record.id, doc)
        if written:
            logger.info("Archived %s", record.id)
        else:
            logger.debug("Archive %s already exists; skipping", record.id)
        return written

    def get(self, plan_id: str, date_key: str) -> Optional[ArchiveRecord]:
        doc = self.store.get(HISTORY_COLLECTION, archive_id(plan_id, date_key))
        return ArchiveRecord.from_dict(doc) if doc else None

    def list_for_plan(self, plan_id: str) -> List[ArchiveRecord]:
        """All archive records of ``plan_id``, newest day first."""
        records = []
        for doc_id, doc in self.store.list(HISTORY_COLLECTION):
            if doc.get("planId") != plan_id:
                continue
            try:
                records.append(ArchiveRecord.from_dict(doc))
            except ValueError as e:
                logger.warning("Skipping malformed archive document %s: %s", doc_id, e)
        records.sort(key=lambda r: r.date_key, reverse=True)
        return records
