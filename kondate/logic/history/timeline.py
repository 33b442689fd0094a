"""Display helpers for archived days (history page)."""
from typing import Dict, List

from kondate.domain.ArchiveRecord import ArchiveRecord
from kondate.domain.Plan import parse_date_key
from kondate.utilities.constants import EMPTY_SLOT_LABEL, SLOTS, WEEKDAY_LABELS


def format_day(date_key: str) -> str:
    """``2024-06-11`` -> ``6/11 (Tue)``. Display only; storage keeps ISO keys."""
    d = parse_date_key(date_key)
    return f"{d.month}/{d.day} ({WEEKDAY_LABELS[d.weekday()]})"


def history_rows(records: List[ArchiveRecord]) -> List[Dict]:
    """Newest-first rows ready for the history template."""
    rows = []
    for record in sorted(records, key=lambda r: r.date_key, reverse=True):
        meals = record.slots.to_dict()
        rows.append({
            "date": record.date_key,
            "label": format_day(record.date_key),
            "meals": {slot: meals[slot] or EMPTY_SLOT_LABEL for slot in SLOTS},
            "saved_at": record.saved_at,
        })
    return rows
