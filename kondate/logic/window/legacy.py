"""Adapters between stored plan document shapes and ``PlanWindow``.

Two shapes exist in storage:

  date_keyed  -> { "2024-06-11": {breakfast, lunch, dinner}, ..., "lastUpdated": ts }
  legacy      -> { "dates": {"day1": d, "day2": d, "day3": d},
                   "day1": {...}, "day2": {...}, "day3": {...}, "lastUpdated": ts }

Legacy documents are converted before migration so the migrator only ever
sees date keys.
"""
import logging
from typing import Optional

from kondate.domain.Plan import DaySlots, PlanWindow, add_days, is_date_key, to_date_key
from kondate.utilities.constants import LEGACY_DAY_LABELS

logger = logging.getLogger(__name__)

LEGACY = "legacy"
DATE_KEYED = "date_keyed"


def detect_shape(doc) -> str:
    if isinstance(doc, dict):
        if isinstance(doc.get("dates"), dict) or any(label in doc for label in LEGACY_DAY_LABELS):
            return LEGACY
    return DATE_KEYED


def _legacy_dates(doc: dict, fallback_start) -> list:
    dates = doc.get("dates") if isinstance(doc.get("dates"), dict) else {}
    keys = []
    for label in LEGACY_DAY_LABELS:
        raw = dates.get(label)
        keys.append(to_date_key(raw) if is_date_key(raw) else None)

    # Fill gaps from the first known date, then from the caller's start day
    anchor_index = next((i for i, k in enumerate(keys) if k is not None), None)
    if anchor_index is None:
        if fallback_start is None:
            return []
        anchor_index, keys[0] = 0, to_date_key(fallback_start)
    anchor = keys[anchor_index]
    return [k if k is not None else add_days(anchor, i - anchor_index) for i, k in enumerate(keys)]


def normalize(legacy_doc, fallback_start=None) -> PlanWindow:
    """Convert a fixed-label (day1/day2/day3) document into a date-keyed window.

    Missing slot fields become empty strings. Missing dates are derived from
    the first known date; with no usable dates ``fallback_start`` is taken as
    day1. Without dates or a fallback an empty window is returned.
    """
    doc = legacy_doc if isinstance(legacy_doc, dict) else {}
    keys = _legacy_dates(doc, fallback_start)
    if not keys:
        logger.warning("Legacy plan has no dates and no fallback start; treating it as empty")
        return PlanWindow()
    window = PlanWindow()
    for label, key in zip(LEGACY_DAY_LABELS, keys):
        if key in window:
            continue
        window[key] = DaySlots.from_dict(doc.get(label))
    return window


def to_plan_window(doc, fallback_start=None) -> PlanWindow:
    """Return the date-keyed window for a stored document of either shape."""
    if doc is None:
        return PlanWindow()
    if detect_shape(doc) == LEGACY:
        logger.info("Converting legacy day1/day2/day3 plan document")
        return normalize(doc, fallback_start=fallback_start)
    return PlanWindow.from_dict(doc)


__all__ = ["LEGACY", "DATE_KEYED", "detect_shape", "normalize", "to_plan_window"]
