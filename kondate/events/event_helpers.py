"""Event helper utilities.

Helpers that publish planner events on the global bus with a consistent
payload shape. Route handlers and the migration service call these rather
than building payloads themselves.
"""
from __future__ import annotations
from typing import Iterable, Optional

from kondate.utilities.constants import NOTICE_MESSAGES
from .Event_Bus import (
    publish,
    PLAN_SAVED, PLAN_CLEARED, PLAN_SHIFTED, MEAL_CHANGED, STATUS_NOTICE,
)

__all__ = [
    'publish_plan_saved', 'publish_plan_cleared', 'publish_plan_shifted',
    'publish_meal_changed', 'publish_notice',
]


def publish_plan_saved(plan_id: str, days: Iterable[str]):
    publish(PLAN_SAVED, {'plan_id': plan_id, 'days': list(days)})


def publish_plan_cleared(plan_id: str):
    publish(PLAN_CLEARED, {'plan_id': plan_id})


def publish_plan_shifted(plan_id: str, archived: Iterable[str], dropped: Iterable[str], window: Iterable[str]):
    """Publish a plan.shifted event after a window migration was persisted."""
    publish(PLAN_SHIFTED, {
        'plan_id': plan_id,
        'archived': list(archived),
        'dropped': list(dropped),
        'window': list(window),
    })


def publish_meal_changed(user_id: str, meal_id: str, action: str):
    publish(MEAL_CHANGED, {'user_id': user_id, 'meal_id': meal_id, 'action': action})


def publish_notice(code: str, plan_id: Optional[str] = None, detail: Optional[str] = None):
    """Publish a user-facing status notice identified by a NOTICE_MESSAGES code."""
    message, level = NOTICE_MESSAGES.get(code, (code, 'info'))
    if detail:
        message = f"{message} ({detail})"
    publish(STATUS_NOTICE, {'plan_id': plan_id, 'code': code, 'message': message, 'level': level})
