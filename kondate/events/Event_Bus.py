"""Simple Event Bus / Observer implementation for planner notifications.

Event names used so far:
  plan.saved    -> payload {"plan_id": str, "days": [DateKey, ...]}
  plan.cleared  -> payload {"plan_id": str}
  plan.shifted  -> payload {"plan_id": str, "archived": [DateKey], "dropped": [DateKey], "window": [DateKey]}
  meal.changed  -> payload {"user_id": str, "meal_id": str, "action": "added"|"updated"|"deleted"}
  status.notice -> payload {"plan_id": str | None, "message": str, "level": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLAN_SAVED = "plan.saved"
PLAN_CLEARED = "plan.cleared"
PLAN_SHIFTED = "plan.shifted"
MEAL_CHANGED = "meal.changed"
STATUS_NOTICE = "status.notice"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'PLAN_SAVED', 'PLAN_CLEARED', 'PLAN_SHIFTED', 'MEAL_CHANGED', 'STATUS_NOTICE'
]
