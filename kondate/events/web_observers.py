"""Web-facing observers for planner events.

Subscribes to the GLOBAL_EVENT_BUS for status notices and window shifts and
keeps a small in-memory ring buffer the browser polls to show status
messages without a page reload.

  * Each entry gets an auto-increment id (cursor); clients ask only for
    newer entries with since=<last_id_seen>.
  * Entries carry the plan id so a client only sees its own plan's notices.
  * STATUS_BUFFER_SIZE caps memory use. The buffer is per process.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock

from kondate.infra.Document_Store import utc_timestamp
from kondate.utilities.config import STATUS_BUFFER_SIZE
from kondate.utilities.constants import NOTICE_MESSAGES
from .Event_Bus import GLOBAL_EVENT_BUS, STATUS_NOTICE, PLAN_SHIFTED

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
_started = False


def _append(entry: Dict[str, Any]) -> None:
    global _next_id
    with _lock:
        entry['id'] = _next_id
        entry['ts'] = utc_timestamp()
        _events.append(entry)
        _next_id += 1
        if len(_events) > STATUS_BUFFER_SIZE:
            del _events[: len(_events) - STATUS_BUFFER_SIZE]


def _record_notice(event_name: str, payload: Any):
    if not isinstance(payload, dict):
        return
    _append({
        'type': event_name,
        'plan_id': payload.get('plan_id'),
        'code': payload.get('code'),
        'message': payload.get('message', ''),
        'level': payload.get('level', 'info'),
    })


def _record_shift(event_name: str, payload: Any):
    if not isinstance(payload, dict):
        return
    message, level = NOTICE_MESSAGES['shifted']
    _append({
        'type': event_name,
        'plan_id': payload.get('plan_id'),
        'code': 'shifted',
        'message': message,
        'level': level,
        'archived': list(payload.get('archived', [])),
        'window': list(payload.get('window', [])),
    })


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    GLOBAL_EVENT_BUS.subscribe(STATUS_NOTICE, _record_notice)
    GLOBAL_EVENT_BUS.subscribe(PLAN_SHIFTED, _record_shift)
    _started = True


def get_events(since: Optional[int] = None, plan_id: Optional[str] = None) -> Dict[str, Any]:
    """Return entries newer than 'since' (exclusive), optionally for one plan.

    Response includes next_cursor (largest id) so the client can poll with since=next_cursor.
    """
    with _lock:
        data = [e for e in _events if since is None or e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    if plan_id is not None:
        data = [e for e in data if e.get('plan_id') in (plan_id, None)]
    return {'events': data, 'next_cursor': next_cursor}


def clear():
    """Forget buffered entries (cursor keeps increasing)."""
    with _lock:
        _events.clear()


__all__ = ['start', 'get_events', 'clear']
