"""In-memory audit log fed by plan.change events.

Keeps a ring buffer of recent audit events so the web layer can show a plan's
activity feed. Each event gets an auto-increment integer id (cursor) so
clients can request only newer events (since=<last_id_seen>).

Thread-safety via a simple Lock; a MAX_EVENTS cap prevents unbounded growth.
Reads are gated by the member's ``can_view_audit_log`` flag in the state
machine, not here.
"""
from __future__ import annotations
import logging
from threading import Lock
from typing import Any, Dict, List, Optional

from .Event_Bus import EventBus, GLOBAL_EVENT_BUS, PLAN_CHANGE

logger = logging.getLogger(__name__)

MAX_EVENTS = 1000


class AuditLogRecorder:
    def __init__(self, bus: Optional[EventBus] = None, max_events: int = MAX_EVENTS):
        self.bus = bus or GLOBAL_EVENT_BUS
        self.max_events = max_events
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self._started = False

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        entry = payload.to_dict() if hasattr(payload, 'to_dict') else dict(payload or {})
        with self._lock:
            entry['id'] = self._next_id
            self._events.append(entry)
            self._next_id += 1
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def start(self):
        """Idempotent start: subscribe once."""
        if self._started:
            return
        self.bus.subscribe(PLAN_CHANGE, self._record)
        self._started = True

    def stop(self):
        self.bus.unsubscribe(PLAN_CHANGE, self._record)
        self._started = False

    def get_events(self, plan_id: Optional[str] = None, since: Optional[int] = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive), optionally for one plan.

        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            data = [e for e in self._events
                    if (plan_id is None or e.get('weekly_plan_id') == plan_id)
                    and (since is None or e['id'] > since)]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['AuditLogRecorder', 'MAX_EVENTS']
