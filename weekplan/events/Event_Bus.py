"""Simple Event Bus / Observer implementation for plan events.

Event names:
  plan.change    -> payload AuditEvent (every successful mutation)
  plan.generated -> payload {"plan_id", "family_id", "mode", "summary"}
  plan.validated -> payload {"plan_id", "family_id"} (shopping list / notifications)

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

PLAN_CHANGE = "plan.change"
PLAN_GENERATED = "plan.generated"
PLAN_VALIDATED = "plan.validated"


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
			except Exception as e:
				logger.warning("Error delivering %s to %r: %s", event_name, cb, e)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS',
	'PLAN_CHANGE', 'PLAN_GENERATED', 'PLAN_VALIDATED'
]
