"""Audit sink for plan changes.

Quick import:
    from weekplan.events.audit import log_change, MEAL_LOCKED, MEAL_UNLOCKED

``log_change`` is fire-and-forget: a failing sink is logged as a warning and
never aborts the mutation that produced the event.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Optional
from .Event_Bus import EventBus, GLOBAL_EVENT_BUS, PLAN_CHANGE

logger = logging.getLogger(__name__)

PLAN_CREATED = "PLAN_CREATED"
PLAN_STATUS_CHANGED = "PLAN_STATUS_CHANGED"
MEAL_ADDED = "MEAL_ADDED"
MEAL_REMOVED = "MEAL_REMOVED"
MEAL_RESTORED = "MEAL_RESTORED"
RECIPE_CHANGED = "RECIPE_CHANGED"
PORTIONS_CHANGED = "PORTIONS_CHANGED"
MEAL_LOCKED = "MEAL_LOCKED"
MEAL_UNLOCKED = "MEAL_UNLOCKED"
COMPONENT_ADDED = "COMPONENT_ADDED"
COMPONENT_REMOVED = "COMPONENT_REMOVED"
COMPONENT_UPDATED = "COMPONENT_UPDATED"
COMMENT_ADDED = "COMMENT_ADDED"
COMMENT_DELETED = "COMMENT_DELETED"
RECIPE_SAVED = "RECIPE_SAVED"
CUTOFF_CHANGED = "CUTOFF_CHANGED"
TEMPLATE_SWITCHED = "TEMPLATE_SWITCHED"


class AuditEvent:
    def __init__(self, weekly_plan_id: str, change_type: str, member_id: Optional[str] = None,
                 meal_id: Optional[str] = None, description: str = "",
                 old_value: Any = None, new_value: Any = None):
        self.weekly_plan_id = weekly_plan_id
        self.change_type = change_type
        self.member_id = member_id
        self.meal_id = meal_id
        self.description = description
        self.old_value = old_value
        self.new_value = new_value
        self.created_at = datetime.utcnow().isoformat() + 'Z'

    def __repr__(self) -> str:
        return f"AuditEvent({self.change_type}, plan={self.weekly_plan_id}, member={self.member_id})"

    def to_dict(self):
        return {
            "weekly_plan_id": self.weekly_plan_id,
            "meal_id": self.meal_id,
            "member_id": self.member_id,
            "change_type": self.change_type,
            "description": self.description,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "created_at": self.created_at,
        }


def log_change(event: AuditEvent, bus: Optional[EventBus] = None) -> None:
    """Publish an audit event; failures are logged and swallowed."""
    try:
        (bus or GLOBAL_EVENT_BUS).publish(PLAN_CHANGE, event)
    except Exception as e:
        logger.warning("Failed to log %s for plan %s: %s", event.change_type, event.weekly_plan_id, e)
