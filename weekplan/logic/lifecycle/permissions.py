"""Permission rules for meal plan management."""
from datetime import date, datetime, time
from typing import Optional
from weekplan.utilities.constants import ELEVATED_ROLES


def can_edit_plan(role: str) -> bool:
    """Add/remove meals, change recipes, portions and components."""
    return role in ELEVATED_ROLES


def can_validate_plan(role: str) -> bool:
    return role in ELEVATED_ROLES


def can_lock_meal(role: str) -> bool:
    # Any family member may toggle a meal lock while the plan is not LOCKED
    return True


def can_edit_after_cutoff(role: str) -> bool:
    return role in ELEVATED_ROLES


def can_comment(role: str) -> bool:
    return True


def can_delete_comment(role: str, is_own_comment: bool) -> bool:
    return role in ELEVATED_ROLES or is_own_comment


def can_view_audit_log(member_can_view_audit_log: bool) -> bool:
    """Per-member flag, independent of role."""
    return bool(member_can_view_audit_log)


def cutoff_moment(cutoff_date: Optional[date], cutoff_time: Optional[str]) -> Optional[datetime]:
    if not cutoff_date or not cutoff_time:
        return None
    hours, minutes = (int(part) for part in cutoff_time.split(':')[:2])
    return datetime.combine(cutoff_date, time(hours, minutes))


def is_after_cutoff(cutoff_date: Optional[date], cutoff_time: Optional[str],
                    now: Optional[datetime] = None) -> bool:
    """True once both cutoff date and time are set and have passed."""
    moment = cutoff_moment(cutoff_date, cutoff_time)
    if moment is None:
        return False
    return (now or datetime.now()) > moment
