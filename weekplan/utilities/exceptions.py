"""Error taxonomy for plan generation and plan/meal lifecycle operations.

Every error carries a machine-readable ``code`` so clients can render a
precise message, and an HTTP-equivalent ``status`` used by the API layer.
"""
from typing import Optional


class WeekPlanError(Exception):
    code = "ERROR"
    status = 400

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self):
        return {"status": "error", "code": self.code, "message": self.message}


# --- Generation-time (non-fatal per slot) ---

class NoCompliantCandidates(WeekPlanError):
    code = "NO_COMPLIANT_CANDIDATES"
    status = 422


class NoRecipesAvailable(WeekPlanError):
    code = "NO_RECIPES_AVAILABLE"
    status = 422


class InsufficientComponents(WeekPlanError):
    code = "INSUFFICIENT_COMPONENTS"
    status = 422


# --- Mutation-time (fatal to the single call) ---

class Unauthorized(WeekPlanError):
    code = "UNAUTHORIZED"
    status = 403


class NotFound(WeekPlanError):
    code = "NOT_FOUND"
    status = 404


class PlanLocked(WeekPlanError):
    """Plan status forbids the change (``PLAN_LOCKED`` or ``PLAN_NOT_DRAFT``)."""
    code = "PLAN_LOCKED"
    status = 409


class MealLocked(WeekPlanError):
    code = "MEAL_LOCKED"
    status = 409


class AfterCutoff(WeekPlanError):
    code = "AFTER_CUTOFF"
    status = 403


class InvalidJSONSchedule(WeekPlanError):
    code = "INVALID_JSON_SCHEDULE"
    status = 400


class InvalidPayload(WeekPlanError):
    code = "INVALID_PAYLOAD"
    status = 400


class ConcurrentModification(WeekPlanError):
    code = "CONCURRENT_MODIFICATION"
    status = 409
