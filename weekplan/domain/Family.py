"""Family domain entities: the household, its members and meal schedule templates."""
import uuid
from typing import List, Optional
from weekplan.domain.DietProfile import DietProfile
from weekplan.utilities.constants import DAYS, MEAL_TYPES, MEMBER


class Member:
    def __init__(self, id: Optional[str] = None, user_id: str = "", family_id: str = "",
                 name: str = "", role: str = MEMBER, can_view_audit_log: bool = False):
        self.id = id or str(uuid.uuid4())
        self.user_id = user_id
        self.family_id = family_id
        self.name = name
        self.role = role.upper()
        self.can_view_audit_log = can_view_audit_log

    def __repr__(self) -> str:
        return f"Member({self.name or self.id}, {self.role})"

    @staticmethod
    def from_dict(data):
        return Member(**dict(data))

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "family_id": self.family_id,
            "name": self.name,
            "role": self.role,
            "can_view_audit_log": self.can_view_audit_log,
        }


class MealScheduleTemplate:
    """Which (day, meal type) slots exist in a week.

    ``schedule`` is a list of ``{"day_of_week": "MONDAY", "meal_types": ["LUNCH", "DINNER"]}``.
    """

    def __init__(self, id: Optional[str] = None, name: str = "", schedule: Optional[List[dict]] = None,
                 family_id: Optional[str] = None, is_system: bool = False):
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.schedule = [dict(item) for item in (schedule or [])]
        self.family_id = family_id
        self.is_system = is_system

    def slots(self):
        """Return (day, meal_type) pairs in grid order: day-major, then meal-type order."""
        by_day = {item["day_of_week"]: item.get("meal_types", []) for item in self.schedule}
        grid = []
        for day in DAYS:
            for meal_type in MEAL_TYPES:
                if meal_type in by_day.get(day, []):
                    grid.append((day, meal_type))
        return grid

    @staticmethod
    def from_dict(data):
        return MealScheduleTemplate(**dict(data))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "schedule": self.schedule,
            "family_id": self.family_id,
            "is_system": self.is_system,
        }


class Family:
    def __init__(self, id: Optional[str] = None, name: str = "",
                 diet_profile: Optional[DietProfile] = None,
                 members: Optional[List[Member]] = None,
                 default_template_id: Optional[str] = None):
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.diet_profile = diet_profile or DietProfile()
        self.members = members[:] if members else []
        self.default_template_id = default_template_id

    def __repr__(self) -> str:
        return f"Family({self.name}, {len(self.members)} members)"

    def find_member(self, user_id: str) -> Optional[Member]:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    @staticmethod
    def from_dict(data):
        d = dict(data)
        d['diet_profile'] = DietProfile.from_dict(d.get('diet_profile'))
        d['members'] = [Member.from_dict({**m, 'family_id': d.get('id', '')}) for m in d.get('members', [])]
        return Family(**d)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "diet_profile": self.diet_profile.to_dict(),
            "members": [m.to_dict() for m in self.members],
            "default_template_id": self.default_template_id,
        }
