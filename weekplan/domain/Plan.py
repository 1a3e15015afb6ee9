"""Plan domain entities: weekly plan, its meals, meal components and meal comments."""
import uuid
from datetime import date, datetime
from typing import List, Optional
from weekplan.utilities.constants import DRAFT, DAYS, MEAL_TYPES


def _new_id() -> str:
    return str(uuid.uuid4())


class MealComponent:
    def __init__(self, id: Optional[str] = None, meal_id: str = "", component_id: str = "",
                 quantity: float = 0, unit: str = "", role: str = "", order: int = 0):
        self.id = id or _new_id()
        self.meal_id = meal_id
        self.component_id = component_id
        self.quantity = quantity
        self.unit = unit
        self.role = role
        self.order = order

    def __repr__(self) -> str:
        return f"MealComponent({self.order}: {self.component_id} {self.quantity}{self.unit} {self.role})"

    @staticmethod
    def from_dict(data):
        return MealComponent(**dict(data))

    def to_dict(self):
        return {
            "id": self.id,
            "meal_id": self.meal_id,
            "component_id": self.component_id,
            "quantity": self.quantity,
            "unit": self.unit,
            "role": self.role,
            "order": self.order,
        }


class MealComment:
    def __init__(self, id: Optional[str] = None, meal_id: str = "", member_id: str = "",
                 content: str = "", created_at: Optional[str] = None):
        self.id = id or _new_id()
        self.meal_id = meal_id
        self.member_id = member_id
        self.content = content
        self.created_at = created_at or datetime.utcnow().isoformat() + 'Z'

    @staticmethod
    def from_dict(data):
        return MealComment(**dict(data))

    def to_dict(self):
        return {
            "id": self.id,
            "meal_id": self.meal_id,
            "member_id": self.member_id,
            "content": self.content,
            "created_at": self.created_at,
        }


class Meal:
    """One (day, meal type) slot of a weekly plan.

    A meal holds either a ``recipe_id`` or a non-empty ``meal_components`` list,
    or neither (an unfilled or skipped slot), never both.
    """

    def __init__(self, id: Optional[str] = None, weekly_plan_id: str = "",
                 day_of_week: str = DAYS[0], meal_type: str = MEAL_TYPES[2],
                 recipe_id: Optional[str] = None,
                 meal_components: Optional[List[MealComponent]] = None,
                 portions: int = 1, locked: bool = False, is_skipped: bool = False,
                 skip_reason: Optional[str] = None,
                 comments: Optional[List[MealComment]] = None):
        if portions < 1:
            raise ValueError("portions must be >= 1")
        self.id = id or _new_id()
        self.weekly_plan_id = weekly_plan_id
        self.day_of_week = day_of_week
        self.meal_type = meal_type
        self.recipe_id = recipe_id
        self.meal_components = meal_components[:] if meal_components else []
        self.portions = portions
        self.locked = locked
        self.is_skipped = is_skipped
        self.skip_reason = skip_reason
        self.comments = comments[:] if comments else []

    def __repr__(self) -> str:
        content = self.recipe_id or (f"{len(self.meal_components)} components" if self.meal_components else "-")
        return f"Meal({self.day_of_week} {self.meal_type}: {content})"

    @property
    def is_component_based(self) -> bool:
        return self.recipe_id is None and bool(self.meal_components)

    @property
    def is_empty(self) -> bool:
        return self.recipe_id is None and not self.meal_components

    def set_recipe(self, recipe_id: Optional[str]) -> None:
        self.recipe_id = recipe_id
        if recipe_id is not None:
            self.meal_components = []

    def set_components(self, components: List[MealComponent]) -> None:
        self.recipe_id = None
        self.meal_components = list(components)
        self.renumber_components()

    def renumber_components(self) -> None:
        """Keep component ``order`` contiguous from 0, preserving relative order."""
        self.meal_components.sort(key=lambda mc: mc.order)
        for index, mc in enumerate(self.meal_components):
            mc.order = index
            mc.meal_id = self.id

    def insert_component(self, component: MealComponent, position: Optional[int] = None) -> None:
        """Insert at ``position`` (default: the end) and renumber."""
        self.meal_components.sort(key=lambda mc: mc.order)
        if position is None or position > len(self.meal_components):
            position = len(self.meal_components)
        self.meal_components.insert(position, component)
        for index, mc in enumerate(self.meal_components):
            mc.order = index
            mc.meal_id = self.id

    def remove_component(self, component: MealComponent) -> None:
        self.meal_components.remove(component)
        self.renumber_components()

    def find_component(self, meal_component_id: str) -> Optional[MealComponent]:
        for mc in self.meal_components:
            if mc.id == meal_component_id:
                return mc
        return None

    def find_comment(self, comment_id: str) -> Optional[MealComment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    @staticmethod
    def from_dict(data):
        d = dict(data)
        d['meal_components'] = [MealComponent.from_dict(mc) for mc in d.get('meal_components', [])]
        d['comments'] = [MealComment.from_dict(c) for c in d.get('comments', [])]
        return Meal(**d)

    def to_dict(self):
        return {
            "id": self.id,
            "weekly_plan_id": self.weekly_plan_id,
            "day_of_week": self.day_of_week,
            "meal_type": self.meal_type,
            "recipe_id": self.recipe_id,
            "meal_components": [mc.to_dict() for mc in self.meal_components],
            "portions": self.portions,
            "locked": self.locked,
            "is_skipped": self.is_skipped,
            "skip_reason": self.skip_reason,
            "comments": [c.to_dict() for c in self.comments],
        }


class WeeklyPlan:
    def __init__(self, id: Optional[str] = None, family_id: str = "", week_number: int = 1,
                 year: Optional[int] = None, week_start_date: Optional[date] = None,
                 status: str = DRAFT, cutoff_date: Optional[date] = None,
                 cutoff_time: Optional[str] = None, allow_comments_after_cutoff: bool = False,
                 template_id: Optional[str] = None, meals: Optional[List[Meal]] = None,
                 validated_at: Optional[str] = None, version: int = 0):
        self.id = id or _new_id()
        self.family_id = family_id
        self.week_number = week_number
        self.year = year or date.today().isocalendar().year
        self.week_start_date = week_start_date
        self.status = status
        self.cutoff_date = cutoff_date
        self.cutoff_time = cutoff_time
        self.allow_comments_after_cutoff = allow_comments_after_cutoff
        self.template_id = template_id
        self.meals = meals[:] if meals else []
        self.validated_at = validated_at
        self.version = version

    def __repr__(self) -> str:
        return f"WeeklyPlan({self.year}-W{self.week_number:02d}, {self.status}, {len(self.meals)} meals)"

    def find_meal(self, meal_id: str) -> Optional[Meal]:
        for meal in self.meals:
            if meal.id == meal_id:
                return meal
        return None

    def meals_for_slot(self, day_of_week: str, meal_type: str) -> List[Meal]:
        return [m for m in self.meals if m.day_of_week == day_of_week and m.meal_type == meal_type]

    def sort_meals(self) -> None:
        """Order meals by grid position (day-major, then meal type)."""
        self.meals.sort(key=lambda m: (DAYS.index(m.day_of_week), MEAL_TYPES.index(m.meal_type)))

    @staticmethod
    def from_dict(data):
        d = dict(data)
        for key in ('week_start_date', 'cutoff_date'):
            if d.get(key) and not isinstance(d[key], date):
                d[key] = date.fromisoformat(d[key])
        d['meals'] = [Meal.from_dict(m) for m in d.get('meals', [])]
        return WeeklyPlan(**d)

    def to_dict(self):
        return {
            "id": self.id,
            "family_id": self.family_id,
            "week_number": self.week_number,
            "year": self.year,
            "week_start_date": self.week_start_date.isoformat() if self.week_start_date else None,
            "status": self.status,
            "cutoff_date": self.cutoff_date.isoformat() if self.cutoff_date else None,
            "cutoff_time": self.cutoff_time,
            "allow_comments_after_cutoff": self.allow_comments_after_cutoff,
            "template_id": self.template_id,
            "meals": [m.to_dict() for m in self.meals],
            "validated_at": self.validated_at,
            "version": self.version,
        }
