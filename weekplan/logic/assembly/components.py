"""Component-based meal assembly: 1 protein, 1-2 vegetables and 1 carb."""
import random
from collections import deque
from typing import Iterable, List, Optional
from weekplan.domain.FoodComponent import FoodComponent
from weekplan.domain.Plan import MealComponent
from weekplan.utilities.constants import (
    CATEGORY_ROLES, RECENT_PROTEIN_WINDOW, SECOND_VEGETABLE_PROBABILITY,
    PRIMARY_VEGETABLE, SECONDARY_VEGETABLE, SIDE,
)
from weekplan.utilities.exceptions import InsufficientComponents


def role_for(component: FoodComponent, vegetables_so_far: int = 0) -> str:
    """Meal role derived from the component category."""
    if component.category == "VEGETABLE" and vegetables_so_far > 0:
        return SECONDARY_VEGETABLE
    return CATEGORY_ROLES.get(component.category, SIDE)


def rank_vegetables(meal_components: Iterable[MealComponent]) -> None:
    """The first vegetable by order is primary, any later one secondary."""
    vegetables = 0
    for mc in sorted(meal_components, key=lambda mc: mc.order):
        if mc.role in (PRIMARY_VEGETABLE, SECONDARY_VEGETABLE):
            mc.role = SECONDARY_VEGETABLE if vegetables else PRIMARY_VEGETABLE
            vegetables += 1


def to_meal_components(components: Iterable[FoodComponent], meal_id: str = "") -> List[MealComponent]:
    """Emit MealComponents at default quantities with sequential order from 0."""
    result: List[MealComponent] = []
    vegetables = 0
    for order, comp in enumerate(components):
        result.append(MealComponent(
            meal_id=meal_id,
            component_id=comp.id,
            quantity=comp.default_quantity,
            unit=comp.unit,
            role=role_for(comp, vegetables),
            order=order,
        ))
        if comp.category == "VEGETABLE":
            vegetables += 1
    return result


def select_components(proteins: List[FoodComponent], vegetables: List[FoodComponent],
                      carbs: List[FoodComponent], recent_protein_ids: Iterable[str] = (),
                      rng: Optional[random.Random] = None) -> List[FoodComponent]:
    """Choose the food components for one meal: protein, vegetables, carb."""
    rng = rng or random
    missing = [name for name, pool in (("protein", proteins), ("vegetable", vegetables), ("carb", carbs))
               if not pool]
    if missing:
        raise InsufficientComponents(f"No compliant {', '.join(missing)} components available")

    recent = set(recent_protein_ids)
    fresh = [p for p in proteins if p.id not in recent]
    protein = rng.choice(fresh or proteins)

    wanted = 2 if rng.random() < SECOND_VEGETABLE_PROBABILITY else 1
    chosen_vegetables = rng.sample(vegetables, min(wanted, len(vegetables)))

    carb = rng.choice(carbs)
    return [protein, *chosen_vegetables, carb]


def assemble(proteins: List[FoodComponent], vegetables: List[FoodComponent],
             carbs: List[FoodComponent], recent_protein_ids: Iterable[str] = (),
             rng: Optional[random.Random] = None) -> List[MealComponent]:
    return to_meal_components(select_components(proteins, vegetables, carbs, recent_protein_ids, rng))


class ComponentAssembler:
    """Assembles meals for one generation run, remembering recent proteins."""

    def __init__(self, components: Iterable[FoodComponent], rng: Optional[random.Random] = None,
                 window: int = RECENT_PROTEIN_WINDOW):
        items = list(components)
        self.proteins = [c for c in items if c.category == "PROTEIN"]
        self.vegetables = [c for c in items if c.category == "VEGETABLE"]
        self.carbs = [c for c in items if c.category == "CARB"]
        self.rng = rng or random.Random()
        self.recent_proteins = deque(maxlen=window)

    @property
    def can_assemble(self) -> bool:
        return bool(self.proteins and self.vegetables and self.carbs)

    def assemble(self) -> List[MealComponent]:
        chosen = select_components(self.proteins, self.vegetables, self.carbs,
                                   self.recent_proteins, self.rng)
        self.recent_proteins.append(chosen[0].id)
        return to_meal_components(chosen)
