"""Weekly plan generation.

AUTO mode walks the template grid (day-major, then meal type) and fills each
slot either from the recipe pools through a SelectionCycler or, for a fixed
share of slots chosen up front, with a component-based meal. EXPRESS mode
cycles through favorites only and then swaps one random slot for a novelty.

A slot that cannot be filled is left empty and reported in the summary; it
never aborts the run.
"""
import logging
import random
from collections import Counter
from datetime import date
from typing import Dict, List, Optional, Tuple

from weekplan.domain.Family import Family
from weekplan.domain.Plan import Meal, WeeklyPlan
from weekplan.domain.Recipe import Recipe
from weekplan.events.audit import PLAN_CREATED, AuditEvent, log_change
from weekplan.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS, PLAN_GENERATED
from weekplan.infra.Catalog_Repository import CatalogRepository
from weekplan.infra.Family_Repository import FamilyRepository
from weekplan.infra.Plan_Repository import PlanRepository
from weekplan.logic.assembly.components import ComponentAssembler
from weekplan.logic.selection.cycler import FAVORITES, NOVELTIES, SelectionCycler, SelectionState
from weekplan.utilities.config import COMPONENT_MEAL_RATIO, MAX_NOVELTIES_CAP
from weekplan.utilities.constants import GENERATION_MODES
from weekplan.utilities.exceptions import (
    InvalidPayload, NoCompliantCandidates, Unauthorized, WeekPlanError,
)

logger = logging.getLogger(__name__)

COMPONENTS = "components"


class SlotOutcome:
    def __init__(self, day_of_week: str, meal_type: str, source: Optional[str] = None,
                 error: Optional[str] = None, item_id: Optional[str] = None,
                 note: Optional[str] = None):
        self.day_of_week = day_of_week
        self.meal_type = meal_type
        self.source = source
        self.error = error
        self.item_id = item_id
        self.note = note

    @property
    def filled(self) -> bool:
        return self.error is None

    def to_dict(self):
        d = {"day_of_week": self.day_of_week, "meal_type": self.meal_type,
             "source": self.source, "item_id": self.item_id}
        if self.error:
            d["error"] = self.error
        if self.note:
            d["note"] = self.note
        return d


class GenerationSummary:
    def __init__(self, mode: str):
        self.mode = mode
        self.outcomes: List[SlotOutcome] = []

    def add(self, outcome: SlotOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def filled(self) -> List[SlotOutcome]:
        return [o for o in self.outcomes if o.filled]

    @property
    def unfilled(self) -> List[SlotOutcome]:
        return [o for o in self.outcomes if not o.filled]

    def counts(self) -> Dict[str, int]:
        return dict(Counter(o.source for o in self.filled))

    def to_dict(self):
        return {
            "mode": self.mode,
            "total_slots": len(self.outcomes),
            "filled": len(self.filled),
            "unfilled": [o.to_dict() for o in self.unfilled],
            "sources": self.counts(),
            "slots": [o.to_dict() for o in self.outcomes],
        }


class GenerationResult:
    def __init__(self, plan: WeeklyPlan, summary: GenerationSummary):
        self.plan = plan
        self.summary = summary

    def to_dict(self):
        return {"plan": self.plan.to_dict(), "summary": self.summary.to_dict()}


def split_pools(recipes: List[Recipe]) -> Tuple[List[Recipe], List[Recipe], List[Recipe]]:
    """Partition compliant recipes into favorites, novelties and others."""
    favorites = [r for r in recipes if r.is_favorite]
    novelties = [r for r in recipes if r.is_novelty]
    others = [r for r in recipes if not r.is_favorite and not r.is_novelty]
    return favorites, novelties, others


def pick_component_slots(slot_count: int, ratio: float, rng: random.Random) -> set:
    """Indices of the slots routed to component-based meals for this run."""
    wanted = min(slot_count, max(0, round(slot_count * ratio)))
    return set(rng.sample(range(slot_count), wanted))


class PlanGenerator:
    def __init__(self, catalog: CatalogRepository, families: FamilyRepository, plans: PlanRepository,
                 rng: Optional[random.Random] = None, component_ratio: float = COMPONENT_MEAL_RATIO,
                 novelty_cap: int = MAX_NOVELTIES_CAP, bus: Optional[EventBus] = None):
        self.catalog = catalog
        self.families = families
        self.plans = plans
        self.rng = rng or random.Random()
        self.component_ratio = component_ratio
        self.novelty_cap = novelty_cap
        self.bus = bus or GLOBAL_EVENT_BUS

    # -------------------- Entry points --------------------
    def generate(self, mode: str, family_id: str, week_start_date: date,
                 template_id: Optional[str] = None, acting_user_id: Optional[str] = None) -> GenerationResult:
        mode = (mode or "").upper()
        if mode not in GENERATION_MODES:
            raise InvalidPayload(f"Unknown generation mode: {mode}")
        family = self.families.get_family(family_id)
        member = None
        if acting_user_id is not None:
            member = family.find_member(acting_user_id)
            if member is None:
                raise Unauthorized("You are not a member of this family")
        template = self.families.active_template(family, template_id)
        slots = template.slots()

        iso = week_start_date.isocalendar()
        plan = WeeklyPlan(family_id=family.id, week_number=iso[1], year=iso[0],
                          week_start_date=week_start_date, template_id=template.id)
        if mode == "AUTO":
            summary = self.fill_auto(plan, family, slots)
        else:
            summary = self.fill_express(plan, family, slots)

        self.plans.add_plan(plan)
        logger.info("Generated %s plan %s for family %s: %d/%d slots filled",
                    mode, plan.id, family.id, len(summary.filled), len(summary.outcomes))
        log_change(AuditEvent(plan.id, PLAN_CREATED, member_id=member.id if member else None,
                              description=f"{mode.capitalize()} plan generated for week {plan.week_number}"),
                   self.bus)
        self.bus.publish(PLAN_GENERATED, {"plan_id": plan.id, "family_id": family.id,
                                          "mode": mode, "summary": summary.to_dict()})
        return GenerationResult(plan, summary)

    def generate_auto(self, family_id: str, week_start_date: date, **kwargs) -> GenerationResult:
        return self.generate("AUTO", family_id, week_start_date, **kwargs)

    def generate_express(self, family_id: str, week_start_date: date, **kwargs) -> GenerationResult:
        return self.generate("EXPRESS", family_id, week_start_date, **kwargs)

    # -------------------- Helpers --------------------
    @staticmethod
    def default_portions(family: Family) -> int:
        return max(1, len(family.members))

    def _new_meal(self, plan: WeeklyPlan, family: Family, day: str, meal_type: str) -> Meal:
        meal = Meal(weekly_plan_id=plan.id, day_of_week=day, meal_type=meal_type,
                    portions=self.default_portions(family))
        plan.meals.append(meal)
        return meal

    def fill_auto(self, plan: WeeklyPlan, family: Family, slots: List[Tuple[str, str]]) -> GenerationSummary:
        """Append one meal per slot to ``plan`` using the recipe pools and components."""
        profile = family.diet_profile
        summary = GenerationSummary("AUTO")
        recipes = self.catalog.find_compliant(profile, family.id)
        favorites, novelties, others = split_pools(recipes)
        state = SelectionState(max_novelties=min(profile.max_novelties, self.novelty_cap),
                               favorite_ratio=profile.favorite_ratio)
        cycler = SelectionCycler(favorites, novelties, others, state, self.rng)
        assembler = ComponentAssembler(self.catalog.find_compliant_components(profile, family.id), self.rng)
        component_slots = pick_component_slots(len(slots), self.component_ratio, self.rng)
        logger.debug("Pools for family %s: %d favorites, %d novelties, %d others; "
                     "components %d/%d/%d; %d component slots",
                     family.id, len(favorites), len(novelties), len(others),
                     len(assembler.proteins), len(assembler.vegetables), len(assembler.carbs),
                     len(component_slots))

        previous_day = None
        previous_category = None
        for index, (day, meal_type) in enumerate(slots):
            if day != previous_day:
                previous_day, previous_category = day, None
            meal = self._new_meal(plan, family, day, meal_type)
            outcome = SlotOutcome(day, meal_type)
            note = None

            if index in component_slots:
                try:
                    meal.set_components(assembler.assemble())
                    outcome.source = COMPONENTS
                    outcome.item_id = meal.meal_components[0].component_id
                    previous_category = None
                    summary.add(outcome)
                    continue
                except WeekPlanError as e:
                    logger.debug("Component meal for %s %s failed (%s); using a recipe", day, meal_type, e.code)
                    note = e.code

            try:
                if cycler.is_empty:
                    raise NoCompliantCandidates("No compliant recipes for the household diet profile")
                picked = cycler.select(avoid_category=previous_category)
                meal.set_recipe(picked.recipe.id)
                outcome.source = picked.source
                outcome.item_id = picked.recipe.id
                previous_category = picked.recipe.category
            except WeekPlanError as e:
                logger.warning("Slot %s %s left empty: %s", day, meal_type, e.message)
                outcome.error = e.code
            outcome.note = note
            summary.add(outcome)
        return summary

    def fill_express(self, plan: WeeklyPlan, family: Family, slots: List[Tuple[str, str]]) -> GenerationSummary:
        """Favorites only, then one random slot becomes the first compliant novelty."""
        summary = GenerationSummary("EXPRESS")
        favorites, novelties, _ = split_pools(self.catalog.find_compliant(family.diet_profile, family.id))
        if not favorites:
            logger.warning("Family %s has no compliant favorites for an express plan", family.id)

        outcomes = []
        for index, (day, meal_type) in enumerate(slots):
            meal = self._new_meal(plan, family, day, meal_type)
            outcome = SlotOutcome(day, meal_type)
            if favorites:
                recipe = favorites[index % len(favorites)]
                meal.set_recipe(recipe.id)
                outcome.source, outcome.item_id = FAVORITES, recipe.id
            else:
                outcome.error = NoCompliantCandidates.code
            outcomes.append(outcome)

        if novelties and plan.meals:
            index = self.rng.randrange(len(plan.meals))
            plan.meals[index].set_recipe(novelties[0].id)
            outcomes[index].source, outcomes[index].item_id, outcomes[index].error = NOVELTIES, novelties[0].id, None

        for outcome in outcomes:
            summary.add(outcome)
        return summary
