"""Weekly plan / meal lifecycle.

Plan status only moves forward: DRAFT -> (IN_VALIDATION) -> VALIDATED -> LOCKED.
Each meal carries its own lock flag, orthogonal to the plan status but
constrained by it.

Every mutating operation runs as one unit inside ``PlanRepository.transaction``
and passes through the same gate, in this order: existence, membership, role,
cutoff, plan status, meal lock. Audit events are emitted after the write
commits, carrying the validated member id.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from weekplan.domain.Family import Member
from weekplan.domain.Ingredient import Ingredient
from weekplan.domain.Plan import Meal, MealComment, MealComponent, WeeklyPlan
from weekplan.domain.Recipe import Recipe
from weekplan.events import audit
from weekplan.events.audit import AuditEvent, log_change
from weekplan.events.audit_log import AuditLogRecorder
from weekplan.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS, PLAN_VALIDATED
from weekplan.infra.Catalog_Repository import CatalogRepository
from weekplan.infra.Family_Repository import FamilyRepository
from weekplan.infra.Plan_Repository import PlanRepository
from weekplan.logic.assembly.components import rank_vegetables, role_for
from weekplan.logic.compliance.filter import aggregate_dietary_flags
from weekplan.logic.lifecycle.permissions import (
    can_comment, can_delete_comment, can_edit_after_cutoff, can_edit_plan,
    can_lock_meal, can_validate_plan, can_view_audit_log, is_after_cutoff,
)
from weekplan.utilities.constants import (
    COMPONENT_RECIPE_COOK_TIME, COMPONENT_RECIPE_PREP_TIME, DRAFT, IN_VALIDATION,
    LOCKED, VALIDATED,
)
from weekplan.utilities.exceptions import (
    AfterCutoff, ConcurrentModification, InvalidPayload, MealLocked, NotFound, PlanLocked,
    Unauthorized,
)
from weekplan.utilities import validators as v

logger = logging.getLogger(__name__)

# Gate actions
VIEW = "view"
VIEW_AUDIT = "view_audit"
COMMENT = "comment"
LOCK_MEAL = "lock_meal"
EDIT = "edit"
VALIDATE = "validate"
LOCK_PLAN = "lock_plan"
CONFIGURE = "configure"

_ROLE_RULES: Dict[str, Callable[[str], bool]] = {
    EDIT: can_edit_plan,
    VALIDATE: can_validate_plan,
    LOCK_PLAN: can_validate_plan,
    CONFIGURE: can_edit_plan,
}

SKIPPED_MESSAGE = "Meal skipped successfully"

Events = List[AuditEvent]


def _slot_label(meal: Meal) -> str:
    return f"{meal.day_of_week} {meal.meal_type}"


class PlanStateMachine:
    def __init__(self, plans: PlanRepository, families: FamilyRepository, catalog: CatalogRepository,
                 generator=None, bus: Optional[EventBus] = None,
                 audit_log: Optional[AuditLogRecorder] = None,
                 clock: Callable[[], datetime] = datetime.now, review_step: bool = False):
        self.plans = plans
        self.families = families
        self.catalog = catalog
        self.generator = generator
        self.bus = bus or GLOBAL_EVENT_BUS
        # started and stopped by whoever owns it
        self.audit_log = audit_log or AuditLogRecorder(self.bus)
        self.clock = clock
        self.review_step = review_step

    # ==================== Gate ====================
    def _required_statuses(self, action: str) -> Optional[Tuple[str, ...]]:
        if action == EDIT:
            return (DRAFT,)
        if action == VALIDATE:
            return (DRAFT, IN_VALIDATION) if self.review_step else (DRAFT,)
        if action == LOCK_PLAN:
            return (VALIDATED,)
        return None

    def resolve_member(self, plan: WeeklyPlan, user_id: str) -> Member:
        member = self.families.resolve_member(plan.family_id, user_id)
        if member is None:
            raise Unauthorized("You are not a member of this family")
        return member

    def authorize(self, plan: WeeklyPlan, user_id: str, action: str, meal: Optional[Meal] = None) -> Member:
        """Single authorization gate shared by every operation."""
        member = self.resolve_member(plan, user_id)
        after_cutoff = is_after_cutoff(plan.cutoff_date, plan.cutoff_time, self.clock())

        if action == VIEW:
            return member
        if action == VIEW_AUDIT:
            if not can_view_audit_log(member.can_view_audit_log):
                raise Unauthorized("You do not have permission to view the audit log")
            return member
        if action == COMMENT:
            if not can_comment(member.role):
                raise Unauthorized("You do not have permission to comment")
            if after_cutoff and not plan.allow_comments_after_cutoff and not can_edit_after_cutoff(member.role):
                raise AfterCutoff("The cutoff deadline for comments has passed")
            return member
        if action == LOCK_MEAL:
            if not can_lock_meal(member.role):
                raise Unauthorized("You do not have permission to lock meals")
            if plan.status == LOCKED:
                raise PlanLocked("This plan is locked and cannot be modified")
            return member

        rule = _ROLE_RULES[action]
        if not rule(member.role):
            raise Unauthorized("You do not have permission to modify this plan")
        if after_cutoff and not can_edit_after_cutoff(member.role):
            raise AfterCutoff("The cutoff deadline for modifications has passed. "
                              "Please contact a family administrator.")
        if plan.status == LOCKED:
            raise PlanLocked("This plan is locked and cannot be modified")
        required = self._required_statuses(action)
        if required and plan.status not in required:
            raise PlanLocked(f"Plan is {plan.status}; this change needs {' or '.join(required)}",
                             code=f"PLAN_NOT_{required[0]}")
        if meal is not None and meal.locked:
            raise MealLocked("Meal is locked and cannot be modified")
        return member

    # ==================== Plumbing ====================
    @staticmethod
    def _meal_or_404(plan: WeeklyPlan, meal_id: str) -> Meal:
        meal = plan.find_meal(meal_id)
        if meal is None:
            raise NotFound(f"Meal {meal_id} not found in plan {plan.id}")
        return meal

    def _run(self, plan_id: str, user_id: str, action: str,
             apply: Callable[[WeeklyPlan, Optional[Meal], Member], Tuple[Any, Events]],
             meal_id: Optional[str] = None):
        with self.plans.transaction(plan_id) as plan:
            meal = self._meal_or_404(plan, meal_id) if meal_id else None
            member = self.authorize(plan, user_id, action, meal)
            result, events = apply(plan, meal, member)
        for event in events:
            log_change(event, self.bus)
        return result

    def _recipe_for_family(self, recipe_id: str, family_id: str) -> Recipe:
        recipe = self.catalog.get_recipe(recipe_id)
        if recipe is None or recipe.family_id not in (None, family_id):
            raise NotFound(f"Recipe {recipe_id} not found")
        return recipe

    def _component_or_404(self, component_id: str):
        component = self.catalog.get_component(component_id)
        if component is None:
            raise NotFound(f"Food component {component_id} not found")
        return component

    def _title(self, recipe_id: Optional[str]) -> str:
        if not recipe_id:
            return "None"
        recipe = self.catalog.get_recipe(recipe_id)
        return recipe.title if recipe else recipe_id

    # ==================== Reads ====================
    def get_plan(self, plan_id: str, user_id: str) -> WeeklyPlan:
        plan = self.plans.get_plan(plan_id)
        self.authorize(plan, user_id, VIEW)
        return plan

    def read_audit_log(self, plan_id: str, user_id: str, since: Optional[int] = None) -> Dict[str, Any]:
        plan = self.plans.get_plan(plan_id)
        self.authorize(plan, user_id, VIEW_AUDIT)
        return self.audit_log.get_events(plan_id=plan.id, since=since)

    def list_comments(self, plan_id: str, meal_id: str, user_id: str) -> List[MealComment]:
        plan = self.plans.get_plan(plan_id)
        meal = self._meal_or_404(plan, meal_id)
        self.authorize(plan, user_id, VIEW)
        return sorted(meal.comments, key=lambda c: c.created_at, reverse=True)

    # ==================== Plan transitions ====================
    def validate_plan(self, plan_id: str, user_id: str) -> WeeklyPlan:
        def apply(plan, _meal, member):
            old_status = plan.status
            if self.review_step and plan.status == DRAFT:
                plan.status = IN_VALIDATION
            else:
                # Truly empty meals are skipped so the validated plan has no ambiguous slots
                for meal in plan.meals:
                    if meal.is_empty and not meal.is_skipped:
                        meal.is_skipped = True
                        meal.skip_reason = None
                plan.status = VALIDATED
                plan.validated_at = self.clock().isoformat()
            return plan, [AuditEvent(plan.id, audit.PLAN_STATUS_CHANGED, member.id,
                                     description=f"Plan status changed from {old_status} to {plan.status}",
                                     old_value=old_status, new_value=plan.status)]

        plan = self._run(plan_id, user_id, VALIDATE, apply)
        if plan.status == VALIDATED:
            # Shopping list generation and notifications subscribe to this event
            self.bus.publish(PLAN_VALIDATED, {"plan_id": plan.id, "family_id": plan.family_id})
        return plan

    def lock_plan(self, plan_id: str, user_id: str) -> WeeklyPlan:
        def apply(plan, _meal, member):
            plan.status = LOCKED
            return plan, [AuditEvent(plan.id, audit.PLAN_STATUS_CHANGED, member.id,
                                     description=f"Plan status changed from {VALIDATED} to {LOCKED}",
                                     old_value=VALIDATED, new_value=LOCKED)]
        return self._run(plan_id, user_id, LOCK_PLAN, apply)

    def set_cutoff(self, plan_id: str, user_id: str, payload: Dict[str, Any]) -> WeeklyPlan:
        data = v.parse_payload(v.CutoffInput, payload)

        def apply(plan, _meal, member):
            old = f"{plan.cutoff_date} {plan.cutoff_time}"
            plan.cutoff_date = data.cutoff_date
            plan.cutoff_time = data.cutoff_time
            plan.allow_comments_after_cutoff = data.allow_comments_after_cutoff
            new = f"{plan.cutoff_date} {plan.cutoff_time}"
            return plan, [AuditEvent(plan.id, audit.CUTOFF_CHANGED, member.id,
                                     description=f"Cutoff changed from {old} to {new}",
                                     old_value=old, new_value=new)]
        return self._run(plan_id, user_id, CONFIGURE, apply)

    def switch_template(self, plan_id: str, user_id: str, template_id: str):
        """Regenerate every unlocked meal of a draft plan against another template."""
        if self.generator is None:
            raise InvalidPayload("Template switching is not available")
        summary_holder = []

        def apply(plan, _meal, member):
            family = self.families.get_family(plan.family_id)
            template = self.families.get_template(template_id, family.id)
            kept = [m for m in plan.meals if m.locked]
            taken = {(m.day_of_week, m.meal_type) for m in kept}
            plan.meals = kept
            free_slots = [slot for slot in template.slots() if slot not in taken]
            summary_holder.append(self.generator.fill_auto(plan, family, free_slots))
            old_template, plan.template_id = plan.template_id, template.id
            plan.sort_meals()
            return plan, [AuditEvent(plan.id, audit.TEMPLATE_SWITCHED, member.id,
                                     description=f"Template switched to {template.name}",
                                     old_value=old_template, new_value=template.id)]

        plan = self._run(plan_id, user_id, EDIT, apply)
        return plan, summary_holder[0]

    # ==================== Meal-level operations ====================
    def add_meal(self, plan_id: str, user_id: str, day_of_week: str, meal_type: str,
                 recipe_id: Optional[str] = None) -> Meal:
        data = v.parse_payload(v.AddMealInput, {"day_of_week": day_of_week, "meal_type": meal_type,
                                                "recipe_id": recipe_id})

        def apply(plan, _meal, member):
            if plan.meals_for_slot(data.day_of_week, data.meal_type):
                raise InvalidPayload("A meal already exists for this day and meal type", code="MEAL_EXISTS")
            if data.recipe_id:
                self._recipe_for_family(data.recipe_id, plan.family_id)
            family = self.families.get_family(plan.family_id)
            meal = Meal(weekly_plan_id=plan.id, day_of_week=data.day_of_week, meal_type=data.meal_type,
                        recipe_id=data.recipe_id, portions=max(1, len(family.members)))
            plan.meals.append(meal)
            plan.sort_meals()
            label = _slot_label(meal) + (f": {self._title(meal.recipe_id)}" if meal.recipe_id else "")
            return meal, [AuditEvent(plan.id, audit.MEAL_ADDED, member.id, meal.id,
                                     description=f"Meal added: {label}", new_value=label)]
        return self._run(plan_id, user_id, EDIT, apply)

    def remove_meal(self, plan_id: str, meal_id: str, user_id: str,
                    skip_reason: Optional[str] = None) -> Dict[str, Any]:
        """Skip a meal: the row stays, its recipe and components are cleared."""
        data = v.parse_payload(v.SkipMealInput, {"skip_reason": skip_reason})

        def apply(plan, meal, member):
            label = _slot_label(meal) + (f": {self._title(meal.recipe_id)}" if meal.recipe_id else "")
            meal.meal_components = []
            meal.recipe_id = None
            meal.is_skipped = True
            meal.skip_reason = data.skip_reason
            reason = f" ({data.skip_reason})" if data.skip_reason else ""
            result = {"skipped": True, "message": SKIPPED_MESSAGE, "meal": meal}
            return result, [AuditEvent(plan.id, audit.MEAL_REMOVED, member.id, meal.id,
                                       description=f"Meal skipped: {_slot_label(meal)}{reason}",
                                       old_value=label)]
        return self._run(plan_id, user_id, EDIT, apply, meal_id)

    def restore_meal(self, plan_id: str, meal_id: str, user_id: str) -> Meal:
        def apply(plan, meal, member):
            if not meal.is_skipped:
                raise InvalidPayload("Meal is not skipped", code="MEAL_NOT_SKIPPED")
            meal.is_skipped = False
            meal.skip_reason = None
            return meal, [AuditEvent(plan.id, audit.MEAL_RESTORED, member.id, meal.id,
                                     description=f"Meal restored: {_slot_label(meal)}",
                                     new_value=_slot_label(meal))]
        return self._run(plan_id, user_id, EDIT, apply, meal_id)

    def mutate_meal(self, plan_id: str, meal_id: str, user_id: str, operation: str,
                    payload: Optional[Dict[str, Any]] = None) -> Meal:
        handlers = {
            "swap": (self._swap, EDIT),
            "adjustPortions": (self._adjust_portions, EDIT),
            "update": (self._update, EDIT),
            "lock": (self._lock, LOCK_MEAL),
            "addComponent": (self._add_component, EDIT),
            "removeComponent": (self._remove_component, EDIT),
            "updateComponent": (self._update_component, EDIT),
            "swapComponent": (self._swap_component, EDIT),
            "saveAsRecipe": (self._save_as_recipe, EDIT),
        }
        if operation not in handlers:
            raise InvalidPayload(f"Unknown meal operation: {operation}", code="UNKNOWN_OPERATION")
        handler, action = handlers[operation]
        return handler(plan_id, meal_id, user_id, action, payload or {})

    def lock_meal(self, plan_id: str, meal_id: str, user_id: str, locked: bool) -> Meal:
        return self.mutate_meal(plan_id, meal_id, user_id, "lock", {"locked": locked})

    def swap_meal(self, plan_id: str, meal_id: str, user_id: str, new_recipe_id: str) -> Meal:
        return self.mutate_meal(plan_id, meal_id, user_id, "swap", {"new_recipe_id": new_recipe_id})

    def adjust_portions(self, plan_id: str, meal_id: str, user_id: str, portions: int) -> Meal:
        return self.mutate_meal(plan_id, meal_id, user_id, "adjustPortions", {"portions": portions})

    def _swap(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.SwapInput, payload)

        def apply(plan, meal, member):
            recipe = self._recipe_for_family(data.new_recipe_id, plan.family_id)
            old_title = self._title(meal.recipe_id)
            meal.set_recipe(recipe.id)
            meal.is_skipped = False
            return meal, [AuditEvent(plan.id, audit.RECIPE_CHANGED, member.id, meal.id,
                                     description=f'Recipe swapped from "{old_title}" to "{recipe.title}"',
                                     old_value=old_title, new_value=recipe.title)]
        return self._run(plan_id, user_id, action, apply, meal_id)

    def _adjust_portions(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.PortionsInput, payload)

        def apply(plan, meal, member):
            old = meal.portions
            meal.portions = data.portions
            return meal, [AuditEvent(plan.id, audit.PORTIONS_CHANGED, member.id, meal.id,
                                     description=f"Portions changed from {old} to {data.portions}",
                                     old_value=str(old), new_value=str(data.portions))]
        return self._run(plan_id, user_id, action, apply, meal_id)

    def _update(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.UpdateMealInput, payload)

        def apply(plan, meal, member):
            events = []
            if data.portions is not None and data.portions != meal.portions:
                events.append(AuditEvent(plan.id, audit.PORTIONS_CHANGED, member.id, meal.id,
                                         description=f"Portions changed from {meal.portions} to {data.portions}",
                                         old_value=str(meal.portions), new_value=str(data.portions)))
                meal.portions = data.portions
            if data.recipe_id is not None and data.recipe_id != meal.recipe_id:
                recipe = self._recipe_for_family(data.recipe_id, plan.family_id)
                old_title = self._title(meal.recipe_id)
                meal.set_recipe(recipe.id)
                meal.is_skipped = False
                events.append(AuditEvent(plan.id, audit.RECIPE_CHANGED, member.id, meal.id,
                                         description=f'Recipe changed from "{old_title}" to "{recipe.title}"',
                                         old_value=old_title, new_value=recipe.title))
            return meal, events
        return self._run(plan_id, user_id, action, apply, meal_id)

    def _lock(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.LockInput, payload)

        def apply(plan, meal, member):
            meal.locked = data.locked
            change = audit.MEAL_LOCKED if data.locked else audit.MEAL_UNLOCKED
            return meal, [AuditEvent(plan.id, change, member.id, meal.id,
                                     description="Meal locked" if data.locked else "Meal unlocked")]
        return self._run(plan_id, user_id, action, apply, meal_id)

    @staticmethod
    def _require_component_meal(meal: Meal) -> None:
        if meal.recipe_id is not None:
            raise InvalidPayload("Meal uses a recipe; swap or skip it before editing components",
                                 code="MEAL_HAS_RECIPE")

    def _add_component(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.AddComponentInput, payload)

        def apply(plan, meal, member):
            self._require_component_meal(meal)
            component = self._component_or_404(data.component_id)
            vegetables = sum(1 for mc in meal.meal_components if mc.role.endswith("_VEGETABLE"))
            mc = MealComponent(meal_id=meal.id, component_id=component.id,
                               quantity=data.quantity if data.quantity is not None else component.default_quantity,
                               unit=data.unit or component.unit, role=role_for(component, vegetables))
            meal.insert_component(mc, data.order)
            rank_vegetables(meal.meal_components)
            meal.is_skipped = False
            return meal, [AuditEvent(plan.id, audit.COMPONENT_ADDED, member.id, meal.id,
                                     description=f"Component added: {component.name}",
                                     new_value=component.name)]
        return self._run(plan_id, user_id, action, apply, meal_id)

    @staticmethod
    def _meal_component_or_404(meal: Meal, meal_component_id: str) -> MealComponent:
        mc = meal.find_component(meal_component_id)
        if mc is None:
            raise NotFound(f"Meal component {meal_component_id} not found")
        return mc

    def _remove_component(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.RemoveComponentInput, payload)

        def apply(plan, meal, member):
            mc = self._meal_component_or_404(meal, data.meal_component_id)
            meal.remove_component(mc)
            rank_vegetables(meal.meal_components)
            return meal, [AuditEvent(plan.id, audit.COMPONENT_REMOVED, member.id, meal.id,
                                     description="Component removed from meal", old_value=mc.component_id)]
        return self._run(plan_id, user_id, action, apply, meal_id)

    def _update_component(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.UpdateComponentInput, payload)

        def apply(plan, meal, member):
            mc = self._meal_component_or_404(meal, data.meal_component_id)
            old = f"{mc.quantity} {mc.unit}"
            if data.quantity is not None:
                mc.quantity = data.quantity
            if data.unit is not None:
                mc.unit = data.unit
            if data.order is not None and data.order != mc.order:
                meal.meal_components.remove(mc)
                meal.insert_component(mc, data.order)
                rank_vegetables(meal.meal_components)
            return meal, [AuditEvent(plan.id, audit.COMPONENT_UPDATED, member.id, meal.id,
                                     description="Component updated", old_value=old,
                                     new_value=f"{mc.quantity} {mc.unit}")]
        return self._run(plan_id, user_id, action, apply, meal_id)

    def _swap_component(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.SwapComponentInput, payload)

        def apply(plan, meal, member):
            mc = self._meal_component_or_404(meal, data.meal_component_id)
            new_component = self._component_or_404(data.new_component_id)
            old_id = mc.component_id
            old_component = self.catalog.get_component(old_id)
            if old_component is None or old_component.category != new_component.category:
                others = sum(1 for o in meal.meal_components
                             if o is not mc and o.order < mc.order and o.role.endswith("_VEGETABLE"))
                mc.role = role_for(new_component, others)
            mc.component_id = new_component.id
            mc.quantity = data.quantity if data.quantity is not None else new_component.default_quantity
            mc.unit = data.unit or new_component.unit
            rank_vegetables(meal.meal_components)
            return meal, [AuditEvent(plan.id, audit.COMPONENT_UPDATED, member.id, meal.id,
                                     description=f"Component swapped for {new_component.name}",
                                     old_value=old_id, new_value=new_component.id)]
        return self._run(plan_id, user_id, action, apply, meal_id)

    def _save_as_recipe(self, plan_id, meal_id, user_id, action, payload) -> Meal:
        data = v.parse_payload(v.SaveAsRecipeInput, payload)
        saved: List[Recipe] = []

        def apply(plan, meal, member):
            if meal.recipe_id:
                raise InvalidPayload("Meal already has a recipe", code="MEAL_HAS_RECIPE")
            if not meal.meal_components:
                raise InvalidPayload("Meal has no components to save as recipe", code="MEAL_HAS_NO_COMPONENTS")
            ordered = sorted(meal.meal_components, key=lambda mc: mc.order)
            components = [self._component_or_404(mc.component_id) for mc in ordered]
            recipe = Recipe(
                title=data.recipe_name or " with ".join(c.name for c in components),
                category="other",
                meal_types=[meal.meal_type],
                family_id=plan.family_id,
                servings=meal.portions,
                prep_time=COMPONENT_RECIPE_PREP_TIME,
                cook_time=COMPONENT_RECIPE_COOK_TIME,
                is_component_based=True,
                ingredients=[Ingredient(name=c.name, quantity=mc.quantity, unit=mc.unit,
                                        allergens=c.allergens, category=c.shopping_category)
                             for mc, c in zip(ordered, components)],
                **aggregate_dietary_flags(components),
            )
            self.catalog.add_recipe(recipe)
            saved.append(recipe)
            meal.set_recipe(recipe.id)
            return meal, [AuditEvent(plan.id, audit.RECIPE_SAVED, member.id, meal.id,
                                     description=f'Component-based meal saved as recipe "{recipe.title}"',
                                     new_value=recipe.title)]

        try:
            return self._run(plan_id, user_id, action, apply, meal_id)
        except (ConcurrentModification, NotFound, OSError):
            # the plan commit failed after the recipe was written
            if saved:
                self.catalog.remove_recipe(saved[0].id)
            raise

    # ==================== Comments ====================
    def add_comment(self, plan_id: str, meal_id: str, user_id: str, content: str) -> MealComment:
        data = v.parse_payload(v.CommentInput, {"content": content})

        def apply(plan, meal, member):
            comment = MealComment(meal_id=meal.id, member_id=member.id, content=data.content)
            meal.comments.append(comment)
            return comment, [AuditEvent(plan.id, audit.COMMENT_ADDED, member.id, meal.id,
                                        description=f"{member.name or member.id} commented on {_slot_label(meal)}")]
        return self._run(plan_id, user_id, COMMENT, apply, meal_id)

    def delete_comment(self, plan_id: str, meal_id: str, comment_id: str, user_id: str) -> None:
        def apply(plan, meal, member):
            comment = meal.find_comment(comment_id)
            if comment is None:
                raise NotFound(f"Comment {comment_id} not found")
            if not can_delete_comment(member.role, comment.member_id == member.id):
                raise Unauthorized("You can only delete your own comments")
            meal.comments.remove(comment)
            return None, [AuditEvent(plan.id, audit.COMMENT_DELETED, member.id, meal.id,
                                     description="Comment deleted")]
        self._run(plan_id, user_id, COMMENT, apply, meal_id)
