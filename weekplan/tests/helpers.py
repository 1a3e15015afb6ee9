"""Shared fixtures: a seeded catalog and family written to a temporary data directory."""
import random
import tempfile
from datetime import datetime
from pathlib import Path

from weekplan.domain.DietProfile import DietProfile
from weekplan.domain.Family import Family, MealScheduleTemplate, Member
from weekplan.domain.FoodComponent import FoodComponent
from weekplan.domain.Ingredient import Ingredient
from weekplan.domain.Recipe import Recipe
from weekplan.events.audit_log import AuditLogRecorder
from weekplan.events.Event_Bus import EventBus
from weekplan.infra.Catalog_Repository import CatalogRepository
from weekplan.infra.Family_Repository import FamilyRepository
from weekplan.infra.Plan_Repository import PlanRepository
from weekplan.logic.generation.generator import PlanGenerator
from weekplan.logic.lifecycle.state_machine import PlanStateMachine
from weekplan.utilities.constants import ADMIN, CHILD, DAYS, DEFAULT_TEMPLATE_NAME, MEMBER, PARENT

FAMILY_ID = "fam-1"
ADMIN_USER = "u-admin"
PARENT_USER = "u-parent"
MEMBER_USER = "u-member"
CHILD_USER = "u-child"
STRANGER_USER = "u-stranger"

WEEK_START = datetime(2026, 10, 19).date()
NOW = datetime(2026, 10, 18, 9, 0)

VEGGIE = dict(vegetarian=True, vegan=True, pescatarian=True, gluten_free=True,
              lactose_free=True, halal_friendly=True, kosher_category="parve")


def recipe(id, category, **flags):
    return Recipe(id=id, title=id.replace("-", " ").title(), category=category,
                  meal_types=["LUNCH", "DINNER"], servings=4, **flags)


def component(id, category, name=None, **flags):
    return FoodComponent(id=id, name=name or id.split("-", 1)[-1].title(), category=category,
                         default_quantity=100, unit="g", is_system_component=True, **flags)


def sample_recipes():
    return [
        recipe("fav-pasta", "pasta", is_favorite=True, **VEGGIE),
        recipe("fav-soup", "soup", is_favorite=True, **VEGGIE),
        recipe("fav-curry", "curry", is_favorite=True, **VEGGIE),
        recipe("nov-tagine", "stew", is_novelty=True, **VEGGIE),
        recipe("nov-bowl", "bowl", is_novelty=True, **VEGGIE),
        recipe("other-salad", "salad", **VEGGIE),
        recipe("other-gratin", "gratin", **VEGGIE),
        recipe("other-wok", "wok", **VEGGIE),
        recipe("other-pie", "pie", **VEGGIE),
        recipe("fav-steak", "grill", is_favorite=True, gluten_free=True, kosher_category="meat"),
        recipe("other-satay", "grill", vegetarian=True, vegan=True,
               ingredients=[Ingredient("Peanut sauce", 100, "g", allergens=["Peanuts"])]),
    ]


def sample_components():
    return [
        component("p-tofu", "PROTEIN", **VEGGIE),
        component("p-lentils", "PROTEIN", **VEGGIE),
        component("p-tempeh", "PROTEIN", **VEGGIE),
        component("p-chicken", "PROTEIN", gluten_free=True, kosher_category="meat"),
        component("v-broccoli", "VEGETABLE", **VEGGIE),
        component("v-carrots", "VEGETABLE", **VEGGIE),
        component("v-beans", "VEGETABLE", **VEGGIE),
        component("c-rice", "CARB", **VEGGIE),
        component("c-potatoes", "CARB", **VEGGIE),
    ]


def sample_family(profile=None):
    members = [
        Member(id="m-admin", user_id=ADMIN_USER, family_id=FAMILY_ID, name="Ada", role=ADMIN,
               can_view_audit_log=True),
        Member(id="m-parent", user_id=PARENT_USER, family_id=FAMILY_ID, name="Pat", role=PARENT),
        Member(id="m-member", user_id=MEMBER_USER, family_id=FAMILY_ID, name="Max", role=MEMBER),
        Member(id="m-child", user_id=CHILD_USER, family_id=FAMILY_ID, name="Kim", role=CHILD),
    ]
    profile = profile or DietProfile(vegetarian=True, allergies=["peanuts"], favorite_ratio=0.6, max_novelties=1)
    return Family(id=FAMILY_ID, name="Test family", diet_profile=profile, members=members)


def lunch_and_dinner_template():
    """Seven days of lunch and dinner: 14 slots."""
    return MealScheduleTemplate(id="tpl-default", name=DEFAULT_TEMPLATE_NAME, is_system=True,
                                schedule=[{"day_of_week": d, "meal_types": ["LUNCH", "DINNER"]} for d in DAYS])


def dinner_only_template():
    return MealScheduleTemplate(id="tpl-dinners", name="Dinners", is_system=True,
                                schedule=[{"day_of_week": d, "meal_types": ["DINNER"]} for d in DAYS])


class Workspace:
    """Repositories, generator and state machine over a throwaway data directory."""

    def __init__(self, recipes=None, components=None, family=None, templates=None,
                 seed=7, clock=None, review_step=False):
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self.catalog = CatalogRepository(self.data_dir)
        self.families = FamilyRepository(self.data_dir)
        self.plans = PlanRepository(self.data_dir)
        self.catalog.save_recipes(sample_recipes() if recipes is None else recipes)
        self.catalog.save_components(sample_components() if components is None else components)
        self.families.save_family(family or sample_family())
        for template in templates or [lunch_and_dinner_template(), dinner_only_template()]:
            self.families.save_template(template)
        self.bus = EventBus()
        self.now = clock or NOW
        self.generator = PlanGenerator(self.catalog, self.families, self.plans,
                                       rng=random.Random(seed), bus=self.bus)
        self.audit_log = AuditLogRecorder(self.bus)
        self.audit_log.start()
        self.lifecycle = PlanStateMachine(self.plans, self.families, self.catalog,
                                          generator=self.generator, bus=self.bus,
                                          audit_log=self.audit_log,
                                          clock=lambda: self.now, review_step=review_step)

    def generate(self, mode="AUTO", user_id=ADMIN_USER, **kwargs):
        return self.generator.generate(mode, FAMILY_ID, WEEK_START, acting_user_id=user_id, **kwargs)

    def cleanup(self):
        self.audit_log.stop()
        self._tmp.cleanup()
