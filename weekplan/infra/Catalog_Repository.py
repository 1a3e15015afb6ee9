import logging
from pathlib import Path
from threading import Lock
from typing import List, Optional
from weekplan.domain.DietProfile import DietProfile
from weekplan.domain.FoodComponent import FoodComponent
from weekplan.domain.Recipe import Recipe
from weekplan.infra.json_store import atomic_write, read_json
from weekplan.infra.paths import COMPONENTS_FILENAME, RECIPES_FILENAME, data_file
from weekplan.logic.compliance.filter import filter_compliant

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Recipes and food components visible to a family (its own plus public ones)."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.recipes_file = data_file(RECIPES_FILENAME, data_dir)
        self.components_file = data_file(COMPONENTS_FILENAME, data_dir)
        self._lock = Lock()

    def _load_recipes(self) -> List[Recipe]:
        return [Recipe.from_dict(entry) for entry in read_json(self.recipes_file, [])]

    def _load_components(self) -> List[FoodComponent]:
        return [FoodComponent.from_dict(entry) for entry in read_json(self.components_file, [])]

    def list_recipes(self, family_id: Optional[str] = None) -> List[Recipe]:
        return [r for r in self._load_recipes() if r.family_id is None or r.family_id == family_id]

    def list_components(self, family_id: Optional[str] = None) -> List[FoodComponent]:
        return [c for c in self._load_components()
                if c.is_system_component or c.family_id is None or c.family_id == family_id]

    def find_compliant(self, profile: DietProfile, family_id: Optional[str] = None,
                       meal_type: Optional[str] = None) -> List[Recipe]:
        recipes = [r for r in self.list_recipes(family_id) if r.serves(meal_type)]
        compliant = filter_compliant(recipes, profile)
        logger.debug("Compliant recipes for family %s: %d of %d", family_id, len(compliant), len(recipes))
        return compliant

    def find_compliant_components(self, profile: DietProfile, family_id: Optional[str] = None) -> List[FoodComponent]:
        return filter_compliant(self.list_components(family_id), profile)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self._load_recipes():
            if recipe.id == recipe_id:
                return recipe
        return None

    def get_component(self, component_id: str) -> Optional[FoodComponent]:
        for component in self._load_components():
            if component.id == component_id:
                return component
        return None

    def add_recipe(self, recipe: Recipe) -> Recipe:
        with self._lock:
            stored = read_json(self.recipes_file, [])
            stored.append(recipe.to_dict())
            atomic_write(self.recipes_file, stored)
        logger.info("Recipe saved: %s (%s)", recipe.title, recipe.id)
        return recipe

    def remove_recipe(self, recipe_id: str) -> None:
        with self._lock:
            stored = read_json(self.recipes_file, [])
            atomic_write(self.recipes_file, [entry for entry in stored if entry.get("id") != recipe_id])
        logger.info("Recipe removed: %s", recipe_id)

    def save_recipes(self, recipes: List[Recipe]) -> None:
        with self._lock:
            atomic_write(self.recipes_file, [r.to_dict() for r in recipes])

    def save_components(self, components: List[FoodComponent]) -> None:
        with self._lock:
            atomic_write(self.components_file, [c.to_dict() for c in components])
