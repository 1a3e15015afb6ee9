"""Recipe domain entity: title, category, meal types, selection flags, dietary fields, ingredients."""
import uuid
from typing import List, Optional, Set
from weekplan.domain.Ingredient import Ingredient


class Recipe:
    def __init__(self, id: Optional[str] = None, title: str = "", category: str = "",
                 meal_types: Optional[List[str]] = None, is_favorite: bool = False,
                 is_novelty: bool = False, vegetarian: bool = False, vegan: bool = False,
                 pescatarian: bool = False, gluten_free: bool = False,
                 lactose_free: bool = False, halal_friendly: bool = False,
                 kosher_category: Optional[str] = None,
                 ingredients: Optional[List[Ingredient]] = None,
                 family_id: Optional[str] = None, servings: int = 0,
                 prep_time: int = 0, cook_time: int = 0,
                 is_component_based: bool = False):
        self.id = id or str(uuid.uuid4())
        self.title = title
        self.category = category
        self.meal_types = [m.upper() for m in meal_types] if meal_types else []
        self.is_favorite = is_favorite
        self.is_novelty = is_novelty
        self.vegetarian = vegetarian
        self.vegan = vegan
        self.pescatarian = pescatarian
        self.gluten_free = gluten_free
        self.lactose_free = lactose_free
        self.halal_friendly = halal_friendly
        self.kosher_category = kosher_category
        self.ingredients = ingredients[:] if ingredients else []
        self.family_id = family_id
        self.servings = servings
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.is_component_based = is_component_based

    def __str__(self) -> str:
        flags = [name for name, on in (("favorite", self.is_favorite), ("novelty", self.is_novelty)) if on]
        return f"{self.title} ({self.category}) - {', '.join(flags) or 'regular'}"

    __repr__ = __str__

    @property
    def allergens(self) -> Set[str]:
        """Union of the allergens of every ingredient."""
        found: Set[str] = set()
        for ing in self.ingredients:
            found.update(ing.allergens)
        return found

    def serves(self, meal_type: Optional[str]) -> bool:
        # No declared meal types means the recipe fits any slot
        return not meal_type or not self.meal_types or meal_type.upper() in self.meal_types

    @staticmethod
    def from_dict(data):
        d = dict(data)
        d['ingredients'] = [Ingredient.from_dict(ing) for ing in d.get('ingredients', [])]
        return Recipe(**d)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "meal_types": self.meal_types,
            "is_favorite": self.is_favorite,
            "is_novelty": self.is_novelty,
            "vegetarian": self.vegetarian,
            "vegan": self.vegan,
            "pescatarian": self.pescatarian,
            "gluten_free": self.gluten_free,
            "lactose_free": self.lactose_free,
            "halal_friendly": self.halal_friendly,
            "kosher_category": self.kosher_category,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "family_id": self.family_id,
            "servings": self.servings,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "is_component_based": self.is_component_based,
        }
