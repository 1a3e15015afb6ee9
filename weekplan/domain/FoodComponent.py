"""FoodComponent domain entity: a single building block of a component-based meal."""
import uuid
from typing import List, Optional


class FoodComponent:
    def __init__(self, id: Optional[str] = None, name: str = "", category: str = "OTHER",
                 default_quantity: float = 0, unit: str = "", vegetarian: bool = False,
                 vegan: bool = False, pescatarian: bool = False, gluten_free: bool = False,
                 lactose_free: bool = False, halal_friendly: bool = False,
                 kosher_category: Optional[str] = None, allergens: Optional[List[str]] = None,
                 shopping_category: str = "", family_id: Optional[str] = None,
                 is_system_component: bool = False):
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.category = category.upper()
        self.default_quantity = default_quantity
        self.unit = unit
        self.vegetarian = vegetarian
        self.vegan = vegan
        self.pescatarian = pescatarian
        self.gluten_free = gluten_free
        self.lactose_free = lactose_free
        self.halal_friendly = halal_friendly
        self.kosher_category = kosher_category
        self.allergens = allergens[:] if allergens else []
        self.shopping_category = shopping_category
        self.family_id = family_id
        self.is_system_component = is_system_component

    def __str__(self) -> str:
        return f"{self.name} [{self.category}] - {self.default_quantity} {self.unit}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        return FoodComponent(**dict(data))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "default_quantity": self.default_quantity,
            "unit": self.unit,
            "vegetarian": self.vegetarian,
            "vegan": self.vegan,
            "pescatarian": self.pescatarian,
            "gluten_free": self.gluten_free,
            "lactose_free": self.lactose_free,
            "halal_friendly": self.halal_friendly,
            "kosher_category": self.kosher_category,
            "allergens": self.allergens,
            "shopping_category": self.shopping_category,
            "family_id": self.family_id,
            "is_system_component": self.is_system_component,
        }
