"""Ingredient domain entity: name, quantity, unit and the allergens it carries."""
from typing import List, Optional


class Ingredient:
    def __init__(self, name: str = "", quantity: float = 0, unit: str = "",
                 allergens: Optional[List[str]] = None, category: str = ""):
        self.name = name
        self.quantity = quantity
        self.unit = unit
        self.allergens = allergens[:] if allergens else []
        self.category = category

    def __str__(self) -> str:
        parts = [f"{self.name} - {self.quantity} {self.unit}"]
        if self.allergens:
            parts.append("Allergens: " + ", ".join(self.allergens))
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient object from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"name", "quantity", "unit", "allergens", "category"}
        filtered = {k: v for k, v in d.items() if k in allowed}
        return Ingredient(**filtered)

    def to_dict(self):
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "allergens": self.allergens,
            "category": self.category,
        }
