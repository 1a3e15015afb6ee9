"""DietProfile domain entity: a household's hard dietary constraints and selection preferences."""
from typing import Iterable, Optional


class DietProfile:
    def __init__(self, kosher: bool = False, halal: bool = False, vegetarian: bool = False,
                 vegan: bool = False, gluten_free: bool = False, lactose_free: bool = False,
                 allergies: Optional[Iterable[str]] = None, favorite_ratio: float = 0.6,
                 max_novelties: int = 1):
        if not 0.0 <= favorite_ratio <= 1.0:
            raise ValueError("favorite_ratio must be within [0, 1]")
        if max_novelties < 0:
            raise ValueError("max_novelties must be >= 0")
        self.kosher = kosher
        self.halal = halal
        self.vegetarian = vegetarian
        self.vegan = vegan
        self.gluten_free = gluten_free
        self.lactose_free = lactose_free
        self.allergies = {a.strip().lower() for a in (allergies or []) if a and a.strip()}
        self.favorite_ratio = favorite_ratio
        self.max_novelties = max_novelties

    def __repr__(self) -> str:
        active = [k for k in ("kosher", "halal", "vegetarian", "vegan", "gluten_free", "lactose_free")
                  if getattr(self, k)]
        return f"DietProfile({', '.join(active) or 'unrestricted'}; allergies={sorted(self.allergies)})"

    @staticmethod
    def from_dict(data):
        d = dict(data or {})
        allowed = {"kosher", "halal", "vegetarian", "vegan", "gluten_free", "lactose_free",
                   "allergies", "favorite_ratio", "max_novelties"}
        return DietProfile(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "kosher": self.kosher,
            "halal": self.halal,
            "vegetarian": self.vegetarian,
            "vegan": self.vegan,
            "gluten_free": self.gluten_free,
            "lactose_free": self.lactose_free,
            "allergies": sorted(self.allergies),
            "favorite_ratio": self.favorite_ratio,
            "max_novelties": self.max_novelties,
        }
