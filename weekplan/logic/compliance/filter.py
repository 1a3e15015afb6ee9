"""Dietary compliance filter.

Narrows any list of recipes or food components to the items that satisfy a
household's hard dietary constraints. All rules are applied conjunctively.
Also derives the aggregate dietary flags of a component-based meal.
"""
from typing import Any, Dict, Iterable, List, Optional
from weekplan.domain.DietProfile import DietProfile
from weekplan.utilities.exceptions import NoCompliantCandidates


def _allergens_of(item: Any) -> set:
    return {a.strip().lower() for a in (getattr(item, 'allergens', None) or []) if a}


def is_compliant(item: Any, profile: DietProfile) -> bool:
    """Return True if a single Recipe or FoodComponent satisfies the profile."""
    if profile.kosher and getattr(item, 'kosher_category', None) is None:
        return False
    if profile.halal and not getattr(item, 'halal_friendly', False):
        return False
    # vegan implies vegetarian, so the vegan predicate alone controls when set
    if profile.vegan:
        if not getattr(item, 'vegan', False):
            return False
    elif profile.vegetarian and not getattr(item, 'vegetarian', False):
        return False
    if profile.gluten_free and not getattr(item, 'gluten_free', False):
        return False
    if profile.lactose_free and not getattr(item, 'lactose_free', False):
        return False
    if profile.allergies and _allergens_of(item) & profile.allergies:
        return False
    return True


def filter_compliant(candidates: Iterable[Any], profile: DietProfile) -> List[Any]:
    """Return the candidates that satisfy every constraint, preserving order."""
    return [item for item in candidates if is_compliant(item, profile)]


def require_compliant(candidates: Iterable[Any], profile: DietProfile, what: str = "candidates") -> List[Any]:
    """Like filter_compliant, but an empty result is a hard failure."""
    kept = filter_compliant(candidates, profile)
    if not kept:
        raise NoCompliantCandidates(f"No compliant {what} for the household diet profile")
    return kept


def aggregate_kosher_category(components: Iterable[Any]) -> Optional[str]:
    """Kosher category of a dish made of the given components.

    Any non-kosher component, or mixing meat with dairy, makes the dish
    non-kosher (None).
    """
    categories = [getattr(c, 'kosher_category', None) for c in components]
    if any(cat is None for cat in categories):
        return None
    has_meat = 'meat' in categories
    has_dairy = 'dairy' in categories
    if has_meat and has_dairy:
        return None
    if has_meat:
        return 'meat'
    if has_dairy:
        return 'dairy'
    return 'parve'


def aggregate_dietary_flags(components: Iterable[Any]) -> Dict[str, Any]:
    """Dietary flags of a component-based meal (AND over its components)."""
    items = list(components)
    return {
        "vegetarian": all(c.vegetarian for c in items),
        "vegan": all(c.vegan for c in items),
        "pescatarian": all(c.pescatarian or c.vegetarian for c in items),
        "gluten_free": all(c.gluten_free for c in items),
        "lactose_free": all(c.lactose_free for c in items),
        "halal_friendly": all(c.halal_friendly for c in items),
        "kosher_category": aggregate_kosher_category(items),
    }
