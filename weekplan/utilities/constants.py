from typing import Final

DAYS: Final[tuple] = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")
MEAL_TYPES: Final[tuple] = ("BREAKFAST", "LUNCH", "DINNER", "SNACK")

# Plan lifecycle, forward-only
DRAFT: Final[str] = "DRAFT"
IN_VALIDATION: Final[str] = "IN_VALIDATION"
VALIDATED: Final[str] = "VALIDATED"
LOCKED: Final[str] = "LOCKED"

# Member roles
ADMIN: Final[str] = "ADMIN"
PARENT: Final[str] = "PARENT"
MEMBER: Final[str] = "MEMBER"
CHILD: Final[str] = "CHILD"
ELEVATED_ROLES: Final[frozenset] = frozenset({ADMIN, PARENT})

# Role a meal component plays, keyed by food component category
MAIN_PROTEIN: Final[str] = "MAIN_PROTEIN"
PRIMARY_VEGETABLE: Final[str] = "PRIMARY_VEGETABLE"
SECONDARY_VEGETABLE: Final[str] = "SECONDARY_VEGETABLE"
BASE_CARB: Final[str] = "BASE_CARB"
SIDE: Final[str] = "SIDE"
CATEGORY_ROLES: Final[dict[str, str]] = {
    "PROTEIN": MAIN_PROTEIN,
    "VEGETABLE": PRIMARY_VEGETABLE,
    "CARB": BASE_CARB,
}

GENERATION_MODES: Final[tuple] = ("AUTO", "EXPRESS")

RECENT_PROTEIN_WINDOW: Final[int] = 2
SECOND_VEGETABLE_PROBABILITY: Final[float] = 0.6
COMPONENT_RECIPE_PREP_TIME: Final[int] = 15
COMPONENT_RECIPE_COOK_TIME: Final[int] = 25
COMMENT_MAX_LENGTH: Final[int] = 2000
DEFAULT_TEMPLATE_NAME: Final[str] = "Standard Work Week"
