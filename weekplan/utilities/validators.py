"""
Input validation schemas using Pydantic for better data integrity.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from weekplan.utilities.constants import COMMENT_MAX_LENGTH, MEAL_TYPES
from weekplan.utilities.exceptions import InvalidJSONSchedule, InvalidPayload

DAY_PATTERN = r'^(MONDAY|TUESDAY|WEDNESDAY|THURSDAY|FRIDAY|SATURDAY|SUNDAY)$'
MEAL_TYPE_PATTERN = r'^(BREAKFAST|LUNCH|DINNER|SNACK)$'
CUTOFF_TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'

M = TypeVar('M', bound=BaseModel)


def _upper(v):
    return v.strip().upper() if isinstance(v, str) else v


class DietProfileInput(BaseModel):
    """Schema for a household diet profile."""
    kosher: bool = False
    halal: bool = False
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    lactose_free: bool = False
    allergies: List[str] = Field(default_factory=list)
    favorite_ratio: float = Field(0.6, ge=0.0, le=1.0)
    max_novelties: int = Field(1, ge=0)

    @field_validator('allergies')
    @classmethod
    def normalize_allergies(cls, v):
        """Lowercase, strip and drop empty allergy names."""
        return sorted({a.strip().lower() for a in v if a and a.strip()})


class ScheduleItemInput(BaseModel):
    day_of_week: str = Field(..., pattern=DAY_PATTERN)
    meal_types: List[str] = Field(..., min_length=1)

    @field_validator('day_of_week', mode='before')
    @classmethod
    def upper_day(cls, v):
        return _upper(v)

    @field_validator('meal_types', mode='before')
    @classmethod
    def upper_meal_types(cls, v):
        return [_upper(m) for m in v] if isinstance(v, list) else v

    @field_validator('meal_types')
    @classmethod
    def validate_meal_types(cls, v):
        unknown = [m for m in v if m not in MEAL_TYPES]
        if unknown:
            raise ValueError(f"Unknown meal types: {unknown}")
        if len(set(v)) != len(v):
            raise ValueError('Duplicate meal type in a day')
        return v


class ScheduleInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    schedule: List[ScheduleItemInput] = Field(..., min_length=1, max_length=7)

    @field_validator('schedule')
    @classmethod
    def validate_unique_days(cls, v):
        days = [item.day_of_week for item in v]
        if len(set(days)) != len(days):
            raise ValueError('Each day may appear only once in a schedule')
        return v


class GenerateInput(BaseModel):
    mode: str = Field('AUTO', pattern=r'^(AUTO|EXPRESS)$')
    week_start_date: date
    template_id: Optional[str] = None

    @field_validator('mode', mode='before')
    @classmethod
    def upper_mode(cls, v):
        return _upper(v)


class SwapInput(BaseModel):
    new_recipe_id: str = Field(..., min_length=1)


class PortionsInput(BaseModel):
    portions: int = Field(..., ge=1)


class LockInput(BaseModel):
    locked: bool


class UpdateMealInput(BaseModel):
    """Only whitelisted fields may be updated."""
    recipe_id: Optional[str] = None
    portions: Optional[int] = Field(None, ge=1)

    @model_validator(mode='after')
    def require_one_field(self):
        if self.recipe_id is None and self.portions is None:
            raise ValueError('At least one field (recipe_id or portions) must be provided')
        return self


class AddComponentInput(BaseModel):
    component_id: str = Field(..., min_length=1)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1)
    order: Optional[int] = Field(None, ge=0)


class UpdateComponentInput(BaseModel):
    meal_component_id: str = Field(..., min_length=1)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1)
    order: Optional[int] = Field(None, ge=0)

    @model_validator(mode='after')
    def require_one_field(self):
        if self.quantity is None and self.unit is None and self.order is None:
            raise ValueError('At least one field must be provided for update')
        return self


class RemoveComponentInput(BaseModel):
    meal_component_id: str = Field(..., min_length=1)


class SwapComponentInput(BaseModel):
    meal_component_id: str = Field(..., min_length=1)
    new_component_id: str = Field(..., min_length=1)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1)


class SaveAsRecipeInput(BaseModel):
    recipe_name: Optional[str] = Field(None, min_length=3, max_length=200)

    @field_validator('recipe_name')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class AddMealInput(BaseModel):
    day_of_week: str = Field(..., pattern=DAY_PATTERN)
    meal_type: str = Field(..., pattern=MEAL_TYPE_PATTERN)
    recipe_id: Optional[str] = None

    @field_validator('day_of_week', 'meal_type', mode='before')
    @classmethod
    def upper_enum(cls, v):
        return _upper(v)


class SkipMealInput(BaseModel):
    skip_reason: Optional[str] = Field(None, max_length=500)


class CommentInput(BaseModel):
    content: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)

    @field_validator('content')
    @classmethod
    def strip_content(cls, v):
        """Remove leading/trailing whitespace; blank comments are rejected."""
        if not v.strip():
            raise ValueError('Comment content is required')
        return v.strip()


class CutoffInput(BaseModel):
    cutoff_date: Optional[date] = None
    cutoff_time: Optional[str] = Field(None, pattern=CUTOFF_TIME_PATTERN)
    allow_comments_after_cutoff: bool = False


def parse_payload(model: Type[M], payload: Optional[Dict[str, Any]]) -> M:
    """Validate a request payload, raising InvalidPayload with the pydantic messages."""
    try:
        return model.model_validate(payload or {})
    except ValidationError as e:
        messages = "; ".join(f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
                             for err in e.errors())
        raise InvalidPayload(messages) from e


def parse_schedule(payload: Any) -> ScheduleInput:
    """Validate a meal schedule template payload."""
    try:
        return ScheduleInput.model_validate(payload)
    except ValidationError as e:
        raise InvalidJSONSchedule(f"Malformed schedule: {e.error_count()} error(s): "
                                  + "; ".join(err['msg'] for err in e.errors())) from e


__all__ = [
    'DietProfileInput', 'ScheduleItemInput', 'ScheduleInput', 'GenerateInput',
    'SwapInput', 'PortionsInput', 'LockInput', 'UpdateMealInput', 'AddComponentInput',
    'UpdateComponentInput', 'RemoveComponentInput', 'SwapComponentInput', 'SaveAsRecipeInput',
    'AddMealInput', 'SkipMealInput', 'CommentInput', 'CutoffInput', 'parse_payload', 'parse_schedule',
]
