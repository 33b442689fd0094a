"""
Input validation schemas using Pydantic for the JSON API.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from kondate.domain.Plan import DaySlots, PlanWindow, to_date_key
from kondate.utilities.constants import SLOTS


class DaySlotsInput(BaseModel):
    """One day of the plan form. Missing fields are empty."""
    breakfast: Optional[str] = ""
    lunch: Optional[str] = ""
    dinner: Optional[str] = ""

    @field_validator('breakfast', 'lunch', 'dinner')
    @classmethod
    def strip_whitespace(cls, v):
        """None becomes an empty string; surrounding whitespace is removed."""
        return (v or "").strip()

    def to_slots(self) -> DaySlots:
        return DaySlots(self.breakfast, self.lunch, self.dinner)


class PlanWindowInput(BaseModel):
    """Schema for saving a plan: ``{"days": {"YYYY-MM-DD": {...}, ...}}``."""
    days: Dict[str, DaySlotsInput] = Field(default_factory=dict)

    @field_validator('days')
    @classmethod
    def validate_date_keys(cls, v):
        """Keys must be calendar dates; they are normalized to YYYY-MM-DD."""
        normalized = {}
        for key, slots in v.items():
            try:
                normalized[to_date_key(key)] = slots
            except ValueError:
                raise ValueError(f"Invalid date key: {key}")
        return normalized

    def to_window(self) -> PlanWindow:
        return PlanWindow((key, self.days[key].to_slots()) for key in sorted(self.days))


class MealInput(BaseModel):
    """Schema for catalog entries. Presence checks only."""
    name: str = Field(..., min_length=1, max_length=200)
    categories: List[str] = Field(..., min_length=1)
    memo: str = ""
    user_id: str = Field(..., min_length=1)

    @field_validator('name', 'memo')
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v:
            raise ValueError('Meal name cannot be empty')
        return v

    @field_validator('categories')
    @classmethod
    def validate_categories(cls, v):
        """Keep known slot names once each, in slot order."""
        chosen = [slot for slot in SLOTS if slot in v]
        if not chosen:
            raise ValueError(f"Categories must include one of {', '.join(SLOTS)}")
        return chosen
