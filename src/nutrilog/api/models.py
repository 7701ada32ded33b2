"""Pydantic request models for the HTTP API."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from nutrilog.domain.nutrition import TotalsPrecision


class NutritionIn(BaseModel):
    """Nutrient values for one serving, as entered by a client."""

    name: str | None = None
    calories: float = 0
    protein_g: float = 0
    carbs_g: float = 0
    fiber_g: float = 0
    sugars_g: float = 0
    total_fat_g: float = 0
    saturated_fat_g: float = 0
    trans_fat_g: float = 0
    unsaturated_fat_g: float = 0
    serving_size: str | None = None
    gram_weight: float | None = None


class ScaleRequest(BaseModel):
    """Scale a base serving."""

    base: NutritionIn
    multiplier: float = Field(default=1.0, gt=0)


class RescaleRequest(BaseModel):
    """Move an already scaled record to a different multiplier."""

    record: NutritionIn
    multiplier: float = Field(gt=0)
    target_multiplier: float = Field(gt=0)


class StepRequest(BaseModel):
    """Nudge a multiplier up or down by one step."""

    multiplier: float = 1.0
    direction: Literal["up", "down"] = "up"


class TotalsRequest(BaseModel):
    """Sum a collection of records."""

    records: list[NutritionIn] = Field(default_factory=list)
    precision: TotalsPrecision = TotalsPrecision.RECORD


class LogMealRequest(BaseModel):
    """Log a base serving into an hour slot."""

    day: date
    hour: int = Field(ge=0, le=23)
    base: NutritionIn
    multiplier: float = Field(default=1.0, gt=0)


class UpdateServingRequest(BaseModel):
    """Change a logged meal's serving multiplier."""

    multiplier: float = Field(gt=0)


class IngredientIn(BaseModel):
    base: NutritionIn
    multiplier: float = Field(default=1.0, gt=0)


class RecipeRequest(BaseModel):
    """Create a recipe from base servings and their multipliers."""

    name: str
    ingredients: list[IngredientIn] = Field(default_factory=list)


class GoalsRequest(BaseModel):
    """Daily goals; ``day`` selects the snapshot to update."""

    calories: int = Field(default=2000, ge=0)
    protein: int = Field(default=150, ge=0)
    carbs: int = Field(default=200, ge=0)
    fats: int = Field(default=65, ge=0)
    day: date | None = None
