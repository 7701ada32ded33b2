"""Nutrition domain models."""

from dataclasses import dataclass
from enum import Enum

UNKNOWN_FOOD = "Unknown Food"
UNKNOWN_PRODUCT = "Unknown Product"

NUTRIENT_FIELDS = (
    "calories",
    "protein_g",
    "carbs_g",
    "fiber_g",
    "sugars_g",
    "total_fat_g",
    "saturated_fat_g",
    "trans_fat_g",
    "unsaturated_fat_g",
)
GRAM_FIELDS = NUTRIENT_FIELDS[1:]

# Column names used by the meals, recent_foods and recipes tables.
STORAGE_COLUMNS = {
    "calories": "calories",
    "protein_g": "protein",
    "carbs_g": "carbs",
    "fiber_g": "fiber",
    "sugars_g": "sugars",
    "total_fat_g": "total_fat",
    "saturated_fat_g": "saturated_fat",
    "trans_fat_g": "trans_fat",
    "unsaturated_fat_g": "unsaturated_fat",
}


class TotalsPrecision(Enum):
    """Rounding applied to aggregated totals."""

    RECORD = "record"
    WHOLE = "whole"


@dataclass(frozen=True)
class NutrientProfile:
    """The nine canonical nutrient fields."""

    calories: int = 0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fiber_g: float = 0.0
    sugars_g: float = 0.0
    total_fat_g: float = 0.0
    saturated_fat_g: float = 0.0
    trans_fat_g: float = 0.0
    unsaturated_fat_g: float = 0.0

    def nutrients(self) -> dict[str, float]:
        """Return the nutrient fields keyed by canonical name."""
        return {field: getattr(self, field) for field in NUTRIENT_FIELDS}

    def storage_columns(self) -> dict[str, float]:
        """Return the nutrient fields keyed by table column name."""
        return {
            column: getattr(self, field) for field, column in STORAGE_COLUMNS.items()
        }


@dataclass(frozen=True)
class TotalsRecord(NutrientProfile):
    """Sum of nutrient fields across a collection of records."""


@dataclass(frozen=True)
class NutritionRecord(NutrientProfile):
    """Nutrition for exactly one base serving of a food."""

    name: str = UNKNOWN_FOOD
    serving_size: str | None = None
    gram_weight: float | None = None


@dataclass(frozen=True)
class ScaledNutritionRecord(NutritionRecord):
    """Nutrition for a user-chosen number of base servings."""

    serving_multiplier: float = 1.0
