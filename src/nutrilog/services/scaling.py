"""Serving scaling between base and scaled nutrition records."""

from nutrilog.domain.nutrition import NutritionRecord, ScaledNutritionRecord
from nutrilog.services.rounding import (
    normalize_multiplier,
    round_multiplier,
    round_nutrients,
)

MULTIPLIER_STEP = 0.25
MIN_MULTIPLIER = 0.25


def scale(base: NutritionRecord, multiplier: float) -> ScaledNutritionRecord:
    """Scale a base record to ``multiplier`` servings."""
    if isinstance(base, ScaledNutritionRecord):
        raise TypeError("Record is already scaled; unscale it or use rescale()")
    factor = normalize_multiplier(multiplier)
    values = {field: value * factor for field, value in base.nutrients().items()}
    return ScaledNutritionRecord(
        name=base.name,
        serving_size=base.serving_size,
        gram_weight=base.gram_weight,
        serving_multiplier=factor,
        **round_nutrients(values),
    )


def unscale(scaled: NutritionRecord, multiplier: float) -> NutritionRecord:
    """Recover the base record from a record scaled by ``multiplier``."""
    factor = normalize_multiplier(multiplier)
    values = {field: value / factor for field, value in scaled.nutrients().items()}
    return NutritionRecord(
        name=scaled.name,
        serving_size=scaled.serving_size,
        gram_weight=scaled.gram_weight,
        **round_nutrients(values),
    )


def rescale(
    scaled: ScaledNutritionRecord, target_multiplier: float
) -> ScaledNutritionRecord:
    """Re-derive the base of a scaled record and scale it to a new multiplier."""
    return scale(unscale(scaled, scaled.serving_multiplier), target_multiplier)


def step_multiplier(current: float, steps: int = 1) -> float:
    """Move a multiplier by whole steps of 0.25, never below 0.25."""
    stepped = normalize_multiplier(current) + steps * MULTIPLIER_STEP
    return max(MIN_MULTIPLIER, stepped)


def infer_multiplier(scaled_calories: float, base: NutritionRecord) -> float:
    """Estimate how many servings a logged amount represents from its calories."""
    if base.calories > 0:
        return round_multiplier(scaled_calories / base.calories)
    return 1.0
