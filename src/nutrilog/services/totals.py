"""Aggregation of nutrition records into totals."""

import math
from collections.abc import Iterable

from nutrilog.domain.meals import DailyGoals, GoalMetric, GoalProgress, MealEntry
from nutrilog.domain.nutrition import (
    NUTRIENT_FIELDS,
    NutrientProfile,
    TotalsPrecision,
    TotalsRecord,
)
from nutrilog.services.rounding import round_nutrients, round_tenth

MAX_PERCENTAGE = 100.0


def aggregate(
    records: Iterable[NutrientProfile],
    precision: TotalsPrecision = TotalsPrecision.RECORD,
) -> TotalsRecord:
    """Sum nutrient fields across records, rounding once at the end.

    ``math.fsum`` keeps the sums exact, so the result does not depend on the
    order of the records.
    """
    items = list(records)
    sums = {
        field: math.fsum(getattr(item, field) for item in items)
        for field in NUTRIENT_FIELDS
    }
    return TotalsRecord(**round_nutrients(sums, precision))


def daily_totals(meals: Iterable[MealEntry]) -> TotalsRecord:
    """Whole-unit totals for the meals of a day."""
    return aggregate(
        (meal.nutrition for meal in meals), precision=TotalsPrecision.WHOLE
    )


def hourly_totals(meals: Iterable[MealEntry]) -> dict[int, TotalsRecord]:
    """Whole-unit totals per hour slot, for hours that have meals."""
    by_hour: dict[int, list[MealEntry]] = {}
    for meal in meals:
        by_hour.setdefault(meal.hour, []).append(meal)
    return {hour: daily_totals(by_hour[hour]) for hour in sorted(by_hour)}


def goal_progress(totals: TotalsRecord, goals: DailyGoals) -> GoalProgress:
    """Compare totals against daily goals."""
    return GoalProgress(
        calories=_metric(totals.calories, goals.calories),
        protein=_metric(totals.protein_g, goals.protein),
        carbs=_metric(totals.carbs_g, goals.carbs),
        fats=_metric(totals.total_fat_g, goals.fats),
    )


def _metric(current: float, goal: float) -> GoalMetric:
    if goal <= 0:
        return GoalMetric(current=current, goal=goal, percentage=0.0)
    percentage = min(max(current / goal * 100, 0.0), MAX_PERCENTAGE)
    return GoalMetric(current=current, goal=goal, percentage=round_tenth(percentage))
