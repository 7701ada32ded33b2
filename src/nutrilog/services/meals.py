"""Meal logging service."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from nutrilog.domain.meals import DailyGoals, DailySummary, MealEntry
from nutrilog.domain.nutrition import (
    NutritionRecord,
    ScaledNutritionRecord,
    TotalsPrecision,
)
from nutrilog.domain.sources import HistoryEntry
from nutrilog.services.extraction import extract
from nutrilog.services.rounding import normalize_multiplier, round_nutrients
from nutrilog.services.scaling import infer_multiplier, scale, unscale
from nutrilog.services.totals import daily_totals, goal_progress, hourly_totals

HISTORY_LIMIT = 50

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        hour: int,
        nutrition: ScaledNutritionRecord,
        base: NutritionRecord,
    ) -> MealEntry:
        """Create a meal and return it."""

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        """Return a meal by id, if present."""

    def list_meals(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return the meals logged on a day."""

    def update_meal(
        self, meal_id: UUID, nutrition: ScaledNutritionRecord, base: NutritionRecord
    ) -> MealEntry:
        """Replace a meal's nutrition and return it."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal."""


class RecentFoodRepository(Protocol):
    """Persistence interface for the per-user recent foods history."""

    def upsert_recent_food(
        self, user_id: UUID, nutrition: ScaledNutritionRecord
    ) -> None:
        """Store the latest serving of a food, keyed by its name."""

    def list_recent_foods(self, user_id: UUID, limit: int) -> list[HistoryEntry]:
        """Return recent foods, most recently used first."""


@dataclass
class MealLogService:
    """Logs meals at a serving multiplier and summarises days."""

    repository: MealRepository
    history_repository: RecentFoodRepository

    def log_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        hour: int,
        base: NutritionRecord,
        multiplier: float = 1.0,
    ) -> MealEntry:
        """Scale a base record and log it into an hour slot."""
        _check_multiplier(multiplier)
        scaled = scale(base, multiplier)
        meal = self.repository.create_meal(
            user_id, day, hour, _whole_units(scaled), base
        )
        self.history_repository.upsert_recent_food(user_id, scaled)
        return meal

    def edit_context(self, meal_id: UUID) -> tuple[NutritionRecord, float] | None:
        """Return the base record and current multiplier for editing a meal."""
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            return None
        return self._base_and_multiplier(meal)

    def update_serving(self, meal_id: UUID, multiplier: float) -> MealEntry | None:
        """Re-scale a logged meal from its base record."""
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            return None
        _check_multiplier(multiplier)
        base, _ = self._base_and_multiplier(meal)
        scaled = scale(base, multiplier)
        updated = self.repository.update_meal(meal_id, _whole_units(scaled), base)
        self.history_repository.upsert_recent_food(meal.user_id, scaled)
        return updated

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal; returns False when it does not exist."""
        if self.repository.get_meal(meal_id) is None:
            return False
        self.repository.delete_meal(meal_id)
        return True

    def list_meals(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return a day's meals ordered by hour."""
        return sorted(
            self.repository.list_meals(user_id, day), key=lambda meal: meal.hour
        )

    def recent_foods(
        self, user_id: UUID, limit: int = HISTORY_LIMIT
    ) -> list[NutritionRecord]:
        """Return recently logged foods as base records."""
        return [
            extract(entry)
            for entry in self.history_repository.list_recent_foods(user_id, limit)
        ]

    def history_base(self, user_id: UUID, name: str) -> NutritionRecord | None:
        """Return the base record of a recent food by name."""
        for entry in self.history_repository.list_recent_foods(user_id, HISTORY_LIMIT):
            if entry.row.get("name") == name:
                return extract(entry)
        return None

    def daily_summary(
        self, user_id: UUID, day: date, goals: DailyGoals | None = None
    ) -> DailySummary:
        """Return whole-unit totals for a day, per hour and against goals."""
        meals = self.repository.list_meals(user_id, day)
        totals = daily_totals(meals)
        return DailySummary(
            day=day,
            totals=totals,
            hourly=hourly_totals(meals),
            progress=goal_progress(totals, goals) if goals is not None else None,
        )

    def _base_and_multiplier(self, meal: MealEntry) -> tuple[NutritionRecord, float]:
        if meal.base is not None:
            return meal.base, meal.nutrition.serving_multiplier
        history_base = self.history_base(meal.user_id, meal.nutrition.name)
        if history_base is not None:
            return history_base, infer_multiplier(meal.nutrition.calories, history_base)
        multiplier = meal.nutrition.serving_multiplier
        return unscale(meal.nutrition, multiplier), multiplier


def _whole_units(scaled: ScaledNutritionRecord) -> ScaledNutritionRecord:
    return replace(
        scaled, **round_nutrients(scaled.nutrients(), TotalsPrecision.WHOLE)
    )


def _check_multiplier(multiplier: float) -> None:
    if normalize_multiplier(multiplier) != multiplier:
        _logger.debug("Serving multiplier %r replaced with 1", multiplier)
