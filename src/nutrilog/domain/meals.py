"""Domain models for meal logging, recipes and goals."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from nutrilog.domain.nutrition import (
    NutritionRecord,
    ScaledNutritionRecord,
    TotalsRecord,
)


@dataclass(frozen=True)
class MealEntry:
    """A food logged into an hour slot of a day."""

    id: UUID
    user_id: UUID
    day: date
    hour: int
    nutrition: ScaledNutritionRecord
    base: NutritionRecord | None = None


@dataclass(frozen=True)
class Recipe:
    """A named set of scaled ingredients with their totals."""

    name: str
    ingredients: list[ScaledNutritionRecord]
    totals: TotalsRecord
    id: UUID | None = None
    user_id: UUID | None = None


@dataclass(frozen=True)
class DailyGoals:
    """Daily nutrition targets."""

    calories: int = 2000
    protein: int = 150
    carbs: int = 200
    fats: int = 65


@dataclass(frozen=True)
class GoalMetric:
    """Progress of one tracked value towards its goal."""

    current: float
    goal: float
    percentage: float


@dataclass(frozen=True)
class GoalProgress:
    """Progress of a day's totals towards the daily goals."""

    calories: GoalMetric
    protein: GoalMetric
    carbs: GoalMetric
    fats: GoalMetric


@dataclass(frozen=True)
class DailySummary:
    """Totals for a day, split by hour, with optional goal progress."""

    day: date
    totals: TotalsRecord
    hourly: dict[int, TotalsRecord] = field(default_factory=dict)
    progress: GoalProgress | None = None
