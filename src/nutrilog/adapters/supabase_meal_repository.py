"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from nutrilog.adapters.supabase_rows import nutrients_from_row
from nutrilog.domain.meals import MealEntry
from nutrilog.domain.nutrition import NutritionRecord, ScaledNutritionRecord
from nutrilog.services.meals import MealRepository
from nutrilog.services.rounding import normalize_multiplier, round_multiplier


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the meals table."""

    client: Client

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        hour: int,
        nutrition: ScaledNutritionRecord,
        base: NutritionRecord,
    ) -> MealEntry:
        """Insert a meal row and return it."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "date": day.isoformat(),
                    "hour": hour,
                    **_nutrition_payload(nutrition, base),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select("*")
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def list_meals(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return the meals logged on a day."""
        response = (
            self.client.table("meals")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .order("hour", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def update_meal(
        self, meal_id: UUID, nutrition: ScaledNutritionRecord, base: NutritionRecord
    ) -> MealEntry:
        """Replace a meal's nutrition columns."""
        response = (
            self.client.table("meals")
            .update(_nutrition_payload(nutrition, base))
            .eq("id", str(meal_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update meal")
        return _parse_meal(response.data[0])

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()


def _nutrition_payload(
    nutrition: ScaledNutritionRecord, base: NutritionRecord
) -> dict[str, object]:
    base_columns = {
        f"base_{column}": value for column, value in base.storage_columns().items()
    }
    return {
        "name": nutrition.name,
        **nutrition.storage_columns(),
        **base_columns,
        "serving_multiplier": round_multiplier(nutrition.serving_multiplier),
    }


def _parse_meal(row: dict[str, object]) -> MealEntry:
    name = str(row.get("name", ""))
    base = None
    if row.get("base_calories") is not None:
        base = NutritionRecord(name=name, **nutrients_from_row(row, prefix="base_"))
    return MealEntry(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        day=date.fromisoformat(str(row["date"])),
        hour=int(row.get("hour", 0)),
        nutrition=ScaledNutritionRecord(
            name=name,
            serving_multiplier=normalize_multiplier(row.get("serving_multiplier")),
            **nutrients_from_row(row),
        ),
        base=base,
    )
