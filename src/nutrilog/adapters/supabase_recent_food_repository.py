"""Supabase repository for the recent foods history."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrilog.domain.nutrition import ScaledNutritionRecord
from nutrilog.domain.sources import HistoryEntry
from nutrilog.services.meals import RecentFoodRepository
from nutrilog.services.rounding import round_multiplier


@dataclass
class SupabaseRecentFoodRepository(RecentFoodRepository):
    """Supabase implementation for the recent_foods table."""

    client: Client

    def upsert_recent_food(
        self, user_id: UUID, nutrition: ScaledNutritionRecord
    ) -> None:
        """Insert or replace the user's row for this food name."""
        self.client.table("recent_foods").upsert(
            {
                "user_id": str(user_id),
                "name": nutrition.name,
                **nutrition.storage_columns(),
                "serving_multiplier": round_multiplier(nutrition.serving_multiplier),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,name",
        ).execute()

    def list_recent_foods(self, user_id: UUID, limit: int) -> list[HistoryEntry]:
        """Return recent food rows, newest first."""
        response = (
            self.client.table("recent_foods")
            .select("*")
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [HistoryEntry(row) for row in response.data or []]
