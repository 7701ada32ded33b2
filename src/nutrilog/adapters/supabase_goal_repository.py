"""Supabase repository for daily goals."""

from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutrilog.domain.meals import DailyGoals
from nutrilog.services.goals import GoalsRepository
from nutrilog.services.rounding import round_whole, to_number


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for the goals and daily_goals tables."""

    client: Client

    def get_goals(self, user_id: UUID) -> DailyGoals | None:
        """Return the user's current goals."""
        response = (
            self.client.table("goals")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goals(response.data[0])

    def upsert_goals(self, user_id: UUID, goals: DailyGoals) -> None:
        """Store the user's current goals."""
        response = (
            self.client.table("goals")
            .upsert(
                {
                    "user_id": str(user_id),
                    **asdict(goals),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store goals")

    def get_daily_goals(self, user_id: UUID, day: date) -> DailyGoals | None:
        """Return the goals snapshot taken for a day."""
        response = (
            self.client.table("daily_goals")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goals(response.data[0])

    def upsert_daily_goals(self, user_id: UUID, day: date, goals: DailyGoals) -> None:
        """Store the goals snapshot for a day."""
        response = (
            self.client.table("daily_goals")
            .upsert(
                {"user_id": str(user_id), "date": day.isoformat(), **asdict(goals)},
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store daily goals")


def _parse_goals(row: dict[str, object]) -> DailyGoals:
    defaults = DailyGoals()
    values = {}
    for name, default in asdict(defaults).items():
        number = to_number(row.get(name))
        values[name] = default if number is None else round_whole(number)
    return DailyGoals(**values)
