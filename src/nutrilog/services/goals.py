"""Daily goals service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nutrilog.domain.meals import DailyGoals


class GoalsRepository(Protocol):
    """Persistence interface for goals."""

    def get_goals(self, user_id: UUID) -> DailyGoals | None:
        """Return the user's current goals."""

    def upsert_goals(self, user_id: UUID, goals: DailyGoals) -> None:
        """Store the user's current goals."""

    def get_daily_goals(self, user_id: UUID, day: date) -> DailyGoals | None:
        """Return the goals snapshot taken for a day."""

    def upsert_daily_goals(self, user_id: UUID, day: date, goals: DailyGoals) -> None:
        """Store the goals snapshot for a day."""


@dataclass
class GoalsService:
    """Keeps current goals and per-day snapshots of them."""

    repository: GoalsRepository

    def set_goals(self, user_id: UUID, goals: DailyGoals, today: date) -> None:
        """Update current goals and today's snapshot."""
        self.repository.upsert_goals(user_id, goals)
        self.repository.upsert_daily_goals(user_id, today, goals)

    def goals_for_day(self, user_id: UUID, day: date) -> DailyGoals | None:
        """Return the day's snapshot, falling back to the current goals."""
        snapshot = self.repository.get_daily_goals(user_id, day)
        if snapshot is not None:
            return snapshot
        return self.repository.get_goals(user_id)
