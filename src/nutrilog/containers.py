"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrilog.adapters.fdc_client import HttpxFdcClient
from nutrilog.adapters.off_client import HttpxOpenFoodFactsClient
from nutrilog.adapters.supabase_goal_repository import SupabaseGoalsRepository
from nutrilog.adapters.supabase_meal_repository import SupabaseMealRepository
from nutrilog.adapters.supabase_recent_food_repository import (
    SupabaseRecentFoodRepository,
)
from nutrilog.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from nutrilog.config import Settings
from nutrilog.services.cache import InMemoryCache
from nutrilog.services.goals import GoalsService
from nutrilog.services.lookup import FoodLookupService
from nutrilog.services.meals import MealLogService
from nutrilog.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    lookup_service: FoodLookupService
    meal_log_service: MealLogService
    recipe_service: RecipeService
    goals_service: GoalsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    product_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout=resolved_settings.http_timeout_seconds,
    )
    lookup_service = FoodLookupService(
        product_client=product_client,
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        lookup_ttl_seconds=resolved_settings.lookup_cache_ttl_seconds,
        search_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )
    meal_log_service = MealLogService(
        repository=SupabaseMealRepository(supabase_client),
        history_repository=SupabaseRecentFoodRepository(supabase_client),
    )
    recipe_service = RecipeService(SupabaseRecipeRepository(supabase_client))
    goals_service = GoalsService(SupabaseGoalsRepository(supabase_client))

    async def close_resources() -> None:
        await fdc_client.close()
        await product_client.close()

    return AppContainer(
        settings=resolved_settings,
        lookup_service=lookup_service,
        meal_log_service=meal_log_service,
        recipe_service=recipe_service,
        goals_service=goals_service,
        close_resources=close_resources,
    )
