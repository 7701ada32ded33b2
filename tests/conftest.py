"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID, uuid4

import pytest

from nutrilog.adapters.fdc_client import FdcClient
from nutrilog.adapters.off_client import OpenFoodFactsClient
from nutrilog.config import Settings
from nutrilog.containers import AppContainer
from nutrilog.domain.meals import DailyGoals, MealEntry, Recipe
from nutrilog.domain.nutrition import NutritionRecord, ScaledNutritionRecord
from nutrilog.domain.sources import HistoryEntry
from nutrilog.services.cache import InMemoryCache
from nutrilog.services.goals import GoalsRepository, GoalsService
from nutrilog.services.lookup import FoodLookupService
from nutrilog.services.meals import (
    MealLogService,
    MealRepository,
    RecentFoodRepository,
)
from nutrilog.services.recipes import RecipeRepository, RecipeService

OATS = NutritionRecord(
    name="Rolled Oats",
    calories=150,
    protein_g=5.0,
    carbs_g=27.0,
    fiber_g=4.0,
    sugars_g=1.0,
    total_fat_g=3.0,
    saturated_fat_g=0.5,
    trans_fat_g=0.0,
    unsaturated_fat_g=2.0,
    serving_size="40g",
    gram_weight=40.0,
)

MILK = NutritionRecord(
    name="Whole Milk",
    calories=149,
    protein_g=7.7,
    carbs_g=11.7,
    sugars_g=12.3,
    total_fat_g=7.9,
    saturated_fat_g=4.6,
    unsaturated_fat_g=2.6,
    serving_size="1 cup",
    gram_weight=244.0,
)

PEANUT_BUTTER_PRODUCT = {
    "code": "0051500255162",
    "product_name": "Creamy Peanut Butter",
    "brands": "Jif",
    "serving_size": "2 tbsp (32 g)",
    "serving_quantity": 32,
    "nutriments": {
        "energy-kcal_serving": 190,
        "proteins_serving": 7,
        "carbohydrates_serving": 8,
        "fiber_serving": 2,
        "sugars_serving": 3,
        "fat_serving": 16,
        "saturated-fat_serving": 3,
        "trans-fat_serving": 0,
        "monounsaturated-fat_serving": 8,
        "polyunsaturated-fat_serving": 4,
    },
}

BRANDED_FOOD = {
    "fdcId": 2345678,
    "description": "GREEK YOGURT, PLAIN",
    "servingSize": 170,
    "servingSizeUnit": "g",
    "foodNutrients": [
        {"nutrientId": 1008, "value": 100},
        {"nutrientId": 1003, "value": 17.3},
        {"nutrientId": 1005, "value": 6.1},
        {"nutrientId": 2000, "value": 6.1},
        {"nutrientId": 1004, "value": 0.7},
        {"nutrientId": 1258, "value": 0.2},
    ],
}


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealEntry] = field(default_factory=dict)

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        hour: int,
        nutrition: ScaledNutritionRecord,
        base: NutritionRecord,
    ) -> MealEntry:
        meal = MealEntry(
            id=uuid4(),
            user_id=user_id,
            day=day,
            hour=hour,
            nutrition=nutrition,
            base=base,
        )
        self.meals[meal.id] = meal
        return meal

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        return self.meals.get(meal_id)

    def list_meals(self, user_id: UUID, day: date) -> list[MealEntry]:
        return [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and meal.day == day
        ]

    def update_meal(
        self, meal_id: UUID, nutrition: ScaledNutritionRecord, base: NutritionRecord
    ) -> MealEntry:
        meal = replace(self.meals[meal_id], nutrition=nutrition, base=base)
        self.meals[meal_id] = meal
        return meal

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)


@dataclass
class InMemoryRecentFoodRepository(RecentFoodRepository):
    """In-memory recent foods history; later upserts move to the front."""

    rows: dict[tuple[UUID, str], dict[str, object]] = field(default_factory=dict)

    def upsert_recent_food(
        self, user_id: UUID, nutrition: ScaledNutritionRecord
    ) -> None:
        key = (user_id, nutrition.name)
        self.rows.pop(key, None)
        self.rows[key] = {
            "name": nutrition.name,
            **nutrition.storage_columns(),
            "serving_multiplier": nutrition.serving_multiplier,
        }

    def list_recent_foods(self, user_id: UUID, limit: int) -> list[HistoryEntry]:
        entries = [
            HistoryEntry(row)
            for (owner, _name), row in reversed(self.rows.items())
            if owner == user_id
        ]
        return entries[:limit]


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[UUID, Recipe] = field(default_factory=dict)

    def create_recipe(self, user_id: UUID, recipe: Recipe) -> Recipe:
        created = replace(recipe, id=uuid4(), user_id=user_id)
        self.recipes[created.id] = created
        return created

    def update_recipe(self, recipe_id: UUID, recipe: Recipe) -> Recipe:
        updated = replace(recipe, id=recipe_id)
        self.recipes[recipe_id] = updated
        return updated

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        return sorted(
            (recipe for recipe in self.recipes.values() if recipe.user_id == user_id),
            key=lambda recipe: recipe.name,
        )

    def delete_recipe(self, recipe_id: UUID) -> None:
        self.recipes.pop(recipe_id, None)


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: dict[UUID, DailyGoals] = field(default_factory=dict)
    daily_goals: dict[tuple[UUID, date], DailyGoals] = field(default_factory=dict)

    def get_goals(self, user_id: UUID) -> DailyGoals | None:
        return self.goals.get(user_id)

    def upsert_goals(self, user_id: UUID, goals: DailyGoals) -> None:
        self.goals[user_id] = goals

    def get_daily_goals(self, user_id: UUID, day: date) -> DailyGoals | None:
        return self.daily_goals.get((user_id, day))

    def upsert_daily_goals(self, user_id: UUID, day: date, goals: DailyGoals) -> None:
        self.daily_goals[(user_id, day)] = goals


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake product database client keyed by barcode."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {"0051500255162": PEANUT_BUTTER_PRODUCT}
    )
    search_payload: dict[str, object] = field(
        default_factory=lambda: {"products": [PEANUT_BUTTER_PRODUCT]}
    )
    requested: list[str] = field(default_factory=list)
    searches: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        self.requested.append(barcode)
        return self.products.get(barcode)

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> dict[str, object]:
        self.searches.append(query)
        return self.search_payload


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {"foods": [BRANDED_FOOD]}
    )
    food_payload: dict[str, object] | None = field(
        default_factory=lambda: BRANDED_FOOD
    )
    searches: list[str] = field(default_factory=list)
    fetched: list[int] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 50) -> dict[str, object]:
        self.searches.append(query)
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object] | None:
        self.fetched.append(fdc_id)
        return self.food_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def history_repository() -> InMemoryRecentFoodRepository:
    return InMemoryRecentFoodRepository()


@pytest.fixture
def product_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def container(
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    history_repository: InMemoryRecentFoodRepository,
    product_client: FakeOpenFoodFactsClient,
    fdc_client: FakeFdcClient,
) -> AppContainer:
    lookup_service = FoodLookupService(
        product_client=product_client,
        fdc_client=fdc_client,
        cache=InMemoryCache(),
    )
    meal_log_service = MealLogService(
        repository=meal_repository,
        history_repository=history_repository,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        lookup_service=lookup_service,
        meal_log_service=meal_log_service,
        recipe_service=RecipeService(InMemoryRecipeRepository()),
        goals_service=GoalsService(InMemoryGoalsRepository()),
        close_resources=close_resources,
    )
