"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, replace
from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder

from nutrilog.api.models import (
    GoalsRequest,
    LogMealRequest,
    NutritionIn,
    RecipeRequest,
    RescaleRequest,
    ScaleRequest,
    StepRequest,
    TotalsRequest,
    UpdateServingRequest,
)
from nutrilog.app_logging import configure_logging
from nutrilog.containers import AppContainer
from nutrilog.domain.meals import DailyGoals
from nutrilog.domain.nutrition import NutritionRecord, ScaledNutritionRecord
from nutrilog.domain.sources import ManualEntry
from nutrilog.services.extraction import extract
from nutrilog.services.scaling import rescale, scale, step_multiplier
from nutrilog.services.totals import aggregate


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/barcode/{barcode}")
    async def lookup_barcode(barcode: str, request: Request) -> dict[str, object]:
        """Return the base serving of a scanned product."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.lookup_service.lookup_barcode(barcode)
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
            )
        return jsonable_encoder(record)

    @app.get("/foods/search")
    async def search_foods(
        request: Request,
        q: str,
        source: Literal["products", "foods"] = "products",
        limit: int = Query(default=20, ge=1, le=200),
    ) -> dict[str, object]:
        """Search either food database by text."""
        state_container: AppContainer = request.app.state.container
        lookup = state_container.lookup_service
        if source == "foods":
            results = await lookup.search_foods(q, limit=limit)
        else:
            results = await lookup.search_products(q, limit=limit)
        return {"results": jsonable_encoder(results)}

    @app.get("/foods/fdc/{fdc_id}")
    async def get_food(fdc_id: int, request: Request) -> dict[str, object]:
        """Return the base serving of a government database food."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.lookup_service.get_food(fdc_id)
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Food not found"
            )
        return jsonable_encoder(record)

    @app.post("/servings/scale")
    async def scale_serving(payload: ScaleRequest) -> dict[str, object]:
        """Scale a base serving."""
        return jsonable_encoder(scale(_base_record(payload.base), payload.multiplier))

    @app.post("/servings/rescale")
    async def rescale_serving(payload: RescaleRequest) -> dict[str, object]:
        """Move a scaled record to a new multiplier."""
        record = ScaledNutritionRecord(
            **asdict(_base_record(payload.record)),
            serving_multiplier=payload.multiplier,
        )
        return jsonable_encoder(rescale(record, payload.target_multiplier))

    @app.post("/servings/step")
    async def step_serving(payload: StepRequest) -> dict[str, float]:
        """Return the next multiplier up or down."""
        steps = 1 if payload.direction == "up" else -1
        return {"multiplier": step_multiplier(payload.multiplier, steps)}

    @app.post("/totals")
    async def totals(payload: TotalsRequest) -> dict[str, object]:
        """Sum records at the requested precision."""
        records = [_base_record(record) for record in payload.records]
        return jsonable_encoder(aggregate(records, payload.precision))

    @app.post("/users/{user_id}/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(
        user_id: UUID, payload: LogMealRequest, request: Request
    ) -> dict[str, object]:
        """Log a meal into an hour slot."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.meal_log_service.log_meal(
            user_id,
            payload.day,
            payload.hour,
            _base_record(payload.base),
            payload.multiplier,
        )
        return jsonable_encoder(meal)

    @app.get("/users/{user_id}/meals")
    async def list_meals(
        user_id: UUID, day: date, request: Request
    ) -> dict[str, object]:
        """Return a day's meals ordered by hour."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_log_service.list_meals(user_id, day)
        return {"meals": jsonable_encoder(meals)}

    @app.get("/users/{user_id}/summary")
    async def daily_summary(
        user_id: UUID, day: date, request: Request
    ) -> dict[str, object]:
        """Return a day's totals, hourly totals and goal progress."""
        state_container: AppContainer = request.app.state.container
        goals = state_container.goals_service.goals_for_day(user_id, day)
        summary = state_container.meal_log_service.daily_summary(user_id, day, goals)
        return jsonable_encoder(summary)

    @app.get("/users/{user_id}/recent-foods")
    async def recent_foods(user_id: UUID, request: Request) -> dict[str, object]:
        """Return recently logged foods as base servings."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.meal_log_service.recent_foods(user_id)
        return {"foods": jsonable_encoder(foods)}

    @app.get("/meals/{meal_id}/edit")
    async def edit_meal(meal_id: UUID, request: Request) -> dict[str, object]:
        """Return a logged meal's base serving and current multiplier."""
        state_container: AppContainer = request.app.state.container
        context = state_container.meal_log_service.edit_context(meal_id)
        if context is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        base, multiplier = context
        return {"base": jsonable_encoder(base), "multiplier": multiplier}

    @app.patch("/meals/{meal_id}")
    async def update_meal(
        meal_id: UUID, payload: UpdateServingRequest, request: Request
    ) -> dict[str, object]:
        """Change a logged meal's serving multiplier."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.meal_log_service.update_serving(
            meal_id, payload.multiplier
        )
        if meal is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        return jsonable_encoder(meal)

    @app.delete("/meals/{meal_id}")
    async def delete_meal(meal_id: UUID, request: Request) -> dict[str, str]:
        """Delete a logged meal."""
        state_container: AppContainer = request.app.state.container
        if not state_container.meal_log_service.delete_meal(meal_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found"
            )
        return {"status": "deleted"}

    @app.post("/users/{user_id}/recipes", status_code=status.HTTP_201_CREATED)
    async def create_recipe(
        user_id: UUID, payload: RecipeRequest, request: Request
    ) -> dict[str, object]:
        """Build a recipe from ingredients and store it."""
        state_container: AppContainer = request.app.state.container
        recipe_service = state_container.recipe_service
        recipe = recipe_service.compose(payload.name, _ingredients(payload))
        try:
            saved = recipe_service.save(user_id, recipe)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return jsonable_encoder(saved)

    @app.get("/users/{user_id}/recipes")
    async def list_recipes(user_id: UUID, request: Request) -> dict[str, object]:
        """Return a user's recipes."""
        state_container: AppContainer = request.app.state.container
        recipes = state_container.recipe_service.list_recipes(user_id)
        return {"recipes": jsonable_encoder(recipes)}

    @app.get("/recipes/{recipe_id}/food")
    async def recipe_as_food(recipe_id: UUID, request: Request) -> dict[str, object]:
        """Return a whole recipe as one base serving."""
        state_container: AppContainer = request.app.state.container
        recipe_service = state_container.recipe_service
        recipe = recipe_service.get_recipe(recipe_id)
        if recipe is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found"
            )
        return jsonable_encoder(recipe_service.as_food(recipe))

    @app.put("/recipes/{recipe_id}")
    async def update_recipe(
        recipe_id: UUID, payload: RecipeRequest, request: Request
    ) -> dict[str, object]:
        """Replace a recipe's name and ingredients."""
        state_container: AppContainer = request.app.state.container
        recipe_service = state_container.recipe_service
        existing = recipe_service.get_recipe(recipe_id)
        if existing is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found"
            )
        recipe = replace(
            recipe_service.compose(payload.name, _ingredients(payload)),
            id=existing.id,
            user_id=existing.user_id,
        )
        try:
            saved = recipe_service.save(existing.user_id, recipe)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return jsonable_encoder(saved)

    @app.delete("/recipes/{recipe_id}")
    async def delete_recipe(recipe_id: UUID, request: Request) -> dict[str, str]:
        """Delete a recipe."""
        state_container: AppContainer = request.app.state.container
        if not state_container.recipe_service.delete_recipe(recipe_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found"
            )
        return {"status": "deleted"}

    @app.put("/users/{user_id}/goals")
    async def set_goals(
        user_id: UUID, payload: GoalsRequest, request: Request
    ) -> dict[str, object]:
        """Update the user's goals and that day's snapshot."""
        state_container: AppContainer = request.app.state.container
        goals = DailyGoals(
            calories=payload.calories,
            protein=payload.protein,
            carbs=payload.carbs,
            fats=payload.fats,
        )
        state_container.goals_service.set_goals(
            user_id, goals, payload.day or date.today()
        )
        return jsonable_encoder(goals)

    return app


def _base_record(payload: NutritionIn) -> NutritionRecord:
    return extract(ManualEntry(payload.model_dump()))


def _ingredients(payload: RecipeRequest) -> list[ScaledNutritionRecord]:
    return [
        scale(_base_record(item.base), item.multiplier) for item in payload.ingredients
    ]
