"""Supabase repository for recipes."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrilog.adapters.supabase_rows import nutrients_from_row
from nutrilog.domain.meals import Recipe
from nutrilog.domain.nutrition import (
    NUTRIENT_FIELDS,
    STORAGE_COLUMNS,
    UNKNOWN_FOOD,
    ScaledNutritionRecord,
    TotalsRecord,
)
from nutrilog.services.recipes import RecipeRepository
from nutrilog.services.rounding import (
    normalize_multiplier,
    round_whole,
    to_float,
    to_number,
)

# Older rows stored ingredients as a JSON string with camelCase keys.
_LEGACY_KEYS = {
    "totalFat": "total_fat_g",
    "saturatedFat": "saturated_fat_g",
    "transFat": "trans_fat_g",
    "unsaturatedFat": "unsaturated_fat_g",
    "servingSize": "serving_size",
    "gramWeight": "gram_weight",
    "servingMultiplier": "serving_multiplier",
}
_COLUMN_KEYS = {column: field for field, column in STORAGE_COLUMNS.items()}


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for the recipes table."""

    client: Client

    def create_recipe(self, user_id: UUID, recipe: Recipe) -> Recipe:
        """Insert a recipe row."""
        response = (
            self.client.table("recipes")
            .insert({"user_id": str(user_id), **_recipe_payload(recipe)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return _parse_recipe(response.data[0])

    def update_recipe(self, recipe_id: UUID, recipe: Recipe) -> Recipe:
        """Replace a recipe row."""
        response = (
            self.client.table("recipes")
            .update(_recipe_payload(recipe))
            .eq("id", str(recipe_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update recipe")
        return _parse_recipe(response.data[0])

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes ordered by name."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("user_id", str(user_id))
            .order("name", desc=False)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe row."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _recipe_payload(recipe: Recipe) -> dict[str, object]:
    return {
        "name": recipe.name,
        "ingredients": [_ingredient_payload(item) for item in recipe.ingredients],
        **recipe.totals.storage_columns(),
        "updated_at": datetime.now(tz=UTC).isoformat(),
    }


def _ingredient_payload(ingredient: ScaledNutritionRecord) -> dict[str, object]:
    return {
        "name": ingredient.name,
        **ingredient.nutrients(),
        "serving_size": ingredient.serving_size,
        "gram_weight": ingredient.gram_weight,
        "serving_multiplier": ingredient.serving_multiplier,
    }


def _parse_recipe(row: dict[str, object]) -> Recipe:
    raw = row.get("ingredients") or []
    if isinstance(raw, str):
        raw = json.loads(raw)
    return Recipe(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name", "")),
        ingredients=[_parse_ingredient(item) for item in raw],
        totals=TotalsRecord(**nutrients_from_row(row)),
    )


def _parse_ingredient(item: dict[str, object]) -> ScaledNutritionRecord:
    data = {}
    for key, value in item.items():
        data[_LEGACY_KEYS.get(key) or _COLUMN_KEYS.get(key) or key] = value
    nutrients = {field: to_float(data.get(field)) for field in NUTRIENT_FIELDS}
    nutrients["calories"] = round_whole(nutrients["calories"])
    serving_size = data.get("serving_size")
    return ScaledNutritionRecord(
        name=str(data.get("name") or UNKNOWN_FOOD),
        serving_size=str(serving_size) if serving_size else None,
        gram_weight=to_number(data.get("gram_weight")),
        serving_multiplier=normalize_multiplier(data.get("serving_multiplier")),
        **nutrients,
    )
