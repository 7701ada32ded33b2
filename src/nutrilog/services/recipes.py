"""Recipe building service."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nutrilog.domain.meals import Recipe
from nutrilog.domain.nutrition import NutritionRecord, ScaledNutritionRecord
from nutrilog.domain.sources import RecipeTotals
from nutrilog.services.extraction import extract
from nutrilog.services.scaling import rescale, scale
from nutrilog.services.totals import aggregate


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def create_recipe(self, user_id: UUID, recipe: Recipe) -> Recipe:
        """Create a recipe and return it with its id."""

    def update_recipe(self, recipe_id: UUID, recipe: Recipe) -> Recipe:
        """Replace a recipe and return it."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes ordered by name."""

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""


@dataclass
class RecipeService:
    """Composes recipes from scaled ingredients and persists them."""

    repository: RecipeRepository

    @staticmethod
    def compose(name: str, ingredients: list[ScaledNutritionRecord]) -> Recipe:
        """Build a recipe and compute its totals."""
        return Recipe(
            name=name.strip(),
            ingredients=list(ingredients),
            totals=aggregate(ingredients),
        )

    def add_ingredient(
        self, recipe: Recipe, base: NutritionRecord, multiplier: float = 1.0
    ) -> Recipe:
        """Append a base record at the given multiplier."""
        ingredients = [*recipe.ingredients, scale(base, multiplier)]
        return self._with_ingredients(recipe, ingredients)

    def set_ingredient_multiplier(
        self, recipe: Recipe, index: int, multiplier: float
    ) -> Recipe:
        """Change one ingredient's serving multiplier."""
        ingredients = list(recipe.ingredients)
        ingredients[index] = rescale(ingredients[index], multiplier)
        return self._with_ingredients(recipe, ingredients)

    def remove_ingredient(self, recipe: Recipe, index: int) -> Recipe:
        """Drop one ingredient; an index past the end raises IndexError."""
        ingredients = list(recipe.ingredients)
        del ingredients[index]
        return self._with_ingredients(recipe, ingredients)

    def save(self, user_id: UUID, recipe: Recipe) -> Recipe:
        """Create or update a recipe."""
        if not recipe.name.strip():
            raise ValueError("Recipe name is required")
        if not recipe.ingredients:
            raise ValueError("Recipe needs at least one ingredient")
        if recipe.id is None:
            return self.repository.create_recipe(user_id, recipe)
        return self.repository.update_recipe(recipe.id, recipe)

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id."""
        return self.repository.get_recipe(recipe_id)

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes."""
        return self.repository.list_recipes(user_id)

    def delete_recipe(self, recipe_id: UUID) -> bool:
        """Delete a recipe; return False when it does not exist."""
        if self.repository.get_recipe(recipe_id) is None:
            return False
        self.repository.delete_recipe(recipe_id)
        return True

    @staticmethod
    def as_food(recipe: Recipe) -> NutritionRecord:
        """Treat a whole recipe as one serving of a food."""
        return extract(
            RecipeTotals({"name": recipe.name, **recipe.totals.storage_columns()})
        )

    def _with_ingredients(
        self, recipe: Recipe, ingredients: list[ScaledNutritionRecord]
    ) -> Recipe:
        return replace(
            recipe, ingredients=ingredients, totals=aggregate(ingredients)
        )
