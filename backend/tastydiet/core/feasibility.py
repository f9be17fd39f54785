"""Recipe Feasibility - Match recipe ingredients against an inventory snapshot.

Matching is fuzzy on purpose: an ingredient is available when its name
equals an inventory name or either one contains the other ("onion" matches
"red onion"). Quantities are never consumed during planning.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence, Union

from .models import InventoryItem, MealSlot, Recipe, RecipeIngredient


logger = logging.getLogger(__name__)

IngredientLookup = Callable[[str], Sequence[RecipeIngredient]]


@dataclass(frozen=True)
class FeasibilityResult:
    """Outcome of checking one recipe against the inventory."""

    feasible: bool
    missing_ingredients: tuple[str, ...] = field(default=())


def normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def inventory_snapshot(items: Iterable[Union[InventoryItem, str]]) -> tuple[str, ...]:
    """Normalized, non-empty inventory names.

    Args:
        items: Inventory items or bare names

    Returns:
        Immutable tuple of lower-cased, trimmed names
    """
    names = (item.name if isinstance(item, InventoryItem) else item for item in items)
    return tuple(n for n in (normalize_name(name) for name in names) if n)


def ingredient_available(ingredient_name: str, inventory: Sequence[str]) -> bool:
    """True if any inventory name equals or overlaps the ingredient name."""
    wanted = normalize_name(ingredient_name)
    if not wanted:
        return True
    for have in inventory:
        have = normalize_name(have)
        if not have:
            continue
        if have == wanted or have in wanted or wanted in have:
            return True
    return False


def check_recipe(
    ingredients: Sequence[RecipeIngredient], inventory: Sequence[str]
) -> FeasibilityResult:
    """Check every required ingredient of one recipe.

    Args:
        ingredients: The recipe's required ingredients
        inventory: Normalized inventory names

    Returns:
        FeasibilityResult listing the unmatched ingredient names
    """
    missing = tuple(
        ing.ingredient_name
        for ing in ingredients
        if not ingredient_available(ing.ingredient_name, inventory)
    )
    return FeasibilityResult(feasible=not missing, missing_ingredients=missing)


def recipe_matches_slot(recipe: Recipe, slot: MealSlot) -> bool:
    """Meal type or a whole word of the category names the slot, or the recipe name mentions it."""
    aliases = slot.aliases
    meal_type = normalize_name(recipe.meal_type)
    category = normalize_name(recipe.category)
    if meal_type in aliases:
        return True
    if any(re.search(rf"\b{re.escape(alias)}s?\b", category) for alias in aliases):
        return True
    return slot.field_name in normalize_name(recipe.name)


def candidates_for_slot(
    slot: MealSlot, pool: Sequence[Recipe], limit: int | None = None
) -> list[Recipe]:
    """Narrow a recipe pool to the recipes hinted for a slot.

    Falls back to the whole pool when nothing matches the slot.

    Args:
        slot: Meal slot being planned
        pool: Candidate recipes, in preference order
        limit: Maximum number of candidates to keep

    Returns:
        Candidate recipes in input order
    """
    matched = [r for r in pool if recipe_matches_slot(r, slot)]
    candidates = matched if matched else list(pool)
    if limit is not None:
        candidates = candidates[:limit]
    return candidates


def evaluate_recipes(
    recipes: Sequence[Recipe],
    inventory: Sequence[str],
    ingredient_lookup: IngredientLookup,
) -> list[tuple[Recipe, FeasibilityResult]]:
    """Feasibility of each recipe, in input order.

    A failing ingredient lookup counts as feasible and is logged.
    """
    results = []
    for recipe in recipes:
        try:
            ingredients = ingredient_lookup(recipe.id)
        except Exception as e:
            logger.warning(
                "Ingredient lookup failed for recipe %s, treating as feasible: %s",
                recipe.id, str(e),
            )
            results.append((recipe, FeasibilityResult(feasible=True)))
            continue
        results.append((recipe, check_recipe(ingredients, inventory)))
    return results


def filter_feasible(
    recipes: Sequence[Recipe],
    inventory: Sequence[str],
    ingredient_lookup: IngredientLookup,
) -> list[Recipe]:
    """Recipes whose ingredients are all available, in input order."""
    return [
        recipe
        for recipe, result in evaluate_recipes(recipes, inventory, ingredient_lookup)
        if result.feasible
    ]
