"""Portion Sizing - Scale per-100g nutrition to a calorie target."""

from .models import Nutrition, Recipe


DEFAULT_PORTION_GRAMS = 100.0


def portion_grams(
    recipe: Recipe, target_calories: float, default_grams: float = DEFAULT_PORTION_GRAMS
) -> float:
    """Grams of the recipe that supply the target calories.

    Args:
        recipe: Chosen recipe
        target_calories: Calories the portion should provide
        default_grams: Portion used when the recipe has no calories

    Returns:
        Portion size in grams (never negative)
    """
    if recipe.calories_per_100g > 0:
        return max(0.0, target_calories / recipe.calories_per_100g * 100)
    return default_grams


def scale_nutrition(recipe: Recipe, grams: float) -> Nutrition:
    """Nutrition of a portion: per-100g value * grams / 100 for every field."""
    factor = grams / 100
    return Nutrition(
        calories=recipe.calories_per_100g * factor,
        protein=recipe.protein_per_100g * factor,
        carbs=recipe.carbs_per_100g * factor,
        fat=recipe.fat_per_100g * factor,
        fiber=recipe.fiber_per_100g * factor,
    )
