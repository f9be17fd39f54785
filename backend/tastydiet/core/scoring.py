"""Recipe Scoring - Rank feasible recipes against a slot's calorie target.

score = 100 / (1 + |kcal per 100g - target|)
        + 10 if protein per 100g > 15
        + 5 if fiber per 100g > 5
        + 20 * macro balance

All functions are pure and deterministic: ties keep input order.
"""

from types import MappingProxyType
from typing import Optional, Sequence

from .models import Recipe
from .targets import CARBS_KCAL_PER_G, FAT_KCAL_PER_G, PROTEIN_KCAL_PER_G


HIGH_PROTEIN_THRESHOLD = 15.0
HIGH_PROTEIN_BONUS = 10.0
HIGH_FIBER_THRESHOLD = 5.0
HIGH_FIBER_BONUS = 5.0
MACRO_BALANCE_WEIGHT = 20.0

IDEAL_BAND_SCORE = 1.0
TOLERANCE_BAND_SCORE = 0.8
OUT_OF_BAND_SCORE = 0.5

# (ideal band, tolerance band) as inclusive fractions of macro calories
MACRO_BANDS = MappingProxyType({
    "protein": ((0.20, 0.30), (0.15, 0.35)),
    "carbs": ((0.45, 0.65), (0.35, 0.75)),
    "fat": ((0.20, 0.35), (0.15, 0.45)),
})


def _band_score(ratio: float, macro: str) -> float:
    (ideal_lo, ideal_hi), (tol_lo, tol_hi) = MACRO_BANDS[macro]
    if ideal_lo <= ratio <= ideal_hi:
        return IDEAL_BAND_SCORE
    if tol_lo <= ratio <= tol_hi:
        return TOLERANCE_BAND_SCORE
    return OUT_OF_BAND_SCORE


def macro_balance(recipe: Recipe) -> float:
    """How close the recipe's calorie split is to a balanced plate.

    Args:
        recipe: Recipe to inspect

    Returns:
        Average band score in [0.5, 1.0], or 0 if the recipe has no calories
    """
    if recipe.calories_per_100g <= 0:
        return 0.0

    protein_kcal = recipe.protein_per_100g * PROTEIN_KCAL_PER_G
    carb_kcal = recipe.carbs_per_100g * CARBS_KCAL_PER_G
    fat_kcal = recipe.fat_per_100g * FAT_KCAL_PER_G
    total = protein_kcal + carb_kcal + fat_kcal
    if total <= 0:
        return 0.0

    scores = (
        _band_score(protein_kcal / total, "protein"),
        _band_score(carb_kcal / total, "carbs"),
        _band_score(fat_kcal / total, "fat"),
    )
    return sum(scores) / len(scores)


def score_recipe(recipe: Recipe, target_calories: float) -> float:
    """Composite score of one recipe for a calorie target.

    The calorie term compares calories per 100g with the slot target;
    portion sizing corrects the amount afterwards.
    """
    score = 100.0 / (1.0 + abs(recipe.calories_per_100g - target_calories))
    if recipe.protein_per_100g > HIGH_PROTEIN_THRESHOLD:
        score += HIGH_PROTEIN_BONUS
    if recipe.fiber_per_100g > HIGH_FIBER_THRESHOLD:
        score += HIGH_FIBER_BONUS
    score += MACRO_BALANCE_WEIGHT * macro_balance(recipe)
    return score


def rank_recipes(
    candidates: Sequence[Recipe], target_calories: float
) -> list[tuple[Recipe, float]]:
    """(recipe, score) pairs, best first. Equal scores keep input order."""
    scored = [(recipe, score_recipe(recipe, target_calories)) for recipe in candidates]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def pick_best(candidates: Sequence[Recipe], target_calories: float) -> Optional[Recipe]:
    """Highest scoring recipe, the earliest one on ties. None if no candidates."""
    best: Optional[Recipe] = None
    best_score = float("-inf")
    for recipe in candidates:
        score = score_recipe(recipe, target_calories)
        if score > best_score:
            best, best_score = recipe, score
    return best
