"""Macro Calculations - Pure functions for plan totals and progress.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Iterable

from .models import DailyMacroSummary, DailyMealPlan, MealSuggestion, Nutrition


def calculate_plan_totals(suggestions: Iterable[MealSuggestion]) -> Nutrition:
    """Sum nutrition across meal suggestions.

    Args:
        suggestions: Suggestions for a day (placeholders contribute zero)

    Returns:
        Nutrition totals
    """
    total = Nutrition.zero()
    for suggestion in suggestions:
        total = total + suggestion.nutrition
    return total


def _progress(total: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return round(total / target * 100, 1)


def calculate_daily_summary(plan: DailyMealPlan) -> DailyMacroSummary:
    """Compare a plan's totals with the targets it was built against.

    Args:
        plan: Generated daily plan

    Returns:
        DailyMacroSummary with totals, targets and percent progress
    """
    totals = calculate_plan_totals(plan.suggestions())
    targets = plan.targets

    return DailyMacroSummary(
        total_calories=round(totals.calories, 1),
        total_protein=round(totals.protein, 1),
        total_carbs=round(totals.carbs, 1),
        total_fat=round(totals.fat, 1),
        total_fiber=round(totals.fiber, 1),
        target_calories=round(targets.calories, 1),
        target_protein=round(targets.protein, 1),
        target_carbs=round(targets.carbs, 1),
        target_fat=round(targets.fat, 1),
        target_fiber=round(targets.fiber, 1),
        calories_progress=_progress(totals.calories, targets.calories),
        protein_progress=_progress(totals.protein, targets.protein),
        carbs_progress=_progress(totals.carbs, targets.carbs),
        fat_progress=_progress(totals.fat, targets.fat),
        fiber_progress=_progress(totals.fiber, targets.fiber),
    )


def calculate_calories_from_macros(protein: float, carbs: float, fat: float) -> int:
    """Calculate calories from macronutrients.

    Uses standard conversion: 4 cal/g protein, 4 cal/g carbs, 9 cal/g fat.

    Args:
        protein: Grams of protein
        carbs: Grams of carbohydrates
        fat: Grams of fat

    Returns:
        Estimated calories (rounded to nearest integer)
    """
    return round(protein * 4 + carbs * 4 + fat * 9)
