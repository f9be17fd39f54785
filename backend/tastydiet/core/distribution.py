"""Meal Distribution - Fixed split of daily calories across meal slots."""

from types import MappingProxyType

from .models import MealSlot


MEAL_DISTRIBUTION = MappingProxyType({
    MealSlot.BREAKFAST: 0.25,
    MealSlot.LUNCH: 0.35,
    MealSlot.DINNER: 0.30,
    MealSlot.SNACK: 0.10,
})


def slot_calorie_target(daily_calories: float, slot: MealSlot) -> float:
    """Calories allotted to one slot.

    Args:
        daily_calories: The member's daily calorie target
        slot: Meal slot

    Returns:
        Slot share of the daily target
    """
    return daily_calories * MEAL_DISTRIBUTION[slot]


def split_daily_calories(daily_calories: float) -> dict[MealSlot, float]:
    """Calorie target for every slot, in planning order."""
    return {slot: slot_calorie_target(daily_calories, slot) for slot in MealSlot}
