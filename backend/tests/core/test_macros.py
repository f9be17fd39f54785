"""Unit tests for plan totals and progress - pure functions, no mocks needed."""

from datetime import date

from tastydiet.core.models import (
    DailyMealPlan,
    MacroTargets,
    MealSlot,
    MealSuggestion,
    Nutrition,
    SuggestionStatus,
)
from tastydiet.core.macros import (
    calculate_plan_totals,
    calculate_daily_summary,
    calculate_calories_from_macros,
)


def make_suggestion(slot: MealSlot, calories, protein, carbs, fat, fiber=0.0) -> MealSuggestion:
    return MealSuggestion(
        meal_type=slot,
        portion_grams=100,
        nutrition=Nutrition(calories=calories, protein=protein, carbs=carbs, fat=fat, fiber=fiber),
    )


TARGETS = MacroTargets(calories=2000, protein=150, carbs=200, fat=65, fiber=25)


class TestCalculatePlanTotals:
    """Tests for calculate_plan_totals."""

    def test_empty(self):
        """No suggestions total zero."""
        assert calculate_plan_totals([]) == Nutrition.zero()

    def test_sums_suggestions(self):
        """Suggestions are summed field by field."""
        totals = calculate_plan_totals([
            make_suggestion(MealSlot.BREAKFAST, 500, 30, 50, 20, 5),
            make_suggestion(MealSlot.LUNCH, 700, 40, 80, 25, 8),
        ])
        assert totals == Nutrition(calories=1200, protein=70, carbs=130, fat=45, fiber=13)

    def test_placeholder_adds_nothing(self):
        """Placeholder slots contribute zero."""
        placeholder = MealSuggestion(
            meal_type=MealSlot.SNACK, feasible=False, status=SuggestionStatus.NO_CANDIDATES
        )
        totals = calculate_plan_totals([make_suggestion(MealSlot.DINNER, 600, 35, 60, 20), placeholder])
        assert totals.calories == 600


class TestCalculateDailySummary:
    """Tests for calculate_daily_summary."""

    def test_empty_plan_shows_zero_progress(self):
        """Empty plan has zero totals and zero progress."""
        plan = DailyMealPlan(plan_date=date(2026, 10, 19), member_id="m1", targets=TARGETS)
        summary = calculate_daily_summary(plan)

        assert summary.total_calories == 0
        assert summary.target_calories == 2000
        assert summary.calories_progress == 0

    def test_partial_plan_progress(self):
        """Progress is a percentage of each target."""
        plan = DailyMealPlan(
            plan_date=date(2026, 10, 19),
            member_id="m1",
            breakfast=make_suggestion(MealSlot.BREAKFAST, 500, 30, 50, 20, 5),
            targets=TARGETS,
        )
        summary = calculate_daily_summary(plan)

        assert summary.total_calories == 500
        assert summary.calories_progress == 25.0
        assert summary.protein_progress == 20.0
        assert summary.fiber_progress == 20.0

    def test_zero_target_progress(self):
        """A zero target reports zero progress instead of dividing by zero."""
        targets = MacroTargets(calories=2000, protein=150, carbs=0, fat=65, fiber=25)
        plan = DailyMealPlan(
            plan_date=date(2026, 10, 19),
            member_id="m1",
            lunch=make_suggestion(MealSlot.LUNCH, 700, 40, 80, 25),
            targets=targets,
        )
        assert calculate_daily_summary(plan).carbs_progress == 0

    def test_over_target(self):
        """Exceeding a target shows more than 100%."""
        plan = DailyMealPlan(
            plan_date=date(2026, 10, 19),
            member_id="m1",
            dinner=make_suggestion(MealSlot.DINNER, 2500, 200, 250, 100),
            targets=TARGETS,
        )
        assert calculate_daily_summary(plan).calories_progress == 125.0


class TestCalculateCaloriesFromMacros:
    """Tests for calculate_calories_from_macros."""

    def test_protein_only(self):
        """4 cal per gram of protein."""
        assert calculate_calories_from_macros(protein=25, carbs=0, fat=0) == 100

    def test_carbs_only(self):
        """4 cal per gram of carbs."""
        assert calculate_calories_from_macros(protein=0, carbs=50, fat=0) == 200

    def test_fat_only(self):
        """9 cal per gram of fat."""
        assert calculate_calories_from_macros(protein=0, carbs=0, fat=10) == 90

    def test_mixed_macros(self):
        """Mixed macros calculate correctly."""
        # 10g protein (40) + 20g carbs (80) + 5g fat (45) = 165
        assert calculate_calories_from_macros(protein=10, carbs=20, fat=5) == 165
