"""Unit tests for target calculations - pure functions, no mocks needed."""

import pytest

from tastydiet.core.models import Gender, Goal, MacroTargets, Profile
from tastydiet.core.targets import (
    GOAL_RULES,
    apply_targets,
    bmi_category,
    calculate_bmi,
    calculate_bmr,
    calculate_macro_targets,
    calculate_tdee,
    compute_macro_targets,
    describe_activity_level,
    describe_calorie_adjustment,
    describe_goal,
    describe_goal_duration,
    with_profile_defaults,
)


def make_profile(**overrides) -> Profile:
    data = dict(
        age=30,
        weight=70.0,
        height=175.0,
        gender=Gender.MALE,
        activity_level=1.5,
        goal=Goal.MAINTENANCE,
        goal_duration_weeks=12,
    )
    data.update(overrides)
    return Profile(**data)


class TestCalculateBmr:
    """Tests for calculate_bmr."""

    def test_male(self):
        """Mifflin-St Jeor with the male offset."""
        assert calculate_bmr(make_profile()) == 1648.75

    def test_female(self):
        """Female offset is -161."""
        profile = make_profile(gender=Gender.FEMALE)
        assert calculate_bmr(profile) == pytest.approx(1648.75 - 5 - 161)

    def test_other(self):
        """Other/unspecified offset is -78."""
        profile = make_profile(gender="unspecified")
        assert profile.gender == Gender.OTHER
        assert calculate_bmr(profile) == pytest.approx(1648.75 - 5 - 78)

    def test_zero_fields_use_defaults(self):
        """Zero biometrics are substituted, not rejected."""
        profile = make_profile(weight=0, height=0, age=0)
        # 10*60 + 6.25*165 - 5*25 + 5
        assert calculate_bmr(profile) == pytest.approx(1511.25)


class TestCalculateTdee:
    """Tests for calculate_tdee."""

    def test_bmr_times_activity(self):
        """TDEE is BMR times activity with no intermediate rounding."""
        profile = make_profile(activity_level=1.55)
        assert calculate_tdee(profile) == calculate_bmr(profile) * 1.55

    def test_zero_activity_uses_default(self):
        """A zero activity level falls back to 1.4."""
        profile = make_profile(activity_level=0)
        assert calculate_tdee(profile) == pytest.approx(1648.75 * 1.4)


class TestCalculateMacroTargets:
    """Tests for calculate_macro_targets."""

    def test_weight_loss_short_duration(self):
        """Weight loss within 4 weeks: 75% of TDEE and 2 g/kg protein."""
        profile = make_profile(goal=Goal.WEIGHT_LOSS, goal_duration_weeks=4)
        targets = calculate_macro_targets(profile)
        tdee = calculate_tdee(profile)

        assert targets.calories == pytest.approx(tdee * 0.75)
        assert targets.protein == pytest.approx(70 * 2.0)
        assert targets.fat == pytest.approx(targets.calories * 0.25 / 9)
        assert targets.carbs == pytest.approx(
            (targets.calories - targets.protein * 4 - targets.fat * 9) / 4
        )

    @pytest.mark.parametrize(
        "weeks,multiplier",
        [(4, 0.75), (5, 0.80), (8, 0.80), (12, 0.85), (16, 0.90), (17, 0.95), (52, 0.95)],
    )
    def test_weight_loss_tiers(self, weeks, multiplier):
        """Deficit shrinks as the goal duration grows."""
        profile = make_profile(goal=Goal.WEIGHT_LOSS, goal_duration_weeks=weeks)
        targets = calculate_macro_targets(profile)
        assert targets.calories == pytest.approx(calculate_tdee(profile) * multiplier)

    @pytest.mark.parametrize(
        "weeks,multiplier",
        [(4, 1.25), (8, 1.20), (12, 1.15), (16, 1.10), (20, 1.05)],
    )
    def test_muscle_gain_tiers(self, weeks, multiplier):
        """Surplus mirrors the weight loss tiers."""
        profile = make_profile(goal=Goal.MUSCLE_GAIN, goal_duration_weeks=weeks)
        targets = calculate_macro_targets(profile)
        assert targets.calories == pytest.approx(calculate_tdee(profile) * multiplier)
        assert targets.protein == pytest.approx(70 * 2.2)

    @pytest.mark.parametrize(
        "weeks,multiplier",
        [(4, 0.80), (8, 0.85), (12, 0.90), (16, 0.95), (30, 0.98)],
    )
    def test_fat_loss_tiers(self, weeks, multiplier):
        """High-protein fat loss: 2.5 g/kg protein and 30% fat."""
        profile = make_profile(goal=Goal.FAT_LOSS_HIGH_PROTEIN, goal_duration_weeks=weeks)
        targets = calculate_macro_targets(profile)
        assert targets.calories == pytest.approx(calculate_tdee(profile) * multiplier)
        assert targets.protein == pytest.approx(70 * 2.5)
        assert targets.fat == pytest.approx(targets.calories * 0.30 / 9)

    def test_endurance(self):
        """Endurance: +10% calories, 60% carbs, fat is the remainder."""
        profile = make_profile(goal=Goal.ENDURANCE)
        targets = calculate_macro_targets(profile)

        assert targets.calories == pytest.approx(calculate_tdee(profile) * 1.10)
        assert targets.protein == pytest.approx(70 * 1.6)
        assert targets.carbs == pytest.approx(targets.calories * 0.60 / 4)
        assert targets.fat == pytest.approx(
            (targets.calories - targets.protein * 4 - targets.carbs * 4) / 9
        )

    def test_keto(self):
        """Keto: -10% calories, 70% fat, carbs fixed at 0.5 g/kg."""
        profile = make_profile(goal=Goal.KETO)
        targets = calculate_macro_targets(profile)

        assert targets.calories == pytest.approx(calculate_tdee(profile) * 0.90)
        assert targets.protein == pytest.approx(70 * 1.8)
        assert targets.fat == pytest.approx(targets.calories * 0.70 / 9)
        assert targets.carbs == pytest.approx(35.0)

    def test_diabetes_management(self):
        """Diabetes: maintenance calories, 45% carbs, 1.2 g/kg protein."""
        profile = make_profile(goal=Goal.DIABETES_MANAGEMENT)
        targets = calculate_macro_targets(profile)

        assert targets.calories == pytest.approx(calculate_tdee(profile))
        assert targets.protein == pytest.approx(70 * 1.2)
        assert targets.carbs == pytest.approx(targets.calories * 0.45 / 4)

    @pytest.mark.parametrize("goal", [Goal.MAINTENANCE, Goal.CUSTOM])
    def test_maintenance_and_custom(self, goal):
        """Maintenance and custom plans share the default rule."""
        profile = make_profile(goal=goal)
        targets = calculate_macro_targets(profile)

        assert targets.calories == pytest.approx(calculate_tdee(profile))
        assert targets.protein == pytest.approx(70 * 1.6)
        assert targets.fat == pytest.approx(targets.calories * 0.25 / 9)

    def test_unknown_goal_label_uses_maintenance(self):
        """An unrecognised goal label is planned as maintenance."""
        profile = make_profile(goal="Bulk like a bear")
        assert profile.goal == Goal.MAINTENANCE

    def test_every_goal_has_a_rule(self):
        """The goal table is exhaustive."""
        assert set(GOAL_RULES) == set(Goal)

    def test_fiber_default(self):
        """Fiber target defaults to 25 g."""
        assert calculate_macro_targets(make_profile()).fiber == 25.0

    def test_remainder_can_go_negative(self):
        """Extreme inputs yield a negative remainder before clamping."""
        profile = make_profile(
            goal=Goal.FAT_LOSS_HIGH_PROTEIN,
            goal_duration_weeks=4,
            weight=150,
            height=140,
            age=80,
            gender=Gender.FEMALE,
            activity_level=1.0,
        )
        assert calculate_macro_targets(profile).carbs < 0


class TestComputeMacroTargets:
    """Tests for compute_macro_targets and apply_targets."""

    def test_clamps_negative_values(self):
        """Exposed targets never hold negative grams."""
        profile = make_profile(
            goal=Goal.FAT_LOSS_HIGH_PROTEIN,
            goal_duration_weeks=4,
            weight=150,
            height=140,
            age=80,
            gender=Gender.FEMALE,
            activity_level=1.0,
        )
        targets = compute_macro_targets(profile)
        assert targets.carbs == 0
        assert targets.protein == pytest.approx(375.0)

    def test_apply_targets_returns_copy(self):
        """Writing targets back leaves the input profile untouched."""
        profile = make_profile()
        targets = MacroTargets(calories=2500, protein=140, carbs=300, fat=80, fiber=30)
        updated = apply_targets(profile, targets)

        assert updated.target_calories == 2500
        assert updated.target_fiber == 30
        assert profile.target_calories == 2000


class TestDescriptions:
    """Tests for BMI and description helpers."""

    def test_bmi(self):
        """BMI is weight over height squared."""
        assert calculate_bmi(make_profile()) == pytest.approx(70 / 1.75 ** 2)

    def test_bmi_zero_height_uses_default(self):
        """Unknown height falls back to the default 165 cm, as in the BMR formula."""
        assert calculate_bmi(make_profile(height=0)) == pytest.approx(70 / 1.65 ** 2)

    def test_profile_defaults_applied(self):
        """Zero or negative biometrics are replaced by the formula defaults."""
        profile = with_profile_defaults(make_profile(weight=-3, goal_duration_weeks=0, activity_level=0))
        assert profile.weight == 60.0
        assert profile.goal_duration_weeks == 12
        assert profile.activity_level == 1.4
        assert profile.height == 175

    @pytest.mark.parametrize(
        "bmi,category",
        [(17.0, "Underweight"), (22.0, "Normal weight"), (27.5, "Overweight"), (31.0, "Obese")],
    )
    def test_bmi_category(self, bmi, category):
        """BMI bands follow the WHO cut-offs."""
        assert bmi_category(bmi) == category

    def test_activity_levels(self):
        """Activity multipliers map onto named levels."""
        assert describe_activity_level(1.1).startswith("Sedentary")
        assert describe_activity_level(1.55).startswith("Very active")
        assert describe_activity_level(2.0).startswith("Athlete")

    def test_goal_description(self):
        """Every goal has a description."""
        for goal in Goal:
            assert describe_goal(goal)

    def test_goal_duration(self):
        """Durations are described in months."""
        assert describe_goal_duration(4) == "1 month (aggressive)"
        assert describe_goal_duration(24) == "6 months (sustainable)"
        assert describe_goal_duration(40) == "10 months (long-term)"

    def test_calorie_adjustment(self):
        """Tiered goals report their deficit or surplus."""
        assert describe_calorie_adjustment(Goal.WEIGHT_LOSS, 4) == "Calorie deficit: 25% reduction"
        assert describe_calorie_adjustment(Goal.MUSCLE_GAIN, 12) == "Calorie surplus: 15% increase"
        assert describe_calorie_adjustment(Goal.FAT_LOSS_HIGH_PROTEIN, 30) == "Calorie deficit: 2% reduction"
        assert describe_calorie_adjustment(Goal.KETO, 4) == "Standard calorie adjustment"
