"""Macro Targets - Pure functions for energy expenditure and goal targets.

BMR uses the Mifflin-St Jeor equation, TDEE scales it by activity, and each
goal applies a fixed rule from GOAL_RULES. All functions are pure.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from .models import Gender, Goal, MacroTargets, Profile


PROTEIN_KCAL_PER_G = 4.0
CARBS_KCAL_PER_G = 4.0
FAT_KCAL_PER_G = 9.0

DEFAULT_FIBER_GOAL = 25.0

GENDER_OFFSETS = MappingProxyType({
    Gender.MALE: 5.0,
    Gender.FEMALE: -161.0,
    Gender.OTHER: -78.0,
})

# Substituted when a profile field is missing or zero
PROFILE_DEFAULTS = MappingProxyType({
    "age": 25,
    "weight": 60.0,
    "height": 165.0,
    "activity_level": 1.4,
    "goal_duration_weeks": 12,
})


@dataclass(frozen=True)
class GoalRule:
    """How a goal turns TDEE into macro targets.

    Attributes:
        calorie_tiers: (max_weeks, multiplier) pairs checked in order
        default_multiplier: Multiplier when no tier matches
        protein_per_kg: Protein grams per kg of body weight
        fat_ratio: Share of calories from fat; None means fat is the remainder
        carb_ratio: Share of calories from carbs; None means carbs are the
            remainder unless carbs_per_kg is set
        carbs_per_kg: Fixed carb grams per kg of body weight
    """

    calorie_tiers: tuple[tuple[int, float], ...] = ()
    default_multiplier: float = 1.0
    protein_per_kg: float = 1.6
    fat_ratio: Optional[float] = 0.25
    carb_ratio: Optional[float] = None
    carbs_per_kg: Optional[float] = None

    def calorie_multiplier(self, duration_weeks: int) -> float:
        for max_weeks, multiplier in self.calorie_tiers:
            if duration_weeks <= max_weeks:
                return multiplier
        return self.default_multiplier


_MAINTENANCE_RULE = GoalRule()

GOAL_RULES = MappingProxyType({
    Goal.WEIGHT_LOSS: GoalRule(
        calorie_tiers=((4, 0.75), (8, 0.80), (12, 0.85), (16, 0.90)),
        default_multiplier=0.95,
        protein_per_kg=2.0,
        fat_ratio=0.25,
    ),
    Goal.MUSCLE_GAIN: GoalRule(
        calorie_tiers=((4, 1.25), (8, 1.20), (12, 1.15), (16, 1.10)),
        default_multiplier=1.05,
        protein_per_kg=2.2,
        fat_ratio=0.25,
    ),
    Goal.FAT_LOSS_HIGH_PROTEIN: GoalRule(
        calorie_tiers=((4, 0.80), (8, 0.85), (12, 0.90), (16, 0.95)),
        default_multiplier=0.98,
        protein_per_kg=2.5,
        fat_ratio=0.30,
    ),
    Goal.ENDURANCE: GoalRule(
        default_multiplier=1.10,
        protein_per_kg=1.6,
        fat_ratio=None,
        carb_ratio=0.60,
    ),
    Goal.KETO: GoalRule(
        default_multiplier=0.90,
        protein_per_kg=1.8,
        fat_ratio=0.70,
        carbs_per_kg=0.5,
    ),
    Goal.DIABETES_MANAGEMENT: GoalRule(
        default_multiplier=1.0,
        protein_per_kg=1.2,
        fat_ratio=None,
        carb_ratio=0.45,
    ),
    Goal.MAINTENANCE: _MAINTENANCE_RULE,
    Goal.CUSTOM: _MAINTENANCE_RULE,
})


def _positive_or_default(profile: Profile, field: str):
    value = getattr(profile, field)
    if value is None or value <= 0:
        return PROFILE_DEFAULTS[field]
    return value


def calculate_bmr(profile: Profile) -> float:
    """Basal metabolic rate via Mifflin-St Jeor.

    BMR = 10*weight(kg) + 6.25*height(cm) - 5*age(years) + gender offset

    Args:
        profile: Member profile

    Returns:
        BMR in kcal/day
    """
    weight = _positive_or_default(profile, "weight")
    height = _positive_or_default(profile, "height")
    age = _positive_or_default(profile, "age")
    return 10 * weight + 6.25 * height - 5 * age + GENDER_OFFSETS[profile.gender]


def calculate_tdee(profile: Profile) -> float:
    """Total daily energy expenditure: BMR times the activity multiplier."""
    return calculate_bmr(profile) * _positive_or_default(profile, "activity_level")


def calculate_macro_targets(profile: Profile) -> MacroTargets:
    """Goal-adjusted macro targets, unclamped.

    Remainder macros can come out negative for extreme inputs; use
    compute_macro_targets() for values safe to store.

    Args:
        profile: Member profile

    Returns:
        MacroTargets straight from the goal formula
    """
    rule = GOAL_RULES.get(profile.goal, _MAINTENANCE_RULE)
    weight = _positive_or_default(profile, "weight")
    weeks = _positive_or_default(profile, "goal_duration_weeks")

    calories = calculate_tdee(profile) * rule.calorie_multiplier(weeks)
    protein = weight * rule.protein_per_kg

    if rule.fat_ratio is not None:
        fat = calories * rule.fat_ratio / FAT_KCAL_PER_G
        if rule.carbs_per_kg is not None:
            carbs = weight * rule.carbs_per_kg
        else:
            carbs = (calories - protein * PROTEIN_KCAL_PER_G - fat * FAT_KCAL_PER_G) / CARBS_KCAL_PER_G
    else:
        carbs = calories * rule.carb_ratio / CARBS_KCAL_PER_G
        fat = (calories - protein * PROTEIN_KCAL_PER_G - carbs * CARBS_KCAL_PER_G) / FAT_KCAL_PER_G

    return MacroTargets(
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=DEFAULT_FIBER_GOAL,
    )


def compute_macro_targets(profile: Profile) -> MacroTargets:
    """Macro targets with every value floored at 0."""
    return calculate_macro_targets(profile).clamped()


def apply_targets(profile: Profile, targets: MacroTargets) -> Profile:
    """Return a copy of the profile carrying the given daily targets."""
    return profile.model_copy(update={
        "target_calories": targets.calories,
        "target_protein": targets.protein,
        "target_carbs": targets.carbs,
        "target_fat": targets.fat,
        "target_fiber": targets.fiber,
    })


# ==================== Descriptions ====================


def with_profile_defaults(profile: Profile) -> Profile:
    """Copy of the profile with the biometric values the formulas actually use."""
    return profile.model_copy(update={
        field: _positive_or_default(profile, field) for field in PROFILE_DEFAULTS
    })


def calculate_bmi(profile: Profile) -> float:
    """Body mass index from the defaulted weight and height."""
    height_m = _positive_or_default(profile, "height") / 100
    return _positive_or_default(profile, "weight") / (height_m * height_m)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal weight"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def describe_activity_level(activity_level: float) -> str:
    if activity_level < 1.2:
        return "Sedentary (little or no exercise)"
    if activity_level < 1.375:
        return "Lightly active (light exercise 1-3 days/week)"
    if activity_level < 1.55:
        return "Moderately active (moderate exercise 3-5 days/week)"
    if activity_level < 1.725:
        return "Very active (hard exercise 6-7 days/week)"
    if activity_level < 1.9:
        return "Extra active (very hard exercise, physical job)"
    return "Athlete (very hard exercise, physical job, training twice a day)"


GOAL_DESCRIPTIONS = MappingProxyType({
    Goal.WEIGHT_LOSS: "Reduce calorie intake by 20% with high protein (2g/kg)",
    Goal.MUSCLE_GAIN: "Increase calories by 15% with high protein (2.2g/kg)",
    Goal.FAT_LOSS_HIGH_PROTEIN: "Moderate calorie reduction with very high protein (2.5g/kg)",
    Goal.ENDURANCE: "Higher carbs (60%) for sustained energy during training",
    Goal.KETO: "High fat (70%), very low carb (<10%) for ketosis",
    Goal.DIABETES_MANAGEMENT: "Balanced macros with moderate carbs and fiber focus",
    Goal.CUSTOM: "Customizable nutrition plan (editable macros)",
    Goal.MAINTENANCE: "Maintain current weight with balanced nutrition",
})


def describe_goal(goal: Goal) -> str:
    return GOAL_DESCRIPTIONS.get(goal, "Balanced nutrition plan")


def describe_goal_duration(weeks: int) -> str:
    if weeks <= 4:
        return "1 month (aggressive)"
    if weeks <= 8:
        return "2 months (moderate)"
    if weeks <= 12:
        return "3 months (balanced)"
    if weeks <= 16:
        return "4 months (gradual)"
    if weeks <= 24:
        return "6 months (sustainable)"
    return f"{weeks // 4} months (long-term)"


def describe_calorie_adjustment(goal: Goal, weeks: int) -> str:
    """Human-readable deficit/surplus for tiered goals."""
    rule = GOAL_RULES.get(goal, _MAINTENANCE_RULE)
    if not rule.calorie_tiers:
        return "Standard calorie adjustment"
    multiplier = rule.calorie_multiplier(weeks)
    percent = round(abs(multiplier - 1.0) * 100)
    if multiplier < 1.0:
        return f"Calorie deficit: {percent}% reduction"
    return f"Calorie surplus: {percent}% increase"
