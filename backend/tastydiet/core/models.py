"""Core Data Models - Pydantic models for type safety.

Models are value objects: the engine never mutates a model in place, it
returns updated copies.
"""

from datetime import datetime
from datetime import date as DateType
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
import uuid


class Gender(str, Enum):
    """Biological sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "Gender":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class Goal(str, Enum):
    """Closed set of nutrition goals. Values are the display labels."""

    WEIGHT_LOSS = "Weight Loss"
    MUSCLE_GAIN = "Muscle Gain"
    FAT_LOSS_HIGH_PROTEIN = "Fat Loss (High Protein)"
    ENDURANCE = "Endurance Training"
    KETO = "Keto Diet"
    DIABETES_MANAGEMENT = "Diabetes Management"
    MAINTENANCE = "Maintenance"
    CUSTOM = "Custom Plan"

    @classmethod
    def parse(cls, value) -> "Goal":
        """Resolve a label, member name or short alias; unknown -> MAINTENANCE."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for goal in cls:
            if key in (goal.value.lower(), goal.name.lower()):
                return goal
        return _GOAL_ALIASES.get(key, cls.MAINTENANCE)


_GOAL_ALIASES = {
    "endurance": Goal.ENDURANCE,
    "keto": Goal.KETO,
    "fat loss": Goal.FAT_LOSS_HIGH_PROTEIN,
    "diabetes": Goal.DIABETES_MANAGEMENT,
    "custom": Goal.CUSTOM,
}


class MealSlot(str, Enum):
    """Fixed meal slots of a daily plan, in planning order."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"

    @property
    def field_name(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, value) -> "MealSlot":
        """Resolve a slot label or alias.

        Raises:
            ValueError: If the label names no known slot
        """
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for slot in cls:
            if key == slot.field_name:
                return slot
        if key in _SLOT_ALIASES:
            return _SLOT_ALIASES[key]
        raise ValueError(f"Unknown meal type: {value!r}")

    @property
    def aliases(self) -> tuple[str, ...]:
        """Lower-case labels that refer to this slot, its own name first."""
        return (self.field_name,) + tuple(
            alias for alias, slot in _SLOT_ALIASES.items() if slot is self
        )


_SLOT_ALIASES = {
    "morning": MealSlot.BREAKFAST,
    "tiffin": MealSlot.BREAKFAST,
    "evening": MealSlot.SNACK,
    "night": MealSlot.DINNER,
}


class Profile(BaseModel):
    """A family member's biometrics, goal and stored daily targets."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(default="User")
    age: int = Field(default=25, description="Age in years; 0 or less means unknown")
    weight: float = Field(default=60.0, description="Weight in kg; 0 or less means unknown")
    height: float = Field(default=165.0, description="Height in cm; 0 or less means unknown")
    gender: Gender = Field(default=Gender.OTHER)
    activity_level: float = Field(default=1.4, description="TDEE multiplier, typically 1.2-1.9")
    goal: Goal = Field(default=Goal.MAINTENANCE)
    goal_duration_weeks: int = Field(default=12)
    target_calories: float = Field(default=2000.0, ge=0, description="Daily calorie target")
    target_protein: float = Field(default=50.0, ge=0, description="Daily protein target in grams")
    target_carbs: float = Field(default=250.0, ge=0, description="Daily carbohydrate target in grams")
    target_fat: float = Field(default=70.0, ge=0, description="Daily fat target in grams")
    target_fiber: float = Field(default=25.0, ge=0, description="Daily fiber target in grams")

    @field_validator("gender", mode="before")
    @classmethod
    def validate_gender(cls, v):
        """Accept any casing; unknown values fall back to other"""
        return Gender.parse(v)

    @field_validator("goal", mode="before")
    @classmethod
    def validate_goal(cls, v):
        """Accept labels, member names and aliases"""
        return Goal.parse(v)


class MacroTargets(BaseModel):
    """Daily macro targets. Raw formula output may hold negative grams."""

    model_config = ConfigDict(frozen=True)

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 25.0

    def clamped(self) -> "MacroTargets":
        """Copy with every field floored at 0."""
        return MacroTargets(
            calories=max(0.0, self.calories),
            protein=max(0.0, self.protein),
            carbs=max(0.0, self.carbs),
            fat=max(0.0, self.fat),
            fiber=max(0.0, self.fiber),
        )

    @classmethod
    def from_profile(cls, profile: Profile) -> "MacroTargets":
        """Snapshot of the targets currently stored on a profile."""
        return cls(
            calories=profile.target_calories,
            protein=profile.target_protein,
            carbs=profile.target_carbs,
            fat=profile.target_fat,
            fiber=profile.target_fiber,
        )


class Recipe(BaseModel):
    """A recipe with nutrition per 100g. Supplied by a recipe repository."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(min_length=1)
    cuisine: str = Field(default="")
    category: str = Field(default="", description="Meal-type hint, e.g. Breakfast")
    meal_type: str = Field(default="")
    calories_per_100g: int = Field(ge=0)
    protein_per_100g: float = Field(ge=0)
    carbs_per_100g: float = Field(ge=0)
    fat_per_100g: float = Field(ge=0)
    fiber_per_100g: float = Field(default=0.0, ge=0)


class InventoryItem(BaseModel):
    """Pantry item. Planning only looks at the name."""

    name: str
    quantity: float = Field(default=0.0)
    unit: str = Field(default="")
    category: str = Field(default="")


class RecipeIngredient(BaseModel):
    """An ingredient a recipe requires. Quantities are informational."""

    recipe_id: str
    ingredient_name: str
    quantity: float = Field(default=0.0)
    unit: str = Field(default="")


class Nutrition(BaseModel):
    """Absolute nutrition amounts (kcal and grams)."""

    model_config = ConfigDict(frozen=True)

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    @classmethod
    def zero(cls) -> "Nutrition":
        return cls()

    def __add__(self, other: "Nutrition") -> "Nutrition":
        return Nutrition(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )


class SuggestionStatus(str, Enum):
    """Outcome of planning one slot."""

    OK = "ok"
    NO_CANDIDATES = "no_candidates"
    FAILED = "failed"


class PlanStatus(str, Enum):
    """Outcome of planning a whole day; degraded means at least one placeholder."""

    OK = "ok"
    DEGRADED = "degraded"
    FAILED = "failed"


class MealSuggestion(BaseModel):
    """Recipe chosen for one meal slot, scaled to a portion."""

    meal_type: Optional[MealSlot] = Field(description="None only when the requested slot was unknown")
    recipe: Optional[Recipe] = Field(default=None, description="None for placeholders")
    portion_grams: float = Field(default=0.0, ge=0)
    nutrition: Nutrition = Field(default_factory=Nutrition.zero)
    feasible: bool = True
    missing_ingredients: list[str] = Field(default_factory=list)
    status: SuggestionStatus = SuggestionStatus.OK
    reason: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.status is not SuggestionStatus.OK


class DailyMealPlan(BaseModel):
    """A member's plan for one day, one optional suggestion per slot."""

    plan_date: DateType
    member_id: str
    breakfast: Optional[MealSuggestion] = None
    lunch: Optional[MealSuggestion] = None
    dinner: Optional[MealSuggestion] = None
    snack: Optional[MealSuggestion] = None
    targets: MacroTargets = Field(description="Copy of the targets the plan was built against")
    status: PlanStatus = PlanStatus.OK
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def suggestion_for(self, slot: MealSlot) -> Optional[MealSuggestion]:
        return getattr(self, slot.field_name)

    def suggestions(self) -> list[MealSuggestion]:
        """Present suggestions in slot order."""
        found = (self.suggestion_for(slot) for slot in MealSlot)
        return [s for s in found if s is not None]

    @computed_field
    @property
    def totals(self) -> Nutrition:
        """Sum of the slot suggestions' nutrition."""
        total = Nutrition.zero()
        for suggestion in self.suggestions():
            total = total + suggestion.nutrition
        return total

    def with_suggestion(self, suggestion: MealSuggestion) -> "DailyMealPlan":
        """Copy of this plan with one slot replaced and the status refreshed.

        A suggestion without a slot leaves the plan unchanged.
        """
        if suggestion.meal_type is None:
            return self.model_copy()
        updated = self.model_copy(update={suggestion.meal_type.field_name: suggestion})
        if updated.status is not PlanStatus.FAILED:
            degraded = any(s.is_placeholder for s in updated.suggestions())
            updated = updated.model_copy(
                update={"status": PlanStatus.DEGRADED if degraded else PlanStatus.OK}
            )
        return updated


class DailyMacroSummary(BaseModel):
    """Plan totals against plan targets."""

    total_calories: float = Field(ge=0)
    total_protein: float = Field(ge=0)
    total_carbs: float = Field(ge=0)
    total_fat: float = Field(ge=0)
    total_fiber: float = Field(ge=0)
    target_calories: float
    target_protein: float
    target_carbs: float
    target_fat: float
    target_fiber: float
    calories_progress: float = Field(description="Percent of target, 0 when target is 0")
    protein_progress: float
    carbs_progress: float
    fat_progress: float
    fiber_progress: float
