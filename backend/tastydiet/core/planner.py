"""Meal Plan Assembly - Build a member's daily plan slot by slot.

For every slot: take the slot's calorie share, narrow the recipe pool to
the slot, keep the recipes the inventory can cover, pick the best scoring
one and scale it to the calorie share. Failures stay local to a slot; a
failure of the whole assembly yields a zeroed plan marked failed.

The assembler holds no mutable state. Data access goes through an injected
PlannerRepository.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Sequence

from .distribution import slot_calorie_target
from .feasibility import (
    FeasibilityResult,
    candidates_for_slot,
    check_recipe,
    evaluate_recipes,
    inventory_snapshot,
)
from .models import (
    DailyMealPlan,
    MacroTargets,
    MealSlot,
    MealSuggestion,
    Nutrition,
    PlanStatus,
    Profile,
    Recipe,
    RecipeIngredient,
    SuggestionStatus,
)
from .portions import DEFAULT_PORTION_GRAMS, portion_grams, scale_nutrition
from .scoring import pick_best


logger = logging.getLogger(__name__)

NO_SUITABLE_RECIPE = "no suitable recipe"
UNABLE_TO_CHECK = "Unable to check ingredients"


class PlannerRepository(Protocol):
    """Data the planner reads. Implementations may raise on I/O errors."""

    def fetch_recipes(self, meal_type_hint: Optional[str], limit: int) -> list[Recipe]: ...

    def fetch_inventory_names(self) -> list[str]: ...

    def fetch_ingredients(self, recipe_id: str) -> list[RecipeIngredient]: ...

    def fetch_profile(self, member_id: str) -> Optional[Profile]: ...


@dataclass(frozen=True)
class StaticRepository:
    """In-memory PlannerRepository over fixed snapshots."""

    recipes: tuple[Recipe, ...] = ()
    inventory: tuple[str, ...] = ()
    ingredients: Mapping[str, tuple[RecipeIngredient, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    profiles: Mapping[str, Profile] = field(default_factory=lambda: MappingProxyType({}))

    def fetch_recipes(self, meal_type_hint: Optional[str], limit: int) -> list[Recipe]:
        if meal_type_hint is None:
            return list(self.recipes[:limit])
        return candidates_for_slot(MealSlot.parse(meal_type_hint), self.recipes, limit)

    def fetch_inventory_names(self) -> list[str]:
        return list(inventory_snapshot(self.inventory))

    def fetch_ingredients(self, recipe_id: str) -> list[RecipeIngredient]:
        return list(self.ingredients.get(recipe_id, ()))

    def fetch_profile(self, member_id: str) -> Optional[Profile]:
        return self.profiles.get(member_id)


@dataclass(frozen=True)
class PlannerConfig:
    """Planner tunables.

    Attributes:
        candidate_limit: Recipes considered per slot
        default_portion_grams: Portion used for recipes without calories
    """

    candidate_limit: int = 10
    default_portion_grams: float = DEFAULT_PORTION_GRAMS


def placeholder_suggestion(
    slot: Optional[MealSlot],
    status: SuggestionStatus = SuggestionStatus.NO_CANDIDATES,
    reason: str = NO_SUITABLE_RECIPE,
    missing_ingredients: Sequence[str] = (),
) -> MealSuggestion:
    """Zero-nutrition stand-in for a slot that could not be planned."""
    return MealSuggestion(
        meal_type=slot,
        recipe=None,
        portion_grams=0.0,
        nutrition=Nutrition.zero(),
        feasible=False,
        missing_ingredients=list(missing_ingredients),
        status=status,
        reason=reason,
    )


def _union_missing(results: Sequence[tuple[Recipe, FeasibilityResult]]) -> list[str]:
    seen: dict[str, None] = {}
    for _, result in results:
        for name in result.missing_ingredients:
            seen.setdefault(name, None)
    return list(seen)


class MealPlanAssembler:
    """Builds DailyMealPlans from profiles, recipe pools and inventory."""

    def __init__(
        self, repository: PlannerRepository, config: PlannerConfig | None = None
    ) -> None:
        """Initialize the assembler.

        Args:
            repository: Source of recipes, ingredients, inventory and profiles
            config: Planner tunables
        """
        self.repository = repository
        self.config = config or PlannerConfig()

    # ==================== Slots ====================

    def suggest_meal(
        self,
        slot: MealSlot,
        target_calories: float,
        recipe_pool: Sequence[Recipe],
        inventory: Sequence[str],
    ) -> MealSuggestion:
        """Plan one slot. Never raises.

        Args:
            slot: Meal slot to fill
            target_calories: Calories the slot should provide
            recipe_pool: Recipes to choose from, in preference order
            inventory: Normalized inventory names

        Returns:
            A scaled suggestion, or a placeholder explaining why there is none
        """
        try:
            candidates = candidates_for_slot(slot, recipe_pool, self.config.candidate_limit)
            evaluated = evaluate_recipes(candidates, inventory, self.repository.fetch_ingredients)
            feasible = [recipe for recipe, result in evaluated if result.feasible]

            best = pick_best(feasible, target_calories)
            if best is None:
                logger.info(
                    "No feasible recipe for %s (%d candidates)", slot.value, len(candidates)
                )
                return placeholder_suggestion(slot, missing_ingredients=_union_missing(evaluated))

            grams = portion_grams(best, target_calories, self.config.default_portion_grams)
            logger.debug(
                "Picked %s for %s: %.1fg for %.0f kcal", best.name, slot.value, grams, target_calories
            )
            return MealSuggestion(
                meal_type=slot,
                recipe=best,
                portion_grams=grams,
                nutrition=scale_nutrition(best, grams),
                feasible=True,
            )
        except Exception as e:
            logger.error("Failed to plan %s: %s", slot.value, str(e))
            return placeholder_suggestion(slot, status=SuggestionStatus.FAILED, reason=str(e))

    # ==================== Plans ====================

    def generate_daily_plan(
        self,
        profile: Profile,
        plan_date: date,
        recipe_pool: Sequence[Recipe],
        inventory: Sequence[str],
    ) -> DailyMealPlan:
        """Build a full day for one member. Never raises.

        Args:
            profile: Member whose stored targets drive the plan
            plan_date: Day being planned
            recipe_pool: Recipes to choose from
            inventory: Inventory names (normalized here)

        Returns:
            DailyMealPlan; status is degraded when any slot is a placeholder
            and failed when the assembly itself broke
        """
        targets = MacroTargets.from_profile(profile)
        logger.info("Generating plan for %s on %s", profile.id, plan_date)
        try:
            snapshot = inventory_snapshot(inventory)
            pool = tuple(recipe_pool)
            slots = {
                slot.field_name: self.suggest_meal(
                    slot, slot_calorie_target(targets.calories, slot), pool, snapshot
                )
                for slot in MealSlot
            }
            degraded = any(s.is_placeholder for s in slots.values())
            return DailyMealPlan(
                plan_date=plan_date,
                member_id=profile.id,
                targets=targets,
                status=PlanStatus.DEGRADED if degraded else PlanStatus.OK,
                **slots,
            )
        except Exception as e:
            logger.error("Plan generation failed for %s: %s", profile.id, str(e))
            return DailyMealPlan(
                plan_date=plan_date,
                member_id=profile.id,
                targets=targets,
                status=PlanStatus.FAILED,
                error=str(e),
            )

    def plan_for_member(self, member_id: str, plan_date: date) -> Optional[DailyMealPlan]:
        """Fetch everything from the repository and build the member's plan.

        Returns:
            DailyMealPlan, or None if the member does not exist
        """
        profile = self.repository.fetch_profile(member_id)
        if profile is None:
            logger.warning("Member not found: %s", member_id)
            return None
        try:
            recipes = self._fetch_pool()
            inventory = self.repository.fetch_inventory_names()
        except Exception as e:
            logger.error("Failed to load planning data for %s: %s", member_id, str(e))
            return DailyMealPlan(
                plan_date=plan_date,
                member_id=profile.id,
                targets=MacroTargets.from_profile(profile),
                status=PlanStatus.FAILED,
                error=str(e),
            )
        return self.generate_daily_plan(profile, plan_date, recipes, inventory)

    def regenerate_slot(
        self, meal_type: MealSlot | str, profile: Profile, plan: DailyMealPlan
    ) -> MealSuggestion:
        """Re-plan one slot of an existing plan with fresh repository data.

        The recipe currently in the slot is skipped when another candidate
        exists. The slot target comes from the profile's current calories.

        Args:
            meal_type: Slot label or MealSlot
            profile: Member profile
            plan: Plan the slot belongs to

        Returns:
            New MealSuggestion for the slot; a failed placeholder without a
            slot when meal_type names no known slot
        """
        try:
            slot = MealSlot.parse(meal_type)
        except ValueError as e:
            logger.warning("Cannot regenerate: %s", str(e))
            return placeholder_suggestion(None, status=SuggestionStatus.FAILED, reason=str(e))
        target = slot_calorie_target(profile.target_calories, slot)
        try:
            recipes = self.repository.fetch_recipes(slot.value, self.config.candidate_limit + 1)
            inventory = inventory_snapshot(self.repository.fetch_inventory_names())
        except Exception as e:
            logger.error("Failed to load data to regenerate %s: %s", slot.value, str(e))
            return placeholder_suggestion(slot, status=SuggestionStatus.FAILED, reason=str(e))

        current = plan.suggestion_for(slot)
        if current is not None and current.recipe is not None:
            others = [r for r in recipes if r.id != current.recipe.id]
            if others:
                recipes = others

        return self.suggest_meal(slot, target, recipes, inventory)

    def check_ingredient_availability(self, recipe_id: str) -> FeasibilityResult:
        """Whether the current inventory covers one recipe.

        Unlike planning, a failed lookup reports the recipe as not feasible.
        """
        try:
            ingredients = self.repository.fetch_ingredients(recipe_id)
            inventory = inventory_snapshot(self.repository.fetch_inventory_names())
        except Exception as e:
            logger.error("Error checking ingredient availability: %s", str(e))
            return FeasibilityResult(feasible=False, missing_ingredients=(UNABLE_TO_CHECK,))
        return check_recipe(ingredients, inventory)

    def _fetch_pool(self) -> list[Recipe]:
        """Recipes hinted for each slot, de-duplicated, in slot order."""
        pool: dict[str, Recipe] = {}
        for slot in MealSlot:
            for recipe in self.repository.fetch_recipes(slot.value, self.config.candidate_limit):
                pool.setdefault(recipe.id, recipe)
        return list(pool.values())
