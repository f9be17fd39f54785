"""MCP Server - Tool definitions for the meal planning assistant.

Exposes target calculation and daily meal planning as MCP tools. Tools
return plain dicts; failures come back as {"error": ...} instead of raising.
"""

import logging
import os
from datetime import date

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.macros import calculate_daily_summary
from ..core.models import DailyMealPlan, MealSuggestion
from ..core.planner import MealPlanAssembler, PlannerConfig
from ..core.targets import (
    bmi_category,
    calculate_bmi,
    calculate_bmr,
    calculate_tdee,
    compute_macro_targets,
    describe_activity_level,
    describe_calorie_adjustment,
    describe_goal,
    describe_goal_duration,
    with_profile_defaults,
)
from .firestore_client import TastyDietFirestoreClient, FirestoreConfig


logger = logging.getLogger(__name__)

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)

mcp = FastMCP(
    "tastydiet",
    instructions="""TastyDiet - Family meal planning assistant.

Use these tools to compute a family member's daily macro targets and to plan
their meals from the recipes the household can cook with its inventory.

Call calculate_targets after a member's weight, activity or goal changes.
Call generate_meal_plan to plan a day, and regenerate_meal to swap one meal.
Slots marked no_candidates or failed have no recipe; tell the user why.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Lazy-initialized clients
_firestore_client: TastyDietFirestoreClient | None = None
_planner: MealPlanAssembler | None = None


def get_firestore_client() -> TastyDietFirestoreClient:
    """Get or create Firestore client."""
    global _firestore_client
    if _firestore_client is None:
        config = FirestoreConfig(
            project_id=os.environ.get("FIRESTORE_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE", "tastydiet"),
        )
        _firestore_client = TastyDietFirestoreClient(config)
    return _firestore_client


def get_planner() -> MealPlanAssembler:
    """Get or create the meal plan assembler over Firestore."""
    global _planner
    if _planner is None:
        config = PlannerConfig(
            candidate_limit=int(os.environ.get("PLANNER_CANDIDATE_LIMIT", 10)),
        )
        _planner = MealPlanAssembler(get_firestore_client(), config)
    return _planner


def _parse_date(date_str: str | None) -> date:
    if not date_str:
        return date.today()
    return date.fromisoformat(date_str)


def _suggestion_to_dict(suggestion: MealSuggestion | None) -> dict | None:
    if suggestion is None:
        return None
    return {
        "meal_type": suggestion.meal_type.value if suggestion.meal_type else None,
        "recipe_id": suggestion.recipe.id if suggestion.recipe else None,
        "recipe": suggestion.recipe.name if suggestion.recipe else None,
        "portion_grams": round(suggestion.portion_grams, 1),
        "calories": round(suggestion.nutrition.calories, 1),
        "protein": round(suggestion.nutrition.protein, 1),
        "carbs": round(suggestion.nutrition.carbs, 1),
        "fat": round(suggestion.nutrition.fat, 1),
        "fiber": round(suggestion.nutrition.fiber, 1),
        "feasible": suggestion.feasible,
        "missing_ingredients": suggestion.missing_ingredients,
        "status": suggestion.status.value,
        "reason": suggestion.reason,
    }


def _plan_to_dict(plan: DailyMealPlan) -> dict:
    return {
        "date": plan.plan_date.isoformat(),
        "member_id": plan.member_id,
        "status": plan.status.value,
        "error": plan.error,
        "meals": {
            suggestion.meal_type.field_name: _suggestion_to_dict(suggestion)
            for suggestion in plan.suggestions()
        },
        "summary": calculate_daily_summary(plan).model_dump(),
    }


# ==================== Target Tools ====================


@mcp.tool()
def calculate_targets(member_id: str, save: bool = True) -> dict:
    """Compute a member's daily calorie and macro targets from their profile.

    Args:
        member_id: The family member's ID
        save: Store the targets on the member so future plans use them

    Returns:
        BMR, TDEE, BMI and the goal-adjusted daily targets
    """
    db = get_firestore_client()

    profile = db.fetch_profile(member_id)
    if profile is None:
        return {"error": f"Member {member_id} not found."}

    targets = compute_macro_targets(profile)
    saved = db.save_targets(member_id, targets) if save else False
    effective = with_profile_defaults(profile)
    bmi = calculate_bmi(effective)

    return {
        "member_id": member_id,
        "bmr": round(calculate_bmr(profile), 1),
        "tdee": round(calculate_tdee(profile), 1),
        "bmi": round(bmi, 1),
        "bmi_category": bmi_category(bmi),
        "activity": describe_activity_level(effective.activity_level),
        "goal": profile.goal.value,
        "goal_description": describe_goal(profile.goal),
        "duration": describe_goal_duration(effective.goal_duration_weeks),
        "calorie_adjustment": describe_calorie_adjustment(
            effective.goal, effective.goal_duration_weeks
        ),
        "targets": {
            "calories": round(targets.calories),
            "protein": round(targets.protein, 1),
            "carbs": round(targets.carbs, 1),
            "fat": round(targets.fat, 1),
            "fiber": round(targets.fiber, 1),
        },
        "saved": saved,
    }


# ==================== Planning Tools ====================


@mcp.tool()
def generate_meal_plan(member_id: str, date_str: str | None = None) -> dict:
    """Plan breakfast, lunch, dinner and a snack for one day.

    Args:
        member_id: The family member's ID
        date_str: Day to plan in YYYY-MM-DD format (defaults to today)

    Returns:
        The plan with per-meal portions and a totals-vs-targets summary
    """
    try:
        plan_date = _parse_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    plan = get_planner().plan_for_member(member_id, plan_date)
    if plan is None:
        return {"error": f"Member {member_id} not found."}

    result = _plan_to_dict(plan)
    if not get_firestore_client().save_plan(plan):
        result["warning"] = "Plan generated but could not be saved."
    return result


@mcp.tool()
def regenerate_meal(member_id: str, meal_type: str, date_str: str | None = None) -> dict:
    """Swap one meal of a saved plan for a different recipe.

    Args:
        member_id: The family member's ID
        meal_type: Breakfast, Lunch, Dinner or Snack
        date_str: Day of the plan in YYYY-MM-DD format (defaults to today)

    Returns:
        The new meal and the updated plan
    """
    db = get_firestore_client()

    try:
        plan_date = _parse_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    profile = db.fetch_profile(member_id)
    if profile is None:
        return {"error": f"Member {member_id} not found."}

    plan = db.get_plan(member_id, plan_date)
    if plan is None:
        return {"error": "No plan for that day. Use generate_meal_plan first."}

    suggestion = get_planner().regenerate_slot(meal_type, profile, plan)
    if suggestion.meal_type is None:
        return {"error": suggestion.reason}

    plan = plan.with_suggestion(suggestion)
    result = {"meal": _suggestion_to_dict(suggestion), "plan": _plan_to_dict(plan)}
    if not db.save_plan(plan):
        result["warning"] = "Meal regenerated but the plan could not be saved."
    return result


@mcp.tool()
def get_meal_plan(member_id: str, date_str: str | None = None) -> dict:
    """Get a saved meal plan.

    Args:
        member_id: The family member's ID
        date_str: Day of the plan in YYYY-MM-DD format (defaults to today)

    Returns:
        The plan with per-meal portions and summary
    """
    try:
        plan_date = _parse_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    plan = get_firestore_client().get_plan(member_id, plan_date)
    if plan is None:
        return {"error": "No plan for that day."}
    return _plan_to_dict(plan)


@mcp.tool()
def check_recipe_availability(recipe_id: str) -> dict:
    """Check whether the inventory covers every ingredient of a recipe.

    Args:
        recipe_id: The recipe's ID

    Returns:
        Availability flag and the missing ingredient names
    """
    result = get_planner().check_ingredient_availability(recipe_id)
    return {
        "recipe_id": recipe_id,
        "available": result.feasible,
        "missing_ingredients": list(result.missing_ingredients),
    }
