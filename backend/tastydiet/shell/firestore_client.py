"""Firestore Client - Persistence for members, recipes, inventory and plans.

This module handles all database I/O for meal planning.
All I/O is contained here; planning logic is in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from google.cloud import firestore
from pydantic import ValidationError

from ..core.feasibility import inventory_snapshot
from ..core.models import (
    DailyMealPlan,
    InventoryItem,
    MacroTargets,
    MealSlot,
    Profile,
    Recipe,
    RecipeIngredient,
)


logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
    """

    project_id: str | None = None
    database: str | None = None


class TastyDietFirestoreClient:
    """Firestore-backed PlannerRepository plus plan persistence.

    Document structure:
        members/{member_id}: { name, age, weight, ..., target_calories, ... }
        members/{member_id}/plans/{YYYY-MM-DD}: DailyMealPlan
        recipes/{recipe_id}: { name, category, calories_per_100g, ... }
        recipes/{recipe_id}/ingredients/{id}: { ingredient_name, quantity, unit }
        inventory/{item_id}: { name, quantity, unit, category }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _member_ref(self, member_id: str) -> firestore.DocumentReference:
        return self.client.collection("members").document(member_id)

    def _plan_ref(self, member_id: str, plan_date: date) -> firestore.DocumentReference:
        return self._member_ref(member_id).collection("plans").document(plan_date.isoformat())

    def _recipe_ref(self, recipe_id: str) -> firestore.DocumentReference:
        return self.client.collection("recipes").document(recipe_id)

    # ==================== Members ====================

    def fetch_profile(self, member_id: str) -> Profile | None:
        """Fetch a member profile.

        Args:
            member_id: The member's ID

        Returns:
            Profile if found, None otherwise
        """
        logger.debug("Fetching profile: %s", member_id)
        try:
            doc = self._member_ref(member_id).get()
            if not doc.exists:
                logger.info("Profile not found: %s", member_id)
                return None
            # Null fields fall back to the model defaults
            data = {k: v for k, v in doc.to_dict().items() if v is not None}
            data["id"] = doc.id
            return Profile(**data)
        except ValidationError as e:
            logger.error("Invalid profile document %s: %s", member_id, str(e))
            return None
        except Exception as e:
            logger.error("Failed to fetch profile: %s", str(e))
            return None

    def save_targets(self, member_id: str, targets: MacroTargets) -> bool:
        """Write computed daily targets back onto a member.

        Args:
            member_id: The member's ID
            targets: Targets to store

        Returns:
            True if successful
        """
        logger.info("Saving targets for member: %s", member_id)
        try:
            self._member_ref(member_id).update({
                "target_calories": targets.calories,
                "target_protein": targets.protein,
                "target_carbs": targets.carbs,
                "target_fat": targets.fat,
                "target_fiber": targets.fiber,
                "updated_at": datetime.utcnow(),
            })
            return True
        except Exception as e:
            logger.error("Failed to save targets: %s", str(e))
            return False

    # ==================== Recipes & Inventory ====================

    def fetch_recipes(self, meal_type_hint: str | None, limit: int) -> list[Recipe]:
        """Fetch candidate recipes, optionally for one meal type.

        Firestore has no case-insensitive match, so the hint is compared to
        the stored category as given; with no match the unfiltered
        collection is used.

        Args:
            meal_type_hint: Slot label such as "Breakfast", or None
            limit: Maximum number of recipes

        Returns:
            Valid recipes in document order; invalid documents are skipped

        Raises:
            google.api_core.exceptions.GoogleAPIError: On Firestore errors
        """
        recipes_ref = self.client.collection("recipes")
        recipes: list[Recipe] = []
        if meal_type_hint:
            category = MealSlot.parse(meal_type_hint).value
            query = recipes_ref.where("category", "==", category).limit(limit)
            recipes = self._valid_recipes(query.stream())
        if not recipes:
            recipes = self._valid_recipes(recipes_ref.limit(limit).stream())
        logger.debug("Fetched %d recipes for %s", len(recipes), meal_type_hint)
        return recipes

    @staticmethod
    def _valid_recipes(docs) -> list[Recipe]:
        """Parse recipe documents, skipping the ones that do not validate."""
        recipes = []
        for doc in docs:
            try:
                recipes.append(Recipe(**{**doc.to_dict(), "id": doc.id}))
            except ValidationError as e:
                logger.warning("Skipping invalid recipe %s: %s", doc.id, str(e))
        return recipes

    def fetch_ingredients(self, recipe_id: str) -> list[RecipeIngredient]:
        """Fetch a recipe's required ingredients.

        Errors propagate; the planner decides how to treat them.

        Raises:
            google.api_core.exceptions.GoogleAPIError: On Firestore errors
        """
        docs = self._recipe_ref(recipe_id).collection("ingredients").stream()
        return [RecipeIngredient(**{**doc.to_dict(), "recipe_id": recipe_id}) for doc in docs]

    def fetch_inventory(self) -> list[InventoryItem]:
        """Fetch all inventory items, skipping documents that do not validate.

        Raises:
            google.api_core.exceptions.GoogleAPIError: On Firestore errors
        """
        items = []
        for doc in self.client.collection("inventory").stream():
            try:
                items.append(InventoryItem(**doc.to_dict()))
            except ValidationError as e:
                logger.warning("Skipping invalid inventory item %s: %s", doc.id, str(e))
        return items

    def fetch_inventory_names(self) -> list[str]:
        """Normalized inventory names for feasibility checks."""
        return list(inventory_snapshot(self.fetch_inventory()))

    # ==================== Plans ====================

    def save_plan(self, plan: DailyMealPlan) -> bool:
        """Save a daily plan, replacing any plan for the same day.

        Args:
            plan: The plan to save

        Returns:
            True if successful
        """
        logger.info("Saving plan for %s on %s", plan.member_id, plan.plan_date)
        try:
            data = plan.model_dump(mode="json")
            self._plan_ref(plan.member_id, plan.plan_date).set(data)
            return True
        except Exception as e:
            logger.error("Failed to save plan: %s", str(e))
            return False

    def get_plan(self, member_id: str, plan_date: date) -> DailyMealPlan | None:
        """Fetch a saved plan.

        Args:
            member_id: The member's ID
            plan_date: Day of the plan

        Returns:
            DailyMealPlan if found, None otherwise
        """
        logger.debug("Fetching plan for %s on %s", member_id, plan_date)
        try:
            doc = self._plan_ref(member_id, plan_date).get()
            if not doc.exists:
                return None
            return DailyMealPlan.model_validate(doc.to_dict())
        except Exception as e:
            logger.error("Failed to fetch plan: %s", str(e))
            return None
