# rezepte/app/services/planner_service.py
"""
Meal planning service.
Ties meal plans to recipe snapshots and builds shopping lists.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from rezepte.app.domain.models import MealPlan, MealType, ShoppingList
from rezepte.app.infra.db.base import MealPlanRepository, RecipeRepository
from rezepte.app.services.shopping_list import aggregate_ingredients

logger = logging.getLogger(__name__)


class PlannerService:
    """
    Service for meal plans.

    Responsibilities:
    - Snapshot the assigned recipe when a plan is created or re-assigned
    - Build shopping lists from a selection of plans
    """

    def __init__(self, recipes: RecipeRepository, plans: MealPlanRepository):
        self._recipes = recipes
        self._plans = plans

    def create_plan(
        self,
        plan_date: date,
        meal_type: MealType,
        recipe_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> MealPlan:
        """
        Create a meal plan, embedding a snapshot of the recipe if one is given.

        Raises:
            RecipeNotFoundError: If recipe_id does not exist (nothing is created)
        """
        recipe = self._recipes.find_by_id(recipe_id) if recipe_id is not None else None

        return self._plans.create(
            {
                "date": plan_date,
                "meal_type": meal_type,
                "recipe_id": recipe_id,
                "recipe": recipe,
                "notes": notes,
            }
        )

    def update_plan(self, plan_id: int, changes: Mapping[str, Any]) -> MealPlan:
        """
        Update a meal plan.

        A new ``recipe_id`` takes a fresh snapshot of that recipe; an explicit
        ``recipe_id=None`` clears the assignment.

        Raises:
            RecipeNotFoundError: If the new recipe_id does not exist
            MealPlanNotFoundError: If the plan does not exist
        """
        updates = dict(changes)
        updates.pop("recipe", None)

        if "recipe_id" in updates:
            recipe_id = updates["recipe_id"]
            updates["recipe"] = self._recipes.find_by_id(recipe_id) if recipe_id is not None else None

        return self._plans.update(plan_id, updates)

    def generate_shopping_list(self, plan_ids: Iterable[int]) -> ShoppingList:
        """
        Aggregate the ingredients of the given plans.

        Duplicate ids are counted once; unknown ids are ignored.
        """
        unique_ids = list(dict.fromkeys(plan_ids))
        plans = self._plans.find_by_ids(unique_ids)

        shopping_list = aggregate_ingredients(plans)
        logger.info(
            "Shopping list generated: requested=%d, resolved=%d, lines=%d, skipped=%d",
            len(unique_ids),
            len(plans),
            shopping_list.total_items,
            len(shopping_list.skipped),
        )
        return shopping_list
