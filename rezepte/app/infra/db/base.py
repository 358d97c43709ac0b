# rezepte/app/infra/db/base.py
"""
Abstract base classes for the recipe, meal-plan and shopping-item stores.
This interface allows easy swapping between storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import fields
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from rezepte.app.domain.models import MealPlan, Recipe, ShoppingItem

# Fields the stores assign themselves and never take from callers.
MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})

RECIPE_FIELDS = frozenset(f.name for f in fields(Recipe)) - MANAGED_FIELDS
MEAL_PLAN_FIELDS = frozenset(f.name for f in fields(MealPlan)) - MANAGED_FIELDS
SHOPPING_ITEM_FIELDS = frozenset(f.name for f in fields(ShoppingItem)) - MANAGED_FIELDS


def pick_fields(data: Mapping[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    """Keep only the keys a store accepts for a record type."""
    return {key: value for key, value in data.items() if key in allowed}


class RecipeRepository(ABC):
    """
    Abstract interface for recipe storage.

    Implementations:
    - InMemoryRecipeRepository: lock-guarded in-process collection
    - SupabaseRecipeRepository: Postgres table through Supabase
    """

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> Recipe:
        """
        Store a new recipe.

        Args:
            data: Recipe fields (id and timestamps are ignored)

        Returns:
            The stored Recipe with its assigned id and timestamps
        """
        pass

    @abstractmethod
    def find_all(self) -> list[Recipe]:
        """Return every recipe in insertion order."""
        pass

    @abstractmethod
    def find_by_id(self, recipe_id: int) -> Recipe:
        """
        Get a recipe by its id.

        Raises:
            RecipeNotFoundError: If no recipe has this id
        """
        pass

    @abstractmethod
    def update(self, recipe_id: int, changes: Mapping[str, Any]) -> Recipe:
        """
        Merge the supplied fields into an existing recipe.

        Args:
            recipe_id: The recipe to update
            changes: Fields to overwrite; id and created_at are never changed

        Returns:
            The updated Recipe

        Raises:
            RecipeNotFoundError: If no recipe has this id
        """
        pass

    @abstractmethod
    def delete(self, recipe_id: int) -> Recipe:
        """
        Remove a recipe.

        Returns:
            The removed Recipe

        Raises:
            RecipeNotFoundError: If no recipe has this id
        """
        pass

    @abstractmethod
    def find_by_category(self, category: str) -> list[Recipe]:
        pass

    @abstractmethod
    def find_by_tags(self, tags: Iterable[str]) -> list[Recipe]:
        """Return recipes sharing at least one tag with ``tags``."""
        pass

    @abstractmethod
    def search(self, query: str) -> list[Recipe]:
        """Case-insensitive substring search over title, description and tags."""
        pass

    def toggle_favorite(self, recipe_id: int) -> Recipe:
        recipe = self.find_by_id(recipe_id)
        return self.update(recipe_id, {"favorite": not recipe.favorite})


class MealPlanRepository(ABC):
    """
    Abstract interface for meal-plan storage.
    """

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> MealPlan:
        pass

    @abstractmethod
    def find_all(self) -> list[MealPlan]:
        pass

    @abstractmethod
    def find_by_id(self, plan_id: int) -> MealPlan:
        """
        Raises:
            MealPlanNotFoundError: If no plan has this id
        """
        pass

    @abstractmethod
    def find_by_ids(self, plan_ids: Iterable[int]) -> list[MealPlan]:
        """
        Resolve several ids at once.

        Unknown ids are skipped. The result follows the order of ``plan_ids``.
        """
        pass

    @abstractmethod
    def find_by_date_range(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[MealPlan]:
        """
        Return plans whose date lies within [start, end], both ends inclusive.
        A missing bound leaves that side open.

        Raises:
            InvalidDateRangeError: If start is after end
        """
        pass

    @abstractmethod
    def update(self, plan_id: int, changes: Mapping[str, Any]) -> MealPlan:
        pass

    @abstractmethod
    def delete(self, plan_id: int) -> MealPlan:
        pass


class ShoppingItemRepository(ABC):
    """
    Abstract interface for the hand-edited shopping list.
    """

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> ShoppingItem:
        pass

    @abstractmethod
    def find_all(self) -> list[ShoppingItem]:
        """Return every item in insertion order."""
        pass

    @abstractmethod
    def find_by_id(self, item_id: int) -> ShoppingItem:
        """
        Raises:
            ShoppingItemNotFoundError: If no item has this id
        """
        pass

    @abstractmethod
    def update(self, item_id: int, changes: Mapping[str, Any]) -> ShoppingItem:
        pass

    @abstractmethod
    def delete(self, item_id: int) -> ShoppingItem:
        pass

    def toggle_checked(self, item_id: int) -> ShoppingItem:
        item = self.find_by_id(item_id)
        return self.update(item_id, {"checked": not item.checked})
