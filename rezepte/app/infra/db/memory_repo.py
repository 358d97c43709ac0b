from __future__ import annotations

import copy
import logging
import threading
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from rezepte.app.domain.errors import (
    MealPlanNotFoundError,
    NotFoundError,
    RecipeNotFoundError,
    ShoppingItemNotFoundError,
)
from rezepte.app.domain.models import MealPlan, Recipe, ShoppingItem
from rezepte.app.infra.db.base import (
    MEAL_PLAN_FIELDS,
    RECIPE_FIELDS,
    SHOPPING_ITEM_FIELDS,
    MealPlanRepository,
    RecipeRepository,
    ShoppingItemRepository,
    pick_fields,
)
from rezepte.app.infra.db.filters import (
    check_date_range,
    in_date_range,
    matches_any_tag,
    matches_category,
    matches_query,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", Recipe, MealPlan, ShoppingItem)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class _InMemoryCollection(Generic[T]):
    """
    Ordered, id-keyed collection guarded by a single lock.

    Every operation runs to completion under the lock and hands out deep copies,
    so callers never see a partial write or share state with the store.
    """

    def __init__(
        self,
        factory: Callable[..., T],
        allowed_fields: frozenset[str],
        not_found: type[NotFoundError],
    ):
        self._factory = factory
        self._allowed = allowed_fields
        self._not_found = not_found
        self._records: dict[int, T] = {}
        self._next_id = 1
        self.lock = threading.RLock()

    def create(self, data: Mapping[str, Any]) -> T:
        values = copy.deepcopy(pick_fields(data, self._allowed))
        with self.lock:
            now = _now_utc()
            record = self._factory(id=self._next_id, created_at=now, updated_at=now, **values)
            self._records[record.id] = record
            self._next_id += 1
            return copy.deepcopy(record)

    def all(self) -> list[T]:
        with self.lock:
            return copy.deepcopy(list(self._records.values()))

    def get(self, record_id: int) -> T:
        with self.lock:
            record = self._records.get(record_id)
            if record is None:
                raise self._not_found(record_id)
            return copy.deepcopy(record)

    def get_many(self, record_ids: Iterable[int]) -> list[T]:
        with self.lock:
            found = [self._records[rid] for rid in record_ids if rid in self._records]
            return copy.deepcopy(found)

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        with self.lock:
            return copy.deepcopy([r for r in self._records.values() if predicate(r)])

    def update(self, record_id: int, changes: Mapping[str, Any]) -> T:
        values = copy.deepcopy(pick_fields(changes, self._allowed))
        with self.lock:
            current = self._records.get(record_id)
            if current is None:
                raise self._not_found(record_id)
            updated = replace(current, **values, updated_at=_now_utc())
            self._records[record_id] = updated
            return copy.deepcopy(updated)

    def delete(self, record_id: int) -> T:
        with self.lock:
            record = self._records.pop(record_id, None)
            if record is None:
                raise self._not_found(record_id)
            return record

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self) -> None:
        self._recipes: _InMemoryCollection[Recipe] = _InMemoryCollection(
            Recipe, RECIPE_FIELDS, RecipeNotFoundError
        )

    def create(self, data: Mapping[str, Any]) -> Recipe:
        recipe = self._recipes.create(data)
        logger.info("Recipe created: id=%s, title=%s", recipe.id, recipe.title)
        return recipe

    def find_all(self) -> list[Recipe]:
        return self._recipes.all()

    def find_by_id(self, recipe_id: int) -> Recipe:
        return self._recipes.get(recipe_id)

    def update(self, recipe_id: int, changes: Mapping[str, Any]) -> Recipe:
        return self._recipes.update(recipe_id, changes)

    def delete(self, recipe_id: int) -> Recipe:
        recipe = self._recipes.delete(recipe_id)
        logger.info("Recipe deleted: id=%s", recipe_id)
        return recipe

    def find_by_category(self, category: str) -> list[Recipe]:
        return self._recipes.filter(lambda r: matches_category(r, category))

    def find_by_tags(self, tags: Iterable[str]) -> list[Recipe]:
        wanted = list(tags)
        return self._recipes.filter(lambda r: matches_any_tag(r, wanted))

    def search(self, query: str) -> list[Recipe]:
        return self._recipes.filter(lambda r: matches_query(r, query))

    def toggle_favorite(self, recipe_id: int) -> Recipe:
        # Read and write under one lock so concurrent toggles cannot cancel out.
        with self._recipes.lock:
            return super().toggle_favorite(recipe_id)

    def __len__(self) -> int:
        return len(self._recipes)


class InMemoryMealPlanRepository(MealPlanRepository):
    def __init__(self) -> None:
        self._plans: _InMemoryCollection[MealPlan] = _InMemoryCollection(
            MealPlan, MEAL_PLAN_FIELDS, MealPlanNotFoundError
        )

    def create(self, data: Mapping[str, Any]) -> MealPlan:
        plan = self._plans.create(data)
        logger.info(
            "Meal plan created: id=%s, date=%s, meal_type=%s, recipe_id=%s",
            plan.id,
            plan.date,
            plan.meal_type,
            plan.recipe_id,
        )
        return plan

    def find_all(self) -> list[MealPlan]:
        return self._plans.all()

    def find_by_id(self, plan_id: int) -> MealPlan:
        return self._plans.get(plan_id)

    def find_by_ids(self, plan_ids: Iterable[int]) -> list[MealPlan]:
        return self._plans.get_many(plan_ids)

    def find_by_date_range(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[MealPlan]:
        check_date_range(start, end)
        return self._plans.filter(lambda p: in_date_range(p, start, end))

    def update(self, plan_id: int, changes: Mapping[str, Any]) -> MealPlan:
        return self._plans.update(plan_id, changes)

    def delete(self, plan_id: int) -> MealPlan:
        plan = self._plans.delete(plan_id)
        logger.info("Meal plan deleted: id=%s", plan_id)
        return plan

    def __len__(self) -> int:
        return len(self._plans)


class InMemoryShoppingItemRepository(ShoppingItemRepository):
    def __init__(self) -> None:
        self._items: _InMemoryCollection[ShoppingItem] = _InMemoryCollection(
            ShoppingItem, SHOPPING_ITEM_FIELDS, ShoppingItemNotFoundError
        )

    def create(self, data: Mapping[str, Any]) -> ShoppingItem:
        item = self._items.create(data)
        logger.info("Shopping item created: id=%s, item=%s, category=%s", item.id, item.item, item.category)
        return item

    def find_all(self) -> list[ShoppingItem]:
        return self._items.all()

    def find_by_id(self, item_id: int) -> ShoppingItem:
        return self._items.get(item_id)

    def update(self, item_id: int, changes: Mapping[str, Any]) -> ShoppingItem:
        return self._items.update(item_id, changes)

    def delete(self, item_id: int) -> ShoppingItem:
        item = self._items.delete(item_id)
        logger.info("Shopping item deleted: id=%s", item_id)
        return item

    def toggle_checked(self, item_id: int) -> ShoppingItem:
        with self._items.lock:
            return super().toggle_checked(item_id)

    def __len__(self) -> int:
        return len(self._items)
