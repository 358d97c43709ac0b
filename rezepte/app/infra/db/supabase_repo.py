from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client, create_client

from rezepte.app.config import settings
from rezepte.app.domain.errors import (
    MealPlanNotFoundError,
    RecipeNotFoundError,
    RepositoryError,
    ShoppingItemNotFoundError,
)
from rezepte.app.domain.models import (
    DEFAULT_SHOPPING_CATEGORY,
    Difficulty,
    Ingredient,
    InstructionStep,
    MealPlan,
    MealType,
    Recipe,
    RecipeSource,
    ShoppingItem,
)
from rezepte.app.infra.db.base import (
    MEAL_PLAN_FIELDS,
    RECIPE_FIELDS,
    SHOPPING_ITEM_FIELDS,
    MealPlanRepository,
    RecipeRepository,
    ShoppingItemRepository,
    pick_fields,
)
from rezepte.app.infra.db.filters import check_date_range, matches_any_tag, matches_query

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def _safe_int(value: object) -> int | None:
    return int(value) if value is not None else None


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return _to_json(asdict(value))
    if isinstance(value, dict):
        return {key: _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return value


def _row_to_recipe(row: Mapping[str, Any]) -> Recipe:
    source = row.get("source")
    return Recipe(
        id=int(row["id"]),
        title=str(row.get("title") or ""),
        description=row.get("description"),
        category=row.get("category"),
        tags=list(row.get("tags") or []),
        prep_time=_safe_int(row.get("prep_time")),
        cook_time=_safe_int(row.get("cook_time")),
        servings=_safe_int(row.get("servings")),
        difficulty=Difficulty(row["difficulty"]) if row.get("difficulty") else None,
        ingredients=[Ingredient(**item) for item in row.get("ingredients") or []],
        instructions=[InstructionStep(**item) for item in row.get("instructions") or []],
        favorite=bool(row.get("favorite")),
        image_url=row.get("image_url"),
        video_url=row.get("video_url"),
        source=RecipeSource(
            platform=source.get("platform"),
            url=source.get("url"),
            processed_at=_parse_datetime(source.get("processed_at")),
        ) if isinstance(source, dict) else None,
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _row_to_meal_plan(row: Mapping[str, Any]) -> MealPlan:
    snapshot = row.get("recipe")
    return MealPlan(
        id=int(row["id"]),
        date=_parse_date(row["date"]),
        meal_type=MealType(row["meal_type"]),
        recipe_id=_safe_int(row.get("recipe_id")),
        recipe=_row_to_recipe(snapshot) if isinstance(snapshot, dict) else None,
        notes=row.get("notes"),
        completed=bool(row.get("completed")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def create_supabase_client() -> Client:
    url = settings.SUPABASE_URL
    key = settings.SUPABASE_SERVICE_ROLE_KEY
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(str(url), key)


class _SupabaseTable:
    TABLE_NAME = ""

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()
        logger.info("%s initialized", type(self).__name__)

    def _table(self):
        return self._client.table(self.TABLE_NAME)

    def _run(self, operation: str, query) -> list[dict[str, Any]]:
        try:
            result = query.execute()
        except (PostgrestAPIError, httpx.HTTPError, ConnectionError, TimeoutError) as error:
            logger.error("Supabase error during %s on %s: %s", operation, self.TABLE_NAME, error)
            raise RepositoryError(operation, str(error)) from error
        return result.data or []

    def _insert(self, values: Mapping[str, Any]) -> dict[str, Any]:
        row = _to_json(dict(values))
        now = _now_utc().isoformat()
        row["created_at"] = now
        row["updated_at"] = now

        rows = self._run("create", self._table().insert(row))
        if not rows:
            raise RepositoryError("create", "insert returned no rows")
        return rows[0]

    def _update(self, record_id: int, values: Mapping[str, Any]) -> list[dict[str, Any]]:
        row = _to_json(dict(values))
        row["updated_at"] = _now_utc().isoformat()
        return self._run("update", self._table().update(row).eq("id", record_id))


class SupabaseRecipeRepository(_SupabaseTable, RecipeRepository):
    TABLE_NAME = "recipes"

    def create(self, data: Mapping[str, Any]) -> Recipe:
        recipe = _row_to_recipe(self._insert(pick_fields(data, RECIPE_FIELDS)))
        logger.info("Recipe created: id=%s, title=%s", recipe.id, recipe.title)
        return recipe

    def find_all(self) -> list[Recipe]:
        rows = self._run("find_all", self._table().select("*").order("id"))
        return [_row_to_recipe(row) for row in rows]

    def find_by_id(self, recipe_id: int) -> Recipe:
        rows = self._run("find_by_id", self._table().select("*").eq("id", recipe_id).limit(1))
        if not rows:
            raise RecipeNotFoundError(recipe_id)
        return _row_to_recipe(rows[0])

    def update(self, recipe_id: int, changes: Mapping[str, Any]) -> Recipe:
        rows = self._update(recipe_id, pick_fields(changes, RECIPE_FIELDS))
        if not rows:
            raise RecipeNotFoundError(recipe_id)
        return _row_to_recipe(rows[0])

    def delete(self, recipe_id: int) -> Recipe:
        rows = self._run("delete", self._table().delete().eq("id", recipe_id))
        if not rows:
            raise RecipeNotFoundError(recipe_id)
        logger.info("Recipe deleted: id=%s", recipe_id)
        return _row_to_recipe(rows[0])

    def find_by_category(self, category: str) -> list[Recipe]:
        rows = self._run(
            "find_by_category",
            self._table().select("*").eq("category", category).order("id"),
        )
        return [_row_to_recipe(row) for row in rows]

    # Tags live in a JSON column, so tag and text matching run on the fetched rows
    # with the same predicates as the in-memory store.
    def find_by_tags(self, tags: Iterable[str]) -> list[Recipe]:
        wanted = list(tags)
        return [r for r in self.find_all() if matches_any_tag(r, wanted)]

    def search(self, query: str) -> list[Recipe]:
        return [r for r in self.find_all() if matches_query(r, query)]


class SupabaseMealPlanRepository(_SupabaseTable, MealPlanRepository):
    TABLE_NAME = "meal_plans"

    def create(self, data: Mapping[str, Any]) -> MealPlan:
        plan = _row_to_meal_plan(self._insert(pick_fields(data, MEAL_PLAN_FIELDS)))
        logger.info("Meal plan created: id=%s, date=%s", plan.id, plan.date)
        return plan

    def find_all(self) -> list[MealPlan]:
        rows = self._run("find_all", self._table().select("*").order("id"))
        return [_row_to_meal_plan(row) for row in rows]

    def find_by_id(self, plan_id: int) -> MealPlan:
        rows = self._run("find_by_id", self._table().select("*").eq("id", plan_id).limit(1))
        if not rows:
            raise MealPlanNotFoundError(plan_id)
        return _row_to_meal_plan(rows[0])

    def find_by_ids(self, plan_ids: Iterable[int]) -> list[MealPlan]:
        ids = list(plan_ids)
        if not ids:
            return []
        rows = self._run("find_by_ids", self._table().select("*").in_("id", list(set(ids))))
        by_id = {int(row["id"]): _row_to_meal_plan(row) for row in rows}
        return [by_id[plan_id] for plan_id in ids if plan_id in by_id]

    def find_by_date_range(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[MealPlan]:
        check_date_range(start, end)
        query = self._table().select("*")
        if start is not None:
            query = query.gte("date", start.isoformat())
        if end is not None:
            query = query.lte("date", end.isoformat())
        rows = self._run("find_by_date_range", query.order("id"))
        return [_row_to_meal_plan(row) for row in rows]

    def update(self, plan_id: int, changes: Mapping[str, Any]) -> MealPlan:
        rows = self._update(plan_id, pick_fields(changes, MEAL_PLAN_FIELDS))
        if not rows:
            raise MealPlanNotFoundError(plan_id)
        return _row_to_meal_plan(rows[0])

    def delete(self, plan_id: int) -> MealPlan:
        rows = self._run("delete", self._table().delete().eq("id", plan_id))
        if not rows:
            raise MealPlanNotFoundError(plan_id)
        logger.info("Meal plan deleted: id=%s", plan_id)
        return _row_to_meal_plan(rows[0])


def _row_to_shopping_item(row: Mapping[str, Any]) -> ShoppingItem:
    return ShoppingItem(
        id=int(row["id"]),
        item=str(row.get("item") or ""),
        quantity=str(row.get("quantity") or ""),
        category=row.get("category") or DEFAULT_SHOPPING_CATEGORY,
        checked=bool(row.get("checked")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


class SupabaseShoppingItemRepository(_SupabaseTable, ShoppingItemRepository):
    TABLE_NAME = "shopping_items"

    def create(self, data: Mapping[str, Any]) -> ShoppingItem:
        item = _row_to_shopping_item(self._insert(pick_fields(data, SHOPPING_ITEM_FIELDS)))
        logger.info("Shopping item created: id=%s, item=%s", item.id, item.item)
        return item

    def find_all(self) -> list[ShoppingItem]:
        rows = self._run("find_all", self._table().select("*").order("id"))
        return [_row_to_shopping_item(row) for row in rows]

    def find_by_id(self, item_id: int) -> ShoppingItem:
        rows = self._run("find_by_id", self._table().select("*").eq("id", item_id).limit(1))
        if not rows:
            raise ShoppingItemNotFoundError(item_id)
        return _row_to_shopping_item(rows[0])

    def update(self, item_id: int, changes: Mapping[str, Any]) -> ShoppingItem:
        rows = self._update(item_id, pick_fields(changes, SHOPPING_ITEM_FIELDS))
        if not rows:
            raise ShoppingItemNotFoundError(item_id)
        return _row_to_shopping_item(rows[0])

    def delete(self, item_id: int) -> ShoppingItem:
        rows = self._run("delete", self._table().delete().eq("id", item_id))
        if not rows:
            raise ShoppingItemNotFoundError(item_id)
        logger.info("Shopping item deleted: id=%s", item_id)
        return _row_to_shopping_item(rows[0])
