from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import httpx
import pytest

from rezepte.app.domain.errors import (
    InvalidDateRangeError,
    MealPlanNotFoundError,
    RecipeNotFoundError,
    RepositoryError,
    ShoppingItemNotFoundError,
)
from rezepte.app.domain.models import Difficulty, Ingredient, MealType, RecipeSource
from rezepte.app.infra.db.supabase_repo import (
    SupabaseMealPlanRepository,
    SupabaseRecipeRepository,
    SupabaseShoppingItemRepository,
    _to_json,
)

RECIPE_ROW = {
    "id": 3,
    "title": "Käsespätzle",
    "description": None,
    "category": "Hauptgericht",
    "tags": ["deftig", "vegetarisch"],
    "prep_time": 20,
    "cook_time": 15,
    "servings": 4,
    "difficulty": "easy",
    "ingredients": [{"amount": "400", "unit": "g", "item": "Mehl"}],
    "instructions": [{"step": 1, "text": "Teig anrühren"}],
    "favorite": False,
    "image_url": None,
    "video_url": "https://www.tiktok.com/@chef/video/1",
    "source": {"platform": "tiktok", "url": "https://www.tiktok.com/@chef/video/1", "processed_at": "2024-05-01T10:00:00Z"},
    "created_at": "2024-05-01T10:00:00+00:00",
    "updated_at": "2024-05-01T10:00:00+00:00",
}

PLAN_ROW = {
    "id": 8,
    "date": "2024-05-02",
    "meal_type": "dinner",
    "recipe_id": 3,
    "recipe": RECIPE_ROW,
    "notes": None,
    "completed": False,
    "created_at": "2024-05-01T11:00:00+00:00",
    "updated_at": "2024-05-01T11:00:00+00:00",
}


def result(rows: list[dict]) -> MagicMock:
    response = MagicMock()
    response.data = rows
    return response


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


class TestToJson:
    def test_serializes_domain_values(self) -> None:
        payload = _to_json(
            {
                "difficulty": Difficulty.HARD,
                "ingredients": [Ingredient("1", "", "Ei")],
                "source": RecipeSource(platform="upload"),
                "date": date(2024, 5, 2),
            }
        )

        assert payload == {
            "difficulty": "hard",
            "ingredients": [{"amount": "1", "unit": "", "item": "Ei"}],
            "source": {"platform": "upload", "url": None, "processed_at": None},
            "date": "2024-05-02",
        }


class TestSupabaseRecipeRepository:
    def test_find_by_id_maps_row(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = result([RECIPE_ROW])

        recipe = SupabaseRecipeRepository(client).find_by_id(3)

        client.table.assert_called_with("recipes")
        table.select.return_value.eq.assert_called_with("id", 3)
        assert recipe.title == "Käsespätzle"
        assert recipe.difficulty is Difficulty.EASY
        assert recipe.ingredients == [Ingredient("400", "g", "Mehl")]
        assert recipe.source.platform == "tiktok"
        assert recipe.source.processed_at.year == 2024

    def test_find_by_id_missing(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = result([])

        with pytest.raises(RecipeNotFoundError):
            SupabaseRecipeRepository(client).find_by_id(99)

    def test_create_serializes_and_stamps(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.insert.return_value.execute.return_value = result([RECIPE_ROW])

        SupabaseRecipeRepository(client).create(
            {"id": 50, "title": "Käsespätzle", "difficulty": Difficulty.EASY, "ingredients": [Ingredient("400", "g", "Mehl")]}
        )

        row = table.insert.call_args.args[0]
        assert "id" not in row
        assert row["difficulty"] == "easy"
        assert row["ingredients"] == [{"amount": "400", "unit": "g", "item": "Mehl"}]
        assert row["created_at"] == row["updated_at"]

    def test_delete_missing(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.delete.return_value.eq.return_value.execute.return_value = result([])

        with pytest.raises(RecipeNotFoundError):
            SupabaseRecipeRepository(client).delete(99)

    def test_search_filters_fetched_rows(self, client: MagicMock) -> None:
        other = dict(RECIPE_ROW, id=4, title="Tomatensuppe", tags=["suppe"])
        table = client.table.return_value
        table.select.return_value.order.return_value.execute.return_value = result([RECIPE_ROW, other])

        repo = SupabaseRecipeRepository(client)

        assert [r.id for r in repo.search("SUPPE")] == [4]
        assert [r.id for r in repo.find_by_tags(["vegetarisch"])] == [3]

    def test_network_error_becomes_repository_error(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.select.return_value.order.return_value.execute.side_effect = httpx.ConnectError("refused")

        with pytest.raises(RepositoryError) as exc_info:
            SupabaseRecipeRepository(client).find_all()
        assert exc_info.value.operation == "find_all"


class TestSupabaseMealPlanRepository:
    def test_find_by_id_restores_snapshot(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = result([PLAN_ROW])

        plan = SupabaseMealPlanRepository(client).find_by_id(8)

        client.table.assert_called_with("meal_plans")
        assert plan.date == date(2024, 5, 2)
        assert plan.meal_type is MealType.DINNER
        assert plan.recipe.title == "Käsespätzle"

    def test_find_by_ids_keeps_request_order(self, client: MagicMock) -> None:
        second = dict(PLAN_ROW, id=9)
        table = client.table.return_value
        table.select.return_value.in_.return_value.execute.return_value = result([PLAN_ROW, second])

        plans = SupabaseMealPlanRepository(client).find_by_ids([9, 100, 8])

        assert [p.id for p in plans] == [9, 8]

    def test_find_by_ids_empty_skips_query(self, client: MagicMock) -> None:
        assert SupabaseMealPlanRepository(client).find_by_ids([]) == []
        client.table.return_value.select.assert_not_called()

    def test_date_range_uses_inclusive_bounds(self, client: MagicMock) -> None:
        table = client.table.return_value
        query = table.select.return_value
        query.gte.return_value.lte.return_value.order.return_value.execute.return_value = result([PLAN_ROW])

        plans = SupabaseMealPlanRepository(client).find_by_date_range(date(2024, 5, 1), date(2024, 5, 7))

        query.gte.assert_called_with("date", "2024-05-01")
        query.gte.return_value.lte.assert_called_with("date", "2024-05-07")
        assert len(plans) == 1

    def test_inverted_range(self, client: MagicMock) -> None:
        with pytest.raises(InvalidDateRangeError):
            SupabaseMealPlanRepository(client).find_by_date_range(date(2024, 5, 7), date(2024, 5, 1))

    def test_update_missing(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = result([])

        with pytest.raises(MealPlanNotFoundError):
            SupabaseMealPlanRepository(client).update(5, {"notes": "x"})


ITEM_ROW = {
    "id": 2,
    "item": "Milch",
    "quantity": "1 l",
    "category": None,
    "checked": False,
    "created_at": "2024-05-01T12:00:00+00:00",
    "updated_at": "2024-05-01T12:00:00+00:00",
}


class TestSupabaseShoppingItemRepository:
    def test_toggle_writes_flipped_flag(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = result([ITEM_ROW])
        table.update.return_value.eq.return_value.execute.return_value = result([dict(ITEM_ROW, checked=True)])

        item = SupabaseShoppingItemRepository(client).toggle_checked(2)

        client.table.assert_called_with("shopping_items")
        assert table.update.call_args.args[0]["checked"] is True
        assert item.checked is True
        assert item.category == "Other"

    def test_toggle_missing(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = result([])

        with pytest.raises(ShoppingItemNotFoundError):
            SupabaseShoppingItemRepository(client).toggle_checked(99)
        table.update.assert_not_called()

    def test_delete_missing(self, client: MagicMock) -> None:
        table = client.table.return_value
        table.delete.return_value.eq.return_value.execute.return_value = result([])

        with pytest.raises(ShoppingItemNotFoundError):
            SupabaseShoppingItemRepository(client).delete(99)
