from __future__ import annotations

import logging
from datetime import date

import pytest

from rezepte.app.domain.models import Ingredient, MealPlan, MealType, Recipe, ShoppingItem, ShoppingListLine
from rezepte.app.services.shopping_list import aggregate_ingredients, group_by_category, parse_amount


def make_plan(plan_id: int, *ingredients: tuple[str, str, str]) -> MealPlan:
    recipe = Recipe(
        id=plan_id * 10,
        title=f"Recipe {plan_id}",
        ingredients=[Ingredient(amount=a, unit=u, item=i) for a, u, i in ingredients],
    )
    return MealPlan(
        id=plan_id,
        date=date(2024, 5, plan_id),
        meal_type=MealType.DINNER,
        recipe_id=recipe.id,
        recipe=recipe,
    )


class TestParseAmount:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("200", 200.0), (" 0.5 ", 0.5), ("1e2", 100.0), (3, 3.0), (2.5, 2.5), ("-1", -1.0)],
    )
    def test_parses_decimals(self, raw: object, expected: float) -> None:
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "a pinch", "1,5", "1/2", "nan", "inf", "-inf", True])
    def test_rejects_unusable_amounts(self, raw: object) -> None:
        assert parse_amount(raw) is None


class TestAggregateIngredients:
    def test_sums_same_item_and_unit_across_plans(self) -> None:
        plans = [make_plan(1, ("200", "g", "Flour")), make_plan(2, ("200", "g", "Flour"))]

        result = aggregate_ingredients(plans)

        assert result.items == [ShoppingListLine(amount=400.0, unit="g", item="Flour")]
        assert result.total_items == 1
        assert result.skipped == []

    def test_different_units_stay_separate(self) -> None:
        plans = [make_plan(1, ("200", "g", "Flour")), make_plan(2, ("1", "kg", "Flour"))]

        result = aggregate_ingredients(plans)

        assert [(line.item, line.unit, line.amount) for line in result.items] == [
            ("Flour", "g", 200.0),
            ("Flour", "kg", 1.0),
        ]

    def test_grouping_is_case_sensitive(self) -> None:
        result = aggregate_ingredients([make_plan(1, ("1", "", "Egg"), ("2", "", "egg"))])
        assert result.total_items == 2

    def test_lines_follow_first_encounter_order(self) -> None:
        plans = [
            make_plan(1, ("1", "", "Onion"), ("100", "g", "Butter")),
            make_plan(2, ("50", "g", "Butter"), ("2", "", "Carrot"), ("1", "", "Onion")),
        ]

        result = aggregate_ingredients(plans)

        assert [(line.item, line.amount) for line in result.items] == [
            ("Onion", 2.0),
            ("Butter", 150.0),
            ("Carrot", 2.0),
        ]

    def test_empty_input_gives_empty_result(self) -> None:
        result = aggregate_ingredients([])
        assert result.items == []
        assert result.skipped == []
        assert result.total_items == 0

    def test_plan_without_recipe_contributes_nothing(self) -> None:
        empty = MealPlan(id=3, date=date(2024, 5, 3), meal_type=MealType.LUNCH)

        result = aggregate_ingredients([empty, make_plan(1, ("2", "", "Eggs"))])

        assert [line.item for line in result.items] == ["Eggs"]

    def test_unparseable_amounts_are_skipped_and_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        plans = [make_plan(1, ("", "", "Salt"), ("a pinch", "", "Pepper"), ("nan", "g", "Sugar"), ("3", "", "Eggs"))]

        with caplog.at_level(logging.WARNING):
            result = aggregate_ingredients(plans)

        assert [line.item for line in result.items] == ["Eggs"]
        assert [i.item for i in result.skipped] == ["Salt", "Pepper", "Sugar"]
        assert "unparseable amount" in caplog.text

    def test_same_plan_listed_twice_is_counted_twice(self) -> None:
        plan = make_plan(1, ("100", "g", "Rice"))

        result = aggregate_ingredients([plan, plan])

        assert result.items[0].amount == 200.0

    def test_line_count_never_exceeds_ingredient_count(self) -> None:
        plans = [make_plan(1, ("1", "", "A"), ("1", "", "B")), make_plan(2, ("1", "", "A"))]

        result = aggregate_ingredients(plans)

        assert result.total_items <= 3

    def test_idempotent(self) -> None:
        plans = [make_plan(1, ("200", "g", "Flour"), ("1", "", "Egg")), make_plan(2, ("0.5", "l", "Milk"))]

        assert aggregate_ingredients(plans) == aggregate_ingredients(plans)

    def test_does_not_mutate_input(self) -> None:
        plans = [make_plan(1, ("200", "g", "Flour"))]

        aggregate_ingredients(plans)

        assert plans[0].recipe.ingredients == [Ingredient("200", "g", "Flour")]


class TestGroupByCategory:
    def test_categories_in_first_seen_order(self) -> None:
        items = [
            ShoppingItem(id=1, item="Milch", category="Dairy"),
            ShoppingItem(id=2, item="Äpfel", category="Fruits"),
            ShoppingItem(id=3, item="Quark", category="Dairy"),
            ShoppingItem(id=4, item="Alufolie"),
        ]

        grouped = group_by_category(items)

        assert list(grouped) == ["Dairy", "Fruits", "Other"]
        assert [i.id for i in grouped["Dairy"]] == [1, 3]

    def test_empty(self) -> None:
        assert group_by_category([]) == {}
