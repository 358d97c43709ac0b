from __future__ import annotations

import pytest

from rezepte.app.domain.models import Difficulty, Ingredient, InstructionStep
from rezepte.services.normalize import (
    format_amount,
    is_placeholder_title,
    normalize_difficulty,
    normalize_recipe_fields,
    sanitize_ingredients,
    sanitize_instructions,
    sanitize_tags,
    to_int,
)


class TestToInt:
    @pytest.mark.parametrize(("raw", "expected"), [(15, 15), (12.7, 12), ("20 min", 20), (" 4", 4)])
    def test_converts(self, raw: object, expected: int) -> None:
        assert to_int(raw) == expected

    @pytest.mark.parametrize("raw", [None, True, "about ten", [], {}])
    def test_returns_none(self, raw: object) -> None:
        assert to_int(raw) is None


class TestDifficulty:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("easy", Difficulty.EASY),
            ("Einfach", Difficulty.EASY),
            ("mittel", Difficulty.MEDIUM),
            ("SCHWER", Difficulty.HARD),
            ("hard", Difficulty.HARD),
        ],
    )
    def test_maps_aliases(self, raw: str, expected: Difficulty) -> None:
        assert normalize_difficulty(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "impossible", 3])
    def test_unknown(self, raw: object) -> None:
        assert normalize_difficulty(raw) is None


class TestPlaceholderTitle:
    @pytest.mark.parametrize("title", [None, "", "  ", "Untitled", "unbekanntes Rezept", "Recipe"])
    def test_placeholders(self, title: str | None) -> None:
        assert is_placeholder_title(title) is True

    def test_real_title(self) -> None:
        assert is_placeholder_title("Käsespätzle") is False


class TestSanitizeTags:
    def test_dedupes_and_limits(self) -> None:
        raw = ["quick", " quick ", "vegan", 3, "", "a", "b", "c", "d", "e"]
        assert sanitize_tags(raw) == ["quick", "vegan", "a", "b", "c", "d"]

    def test_not_a_list(self) -> None:
        assert sanitize_tags("quick,vegan") == []


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(400.0, "400"), (0.5, "0.5"), (2, "2"), (" 200 ", "200"), (None, ""), (True, "")],
    )
    def test_formats(self, raw: object, expected: str) -> None:
        assert format_amount(raw) == expected


class TestSanitizeIngredients:
    def test_accepts_item_or_name_keys(self) -> None:
        raw = [
            {"amount": 400, "unit": "g", "item": "Mehl"},
            {"quantity": "2", "name": "Eier"},
            {"amount": "1", "unit": "TL"},
            "Salz",
        ]

        assert sanitize_ingredients(raw) == [
            Ingredient(amount="400", unit="g", item="Mehl"),
            Ingredient(amount="2", unit="", item="Eier"),
        ]


class TestSanitizeInstructions:
    def test_sorts_and_renumbers(self) -> None:
        raw = [
            {"step": 3, "text": "Bake"},
            {"step": 1, "text": "Mix"},
            {"step": 2, "text": "  "},
            "Serve",
        ]

        assert sanitize_instructions(raw) == [
            InstructionStep(step=1, text="Mix"),
            InstructionStep(step=2, text="Bake"),
            InstructionStep(step=3, text="Serve"),
        ]

    def test_plain_strings_keep_order(self) -> None:
        steps = sanitize_instructions(["Chop", "Fry"])
        assert [(s.step, s.text) for s in steps] == [(1, "Chop"), (2, "Fry")]


class TestNormalizeRecipeFields:
    def test_maps_model_output(self) -> None:
        fields = normalize_recipe_fields(
            {
                "title": " Käsespätzle ",
                "description": "Klassiker",
                "category": "Hauptgericht",
                "tags": ["deftig"],
                "prepTime": "20",
                "cookTime": 15,
                "servings": 4,
                "difficulty": "mittel",
                "ingredients": [{"amount": "400", "unit": "g", "item": "Mehl"}],
                "instructions": [{"step": 1, "text": "Teig anrühren"}],
                "extra": "ignored",
            }
        )

        assert fields == {
            "title": "Käsespätzle",
            "description": "Klassiker",
            "category": "Hauptgericht",
            "tags": ["deftig"],
            "prep_time": 20,
            "cook_time": 15,
            "servings": 4,
            "difficulty": Difficulty.MEDIUM,
            "ingredients": [Ingredient("400", "g", "Mehl")],
            "instructions": [InstructionStep(1, "Teig anrühren")],
        }

    def test_empty_output(self) -> None:
        fields = normalize_recipe_fields({})
        assert fields["title"] is None
        assert fields["ingredients"] == []
        assert fields["difficulty"] is None
