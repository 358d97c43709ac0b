from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from rezepte.app.domain.errors import InvalidDateRangeError
from rezepte.app.domain.models import MealPlan, Recipe


def matches_category(recipe: Recipe, category: str) -> bool:
    return recipe.category == category


def matches_any_tag(recipe: Recipe, tags: Iterable[str]) -> bool:
    wanted = set(tags)
    return any(tag in wanted for tag in recipe.tags)


def matches_query(recipe: Recipe, query: str) -> bool:
    needle = query.lower()
    if needle in recipe.title.lower():
        return True
    if recipe.description and needle in recipe.description.lower():
        return True
    return any(needle in tag.lower() for tag in recipe.tags)


def check_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and start > end:
        raise InvalidDateRangeError(start, end)


def in_date_range(plan: MealPlan, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and plan.date < start:
        return False
    if end is not None and plan.date > end:
        return False
    return True
