# rezepte/app/services/shopping_list.py
"""
Shopping-list aggregation.

Consolidates the ingredient lines of several meal plans into one line per
(item, unit) pair. Grouping is exact and case-sensitive: no unit conversion,
no singular/plural folding.

Also groups the hand-edited shopping list by category.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from rezepte.app.domain.models import Ingredient, MealPlan, ShoppingItem, ShoppingList, ShoppingListLine

logger = logging.getLogger(__name__)


def parse_amount(raw: object) -> Optional[float]:
    """
    Parse an ingredient amount as a base-10 decimal.

    Returns None for missing, empty, non-numeric or non-finite values
    ("nan", "inf"). Locale formats such as "1,5" and fractions are not understood.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None

    return value if math.isfinite(value) else None


def aggregate_ingredients(plans: Iterable[MealPlan]) -> ShoppingList:
    """
    Sum ingredient amounts across meal plans, grouped by (item, unit).

    Lines come out in the order their key was first seen. Plans without an
    embedded recipe contribute nothing. Ingredients whose amount cannot be
    parsed are not summed; they are returned in ``ShoppingList.skipped``.
    """
    totals: dict[tuple[str, str], float] = {}
    skipped: list[Ingredient] = []

    for plan in plans:
        if plan.recipe is None:
            continue

        for ingredient in plan.recipe.ingredients:
            amount = parse_amount(ingredient.amount)
            if amount is None:
                logger.warning(
                    "Skipping ingredient with unparseable amount: plan=%s, item=%s, amount=%r",
                    plan.id,
                    ingredient.item,
                    ingredient.amount,
                )
                skipped.append(Ingredient(ingredient.amount, ingredient.unit, ingredient.item))
                continue

            key = (ingredient.item, ingredient.unit)
            totals[key] = totals.get(key, 0.0) + amount

    items = [
        ShoppingListLine(amount=amount, unit=unit, item=item)
        for (item, unit), amount in totals.items()
    ]
    return ShoppingList(items=items, skipped=skipped)


def group_by_category(items: Iterable[ShoppingItem]) -> dict[str, list[ShoppingItem]]:
    """Bucket hand-added items by category, categories in order of first appearance."""
    grouped: dict[str, list[ShoppingItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped
