from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from rezepte.app.domain.models import Difficulty, Ingredient, InstructionStep

MAX_TAGS = 6

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")

_DIFFICULTY_ALIASES = {
    "easy": Difficulty.EASY,
    "einfach": Difficulty.EASY,
    "leicht": Difficulty.EASY,
    "medium": Difficulty.MEDIUM,
    "mittel": Difficulty.MEDIUM,
    "hard": Difficulty.HARD,
    "schwer": Difficulty.HARD,
    "schwierig": Difficulty.HARD,
}

PLACEHOLDER_TITLES = frozenset(
    {
        "untitled",
        "untitled recipe",
        "recipe",
        "unknown",
        "unknown recipe",
        "n/a",
        "rezept",
        "unbekannt",
        "unbekanntes rezept",
        "ohne titel",
    }
)


def to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        m = _LEADING_INT_RE.match(value)
        return int(m.group(1)) if m else None
    return None


def clean_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def is_placeholder_title(title: Optional[str]) -> bool:
    cleaned = clean_str(title)
    return cleaned is None or cleaned.lower() in PLACEHOLDER_TITLES


def normalize_difficulty(value: Any) -> Optional[Difficulty]:
    candidate = clean_str(value)
    if not candidate:
        return None
    return _DIFFICULTY_ALIASES.get(candidate.lower())


def sanitize_tags(value: Any, limit: int = MAX_TAGS) -> List[str]:
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        text = clean_str(item) if isinstance(item, str) else None
        if text and text not in out:
            out.append(text)
        if len(out) == limit:
            break
    return out


def format_amount(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return ""


def sanitize_ingredients(value: Any) -> List[Ingredient]:
    if not isinstance(value, list):
        return []
    items: List[Ingredient] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        item = clean_str(entry.get("item")) or clean_str(entry.get("name"))
        if not item:
            continue
        amount = entry.get("amount", entry.get("quantity"))
        unit = clean_str(entry.get("unit")) or ""
        items.append(Ingredient(amount=format_amount(amount), unit=unit, item=item))
    return items


def sanitize_instructions(value: Any) -> List[InstructionStep]:
    if not isinstance(value, list):
        return []
    ordered: List[tuple[int, int, str]] = []
    for position, entry in enumerate(value):
        if isinstance(entry, str):
            text, order = clean_str(entry), None
        elif isinstance(entry, dict):
            text = clean_str(entry.get("text")) or clean_str(entry.get("description"))
            order = to_int(entry.get("step", entry.get("order")))
        else:
            continue
        if not text:
            continue
        ordered.append((order if order is not None else position + 1, position, text))

    ordered.sort()
    return [InstructionStep(step=index, text=text) for index, (_, _, text) in enumerate(ordered, start=1)]


def normalize_recipe_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a recipe as returned by the extraction model onto Recipe fields.

    Unknown keys are dropped. ``title`` is None when the model gave no usable title.
    """
    return {
        "title": clean_str(data.get("title")),
        "description": clean_str(data.get("description")),
        "category": clean_str(data.get("category")),
        "tags": sanitize_tags(data.get("tags")),
        "prep_time": to_int(data.get("prepTime", data.get("prep_time"))),
        "cook_time": to_int(data.get("cookTime", data.get("cook_time"))),
        "servings": to_int(data.get("servings")),
        "difficulty": normalize_difficulty(data.get("difficulty")),
        "ingredients": sanitize_ingredients(data.get("ingredients")),
        "instructions": sanitize_instructions(data.get("instructions")),
    }
