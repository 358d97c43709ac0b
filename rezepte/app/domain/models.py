# rezepte/app/domain/models.py
"""
Domain models for recipes, meal plans and shopping lists.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class Platform(str, Enum):
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    UPLOAD = "upload"


@dataclass
class Ingredient:
    """One ingredient line. The amount is kept as the decimal string it was entered as."""
    amount: str
    unit: str
    item: str


@dataclass
class InstructionStep:
    step: int
    text: str


@dataclass
class RecipeSource:
    """Provenance of an imported recipe."""
    platform: str
    url: Optional[str] = None
    processed_at: Optional[datetime] = None


@dataclass
class Recipe:
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: list[str] = field(default_factory=list)

    prep_time: Optional[int] = None  # minutes
    cook_time: Optional[int] = None  # minutes
    servings: Optional[int] = None
    difficulty: Optional[Difficulty] = None

    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[InstructionStep] = field(default_factory=list)

    favorite: bool = False
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    source: Optional[RecipeSource] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_time(self) -> Optional[int]:
        if self.prep_time is None and self.cook_time is None:
            return None
        return (self.prep_time or 0) + (self.cook_time or 0)


@dataclass
class MealPlan:
    """
    A recipe (optional) assigned to a date and a meal slot.

    ``recipe`` is a point-in-time snapshot taken when the recipe was assigned.
    Later edits to the recipe are not reflected here.
    """
    id: int
    date: date
    meal_type: MealType
    recipe_id: Optional[int] = None
    recipe: Optional[Recipe] = None
    notes: Optional[str] = None
    completed: bool = False

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ShoppingListLine:
    amount: float
    unit: str
    item: str


@dataclass
class ShoppingList:
    """Result of aggregating the ingredients of several meal plans."""
    items: list[ShoppingListLine] = field(default_factory=list)
    skipped: list[Ingredient] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return len(self.items)


DEFAULT_SHOPPING_CATEGORY = "Other"


@dataclass
class ShoppingItem:
    """A hand-added entry on the persistent shopping list."""
    id: int
    item: str
    quantity: str = ""
    category: str = DEFAULT_SHOPPING_CATEGORY
    checked: bool = False

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class VideoInfo:
    """Metadata collected about a processed video."""
    platform: str
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    duration_sec: Optional[float] = None
    thumbnail_url: Optional[str] = None
    filename: Optional[str] = None


@dataclass
class ImportResult:
    video_info: VideoInfo
    transcript: str
    recipe: Recipe
