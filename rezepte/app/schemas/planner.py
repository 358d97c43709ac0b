# rezepte/app/schemas/planner.py
from __future__ import annotations

import datetime as dt
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from rezepte.app.domain.models import MealPlan, MealType, ShoppingList
from rezepte.app.schemas.recipes import IngredientItem, RecipeResponse

MealTypeValue = Literal["breakfast", "lunch", "dinner", "snack"]


class MealPlanCreate(BaseModel):
    date: dt.date
    mealType: MealTypeValue
    recipeId: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=500)


class MealPlanUpdate(BaseModel):
    date: Optional[dt.date] = None
    mealType: Optional[MealTypeValue] = None
    recipeId: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=500)
    completed: Optional[bool] = None

    @field_validator("date", "mealType", "completed")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value

    def to_changes(self) -> dict[str, Any]:
        """Fields the client sent, as MealPlan attributes. ``recipeId: null`` is kept."""
        names = {
            "date": "date",
            "mealType": "meal_type",
            "recipeId": "recipe_id",
            "notes": "notes",
            "completed": "completed",
        }
        changes: dict[str, Any] = {}
        for key in self.model_fields_set:
            value = getattr(self, key)
            if key == "mealType":
                value = MealType(value)
            changes[names[key]] = value
        return changes


class MealPlanResponse(BaseModel):
    id: int
    date: str
    mealType: MealTypeValue
    recipeId: Optional[int] = None
    recipe: Optional[RecipeResponse] = None
    notes: Optional[str] = None
    completed: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_domain(cls, plan: MealPlan) -> "MealPlanResponse":
        return cls(
            id=plan.id,
            date=plan.date.isoformat(),
            mealType=plan.meal_type.value,
            recipeId=plan.recipe_id,
            recipe=RecipeResponse.from_domain(plan.recipe) if plan.recipe else None,
            notes=plan.notes,
            completed=plan.completed,
            createdAt=plan.created_at.isoformat() if plan.created_at else None,
            updatedAt=plan.updated_at.isoformat() if plan.updated_at else None,
        )


class ShoppingListRequest(BaseModel):
    planIds: list[int]


class ShoppingListItem(BaseModel):
    item: str
    amount: float
    unit: str


class ShoppingListResponse(BaseModel):
    items: list[ShoppingListItem] = Field(default_factory=list)
    totalItems: int = 0
    skipped: list[IngredientItem] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, shopping_list: ShoppingList) -> "ShoppingListResponse":
        return cls(
            items=[
                ShoppingListItem(item=line.item, amount=line.amount, unit=line.unit)
                for line in shopping_list.items
            ],
            totalItems=shopping_list.total_items,
            skipped=[
                IngredientItem.model_construct(amount=i.amount, unit=i.unit, item=i.item)
                for i in shopping_list.skipped
            ],
        )
