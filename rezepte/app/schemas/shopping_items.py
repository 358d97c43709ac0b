# rezepte/app/schemas/shopping_items.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from rezepte.app.domain.models import DEFAULT_SHOPPING_CATEGORY, ShoppingItem


class ShoppingItemCreate(BaseModel):
    item: str = Field(..., min_length=1, max_length=200)
    quantity: str = Field(default="", max_length=100)
    category: str = Field(default=DEFAULT_SHOPPING_CATEGORY, max_length=50)

    @field_validator("item", "quantity", "category", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("category")
    @classmethod
    def _default_category(cls, value: str) -> str:
        return value or DEFAULT_SHOPPING_CATEGORY

    def to_fields(self) -> dict[str, Any]:
        return {"item": self.item, "quantity": self.quantity, "category": self.category}


class ShoppingItemResponse(BaseModel):
    id: int
    item: str
    quantity: str = ""
    category: str = DEFAULT_SHOPPING_CATEGORY
    checked: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_domain(cls, item: ShoppingItem) -> "ShoppingItemResponse":
        return cls(
            id=item.id,
            item=item.item,
            quantity=item.quantity,
            category=item.category,
            checked=item.checked,
            createdAt=item.created_at.isoformat() if item.created_at else None,
            updatedAt=item.updated_at.isoformat() if item.updated_at else None,
        )


class ShoppingItemGroup(BaseModel):
    category: str
    items: list[ShoppingItemResponse] = Field(default_factory=list)
