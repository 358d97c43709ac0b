# rezepte/app/routers/shopping_items.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from rezepte.app.deps import get_shopping_item_store
from rezepte.app.infra.db.base import ShoppingItemRepository
from rezepte.app.schemas.recipes import MessageResponse
from rezepte.app.schemas.shopping_items import (
    ShoppingItemCreate,
    ShoppingItemGroup,
    ShoppingItemResponse,
)
from rezepte.app.services.shopping_list import group_by_category

router = APIRouter(prefix="/planner/shopping-items", tags=["shopping"])


@router.get("", response_model=list[ShoppingItemResponse])
def list_shopping_items(
    store: ShoppingItemRepository = Depends(get_shopping_item_store),
) -> list[ShoppingItemResponse]:
    return [ShoppingItemResponse.from_domain(item) for item in store.find_all()]


@router.get("/by-category", response_model=list[ShoppingItemGroup])
def list_shopping_items_by_category(
    store: ShoppingItemRepository = Depends(get_shopping_item_store),
) -> list[ShoppingItemGroup]:
    return [
        ShoppingItemGroup(
            category=category,
            items=[ShoppingItemResponse.from_domain(item) for item in items],
        )
        for category, items in group_by_category(store.find_all()).items()
    ]


@router.post("", response_model=ShoppingItemResponse, status_code=status.HTTP_201_CREATED)
def add_shopping_item(
    payload: ShoppingItemCreate,
    store: ShoppingItemRepository = Depends(get_shopping_item_store),
) -> ShoppingItemResponse:
    return ShoppingItemResponse.from_domain(store.create(payload.to_fields()))


@router.patch("/{item_id}/toggle", response_model=ShoppingItemResponse)
def toggle_shopping_item(
    item_id: int,
    store: ShoppingItemRepository = Depends(get_shopping_item_store),
) -> ShoppingItemResponse:
    return ShoppingItemResponse.from_domain(store.toggle_checked(item_id))


@router.delete("/{item_id}", response_model=MessageResponse)
def delete_shopping_item(
    item_id: int,
    store: ShoppingItemRepository = Depends(get_shopping_item_store),
) -> MessageResponse:
    store.delete(item_id)
    return MessageResponse(message="Item deleted successfully")
