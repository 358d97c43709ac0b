# rezepte/app/routers/recipes.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from rezepte.app.deps import get_recipe_store
from rezepte.app.infra.db.base import RecipeRepository
from rezepte.app.schemas.recipes import (
    MessageResponse,
    RecipeCreate,
    RecipeResponse,
    RecipeUpdate,
)

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _split_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


@router.get("", response_model=list[RecipeResponse])
def list_recipes(
    category: Optional[str] = Query(default=None),
    tags: Optional[str] = Query(default=None, description="Comma-separated tags"),
    search: Optional[str] = Query(default=None),
    store: RecipeRepository = Depends(get_recipe_store),
) -> list[RecipeResponse]:
    # a single filter applies: search, then category, then tags
    if search:
        recipes = store.search(search)
    elif category:
        recipes = store.find_by_category(category)
    elif tags:
        recipes = store.find_by_tags(_split_tags(tags))
    else:
        recipes = store.find_all()
    return [RecipeResponse.from_domain(recipe) for recipe in recipes]


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: int,
    store: RecipeRepository = Depends(get_recipe_store),
) -> RecipeResponse:
    return RecipeResponse.from_domain(store.find_by_id(recipe_id))


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    store: RecipeRepository = Depends(get_recipe_store),
) -> RecipeResponse:
    return RecipeResponse.from_domain(store.create(payload.to_fields()))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: int,
    payload: RecipeUpdate,
    store: RecipeRepository = Depends(get_recipe_store),
) -> RecipeResponse:
    return RecipeResponse.from_domain(store.update(recipe_id, payload.to_fields()))


@router.patch("/{recipe_id}/favorite", response_model=RecipeResponse)
def toggle_favorite(
    recipe_id: int,
    store: RecipeRepository = Depends(get_recipe_store),
) -> RecipeResponse:
    return RecipeResponse.from_domain(store.toggle_favorite(recipe_id))


@router.delete("/{recipe_id}", response_model=MessageResponse)
def delete_recipe(
    recipe_id: int,
    store: RecipeRepository = Depends(get_recipe_store),
) -> MessageResponse:
    store.delete(recipe_id)
    return MessageResponse(message="Recipe deleted successfully")
