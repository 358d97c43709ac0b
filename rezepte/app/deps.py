# rezepte/app/deps.py (stores live on app.state, exposed here as dependencies)

from __future__ import annotations

from fastapi import Depends, Request

from rezepte.app.infra.db.base import MealPlanRepository, RecipeRepository, ShoppingItemRepository
from rezepte.app.services.planner_service import PlannerService
from rezepte.services.video_import import VideoImportPipeline


def get_recipe_store(request: Request) -> RecipeRepository:
    return request.app.state.recipe_store


def get_meal_plan_store(request: Request) -> MealPlanRepository:
    return request.app.state.meal_plan_store


def get_shopping_item_store(request: Request) -> ShoppingItemRepository:
    return request.app.state.shopping_item_store


def get_planner_service(
    recipes: RecipeRepository = Depends(get_recipe_store),
    plans: MealPlanRepository = Depends(get_meal_plan_store),
) -> PlannerService:
    return PlannerService(recipes, plans)


def get_video_import_pipeline(request: Request) -> VideoImportPipeline:
    """
    The pipeline is built once per app (it holds the lazily loaded speech model
    and the Gemini client) and persists into the app's recipe store.
    """
    pipeline = getattr(request.app.state, "video_pipeline", None)
    if pipeline is None:
        pipeline = VideoImportPipeline(recipes=request.app.state.recipe_store)
        request.app.state.video_pipeline = pipeline
    return pipeline
