# rezepte/app/routers/planner.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from rezepte.app.deps import get_meal_plan_store, get_planner_service
from rezepte.app.domain.models import MealType
from rezepte.app.infra.db.base import MealPlanRepository
from rezepte.app.schemas.planner import (
    MealPlanCreate,
    MealPlanResponse,
    MealPlanUpdate,
    ShoppingListRequest,
    ShoppingListResponse,
)
from rezepte.app.schemas.recipes import MessageResponse
from rezepte.app.services.planner_service import PlannerService

router = APIRouter(prefix="/planner", tags=["planner"])


@router.get("", response_model=list[MealPlanResponse])
def list_meal_plans(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    store: MealPlanRepository = Depends(get_meal_plan_store),
) -> list[MealPlanResponse]:
    if start_date is None and end_date is None:
        plans = store.find_all()
    else:
        plans = store.find_by_date_range(start_date, end_date)
    return [MealPlanResponse.from_domain(plan) for plan in plans]


# declared before "/{plan_id}" routes so the literal path is not read as an id
@router.post("/shopping-list", response_model=ShoppingListResponse)
def generate_shopping_list(
    body: ShoppingListRequest,
    planner: PlannerService = Depends(get_planner_service),
) -> ShoppingListResponse:
    return ShoppingListResponse.from_domain(planner.generate_shopping_list(body.planIds))


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_meal_plan(
    plan_id: int,
    store: MealPlanRepository = Depends(get_meal_plan_store),
) -> MealPlanResponse:
    return MealPlanResponse.from_domain(store.find_by_id(plan_id))


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def create_meal_plan(
    payload: MealPlanCreate,
    planner: PlannerService = Depends(get_planner_service),
) -> MealPlanResponse:
    plan = planner.create_plan(
        plan_date=payload.date,
        meal_type=MealType(payload.mealType),
        recipe_id=payload.recipeId,
        notes=payload.notes,
    )
    return MealPlanResponse.from_domain(plan)


@router.put("/{plan_id}", response_model=MealPlanResponse)
def update_meal_plan(
    plan_id: int,
    payload: MealPlanUpdate,
    planner: PlannerService = Depends(get_planner_service),
) -> MealPlanResponse:
    return MealPlanResponse.from_domain(planner.update_plan(plan_id, payload.to_changes()))


@router.delete("/{plan_id}", response_model=MessageResponse)
def delete_meal_plan(
    plan_id: int,
    store: MealPlanRepository = Depends(get_meal_plan_store),
) -> MessageResponse:
    store.delete(plan_id)
    return MessageResponse(message="Meal plan deleted successfully")
