# rezepte/app/main.py
from __future__ import annotations
import logging
import sys
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rezepte import __version__
from rezepte.app.config import settings
from rezepte.app.domain.errors import InvalidDateRangeError, NotFoundError, RepositoryError
from rezepte.app.infra.db.base import MealPlanRepository, RecipeRepository, ShoppingItemRepository
from rezepte.app.infra.db.memory_repo import (
    InMemoryMealPlanRepository,
    InMemoryRecipeRepository,
    InMemoryShoppingItemRepository,
)
from rezepte.app.routers.planner import router as planner_router
from rezepte.app.routers.recipes import router as recipes_router
from rezepte.app.routers.shopping_items import router as shopping_items_router
from rezepte.app.routers.videos import router as videos_router
from rezepte.services.errors import (
    FailureCategory,
    InvalidUploadError,
    InvalidURLError,
    UnsupportedPlatformError,
    VideoImportError,
)
from rezepte.services.video_import import VideoImportPipeline

# Plain stdout logging (fine for dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

log = logging.getLogger("app")

API_PREFIX = "/api"


def _error(status_code: int, message: str, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def build_stores() -> tuple[RecipeRepository, MealPlanRepository, ShoppingItemRepository]:
    if settings.STORE_BACKEND == "supabase":
        from rezepte.app.infra.db.supabase_repo import (
            SupabaseMealPlanRepository,
            SupabaseRecipeRepository,
            SupabaseShoppingItemRepository,
            create_supabase_client,
        )

        client = create_supabase_client()
        return (
            SupabaseRecipeRepository(client),
            SupabaseMealPlanRepository(client),
            SupabaseShoppingItemRepository(client),
        )
    return InMemoryRecipeRepository(), InMemoryMealPlanRepository(), InMemoryShoppingItemRepository()


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        return _error(400, "Invalid request", details)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, f"{exc.entity} not found")

    @app.exception_handler(InvalidDateRangeError)
    async def invalid_range(request: Request, exc: InvalidDateRangeError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(InvalidURLError)
    @app.exception_handler(UnsupportedPlatformError)
    @app.exception_handler(InvalidUploadError)
    async def invalid_video_input(request: Request, exc: Exception) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(VideoImportError)
    async def import_failed(request: Request, exc: VideoImportError) -> JSONResponse:
        if exc.rate_limited:
            status_code = 429
        elif exc.category == FailureCategory.GENERIC:
            status_code = 500
        else:
            status_code = 502
        return _error(status_code, exc.summary, {"category": exc.category.value, "hint": exc.hint})

    @app.exception_handler(RepositoryError)
    async def repository_error(request: Request, exc: RepositoryError) -> JSONResponse:
        log.error("repository error on %s %s: %s", request.method, request.url.path, exc)
        return _error(502, "Storage backend unavailable")

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal server error")


def create_app(
    recipe_store: Optional[RecipeRepository] = None,
    meal_plan_store: Optional[MealPlanRepository] = None,
    video_pipeline: Optional[VideoImportPipeline] = None,
    shopping_item_store: Optional[ShoppingItemRepository] = None,
) -> FastAPI:
    app = FastAPI(title="Rezepte API", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if recipe_store is None or meal_plan_store is None or shopping_item_store is None:
        default_recipes, default_plans, default_items = build_stores()
        if recipe_store is None:
            recipe_store = default_recipes
        if meal_plan_store is None:
            meal_plan_store = default_plans
        if shopping_item_store is None:
            shopping_item_store = default_items

    app.state.recipe_store = recipe_store
    app.state.meal_plan_store = meal_plan_store
    app.state.shopping_item_store = shopping_item_store
    app.state.video_pipeline = video_pipeline

    app.include_router(recipes_router, prefix=API_PREFIX)
    # before the planner router so "shopping-items" is not read as a plan id
    app.include_router(shopping_items_router, prefix=API_PREFIX)
    app.include_router(planner_router, prefix=API_PREFIX)
    app.include_router(videos_router, prefix=API_PREFIX)

    @app.get(f"{API_PREFIX}/health")
    def health():
        return {"status": "ok", "message": "Rezepte API is running"}

    register_error_handlers(app)
    log.info("app created: env=%s store=%s", settings.APP_ENV, type(recipe_store).__name__)
    return app


app = create_app()
