# rezepte/app/schemas/recipes.py
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

from rezepte.app.domain.models import (
    Difficulty,
    Ingredient,
    InstructionStep,
    Recipe,
)

DifficultyValue = Literal["easy", "medium", "hard"]


def _unique_tags(value: list[str]) -> list[str]:
    cleaned = [tag.strip() for tag in value if tag and tag.strip()]
    return list(dict.fromkeys(cleaned))


TagList = Annotated[list[str], AfterValidator(_unique_tags)]

# camelCase request fields -> Recipe dataclass fields
_RECIPE_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "category": "category",
    "tags": "tags",
    "prepTime": "prep_time",
    "cookTime": "cook_time",
    "servings": "servings",
    "difficulty": "difficulty",
    "ingredients": "ingredients",
    "instructions": "instructions",
    "favorite": "favorite",
    "imageUrl": "image_url",
    "videoUrl": "video_url",
}


def _isoformat(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


class IngredientItem(BaseModel):
    amount: str = ""
    unit: str = ""
    item: str = Field(..., min_length=1)

    @field_validator("amount", "unit", "item", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    def to_domain(self) -> Ingredient:
        return Ingredient(amount=self.amount, unit=self.unit, item=self.item)


class InstructionItem(BaseModel):
    step: int = Field(..., ge=1)
    text: str = Field(..., min_length=1)

    def to_domain(self) -> InstructionStep:
        return InstructionStep(step=self.step, text=self.text)


def _to_recipe_fields(payload: BaseModel, only_set: bool) -> dict[str, Any]:
    """Rename request fields to Recipe attributes and convert nested items to domain types."""
    names = payload.model_fields_set if only_set else type(payload).model_fields.keys()
    out: dict[str, Any] = {}
    for key in names:
        name = _RECIPE_FIELD_MAP.get(key)
        if name is None:
            continue
        value = getattr(payload, key)
        if name in ("ingredients", "instructions"):
            value = [entry.to_domain() for entry in value or []]
        elif name == "difficulty" and value is not None:
            value = Difficulty(value)
        elif name == "tags" and value is None:
            value = []
        out[name] = value
    return out


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=80)
    tags: TagList = Field(default_factory=list)
    prepTime: Optional[int] = Field(default=None, ge=0)
    cookTime: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[DifficultyValue] = None
    ingredients: list[IngredientItem] = Field(default_factory=list)
    instructions: list[InstructionItem] = Field(default_factory=list)
    favorite: bool = False
    imageUrl: Optional[str] = None
    videoUrl: Optional[str] = None

    def to_fields(self) -> dict[str, Any]:
        return _to_recipe_fields(self, only_set=False)


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=80)
    tags: Optional[TagList] = None
    prepTime: Optional[int] = Field(default=None, ge=0)
    cookTime: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[DifficultyValue] = None
    ingredients: Optional[list[IngredientItem]] = None
    instructions: Optional[list[InstructionItem]] = None
    favorite: Optional[bool] = None
    imageUrl: Optional[str] = None
    videoUrl: Optional[str] = None

    @field_validator("title", "favorite")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value

    def to_fields(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return _to_recipe_fields(self, only_set=True)


class RecipeSourceResponse(BaseModel):
    platform: str
    url: Optional[str] = None
    processedAt: Optional[str] = None


class RecipeResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    prepTime: Optional[int] = None
    cookTime: Optional[int] = None
    totalTime: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[DifficultyValue] = None
    ingredients: list[IngredientItem] = Field(default_factory=list)
    instructions: list[InstructionItem] = Field(default_factory=list)
    favorite: bool = False
    imageUrl: Optional[str] = None
    videoUrl: Optional[str] = None
    source: Optional[RecipeSourceResponse] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipeResponse":
        source = None
        if recipe.source is not None:
            source = RecipeSourceResponse(
                platform=recipe.source.platform,
                url=recipe.source.url,
                processedAt=_isoformat(recipe.source.processed_at),
            )

        return cls(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            category=recipe.category,
            tags=list(recipe.tags),
            prepTime=recipe.prep_time,
            cookTime=recipe.cook_time,
            totalTime=recipe.total_time,
            servings=recipe.servings,
            difficulty=recipe.difficulty.value if recipe.difficulty else None,
            ingredients=[
                IngredientItem.model_construct(amount=i.amount, unit=i.unit, item=i.item)
                for i in recipe.ingredients
            ],
            instructions=[
                InstructionItem.model_construct(step=s.step, text=s.text) for s in recipe.instructions
            ],
            favorite=recipe.favorite,
            imageUrl=recipe.image_url,
            videoUrl=recipe.video_url,
            source=source,
            createdAt=_isoformat(recipe.created_at),
            updatedAt=_isoformat(recipe.updated_at),
        )


class MessageResponse(BaseModel):
    message: str
