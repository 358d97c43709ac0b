from __future__ import annotations

from datetime import date


class RezepteError(Exception):
    pass


class NotFoundError(RezepteError):
    entity = "Record"

    def __init__(self, record_id: object):
        super().__init__(f"{self.entity} not found: {record_id}")
        self.record_id = record_id


class RecipeNotFoundError(NotFoundError):
    entity = "Recipe"


class MealPlanNotFoundError(NotFoundError):
    entity = "Meal plan"


class ShoppingItemNotFoundError(NotFoundError):
    entity = "Item"


class InvalidDateRangeError(RezepteError):
    def __init__(self, start: date, end: date):
        super().__init__(f"Start date {start.isoformat()} is after end date {end.isoformat()}")
        self.start = start
        self.end = end


class RepositoryError(RezepteError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
