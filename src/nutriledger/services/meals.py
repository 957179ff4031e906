"""Meal logging service."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID

from nutriledger.domain.catalog import SCALABLE_FIELDS, ServingStatus
from nutriledger.domain.meals import (
    DailySummary,
    Meal,
    MealEvent,
    MealItem,
    MealState,
    MealType,
    NewMealItem,
    QuickAdd,
    transition,
)
from nutriledger.errors import ConflictError, NotFoundError, ValidationError
from nutriledger.services.calculator import daily_totals
from nutriledger.services.goals import GoalTimeline
from nutriledger.services.locks import UserLocks
from nutriledger.services.progress import evaluate_progress
from nutriledger.services.servings import CatalogRepository

_logger = logging.getLogger(__name__)

_MEAL_TYPE_ORDER = {meal_type: index for index, meal_type in enumerate(MealType)}
_ITEM_PATCH_FIELDS = {"quantity", "notes", "is_estimated"}


class MealRepository(Protocol):
    """Persistence interface for meals and their items."""

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal with its items, if present."""

    def find_meal(self, user_id: UUID, on: date, meal_type: MealType) -> Meal | None:
        """Return the meal for a (user, date, meal type) slot, if present."""

    def list_meals(
        self,
        user_id: UUID,
        date_from: date | None,
        date_to: date | None,
        meal_type: MealType | None,
    ) -> list[Meal]:
        """Return meals in an inclusive date range, newest first."""

    def create_meal(
        self,
        user_id: UUID,
        on: date,
        meal_type: MealType,
        notes: str | None,
        items: list[NewMealItem],
    ) -> Meal:
        """Create a meal together with its first items."""

    def add_item(self, meal_id: UUID, item: NewMealItem) -> MealItem:
        """Add an item to an existing meal."""

    def get_item(self, item_id: UUID) -> MealItem | None:
        """Return a meal item by id, if present."""

    def update_item(self, item_id: UUID, payload: dict[str, object]) -> None:
        """Patch a meal item."""

    def update_meal_notes(self, meal_id: UUID, notes: str | None) -> None:
        """Replace a meal's notes."""

    def delete_item(self, item_id: UUID) -> None:
        """Remove a single item."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Remove a meal and all of its items."""

    def list_entry_dates(
        self, user_id: UUID, date_from: date, date_to: date
    ) -> list[date]:
        """Return dates in the inclusive range that have meals."""


@dataclass
class MealService:
    """Logs meal items and keeps each meal alive only while it has items."""

    repository: MealRepository
    catalog: CatalogRepository
    goals: GoalTimeline
    locks: UserLocks = field(default_factory=UserLocks)

    def list_meals(
        self,
        user_id: UUID,
        on: date | None = None,
        meal_type: MealType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Meal]:
        """List meals for a day or a date range."""
        if on is not None and (date_from is not None or date_to is not None):
            raise ValidationError("Use either date or dateFrom/dateTo, not both")
        if on is not None:
            date_from = date_to = on
        if date_from and date_to and date_from > date_to:
            raise ValidationError("dateFrom must not be after dateTo")
        meals = self.repository.list_meals(user_id, date_from, date_to, meal_type)
        return _visible(meals)

    def get_meal(self, user_id: UUID, meal_id: UUID) -> Meal:
        """Return a meal owned by the user."""
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.user_id != user_id or not meal.items:
            raise NotFoundError(f"Meal with ID {meal_id} not found")
        return meal

    def create_meal(
        self,
        user_id: UUID,
        on: date,
        meal_type: MealType,
        items: list[NewMealItem],
        notes: str | None = None,
    ) -> Meal:
        """Create a meal with its first items."""
        if not items:
            raise ValidationError("A meal needs at least one item")
        self._validate_items(items)
        with self.locks.hold(user_id):
            if self.repository.find_meal(user_id, on, meal_type) is not None:
                raise ConflictError(
                    f"Meal already exists for {meal_type} on {on.isoformat()}"
                )
            return self.repository.create_meal(user_id, on, meal_type, notes, items)

    def log_item(
        self, user_id: UUID, on: date, meal_type: MealType, item: NewMealItem
    ) -> Meal:
        """Add an item to a slot, creating the slot's meal when absent."""
        self._validate_items([item])
        with self.locks.hold(user_id):
            meal = self.repository.find_meal(user_id, on, meal_type)
            if meal is None:
                _logger.info(
                    "Creating %s meal on %s for user %s", meal_type, on, user_id
                )
                return self.repository.create_meal(
                    user_id, on, meal_type, None, [item]
                )
            self.repository.add_item(meal.id, item)
            return self.get_meal(user_id, meal.id)

    def add_item(self, user_id: UUID, meal_id: UUID, item: NewMealItem) -> Meal:
        """Add an item to an existing meal."""
        self._validate_items([item])
        with self.locks.hold(user_id):
            meal = self.get_meal(user_id, meal_id)
            self.repository.add_item(meal.id, item)
            return self.get_meal(user_id, meal_id)

    def update_meal_notes(
        self, user_id: UUID, meal_id: UUID, notes: str | None
    ) -> Meal:
        """Replace a meal's notes."""
        with self.locks.hold(user_id):
            self.get_meal(user_id, meal_id)
            self.repository.update_meal_notes(meal_id, notes)
            return self.get_meal(user_id, meal_id)

    def update_item(
        self, user_id: UUID, item_id: UUID, patch: dict[str, object]
    ) -> Meal:
        """Patch an item's quantity, notes or estimated flag."""
        payload = {k: v for k, v in patch.items() if k in _ITEM_PATCH_FIELDS}
        for key in ("quantity", "is_estimated"):
            if payload.get(key) is None:
                payload.pop(key, None)
        quantity = payload.get("quantity", 0)
        if not isinstance(quantity, int | float) or quantity < 0:
            raise ValidationError("Quantity must be zero or more")
        with self.locks.hold(user_id):
            item, meal = self._get_owned_item(user_id, item_id)
            if payload:
                self.repository.update_item(item.id, payload)
            return self.get_meal(user_id, meal.id)

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        """Delete an item; the meal goes with its last item."""
        with self.locks.hold(user_id):
            item, meal = self._get_owned_item(user_id, item_id)
            remaining = len(meal.items) - 1
            state = transition(MealState.PRESENT, MealEvent.ITEM_REMOVED, remaining)
            if state is MealState.ABSENT:
                self.repository.delete_meal(meal.id)
                _logger.info("Deleted empty meal %s for user %s", meal.id, user_id)
            else:
                self.repository.delete_item(item.id)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a meal and its items."""
        with self.locks.hold(user_id):
            meal = self.get_meal(user_id, meal_id)
            self.repository.delete_meal(meal.id)

    def get_daily_summary(self, user_id: UUID, on: date) -> DailySummary:
        """Return a day's meals, totals and progress toward the active goal."""
        meals = sorted(
            self.list_meals(user_id, on=on),
            key=lambda meal: _MEAL_TYPE_ORDER[meal.meal_type],
        )
        totals = daily_totals(meals)
        active = self.goals.get_active_on(user_id, on)
        progress = evaluate_progress(totals, active.goal if active else None)
        return DailySummary(date=on, meals=meals, totals=totals, goal_progress=progress)

    def get_dates_with_entries(
        self, user_id: UUID, date_from: date, date_to: date
    ) -> list[date]:
        """Return the sorted days in range that have at least one meal."""
        if date_from > date_to:
            raise ValidationError("from must not be after to")
        dates = self.repository.list_entry_dates(user_id, date_from, date_to)
        return sorted(set(dates))

    def quick_add(self, user_id: UUID, request: QuickAdd) -> Meal:
        """Create (or reuse) a food, add a serving for review and log it."""
        if request.serving_size < 0:
            raise ValidationError("Serving size must be zero or more")
        if request.quantity < 0:
            raise ValidationError("Quantity must be zero or more")
        food = self.catalog.find_food(
            request.food_name, request.food_brand, request.food_variant
        )
        if food is None:
            food = self.catalog.create_food(
                request.food_name, request.food_brand, request.food_variant
            )
        nutrition = {
            name: value
            for name, value in request.nutrition.items()
            if name in SCALABLE_FIELDS and value is not None
        }
        serving = self.catalog.create_serving(
            food.id,
            {
                "size": request.serving_size,
                "unit": request.serving_unit,
                "status": ServingStatus.NEEDS_REVIEW.value,
                **nutrition,
            },
        )
        item = NewMealItem(
            food_id=food.id,
            serving_id=serving.id,
            quantity=request.quantity,
            notes=request.notes,
        )
        return self.log_item(user_id, request.date, request.meal_type, item)

    def _get_owned_item(self, user_id: UUID, item_id: UUID) -> tuple[MealItem, Meal]:
        item = self.repository.get_item(item_id)
        meal = self.repository.get_meal(item.meal_id) if item else None
        if item is None or meal is None or meal.user_id != user_id:
            raise NotFoundError(f"Meal item with ID {item_id} not found")
        return item, meal

    def _validate_items(self, items: list[NewMealItem]) -> None:
        for item in items:
            if item.quantity < 0:
                raise ValidationError("Quantity must be zero or more")
            if self.catalog.get_food(item.food_id) is None:
                raise ValidationError(f"Food with ID {item.food_id} not found")
            serving = self.catalog.get_serving(item.serving_id)
            if serving is None:
                raise ValidationError(f"Serving with ID {item.serving_id} not found")
            if serving.food_id != item.food_id:
                raise ValidationError(
                    f"Serving {item.serving_id} does not belong to food {item.food_id}"
                )


def _visible(meals: list[Meal]) -> list[Meal]:
    return [meal for meal in meals if meal.items]
