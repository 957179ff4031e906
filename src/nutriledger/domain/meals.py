"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from nutriledger.domain.catalog import Food, Serving


class MealType(StrEnum):
    """Slot of the day a meal is logged to."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"


class MealState(StrEnum):
    """Presence of a meal for one (user, date, meal type) slot."""

    ABSENT = "absent"
    PRESENT = "present"


class MealEvent(StrEnum):
    """Item mutations that can move a slot between states."""

    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"


def transition(state: MealState, event: MealEvent, remaining_items: int) -> MealState:
    """Return the slot state after ``event``.

    ``remaining_items`` is the item count once the event has been applied.
    A present meal with zero items is not a reachable state.
    """
    if event is MealEvent.ITEM_ADDED:
        return MealState.PRESENT
    if state is MealState.ABSENT:
        raise ValueError("Cannot remove an item from an absent meal")
    if remaining_items >= 1:
        return MealState.PRESENT
    return MealState.ABSENT


@dataclass(frozen=True)
class MealItem:
    """Logged quantity of a serving; nutrition is derived at read time."""

    id: UUID
    meal_id: UUID
    food_id: UUID
    serving_id: UUID
    quantity: float
    food: Food
    serving: Serving
    notes: str | None = None
    is_estimated: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class Meal:
    """Meal for one (user, date, meal type) slot."""

    id: UUID
    user_id: UUID
    date: date
    meal_type: MealType
    items: list[MealItem] = field(default_factory=list)
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class NewMealItem:
    """Item payload to log against a meal."""

    food_id: UUID
    serving_id: UUID
    quantity: float = 1.0
    notes: str | None = None
    is_estimated: bool = False


@dataclass(frozen=True)
class QuickAdd:
    """Create a food and serving and log it in one call."""

    food_name: str
    serving_size: float
    serving_unit: str
    meal_type: MealType
    date: date
    food_brand: str | None = None
    food_variant: str | None = None
    quantity: float = 1.0
    notes: str | None = None
    nutrition: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ItemNutrition:
    """Nutrition of one item; ``None`` means unknown."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


@dataclass(frozen=True)
class NutritionTotals:
    """Summed macros; unknown values count as zero."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class MacroProgress:
    """Progress for one macro against its target."""

    target: float | None
    actual: float
    percentage: float | None


@dataclass(frozen=True)
class GoalProgress:
    """Progress for the tracked macros."""

    calories: MacroProgress
    protein: MacroProgress
    carbs: MacroProgress
    fat: MacroProgress


@dataclass(frozen=True)
class DailySummary:
    """Meals, totals and goal progress for one day."""

    date: date
    meals: list[Meal]
    totals: NutritionTotals
    goal_progress: GoalProgress | None
