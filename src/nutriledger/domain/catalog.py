"""Domain models for the food catalog."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

SCALABLE_FIELDS = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "saturated_fat",
    "trans_fat",
    "fiber",
    "sugar",
    "sodium",
    "cholesterol",
)


class ServingStatus(StrEnum):
    """Review state of a serving's nutrition data."""

    NEEDS_REVIEW = "NEEDS_REVIEW"
    VERIFIED = "VERIFIED"


@dataclass(frozen=True)
class Food:
    """Represents a food in the catalog."""

    id: UUID
    name: str
    brand: str | None = None
    variant: str | None = None


@dataclass(frozen=True)
class Serving:
    """Per-serving nutrition for one size and unit of a food."""

    id: UUID
    food_id: UUID
    size: float
    unit: str
    name: str | None = None
    is_default: bool = False
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    trans_fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    cholesterol: float | None = None
    status: ServingStatus = ServingStatus.NEEDS_REVIEW
    data_source: str | None = None
    updated_at: datetime | None = None
