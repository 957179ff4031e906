"""Domain models for nutrition goals."""

from dataclasses import asdict, dataclass, fields, replace
from datetime import date, datetime
from uuid import UUID

TARGET_FIELDS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")


@dataclass(frozen=True)
class GoalTargets:
    """Daily targets; ``None`` means the macro is not tracked."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None

    def has_any(self) -> bool:
        """Return True when at least one target is set."""
        return any(getattr(self, name) is not None for name in TARGET_FIELDS)

    def negative_fields(self) -> list[str]:
        """Return the names of targets below zero."""
        return [
            name
            for name in TARGET_FIELDS
            if getattr(self, name) is not None and getattr(self, name) < 0
        ]

    def merged(self, patch: dict[str, float | None]) -> "GoalTargets":
        """Return targets with the patched fields replaced."""
        known = {field.name for field in fields(self)}
        return replace(self, **{k: v for k, v in patch.items() if k in known})

    def as_dict(self) -> dict[str, float | None]:
        return asdict(self)


@dataclass(frozen=True)
class NutritionGoal:
    """A target interval ``[start_date, end_date)`` for one user."""

    id: UUID
    user_id: UUID
    targets: GoalTargets
    start_date: date
    end_date: date | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def is_active_on(self, on: date) -> bool:
        """Return True when ``on`` falls inside the goal interval."""
        if self.start_date > on:
            return False
        return self.end_date is None or self.end_date > on


@dataclass(frozen=True)
class GoalView:
    """Goal with the derived latest flag."""

    goal: NutritionGoal
    is_latest: bool
