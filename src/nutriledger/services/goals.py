"""Versioned nutrition goals per user."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from nutriledger.domain.goals import GoalTargets, GoalView, NutritionGoal
from nutriledger.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from nutriledger.services.locks import UserLocks

_logger = logging.getLogger(__name__)


class GoalRepository(Protocol):
    """Persistence interface for nutrition goals."""

    def get_goal(self, goal_id: UUID) -> NutritionGoal | None:
        """Return a goal by id, if present."""

    def list_goals(self, user_id: UUID) -> list[NutritionGoal]:
        """Return all goals for a user, newest start date first."""

    def find_by_start_date(
        self, user_id: UUID, start_date: date
    ) -> NutritionGoal | None:
        """Return the user's goal starting on ``start_date``, if any."""

    def create_goal(
        self,
        user_id: UUID,
        targets: GoalTargets,
        start_date: date,
        end_date: date | None,
        close_goal_id: UUID | None = None,
    ) -> NutritionGoal:
        """Insert a goal and return it.

        When ``close_goal_id`` is given that goal is closed at ``start_date`` in
        the same unit of work; either both writes land or neither does.
        """

    def update_targets(self, goal_id: UUID, targets: GoalTargets) -> NutritionGoal:
        """Replace a goal's targets and return it."""

    def delete_goal(self, goal_id: UUID) -> None:
        """Remove a goal."""


def utc_today() -> date:
    return datetime.now(tz=UTC).date()


def normalize_date(value: date | datetime | str) -> date:
    """Reduce a date-like value to its UTC calendar day."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {value!r}") from exc
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    return value


@dataclass
class GoalTimeline:
    """Keeps each user's goals as ordered, non-overlapping intervals."""

    repository: GoalRepository
    locks: UserLocks = field(default_factory=UserLocks)
    today: Callable[[], date] = utc_today

    def get_active_on(
        self, user_id: UUID, on: date | datetime | str | None = None
    ) -> GoalView | None:
        """Return the goal whose interval contains ``on`` (default today)."""
        day = normalize_date(on) if on is not None else self.today()
        goals = self.repository.list_goals(user_id)
        active = next((goal for goal in goals if goal.is_active_on(day)), None)
        if active is None:
            return None
        return GoalView(goal=active, is_latest=_is_latest(active, goals))

    def list_goals(self, user_id: UUID) -> list[GoalView]:
        """Return all goals, newest first."""
        goals = _newest_first(self.repository.list_goals(user_id))
        return [
            GoalView(goal=goal, is_latest=index == 0)
            for index, goal in enumerate(goals)
        ]

    def create(
        self,
        user_id: UUID,
        targets: GoalTargets,
        start_date: date | datetime | str | None = None,
    ) -> GoalView:
        """Start a new goal, closing the goal that was active on its start day."""
        _validate_targets(targets)
        if not targets.has_any():
            raise ValidationError("At least one nutrition target must be set")
        start = normalize_date(start_date) if start_date is not None else self.today()

        with self.locks.hold(user_id):
            if self.repository.find_by_start_date(user_id, start) is not None:
                raise ConflictError(
                    f"A goal starting on {start.isoformat()} already exists"
                )
            goals = self.repository.list_goals(user_id)
            current = next((goal for goal in goals if goal.is_active_on(start)), None)
            later_starts = [g.start_date for g in goals if g.start_date > start]
            end = min(later_starts) if later_starts else None
            created = self.repository.create_goal(
                user_id,
                targets,
                start,
                end,
                close_goal_id=current.id if current is not None else None,
            )
            if current is not None:
                _logger.info(
                    "Closed goal %s for user %s at %s", current.id, user_id, start
                )
            _logger.info(
                "Created goal %s for user %s starting %s", created.id, user_id, start
            )
        return GoalView(goal=created, is_latest=end is None)

    def update(
        self, user_id: UUID, goal_id: UUID, patch: dict[str, float | None]
    ) -> GoalView:
        """Patch target values; start and end dates never change here."""
        goal = self._get_owned(user_id, goal_id)
        targets = goal.targets.merged(patch)
        _validate_targets(targets)
        updated = self.repository.update_targets(goal_id, targets)
        goals = self.repository.list_goals(user_id)
        return GoalView(goal=updated, is_latest=_is_latest(updated, goals))

    def delete(self, user_id: UUID, goal_id: UUID) -> None:
        """Delete the latest goal; past intervals are immutable history."""
        with self.locks.hold(user_id):
            goal = self._get_owned(user_id, goal_id)
            goals = self.repository.list_goals(user_id)
            if not goal.is_open or not _is_latest(goal, goals):
                raise ForbiddenError("Only the latest goal can be deleted")
            self.repository.delete_goal(goal_id)
            _logger.info("Deleted goal %s for user %s", goal_id, user_id)

    def _get_owned(self, user_id: UUID, goal_id: UUID) -> NutritionGoal:
        goal = self.repository.get_goal(goal_id)
        if goal is None or goal.user_id != user_id:
            raise NotFoundError(f"Goal with ID {goal_id} not found")
        return goal


def _validate_targets(targets: GoalTargets) -> None:
    negative = targets.negative_fields()
    if negative:
        raise ValidationError(f"Targets must not be negative: {', '.join(negative)}")


def _newest_first(goals: list[NutritionGoal]) -> list[NutritionGoal]:
    return sorted(goals, key=lambda goal: goal.start_date, reverse=True)


def _is_latest(goal: NutritionGoal, goals: list[NutritionGoal]) -> bool:
    if not goals:
        return True
    latest = max(goals, key=lambda candidate: candidate.start_date)
    return latest.id == goal.id
