"""Supabase repository for nutrition goals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from nutriledger.domain.goals import TARGET_FIELDS, GoalTargets, NutritionGoal
from nutriledger.errors import ConflictError
from nutriledger.services.goals import GoalRepository

_UNIQUE_VIOLATION = "23505"
_SERIALIZATION_FAILURE = "40001"
_TABLE = "nutrition_goals"
_CREATE_FUNCTION = "create_nutrition_goal"


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for nutrition goals."""

    client: Client

    def get_goal(self, goal_id: UUID) -> NutritionGoal | None:
        """Return a goal by id."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(goal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goal(response.data[0])

    def list_goals(self, user_id: UUID) -> list[NutritionGoal]:
        """Return a user's goals, newest start date first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("start_date", desc=True)
            .execute()
        )
        return [_parse_goal(row) for row in response.data or []]

    def find_by_start_date(
        self, user_id: UUID, start_date: date
    ) -> NutritionGoal | None:
        """Return the user's goal starting on a given day."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("start_date", start_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goal(response.data[0])

    def create_goal(
        self,
        user_id: UUID,
        targets: GoalTargets,
        start_date: date,
        end_date: date | None,
        close_goal_id: UUID | None = None,
    ) -> NutritionGoal:
        """Close the previous goal and insert the new one in one transaction.

        Runs the ``create_nutrition_goal`` database function, which takes a
        per-user advisory lock and rechecks the planned interval before
        writing. A plan made stale by another process is rejected as a
        conflict.
        """
        params = {
            "p_user_id": str(user_id),
            "p_start_date": start_date.isoformat(),
            "p_end_date": end_date.isoformat() if end_date else None,
            "p_close_goal_id": str(close_goal_id) if close_goal_id else None,
            **{
                f"p_{column}": value
                for column, value in _targets_payload(targets).items()
            },
        }
        try:
            response = self.client.rpc(_CREATE_FUNCTION, params).execute()
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise ConflictError(
                    f"A goal starting on {start_date.isoformat()} already exists"
                ) from exc
            if exc.code == _SERIALIZATION_FAILURE:
                raise ConflictError(
                    "Goals changed while creating this goal, try again"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create nutrition goal")
        return _parse_goal(response.data[0])

    def update_targets(self, goal_id: UUID, targets: GoalTargets) -> NutritionGoal:
        """Replace a goal's targets."""
        response = (
            self.client.table(_TABLE)
            .update(
                {
                    **_targets_payload(targets),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(goal_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update nutrition goal")
        return _parse_goal(response.data[0])

    def delete_goal(self, goal_id: UUID) -> None:
        """Delete a goal row."""
        self.client.table(_TABLE).delete().eq("id", str(goal_id)).execute()


def _targets_payload(targets: GoalTargets) -> dict[str, float | None]:
    return {f"{name}_target": getattr(targets, name) for name in TARGET_FIELDS}


def _parse_date(raw: object) -> date | None:
    if isinstance(raw, str) and raw:
        return date.fromisoformat(raw[:10])
    return None


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_goal(row: dict[str, object]) -> NutritionGoal:
    targets = GoalTargets(
        **{
            name: float(row[f"{name}_target"])
            if row.get(f"{name}_target") is not None
            else None
            for name in TARGET_FIELDS
        }
    )
    start_date = _parse_date(row.get("start_date"))
    if start_date is None:
        raise RuntimeError(f"Goal {row.get('id')} has no start date")
    return NutritionGoal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        targets=targets,
        start_date=start_date,
        end_date=_parse_date(row.get("end_date")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
