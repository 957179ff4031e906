"""Supabase repository for meals and meal items."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from nutriledger.adapters.supabase_catalog_repository import parse_food, parse_serving
from nutriledger.domain.meals import Meal, MealItem, MealType, NewMealItem
from nutriledger.services.meals import MealRepository

_MEAL_SELECT = "*, meal_items(*, food:foods(*), serving:servings(*))"
_ITEM_SELECT = "*, food:foods(*), serving:servings(*)"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals.

    Item rows cascade with their meal, so deleting a meal removes its items
    in one statement.
    """

    client: Client

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal with items."""
        response = (
            self.client.table("meals")
            .select(_MEAL_SELECT)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def find_meal(self, user_id: UUID, on: date, meal_type: MealType) -> Meal | None:
        """Return the meal for a slot."""
        response = (
            self.client.table("meals")
            .select(_MEAL_SELECT)
            .eq("user_id", str(user_id))
            .eq("date", on.isoformat())
            .eq("meal_type", meal_type.value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def list_meals(
        self,
        user_id: UUID,
        date_from: date | None,
        date_to: date | None,
        meal_type: MealType | None,
    ) -> list[Meal]:
        """Return meals in a date range."""
        query = (
            self.client.table("meals")
            .select(_MEAL_SELECT)
            .eq("user_id", str(user_id))
        )
        if date_from is not None:
            query = query.gte("date", date_from.isoformat())
        if date_to is not None:
            query = query.lte("date", date_to.isoformat())
        if meal_type is not None:
            query = query.eq("meal_type", meal_type.value)
        response = query.order("date", desc=True).execute()
        return [_parse_meal(row) for row in response.data or []]

    def create_meal(
        self,
        user_id: UUID,
        on: date,
        meal_type: MealType,
        notes: str | None,
        items: list[NewMealItem],
    ) -> Meal:
        """Create a meal row and its item rows."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "date": on.isoformat(),
                    "meal_type": meal_type.value,
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        meal_id = UUID(str(response.data[0]["id"]))
        try:
            self.client.table("meal_items").insert(
                [_item_payload(meal_id, item) for item in items]
            ).execute()
        except Exception:
            self.client.table("meals").delete().eq("id", str(meal_id)).execute()
            raise
        meal = self.get_meal(meal_id)
        if meal is None:
            raise RuntimeError("Failed to load created meal")
        return meal

    def add_item(self, meal_id: UUID, item: NewMealItem) -> MealItem:
        """Insert an item row."""
        response = (
            self.client.table("meal_items")
            .insert(_item_payload(meal_id, item))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add meal item")
        created = self.get_item(UUID(str(response.data[0]["id"])))
        if created is None:
            raise RuntimeError("Failed to load meal item")
        return created

    def get_item(self, item_id: UUID) -> MealItem | None:
        """Return an item by id."""
        response = (
            self.client.table("meal_items")
            .select(_ITEM_SELECT)
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def update_item(self, item_id: UUID, payload: dict[str, object]) -> None:
        """Patch an item row."""
        self.client.table("meal_items").update(payload).eq("id", str(item_id)).execute()

    def update_meal_notes(self, meal_id: UUID, notes: str | None) -> None:
        """Replace a meal's notes."""
        self.client.table("meals").update({"notes": notes}).eq(
            "id", str(meal_id)
        ).execute()

    def delete_item(self, item_id: UUID) -> None:
        """Delete an item row."""
        self.client.table("meal_items").delete().eq("id", str(item_id)).execute()

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row; items cascade."""
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()

    def list_entry_dates(
        self, user_id: UUID, date_from: date, date_to: date
    ) -> list[date]:
        """Return the dates that have meals."""
        response = (
            self.client.table("meals")
            .select("date")
            .eq("user_id", str(user_id))
            .gte("date", date_from.isoformat())
            .lte("date", date_to.isoformat())
            .execute()
        )
        return [
            date.fromisoformat(str(row["date"])[:10]) for row in response.data or []
        ]


def _item_payload(meal_id: UUID, item: NewMealItem) -> dict[str, object]:
    return {
        "meal_id": str(meal_id),
        "food_id": str(item.food_id),
        "serving_id": str(item.serving_id),
        "quantity": item.quantity,
        "notes": item.notes,
        "is_estimated": item.is_estimated,
    }


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_item(row: dict[str, object]) -> MealItem:
    return MealItem(
        id=UUID(str(row["id"])),
        meal_id=UUID(str(row["meal_id"])),
        food_id=UUID(str(row["food_id"])),
        serving_id=UUID(str(row["serving_id"])),
        quantity=float(row.get("quantity", 1.0)),
        food=parse_food(row["food"]),
        serving=parse_serving(row["serving"]),
        notes=row.get("notes"),
        is_estimated=bool(row.get("is_estimated", False)),
        created_at=_parse_timestamp(row.get("created_at")),
    )


def _parse_meal(row: dict[str, object]) -> Meal:
    items = sorted(
        (_parse_item(item) for item in row.get("meal_items") or []),
        key=lambda item: (item.created_at is None, item.created_at or datetime.min),
    )
    return Meal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["date"])[:10]),
        meal_type=MealType(row["meal_type"]),
        items=items,
        notes=row.get("notes"),
        created_at=_parse_timestamp(row.get("created_at")),
    )
