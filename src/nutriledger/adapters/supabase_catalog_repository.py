"""Supabase implementation for foods and servings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutriledger.domain.catalog import SCALABLE_FIELDS, Food, Serving, ServingStatus
from nutriledger.services.servings import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed repository for the food catalog."""

    client: Client

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_food(response.data[0])

    def find_food(
        self, name: str, brand: str | None, variant: str | None
    ) -> Food | None:
        """Return a food with the same name, brand and variant."""
        query = self.client.table("foods").select("*").eq("name", name)
        query = (
            query.is_("brand", "null") if brand is None else query.eq("brand", brand)
        )
        query = (
            query.is_("variant", "null")
            if variant is None
            else query.eq("variant", variant)
        )
        response = query.limit(1).execute()
        if not response.data:
            return None
        return parse_food(response.data[0])

    def create_food(
        self, name: str, brand: str | None, variant: str | None
    ) -> Food:
        """Create a food and return it."""
        response = (
            self.client.table("foods")
            .insert({"name": name, "brand": brand, "variant": variant})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food")
        return parse_food(response.data[0])

    def get_serving(self, serving_id: UUID) -> Serving | None:
        """Return a serving by id, if present."""
        response = (
            self.client.table("servings")
            .select("*")
            .eq("id", str(serving_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_serving(response.data[0])

    def create_serving(self, food_id: UUID, payload: dict[str, object]) -> Serving:
        """Create a serving and return it."""
        response = (
            self.client.table("servings")
            .insert({"food_id": str(food_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create serving")
        return parse_serving(response.data[0])

    def update_serving(self, serving_id: UUID, payload: dict[str, object]) -> Serving:
        """Patch a serving and return it."""
        response = (
            self.client.table("servings")
            .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(serving_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update serving")
        return parse_serving(response.data[0])


def parse_food(row: dict[str, object]) -> Food:
    """Parse a food row into a domain model."""
    return Food(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        variant=row.get("variant"),
    )


def parse_serving(row: dict[str, object]) -> Serving:
    """Parse a serving row into a domain model."""
    macros = {
        name: float(row[name]) if row.get(name) is not None else None
        for name in SCALABLE_FIELDS
    }
    updated_raw = row.get("updated_at")
    return Serving(
        id=UUID(str(row["id"])),
        food_id=UUID(str(row["food_id"])),
        size=float(row.get("size", 0.0)),
        unit=str(row.get("unit", "")),
        name=row.get("name"),
        is_default=bool(row.get("is_default", False)),
        status=ServingStatus(row.get("status") or ServingStatus.NEEDS_REVIEW),
        data_source=row.get("data_source"),
        updated_at=(
            datetime.fromisoformat(updated_raw)
            if isinstance(updated_raw, str) and updated_raw
            else None
        ),
        **macros,
    )
