"""Serving lookups and nutrition import."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutriledger.domain.catalog import SCALABLE_FIELDS, Food, Serving
from nutriledger.domain.nutrition import (
    NutritionDataContext,
    NutritionImport,
    NutritionResult,
)
from nutriledger.errors import NotFoundError
from nutriledger.services.providers import ProviderRegistry
from nutriledger.services.scaling import (
    apply_scaling,
    build_data_source,
    fit_scaling,
    resolve_scaling,
)

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Persistence interface for foods and servings."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""

    def find_food(
        self, name: str, brand: str | None, variant: str | None
    ) -> Food | None:
        """Return a food matching name, brand and variant exactly."""

    def create_food(
        self, name: str, brand: str | None, variant: str | None
    ) -> Food:
        """Create a food and return it."""

    def get_serving(self, serving_id: UUID) -> Serving | None:
        """Return a serving by id, if present."""

    def create_serving(self, food_id: UUID, payload: dict[str, object]) -> Serving:
        """Create a serving for a food and return it."""

    def update_serving(self, serving_id: UUID, payload: dict[str, object]) -> Serving:
        """Patch a serving and return it."""


@dataclass
class ServingService:
    """Application service for servings and imported nutrition."""

    repository: CatalogRepository
    providers: ProviderRegistry

    def get_serving(self, serving_id: UUID) -> Serving:
        serving = self.repository.get_serving(serving_id)
        if serving is None:
            raise NotFoundError(f"Serving with ID {serving_id} not found")
        return serving

    async def import_nutrition(
        self,
        serving_id: UUID,
        provider_name: str | None = None,
        extra_context: str | None = None,
    ) -> NutritionImport:
        """Ask a provider for nutrition candidates without writing anything."""
        serving = self.get_serving(serving_id)
        food = self.repository.get_food(serving.food_id)
        if food is None:
            raise NotFoundError(f"Food with ID {serving.food_id} not found")
        provider = (
            self.providers.get(provider_name)
            if provider_name
            else self.providers.get_default("nutrition")
        )
        context = NutritionDataContext(
            food_name=food.name,
            food_brand=food.brand,
            food_variant=food.variant,
            serving_name=serving.name,
            serving_size=serving.size,
            serving_unit=serving.unit,
            extra_context=extra_context,
        )
        try:
            results = await provider.fetch(context)
        except Exception:
            _logger.exception(
                "Nutrition provider %s failed for serving %s", provider.name, serving_id
            )
            raise
        return NutritionImport(
            provider=provider.name,
            provider_kind=provider.kind,
            provider_data_type=provider.data_type,
            results=results,
        )

    def apply_nutrition(self, serving_id: UUID, result: NutritionResult) -> Serving:
        """Write imported values onto a serving, rescaled to its size.

        Values that cannot be rescaled are written unscaled. The review
        status is left alone.
        """
        serving = self.get_serving(serving_id)
        decision = resolve_scaling(
            serving.size,
            serving.unit,
            result.result_serving_size,
            result.result_serving_unit,
        )
        fields = {name: getattr(result, name) for name in SCALABLE_FIELDS}
        decision = fit_scaling(decision, fields)
        payload: dict[str, object] = dict(apply_scaling(fields, decision.factor))
        data_source = build_data_source(
            result.data_source or result.source_label, decision.note
        )
        if data_source is not None:
            payload["data_source"] = data_source
        if decision.note:
            _logger.info("Serving %s import %s", serving_id, decision.note)
        if not payload:
            return serving
        return self.repository.update_serving(serving_id, payload)
