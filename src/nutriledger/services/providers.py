"""Nutrition data provider contract and registry."""

from dataclasses import dataclass, field
from typing import Protocol

from nutriledger.domain.nutrition import NutritionDataContext, NutritionResult
from nutriledger.errors import NotFoundError


class NutritionDataProvider(Protocol):
    """Source of nutrition facts for a serving."""

    name: str
    display_name: str
    kind: str
    data_type: str

    def is_available(self) -> bool:
        """Return False when credentials or config are missing."""

    async def fetch(self, context: NutritionDataContext) -> list[NutritionResult]:
        """Return candidate results, most relevant first."""


@dataclass
class ProviderRegistry:
    """Lookup of configured providers by name."""

    providers: list[NutritionDataProvider] = field(default_factory=list)
    default_name: str | None = None

    def get(self, name: str) -> NutritionDataProvider:
        """Return an available provider by name."""
        for provider in self.providers:
            if provider.name == name and provider.is_available():
                return provider
        raise NotFoundError(f"Nutrition provider {name!r} is not available")

    def get_default(self, data_type: str = "nutrition") -> NutritionDataProvider:
        """Return the configured default, else the first available provider."""
        if self.default_name:
            return self.get(self.default_name)
        for provider in self.providers:
            if provider.data_type == data_type and provider.is_available():
                return provider
        raise NotFoundError(f"No {data_type} provider is available")

    def list_available(self) -> list[NutritionDataProvider]:
        return [provider for provider in self.providers if provider.is_available()]
