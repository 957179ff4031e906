"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutriledger.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from nutriledger.adapters.supabase_goal_repository import SupabaseGoalRepository
from nutriledger.adapters.supabase_meal_repository import SupabaseMealRepository
from nutriledger.config import Settings
from nutriledger.services.goals import GoalTimeline
from nutriledger.services.locks import UserLocks
from nutriledger.services.meals import MealService
from nutriledger.services.providers import NutritionDataProvider, ProviderRegistry
from nutriledger.services.servings import ServingService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    goal_timeline: GoalTimeline
    meal_service: MealService
    serving_service: ServingService
    provider_registry: ProviderRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None,
    providers: list[NutritionDataProvider] | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    locks = UserLocks()
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    goal_timeline = GoalTimeline(SupabaseGoalRepository(supabase_client), locks)
    meal_service = MealService(
        repository=SupabaseMealRepository(supabase_client),
        catalog=catalog_repository,
        goals=goal_timeline,
        locks=locks,
    )
    provider_registry = ProviderRegistry(
        providers=list(providers or []),
        default_name=resolved_settings.default_provider,
    )
    serving_service = ServingService(catalog_repository, provider_registry)

    async def close_resources() -> None:
        for provider in provider_registry.providers:
            close = getattr(provider, "close", None)
            if close is not None:
                await close()

    return AppContainer(
        settings=resolved_settings,
        goal_timeline=goal_timeline,
        meal_service=meal_service,
        serving_service=serving_service,
        provider_registry=provider_registry,
        close_resources=close_resources,
    )
