"""Nutrition and catalog endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from nutriledger.api.schemas import (
    DailySummaryResponse,
    GoalCreateRequest,
    GoalResponse,
    GoalUpdateRequest,
    ImportNutritionRequest,
    MealCreateRequest,
    MealItemRequest,
    MealItemUpdateRequest,
    MealLogRequest,
    MealNotesRequest,
    MealResponse,
    NutritionImportResponse,
    QuickAddRequest,
    ServingResponse,
)
from nutriledger.domain.meals import MealType  # noqa: TC001
from nutriledger.domain.nutrition import NutritionResult  # noqa: TC001

if TYPE_CHECKING:
    from nutriledger.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    request: Request,
    x_api_token: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> UUID:
    """Check the shared API token and return the caller's user id."""
    container = get_container(request)
    if not x_api_token or x_api_token != container.settings.api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id or "")
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id"
        ) from exc


goals_router = APIRouter(prefix="/nutrition/goals", tags=["goals"])
meals_router = APIRouter(prefix="/nutrition/meals", tags=["meals"])
meal_items_router = APIRouter(prefix="/nutrition/meal-items", tags=["meals"])
catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@goals_router.get("")
async def get_active_goal(
    request: Request,
    on: date | None = Query(default=None, alias="date"),
    user_id: UUID = Depends(require_user),
) -> GoalResponse | None:
    """Return the goal active on a day (default today), or null."""
    container = get_container(request)
    view = container.goal_timeline.get_active_on(user_id, on)
    return GoalResponse.from_view(view) if view else None


@goals_router.get("/all")
async def list_goals(
    request: Request,
    user_id: UUID = Depends(require_user),
) -> list[GoalResponse]:
    container = get_container(request)
    return [
        GoalResponse.from_view(view)
        for view in container.goal_timeline.list_goals(user_id)
    ]


@goals_router.post("", status_code=status.HTTP_201_CREATED)
async def create_goal(
    request: Request,
    body: GoalCreateRequest,
    user_id: UUID = Depends(require_user),
) -> GoalResponse:
    container = get_container(request)
    view = container.goal_timeline.create(
        user_id, body.to_targets(), body.start_date
    )
    return GoalResponse.from_view(view)


@goals_router.patch("/{goal_id}")
async def update_goal(
    request: Request,
    goal_id: UUID,
    body: GoalUpdateRequest,
    user_id: UUID = Depends(require_user),
) -> GoalResponse:
    container = get_container(request)
    view = container.goal_timeline.update(user_id, goal_id, body.target_patch())
    return GoalResponse.from_view(view)


@goals_router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    request: Request,
    goal_id: UUID,
    user_id: UUID = Depends(require_user),
) -> None:
    container = get_container(request)
    container.goal_timeline.delete(user_id, goal_id)


@meals_router.get("")
async def list_meals(  # noqa: PLR0913
    request: Request,
    on: date | None = Query(default=None, alias="date"),
    meal_type: MealType | None = Query(default=None, alias="mealType"),
    date_from: date | None = Query(default=None, alias="dateFrom"),
    date_to: date | None = Query(default=None, alias="dateTo"),
    user_id: UUID = Depends(require_user),
) -> list[MealResponse]:
    container = get_container(request)
    meals = container.meal_service.list_meals(
        user_id, on=on, meal_type=meal_type, date_from=date_from, date_to=date_to
    )
    return [MealResponse.from_meal(meal) for meal in meals]


@meals_router.get("/daily-summary")
async def daily_summary(
    request: Request,
    on: date = Query(alias="date"),
    user_id: UUID = Depends(require_user),
) -> DailySummaryResponse:
    """Return a day's meals, totals and goal progress."""
    container = get_container(request)
    summary = container.meal_service.get_daily_summary(user_id, on)
    return DailySummaryResponse.from_summary(summary)


@meals_router.get("/dates")
async def dates_with_entries(
    request: Request,
    date_from: date = Query(alias="from"),
    date_to: date = Query(alias="to"),
    user_id: UUID = Depends(require_user),
) -> list[date]:
    container = get_container(request)
    return container.meal_service.get_dates_with_entries(user_id, date_from, date_to)


@meals_router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    request: Request,
    body: MealCreateRequest,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    container = get_container(request)
    meal = container.meal_service.create_meal(
        user_id,
        body.date,
        body.meal_type,
        [item.to_domain() for item in body.items],
        notes=body.notes,
    )
    return MealResponse.from_meal(meal)


@meals_router.post("/log", status_code=status.HTTP_201_CREATED)
async def log_item(
    request: Request,
    body: MealLogRequest,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    """Log an item into its slot, creating the meal when needed."""
    container = get_container(request)
    meal = container.meal_service.log_item(
        user_id, body.date, body.meal_type, body.to_domain()
    )
    return MealResponse.from_meal(meal)


@meals_router.post("/quick-add", status_code=status.HTTP_201_CREATED)
async def quick_add(
    request: Request,
    body: QuickAddRequest,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    container = get_container(request)
    meal = container.meal_service.quick_add(user_id, body.to_domain())
    return MealResponse.from_meal(meal)


@meals_router.get("/{meal_id}")
async def get_meal(
    request: Request,
    meal_id: UUID,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    container = get_container(request)
    return MealResponse.from_meal(container.meal_service.get_meal(user_id, meal_id))


@meals_router.patch("/{meal_id}")
async def update_meal(
    request: Request,
    meal_id: UUID,
    body: MealNotesRequest,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    container = get_container(request)
    meal = container.meal_service.update_meal_notes(user_id, meal_id, body.notes)
    return MealResponse.from_meal(meal)


@meals_router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    request: Request,
    meal_id: UUID,
    user_id: UUID = Depends(require_user),
) -> None:
    container = get_container(request)
    container.meal_service.delete_meal(user_id, meal_id)


@meals_router.post("/{meal_id}/items", status_code=status.HTTP_201_CREATED)
async def add_meal_item(
    request: Request,
    meal_id: UUID,
    body: MealItemRequest,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    container = get_container(request)
    meal = container.meal_service.add_item(user_id, meal_id, body.to_domain())
    return MealResponse.from_meal(meal)


@meal_items_router.patch("/{item_id}")
async def update_meal_item(
    request: Request,
    item_id: UUID,
    body: MealItemUpdateRequest,
    user_id: UUID = Depends(require_user),
) -> MealResponse:
    container = get_container(request)
    patch = body.model_dump(exclude_unset=True)
    meal = container.meal_service.update_item(user_id, item_id, patch)
    return MealResponse.from_meal(meal)


@meal_items_router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal_item(
    request: Request,
    item_id: UUID,
    user_id: UUID = Depends(require_user),
) -> None:
    """Delete an item; removing the last one removes its meal."""
    container = get_container(request)
    container.meal_service.delete_item(user_id, item_id)


@catalog_router.get("/servings/{serving_id}", dependencies=[Depends(require_user)])
async def get_serving(request: Request, serving_id: UUID) -> ServingResponse:
    container = get_container(request)
    serving = container.serving_service.get_serving(serving_id)
    return ServingResponse.from_serving(serving)


@catalog_router.post(
    "/servings/{serving_id}/import-nutrition", dependencies=[Depends(require_user)]
)
async def import_nutrition(
    request: Request,
    serving_id: UUID,
    body: ImportNutritionRequest | None = None,
) -> NutritionImportResponse:
    """Fetch nutrition candidates for a serving without saving them."""
    container = get_container(request)
    body = body or ImportNutritionRequest()
    result = await container.serving_service.import_nutrition(
        serving_id, provider_name=body.provider, extra_context=body.extra_context
    )
    return NutritionImportResponse.from_import(result)


@catalog_router.post(
    "/servings/{serving_id}/apply-nutrition", dependencies=[Depends(require_user)]
)
async def apply_nutrition(
    request: Request,
    serving_id: UUID,
    body: NutritionResult,
) -> ServingResponse:
    """Write a chosen nutrition result onto the serving, rescaled to its size."""
    container = get_container(request)
    serving = container.serving_service.apply_nutrition(serving_id, body)
    return ServingResponse.from_serving(serving)


routers = (goals_router, meals_router, meal_items_router, catalog_router)
