"""Request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutriledger.domain.catalog import Serving, ServingStatus
from nutriledger.domain.goals import GoalTargets, GoalView
from nutriledger.domain.meals import (
    DailySummary,
    GoalProgress,
    MacroProgress,
    Meal,
    MealItem,
    MealType,
    NewMealItem,
    NutritionTotals,
    QuickAdd,
)
from nutriledger.domain.nutrition import NutritionImport, NutritionResult
from nutriledger.services.calculator import item_nutrition, meal_totals


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalTargetsIn(CamelModel):
    calories_target: float | None = Field(default=None, ge=0)
    protein_target: float | None = Field(default=None, ge=0)
    carbs_target: float | None = Field(default=None, ge=0)
    fat_target: float | None = Field(default=None, ge=0)
    fiber_target: float | None = Field(default=None, ge=0)
    sugar_target: float | None = Field(default=None, ge=0)
    sodium_target: float | None = Field(default=None, ge=0)

    def target_patch(self) -> dict[str, float | None]:
        """Return only the targets the client sent, keyed by macro."""
        sent = self.model_dump(exclude_unset=True, exclude={"start_date"})
        return {name.removesuffix("_target"): value for name, value in sent.items()}


class GoalCreateRequest(GoalTargetsIn):
    start_date: date | None = None

    def to_targets(self) -> GoalTargets:
        return GoalTargets(**self.target_patch())


class GoalUpdateRequest(GoalTargetsIn):
    pass


class GoalResponse(CamelModel):
    id: UUID
    user_id: UUID
    calories_target: float | None
    protein_target: float | None
    carbs_target: float | None
    fat_target: float | None
    fiber_target: float | None
    sugar_target: float | None
    sodium_target: float | None
    start_date: date
    end_date: date | None
    is_latest: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_view(cls, view: GoalView) -> "GoalResponse":
        goal = view.goal
        targets = {
            f"{name}_target": value for name, value in goal.targets.as_dict().items()
        }
        return cls(
            id=goal.id,
            user_id=goal.user_id,
            start_date=goal.start_date,
            end_date=goal.end_date,
            is_latest=view.is_latest,
            created_at=goal.created_at,
            updated_at=goal.updated_at,
            **targets,
        )


class MealItemRequest(CamelModel):
    food_id: UUID
    serving_id: UUID
    quantity: float = Field(default=1.0, ge=0)
    notes: str | None = None
    is_estimated: bool = False

    def to_domain(self) -> NewMealItem:
        return NewMealItem(
            food_id=self.food_id,
            serving_id=self.serving_id,
            quantity=self.quantity,
            notes=self.notes,
            is_estimated=self.is_estimated,
        )


class MealCreateRequest(CamelModel):
    date: date
    meal_type: MealType
    notes: str | None = None
    items: list[MealItemRequest] = Field(min_length=1)


class MealLogRequest(MealItemRequest):
    date: date
    meal_type: MealType


class MealNotesRequest(CamelModel):
    notes: str | None = None


class MealItemUpdateRequest(CamelModel):
    quantity: float | None = Field(default=None, ge=0)
    notes: str | None = None
    is_estimated: bool | None = None


class NutritionFields(CamelModel):
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    saturated_fat: float | None = Field(default=None, ge=0)
    trans_fat: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)
    cholesterol: float | None = Field(default=None, ge=0)


class QuickAddFood(CamelModel):
    name: str = Field(min_length=1)
    brand: str | None = None
    variant: str | None = None


class QuickAddRequest(CamelModel):
    food: QuickAddFood
    serving_size: float = Field(ge=0)
    serving_unit: str = Field(min_length=1)
    quantity: float = Field(default=1.0, ge=0)
    meal_type: MealType
    date: date
    notes: str | None = None
    nutrition: NutritionFields = Field(default_factory=NutritionFields)

    def to_domain(self) -> QuickAdd:
        return QuickAdd(
            food_name=self.food.name,
            food_brand=self.food.brand,
            food_variant=self.food.variant,
            serving_size=self.serving_size,
            serving_unit=self.serving_unit,
            meal_type=self.meal_type,
            date=self.date,
            quantity=self.quantity,
            notes=self.notes,
            nutrition=self.nutrition.model_dump(exclude_none=True),
        )


class ImportNutritionRequest(CamelModel):
    provider: str | None = None
    extra_context: str | None = None


class ItemNutritionResponse(CamelModel):
    calories: float | None
    protein: float | None
    carbs: float | None
    fat: float | None


class TotalsResponse(CamelModel):
    calories: float
    protein: float
    carbs: float
    fat: float

    @classmethod
    def from_totals(cls, totals: NutritionTotals) -> "TotalsResponse":
        return cls(
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
        )


class FoodSummaryResponse(CamelModel):
    id: UUID
    name: str
    brand: str | None
    variant: str | None


class ServingResponse(NutritionFields):
    id: UUID
    food_id: UUID
    name: str | None
    size: float
    unit: str
    is_default: bool
    status: ServingStatus
    data_source: str | None

    @classmethod
    def from_serving(cls, serving: Serving) -> "ServingResponse":
        return cls(
            id=serving.id,
            food_id=serving.food_id,
            name=serving.name,
            size=serving.size,
            unit=serving.unit,
            is_default=serving.is_default,
            status=serving.status,
            data_source=serving.data_source,
            calories=serving.calories,
            protein=serving.protein,
            carbs=serving.carbs,
            fat=serving.fat,
            saturated_fat=serving.saturated_fat,
            trans_fat=serving.trans_fat,
            fiber=serving.fiber,
            sugar=serving.sugar,
            sodium=serving.sodium,
            cholesterol=serving.cholesterol,
        )


class MealItemResponse(CamelModel):
    id: UUID
    meal_id: UUID
    food_id: UUID
    serving_id: UUID
    quantity: float
    notes: str | None
    is_estimated: bool
    food: FoodSummaryResponse
    serving: ServingResponse
    nutrition: ItemNutritionResponse

    @classmethod
    def from_item(cls, item: MealItem) -> "MealItemResponse":
        nutrition = item_nutrition(item.serving, item.quantity)
        return cls(
            id=item.id,
            meal_id=item.meal_id,
            food_id=item.food_id,
            serving_id=item.serving_id,
            quantity=item.quantity,
            notes=item.notes,
            is_estimated=item.is_estimated,
            food=FoodSummaryResponse(
                id=item.food.id,
                name=item.food.name,
                brand=item.food.brand,
                variant=item.food.variant,
            ),
            serving=ServingResponse.from_serving(item.serving),
            nutrition=ItemNutritionResponse(
                calories=nutrition.calories,
                protein=nutrition.protein,
                carbs=nutrition.carbs,
                fat=nutrition.fat,
            ),
        )


class MealResponse(CamelModel):
    id: UUID
    user_id: UUID
    date: date
    meal_type: MealType
    notes: str | None
    items: list[MealItemResponse]
    totals: TotalsResponse

    @classmethod
    def from_meal(cls, meal: Meal) -> "MealResponse":
        return cls(
            id=meal.id,
            user_id=meal.user_id,
            date=meal.date,
            meal_type=meal.meal_type,
            notes=meal.notes,
            items=[MealItemResponse.from_item(item) for item in meal.items],
            totals=TotalsResponse.from_totals(meal_totals(meal.items)),
        )


class MacroProgressResponse(CamelModel):
    target: float | None
    actual: float
    percentage: float | None


class GoalProgressResponse(CamelModel):
    calories: MacroProgressResponse
    protein: MacroProgressResponse
    carbs: MacroProgressResponse
    fat: MacroProgressResponse

    @classmethod
    def from_progress(cls, progress: GoalProgress) -> "GoalProgressResponse":
        return cls(
            calories=_macro(progress.calories),
            protein=_macro(progress.protein),
            carbs=_macro(progress.carbs),
            fat=_macro(progress.fat),
        )


class DailySummaryResponse(CamelModel):
    date: date
    meals: list[MealResponse]
    totals: TotalsResponse
    goal_progress: GoalProgressResponse | None

    @classmethod
    def from_summary(cls, summary: DailySummary) -> "DailySummaryResponse":
        return cls(
            date=summary.date,
            meals=[MealResponse.from_meal(meal) for meal in summary.meals],
            totals=TotalsResponse.from_totals(summary.totals),
            goal_progress=(
                GoalProgressResponse.from_progress(summary.goal_progress)
                if summary.goal_progress
                else None
            ),
        )


class NutritionImportResponse(CamelModel):
    provider: str
    provider_kind: str
    provider_data_type: str
    results: list[NutritionResult]

    @classmethod
    def from_import(cls, result: NutritionImport) -> "NutritionImportResponse":
        return cls(
            provider=result.provider,
            provider_kind=result.provider_kind,
            provider_data_type=result.provider_data_type,
            results=result.results,
        )


def _macro(progress: MacroProgress) -> MacroProgressResponse:
    return MacroProgressResponse(
        target=progress.target,
        actual=progress.actual,
        percentage=progress.percentage,
    )
