"""Nutrition math for meal items, meals and days."""

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from nutriledger.domain.catalog import Serving
from nutriledger.domain.meals import ItemNutrition, Meal, MealItem, NutritionTotals

_TOTAL_FIELDS = ("calories", "protein", "carbs", "fat")
# Floats at or above this magnitude have no fractional part left to round.
_WHOLE_FLOAT = 2.0**52


def round_half_up(value: float, places: int) -> float:
    """Round with halves going away from zero (0.25 -> 0.3).

    Non-finite values and floats too large to hold a fraction come back
    unchanged.
    """
    if not math.isfinite(value) or abs(value) >= _WHOLE_FLOAT:
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def item_nutrition(serving: Serving, quantity: float) -> ItemNutrition:
    """Return serving macros multiplied by ``quantity``.

    Unknown serving values stay unknown instead of turning into zero.
    """
    values: dict[str, float | None] = {}
    for name in _TOTAL_FIELDS:
        value = getattr(serving, name)
        values[name] = None if value is None else round_half_up(value * quantity, 1)
    return ItemNutrition(**values)


def meal_totals(items: Iterable[MealItem]) -> NutritionTotals:
    """Sum item nutrition across a meal, counting unknown values as zero."""
    totals = NutritionTotals()
    for item in items:
        nutrition = item_nutrition(item.serving, item.quantity)
        totals = NutritionTotals(
            calories=totals.calories + (nutrition.calories or 0.0),
            protein=totals.protein + (nutrition.protein or 0.0),
            carbs=totals.carbs + (nutrition.carbs or 0.0),
            fat=totals.fat + (nutrition.fat or 0.0),
        )
    return totals


def daily_totals(meals: Iterable[Meal]) -> NutritionTotals:
    """Sum meal totals across one day."""
    totals = NutritionTotals()
    for meal in meals:
        meal_total = meal_totals(meal.items)
        totals = NutritionTotals(
            calories=totals.calories + meal_total.calories,
            protein=totals.protein + meal_total.protein,
            carbs=totals.carbs + meal_total.carbs,
            fat=totals.fat + meal_total.fat,
        )
    return totals
