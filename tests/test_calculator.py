"""Tests for nutrition math."""

import math
from datetime import date
from uuid import uuid4

import pytest

from nutriledger.domain.catalog import Serving
from nutriledger.domain.meals import Meal, MealItem, MealType
from nutriledger.services.calculator import (
    daily_totals,
    item_nutrition,
    meal_totals,
    round_half_up,
)
from tests.conftest import InMemoryCatalogRepository


def _item(serving: Serving, quantity: float) -> MealItem:
    food = InMemoryCatalogRepository().add_food("Food")
    return MealItem(
        id=uuid4(),
        meal_id=uuid4(),
        food_id=food.id,
        serving_id=serving.id,
        quantity=quantity,
        food=food,
        serving=serving,
    )


def _serving(**values: float | None) -> Serving:
    return Serving(id=uuid4(), food_id=uuid4(), size=100, unit="g", **values)


@pytest.mark.parametrize(
    ("value", "places", "expected"),
    [
        (0.25, 1, 0.3),
        (0.35, 1, 0.4),
        (2.675, 2, 2.68),
        (-0.25, 1, -0.3),
        (10.0, 1, 10.0),
    ],
)
def test_round_half_up(value: float, places: int, expected: float) -> None:
    assert round_half_up(value, places) == expected


def test_round_half_up_leaves_unroundable_values_alone() -> None:
    assert round_half_up(math.inf, 2) == math.inf
    assert math.isnan(round_half_up(math.nan, 1))
    assert round_half_up(2e300, 2) == 2e300
    assert round_half_up(-(2.0**53), 1) == -(2.0**53)


def test_item_nutrition_scales_by_quantity() -> None:
    serving = _serving(calories=165, protein=31, carbs=0, fat=3.6)

    nutrition = item_nutrition(serving, 1.5)

    assert nutrition.calories == 247.5
    assert nutrition.protein == 46.5
    assert nutrition.carbs == 0
    assert nutrition.fat == 5.4


def test_item_nutrition_keeps_unknown_values_unknown() -> None:
    nutrition = item_nutrition(_serving(calories=120), 2)

    assert nutrition.calories == 240
    assert nutrition.protein is None
    assert nutrition.carbs is None


def test_item_nutrition_rounds_to_one_decimal() -> None:
    assert item_nutrition(_serving(protein=31), 0.333).protein == 10.3


def test_meal_totals_treat_unknown_as_zero() -> None:
    items = [
        _item(_serving(calories=100, protein=10), 2),
        _item(_serving(calories=50), 1),
    ]

    totals = meal_totals(items)

    assert totals.calories == 250
    assert totals.protein == 20
    assert totals.fat == 0


def test_daily_totals_sum_meals() -> None:
    user_id = uuid4()
    meals = [
        Meal(
            id=uuid4(),
            user_id=user_id,
            date=date(2024, 3, 10),
            meal_type=meal_type,
            items=[_item(_serving(calories=200, carbs=30), 1)],
        )
        for meal_type in (MealType.BREAKFAST, MealType.DINNER)
    ]

    totals = daily_totals(meals)

    assert totals.calories == 400
    assert totals.carbs == 60
    assert daily_totals([]).calories == 0
