"""Goal progress evaluation."""

from nutriledger.domain.goals import NutritionGoal
from nutriledger.domain.meals import GoalProgress, MacroProgress, NutritionTotals
from nutriledger.services.calculator import round_half_up


def evaluate_progress(
    totals: NutritionTotals, goal: NutritionGoal | None
) -> GoalProgress | None:
    """Compare daily totals with a goal.

    Returns ``None`` when no goal applies, so callers can tell "no goal"
    apart from "0% of a goal".
    """
    if goal is None:
        return None
    return GoalProgress(
        calories=macro_progress(totals.calories, goal.targets.calories),
        protein=macro_progress(totals.protein, goal.targets.protein),
        carbs=macro_progress(totals.carbs, goal.targets.carbs),
        fat=macro_progress(totals.fat, goal.targets.fat),
    )


def macro_progress(total: float, target: float | None) -> MacroProgress:
    """Return rounded actual and percentage of target for one macro."""
    actual = round_half_up(total, 1)
    percentage = None
    if target is not None and target > 0:
        percentage = round_half_up(actual / target * 100, 1)
    return MacroProgress(target=target, actual=actual, percentage=percentage)
