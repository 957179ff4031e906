"""Proportional scaling of imported nutrition onto a serving."""

import logging
import math
from collections.abc import Mapping

from nutriledger.domain.nutrition import ScalingDecision
from nutriledger.services.calculator import round_half_up

_logger = logging.getLogger(__name__)

UNSCALED = ScalingDecision(factor=1.0)


def resolve_scaling(
    stored_size: float,
    stored_unit: str,
    result_size: float | None = None,
    result_unit: str | None = None,
) -> ScalingDecision:
    """Work out how to map values reported for one serving onto another.

    Only same-unit sizes are rescaled. Converting between units (grams vs
    millilitres) needs density data, so mismatched units are applied as-is.
    """
    if result_size is None or result_unit is None:
        return UNSCALED
    if _normalize_unit(stored_unit) != _normalize_unit(result_unit):
        _logger.debug(
            "Not scaling: unit %r does not match stored unit %r",
            result_unit,
            stored_unit,
        )
        return UNSCALED
    if result_size == stored_size:
        return UNSCALED
    if result_size <= 0:
        _logger.debug("Not scaling: result serving size %s", result_size)
        return UNSCALED
    note = (
        f"scaled from {_format_size(result_size)}{result_unit.strip()} "
        f"to {_format_size(stored_size)}{stored_unit.strip()}"
    )
    return ScalingDecision(factor=stored_size / result_size, note=note)


def fit_scaling(
    decision: ScalingDecision, fields: Mapping[str, float | None]
) -> ScalingDecision:
    """Drop to unscaled values when any scaled value would overflow a float."""
    if decision.factor == 1:
        return decision
    for name, value in fields.items():
        if value is not None and not math.isfinite(value * decision.factor):
            _logger.debug(
                "Not scaling: %s=%s overflows at factor %s",
                name,
                value,
                decision.factor,
            )
            return UNSCALED
    return decision


def apply_scaling(
    fields: Mapping[str, float | None], factor: float
) -> dict[str, float]:
    """Multiply every present field by ``factor``; absent fields are dropped."""
    present = {name: value for name, value in fields.items() if value is not None}
    if factor == 1:
        return present
    return {name: round_half_up(value * factor, 2) for name, value in present.items()}


def build_data_source(base: str | None, note: str | None) -> str | None:
    """Attach the scaling note to a source label."""
    if base and note:
        return f"{base} ({note})"
    return base or note


def _normalize_unit(unit: str) -> str:
    return unit.strip().lower()


def _format_size(size: float) -> str:
    if float(size).is_integer():
        return str(int(size))
    return str(float(size))
