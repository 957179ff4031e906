"""Models for externally sourced nutrition data."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NutritionResult(BaseModel):
    """Nutrition facts reported by a provider for some serving size."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

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
    data_kind: Literal["measured", "estimated"] = "measured"
    confidence: Literal["low", "medium", "high"] | None = None
    source_label: str | None = None
    result_serving_size: float | None = None
    result_serving_unit: str | None = None
    data_source: str | None = None


@dataclass(frozen=True)
class NutritionDataContext:
    """What a provider is told about the serving it should describe."""

    food_name: str
    serving_size: float
    serving_unit: str
    food_brand: str | None = None
    food_variant: str | None = None
    serving_name: str | None = None
    extra_context: str | None = None


@dataclass(frozen=True)
class ScalingDecision:
    """Scale factor for an import and the provenance note, if any."""

    factor: float
    note: str | None = None


@dataclass(frozen=True)
class NutritionImport:
    """Candidate results returned by a provider for review."""

    provider: str
    provider_kind: str
    provider_data_type: str
    results: list[NutritionResult]
