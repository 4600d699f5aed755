"""Input and output models for the valuation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from sitescope.exceptions import InputValidationError
from sitescope.models.enums import (
    GeoStatus,
    MarketClass,
    PricingBasis,
    ProjectStatus,
    Stage,
    TypologySource,
)
from sitescope.models.site import CategoryRow, GeoFactors  # noqa: TCH001

if TYPE_CHECKING:
    from collections.abc import Mapping


class ValuationInput(BaseModel):
    """A validated site description to value."""

    model_config = ConfigDict(frozen=True)

    project_type: str = ""
    scale: str = ""
    status: ProjectStatus = ProjectStatus.UNKNOWN
    stage_label: Stage = Stage.PLANNING
    progress_value: float = Field(default=0.0, ge=0, le=100)
    location: str = ""
    note: str = ""
    geo_status: GeoStatus = GeoStatus.NONE
    category_row: CategoryRow | None = None
    geo_factors: GeoFactors | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ValuationInput:
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            msg = f"Invalid valuation input: {exc.error_count()} error(s)"
            raise InputValidationError(msg) from exc


class ResolvedTypology(BaseModel):
    """The typology anchor a site was priced against.

    ``base_rate`` and ``max_rate`` (currency per m²) form the corridor that
    every final unit rate must stay inside.
    """

    key: str
    market_class: MarketClass
    basis: PricingBasis
    base_rate: float
    max_rate: float
    source: TypologySource

    @model_validator(mode="after")
    def base_below_max(self) -> ResolvedTypology:
        if self.base_rate >= self.max_rate:
            msg = f"base_rate must be below max_rate, got {self.base_rate} >= {self.max_rate}"
            raise ValueError(msg)
        return self


class ValueBand(BaseModel):
    """A value band: a rounded base with a low/high range around it."""

    base: float = Field(ge=0)
    low: float = Field(ge=0)
    high: float = Field(ge=0)

    @model_validator(mode="after")
    def low_le_base_le_high(self) -> ValueBand:
        if not (self.low <= self.base <= self.high):
            msg = (
                f"Must satisfy low <= base <= high, "
                f"got {self.low} <= {self.base} <= {self.high}"
            )
            raise ValueError(msg)
        return self


class ValuationMetrics(BaseModel):
    """The normalized market metrics the valuation actually used."""

    city_growth_pct: float
    property_growth_pct: float
    land_growth_pct: float
    property_age_years: float
    resale_value_pct: float
    roi_pct: float
    comparable_count: int


class ValuationResult(BaseModel):
    """Property, land, and project value bands with confidence and spread."""

    property_value: ValueBand
    land_value: ValueBand
    project_value: ValueBand
    confidence: float = Field(ge=0, le=100)
    spread: float
    warnings: list[str] = Field(default_factory=list)
    metrics: ValuationMetrics
    typology: ResolvedTypology
    unit_rate: float
    built_area_sqm: float

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict for frontend consumption."""
        from sitescope.formatting import format_percent, format_value_band

        return {
            "property_range_formatted": format_value_band(self.property_value),
            "land_range_formatted": format_value_band(self.land_value),
            "project_range_formatted": format_value_band(self.project_value),
            "confidence": round(self.confidence),
            "confidence_label": _confidence_label(self.confidence),
            "spread_formatted": format_percent(self.spread),
            "typology": self.typology.key,
            "market_class": self.typology.market_class.value,
            "num_warnings": len(self.warnings),
        }


def _confidence_label(confidence: float) -> str:
    if confidence >= 75:
        return "high"
    if confidence >= 50:
        return "medium"
    return "low"
