"""Upstream site-description records shared by both engines.

These mirror the category matrix and geo/market factor blocks of the
site-analysis JSON. Field aliases accept the upstream key spelling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CategoryRow(BaseModel):
    """Category classification for the site (typology, style, materials)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    category: str | None = Field(default=None, alias="Category")
    typology: str | None = Field(default=None, alias="Typology")
    style: str | None = Field(default=None, alias="Style")
    roof_type: str | None = Field(default=None, alias="RoofType")
    material_used: str | None = Field(default=None, alias="MaterialUsed")
    additional_features: str | None = Field(default=None, alias="AdditionalFeatures")
    exterior: str | None = Field(default=None, alias="Exterior")


class GeoFactors(BaseModel):
    """Geographic and market context for the site.

    Categorical fields are free text. The numeric market metrics are
    optional; the valuation engine defaults and clamps them itself and
    reports every substitution as a warning.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    terrain: str | None = None
    soil_condition: str | None = None
    climate_zone: str | None = None
    population_density: str | None = None
    master_plan_zone: str | None = None
    policy_posture: str | None = None
    policy_focus: str | None = None
    comparable_activity: str | None = None

    comparable_properties_count: float | None = None
    city_growth_5y_percent: float | None = None
    property_growth_percent: float | None = None
    land_growth_percent: float | None = None
    property_age_years: float | None = None
    resale_value_percent: float | None = None
    investment_roi_percent: float | None = None
