"""Tests for the domain models and enums."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sitescope.exceptions import InputValidationError
from sitescope.models.enums import (
    Availability,
    DensityBand,
    MarketClass,
    PaintStatus,
    PricingBasis,
    Stage,
    StageBucket,
    TypologySource,
)
from sitescope.models.resource_plan import (
    LaborRequirement,
    MachineryRequirement,
    MaterialRequirement,
    PaintRequirement,
    ResourcePlanInput,
    ResourcePlanOutput,
)
from sitescope.models.site import CategoryRow, GeoFactors
from sitescope.models.valuation import (
    ResolvedTypology,
    ValuationInput,
    ValuationMetrics,
    ValuationResult,
    ValueBand,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _plan_output() -> ResourcePlanOutput:
    return ResourcePlanOutput(
        progress_value=40,
        labor_availability=Availability.MEDIUM,
        location_cost_index=1.0,
        labor=[
            LaborRequirement(
                role="Masons", required=4, availability=Availability.MEDIUM,
                daily_rate_usd=45.0, estimated_days=10, total_cost_usd=1_800.0,
            ),
            LaborRequirement(
                role="Painters", required=2, availability=Availability.MEDIUM,
                daily_rate_usd=40.0, estimated_days=5, total_cost_usd=400.0,
            ),
        ],
        machinery=[
            MachineryRequirement(
                machine="Excavator", units=1, availability=Availability.MEDIUM,
                hourly_rate_usd=95.0, estimated_hours=24, total_cost_usd=2_280.0,
            ),
        ],
        materials=[
            MaterialRequirement(
                item="Cement", quantity=540, unit="bags", availability=Availability.MEDIUM,
                unit_cost_usd=7.4, total_cost_usd=3_996.0,
            ),
        ],
        paints=[
            PaintRequirement(
                zone="Exterior", shade="Stone Beige", color_code="#D5C3A5",
                liters=240, status=PaintStatus.TO_PROCURE,
            ),
            PaintRequirement(
                zone="Metalworks", shade="Anti-Rust Red Oxide", color_code="#7E3A32",
                liters=55, status=PaintStatus.ACQUIRED,
            ),
        ],
        construction_insights=["Construction focus: keep the pour cycle."],
    )


def _valuation_result() -> ValuationResult:
    return ValuationResult(
        property_value=ValueBand(base=7_600_000, low=5_900_000, high=8_975_000),
        land_value=ValueBand(base=3_700_000, low=3_100_000, high=4_275_000),
        project_value=ValueBand(base=6_725_000, low=5_025_000, high=8_325_000),
        confidence=80,
        spread=0.16,
        warnings=["roi:missing"],
        metrics=ValuationMetrics(
            city_growth_pct=8, property_growth_pct=9, land_growth_pct=10,
            property_age_years=5, resale_value_pct=100, roi_pct=8, comparable_count=20,
        ),
        typology=ResolvedTypology(
            key="Apartment", market_class=MarketClass.RESIDENTIAL,
            basis=PricingBasis.BUILT_UP, base_rate=900, max_rate=4_200,
            source=TypologySource.ALIAS,
        ),
        unit_rate=3_175.5,
        built_area_sqm=2_400,
    )


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestAvailability:
    def test_shift_down_and_up(self) -> None:
        assert Availability.HIGH.shifted(-1) == Availability.MEDIUM
        assert Availability.LOW.shifted(1) == Availability.MEDIUM

    def test_shift_clamps_at_ends(self) -> None:
        assert Availability.LOW.shifted(-1) == Availability.LOW
        assert Availability.HIGH.shifted(2) == Availability.HIGH

    def test_zero_shift(self) -> None:
        assert Availability.MEDIUM.shifted(0) == Availability.MEDIUM


class TestStageBucket:
    @pytest.mark.parametrize(
        ("stage", "bucket"),
        [
            (Stage.PLANNING, StageBucket.FOUNDATION),
            (Stage.FOUNDATION, StageBucket.FOUNDATION),
            (Stage.STRUCTURE, StageBucket.STRUCTURE),
            (Stage.SERVICES, StageBucket.SERVICES),
            (Stage.FINISHING, StageBucket.FINISHING),
            (Stage.COMPLETED, StageBucket.FINISHING),
        ],
    )
    def test_for_stage(self, stage: Stage, bucket: StageBucket) -> None:
        assert StageBucket.for_stage(stage) == bucket


class TestDensityBand:
    def test_from_text(self) -> None:
        assert DensityBand.from_text("Very High") == DensityBand.HIGH
        assert DensityBand.from_text("low density") == DensityBand.LOW
        assert DensityBand.from_text("moderate") == DensityBand.MEDIUM
        assert DensityBand.from_text(None) == DensityBand.MEDIUM


# ---------------------------------------------------------------------------
# Site records
# ---------------------------------------------------------------------------


class TestCategoryRow:
    def test_accepts_upstream_keys(self) -> None:
        row = CategoryRow.model_validate({"Typology": "Villa", "RoofType": "Sloped"})
        assert row.typology == "Villa"
        assert row.roof_type == "Sloped"

    def test_accepts_field_names(self) -> None:
        row = CategoryRow(typology="Villa", material_used="Laterite")
        assert row.material_used == "Laterite"

    def test_ignores_unknown_keys(self) -> None:
        row = CategoryRow.model_validate({"Typology": "Villa", "Confidence": "high"})
        assert row.typology == "Villa"


class TestGeoFactors:
    def test_numeric_strings_are_coerced(self) -> None:
        geo = GeoFactors.model_validate({"city_growth_5y_percent": "12.5"})
        assert geo.city_growth_5y_percent == 12.5

    def test_metrics_default_to_none(self) -> None:
        assert GeoFactors().comparable_properties_count is None


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class TestResourcePlanInput:
    def test_defaults(self) -> None:
        site = ResourcePlanInput()
        assert site.stage == Stage.PLANNING
        assert site.scale == "Low-rise"
        assert site.advanced_recommendations == []

    def test_progress_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResourcePlanInput(progress_value=120)

    def test_unknown_stage_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResourcePlanInput.model_validate({"stage": "Demolition"})

    def test_from_payload_wraps_validation_error(self) -> None:
        with pytest.raises(InputValidationError, match="resource plan input"):
            ResourcePlanInput.from_payload({"progress_value": -5})

    def test_from_payload_nested_records(self) -> None:
        site = ResourcePlanInput.from_payload(
            {
                "stage": "Services",
                "category": {"Typology": "Apartment", "Style": "Modern"},
                "geo": {"climate_zone": "hot arid"},
            }
        )
        assert site.category is not None
        assert site.category.style == "Modern"
        assert site.geo is not None
        assert site.geo.climate_zone == "hot arid"


class TestValuationInput:
    def test_from_payload(self) -> None:
        site = ValuationInput.from_payload(
            {"stage_label": "Finishing", "geo_status": "exif", "progress_value": 85}
        )
        assert site.stage_label == Stage.FINISHING

    def test_from_payload_rejects_bad_geo_status(self) -> None:
        with pytest.raises(InputValidationError, match="valuation input"):
            ValuationInput.from_payload({"geo_status": "satellite"})


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class TestValueBand:
    def test_valid_band(self) -> None:
        band = ValueBand(base=100_000, low=80_000, high=120_000)
        assert band.low <= band.base <= band.high

    def test_low_above_base_rejected(self) -> None:
        with pytest.raises(ValidationError, match="low <= base <= high"):
            ValueBand(base=100_000, low=110_000, high=120_000)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ValueBand(base=0, low=-1, high=10)


class TestResolvedTypology:
    def test_base_must_be_below_max(self) -> None:
        with pytest.raises(ValidationError, match="base_rate must be below max_rate"):
            ResolvedTypology(
                key="Broken", market_class=MarketClass.RESIDENTIAL,
                basis=PricingBasis.BUILT_UP, base_rate=500, max_rate=500,
                source=TypologySource.ALIAS,
            )


class TestResourcePlanOutput:
    def test_cost_rollups(self) -> None:
        plan = _plan_output()
        assert plan.labor_cost_total == pytest.approx(2_200.0)
        assert plan.machinery_cost_total == pytest.approx(2_280.0)
        assert plan.material_cost_total == pytest.approx(3_996.0)
        assert plan.total_cost == pytest.approx(8_476.0)

    def test_list_cap_enforced(self) -> None:
        with pytest.raises(ValidationError):
            ResourcePlanOutput(
                progress_value=0,
                labor_availability=Availability.LOW,
                labor=[], machinery=[], materials=[], paints=[],
                components=["a", "b", "c", "d", "e"],
            )

    def test_summary_dict(self) -> None:
        summary = _plan_output().to_summary_dict()
        assert summary["headcount"] == 6
        assert summary["labor_availability"] == "Medium"
        assert summary["total_cost_formatted"] == "$8,476.00"
        assert summary["paint_lots_acquired"] == "1 of 2"
        assert summary["top_insight"] == "Construction focus: keep the pour cycle."

    def test_summary_without_insights(self) -> None:
        plan = _plan_output().model_copy(update={"construction_insights": []})
        assert plan.to_summary_dict()["top_insight"] is None


class TestValuationResult:
    def test_summary_dict(self) -> None:
        summary = _valuation_result().to_summary_dict()
        assert summary["property_range_formatted"] == "$5.9M - $9.0M"
        assert summary["confidence"] == 80
        assert summary["confidence_label"] == "high"
        assert summary["spread_formatted"] == "16%"
        assert summary["typology"] == "Apartment"
        assert summary["market_class"] == "Residential"
        assert summary["num_warnings"] == 1

    @pytest.mark.parametrize(
        ("confidence", "label"),
        [(92, "high"), (75, "high"), (74, "medium"), (50, "medium"), (49, "low")],
    )
    def test_confidence_label(self, confidence: float, label: str) -> None:
        result = _valuation_result().model_copy(update={"confidence": confidence})
        assert result.to_summary_dict()["confidence_label"] == label

    def test_json_round_trip(self) -> None:
        result = _valuation_result()
        restored = ValuationResult.model_validate_json(result.model_dump_json())
        assert restored == result
