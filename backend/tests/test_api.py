"""Tests for the FastAPI application endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from sitescope import __version__
from sitescope.api.app import SAMPLE_SITE, create_app
from sitescope.exceptions import TuningError
from sitescope.models.resource_plan import ResourcePlanInput, ResourcePlanOutput
from sitescope.models.valuation import ValuationInput

# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------


def _create_test_client(
    planner: object | None = None,
    valuation_engine: object | None = None,
) -> TestClient:
    app = create_app(
        planner=planner,  # type: ignore[arg-type]
        valuation_engine=valuation_engine,  # type: ignore[arg-type]
    )
    return TestClient(app)


def _plan_body() -> dict[str, object]:
    return {
        "status": "Under Construction",
        "stage": "Structure",
        "progress_value": 40,
        "project_type": "Residential",
        "scale": "Mid-rise",
        "location": "Mumbai",
        "category": {"Typology": "Apartment", "Style": "Contemporary"},
        "geo": {"population_density": "High", "climate_zone": "Temperate"},
    }


def _valuation_body() -> dict[str, object]:
    return {
        "project_type": "Residential",
        "scale": "Mid-rise",
        "status": "Under Construction",
        "stage_label": "Structure",
        "progress_value": 40,
        "location": "Baner, Pune",
        "geo_status": "gps",
        "category_row": {"Category": "Residential", "Typology": "Apartment"},
        "geo_factors": {
            "population_density": "Medium",
            "master_plan_zone": "Residential",
            "comparable_properties_count": 20,
            "city_growth_5y_percent": 8,
            "property_growth_percent": 9,
            "land_growth_percent": 10,
            "property_age_years": 5,
            "resale_value_percent": 100,
            "investment_roi_percent": 8,
        },
    }


# ---------------------------------------------------------------------------
# GET /api/health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self) -> None:
        response = _create_test_client().get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# POST /api/resource-plan
# ---------------------------------------------------------------------------


class TestResourcePlanEndpoint:
    def test_returns_plan_and_summary(self) -> None:
        response = _create_test_client().post("/api/resource-plan", json=_plan_body())

        assert response.status_code == 200
        data = response.json()
        assert len(data["plan"]["labor"]) == 8
        assert len(data["plan"]["machinery"]) == 7
        assert len(data["plan"]["materials"]) == 12
        assert data["plan"]["labor_availability"] == "High"
        assert data["summary"]["location_cost_index"] == 1.14
        assert data["summary"]["total_cost_formatted"].startswith("$")

    def test_minimal_body_uses_defaults(self) -> None:
        response = _create_test_client().post("/api/resource-plan", json={})
        assert response.status_code == 200
        assert response.json()["plan"]["progress_value"] == 0

    def test_progress_out_of_range_is_422(self) -> None:
        body = _plan_body() | {"progress_value": 150}
        response = _create_test_client().post("/api/resource-plan", json=body)
        assert response.status_code == 422

    def test_unknown_stage_is_422(self) -> None:
        body = _plan_body() | {"stage": "Demolition"}
        response = _create_test_client().post("/api/resource-plan", json=body)
        assert response.status_code == 422

    def test_planner_receives_validated_input(self) -> None:
        real = _create_test_client().post("/api/resource-plan", json=_plan_body()).json()
        mock_planner = MagicMock()
        mock_planner.build.return_value = ResourcePlanOutput.model_validate(real["plan"])
        client = _create_test_client(planner=mock_planner)

        client.post("/api/resource-plan", json=_plan_body())

        site = mock_planner.build.call_args.args[0]
        assert isinstance(site, ResourcePlanInput)
        assert site.category is not None
        assert site.category.typology == "Apartment"

    def test_engine_error_is_500(self) -> None:
        mock_planner = MagicMock()
        mock_planner.build.side_effect = TuningError("Planning tables are invalid")
        client = _create_test_client(planner=mock_planner)

        response = client.post("/api/resource-plan", json=_plan_body())

        assert response.status_code == 500
        assert response.json()["detail"] == "Planning tables are invalid"


# ---------------------------------------------------------------------------
# POST /api/valuation
# ---------------------------------------------------------------------------


class TestValuationEndpoint:
    def test_returns_valuation_and_summary(self) -> None:
        response = _create_test_client().post("/api/valuation", json=_valuation_body())

        assert response.status_code == 200
        data = response.json()
        assert data["valuation"]["typology"]["key"] == "Apartment"
        assert data["valuation"]["warnings"] == []
        assert data["summary"]["confidence"] == 80
        assert data["summary"]["confidence_label"] == "high"
        assert data["summary"]["spread_formatted"] == "16%"

    def test_band_ordering_in_payload(self) -> None:
        data = _create_test_client().post("/api/valuation", json=_valuation_body()).json()
        for name in ("property_value", "land_value", "project_value"):
            band = data["valuation"][name]
            assert band["low"] <= band["base"] <= band["high"]

    def test_bad_geo_status_is_422(self) -> None:
        body = _valuation_body() | {"geo_status": "satellite"}
        response = _create_test_client().post("/api/valuation", json=body)
        assert response.status_code == 422

    def test_engine_receives_validated_input(self) -> None:
        mock_engine = MagicMock()
        mock_engine.compute.side_effect = TuningError("Valuation tuning is invalid")
        client = _create_test_client(valuation_engine=mock_engine)

        response = client.post("/api/valuation", json=_valuation_body())

        assert response.status_code == 500
        site = mock_engine.compute.call_args.args[0]
        assert isinstance(site, ValuationInput)
        assert site.geo_factors is not None
        assert site.geo_factors.comparable_properties_count == 20


# ---------------------------------------------------------------------------
# GET /api/sample-assessment
# ---------------------------------------------------------------------------


class TestSampleAssessment:
    def test_sample_runs_both_engines(self) -> None:
        response = _create_test_client().get("/api/sample-assessment")

        assert response.status_code == 200
        data = response.json()
        assert data["site"] == SAMPLE_SITE
        assert data["plan_summary"]["location_cost_index"] == 1.14
        # humid climate lowers High density to Medium
        assert data["plan_summary"]["labor_availability"] == "Medium"
        assert data["valuation_summary"]["typology"] == "Apartment"
        assert data["valuation_summary"]["market_class"] == "Residential"

    def test_sample_engine_error_is_500(self) -> None:
        mock_engine = MagicMock()
        mock_engine.compute.side_effect = TuningError("Valuation tuning is invalid")
        client = _create_test_client(valuation_engine=mock_engine)

        response = client.get("/api/sample-assessment")

        assert response.status_code == 500
        assert "invalid" in response.json()["detail"]
