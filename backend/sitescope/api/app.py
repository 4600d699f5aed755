"""HTTP surface over the resource planner and valuation engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from sitescope import __version__
from sitescope.config import configure_logging, load_settings
from sitescope.exceptions import SitescopeError
from sitescope.models.resource_plan import ResourcePlanInput  # noqa: TCH001 (FastAPI resolves at runtime)
from sitescope.models.valuation import ValuationInput  # noqa: TCH001

if TYPE_CHECKING:
    from sitescope.planner import ResourcePlanner
    from sitescope.valuation import ValuationEngine

logger = logging.getLogger(__name__)

SAMPLE_SITE: dict[str, Any] = {
    "status": "Under Construction",
    "stage": "Structure",
    "progress_value": 40,
    "project_type": "Residential",
    "scale": "Mid-rise",
    "construction_type": "RCC frame",
    "location": "Andheri West, Mumbai",
    "note": "Seven-storey apartment block near the metro line",
    "category": {
        "Category": "Residential",
        "Typology": "Apartment",
        "Style": "Contemporary",
        "RoofType": "Flat RCC slab",
        "MaterialUsed": "Concrete and brick infill",
    },
    "geo": {
        "terrain": "Flat urban plot",
        "soil_condition": "Firm alluvial",
        "climate_zone": "Tropical humid coastal",
        "population_density": "High",
        "master_plan_zone": "Residential",
        "policy_posture": "pro-residential",
        "comparable_activity": "high",
        "comparable_properties_count": 24,
        "city_growth_5y_percent": 11,
        "property_growth_percent": 9,
        "land_growth_percent": 12,
        "property_age_years": 0,
        "resale_value_percent": 104,
        "investment_roi_percent": 7,
    },
}


def _valuation_payload(site: dict[str, Any]) -> dict[str, Any]:
    return {
        "project_type": site["project_type"],
        "scale": site["scale"],
        "status": site["status"],
        "stage_label": site["stage"],
        "progress_value": site["progress_value"],
        "location": site["location"],
        "note": site["note"],
        "geo_status": "gps",
        "category_row": site["category"],
        "geo_factors": site["geo"],
    }


def create_app(
    *,
    planner: ResourcePlanner | None = None,
    valuation_engine: ValuationEngine | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    planner
        Optional pre-built resource planner for dependency injection
        (e.g. tests). If not provided, one is created via
        create_default_planner on first request.
    valuation_engine
        Optional pre-built valuation engine. If not provided, one is
        created via create_default_valuation_engine on first request.
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Sitescope", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject mocks
    app.state.planner = planner
    app.state.valuation_engine = valuation_engine

    def _get_planner() -> ResourcePlanner:
        pl: ResourcePlanner | None = app.state.planner
        if pl is not None:
            return pl
        from sitescope.factory import create_default_planner

        pl = create_default_planner(settings.planning_tables_path)
        app.state.planner = pl
        return pl

    def _get_valuation_engine() -> ValuationEngine:
        eng: ValuationEngine | None = app.state.valuation_engine
        if eng is not None:
            return eng
        from sitescope.factory import create_default_valuation_engine

        eng = create_default_valuation_engine(settings.valuation_tuning_path)
        app.state.valuation_engine = eng
        return eng

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    # ------------------------------------------------------------------
    # POST /api/resource-plan
    # ------------------------------------------------------------------

    @app.post("/api/resource-plan")
    def resource_plan(site: ResourcePlanInput) -> dict[str, Any]:
        try:
            plan = _get_planner().build(site)
        except SitescopeError as exc:
            logger.exception("Resource planning failed")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return {
            "plan": plan.model_dump(mode="json"),
            "summary": plan.to_summary_dict(),
        }

    # ------------------------------------------------------------------
    # POST /api/valuation
    # ------------------------------------------------------------------

    @app.post("/api/valuation")
    def valuation(site: ValuationInput) -> dict[str, Any]:
        try:
            result = _get_valuation_engine().compute(site)
        except SitescopeError as exc:
            logger.exception("Valuation failed")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return {
            "valuation": result.model_dump(mode="json"),
            "summary": result.to_summary_dict(),
        }

    # ------------------------------------------------------------------
    # GET /api/sample-assessment
    # ------------------------------------------------------------------

    @app.get("/api/sample-assessment")
    def sample_assessment() -> dict[str, Any]:
        try:
            plan = _get_planner().build(ResourcePlanInput.model_validate(SAMPLE_SITE))
            result = _get_valuation_engine().compute(
                ValuationInput.model_validate(_valuation_payload(SAMPLE_SITE))
            )
        except SitescopeError as exc:
            logger.exception("Sample assessment failed")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return {
            "site": SAMPLE_SITE,
            "plan": plan.model_dump(mode="json"),
            "plan_summary": plan.to_summary_dict(),
            "valuation": result.model_dump(mode="json"),
            "valuation_summary": result.to_summary_dict(),
        }

    return app
