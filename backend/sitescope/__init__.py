"""Sitescope construction-site estimation engines.

Usage::

    from sitescope import create_default_planner, create_default_valuation_engine
    from sitescope import ResourcePlanInput, ValuationInput

    plan = create_default_planner().build(ResourcePlanInput(stage="Structure"))
    result = create_default_valuation_engine().compute(ValuationInput(location="Pune"))
"""

__version__ = "0.1.0"

from sitescope.data.planning_tables import PlanningTables, load_planning_tables
from sitescope.data.repository import ValuationDataRepository
from sitescope.data.valuation_tuning import ValuationTuning, load_valuation_tuning
from sitescope.exceptions import InputValidationError, SitescopeError, TuningError
from sitescope.factory import create_default_planner, create_default_valuation_engine
from sitescope.models.enums import (
    Availability,
    GeoStatus,
    MarketClass,
    PaintStatus,
    PricingBasis,
    ProjectStatus,
    Scale,
    Stage,
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
from sitescope.planner import ResourcePlanner, build_resource_plan
from sitescope.valuation import ValuationEngine, compute_valuation

__all__ = [
    "Availability",
    "CategoryRow",
    "GeoFactors",
    "GeoStatus",
    "InputValidationError",
    "LaborRequirement",
    "MachineryRequirement",
    "MarketClass",
    "MaterialRequirement",
    "PaintRequirement",
    "PaintStatus",
    "PlanningTables",
    "PricingBasis",
    "ProjectStatus",
    "ResolvedTypology",
    "ResourcePlanInput",
    "ResourcePlanOutput",
    "ResourcePlanner",
    "Scale",
    "SitescopeError",
    "Stage",
    "TuningError",
    "ValuationDataRepository",
    "ValuationEngine",
    "ValuationInput",
    "ValuationMetrics",
    "ValuationResult",
    "ValuationTuning",
    "ValueBand",
    "__version__",
    "build_resource_plan",
    "compute_valuation",
    "create_default_planner",
    "create_default_valuation_engine",
    "load_planning_tables",
    "load_valuation_tuning",
]
