"""Domain models for the Sitescope estimation engines."""

from sitescope.models.enums import (
    Availability,
    DensityBand,
    GeoStatus,
    MarketClass,
    PaintStatus,
    PricingBasis,
    ProjectStatus,
    Scale,
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

__all__ = [
    "Availability",
    "CategoryRow",
    "DensityBand",
    "GeoFactors",
    "GeoStatus",
    "LaborRequirement",
    "MachineryRequirement",
    "MarketClass",
    "MaterialRequirement",
    "PaintRequirement",
    "PaintStatus",
    "PricingBasis",
    "ProjectStatus",
    "ResolvedTypology",
    "ResourcePlanInput",
    "ResourcePlanOutput",
    "Scale",
    "Stage",
    "StageBucket",
    "TypologySource",
    "ValuationInput",
    "ValuationMetrics",
    "ValuationResult",
    "ValueBand",
]
