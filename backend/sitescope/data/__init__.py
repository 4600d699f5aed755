"""Coefficient tables and lookups for the Sitescope engines."""

from sitescope.data.planning_tables import (
    DEFAULT_PLANNING_TABLES,
    PlanningTables,
    load_planning_tables,
)
from sitescope.data.repository import ValuationDataRepository, infer_market_class
from sitescope.data.seed import DEFAULT_VALUATION_TUNING
from sitescope.data.valuation_tuning import (
    ValuationTuning,
    load_valuation_tuning,
    parse_valuation_tuning,
)

__all__ = [
    "DEFAULT_PLANNING_TABLES",
    "DEFAULT_VALUATION_TUNING",
    "PlanningTables",
    "ValuationDataRepository",
    "ValuationTuning",
    "infer_market_class",
    "load_planning_tables",
    "load_valuation_tuning",
    "parse_valuation_tuning",
]
