"""Factory functions for creating pre-configured engine instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sitescope.config import load_settings
from sitescope.data.planning_tables import DEFAULT_PLANNING_TABLES, load_planning_tables
from sitescope.data.repository import ValuationDataRepository
from sitescope.data.seed import DEFAULT_VALUATION_TUNING
from sitescope.data.valuation_tuning import load_valuation_tuning
from sitescope.planner import ResourcePlanner
from sitescope.valuation import ValuationEngine

if TYPE_CHECKING:
    from pathlib import Path


def create_default_planner(tables_path: Path | None = None) -> ResourcePlanner:
    """Create a ResourcePlanner wired up with planning tables.

    Uses ``tables_path`` when given, else ``SITESCOPE_PLANNING_TABLES``,
    else the built-in tables.

    Raises:
        TuningError: If a tables file is configured but cannot be loaded.

    Example::

        from sitescope import create_default_planner, ResourcePlanInput

        planner = create_default_planner()
        plan = planner.build(ResourcePlanInput(stage="Structure", progress_value=40))
    """
    path = tables_path or load_settings().planning_tables_path
    tables = load_planning_tables(path) if path else DEFAULT_PLANNING_TABLES
    return ResourcePlanner(tables)


def create_default_valuation_engine(tuning_path: Path | None = None) -> ValuationEngine:
    """Create a ValuationEngine wired up with valuation tuning.

    This is the recommended way to create a ValuationEngine. It wires a
    ValuationDataRepository around the tuning document named by
    ``tuning_path`` (or ``SITESCOPE_VALUATION_TUNING``), falling back to
    the built-in seed tuning, so callers don't need to understand the
    internal wiring.

    Raises:
        TuningError: If a tuning file is configured but cannot be loaded.
    """
    path = tuning_path or load_settings().valuation_tuning_path
    tuning = load_valuation_tuning(path) if path else DEFAULT_VALUATION_TUNING
    return ValuationEngine(ValuationDataRepository(tuning))
