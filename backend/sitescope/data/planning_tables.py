"""Coefficient tables for the resource planning engine.

All tables are frozen. A surrounding service that wants to hot-reload
them builds a new :class:`PlanningTables` and a new planner around it.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sitescope.data.location_signals import (
    DEFAULT_LOCATION_COST_INDEX,
    LOCATION_COST_TIERS,
)
from sitescope.exceptions import TuningError
from sitescope.models.enums import Scale, Stage, StageBucket

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_S = Stage


class LaborSpec(BaseModel):
    """A trade with its base crew size and day rate (national average)."""

    model_config = ConfigDict(frozen=True)

    role: str
    key: str
    base: int = Field(ge=1)
    daily_rate_usd: float = Field(gt=0)


class MachinerySpec(BaseModel):
    """A machine type tagged with the stage bucket it mainly serves."""

    model_config = ConfigDict(frozen=True)

    machine: str
    base_units: int = Field(ge=1)
    hourly_rate_usd: float = Field(gt=0)
    stage_key: StageBucket


class MaterialSpec(BaseModel):
    """A material line with its whole-project base quantity."""

    model_config = ConfigDict(frozen=True)

    item: str
    base_quantity: float = Field(gt=0)
    unit: str
    unit_cost_usd: float = Field(gt=0)


class PaintZoneSpec(BaseModel):
    """A finish zone. Climate-sensitive zones take their shade from the climate rules."""

    model_config = ConfigDict(frozen=True)

    zone: str
    shade: str
    color_code: str
    base_liters: float = Field(gt=0)
    climate_sensitive: bool = False


class ShadeRule(BaseModel):
    """Exterior shade chosen when the climate text contains any of ``terms``."""

    model_config = ConfigDict(frozen=True)

    terms: list[str]
    shade: str
    color_code: str


class LocationCostTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    multiplier: float = Field(gt=0)
    terms: list[str]


class PlanningTables(BaseModel):
    """Every tunable coefficient the resource planner reads."""

    model_config = ConfigDict(frozen=True)

    scale_factors: dict[str, float]
    default_scale_factor: float = 1.0
    stage_pressure: dict[Stage, float]
    role_stage_factors: dict[str, dict[Stage, float]]
    labor_specs: list[LaborSpec] = Field(min_length=1)
    machinery_specs: list[MachinerySpec] = Field(min_length=1)
    material_specs: list[MaterialSpec] = Field(min_length=1)
    paint_zones: list[PaintZoneSpec] = Field(min_length=1)
    exterior_shades: list[ShadeRule]
    default_exterior_shade: ShadeRule
    location_cost_tiers: list[LocationCostTier]
    default_location_cost_index: float = DEFAULT_LOCATION_COST_INDEX
    risky_terrain_terms: list[str]
    extreme_climate_terms: list[str]
    scarce_roles: list[str] = Field(default_factory=list)
    scarce_materials: list[str] = Field(default_factory=list)
    scarce_machine_terms: list[str] = Field(default_factory=list)


DEFAULT_PLANNING_TABLES = PlanningTables(
    scale_factors={
        Scale.LOW_RISE: 1.0,
        Scale.MID_RISE: 1.8,
        Scale.HIGH_RISE: 3.4,
        Scale.LARGE_SITE: 4.6,
    },
    stage_pressure={
        _S.PLANNING: 1.0,
        _S.FOUNDATION: 0.94,
        _S.STRUCTURE: 0.8,
        _S.SERVICES: 0.6,
        _S.FINISHING: 0.4,
        _S.COMPLETED: 0.15,
    },
    # Share of each trade's peak crew needed at each stage.
    role_stage_factors={
        "architect": {
            _S.PLANNING: 1.0, _S.FOUNDATION: 0.8, _S.STRUCTURE: 0.6,
            _S.SERVICES: 0.5, _S.FINISHING: 0.4, _S.COMPLETED: 0.2,
        },
        "engineer": {
            _S.PLANNING: 0.8, _S.FOUNDATION: 1.0, _S.STRUCTURE: 1.0,
            _S.SERVICES: 0.9, _S.FINISHING: 0.7, _S.COMPLETED: 0.2,
        },
        "mason": {
            _S.PLANNING: 0.25, _S.FOUNDATION: 1.0, _S.STRUCTURE: 1.0,
            _S.SERVICES: 0.65, _S.FINISHING: 0.35, _S.COMPLETED: 0.08,
        },
        "carpenter": {
            _S.PLANNING: 0.2, _S.FOUNDATION: 0.5, _S.STRUCTURE: 0.95,
            _S.SERVICES: 0.95, _S.FINISHING: 0.75, _S.COMPLETED: 0.1,
        },
        "electrician": {
            _S.PLANNING: 0.1, _S.FOUNDATION: 0.2, _S.STRUCTURE: 0.45,
            _S.SERVICES: 1.0, _S.FINISHING: 0.9, _S.COMPLETED: 0.1,
        },
        "plumber": {
            _S.PLANNING: 0.1, _S.FOUNDATION: 0.2, _S.STRUCTURE: 0.45,
            _S.SERVICES: 1.0, _S.FINISHING: 0.85, _S.COMPLETED: 0.1,
        },
        "painter": {
            _S.PLANNING: 0.05, _S.FOUNDATION: 0.1, _S.STRUCTURE: 0.2,
            _S.SERVICES: 0.45, _S.FINISHING: 1.0, _S.COMPLETED: 0.2,
        },
        "steel_fixer": {
            _S.PLANNING: 0.15, _S.FOUNDATION: 1.0, _S.STRUCTURE: 1.0,
            _S.SERVICES: 0.25, _S.FINISHING: 0.08, _S.COMPLETED: 0.05,
        },
    },
    labor_specs=[
        LaborSpec(role="Architect", key="architect", base=1, daily_rate_usd=220),
        LaborSpec(role="Site Engineer", key="engineer", base=2, daily_rate_usd=140),
        LaborSpec(role="Masons", key="mason", base=8, daily_rate_usd=45),
        LaborSpec(role="Carpenters", key="carpenter", base=5, daily_rate_usd=52),
        LaborSpec(role="Electricians", key="electrician", base=4, daily_rate_usd=58),
        LaborSpec(role="Plumbers", key="plumber", base=3, daily_rate_usd=56),
        LaborSpec(role="Painters", key="painter", base=4, daily_rate_usd=40),
        LaborSpec(role="Steel Fixers", key="steel_fixer", base=4, daily_rate_usd=48),
    ],
    machinery_specs=[
        MachinerySpec(machine="Excavator", base_units=1, hourly_rate_usd=95,
                      stage_key=StageBucket.FOUNDATION),
        MachinerySpec(machine="Concrete Pump", base_units=1, hourly_rate_usd=125,
                      stage_key=StageBucket.STRUCTURE),
        MachinerySpec(machine="Tower Crane / Hoist", base_units=1, hourly_rate_usd=180,
                      stage_key=StageBucket.STRUCTURE),
        MachinerySpec(machine="Rebar Cutter + Bender", base_units=1, hourly_rate_usd=38,
                      stage_key=StageBucket.STRUCTURE),
        MachinerySpec(machine="Scaffolding Set", base_units=1, hourly_rate_usd=22,
                      stage_key=StageBucket.SERVICES),
        MachinerySpec(machine="Boom Lift", base_units=1, hourly_rate_usd=72,
                      stage_key=StageBucket.SERVICES),
        MachinerySpec(machine="Paint Sprayer Rig", base_units=1, hourly_rate_usd=28,
                      stage_key=StageBucket.FINISHING),
    ],
    material_specs=[
        MaterialSpec(item="Cement", base_quantity=900, unit="bags", unit_cost_usd=7.4),
        MaterialSpec(item="Bricks", base_quantity=78_000, unit="nos", unit_cost_usd=0.11),
        MaterialSpec(item="Steel (TMT/Rebar)", base_quantity=62, unit="ton", unit_cost_usd=740),
        MaterialSpec(item="River Sand", base_quantity=320, unit="ton", unit_cost_usd=24),
        MaterialSpec(item="Aggregate 20mm", base_quantity=430, unit="ton", unit_cost_usd=30),
        MaterialSpec(item="Screws", base_quantity=24_000, unit="nos", unit_cost_usd=0.05),
        MaterialSpec(item="MS Plates", base_quantity=680, unit="nos", unit_cost_usd=7.5),
        MaterialSpec(item="Door Hinges", base_quantity=360, unit="nos", unit_cost_usd=2.8),
        MaterialSpec(item="Windows", base_quantity=52, unit="nos", unit_cost_usd=115),
        MaterialSpec(item="Joint Sealant", base_quantity=540, unit="cartridges",
                     unit_cost_usd=6.2),
        MaterialSpec(item="Plumbing Pipes", base_quantity=1500, unit="m", unit_cost_usd=4.1),
        MaterialSpec(item="Electrical Cables", base_quantity=2600, unit="m", unit_cost_usd=1.7),
    ],
    # Order matters: later zones need less progress to count as acquired.
    paint_zones=[
        PaintZoneSpec(zone="Exterior", shade="Stone Beige", color_code="#D5C3A5",
                      base_liters=240, climate_sensitive=True),
        PaintZoneSpec(zone="Interior Walls", shade="Warm Off-White", color_code="#F3EEE2",
                      base_liters=190),
        PaintZoneSpec(zone="Utility Areas", shade="Service Grey", color_code="#9CA3AF",
                      base_liters=90),
        PaintZoneSpec(zone="Metalworks", shade="Anti-Rust Red Oxide", color_code="#7E3A32",
                      base_liters=55),
    ],
    exterior_shades=[
        ShadeRule(terms=["coastal", "humid"], shade="Salt Mist Grey", color_code="#B7C0C8"),
        ShadeRule(terms=["hot", "arid", "desert"], shade="Solar Reflect White",
                  color_code="#F5F2E8"),
        ShadeRule(terms=["cold", "snow"], shade="Thermal Taupe", color_code="#B29B88"),
    ],
    default_exterior_shade=ShadeRule(terms=[], shade="Stone Beige", color_code="#D5C3A5"),
    location_cost_tiers=[
        LocationCostTier(name=name, multiplier=multiplier, terms=list(terms))
        for name, multiplier, terms in LOCATION_COST_TIERS
    ],
    risky_terrain_terms=[
        "slope", "steep", "hill", "marsh", "flood", "coastal", "landslide", "soft",
    ],
    extreme_climate_terms=[
        "cyclone", "storm", "extreme", "heat", "cold", "humid", "monsoon", "snow",
    ],
    scarce_roles=["Electricians", "Plumbers"],
    scarce_materials=["Windows", "Joint Sealant"],
    scarce_machine_terms=["Crane"],
)


def load_planning_tables(path: Path) -> PlanningTables:
    """Load planning tables from a JSON file.

    Keys absent from the file keep their default tables.

    Raises:
        TuningError: If the file cannot be read or does not validate.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Could not read planning tables from {path}"
        raise TuningError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Planning tables in {path} must be a JSON object"
        raise TuningError(msg)

    merged = DEFAULT_PLANNING_TABLES.model_dump()
    merged.update(data)
    try:
        tables = PlanningTables.model_validate(merged)
    except ValidationError as exc:
        msg = f"Planning tables in {path} are invalid: {exc.error_count()} error(s)"
        raise TuningError(msg) from exc
    logger.info("Loaded planning tables from %s", path)
    return tables
