"""Resource planning engine for the Sitescope site assessment library.

The ResourcePlanner turns a site description into the resources still
needed to finish the project:

1. **Scale factor** — Map the scale label to a multiplier (unknown labels → 1).
2. **Remaining share** — Fraction of work left, from progress (fixed 0.08 once
   the project reports as completed).
3. **Intensity** — One scalar combining scale, remaining share, and stage
   pressure that drives every headcount and quantity.
4. **Location cost index** — First matching cost tier on the location text.
5. **Availability** — Density-based labor availability, lowered one level on
   risky terrain or an extreme climate, then adjusted per trade, machine, and
   material.
6. **Itemized tables** — Labor (8 trades), machinery (7 machines), materials
   (12 lines), and a 4-zone paint palette.
7. **Guidance** — Short component, technique, vernacular-material and insight
   lists, each capped at four entries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sitescope.data.planning_tables import DEFAULT_PLANNING_TABLES, PlanningTables
from sitescope.formatting import range_label
from sitescope.models.enums import (
    Availability,
    PaintStatus,
    ProjectStatus,
    Scale,
    Stage,
    StageBucket,
)
from sitescope.models.resource_plan import (
    LaborRequirement,
    MachineryRequirement,
    MaterialRequirement,
    PaintRequirement,
    ResourcePlanInput,
    ResourcePlanOutput,
)
from sitescope.text import (
    clamp,
    dedupe,
    first_present,
    includes_any,
    normalize,
    round_half_up,
)

if TYPE_CHECKING:
    from sitescope.data.planning_tables import ShadeRule
    from sitescope.models.site import GeoFactors

logger = logging.getLogger(__name__)

COMPLETED_REMAINING_SHARE = 0.08
_MAX_LIST_ITEMS = 4

# (location terms, climate terms, materials), checked in order.
_VERNACULAR_RULES: list[tuple[tuple[str, ...], tuple[str, ...], list[str]]] = [
    (
        ("kerala", "goa"),
        ("coastal",),
        ["Laterite stone blocks", "Mangalore clay tiles", "Lime-cement breathable plaster"],
    ),
    (
        ("rajasthan",),
        ("desert", "hot"),
        [
            "Lime plaster with reflective finish",
            "Jodhpur sandstone accents",
            "Terracotta jaali panels",
        ],
    ),
    (
        ("himachal", "uttarakhand"),
        ("cold",),
        [
            "Local stone masonry",
            "Timber framing inserts",
            "Insulated mud-lime composite blocks",
        ],
    ),
]
_DEFAULT_VERNACULAR = ["Fly ash bricks", "AAC blocks", "Bamboo-laminated shading panels"]


class ResourcePlanner:
    """Builds a ResourcePlanOutput from a ResourcePlanInput.

    Args:
        tables: The coefficient tables (scale factors, stage pressure,
            trade/machine/material specs, paint zones, location tiers).

    Example::

        from sitescope.data.planning_tables import DEFAULT_PLANNING_TABLES

        planner = ResourcePlanner(DEFAULT_PLANNING_TABLES)
        plan = planner.build(site)
    """

    def __init__(self, tables: PlanningTables) -> None:
        self._tables = tables

    def build(self, site: ResourcePlanInput) -> ResourcePlanOutput:
        """Produce the remaining-resource plan for a site.

        Never raises for a validated input: unknown scale labels and
        missing geo or category data fall back to documented defaults.
        """
        tables = self._tables
        geo = site.geo

        # 1. Scale, remaining work, and stage pressure
        scale_factor = tables.scale_factors.get(site.scale, tables.default_scale_factor)
        if site.status == ProjectStatus.COMPLETED:
            remaining_share = COMPLETED_REMAINING_SHARE
        else:
            remaining_share = clamp(
                (100 - site.progress_value) / 100, COMPLETED_REMAINING_SHARE, 1
            )
        stage_pressure = tables.stage_pressure.get(site.stage, 1.0)

        # 2. Intensity
        intensity = clamp(
            scale_factor * (remaining_share * 0.85 + stage_pressure * 0.4), 0.6, 6
        )

        # 3. Location cost and labor availability
        location_cost_index = self.location_cost_index(site.location)
        labor_availability = self.labor_availability(geo, site.location)

        logger.debug(
            "Resource plan: scale_factor=%s remaining_share=%.3f intensity=%.3f "
            "location_cost_index=%s",
            scale_factor,
            remaining_share,
            intensity,
            location_cost_index,
        )

        # 4. Itemized tables
        labor = self._labor(
            site.stage, intensity, remaining_share, scale_factor,
            location_cost_index, labor_availability,
        )
        machinery = self._machinery(
            site.stage, remaining_share, stage_pressure, scale_factor,
            location_cost_index, labor_availability,
        )
        materials = self._materials(
            site.location, remaining_share, scale_factor,
            location_cost_index, labor_availability,
        )
        paints = self._paints(
            geo.climate_zone if geo else None, site.progress_value, scale_factor
        )

        # 5. Qualitative guidance
        climate = normalize(geo.climate_zone if geo else None)
        terrain = normalize(geo.terrain if geo else None)
        soil = normalize(geo.soil_condition if geo else None)

        components = dedupe(
            [
                "Marine-grade aluminium windows with EPDM gaskets"
                if "coastal" in climate
                else "Powder-coated aluminium/uPVC windows with multi-point locks",
                "High-movement expansion joints with neoprene seals"
                if "slope" in terrain
                else "Standard movement joints with UV-stable sealants",
                "Raft slab shear connectors and settlement markers"
                if "soft" in soil
                else "Anchor plates and calibrated base plates",
                "SS304 hinges, lock plates, and corrosion-safe fasteners",
            ],
            _MAX_LIST_ITEMS,
        )

        techniques = dedupe(
            [
                "Core-first slip/jump form sequencing for vertical rise"
                if site.scale == Scale.HIGH_RISE
                else "Phased pour cards tied to bar-bending schedules",
                "MEP clash checks before enclosure and finish closure"
                if site.stage in (Stage.SERVICES, Stage.FINISHING)
                else "Mock-up driven quality signoff for each structural bay",
                "Two-layer waterproofing with membrane continuity checks"
                if includes_any(climate, ("coastal", "humid"))
                else "Thermal movement control with staged curing windows",
                "Daily procurement pull-plan synchronized with site execution",
            ],
            _MAX_LIST_ITEMS,
        )

        vernacular = vernacular_materials(site.location, climate)
        typology = first_present(site.category.typology if site.category else None, "inferred")
        buffer_days = max(7, round_half_up(12 * location_cost_index))
        special_requirements = dedupe(
            [
                f"Unique requirement: {site.project_type} typology ({typology}) needs "
                "phased completion package by stage.",
                f"Local requirement: source {vernacular[0]} and {vernacular[1]} from "
                "local vendors first to cut lead-time risk.",
                "Control requirement: maintain hold-point checks for windows, joints, "
                "hinges, and plate alignments before handover.",
                f"Procurement buffer: keep {range_label(buffer_days, 0.2, 3, 0)} days of "
                "critical stock for cement, steel, and fasteners.",
            ],
            _MAX_LIST_ITEMS,
        )

        construction_insights, procurement_insights, completion_insights = (
            self._insights(
                site, labor, materials, paints, components, techniques,
                vernacular, special_requirements, labor_availability,
            )
        )

        return ResourcePlanOutput(
            progress_value=site.progress_value,
            labor_availability=labor_availability,
            location_cost_index=location_cost_index,
            labor=labor,
            machinery=machinery,
            materials=materials,
            paints=paints,
            components=components,
            techniques=techniques,
            special_requirements=special_requirements,
            vernacular_materials=dedupe(vernacular, _MAX_LIST_ITEMS),
            construction_insights=construction_insights,
            procurement_insights=procurement_insights,
            completion_insights=completion_insights,
        )

    def location_cost_index(self, location: str) -> float:
        """Cost multiplier of the first tier whose terms appear in ``location``."""
        text = normalize(location)
        for tier in self._tables.location_cost_tiers:
            if includes_any(text, tier.terms):
                return tier.multiplier
        return self._tables.default_location_cost_index

    def labor_availability(self, geo: GeoFactors | None, location: str) -> Availability:
        density = normalize(geo.population_density if geo else None)
        place = normalize(location)

        if includes_any(density, ("high", "metro", "city")):
            availability = Availability.HIGH
        else:
            availability = Availability.MEDIUM
        if "low" in density or includes_any(place, ("rural", "village")):
            availability = Availability.LOW

        terrain = normalize(geo.terrain if geo else None)
        climate = normalize(geo.climate_zone if geo else None)
        if includes_any(terrain, self._tables.risky_terrain_terms) or includes_any(
            climate, self._tables.extreme_climate_terms
        ):
            availability = availability.shifted(-1)
        return availability

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _labor(
        self,
        stage: Stage,
        intensity: float,
        remaining_share: float,
        scale_factor: float,
        location_cost_index: float,
        base_availability: Availability,
    ) -> list[LaborRequirement]:
        rows: list[LaborRequirement] = []
        for spec in self._tables.labor_specs:
            factor = self._tables.role_stage_factors.get(spec.key, {}).get(stage, 0.0)
            required = max(1, round_half_up(spec.base * intensity * factor))
            days = max(
                3,
                round_half_up(8 + factor * 18 * remaining_share * (scale_factor * 0.85)),
            )
            availability = base_availability
            if spec.role in self._tables.scarce_roles:
                availability = availability.shifted(-1)
            rows.append(
                LaborRequirement(
                    role=spec.role,
                    required=required,
                    availability=availability,
                    daily_rate_usd=round(spec.daily_rate_usd * location_cost_index, 2),
                    estimated_days=days,
                    total_cost_usd=round(
                        required * spec.daily_rate_usd * days * location_cost_index, 2
                    ),
                )
            )
        return rows

    def _machinery(
        self,
        stage: Stage,
        remaining_share: float,
        stage_pressure: float,
        scale_factor: float,
        location_cost_index: float,
        base_availability: Availability,
    ) -> list[MachineryRequirement]:
        bucket = StageBucket.for_stage(stage)
        rows: list[MachineryRequirement] = []
        for spec in self._tables.machinery_specs:
            if spec.stage_key == bucket:
                boost = 1.0
            elif spec.stage_key == StageBucket.STRUCTURE and bucket == StageBucket.SERVICES:
                boost = 0.6
            else:
                boost = 0.45
            units = max(1, round_half_up(spec.base_units * clamp(scale_factor * boost, 1, 4)))
            hours = max(
                24,
                round_half_up(60 * remaining_share * stage_pressure * scale_factor * boost),
            )
            scarce = includes_any(spec.machine, self._tables.scarce_machine_terms)
            rows.append(
                MachineryRequirement(
                    machine=spec.machine,
                    units=units,
                    availability=base_availability.shifted(-1 if scarce else 0),
                    hourly_rate_usd=round(spec.hourly_rate_usd * location_cost_index, 2),
                    estimated_hours=hours,
                    total_cost_usd=round(
                        units * hours * spec.hourly_rate_usd * location_cost_index, 2
                    ),
                )
            )
        return rows

    def _materials(
        self,
        location: str,
        remaining_share: float,
        scale_factor: float,
        location_cost_index: float,
        base_availability: Availability,
    ) -> list[MaterialRequirement]:
        place = normalize(location)
        well_supplied = includes_any(place, ("port", "metro", "city"))
        rows: list[MaterialRequirement] = []
        for spec in self._tables.material_specs:
            floor = 1 if spec.unit == "ton" else 10
            quantity = max(
                floor, round_half_up(spec.base_quantity * scale_factor * remaining_share)
            )
            unit_cost = round(spec.unit_cost_usd * location_cost_index, 4)

            availability = base_availability
            if spec.item in self._tables.scarce_materials:
                availability = availability.shifted(-1)
            if well_supplied:
                availability = availability.shifted(1)

            rows.append(
                MaterialRequirement(
                    item=spec.item,
                    quantity=quantity,
                    unit=spec.unit,
                    availability=availability,
                    unit_cost_usd=unit_cost,
                    total_cost_usd=round(quantity * unit_cost, 2),
                )
            )
        return rows

    def _paints(
        self, climate_zone: str | None, progress_value: float, scale_factor: float
    ) -> list[PaintRequirement]:
        exterior = self._exterior_shade(normalize(climate_zone))
        rows: list[PaintRequirement] = []
        for index, zone in enumerate(self._tables.paint_zones):
            shade, color_code = zone.shade, zone.color_code
            if zone.climate_sensitive:
                shade, color_code = exterior.shade, exterior.color_code
            acquired = progress_value >= 70 - index * 8
            rows.append(
                PaintRequirement(
                    zone=zone.zone,
                    shade=shade,
                    color_code=color_code,
                    liters=round_half_up(zone.base_liters * scale_factor),
                    status=PaintStatus.ACQUIRED if acquired else PaintStatus.TO_PROCURE,
                )
            )
        return rows

    def _exterior_shade(self, climate: str) -> ShadeRule:
        for rule in self._tables.exterior_shades:
            if includes_any(climate, rule.terms):
                return rule
        return self._tables.default_exterior_shade

    def _insights(
        self,
        site: ResourcePlanInput,
        labor: list[LaborRequirement],
        materials: list[MaterialRequirement],
        paints: list[PaintRequirement],
        components: list[str],
        techniques: list[str],
        vernacular: list[str],
        special_requirements: list[str],
        labor_availability: Availability,
    ) -> tuple[list[str], list[str], list[str]]:
        """Build the construction, procurement, and completion insight lists.

        Prior-round recommendations are appended after the built-in
        construction insights, so they only surface while there is room.
        """
        advanced = [item.strip() for item in site.advanced_recommendations if item.strip()]
        core_workers = sum(row.required for row in labor)
        cement = next((row.quantity for row in materials if row.item == "Cement"), 0)
        acquired_lots = sum(1 for paint in paints if paint.status == PaintStatus.ACQUIRED)
        style = first_present(site.category.style if site.category else None, "current")
        system = site.construction_type or "project"
        geo = site.geo
        terrain = first_present(geo.terrain if geo else None, "terrain inferred")
        soil = first_present(geo.soil_condition if geo else None, "soil inferred")
        progress = round_half_up(site.progress_value)

        construction = dedupe(
            [
                f"Construction focus: Stage {site.stage} at "
                f"{range_label(progress, 0.08, 0, 0)}% requires "
                f"{range_label(core_workers, 0.2, 1, 0)} core workers.",
                f"Completion focus: prioritize {components[0]} and {components[1]} "
                "before closeout.",
                f"Replicate: keep {style} style language with {system} construction system.",
                *advanced,
            ],
            _MAX_LIST_ITEMS,
        )

        procurement = dedupe(
            [
                f"Procurement focus: secure cement ({range_label(cement, 0.2, 10, 0)} bags) "
                "and steel first.",
                f"Pick: prefer local {vernacular[0]} procurement where quality "
                "certificates are available.",
                "Do not pick: unapproved substitutions for joints, hinges, window "
                "sections, or structural plates.",
                f"Labor availability for this location is {labor_availability}; "
                "pre-book electricians and plumbers early.",
            ],
            _MAX_LIST_ITEMS,
        )

        completion = dedupe(
            [
                f"Special completion requirement: execute {techniques[0]} to protect "
                "schedule reliability.",
                f"Paint panel status: {range_label(acquired_lots, 0.25, 0, 0)} of "
                f"{range_label(len(paints), 0.05, 1, 0)} paint lots acquired.",
                f"Unique site context: {terrain} / {soil} should drive final QA checklists.",
                *special_requirements,
            ],
            _MAX_LIST_ITEMS,
        )
        return construction, procurement, completion


def vernacular_materials(location: str, climate: str) -> list[str]:
    """Regional materials for the site, chosen by location first, then climate."""
    place = normalize(location)
    climate_text = normalize(climate)
    for places, climates, materials in _VERNACULAR_RULES:
        if includes_any(place, places) or includes_any(climate_text, climates):
            return list(materials)
    return list(_DEFAULT_VERNACULAR)


def build_resource_plan(site: ResourcePlanInput) -> ResourcePlanOutput:
    """Build a resource plan with the default planning tables."""
    return ResourcePlanner(DEFAULT_PLANNING_TABLES).build(site)
