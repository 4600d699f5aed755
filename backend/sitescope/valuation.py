"""Valuation engine for the Sitescope site assessment library.

The ValuationEngine prices a site with a typology-anchored rate model:

1. **Metric normalization** — Read the seven market metrics, defaulting and
   clamping each and recording a warning for every substitution.
2. **Typology corridor** — Resolve the typology (alias match or market-class
   fallback), fixing the ``[base_rate, max_rate]`` corridor per m².
3. **Rate position** — Place the unit rate inside the corridor from density,
   location signals, and growth.
4. **Weighted modifier** — Blend six clamped sub-factors (comparables,
   micro-market, geo hazard, policy/zoning, age/resale, liquidity) and re-clamp
   the adjusted rate into the corridor.
5. **Values** — Derive built, land, property, and project values.
6. **Confidence and spread** — Additive confidence penalties and bonuses, then a
   confidence-driven spread widened for known weaknesses.
7. **Banding** — Expand each value into a rounded ``{base, low, high}`` band.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from sitescope.data.repository import ValuationDataRepository, infer_market_class
from sitescope.data.seed import DEFAULT_VALUATION_TUNING
from sitescope.models.enums import (
    DensityBand,
    GeoStatus,
    MarketClass,
    PricingBasis,
    ProjectStatus,
    Scale,
    TypologySource,
)
from sitescope.models.site import GeoFactors
from sitescope.models.valuation import (
    ValuationInput,
    ValuationMetrics,
    ValuationResult,
    ValueBand,
)
from sitescope.text import clamp, count_matches, includes_any, round_half_up, round_to_step

if TYPE_CHECKING:
    from sitescope.models.valuation import ResolvedTypology

logger = logging.getLogger(__name__)

# (field, fallback, min, max)
_METRIC_READS: list[tuple[str, float, float, float]] = [
    ("city_growth_5y_percent", 8, -20, 55),
    ("property_growth_percent", 9, -25, 70),
    ("land_growth_percent", 10, -25, 85),
    ("property_age_years", 8, 0, 120),
    ("resale_value_percent", 100, 40, 220),
    ("investment_roi_percent", 8, -20, 45),
    ("comparable_properties_count", 0, 0, 200),
]

_DEFAULT_BUILT_AREA_SQM = 180.0

_ACCESS_POSITIVE = (
    "metro", "transit", "highway", "arterial", "corner", "frontage", "wide road", "main road",
)
_ACCESS_NEGATIVE = ("narrow", "landlocked", "inner lane", "encroach", "bottleneck")
_HAZARD_TERMS = (
    "flood", "coast", "coastal", "seismic", "fault", "landslide", "swamp", "marsh",
    "erosion", "cyclone",
)
_SOFT_SOIL_TERMS = ("soft", "expansive", "black cotton", "clay")
_SLOPE_TERMS = ("slope", "steep", "hill")
_SEVERE_CLIMATE_TERMS = ("extreme heat", "extreme cold", "storm", "cyclone", "hurricane")
_NON_COMPLIANCE_TERMS = ("unauthori", "non-compliant", "violation", "litigation")

# Policy posture keyword that rewards a market class.
_POLICY_BOOSTS: list[tuple[str, MarketClass, float]] = [
    ("pro-industry", MarketClass.INDUSTRIAL, 1.08),
    ("pro-commerce", MarketClass.COMMERCIAL, 1.08),
    ("pro-residential", MarketClass.RESIDENTIAL, 1.06),
    ("pro-infrastructure", MarketClass.INFRASTRUCTURE, 1.07),
    ("pro-institutions", MarketClass.INSTITUTIONAL, 1.06),
]

# Project type keyword -> master-plan zone words it is compatible with.
_ZONE_COMPATIBILITY: list[tuple[str, tuple[str, ...]]] = [
    ("residential", ("residential", "mixed")),
    ("commercial", ("commercial", "mixed", "business")),
    ("industrial", ("industrial", "logistics", "mixed")),
    ("mixed", ("mixed", "commercial", "residential")),
    ("infrastructure", ("infrastructure", "corridor", "industrial")),
]

# Land value may not exceed this multiple of built value (built-up typologies).
_LAND_CAP_RATIO: dict[MarketClass, float] = {
    MarketClass.AGRICULTURAL: 1.25,
    MarketClass.INFRASTRUCTURE: 1.15,
}
_DEFAULT_LAND_CAP_RATIO = 0.9

_MIN_SPREAD, _MAX_SPREAD = 0.10, 0.58
_MIN_PROJECT_SPREAD, _MAX_PROJECT_SPREAD = 0.10, 0.62
_MIN_LAND_SPREAD, _MAX_LAND_SPREAD = 0.08, 0.50


def zone_looks_compatible(project_type: str, zone_text: str) -> bool:
    """Whether the master-plan zone allows the project type. An empty zone allows anything."""
    zone = zone_text.lower()
    if not zone.strip():
        return True
    kind = project_type.lower()
    for keyword, zones in _ZONE_COMPATIBILITY:
        if keyword in kind:
            return includes_any(zone, zones)
    return True


def rounding_step(value: float) -> float:
    """Band rounding step for a value of this magnitude."""
    if value >= 1_000_000_000:
        return 5_000_000
    if value >= 100_000_000:
        return 1_000_000
    if value >= 10_000_000:
        return 100_000
    if value >= 1_000_000:
        return 25_000
    return 5_000


class ValuationEngine:
    """Computes a ValuationResult from a ValuationInput.

    Args:
        repository: The valuation data repository providing typology
            resolution, built-area defaults, and the tuning coefficients.

    Example::

        from sitescope.data.repository import ValuationDataRepository
        from sitescope.data.seed import DEFAULT_VALUATION_TUNING

        engine = ValuationEngine(ValuationDataRepository(DEFAULT_VALUATION_TUNING))
        result = engine.compute(site)
    """

    def __init__(self, repository: ValuationDataRepository) -> None:
        self._repository = repository
        self._tuning = repository.tuning

    def compute(self, site: ValuationInput) -> ValuationResult:
        """Value a site.

        Never raises for a validated input. Every default or clamp applied
        along the way is reported as a warning code on the result.
        """
        tuning = self._tuning
        limits = tuning.limits
        warnings: list[str] = []
        geo = site.geo_factors or GeoFactors()
        row = site.category_row

        # 1. Normalize market metrics
        metrics = self._read_metrics(geo, warnings)
        city, prop, land = (
            metrics.city_growth_pct,
            metrics.property_growth_pct,
            metrics.land_growth_pct,
        )
        comps = metrics.comparable_count

        density = DensityBand.from_text(geo.population_density)
        project_type = site.project_type or MarketClass.RESIDENTIAL.value
        scale = site.scale or Scale.LOW_RISE.value
        project_class = infer_market_class(project_type)

        # 2. Resolve typology corridor and built area
        typology = self._repository.resolve_typology(
            typology=row.typology if row else None,
            category=row.category if row else None,
            project_type=project_type,
            note=site.note,
            warnings=warnings,
        )
        built_area = self._repository.get_built_area_sqm(
            typology.market_class, project_class, scale, warnings
        )
        if not math.isfinite(built_area) or built_area <= 0:
            built_area = _DEFAULT_BUILT_AREA_SQM
            warnings.append("built_area:invalid")

        context = " ".join(
            [
                site.location,
                site.note,
                (row.typology if row else None) or "",
                (row.style if row else None) or "",
                (row.exterior if row else None) or "",
                (row.additional_features if row else None) or "",
                geo.terrain or "",
                geo.soil_condition or "",
                geo.climate_zone or "",
            ]
        ).lower()

        # 3. Place the rate inside the corridor
        location_factor, location_shift = self._location_signal(context, density)
        band_width = max(1.0, typology.max_rate - typology.base_rate)
        density_position = {DensityBand.HIGH: 0.72, DensityBand.LOW: 0.28}.get(density, 0.5)
        growth_shift = clamp((city * 0.35 + prop * 0.45 + land * 0.2) / 480, -0.14, 0.16)
        position = clamp(density_position + location_shift + growth_shift, 0.02, 0.98)
        rate_within_band = clamp(
            typology.base_rate + band_width * position, typology.base_rate, typology.max_rate
        )

        # 4. Weighted A-F modifier
        activity_text = (geo.comparable_activity or "moderate").lower()
        if "high" in activity_text:
            activity_factor = 1.06
        elif "low" in activity_text or "thin" in activity_text:
            activity_factor = 0.93
        else:
            activity_factor = 1.0

        policy_text = (geo.policy_posture or "balanced").lower()
        zone_fit = zone_looks_compatible(project_type, geo.master_plan_zone or "")
        policy_factor = self._policy_factor(policy_text, typology.market_class)
        zone_factor = 1.03 if zone_fit else 0.86
        hazard_count = count_matches(context, _HAZARD_TERMS)

        comparable_component = self._comparable_anchor(
            comps, activity_factor, city, density, warnings
        )
        micro_component = self._micro_market(context, density, location_factor)
        geo_component = self._geo_hazard(context, hazard_count)
        policy_component = clamp(policy_factor * zone_factor, 0.78, 1.16)
        age_component = self._age_resale(
            metrics.property_age_years, metrics.resale_value_pct, context
        )
        momentum = clamp(1 + (city * 0.25 + prop * 0.45 + land * 0.3) / 280, 0.78, 1.32)
        liquidity_depth = clamp(0.9 + comps / 140, 0.9, 1.2)
        liquidity_component = clamp(momentum * activity_factor * liquidity_depth, 0.78, 1.3)

        weights = tuning.weights
        modifier = clamp(
            1
            + (comparable_component - 1) * weights.comparable_anchor
            + (micro_component - 1) * weights.micro_market
            + (geo_component - 1) * weights.geo
            + (policy_component - 1) * weights.policy_zoning
            + (age_component - 1) * weights.age_resale
            + (liquidity_component - 1) * weights.liquidity,
            0.72,
            1.34,
        )

        raw_unit_rate = rate_within_band * modifier
        unit_rate = clamp(raw_unit_rate, typology.base_rate, typology.max_rate)
        if abs(unit_rate - raw_unit_rate) > 0.5:
            warnings.append("unit_rate:typology_clamped")

        # 5. Built, land, property, and project values
        built_base = clamp(unit_rate * built_area, limits.min_value, limits.max_value)

        land_anchor = (
            built_area
            * self._repository.land_area_multiplier(scale)
            * unit_rate
            * self._repository.land_rate_multiplier(typology.market_class, project_class)
        )
        land_growth_factor = clamp(1 + land / 230, 0.76, 1.4)
        land_base = clamp(
            land_anchor * land_growth_factor * zone_factor * policy_factor,
            limits.min_value,
            limits.max_value,
        )
        if typology.basis != PricingBasis.LAND_ONLY:
            land_cap = built_base * _LAND_CAP_RATIO.get(
                typology.market_class, _DEFAULT_LAND_CAP_RATIO
            )
            if land_base > land_cap:
                land_base = land_cap
                warnings.append("land:share_capped")

        if typology.basis == PricingBasis.LAND_ONLY:
            property_base = self._clamp_to_corridor(
                land_base, typology, built_area, "property:typology_clamped", warnings
            )
        else:
            property_base = built_base

        if site.status == ProjectStatus.COMPLETED:
            completion_share = 1.0
        else:
            stage_share = self._repository.completion_fraction(site.stage_label)
            completion_share = clamp((stage_share + site.progress_value / 100) / 2, 0.08, 0.98)
        if typology.basis == PricingBasis.LAND_ONLY:
            raw_project_base = land_base
        else:
            raw_project_base = land_base + built_base * completion_share
        project_base = self._clamp_to_corridor(
            raw_project_base, typology, built_area, "project:typology_clamped", warnings
        )

        # 6. Confidence and spread
        class_mismatch = (
            typology.market_class != project_class
            and MarketClass.MIXED_USE not in (project_class, typology.market_class)
        )
        if class_mismatch:
            warnings.append("class:signal_mismatch")
        deduped = list(dict.fromkeys(warnings))

        confidence = self._confidence(
            site, typology, metrics, zone_fit, hazard_count, policy_text,
            class_mismatch, deduped,
        )
        spread = self._spread(confidence, comps, hazard_count, typology, class_mismatch, deduped)
        project_delta = -0.03 if site.status == ProjectStatus.COMPLETED else 0.04
        project_spread = clamp(spread + project_delta, _MIN_PROJECT_SPREAD, _MAX_PROJECT_SPREAD)
        land_spread = clamp(spread - 0.03, _MIN_LAND_SPREAD, _MAX_LAND_SPREAD)

        if deduped:
            logger.debug(
                "Valuation warnings %s for typology=%s unit_rate=%.2f built_area_sqm=%d",
                deduped,
                typology.key,
                unit_rate,
                round_half_up(built_area),
            )

        # 7. Banding
        return ValuationResult(
            property_value=self._make_band(property_base, spread),
            land_value=self._make_band(land_base, land_spread),
            project_value=self._make_band(project_base, project_spread),
            confidence=confidence,
            spread=spread,
            warnings=deduped,
            metrics=metrics,
            typology=typology,
            unit_rate=unit_rate,
            built_area_sqm=built_area,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _read_metrics(geo: GeoFactors, warnings: list[str]) -> ValuationMetrics:
        values: dict[str, float] = {}
        for name, fallback, low, high in _METRIC_READS:
            raw = getattr(geo, name)
            if raw is None or not math.isfinite(raw):
                warnings.append(f"{name}:missing")
                values[name] = fallback
                continue
            if raw < low or raw > high:
                warnings.append(f"{name}:clamped")
            values[name] = clamp(raw, low, high)

        return ValuationMetrics(
            city_growth_pct=values["city_growth_5y_percent"],
            property_growth_pct=values["property_growth_percent"],
            land_growth_pct=values["land_growth_percent"],
            property_age_years=values["property_age_years"],
            resale_value_pct=values["resale_value_percent"],
            roi_pct=values["investment_roi_percent"],
            comparable_count=round_half_up(values["comparable_properties_count"]),
        )

    def _location_signal(self, context: str, density: DensityBand) -> tuple[float, float]:
        """Return (location factor, position shift) for the site context."""
        signals = self._tuning.location_signals
        if includes_any(context, signals.ultra_prime):
            return 1.22, 0.22
        if includes_any(context, signals.prime):
            return 1.12, 0.11
        if includes_any(context, signals.budget):
            return 0.90, -0.12
        if density == DensityBand.HIGH:
            return 1.06, 0.05
        if density == DensityBand.LOW:
            return 0.95, -0.04
        return 1.0, 0.0

    def _comparable_anchor(
        self,
        comps: int,
        activity_factor: float,
        city_growth: float,
        density: DensityBand,
        warnings: list[str],
    ) -> float:
        """Comparable-anchor factor, falling back to a city-growth band when comps are thin.

        Between zero and the anchor minimum the two signals blend linearly,
        so both endpoints match the pure city band and the pure comparable
        signal exactly.
        """
        min_comps = self._tuning.limits.min_comparables_for_anchor
        depth = clamp(0.9 + math.log1p(comps) * 0.085, 0.88, 1.22)
        signal = clamp(activity_factor * depth, 0.82, 1.26)
        density_nudge = {DensityBand.HIGH: 0.03, DensityBand.LOW: -0.03}.get(density, 0.0)
        city_band = clamp(0.94 + city_growth / 420 + density_nudge, 0.84, 1.14)

        if comps >= min_comps:
            return signal
        if comps > 0:
            blend = comps / min_comps
            warnings.append("comparables:thin_sample")
            return clamp(city_band * (1 - blend) + signal * blend, 0.84, 1.2)
        warnings.append("comparables:none_fallback_city_band")
        return city_band

    @staticmethod
    def _micro_market(context: str, density: DensityBand, location_factor: float) -> float:
        access = clamp(
            1
            + count_matches(context, _ACCESS_POSITIVE) * 0.015
            - count_matches(context, _ACCESS_NEGATIVE) * 0.03,
            0.84,
            1.16,
        )
        neighborhood = {DensityBand.HIGH: 1.04, DensityBand.LOW: 0.96}.get(density, 1.0)
        return clamp(access * neighborhood * location_factor, 0.8, 1.22)

    @staticmethod
    def _geo_hazard(context: str, hazard_count: int) -> float:
        soil = 0.05 if includes_any(context, _SOFT_SOIL_TERMS) else 0.0
        terrain = 0.04 if includes_any(context, _SLOPE_TERMS) else 0.0
        climate = 0.03 if includes_any(context, _SEVERE_CLIMATE_TERMS) else 0.0
        return clamp(1 - hazard_count * 0.03 - soil - terrain - climate, 0.72, 1.06)

    @staticmethod
    def _policy_factor(policy_text: str, market_class: MarketClass) -> float:
        if "unpredict" in policy_text:
            return 0.9
        for keyword, boosted_class, factor in _POLICY_BOOSTS:
            if keyword in policy_text and market_class == boosted_class:
                return factor
        if "mixed" in policy_text:
            return 1.02
        return 1.0

    @staticmethod
    def _age_resale(age_years: float, resale_pct: float, context: str) -> float:
        age = clamp(1 - max(0.0, age_years - 2) * 0.011, 0.5, 1.04)
        resale = clamp(resale_pct / 100, 0.62, 1.45)
        compliance = 0.84 if includes_any(context, _NON_COMPLIANCE_TERMS) else 1.0
        return clamp(age * resale * compliance, 0.5, 1.24)

    def _clamp_to_corridor(
        self,
        value: float,
        typology: ResolvedTypology,
        built_area: float,
        warning: str,
        warnings: list[str],
    ) -> float:
        """Re-clamp a value so its implied per-m² rate stays inside the typology corridor."""
        unit_rate = value / max(1.0, built_area)
        clamped = clamp(unit_rate, typology.base_rate, typology.max_rate)
        if abs(unit_rate - clamped) > 0.5:
            warnings.append(warning)
        limits = self._tuning.limits
        return clamp(clamped * built_area, limits.min_value, limits.max_value)

    def _confidence(
        self,
        site: ValuationInput,
        typology: ResolvedTypology,
        metrics: ValuationMetrics,
        zone_fit: bool,
        hazard_count: int,
        policy_text: str,
        class_mismatch: bool,
        warnings: list[str],
    ) -> float:
        tuning = self._tuning.confidence
        limits = self._tuning.limits
        comps = metrics.comparable_count
        confidence = tuning.base

        if not site.location.strip():
            confidence -= tuning.missing_location_penalty
        if site.geo_status in (GeoStatus.NONE, GeoStatus.DENIED):
            confidence -= tuning.missing_gps_penalty

        if comps == 0:
            confidence -= tuning.no_comparables_penalty
        elif comps < limits.min_comparables_for_anchor:
            confidence -= tuning.few_comparables_penalty
        elif comps >= limits.strong_comparables:
            confidence += tuning.strong_comparables_bonus

        if zone_fit:
            confidence += tuning.clear_zone_fit_bonus
        else:
            confidence -= tuning.zone_mismatch_penalty
        if hazard_count >= 2:
            confidence -= tuning.high_hazard_penalty
        else:
            confidence += tuning.low_hazard_bonus
        if "unpredict" in policy_text:
            confidence -= tuning.policy_uncertain_penalty

        if (
            abs(metrics.property_growth_pct - metrics.land_growth_pct) < 8
            and abs(metrics.city_growth_pct - metrics.property_growth_pct) < 10
        ):
            confidence += tuning.stable_growth_bonus

        # Typology provenance
        if not (site.category_row and site.category_row.typology):
            confidence -= tuning.missing_typology_penalty
        if typology.source == TypologySource.CLASS_FALLBACK:
            confidence -= tuning.class_fallback_penalty
        if class_mismatch:
            confidence -= tuning.class_mismatch_penalty

        missing = sum(1 for code in warnings if code.endswith(":missing"))
        confidence -= min(
            tuning.missing_warning_penalty_cap, missing * tuning.missing_warning_penalty
        )
        return clamp(confidence, limits.min_confidence, limits.max_confidence)

    def _spread(
        self,
        confidence: float,
        comps: int,
        hazard_count: int,
        typology: ResolvedTypology,
        class_mismatch: bool,
        warnings: list[str],
    ) -> float:
        haircuts = self._tuning.haircuts
        limits = self._tuning.limits

        spread = self._repository.spread_for_confidence(confidence)
        if comps < limits.min_comparables_for_anchor:
            spread += haircuts.fallback_no_comps_extra_spread
        if hazard_count >= 2:
            spread += haircuts.hazard_extra_spread
        if typology.source == TypologySource.CLASS_FALLBACK:
            spread += haircuts.class_fallback_extra_spread
        if class_mismatch:
            spread += haircuts.class_mismatch_extra_spread
        spread += min(len(warnings), limits.max_warnings_for_spread) * haircuts.per_warning_spread
        return clamp(spread, _MIN_SPREAD, _MAX_SPREAD)

    def _make_band(self, value: float, spread: float) -> ValueBand:
        """Expand a value into a rounded band, stretched further on the downside."""
        haircuts = self._tuning.haircuts
        limits = self._tuning.limits
        step = rounding_step(value)

        low = round_to_step(value * (1 - spread - haircuts.low_side_extra), step)
        high = round_to_step(value * (1 + spread + haircuts.high_side_extra), step)
        return ValueBand(
            base=round_to_step(value, step),
            low=max(limits.min_value, min(low, high - step)),
            high=min(limits.max_value, max(high, low + step)),
        )


def compute_valuation(site: ValuationInput) -> ValuationResult:
    """Value a site with the default valuation tuning."""
    engine = ValuationEngine(ValuationDataRepository(DEFAULT_VALUATION_TUNING))
    return engine.compute(site)
