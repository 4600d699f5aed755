"""Seed valuation data for the Sitescope valuation engine.

Rates are USD per m² of built-up area (land area for ``land_only``
typologies), reflecting broad 2025 market corridors rather than any
single city. Areas are typical built-up m² per market class and scale.
"""

from sitescope.data.location_signals import BUDGET_TERMS, PRIME_TERMS, ULTRA_PRIME_TERMS
from sitescope.data.valuation_tuning import (
    ConfidenceTuning,
    FactorWeights,
    Haircuts,
    Limits,
    LocationSignals,
    RateBand,
    SpreadRow,
    TypologyAnchor,
    ValuationTuning,
)
from sitescope.models.enums import MarketClass, PricingBasis, Scale, Stage

_M = MarketClass

TYPOLOGY_ANCHORS: dict[str, TypologyAnchor] = {
    # --- Residential ---
    "Apartment": TypologyAnchor(
        market_class=_M.RESIDENTIAL, base_rate=900, max_rate=4200,
        aliases=["apartment", "apartments", "flat", "flats", "condominium", "condo"],
    ),
    "Villa": TypologyAnchor(
        market_class=_M.RESIDENTIAL, base_rate=1200, max_rate=6500,
        aliases=["villa", "bungalow", "luxury house"],
    ),
    "Independent House": TypologyAnchor(
        market_class=_M.RESIDENTIAL, base_rate=700, max_rate=3200,
        aliases=["independent house", "detached house", "single family", "house"],
    ),
    "Row House": TypologyAnchor(
        market_class=_M.RESIDENTIAL, base_rate=750, max_rate=3000,
        aliases=["row house", "townhouse", "terrace house"],
    ),
    "Affordable Housing": TypologyAnchor(
        market_class=_M.RESIDENTIAL, base_rate=450, max_rate=1500,
        aliases=["affordable housing", "low cost housing", "ews housing", "chawl"],
    ),
    "Residential Plot": TypologyAnchor(
        market_class=_M.RESIDENTIAL, base_rate=150, max_rate=2500,
        aliases=["residential plot", "vacant plot", "open plot", "land parcel"],
        basis=PricingBasis.LAND_ONLY,
    ),
    # --- Commercial ---
    "Office": TypologyAnchor(
        market_class=_M.COMMERCIAL, base_rate=1100, max_rate=6000,
        aliases=["office", "office tower", "office building", "it park", "business park"],
    ),
    "Retail": TypologyAnchor(
        market_class=_M.COMMERCIAL, base_rate=1000, max_rate=5500,
        aliases=["retail", "shopping mall", "mall", "showroom"],
    ),
    "Hotel": TypologyAnchor(
        market_class=_M.COMMERCIAL, base_rate=1300, max_rate=7000,
        aliases=["hotel", "resort", "hospitality"],
    ),
    # --- Industrial ---
    "Warehouse": TypologyAnchor(
        market_class=_M.INDUSTRIAL, base_rate=350, max_rate=1400,
        aliases=["warehouse", "logistics park", "godown", "distribution center"],
    ),
    "Factory": TypologyAnchor(
        market_class=_M.INDUSTRIAL, base_rate=450, max_rate=1800,
        aliases=["factory", "manufacturing plant", "industrial shed"],
    ),
    # --- Agricultural ---
    "Farmhouse": TypologyAnchor(
        market_class=_M.AGRICULTURAL, base_rate=300, max_rate=1600,
        aliases=["farmhouse", "farm house", "barn", "silo"],
    ),
    "Agricultural Land": TypologyAnchor(
        market_class=_M.AGRICULTURAL, base_rate=100, max_rate=600,
        aliases=["agricultural land", "farmland", "orchard", "plantation"],
        basis=PricingBasis.LAND_ONLY,
    ),
    # --- Recreational / Cultural ---
    "Stadium": TypologyAnchor(
        market_class=_M.RECREATIONAL_CULTURAL, base_rate=900, max_rate=4000,
        aliases=["stadium", "sports complex", "arena"],
    ),
    "Museum": TypologyAnchor(
        market_class=_M.RECREATIONAL_CULTURAL, base_rate=1200, max_rate=5200,
        aliases=["museum", "gallery", "auditorium", "cultural center"],
    ),
    # --- Institutional ---
    "School": TypologyAnchor(
        market_class=_M.INSTITUTIONAL, base_rate=600, max_rate=2400,
        aliases=["school", "college", "university", "campus"],
    ),
    "Hospital": TypologyAnchor(
        market_class=_M.INSTITUTIONAL, base_rate=1400, max_rate=5800,
        aliases=["hospital", "clinic", "medical center"],
    ),
    # --- Mixed-use ---
    "Mixed-use Tower": TypologyAnchor(
        market_class=_M.MIXED_USE, base_rate=1100, max_rate=6200,
        aliases=["mixed use", "mixed use tower", "mixed development"],
    ),
    # --- Infrastructure ---
    "Bridge": TypologyAnchor(
        market_class=_M.INFRASTRUCTURE, base_rate=2000, max_rate=9000,
        aliases=["bridge", "flyover", "overpass"],
    ),
    "Transit Station": TypologyAnchor(
        market_class=_M.INFRASTRUCTURE, base_rate=1800, max_rate=7500,
        aliases=["metro station", "railway station", "bus terminal", "transit hub"],
    ),
}

CLASS_FALLBACK_BANDS: dict[str, RateBand] = {
    _M.RESIDENTIAL: RateBand(base_rate=700, max_rate=3600),
    _M.COMMERCIAL: RateBand(base_rate=1000, max_rate=5500),
    _M.INDUSTRIAL: RateBand(base_rate=400, max_rate=1600),
    _M.AGRICULTURAL: RateBand(base_rate=250, max_rate=1200),
    _M.RECREATIONAL_CULTURAL: RateBand(base_rate=900, max_rate=4200),
    _M.INSTITUTIONAL: RateBand(base_rate=700, max_rate=3200),
    _M.MIXED_USE: RateBand(base_rate=1000, max_rate=5200),
    _M.INFRASTRUCTURE: RateBand(base_rate=1500, max_rate=7000),
}


def _areas(low: float, mid: float, high: float, large: float) -> dict[str, float]:
    return {
        Scale.LOW_RISE: low,
        Scale.MID_RISE: mid,
        Scale.HIGH_RISE: high,
        Scale.LARGE_SITE: large,
    }


BUILT_AREA_DEFAULTS: dict[str, dict[str, float]] = {
    _M.RESIDENTIAL: _areas(180, 2_400, 12_000, 30_000),
    _M.COMMERCIAL: _areas(450, 5_000, 25_000, 60_000),
    _M.INDUSTRIAL: _areas(1_200, 6_000, 15_000, 80_000),
    _M.AGRICULTURAL: _areas(250, 800, 1_500, 12_000),
    _M.RECREATIONAL_CULTURAL: _areas(1_500, 6_000, 20_000, 60_000),
    _M.INSTITUTIONAL: _areas(1_200, 5_000, 16_000, 45_000),
    _M.MIXED_USE: _areas(600, 6_000, 30_000, 75_000),
    _M.INFRASTRUCTURE: _areas(2_000, 8_000, 20_000, 120_000),
}

DEFAULT_VALUATION_TUNING = ValuationTuning(
    typology_anchors=TYPOLOGY_ANCHORS,
    class_fallback=CLASS_FALLBACK_BANDS,
    built_area_defaults=BUILT_AREA_DEFAULTS,
    land_area_multiplier_by_scale={
        Scale.LOW_RISE: 1.6,
        Scale.MID_RISE: 0.9,
        Scale.HIGH_RISE: 0.45,
        Scale.LARGE_SITE: 2.8,
    },
    land_rate_multiplier_by_type={
        _M.RESIDENTIAL: 0.5,
        _M.COMMERCIAL: 0.62,
        _M.INDUSTRIAL: 0.34,
        _M.AGRICULTURAL: 0.22,
        _M.RECREATIONAL_CULTURAL: 0.4,
        _M.INSTITUTIONAL: 0.38,
        _M.MIXED_USE: 0.56,
        _M.INFRASTRUCTURE: 0.3,
    },
    completion_by_stage={
        Stage.PLANNING: 0.05,
        Stage.FOUNDATION: 0.15,
        Stage.STRUCTURE: 0.40,
        Stage.SERVICES: 0.65,
        Stage.FINISHING: 0.85,
        Stage.COMPLETED: 1.0,
    },
    location_signals=LocationSignals(
        ultra_prime=ULTRA_PRIME_TERMS,
        prime=PRIME_TERMS,
        budget=BUDGET_TERMS,
    ),
    weights=FactorWeights(
        comparable_anchor=0.24,
        micro_market=0.18,
        geo=0.16,
        policy_zoning=0.14,
        age_resale=0.16,
        liquidity=0.12,
    ),
    confidence=ConfidenceTuning(
        base=72,
        missing_location_penalty=10,
        missing_gps_penalty=6,
        no_comparables_penalty=12,
        few_comparables_penalty=6,
        strong_comparables_bonus=6,
        zone_mismatch_penalty=8,
        clear_zone_fit_bonus=3,
        high_hazard_penalty=8,
        low_hazard_bonus=2,
        policy_uncertain_penalty=6,
        stable_growth_bonus=3,
    ),
    haircuts=Haircuts(
        low_side_extra=0.04,
        high_side_extra=0.02,
        fallback_no_comps_extra_spread=0.05,
        hazard_extra_spread=0.04,
    ),
    limits=Limits(
        min_value=5_000,
        max_value=5_000_000_000,
        min_confidence=18,
        max_confidence=92,
        min_comparables_for_anchor=8,
        strong_comparables=30,
        max_warnings_for_spread=6,
    ),
    spread_by_confidence=[
        SpreadRow(min_confidence=85, spread=0.12),
        SpreadRow(min_confidence=75, spread=0.16),
        SpreadRow(min_confidence=65, spread=0.20),
        SpreadRow(min_confidence=55, spread=0.24),
        SpreadRow(min_confidence=45, spread=0.28),
        SpreadRow(min_confidence=0, spread=0.34),
    ],
)
