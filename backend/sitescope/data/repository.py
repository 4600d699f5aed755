"""Valuation data repository for looking up typology, area, and rate tables."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from sitescope.models.enums import MarketClass, PricingBasis, Scale, TypologySource
from sitescope.models.valuation import ResolvedTypology
from sitescope.text import clamp, first_present, normalize_text

if TYPE_CHECKING:
    from sitescope.data.valuation_tuning import TypologyAnchor, ValuationTuning

_DEFAULT_BASE_RATE = 800.0
_DEFAULT_MAX_RATE = 6_000.0
_DEFAULT_BUILT_AREA_SQM = 180.0
_MIN_BUILT_AREA_SQM = 20.0
_MAX_BUILT_AREA_SQM = 2_500_000.0
_DEFAULT_LAND_AREA_MULTIPLIER = 1.6
_DEFAULT_LAND_RATE_MULTIPLIER = 0.5
_DEFAULT_COMPLETION_FRACTION = 0.45

# Keyword -> market class, checked in order.
_CLASS_KEYWORDS: list[tuple[MarketClass, tuple[str, ...]]] = [
    (MarketClass.MIXED_USE, ("mixed",)),
    (MarketClass.INFRASTRUCTURE, ("infra",)),
    (MarketClass.INDUSTRIAL, ("industrial", "logistic", "factory", "warehouse")),
    (MarketClass.COMMERCIAL, ("commercial", "office", "retail", "hotel")),
    (MarketClass.AGRICULTURAL, ("agric", "farm", "barn", "silo")),
    (
        MarketClass.RECREATIONAL_CULTURAL,
        ("recreat", "cultural", "stadium", "museum", "zoo"),
    ),
    (
        MarketClass.INSTITUTIONAL,
        ("institution", "school", "college", "hospital", "university"),
    ),
]


def infer_market_class(value: str | None) -> MarketClass:
    """Infer a market class from free text; anything unrecognized is Residential."""
    text = normalize_text(value)
    if not text:
        return MarketClass.RESIDENTIAL
    for market_class, keywords in _CLASS_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return market_class
    return MarketClass.RESIDENTIAL


def _finite(value: float | None, fallback: float) -> float:
    if value is None or not math.isfinite(value):
        return fallback
    return float(value)


def _corridor(base: float | None, high: float | None) -> tuple[float, float]:
    base_rate = clamp(_finite(base, _DEFAULT_BASE_RATE), 100, 200_000)
    max_rate = clamp(_finite(high, _DEFAULT_MAX_RATE), base_rate + 1, 300_000)
    return base_rate, max_rate


class ValuationDataRepository:
    """Repository for the valuation lookup tables.

    Wraps a :class:`ValuationTuning` and provides lookups with documented
    fallbacks. Every fallback taken is appended to the caller's
    ``warnings`` list as a short code rather than raised.
    """

    def __init__(self, tuning: ValuationTuning) -> None:
        self._tuning = tuning

    @property
    def tuning(self) -> ValuationTuning:
        return self._tuning

    def resolve_typology(
        self,
        typology: str | None,
        category: str | None,
        project_type: str | None,
        note: str | None,
        warnings: list[str],
    ) -> ResolvedTypology:
        """Resolve a typology anchor from the category row and context text.

        Scoring, per alias:
        1. Exact match on the typology field: 300 + alias length
        2. Alias inside the typology field: 220 + alias length
        3. Alias inside typology + note + project type + category: 120 + length

        The first anchor to reach the highest score wins. With no hit the
        market-class fallback band is used and ``typology:missing`` (empty
        typology field) or ``typology:class_fallback`` is recorded.
        """
        typology_text = normalize_text(typology)
        expanded_text = normalize_text(
            f"{typology or ''} {note or ''} {project_type or ''} {category or ''}"
        )

        best_key: str | None = None
        best_anchor: TypologyAnchor | None = None
        best_score = 0
        for key, anchor in self._tuning.typology_anchors.items():
            for alias in anchor.aliases:
                normalized_alias = normalize_text(alias)
                if not normalized_alias:
                    continue

                score = 0
                if typology_text == normalized_alias:
                    score = 300 + len(normalized_alias)
                elif typology_text and normalized_alias in typology_text:
                    score = 220 + len(normalized_alias)
                elif expanded_text and normalized_alias in expanded_text:
                    score = 120 + len(normalized_alias)

                if score > best_score:
                    best_key, best_anchor, best_score = key, anchor, score

        if best_key is not None and best_anchor is not None:
            base_rate, max_rate = _corridor(best_anchor.base_rate, best_anchor.max_rate)
            return ResolvedTypology(
                key=best_key,
                market_class=infer_market_class(
                    first_present(best_anchor.market_class, category, project_type)
                ),
                basis=best_anchor.basis,
                base_rate=base_rate,
                max_rate=max_rate,
                source=TypologySource.ALIAS,
            )

        inferred_class = infer_market_class(first_present(category, typology, project_type))
        band = self._tuning.class_fallback.get(
            inferred_class
        ) or self._tuning.class_fallback.get(MarketClass.RESIDENTIAL)
        if typology_text:
            warnings.append("typology:class_fallback")
        else:
            warnings.append("typology:missing")

        base_rate, max_rate = _corridor(
            band.base_rate if band else None,
            band.max_rate if band else None,
        )
        return ResolvedTypology(
            key=f"{inferred_class} fallback",
            market_class=inferred_class,
            basis=PricingBasis.BUILT_UP,
            base_rate=base_rate,
            max_rate=max_rate,
            source=TypologySource.CLASS_FALLBACK,
        )

    def get_built_area_sqm(
        self,
        market_class: MarketClass,
        project_class: MarketClass,
        scale: str,
        warnings: list[str],
    ) -> float:
        """Typical built-up area (m²) for a market class and scale.

        Lookup order:
        1. Resolved class, then project class, then Residential table
        2. Exact scale entry, else the Low-rise entry (``built_area:scale_fallback``)
        3. 180 m² (``built_area:default``, or ``built_area:fallback`` with no table)
        """
        table = self._tuning.built_area_defaults
        class_table = (
            table.get(market_class)
            or table.get(project_class)
            or table.get(MarketClass.RESIDENTIAL)
        )
        if not class_table:
            warnings.append("built_area:fallback")
            return _DEFAULT_BUILT_AREA_SQM

        exact = class_table.get(scale)
        if exact is not None and math.isfinite(exact):
            return clamp(exact, _MIN_BUILT_AREA_SQM, _MAX_BUILT_AREA_SQM)

        warnings.append("built_area:scale_fallback")
        low_rise = class_table.get(Scale.LOW_RISE)
        if low_rise is not None and math.isfinite(low_rise):
            return clamp(low_rise, _MIN_BUILT_AREA_SQM, _MAX_BUILT_AREA_SQM)

        warnings.append("built_area:default")
        return _DEFAULT_BUILT_AREA_SQM

    def land_area_multiplier(self, scale: str) -> float:
        by_scale = self._tuning.land_area_multiplier_by_scale
        value = by_scale.get(scale, by_scale.get(Scale.LOW_RISE))
        return _DEFAULT_LAND_AREA_MULTIPLIER if value is None else value

    def land_rate_multiplier(
        self, market_class: MarketClass, project_class: MarketClass
    ) -> float:
        by_type = self._tuning.land_rate_multiplier_by_type
        for key in (market_class, project_class, MarketClass.RESIDENTIAL):
            if key in by_type:
                return by_type[key]
        return _DEFAULT_LAND_RATE_MULTIPLIER

    def completion_fraction(self, stage: str) -> float:
        """Share of total build value in place at the given stage."""
        return self._tuning.completion_by_stage.get(stage, _DEFAULT_COMPLETION_FRACTION)

    def spread_for_confidence(self, confidence: float) -> float:
        """Spread of the first row (highest threshold first) that ``confidence`` reaches."""
        rows = sorted(
            self._tuning.spread_by_confidence,
            key=lambda row: row.min_confidence,
            reverse=True,
        )
        for row in rows:
            if confidence >= row.min_confidence:
                return row.spread
        return self._tuning.default_spread
