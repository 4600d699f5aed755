"""Schema and loader for the valuation tuning document.

The on-disk format is camelCase JSON (``typologyAnchorsUsdPerSqm``,
``spreadByConfidence``...). Top-level sections missing from a document
are taken from the shipped defaults in :mod:`sitescope.data.seed`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from sitescope.exceptions import TuningError
from sitescope.models.enums import PricingBasis

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class _TuningModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TypologyAnchor(_TuningModel):
    """A typology price corridor (USD per m²) and the aliases that select it."""

    market_class: str | None = Field(default=None, alias="class")
    base_rate: float | None = Field(default=None, alias="base")
    max_rate: float | None = Field(default=None, alias="max")
    aliases: list[str] = Field(default_factory=list)
    basis: PricingBasis = PricingBasis.BUILT_UP


class RateBand(_TuningModel):
    base_rate: float | None = Field(default=None, alias="base")
    max_rate: float | None = Field(default=None, alias="max")


class LocationSignals(_TuningModel):
    ultra_prime: list[str] = Field(default_factory=list)
    prime: list[str] = Field(default_factory=list)
    budget: list[str] = Field(default_factory=list)


class FactorWeights(_TuningModel):
    """Weights of the six sub-factors in the blended rate modifier."""

    comparable_anchor: float
    micro_market: float
    geo: float
    policy_zoning: float
    age_resale: float
    liquidity: float


class ConfidenceTuning(_TuningModel):
    base: float
    missing_location_penalty: float
    missing_gps_penalty: float
    no_comparables_penalty: float
    few_comparables_penalty: float
    strong_comparables_bonus: float
    zone_mismatch_penalty: float
    clear_zone_fit_bonus: float
    high_hazard_penalty: float
    low_hazard_bonus: float
    policy_uncertain_penalty: float
    stable_growth_bonus: float
    missing_typology_penalty: float = 8
    class_fallback_penalty: float = 10
    class_mismatch_penalty: float = 12
    missing_warning_penalty: float = 2
    missing_warning_penalty_cap: float = 10


class Haircuts(_TuningModel):
    low_side_extra: float
    high_side_extra: float
    fallback_no_comps_extra_spread: float
    hazard_extra_spread: float
    class_fallback_extra_spread: float = 0.04
    class_mismatch_extra_spread: float = 0.03
    per_warning_spread: float = 0.01


class Limits(_TuningModel):
    min_value: float = Field(ge=0)
    max_value: float = Field(gt=0)
    min_confidence: float = Field(ge=0, le=100)
    max_confidence: float = Field(ge=0, le=100)
    min_comparables_for_anchor: int = Field(ge=1)
    strong_comparables: int = Field(ge=1)
    max_warnings_for_spread: int = Field(ge=0)


class SpreadRow(_TuningModel):
    """Spread to use once confidence reaches ``min_confidence``."""

    min_confidence: float = Field(alias="min")
    spread: float = Field(gt=0)


class ValuationTuning(_TuningModel):
    """Every tunable coefficient the valuation engine reads."""

    typology_anchors: dict[str, TypologyAnchor] = Field(alias="typologyAnchorsUsdPerSqm")
    class_fallback: dict[str, RateBand] = Field(alias="typologyClassFallbackUsdPerSqm")
    built_area_defaults: dict[str, dict[str, float]] = Field(alias="builtAreaSqmDefaults")
    land_area_multiplier_by_scale: dict[str, float]
    land_rate_multiplier_by_type: dict[str, float]
    completion_by_stage: dict[str, float]
    location_signals: LocationSignals
    weights: FactorWeights
    confidence: ConfidenceTuning
    haircuts: Haircuts
    limits: Limits
    spread_by_confidence: list[SpreadRow]
    default_spread: float = 0.32


def parse_valuation_tuning(data: dict[str, Any]) -> ValuationTuning:
    """Validate a tuning document, filling absent sections from the defaults.

    Raises:
        TuningError: If the merged document does not validate.
    """
    from sitescope.data.seed import DEFAULT_VALUATION_TUNING

    merged = DEFAULT_VALUATION_TUNING.model_dump(by_alias=True)
    merged.update(data)
    try:
        return ValuationTuning.model_validate(merged)
    except ValidationError as exc:
        msg = f"Valuation tuning is invalid: {exc.error_count()} error(s)"
        raise TuningError(msg) from exc


def load_valuation_tuning(path: Path) -> ValuationTuning:
    """Load a valuation tuning JSON document from ``path``.

    Raises:
        TuningError: If the file cannot be read, is not a JSON object,
            or does not validate.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Could not read valuation tuning from {path}"
        raise TuningError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Valuation tuning in {path} must be a JSON object"
        raise TuningError(msg)

    tuning = parse_valuation_tuning(data)
    logger.info("Loaded valuation tuning from %s", path)
    return tuning
