"""Tests for ValuationDataRepository lookups and the seed tables."""

from __future__ import annotations

import pytest

from sitescope.data.repository import ValuationDataRepository, infer_market_class
from sitescope.data.seed import (
    BUILT_AREA_DEFAULTS,
    CLASS_FALLBACK_BANDS,
    DEFAULT_VALUATION_TUNING,
    TYPOLOGY_ANCHORS,
)
from sitescope.data.valuation_tuning import parse_valuation_tuning
from sitescope.models.enums import MarketClass, PricingBasis, Stage, TypologySource


@pytest.fixture()
def repo() -> ValuationDataRepository:
    return ValuationDataRepository(DEFAULT_VALUATION_TUNING)


def _resolve(
    repo: ValuationDataRepository,
    typology: str | None = None,
    *,
    category: str | None = None,
    project_type: str | None = "Residential",
    note: str | None = None,
) -> tuple[str, TypologySource, list[str]]:
    warnings: list[str] = []
    resolved = repo.resolve_typology(typology, category, project_type, note, warnings)
    return resolved.key, resolved.source, warnings


# ---------------------------------------------------------------------------
# Seed data coverage
# ---------------------------------------------------------------------------


class TestSeedData:
    def test_every_market_class_has_fallback_band(self) -> None:
        for market_class in MarketClass:
            assert market_class in CLASS_FALLBACK_BANDS

    def test_every_market_class_has_built_areas(self) -> None:
        for market_class in MarketClass:
            assert len(BUILT_AREA_DEFAULTS[market_class]) == 4

    def test_anchor_corridors_are_valid(self) -> None:
        for key, anchor in TYPOLOGY_ANCHORS.items():
            assert anchor.base_rate is not None, key
            assert anchor.max_rate is not None, key
            assert anchor.base_rate < anchor.max_rate, key
            assert anchor.aliases, key

    def test_land_only_typologies(self) -> None:
        land_only = {
            key for key, anchor in TYPOLOGY_ANCHORS.items()
            if anchor.basis == PricingBasis.LAND_ONLY
        }
        assert land_only == {"Residential Plot", "Agricultural Land"}


# ---------------------------------------------------------------------------
# Market class inference
# ---------------------------------------------------------------------------


class TestInferMarketClass:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Mixed-use tower", MarketClass.MIXED_USE),
            ("infrastructure", MarketClass.INFRASTRUCTURE),
            ("Logistics hub", MarketClass.INDUSTRIAL),
            ("Boutique hotel", MarketClass.COMMERCIAL),
            ("Dairy farm", MarketClass.AGRICULTURAL),
            ("City zoo", MarketClass.RECREATIONAL_CULTURAL),
            ("Primary school", MarketClass.INSTITUTIONAL),
            ("Penthouse", MarketClass.RESIDENTIAL),
            ("", MarketClass.RESIDENTIAL),
            (None, MarketClass.RESIDENTIAL),
        ],
    )
    def test_keywords(self, text: str | None, expected: MarketClass) -> None:
        assert infer_market_class(text) == expected


# ---------------------------------------------------------------------------
# Typology resolution
# ---------------------------------------------------------------------------


class TestResolveTypology:
    def test_exact_alias(self, repo: ValuationDataRepository) -> None:
        assert _resolve(repo, "Apartment") == ("Apartment", TypologySource.ALIAS, [])

    def test_exact_match_beats_shorter_contained_alias(
        self, repo: ValuationDataRepository
    ) -> None:
        assert _resolve(repo, "farm house")[0] == "Farmhouse"
        assert _resolve(repo, "Row-House")[0] == "Row House"

    def test_alias_inside_typology(self, repo: ValuationDataRepository) -> None:
        assert _resolve(repo, "Luxury sea-view villa")[0] == "Villa"

    def test_alias_in_note(self, repo: ValuationDataRepository) -> None:
        key, source, warnings = _resolve(repo, "", note="Wing next to the hospital")
        assert key == "Hospital"
        assert source == TypologySource.ALIAS
        assert warnings == []

    def test_resolved_class_comes_from_anchor(self, repo: ValuationDataRepository) -> None:
        resolved = repo.resolve_typology("Warehouse", None, "Residential", None, [])
        assert resolved.market_class == MarketClass.INDUSTRIAL
        assert (resolved.base_rate, resolved.max_rate) == (350, 1_400)

    def test_missing_typology(self, repo: ValuationDataRepository) -> None:
        key, source, warnings = _resolve(repo, "")
        assert key == "Residential fallback"
        assert source == TypologySource.CLASS_FALLBACK
        assert warnings == ["typology:missing"]

    def test_unknown_typology(self, repo: ValuationDataRepository) -> None:
        key, _, warnings = _resolve(repo, "Spaceport")
        assert key == "Residential fallback"
        assert warnings == ["typology:class_fallback"]

    def test_empty_category_is_not_skipped(self, repo: ValuationDataRepository) -> None:
        key, source, _ = _resolve(repo, "", category="", project_type="Commercial")
        assert key == "Residential fallback"
        assert source == TypologySource.CLASS_FALLBACK

    def test_missing_category_uses_project_type(self, repo: ValuationDataRepository) -> None:
        key, _, _ = _resolve(repo, None, project_type="Commercial")
        assert key == "Commercial fallback"

    def test_fallback_class_from_category(self, repo: ValuationDataRepository) -> None:
        warnings: list[str] = []
        resolved = repo.resolve_typology("Lab", "Industrial", "Residential", None, warnings)
        assert resolved.key == "Industrial fallback"
        assert (resolved.base_rate, resolved.max_rate) == (400, 1_600)

    def test_first_anchor_wins_ties(self) -> None:
        tuning = parse_valuation_tuning(
            {
                "typologyAnchorsUsdPerSqm": {
                    "Loft A": {"class": "Residential", "base": 1000, "max": 2000,
                               "aliases": ["loft"]},
                    "Loft B": {"class": "Residential", "base": 3000, "max": 4000,
                               "aliases": ["loft"]},
                }
            }
        )
        repo = ValuationDataRepository(tuning)
        assert _resolve(repo, "loft")[0] == "Loft A"

    def test_corridor_is_sanitized(self) -> None:
        tuning = parse_valuation_tuning(
            {
                "typologyAnchorsUsdPerSqm": {
                    "Shack": {"class": "Residential", "base": 50, "max": 60,
                              "aliases": ["shack"]},
                    "Hut": {"class": "Residential", "aliases": ["hut"]},
                }
            }
        )
        repo = ValuationDataRepository(tuning)
        shack = repo.resolve_typology("shack", None, None, None, [])
        hut = repo.resolve_typology("hut", None, None, None, [])
        assert (shack.base_rate, shack.max_rate) == (100, 101)
        assert (hut.base_rate, hut.max_rate) == (800, 6_000)


# ---------------------------------------------------------------------------
# Area, multipliers, completion, spread
# ---------------------------------------------------------------------------


class TestBuiltArea:
    def test_exact_entry(self, repo: ValuationDataRepository) -> None:
        warnings: list[str] = []
        area = repo.get_built_area_sqm(
            MarketClass.COMMERCIAL, MarketClass.RESIDENTIAL, "High-rise", warnings
        )
        assert area == 25_000
        assert warnings == []

    def test_unknown_scale_uses_low_rise(self, repo: ValuationDataRepository) -> None:
        warnings: list[str] = []
        area = repo.get_built_area_sqm(
            MarketClass.RESIDENTIAL, MarketClass.RESIDENTIAL, "Mega", warnings
        )
        assert area == 180
        assert warnings == ["built_area:scale_fallback"]

    def test_empty_table(self) -> None:
        repo = ValuationDataRepository(
            parse_valuation_tuning({"builtAreaSqmDefaults": {}})
        )
        warnings: list[str] = []
        area = repo.get_built_area_sqm(
            MarketClass.RESIDENTIAL, MarketClass.RESIDENTIAL, "Low-rise", warnings
        )
        assert area == 180
        assert warnings == ["built_area:fallback"]

    def test_project_class_table_used_when_resolved_class_missing(self) -> None:
        repo = ValuationDataRepository(
            parse_valuation_tuning({"builtAreaSqmDefaults": {"Commercial": {"Low-rise": 500}}})
        )
        area = repo.get_built_area_sqm(
            MarketClass.INDUSTRIAL, MarketClass.COMMERCIAL, "Low-rise", []
        )
        assert area == 500

    def test_tiny_area_clamped(self) -> None:
        repo = ValuationDataRepository(
            parse_valuation_tuning({"builtAreaSqmDefaults": {"Residential": {"Low-rise": 5}}})
        )
        area = repo.get_built_area_sqm(
            MarketClass.RESIDENTIAL, MarketClass.RESIDENTIAL, "Low-rise", []
        )
        assert area == 20


class TestMultipliers:
    def test_land_area_multiplier(self, repo: ValuationDataRepository) -> None:
        assert repo.land_area_multiplier("Mid-rise") == 0.9
        assert repo.land_area_multiplier("Mega") == 1.6

    def test_land_rate_multiplier(self, repo: ValuationDataRepository) -> None:
        assert repo.land_rate_multiplier(
            MarketClass.AGRICULTURAL, MarketClass.RESIDENTIAL
        ) == 0.22

    def test_land_rate_multiplier_default(self) -> None:
        repo = ValuationDataRepository(
            parse_valuation_tuning({"landRateMultiplierByType": {}})
        )
        assert repo.land_rate_multiplier(
            MarketClass.COMMERCIAL, MarketClass.COMMERCIAL
        ) == 0.5

    def test_completion_fraction(self, repo: ValuationDataRepository) -> None:
        assert repo.completion_fraction(Stage.STRUCTURE) == 0.4
        assert repo.completion_fraction("Demolition") == 0.45


class TestSpreadForConfidence:
    @pytest.mark.parametrize(
        ("confidence", "spread"),
        [(92, 0.12), (85, 0.12), (80, 0.16), (70, 0.20), (50, 0.28), (10, 0.34)],
    )
    def test_table(
        self, repo: ValuationDataRepository, confidence: float, spread: float
    ) -> None:
        assert repo.spread_for_confidence(confidence) == spread

    def test_rows_need_not_be_sorted(self) -> None:
        repo = ValuationDataRepository(
            parse_valuation_tuning(
                {"spreadByConfidence": [{"min": 0, "spread": 0.4}, {"min": 60, "spread": 0.2}]}
            )
        )
        assert repo.spread_for_confidence(70) == 0.2
        assert repo.spread_for_confidence(30) == 0.4

    def test_empty_table_uses_default_spread(self) -> None:
        repo = ValuationDataRepository(parse_valuation_tuning({"spreadByConfidence": []}))
        assert repo.spread_for_confidence(80) == 0.32
