"""Location term lists for cost and price-position adjustment.

Matching is substring-based on lowercased free text. Tiers are checked
in declaration order and the first tier with a hit wins, so a location
mentioning both "London" and "remote" lands in the ultra-high tier.
"""

from __future__ import annotations

# Resource planning: (tier name, cost multiplier, terms).
# National average = 1.00.
LOCATION_COST_TIERS: list[tuple[str, float, tuple[str, ...]]] = [
    (
        "ultra_high",
        1.26,
        ("new york", "san francisco", "london", "zurich", "singapore", "dubai", "tokyo"),
    ),
    (
        "high",
        1.14,
        (
            "mumbai",
            "delhi",
            "bengaluru",
            "bangalore",
            "seattle",
            "toronto",
            "sydney",
            "melbourne",
            "paris",
        ),
    ),
    ("low", 0.86, ("rural", "village", "tier-3", "small town", "remote")),
]

# Index when no tier matches
DEFAULT_LOCATION_COST_INDEX: float = 1.00

# Valuation: micro-location signals that move a rate within its typology band.
ULTRA_PRIME_TERMS: list[str] = [
    "south mumbai",
    "worli",
    "bandra west",
    "lutyens",
    "manhattan",
    "mayfair",
    "knightsbridge",
    "palm jumeirah",
    "beverly hills",
    "marina bay",
    "sea facing",
    "waterfront",
]

PRIME_TERMS: list[str] = [
    "mumbai",
    "delhi",
    "gurugram",
    "gurgaon",
    "bengaluru",
    "bangalore",
    "hyderabad",
    "pune",
    "chennai",
    "new york",
    "london",
    "singapore",
    "dubai",
    "san francisco",
    "tokyo",
    "downtown",
    "cbd",
    "central business",
    "gated community",
]

BUDGET_TERMS: list[str] = [
    "rural",
    "village",
    "remote",
    "tier-3",
    "tier 3",
    "small town",
    "outskirts",
    "peri-urban",
]
