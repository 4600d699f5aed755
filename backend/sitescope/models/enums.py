"""Enums for the Sitescope domain models.

Labels mirror the upstream site-analysis schema, so enum values are the
exact strings the vision model emits (``"Structure"``, ``"Mid-rise"``...).
"""

from __future__ import annotations

from enum import StrEnum


class Stage(StrEnum):
    """The six ordered construction phases."""

    PLANNING = "Planning"
    FOUNDATION = "Foundation"
    STRUCTURE = "Structure"
    SERVICES = "Services"
    FINISHING = "Finishing"
    COMPLETED = "Completed"


class Scale(StrEnum):
    """Project scale labels."""

    LOW_RISE = "Low-rise"
    MID_RISE = "Mid-rise"
    HIGH_RISE = "High-rise"
    LARGE_SITE = "Large-site"


class ProjectStatus(StrEnum):
    """Overall project status as displayed to the user."""

    COMPLETED = "Completed"
    UNDER_CONSTRUCTION = "Under Construction"
    UNKNOWN = "Unknown"


class Availability(StrEnum):
    """Ordinal supply level for labor, machinery, and materials."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    def shifted(self, delta: int) -> Availability:
        """Move ``delta`` levels along Low < Medium < High, clamped at the ends."""
        levels = list(Availability)
        index = levels.index(self) + delta
        return levels[max(0, min(len(levels) - 1, index))]


class PaintStatus(StrEnum):
    """Procurement state of a paint lot."""

    ACQUIRED = "Acquired"
    TO_PROCURE = "To Procure"


class StageBucket(StrEnum):
    """Coarse stage grouping used to boost stage-relevant machinery."""

    FOUNDATION = "foundation"
    STRUCTURE = "structure"
    SERVICES = "services"
    FINISHING = "finishing"

    @classmethod
    def for_stage(cls, stage: Stage) -> StageBucket:
        if stage in (Stage.PLANNING, Stage.FOUNDATION):
            return cls.FOUNDATION
        if stage == Stage.STRUCTURE:
            return cls.STRUCTURE
        if stage == Stage.SERVICES:
            return cls.SERVICES
        return cls.FINISHING


class GeoStatus(StrEnum):
    """How the site coordinates were acquired."""

    EXIF = "exif"
    GPS = "gps"
    MANUAL = "manual"
    DENIED = "denied"
    NONE = "none"


class MarketClass(StrEnum):
    """Top-level market classes used for valuation."""

    RESIDENTIAL = "Residential"
    COMMERCIAL = "Commercial"
    INDUSTRIAL = "Industrial"
    AGRICULTURAL = "Agricultural"
    RECREATIONAL_CULTURAL = "Recreational/Cultural"
    INSTITUTIONAL = "Institutional"
    MIXED_USE = "Mixed-use"
    INFRASTRUCTURE = "Infrastructure"


class PricingBasis(StrEnum):
    """Whether a typology is priced on built-up area or on land only."""

    BUILT_UP = "built_up"
    LAND_ONLY = "land_only"


class TypologySource(StrEnum):
    """Provenance of a resolved typology."""

    ALIAS = "alias"
    CLASS_FALLBACK = "classFallback"


class DensityBand(StrEnum):
    """Population density band derived from free text."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_text(cls, value: str | None) -> DensityBand:
        text = (value or "").lower()
        if "high" in text:
            return cls.HIGH
        if "low" in text:
            return cls.LOW
        return cls.MEDIUM
