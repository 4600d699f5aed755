"""Input and output models for the resource planning engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sitescope.exceptions import InputValidationError
from sitescope.models.enums import Availability, PaintStatus, ProjectStatus, Stage
from sitescope.models.site import CategoryRow, GeoFactors  # noqa: TCH001

if TYPE_CHECKING:
    from collections.abc import Mapping


class ResourcePlanInput(BaseModel):
    """A validated site description to plan remaining resources for.

    Every field has a default so a partially populated payload still
    produces a plan. ``scale`` stays a plain string: unknown labels are
    legal and fall back to a scale factor of 1.
    """

    model_config = ConfigDict(frozen=True)

    status: ProjectStatus = ProjectStatus.UNKNOWN
    stage: Stage = Stage.PLANNING
    progress_value: float = Field(default=0.0, ge=0, le=100)
    project_type: str = ""
    scale: str = "Low-rise"
    construction_type: str = ""
    location: str = ""
    note: str = ""
    category: CategoryRow | None = None
    geo: GeoFactors | None = None
    advanced_recommendations: list[str] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ResourcePlanInput:
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            msg = f"Invalid resource plan input: {exc.error_count()} error(s)"
            raise InputValidationError(msg) from exc


class LaborRequirement(BaseModel):
    """Headcount and cost for one trade."""

    role: str
    required: int = Field(ge=1)
    availability: Availability
    daily_rate_usd: float
    estimated_days: int
    total_cost_usd: float


class MachineryRequirement(BaseModel):
    """Units, hours, and cost for one machine type."""

    machine: str
    units: int = Field(ge=1)
    availability: Availability
    hourly_rate_usd: float
    estimated_hours: int
    total_cost_usd: float


class MaterialRequirement(BaseModel):
    """Remaining quantity and cost for one material line."""

    item: str
    quantity: int
    unit: str
    availability: Availability
    unit_cost_usd: float
    total_cost_usd: float


class PaintRequirement(BaseModel):
    """A paint lot for one finish zone."""

    zone: str
    shade: str
    color_code: str
    liters: int
    status: PaintStatus


class ResourcePlanOutput(BaseModel):
    """Itemized resources and execution guidance for finishing a project."""

    progress_value: float
    labor_availability: Availability
    location_cost_index: float = 1.0
    labor: list[LaborRequirement]
    machinery: list[MachineryRequirement]
    materials: list[MaterialRequirement]
    paints: list[PaintRequirement]
    components: list[str] = Field(default_factory=list, max_length=4)
    techniques: list[str] = Field(default_factory=list, max_length=4)
    special_requirements: list[str] = Field(default_factory=list, max_length=4)
    vernacular_materials: list[str] = Field(default_factory=list, max_length=4)
    construction_insights: list[str] = Field(default_factory=list, max_length=4)
    procurement_insights: list[str] = Field(default_factory=list, max_length=4)
    completion_insights: list[str] = Field(default_factory=list, max_length=4)

    @property
    def labor_cost_total(self) -> float:
        return round(sum(row.total_cost_usd for row in self.labor), 2)

    @property
    def machinery_cost_total(self) -> float:
        return round(sum(row.total_cost_usd for row in self.machinery), 2)

    @property
    def material_cost_total(self) -> float:
        return round(sum(row.total_cost_usd for row in self.materials), 2)

    @property
    def total_cost(self) -> float:
        return round(
            self.labor_cost_total + self.machinery_cost_total + self.material_cost_total,
            2,
        )

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict for frontend consumption."""
        from sitescope.formatting import format_currency

        acquired = sum(1 for paint in self.paints if paint.status == PaintStatus.ACQUIRED)
        return {
            "progress_value": self.progress_value,
            "labor_availability": self.labor_availability.value,
            "location_cost_index": self.location_cost_index,
            "headcount": sum(row.required for row in self.labor),
            "labor_cost_formatted": format_currency(self.labor_cost_total),
            "machinery_cost_formatted": format_currency(self.machinery_cost_total),
            "material_cost_formatted": format_currency(self.material_cost_total),
            "total_cost_formatted": format_currency(self.total_cost),
            "paint_lots_acquired": f"{acquired} of {len(self.paints)}",
            "top_insight": self.construction_insights[0] if self.construction_insights else None,
        }
