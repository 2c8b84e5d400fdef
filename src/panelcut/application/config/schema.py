"""Pydantic models for packing job files.

A job file describes the stock sheet, the parts to cut and optional packing
and optimization settings:

    {
        "version": "1.0",
        "stock": {"width": 2700, "height": 1800},
        "parts": [{"id": "side", "width": 560, "height": 720, "quantity": 2}],
        "packing": {"kerf": 4, "split_axis": "shorter"},
        "optimize": {"enabled": true, "time_budget": 10, "seed": 7}
    }
"""

from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from panelcut.domain.services.ordering import OrderingStrategy
from panelcut.domain.value_objects import Grain, SplitAxis

# Version 1.0: stock, parts, packing and optimize sections
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class StockSchema(BaseModel):
    """Stock sheet dimensions in millimetres."""

    model_config = ConfigDict(extra="forbid")

    width: float = Field(default=2700.0, gt=0, description="Sheet width in mm")
    height: float = Field(default=1800.0, gt=0, description="Sheet height in mm")


class PartSchema(BaseModel):
    """A part to cut.

    Attributes:
        id: Unique part identifier.
        width: Nominal width in mm.
        height: Nominal height in mm (along the grain for lengthwise parts).
        grain: Grain constraint.
        quantity: Number of identical pieces.
        label: Optional display name.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    grain: Grain = Grain.ANY
    quantity: int = Field(default=1, ge=1)
    label: str | None = None


class ScoringWeightsSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fit: float = Field(default=0.3, ge=0)
    waste: float = Field(default=0.5, ge=0)
    guillotine: float = Field(default=0.2, ge=0)


class WasteScoringSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    usability_bonus: float = Field(default=1.3, ge=1.0)
    fragmentation_step: float = Field(default=0.05, ge=0)
    fragmentation_cap: float = Field(default=0.5, ge=0, lt=1)


class PackingConfigSchema(BaseModel):
    """Packing engine settings.

    Attributes:
        kerf: Saw blade kerf in mm.
        min_usable_width: Minimum usable offcut width in mm.
        min_usable_height: Minimum usable offcut height in mm.
        min_usable_area: Minimum usable offcut area in mm².
        split_axis: Leftover axis preference ("shorter" or "longer").
        sliver_size: Leftovers with a side below this are discarded.
        ordering: Placement order strategy.
        scoring_weights: Placement score weights.
        waste_scoring: Waste consolidation constants.
        variants: Whether to try alternative configurations and keep the best.
        workers: Worker processes for variant runs.
        algorithm: Placement engine ("guillotine" or "shelf").
        max_sheets: Sheet limit; a job needing more sheets fails.
    """

    model_config = ConfigDict(extra="forbid")

    kerf: float = Field(default=4.0, ge=0, le=20, description="Saw kerf in mm")
    min_usable_width: float = Field(default=150.0, ge=0)
    min_usable_height: float = Field(default=150.0, ge=0)
    min_usable_area: float = Field(default=100_000.0, ge=0)
    split_axis: SplitAxis = SplitAxis.SHORTER
    sliver_size: float = Field(default=150.0, ge=0)
    ordering: OrderingStrategy = OrderingStrategy.AREA
    scoring_weights: ScoringWeightsSchema = Field(default_factory=ScoringWeightsSchema)
    waste_scoring: WasteScoringSchema = Field(default_factory=WasteScoringSchema)
    variants: bool = Field(default=True, description="Run best-of-N variants")
    workers: int = Field(default=1, ge=1, le=64)
    algorithm: Literal["guillotine", "shelf"] = "guillotine"
    max_sheets: int | None = Field(default=None, ge=1)

    @field_validator("scoring_weights")
    @classmethod
    def validate_weights(cls, v: ScoringWeightsSchema) -> ScoringWeightsSchema:
        """Require at least one positive weight."""
        if v.fit + v.waste + v.guillotine <= 0:
            raise ValueError("At least one scoring weight must be positive")
        return v


class OptimizeConfigSchema(BaseModel):
    """Simulated annealing settings ("optimize harder")."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    time_budget: float = Field(default=5.0, gt=0, le=3600, description="Seconds")
    max_iterations: int | None = Field(default=None, ge=0)
    seed: int | None = None


class PackingJobSchema(BaseModel):
    """Root model of a packing job file.

    Example:
        >>> job = PackingJobSchema(
        ...     version="1.0",
        ...     parts=[PartSchema(id="shelf", width=800, height=300)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    version: str = Field(..., pattern=r"^\d+\.\d+$")
    stock: StockSchema = Field(default_factory=StockSchema)
    parts: list[PartSchema] = Field(default_factory=list)
    packing: PackingConfigSchema = Field(default_factory=PackingConfigSchema)
    optimize: OptimizeConfigSchema = Field(default_factory=OptimizeConfigSchema)

    @field_validator("version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept known versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @field_validator("parts")
    @classmethod
    def validate_unique_ids(cls, v: list[PartSchema]) -> list[PartSchema]:
        seen: set[str] = set()
        for part in v:
            if part.id in seen:
                raise ValueError(f"Duplicate part id '{part.id}'")
            seen.add(part.id)
        return v
