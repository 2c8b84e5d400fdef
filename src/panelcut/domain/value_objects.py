"""Value objects for the sheet cutting domain.

All dimensions are in millimetres. Sheet coordinates have their origin at
the top-left corner of the stock sheet with y growing downward.

All dataclasses are frozen (immutable) so that hypothetical layouts can
share them freely while candidate placements are being simulated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from panelcut.domain.exceptions import InvalidConfigurationError

# Tolerance for comparing coordinates produced by kerf arithmetic
EPSILON = 1e-6


class Grain(str, Enum):
    """Grain constraint for a part.

    Attributes:
        LENGTHWISE: Part height runs with the sheet grain, never rotated.
        WIDTHWISE: Part height runs across the sheet grain, always rotated 90 degrees.
        ANY: No constraint, the part may be placed in either rotation.
    """

    LENGTHWISE = "lengthwise"
    WIDTHWISE = "widthwise"
    ANY = "any"


class SplitAxis(str, Enum):
    """Which leftover gets the full-length cut when a region is split.

    Attributes:
        SHORTER: Cut along the shorter leftover first, keeping the larger
            leftover whole (squarer, more reusable offcuts).
        LONGER: Cut along the longer leftover first (denser strips).
    """

    SHORTER = "shorter"
    LONGER = "longer"


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidConfigurationError(
            f"Invalid {field_name} {value!r}; expected one of: {allowed}",
            field=field_name,
        ) from None


@dataclass(frozen=True)
class StockSheet:
    """Dimensions of the stock sheet parts are cut from.

    Attributes:
        width: Sheet width (x extent) in mm.
        height: Sheet height (y extent, along the grain) in mm.
    """

    width: float = 2700.0
    height: float = 1800.0

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise InvalidConfigurationError("Sheet width must be positive", "stock.width")
        if self.height <= 0:
            raise InvalidConfigurationError("Sheet height must be positive", "stock.height")

    @property
    def area(self) -> float:
        """Sheet area in square millimetres."""
        return self.width * self.height


@dataclass(frozen=True)
class Part:
    """A rectangle the caller needs cut.

    Attributes:
        id: Caller-supplied identifier, unique within a run.
        width: Nominal (un-rotated) width in mm.
        height: Nominal (un-rotated) height in mm.
        grain: Grain constraint restricting rotation.
        quantity: Number of identical pieces required.
        label: Optional display name.
    """

    id: str
    width: float
    height: float
    grain: Grain = Grain.ANY
    quantity: int = 1
    label: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidConfigurationError("Part id must not be empty", "parts.id")
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfigurationError(
                f"Part '{self.id}' dimensions must be positive", "parts.width"
            )
        if self.quantity < 1:
            raise InvalidConfigurationError(
                f"Part '{self.id}' quantity must be at least 1", "parts.quantity"
            )
        object.__setattr__(self, "grain", _coerce_enum(Grain, self.grain, "grain"))

    @property
    def area(self) -> float:
        """Area of a single piece."""
        return self.width * self.height


@dataclass(frozen=True)
class Orientation:
    """A legal placement shape for a part instance."""

    width: float
    height: float
    rotated: bool = False

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class PartInstance:
    """One physical piece of a part, with its grain-legal orientations.

    Attributes:
        part: The part this piece was expanded from.
        number: One-based copy number within the part's quantity.
        orientations: Legal orientations, unrotated first.
    """

    part: Part
    number: int
    orientations: tuple[Orientation, ...]

    @property
    def part_id(self) -> str:
        return self.part.id

    @property
    def key(self) -> str:
        """Unique instance identifier such as ``side#2``."""
        return f"{self.part.id}#{self.number}"

    @property
    def is_constrained(self) -> bool:
        """True when only one orientation is available."""
        return len(self.orientations) == 1

    @property
    def area(self) -> float:
        return self.part.area


@dataclass(frozen=True)
class FreeRegion:
    """A rectangle of unused sheet area."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)

    @property
    def long_side(self) -> float:
        return max(self.width, self.height)

    @property
    def aspect_ratio(self) -> float:
        """Shorter side over longer side, 1.0 for a square."""
        if self.long_side <= 0:
            return 0.0
        return self.short_side / self.long_side

    def can_contain(self, width: float, height: float) -> bool:
        """Check whether a width x height rectangle fits inside."""
        return width <= self.width + EPSILON and height <= self.height + EPSILON

    def contains_region(self, other: FreeRegion) -> bool:
        return (
            other.x >= self.x - EPSILON
            and other.y >= self.y - EPSILON
            and other.right <= self.right + EPSILON
            and other.bottom <= self.bottom + EPSILON
        )

    def overlaps(self, other: FreeRegion) -> bool:
        """Check for a positive-area intersection."""
        return (
            self.x < other.right - EPSILON
            and other.x < self.right - EPSILON
            and self.y < other.bottom - EPSILON
            and other.y < self.bottom - EPSILON
        )


@dataclass(frozen=True)
class Placement:
    """A committed assignment of a part instance to a sheet position.

    Attributes:
        part_id: Id of the placed part.
        instance: One-based copy number of the part.
        x: Left edge in sheet coordinates.
        y: Top edge in sheet coordinates.
        orientation: Orientation the piece was cut in.
        sheet_index: Zero-based index of the sheet.
    """

    part_id: str
    instance: int
    x: float
    y: float
    orientation: Orientation
    sheet_index: int

    def __post_init__(self) -> None:
        if self.x < -EPSILON or self.y < -EPSILON:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def width(self) -> float:
        return self.orientation.width

    @property
    def height(self) -> float:
        return self.orientation.height

    @property
    def rotated(self) -> bool:
        return self.orientation.rotated

    @property
    def area(self) -> float:
        return self.orientation.area

    @property
    def bounds(self) -> FreeRegion:
        """Bounding rectangle of the placed piece."""
        return FreeRegion(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Offcut:
    """A free region remaining after packing, classified for reuse.

    Attributes:
        x: Left edge in sheet coordinates.
        y: Top edge in sheet coordinates.
        width: Offcut width in mm.
        height: Offcut height in mm.
        sheet_index: Sheet the offcut comes from.
        usable: True if large enough to return to stock.
    """

    x: float
    y: float
    width: float
    height: float
    sheet_index: int
    usable: bool

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Offcut dimensions must be positive")
        if self.sheet_index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the combined placement score.

    Attributes:
        fit: Weight of fit tightness (little area discarded by the split).
        waste: Weight of the post-split waste consolidation score.
        guillotine: Weight of the edge alignment indicator (cuts saved).
    """

    fit: float = 0.3
    waste: float = 0.5
    guillotine: float = 0.2

    def __post_init__(self) -> None:
        if min(self.fit, self.waste, self.guillotine) < 0:
            raise InvalidConfigurationError(
                "Scoring weights must be non-negative", "scoring_weights"
            )
        if self.fit + self.waste + self.guillotine <= 0:
            raise InvalidConfigurationError(
                "At least one scoring weight must be positive", "scoring_weights"
            )


@dataclass(frozen=True)
class WasteScoringConfig:
    """Tunable constants of the waste consolidation score.

    Attributes:
        usability_bonus: Multiplier applied when the largest free region is
            a usable offcut.
        fragmentation_step: Penalty added per free region beyond the first.
        fragmentation_cap: Upper bound of the fragmentation penalty.
    """

    usability_bonus: float = 1.3
    fragmentation_step: float = 0.05
    fragmentation_cap: float = 0.5

    def __post_init__(self) -> None:
        if self.usability_bonus < 1.0:
            raise InvalidConfigurationError(
                "Usability bonus must be at least 1.0", "waste_scoring.usability_bonus"
            )
        if self.fragmentation_step < 0:
            raise InvalidConfigurationError(
                "Fragmentation step must be non-negative",
                "waste_scoring.fragmentation_step",
            )
        if not 0 <= self.fragmentation_cap < 1:
            raise InvalidConfigurationError(
                "Fragmentation cap must be in [0, 1)", "waste_scoring.fragmentation_cap"
            )
