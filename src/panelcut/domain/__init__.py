"""Domain layer: value objects, errors and packing services."""

from .exceptions import (
    AlgorithmInvariantViolation,
    InvalidConfigurationError,
    PackingError,
    PartTooLargeError,
    SheetCapacityError,
)
from .services import (
    Cut,
    CutAxis,
    GuillotineSpaceTracker,
    OrderingStrategy,
    SplitOutcome,
    expand_parts,
    extract_offcuts,
    order_instances,
    resolve_orientations,
    split_region,
    waste_score,
)
from .value_objects import (
    FreeRegion,
    Grain,
    Offcut,
    Orientation,
    Part,
    PartInstance,
    Placement,
    ScoringWeights,
    SplitAxis,
    StockSheet,
    WasteScoringConfig,
)

__all__ = [
    "AlgorithmInvariantViolation",
    "Cut",
    "CutAxis",
    "FreeRegion",
    "Grain",
    "GuillotineSpaceTracker",
    "InvalidConfigurationError",
    "Offcut",
    "OrderingStrategy",
    "Orientation",
    "PackingError",
    "Part",
    "PartInstance",
    "PartTooLargeError",
    "Placement",
    "ScoringWeights",
    "SheetCapacityError",
    "SplitAxis",
    "SplitOutcome",
    "StockSheet",
    "WasteScoringConfig",
    "expand_parts",
    "extract_offcuts",
    "order_instances",
    "resolve_orientations",
    "split_region",
    "waste_score",
]
