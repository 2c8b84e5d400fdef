"""Domain services for guillotine sheet packing."""

from .offcuts import extract_offcuts, is_usable, utilization
from .ordering import OrderingStrategy, order_instances
from .orientation import (
    ensure_fits,
    expand_parts,
    fitting_orientations,
    resolve_orientations,
)
from .space_tracker import (
    Cut,
    CutAxis,
    GuillotineSpaceTracker,
    SplitOutcome,
    split_region,
)
from .waste_scoring import fragmentation_penalty, waste_score

__all__ = [
    "Cut",
    "CutAxis",
    "GuillotineSpaceTracker",
    "OrderingStrategy",
    "SplitOutcome",
    "ensure_fits",
    "expand_parts",
    "extract_offcuts",
    "fitting_orientations",
    "fragmentation_penalty",
    "is_usable",
    "order_instances",
    "resolve_orientations",
    "split_region",
    "utilization",
    "waste_score",
]
