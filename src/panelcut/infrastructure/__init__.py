"""Infrastructure layer - packing engines, optimizers and formatters."""

from .annealing import AnnealingConfig, SimulatedAnnealingOptimizer
from .bin_packing import (
    BinPackingService,
    GuillotineBinPacker,
    PackingAlgorithm,
    PackingConfig,
    PackingResult,
    SheetLayout,
    UnplacedPart,
    create_packer,
    default_variants,
    pack_parts,
    result_score,
)
from .formatters import JsonResultExporter, LayoutReportFormatter
from .shelf_packing import ShelfPacker

__all__ = [
    "AnnealingConfig",
    "BinPackingService",
    "GuillotineBinPacker",
    "JsonResultExporter",
    "LayoutReportFormatter",
    "PackingAlgorithm",
    "PackingConfig",
    "PackingResult",
    "SheetLayout",
    "ShelfPacker",
    "SimulatedAnnealingOptimizer",
    "UnplacedPart",
    "create_packer",
    "default_variants",
    "pack_parts",
    "result_score",
]
