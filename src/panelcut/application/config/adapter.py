"""Conversion of validated job schemas into domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from panelcut.application.config.schema import (
    OptimizeConfigSchema,
    PackingConfigSchema,
    PackingJobSchema,
    StockSchema,
)
from panelcut.domain.value_objects import (
    Part,
    ScoringWeights,
    StockSheet,
    WasteScoringConfig,
)

if TYPE_CHECKING:
    from panelcut.infrastructure.annealing import AnnealingConfig
    from panelcut.infrastructure.bin_packing import PackingConfig


def config_to_stock(config: StockSchema) -> StockSheet:
    return StockSheet(width=config.width, height=config.height)


def config_to_parts(config: PackingJobSchema) -> list[Part]:
    """Convert the job's part list, preserving file order."""
    return [
        Part(
            id=p.id,
            width=p.width,
            height=p.height,
            grain=p.grain,
            quantity=p.quantity,
            label=p.label,
        )
        for p in config.parts
    ]


def config_to_packing(config: PackingConfigSchema | None) -> "PackingConfig":
    """Convert Pydantic packing settings to the engine configuration.

    Returns the default PackingConfig if input is None.
    """
    # Lazy import to avoid circular dependencies
    from panelcut.infrastructure.bin_packing import PackingConfig

    if config is None:
        return PackingConfig()

    return PackingConfig(
        kerf=config.kerf,
        min_usable_width=config.min_usable_width,
        min_usable_height=config.min_usable_height,
        min_usable_area=config.min_usable_area,
        split_axis=config.split_axis,
        scoring_weights=ScoringWeights(
            fit=config.scoring_weights.fit,
            waste=config.scoring_weights.waste,
            guillotine=config.scoring_weights.guillotine,
        ),
        waste_scoring=WasteScoringConfig(
            usability_bonus=config.waste_scoring.usability_bonus,
            fragmentation_step=config.waste_scoring.fragmentation_step,
            fragmentation_cap=config.waste_scoring.fragmentation_cap,
        ),
        sliver_size=config.sliver_size,
        ordering=config.ordering,
        algorithm=config.algorithm,
        max_sheets=config.max_sheets,
    )


def config_to_annealing(config: OptimizeConfigSchema | None) -> "AnnealingConfig | None":
    """Convert optimize settings; None when the search is disabled."""
    from panelcut.infrastructure.annealing import AnnealingConfig

    if config is None or not config.enabled:
        return None

    return AnnealingConfig(
        time_budget=config.time_budget,
        max_iterations=config.max_iterations,
        seed=config.seed,
    )
