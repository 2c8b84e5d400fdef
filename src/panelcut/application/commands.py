"""Application commands (use cases) for sheet packing."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from panelcut.application.config import (
    PackingJobSchema,
    config_to_annealing,
    config_to_packing,
    config_to_parts,
    config_to_stock,
)
from panelcut.domain.exceptions import InvalidConfigurationError
from panelcut.infrastructure.bin_packing import (
    BinPackingService,
    PackingResult,
)

if TYPE_CHECKING:
    from panelcut.infrastructure.annealing import AnnealingConfig

logger = logging.getLogger(__name__)


class PackCutListCommand:
    """Command to pack a validated job onto stock sheets.

    Overrides passed to execute() take precedence over the job's
    ``optimize`` section, so the command line can turn the annealing
    search on or off without editing the file.
    """

    def execute(
        self,
        job: PackingJobSchema,
        optimize: bool | None = None,
        time_budget: float | None = None,
        seed: int | None = None,
    ) -> PackingResult:
        """Execute the packing command.

        Args:
            job: Validated job.
            optimize: Force the annealing search on or off.
            time_budget: Override of the annealing time budget in seconds.
            seed: Override of the annealing random seed.

        Returns:
            PackingResult; failures are reported through ``error``. With
            ``packing.variants`` off only the configured engine runs.
        """
        try:
            stock = config_to_stock(job.stock)
            parts = config_to_parts(job)
            config = config_to_packing(job.packing)
            annealing = self._annealing(job, optimize, time_budget, seed)
        except InvalidConfigurationError as e:
            logger.warning("Invalid job: %s", e)
            return PackingResult.failed(e, [p.model_dump() for p in job.parts])

        service = BinPackingService(
            config,
            variants=None if job.packing.variants else [("configured", config)],
            workers=job.packing.workers,
            annealing=annealing,
        )
        return service.optimize(parts, stock)

    def _annealing(
        self,
        job: PackingJobSchema,
        optimize: bool | None,
        time_budget: float | None,
        seed: int | None,
    ) -> "AnnealingConfig | None":
        settings = job.optimize
        if optimize is not None:
            settings = settings.model_copy(update={"enabled": optimize})
        annealing = config_to_annealing(settings)
        if annealing is None:
            return None
        overrides: dict[str, float | int] = {}
        if time_budget is not None:
            overrides["time_budget"] = time_budget
        if seed is not None:
            overrides["seed"] = seed
        return replace(annealing, **overrides) if overrides else annealing
