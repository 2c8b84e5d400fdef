"""Simulated annealing over placement order.

The greedy packer is deterministic for a given instance order, so the
search space here is the order itself: each step perturbs the current
permutation with a random move, decodes it with GuillotineBinPacker.place
and accepts or rejects the result by the Metropolis criterion. The
temperature cools geometrically and is reheated when the search stalls.

The optimizer only ever returns a result at least as good as the baseline
it was given.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, replace
from typing import Callable, Sequence

from panelcut.domain.exceptions import InvalidConfigurationError, SheetCapacityError
from panelcut.domain.value_objects import EPSILON, PartInstance, StockSheet
from panelcut.infrastructure.bin_packing import (
    GuillotineBinPacker,
    PackingResult,
    result_score,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnealingConfig:
    """Settings for the simulated annealing search.

    Attributes:
        time_budget: Wall-clock limit in seconds, None for no limit.
        max_iterations: Iteration limit, None for no limit.
        seed: Random seed; the same seed and iteration limit reproduce the
            same result.
        t_start: Initial temperature.
        t_end: Temperature floor.
        cooling_rate: Geometric cooling factor applied every iteration.
        reheat_fraction: Reheat temperature as a fraction of ``t_start``.
        stagnation_limit: Iterations without improvement before reheating.
    """

    time_budget: float | None = 5.0
    max_iterations: int | None = None
    seed: int | None = None
    t_start: float = 50.0
    t_end: float = 0.05
    cooling_rate: float = 0.995
    reheat_fraction: float = 0.3
    stagnation_limit: int = 500

    def __post_init__(self) -> None:
        if self.time_budget is None and self.max_iterations is None:
            raise InvalidConfigurationError(
                "Annealing needs a time budget or an iteration limit", "time_budget"
            )
        if self.time_budget is not None and self.time_budget <= 0:
            raise InvalidConfigurationError("Time budget must be positive", "time_budget")
        if self.max_iterations is not None and self.max_iterations < 0:
            raise InvalidConfigurationError(
                "Iteration limit must be non-negative", "max_iterations"
            )
        if not 0 < self.t_end <= self.t_start:
            raise InvalidConfigurationError(
                "Temperatures must satisfy 0 < t_end <= t_start", "t_end"
            )
        if not 0 < self.cooling_rate < 1:
            raise InvalidConfigurationError("Cooling rate must be in (0, 1)", "cooling_rate")
        if not 0 < self.reheat_fraction <= 1:
            raise InvalidConfigurationError(
                "Reheat fraction must be in (0, 1]", "reheat_fraction"
            )
        if self.stagnation_limit < 1:
            raise InvalidConfigurationError(
                "Stagnation limit must be at least 1", "stagnation_limit"
            )


def _swap(order: list[PartInstance], rng: random.Random) -> None:
    i, j = rng.sample(range(len(order)), 2)
    order[i], order[j] = order[j], order[i]


def _insert(order: list[PartInstance], rng: random.Random) -> None:
    item = order.pop(rng.randrange(len(order)))
    order.insert(rng.randrange(len(order) + 1), item)


def _reverse(order: list[PartInstance], rng: random.Random) -> None:
    n = len(order)
    length = rng.randint(2, min(8, n))
    start = rng.randrange(n - length + 1)
    order[start : start + length] = order[start : start + length][::-1]


def _block_swap(order: list[PartInstance], rng: random.Random) -> None:
    n = len(order)
    if n < 4:
        _swap(order, rng)
        return
    size = rng.randint(2, min(4, n // 2))
    first = rng.randrange(n - 2 * size + 1)
    second = first + size
    order[first:second], order[second : second + size] = (
        order[second : second + size],
        order[first:second],
    )


def _promote_constrained(order: list[PartInstance], rng: random.Random) -> None:
    indices = [i for i in range(1, len(order)) if order[i].is_constrained]
    if not indices:
        _insert(order, rng)
        return
    source = rng.choice(indices)
    item = order.pop(source)
    order.insert(rng.randrange(source), item)


# Move table as (cumulative probability, move)
MOVES: tuple[tuple[float, Callable[[list[PartInstance], random.Random], None]], ...] = (
    (0.35, _swap),
    (0.60, _insert),
    (0.75, _reverse),
    (0.90, _block_swap),
    (1.00, _promote_constrained),
)


def perturb(order: Sequence[PartInstance], rng: random.Random) -> list[PartInstance]:
    """Return a neighbouring permutation of ``order``."""
    candidate = list(order)
    if len(candidate) < 2:
        return candidate
    roll = rng.random()
    for threshold, move in MOVES:
        if roll < threshold:
            move(candidate, rng)
            break
    else:
        _swap(candidate, rng)
    return candidate


class SimulatedAnnealingOptimizer:
    """Order search driving GuillotineBinPacker as a black-box decoder.

    Attributes:
        packer: Packer used to decode permutations into layouts.
        config: Annealing settings.
    """

    def __init__(
        self,
        packer: GuillotineBinPacker,
        config: AnnealingConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.packer = packer
        self.config = config or AnnealingConfig()
        self._clock = clock

    def optimize(
        self,
        instances: Sequence[PartInstance],
        stock: StockSheet,
        baseline: PackingResult | None = None,
    ) -> PackingResult:
        """Search orderings of ``instances`` for a better layout.

        Args:
            instances: Starting permutation.
            stock: Stock sheet dimensions.
            baseline: Result to beat; decoded from ``instances`` when omitted.

        Returns:
            The best result found, never scoring below the baseline.

        Raises:
            AlgorithmInvariantViolation: If a decoded layout is inconsistent.
        """
        config = self.config
        if baseline is None:
            baseline = self.packer.place(instances, stock)
        if len(instances) < 2:
            return baseline

        rng = random.Random(config.seed)
        started = self._clock()

        current = list(instances)
        current_score = result_score(self._decode(current, stock))
        best_result = baseline
        best_score = result_score(baseline)

        temperature = config.t_start
        since_improvement = 0
        iterations = 0
        accepted = 0

        while True:
            if config.max_iterations is not None and iterations >= config.max_iterations:
                break
            if config.time_budget is not None and self._clock() - started >= config.time_budget:
                break
            iterations += 1

            candidate = perturb(current, rng)
            result = self._decode(candidate, stock)
            score = result_score(result)
            delta = score - current_score

            if delta >= 0 or rng.random() < math.exp(delta / temperature):
                current = candidate
                current_score = score
                accepted += 1

            if score > best_score + EPSILON:
                best_result = result
                best_score = score
                since_improvement = 0
                logger.debug(
                    "Iteration %d: new best %d sheets, %.1f%% utilization",
                    iterations,
                    result.total_sheets,
                    result.utilization * 100,
                )
            else:
                since_improvement += 1

            temperature = max(config.t_end, temperature * config.cooling_rate)
            if since_improvement >= config.stagnation_limit:
                temperature = config.t_start * config.reheat_fraction
                since_improvement = 0

        logger.info(
            "Annealing finished after %d iterations (%d accepted) in %.2fs",
            iterations,
            accepted,
            self._clock() - started,
        )

        if best_result is baseline:
            return baseline
        return replace(best_result, variant=f"{baseline.variant}+annealing")

    def _decode(self, order: Sequence[PartInstance], stock: StockSheet) -> PackingResult:
        """Decode an order; orders that overrun the sheet limit rank last."""
        try:
            return self.packer.place(order, stock)
        except SheetCapacityError as e:
            return PackingResult(error=e, stock=stock)
