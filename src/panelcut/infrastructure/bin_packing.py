"""Guillotine bin packing for sheet material optimization.

This module provides the packing configuration, the result data models and
the placement engine that lays part instances out on stock sheets with
guillotine-only cuts.

GuillotineBinPacker performs one deterministic greedy pass and raises
PackingError subclasses on failure. BinPackingService wraps it: it runs a
small set of configuration variants (best-of-N, including the shelf engine
from shelf_packing), optionally refines the winner with simulated
annealing, and returns every outcome, failures included, as a
PackingResult.

pack_parts is the library entry point. It also takes parts, stock and
configuration as plain mappings and validates them itself.

All dataclasses are frozen (immutable) to ensure thread safety and
hashability.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Sequence, Union

from panelcut.domain.exceptions import (
    AlgorithmInvariantViolation,
    InvalidConfigurationError,
    PackingError,
    PartTooLargeError,
    SheetCapacityError,
)
from panelcut.domain.services import (
    Cut,
    GuillotineSpaceTracker,
    OrderingStrategy,
    SplitOutcome,
    expand_parts,
    extract_offcuts,
    order_instances,
    utilization,
    waste_score,
)
from panelcut.domain.value_objects import (
    EPSILON,
    FreeRegion,
    Offcut,
    Part,
    PartInstance,
    Placement,
    ScoringWeights,
    SplitAxis,
    StockSheet,
    WasteScoringConfig,
    _coerce_enum,
)

if TYPE_CHECKING:
    from panelcut.infrastructure.annealing import AnnealingConfig

logger = logging.getLogger(__name__)

# Score handicap per sheet when ranking complete results
SHEET_PENALTY = 1000.0


class PackingAlgorithm(str, Enum):
    """Placement engine used for a run.

    Attributes:
        GUILLOTINE: Best-scored free region across all open sheets.
        SHELF: Full-width shelves filled left to right, fewer distinct cuts.
    """

    GUILLOTINE = "guillotine"
    SHELF = "shelf"


@dataclass(frozen=True)
class PackingConfig:
    """Configuration for guillotine packing.

    Attributes:
        kerf: Saw blade kerf width in mm.
        min_usable_width: Minimum width of a usable offcut in mm.
        min_usable_height: Minimum height of a usable offcut in mm.
        min_usable_area: Minimum area of a usable offcut in mm².
        split_axis: Leftover axis preference for every split.
        scoring_weights: Weights of the combined placement score.
        waste_scoring: Constants of the waste consolidation score.
        sliver_size: Free regions with a side below this are dropped. The
            packer lowers it to the smallest part side of the run so that
            leftovers able to host a part are never discarded.
        ordering: Placement order strategy.
        verify_layouts: Run geometric invariant checks on every sheet.
        algorithm: Placement engine. The shelf engine ignores split_axis
            and scoring_weights since its cut directions are fixed.
        max_sheets: Upper bound on sheets per run, None for no limit.
    """

    kerf: float = 4.0
    min_usable_width: float = 150.0
    min_usable_height: float = 150.0
    min_usable_area: float = 100_000.0
    split_axis: SplitAxis = SplitAxis.SHORTER
    scoring_weights: ScoringWeights = field(default_factory=ScoringWeights)
    waste_scoring: WasteScoringConfig = field(default_factory=WasteScoringConfig)
    sliver_size: float = 150.0
    ordering: OrderingStrategy = OrderingStrategy.AREA
    verify_layouts: bool = True
    algorithm: PackingAlgorithm = PackingAlgorithm.GUILLOTINE
    max_sheets: int | None = None

    def __post_init__(self) -> None:
        if self.max_sheets is not None and self.max_sheets < 1:
            raise InvalidConfigurationError("Sheet limit must be at least 1", "max_sheets")
        if self.kerf < 0:
            raise InvalidConfigurationError("Kerf must be non-negative", "kerf")
        if self.min_usable_width < 0 or self.min_usable_height < 0:
            raise InvalidConfigurationError(
                "Minimum usable dimensions must be non-negative", "min_usable_width"
            )
        if self.min_usable_area < 0:
            raise InvalidConfigurationError(
                "Minimum usable area must be non-negative", "min_usable_area"
            )
        if self.sliver_size < 0:
            raise InvalidConfigurationError("Sliver size must be non-negative", "sliver_size")
        object.__setattr__(
            self, "split_axis", _coerce_enum(SplitAxis, self.split_axis, "split_axis")
        )
        object.__setattr__(
            self, "ordering", _coerce_enum(OrderingStrategy, self.ordering, "ordering")
        )
        object.__setattr__(
            self, "algorithm", _coerce_enum(PackingAlgorithm, self.algorithm, "algorithm")
        )


@dataclass(frozen=True)
class SheetLayout:
    """Layout of parts on a single sheet.

    Attributes:
        index: Zero-based index of this sheet in the packing result.
        stock: Stock sheet dimensions.
        placements: Placed parts in placement order.
        free_regions: Free regions left after packing.
        usable_offcuts: Free regions large enough to return to stock.
        scrap_offcuts: Free regions below the usable thresholds.
        dropped_area: Area lost to kerf and dropped slivers.
        cuts: Guillotine cuts in saw order.
        waste_score: Consolidation score of the final free regions.
    """

    index: int
    stock: StockSheet
    placements: tuple[Placement, ...]
    free_regions: tuple[FreeRegion, ...] = ()
    usable_offcuts: tuple[Offcut, ...] = ()
    scrap_offcuts: tuple[Offcut, ...] = ()
    dropped_area: float = 0.0
    cuts: tuple[Cut, ...] = ()
    waste_score: float = 1.0

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def used_area(self) -> float:
        """Total area covered by placed parts."""
        return sum(p.area for p in self.placements)

    @property
    def scrap_area(self) -> float:
        """Area of scrap offcuts plus kerf and sliver loss."""
        return sum(o.area for o in self.scrap_offcuts) + self.dropped_area

    @property
    def utilization(self) -> float:
        return self.used_area / self.stock.area

    @property
    def piece_count(self) -> int:
        return len(self.placements)

    @property
    def waste_area(self) -> float:
        """Sheet area not covered by parts, offcuts included."""
        return self.stock.area - self.used_area

    @property
    def cut_count(self) -> int:
        return len(self.cuts)

    @property
    def cut_length(self) -> float:
        """Total saw travel in mm."""
        return sum(c.length for c in self.cuts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "cut_count": self.cut_count,
            "cut_length": self.cut_length,
            "placements": [
                {
                    "part_id": p.part_id,
                    "instance": p.instance,
                    "x": p.x,
                    "y": p.y,
                    "width": p.width,
                    "height": p.height,
                    "rotated": p.rotated,
                }
                for p in self.placements
            ],
            "usable_offcuts": [
                {"x": o.x, "y": o.y, "width": o.width, "height": o.height}
                for o in self.usable_offcuts
            ],
            "scrap_area": self.scrap_area,
        }


@dataclass(frozen=True)
class UnplacedPart:
    """A part that could not be placed, with the reason.

    Attributes:
        part_id: Id of the part.
        count: Number of pieces not placed.
        reason: Error category, e.g. ``part_too_large``.
    """

    part_id: str
    count: int
    reason: str


@dataclass(frozen=True)
class PackingResult:
    """Complete result of a packing run.

    Attributes:
        sheets: Sheet layouts, empty when the run failed.
        utilization: Placed area over the total area of used sheets.
        unplaced: Parts that could not be placed (empty on success).
        error: The failure that aborted the run, if any.
        stock: Stock sheet used for the run.
        variant: Name of the configuration variant that produced the layout.
    """

    sheets: tuple[SheetLayout, ...] = ()
    utilization: float = 0.0
    unplaced: tuple[UnplacedPart, ...] = ()
    error: PackingError | None = None
    stock: StockSheet | None = None
    variant: str = "configured"

    def __post_init__(self) -> None:
        if not 0.0 <= self.utilization <= 1.0 + EPSILON:
            raise ValueError("Utilization must be between 0 and 1")

    @classmethod
    def failed(
        cls,
        error: PackingError,
        parts: Sequence[PartInput] = (),
        stock: StockSheet | None = None,
    ) -> PackingResult:
        """Build a failure result; no partial layout is ever returned.

        ``parts`` may hold Part objects or the raw mappings a request was
        built from, so that a rejected request still names its parts.
        """
        entries = [_part_quantity(p, n) for n, p in enumerate(parts)]
        quantities = dict(entries)
        if isinstance(error, SheetCapacityError):
            unplaced = tuple(
                UnplacedPart(pid, count, error.error_type)
                for pid, count in error.part_counts.items()
            )
        elif isinstance(error, PartTooLargeError):
            unplaced = tuple(
                UnplacedPart(pid, quantities.get(pid, 1), error.error_type)
                for pid in error.part_ids
            )
        else:
            unplaced = tuple(
                UnplacedPart(pid, count, error.error_type) for pid, count in entries
            )
        return cls(unplaced=unplaced, error=error, stock=stock)

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def total_sheets(self) -> int:
        return len(self.sheets)

    @property
    def total_pieces_placed(self) -> int:
        return sum(s.piece_count for s in self.sheets)

    @property
    def usable_offcuts(self) -> tuple[Offcut, ...]:
        return tuple(o for s in self.sheets for o in s.usable_offcuts)

    @property
    def largest_usable_offcut_area(self) -> float:
        return max((o.area for o in self.usable_offcuts), default=0.0)

    @property
    def used_area(self) -> float:
        return sum(s.used_area for s in self.sheets)

    @property
    def waste_area(self) -> float:
        return sum(s.waste_area for s in self.sheets)

    @property
    def cut_count(self) -> int:
        return sum(s.cut_count for s in self.sheets)

    @property
    def cut_length(self) -> float:
        return sum(s.cut_length for s in self.sheets)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        data: dict[str, Any] = {
            "sheets": [s.to_dict() for s in self.sheets],
            "utilization": self.utilization,
            "stats": {
                "used_area": self.used_area,
                "waste_area": self.waste_area,
                "cuts": self.cut_count,
                "cut_length": self.cut_length,
            },
            "unplaced": [
                {"part_id": u.part_id, "count": u.count, "reason": u.reason}
                for u in self.unplaced
            ],
        }
        if self.error is not None:
            data["error"] = {"type": self.error.error_type, "message": self.error.message}
        return data


def result_score(result: PackingResult) -> float:
    """Rank complete results, higher is better.

    Sheet count dominates; among equal sheet counts utilization, mean waste
    consolidation and the share of the largest usable offcut decide.
    Failed results rank below everything.
    """
    if not result.success or result.stock is None:
        return -math.inf
    if not result.sheets:
        return 0.0
    mean_waste = sum(s.waste_score for s in result.sheets) / len(result.sheets)
    offcut_share = result.largest_usable_offcut_area / result.stock.area
    return (
        -SHEET_PENALTY * result.total_sheets
        + 100.0 * result.utilization
        + 10.0 * mean_waste
        + 5.0 * offcut_share
    )


@dataclass
class _SheetState:
    """Internal state for a sheet during packing."""

    index: int
    tracker: GuillotineSpaceTracker
    placements: list[Placement] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    sheet: _SheetState
    outcome: SplitOutcome
    score: float


class GuillotineBinPacker:
    """Greedy best-candidate guillotine packer.

    For each instance in order, every free region of every open sheet is
    tried in every legal orientation. Each candidate split is simulated and
    scored as a weighted sum of fit tightness, the waste consolidation of
    the resulting free regions and an edge alignment indicator. The best
    candidate is committed; a new sheet is opened only when no open sheet
    can host the instance.

    The algorithm is single-pass and deterministic: ties keep the first
    candidate found in sheet, orientation and region order.

    Attributes:
        config: Packing configuration.
    """

    def __init__(self, config: PackingConfig | None = None) -> None:
        """Initialize the packer with configuration.

        Args:
            config: Packing configuration, defaults to PackingConfig().
        """
        self.config = config or PackingConfig()

    def pack(self, parts: Sequence[Part], stock: StockSheet) -> PackingResult:
        """Expand, order and place parts.

        Raises:
            InvalidConfigurationError: On duplicate part ids.
            PartTooLargeError: If a part fits the stock in no legal orientation.
            SheetCapacityError: If the parts need more than max_sheets.
            AlgorithmInvariantViolation: If a produced layout is inconsistent.
        """
        instances = expand_parts(parts, stock)
        ordered = order_instances(instances, self.config.ordering)
        return self.place(ordered, stock)

    def place(self, instances: Sequence[PartInstance], stock: StockSheet) -> PackingResult:
        """Place instances in exactly the given order.

        This is the decoder used by order-searching optimizers: the same
        order always yields the same layout.

        Raises:
            PartTooLargeError: If an instance does not fit an empty sheet.
            SheetCapacityError: If the instances need more than max_sheets.
            AlgorithmInvariantViolation: If a produced layout is inconsistent.
        """
        if not instances:
            return PackingResult(stock=stock)

        sliver_size = self._effective_sliver_size(instances)
        sheets: list[_SheetState] = []

        logger.debug("Packing %d instances onto %sx%s sheets", len(instances), stock.width, stock.height)

        limit = self.config.max_sheets
        for position, instance in enumerate(instances):
            best = self._best_candidate(instance, sheets)
            if best is None:
                if limit is not None and len(sheets) >= limit:
                    remaining = Counter(i.part_id for i in instances[position:])
                    raise SheetCapacityError(remaining, limit)
                sheet = self._open_sheet(len(sheets), stock, sliver_size)
                best = self._best_candidate(instance, [sheet])
                if best is None:
                    raise PartTooLargeError(
                        [instance.part_id],
                        f"Part '{instance.part_id}' does not fit an empty "
                        f"{stock.width}x{stock.height} sheet",
                    )
                sheets.append(sheet)
                logger.debug("Opened sheet %d for '%s'", sheet.index, instance.key)
            self._commit(best, instance)

        return self._finalize(sheets, stock)

    def _effective_sliver_size(self, instances: Sequence[PartInstance]) -> float:
        smallest_side = min(
            min(o.width, o.height) for i in instances for o in i.orientations
        )
        return min(self.config.sliver_size, smallest_side)

    def _open_sheet(self, index: int, stock: StockSheet, sliver_size: float) -> _SheetState:
        tracker = GuillotineSpaceTracker(
            stock.width,
            stock.height,
            kerf=self.config.kerf,
            sliver_size=sliver_size,
            split_axis=self.config.split_axis,
        )
        return _SheetState(index=index, tracker=tracker)

    def _best_candidate(
        self,
        instance: PartInstance,
        sheets: Sequence[_SheetState],
    ) -> _Candidate | None:
        best: _Candidate | None = None
        for sheet in sheets:
            tracker = sheet.tracker
            for orientation in instance.orientations:
                for region_index, _region, _anchor in tracker.find_candidates(orientation):
                    outcome = tracker.simulate_split(region_index, orientation)
                    score = self._score(outcome)
                    if best is None or score > best.score + EPSILON:
                        best = _Candidate(sheet=sheet, outcome=outcome, score=score)
        return best

    def _score(self, outcome: SplitOutcome) -> float:
        """Combined placement score of a simulated split."""
        weights = self.config.scoring_weights
        orientation = outcome.orientation
        region = outcome.region

        fit = orientation.area / (orientation.area + outcome.discarded_area)
        waste = waste_score(
            outcome.regions,
            self.config.min_usable_width,
            self.config.min_usable_height,
            self.config.waste_scoring,
        )
        aligned_edges = int(abs(region.width - orientation.width) <= EPSILON) + int(
            abs(region.height - orientation.height) <= EPSILON
        )
        return weights.fit * fit + weights.waste * waste + weights.guillotine * aligned_edges / 2

    def _commit(self, candidate: _Candidate, instance: PartInstance) -> None:
        sheet = candidate.sheet
        outcome = candidate.outcome
        sheet.tracker.apply_split(outcome)
        placement = Placement(
            part_id=instance.part_id,
            instance=instance.number,
            x=outcome.x,
            y=outcome.y,
            orientation=outcome.orientation,
            sheet_index=sheet.index,
        )
        sheet.placements.append(placement)

        logger.debug(
            "Placed '%s' on sheet %d at (%s, %s) as %sx%s%s, score %.4f",
            instance.key,
            sheet.index,
            placement.x,
            placement.y,
            placement.width,
            placement.height,
            " (rotated)" if placement.rotated else "",
            candidate.score,
        )

    def _finalize(self, sheets: list[_SheetState], stock: StockSheet) -> PackingResult:
        config = self.config
        layouts: list[SheetLayout] = []

        for sheet in sheets:
            tracker = sheet.tracker
            if config.verify_layouts:
                tracker.verify(sheet.placements, sheet.index)

            usable, scrap = extract_offcuts(
                tracker.regions,
                sheet.index,
                config.min_usable_width,
                config.min_usable_height,
                config.min_usable_area,
            )
            layout = SheetLayout(
                index=sheet.index,
                stock=stock,
                placements=tuple(sheet.placements),
                free_regions=tuple(tracker.regions),
                usable_offcuts=usable,
                scrap_offcuts=scrap,
                dropped_area=tracker.dropped_area,
                cuts=tracker.cuts,
                waste_score=waste_score(
                    tracker.regions,
                    config.min_usable_width,
                    config.min_usable_height,
                    config.waste_scoring,
                ),
            )
            layouts.append(layout)

            logger.debug(
                "Sheet %d: %d pieces, %.1f%% used, %d usable offcuts",
                layout.index,
                layout.piece_count,
                layout.utilization * 100,
                len(usable),
            )

        placed_area = sum(layout.used_area for layout in layouts)
        return PackingResult(
            sheets=tuple(layouts),
            utilization=min(1.0, utilization(placed_area, len(layouts), stock.area)),
            stock=stock,
        )


def create_packer(config: PackingConfig) -> GuillotineBinPacker:
    """Build the placement engine selected by ``config.algorithm``."""
    if config.algorithm is PackingAlgorithm.SHELF:
        # Lazy import to avoid circular dependencies
        from panelcut.infrastructure.shelf_packing import ShelfPacker

        return ShelfPacker(config)
    return GuillotineBinPacker(config)


def default_variants(config: PackingConfig) -> list[tuple[str, PackingConfig]]:
    """Configuration presets tried by BinPackingService.

    The configured run comes first. A guillotine configuration is followed
    by the opposite split axis, each alternative ordering strategy and a
    shelf run ordered by height; a shelf configuration is followed by the
    alternative orderings and a guillotine run.
    """
    variants = [("configured", config)]
    if config.algorithm is PackingAlgorithm.GUILLOTINE:
        other_axis = (
            SplitAxis.LONGER if config.split_axis is SplitAxis.SHORTER else SplitAxis.SHORTER
        )
        variants.append((f"split-{other_axis.value}", replace(config, split_axis=other_axis)))
    for strategy in OrderingStrategy:
        if strategy is not config.ordering:
            variants.append((f"order-{strategy.value}", replace(config, ordering=strategy)))
    if config.algorithm is PackingAlgorithm.GUILLOTINE:
        variants.append(
            (
                "shelf",
                replace(
                    config,
                    algorithm=PackingAlgorithm.SHELF,
                    ordering=OrderingStrategy.HEIGHT,
                ),
            )
        )
    else:
        variants.append(("guillotine", replace(config, algorithm=PackingAlgorithm.GUILLOTINE)))
    return variants


def _run_variant(
    name: str,
    config: PackingConfig,
    instances: Sequence[PartInstance],
    stock: StockSheet,
) -> PackingResult:
    """Run one isolated variant; module level so worker processes can import it."""
    packer = create_packer(config)
    ordered = order_instances(instances, config.ordering)
    try:
        result = packer.place(ordered, stock)
    except PackingError as e:
        return PackingResult(error=e, stock=stock, variant=name)
    return replace(result, variant=name)


class BinPackingService:
    """Entry point for packing: best-of-N variants with typed failures.

    The service never raises PackingError: validation failures, oversized
    parts and invariant violations come back as a PackingResult with its
    ``error`` set and ``unplaced`` listing the affected parts.

    A variant that runs out of sheets (``max_sheets``) is only discarded;
    the run fails when no variant completes. An invariant violation in any
    variant aborts the whole run.

    Attributes:
        config: Base packing configuration.
        variants: Named configurations run for each request.
        workers: Worker processes for variant runs (1 runs in-process).
        annealing: Settings for the optional simulated annealing pass.
    """

    def __init__(
        self,
        config: PackingConfig | None = None,
        variants: Sequence[tuple[str, PackingConfig]] | None = None,
        workers: int = 1,
        annealing: AnnealingConfig | None = None,
    ) -> None:
        """Initialize service with configuration.

        Args:
            config: Base packing configuration.
            variants: Explicit variant list; defaults to default_variants(config).
            workers: Number of worker processes for variant runs.
            annealing: Enables the simulated annealing refinement when given.
        """
        self.config = config or PackingConfig()
        self.variants = list(variants) if variants is not None else default_variants(self.config)
        self.workers = max(1, workers)
        self.annealing = annealing

    def optimize(self, parts: Sequence[PartInput], stock: StockInput) -> PackingResult:
        """Pack parts onto stock sheets and return the best complete layout.

        Args:
            parts: Parts to cut, as Part objects or plain mappings.
            stock: Stock sheet dimensions, as a StockSheet or a mapping.

        Returns:
            PackingResult; check ``success`` before using ``sheets``.
        """
        try:
            stock = _as_stock(stock)
            parts = [_as_part(p, n) for n, p in enumerate(parts)]
            instances = expand_parts(parts, stock)
        except PackingError as e:
            logger.warning("Packing rejected: %s", e)
            return PackingResult.failed(e, parts, stock if isinstance(stock, StockSheet) else None)

        if not instances:
            return PackingResult(stock=stock)

        logger.info(
            "Optimizing %d pieces from %d parts across %d variants",
            len(instances),
            len(parts),
            len(self.variants),
        )

        results = self._run_variants(instances, stock)
        for result in results:
            if isinstance(result.error, AlgorithmInvariantViolation):
                logger.error("Variant '%s' aborted the run: %s", result.variant, result.error)
                return PackingResult.failed(result.error, parts, stock)

        complete = [r for r in results if r.success]
        if not complete:
            error = results[0].error
            logger.warning("No variant produced a layout: %s", error)
            return PackingResult.failed(error, parts, stock)
        for result in results:
            if not result.success:
                logger.info("Variant '%s' discarded: %s", result.variant, result.error)

        best = complete[0]
        for result in complete[1:]:
            if result_score(result) > result_score(best) + EPSILON:
                best = result

        if self.annealing is not None:
            from panelcut.infrastructure.annealing import SimulatedAnnealingOptimizer

            chosen = next(c for name, c in self.variants if name == best.variant)
            optimizer = SimulatedAnnealingOptimizer(create_packer(chosen), self.annealing)
            try:
                best = optimizer.optimize(order_instances(instances, chosen.ordering), stock, best)
            except PackingError as e:
                logger.warning("Annealing failed: %s", e)
                return PackingResult.failed(e, parts, stock)

        logger.info(
            "Best layout from '%s': %d sheets, %.1f%% utilization",
            best.variant,
            best.total_sheets,
            best.utilization * 100,
        )
        return best

    def _run_variants(
        self,
        instances: Sequence[PartInstance],
        stock: StockSheet,
    ) -> list[PackingResult]:
        if self.workers == 1 or len(self.variants) == 1:
            return [_run_variant(name, cfg, instances, stock) for name, cfg in self.variants]

        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(_run_variant, name, cfg, list(instances), stock)
                for name, cfg in self.variants
            ]
            return [f.result() for f in futures]


# Plain request inputs, as accepted by pack_parts and BinPackingService.optimize
PartInput = Union[Part, Mapping[str, Any]]
StockInput = Union[StockSheet, Mapping[str, Any]]
ConfigInput = Union[PackingConfig, Mapping[str, Any], None]


def _part_quantity(part: PartInput, position: int) -> tuple[str, int]:
    """Best-effort (id, quantity) of a part, valid or not."""
    if isinstance(part, Part):
        return part.id, part.quantity
    if not isinstance(part, Mapping):
        return f"parts[{position}]", 1
    part_id = part.get("id")
    quantity = part.get("quantity", 1)
    if not isinstance(quantity, int) or quantity < 1:
        quantity = 1
    return (str(part_id) if part_id else f"parts[{position}]"), quantity


def _build(cls, data: Any, location: str):
    """Instantiate a domain dataclass from a mapping of its field names."""
    if not isinstance(data, Mapping):
        raise InvalidConfigurationError(
            f"{location} must be a mapping, got {type(data).__name__}", location
        )
    try:
        return cls(**data)
    except InvalidConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Invalid {location}: {e}", location) from e


def _as_part(part: PartInput, position: int = 0) -> Part:
    if isinstance(part, Part):
        return part
    return _build(Part, part, f"parts[{position}]")


def _as_stock(stock: StockInput) -> StockSheet:
    if isinstance(stock, StockSheet):
        return stock
    return _build(StockSheet, stock, "stock")


def _as_config(config: ConfigInput) -> PackingConfig:
    if config is None:
        return PackingConfig()
    if isinstance(config, PackingConfig):
        return config
    if not isinstance(config, Mapping):
        raise InvalidConfigurationError(
            f"config must be a mapping, got {type(config).__name__}", "config"
        )
    data = dict(config)
    for key, cls in (("scoring_weights", ScoringWeights), ("waste_scoring", WasteScoringConfig)):
        if isinstance(data.get(key), Mapping):
            data[key] = _build(cls, data[key], f"config.{key}")
    return _build(PackingConfig, data, "config")


def pack_parts(
    parts: Sequence[PartInput],
    stock: StockInput,
    config: ConfigInput = None,
    annealing: AnnealingConfig | None = None,
) -> PackingResult:
    """Pack parts with the default variant set.

    Parts, stock and config may be given as domain objects or as plain
    mappings keyed by their field names, for example::

        pack_parts(
            [{"id": "side", "width": 560, "height": 720, "grain": "lengthwise"}],
            {"width": 2700, "height": 1800},
            {"kerf": 3.2, "split_axis": "longer"},
        )

    Mappings are validated here, so a negative kerf or an unknown grain
    comes back as a failed result carrying InvalidConfigurationError.
    Never raises PackingError.
    """
    try:
        config = _as_config(config)
    except InvalidConfigurationError as e:
        logger.warning("Packing rejected: %s", e)
        return PackingResult.failed(e, parts, stock if isinstance(stock, StockSheet) else None)
    return BinPackingService(config, annealing=annealing).optimize(parts, stock)
