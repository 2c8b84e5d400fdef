"""Guillotine free-space tracking for a single sheet.

The tracker keeps the list of free rectangles on a sheet. Placing a part
always happens at the top-left corner of a free region, after which the
region is split by at most two straight cuts:

    horizontal first (full-width cut)      vertical first (full-height cut)

    +--------+----------+                  +--------+----------+
    |  part  |  right   |                  |  part  |          |
    +--------+----------+                  +--------+  right   |
    |      lower        |                  | lower  |          |
    +-------------------+                  +--------+----------+

Each cut runs edge to edge through the rectangle it divides, so replaying
the recorded cuts in order reproduces the layout with a panel saw. Kerf is
removed between the part and each leftover. Leftovers thinner than the
sliver size are dropped and accounted as loss.

Splits are simulated on structural copies of the region list; only the
winning simulation is committed with apply_split.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from panelcut.domain.exceptions import AlgorithmInvariantViolation
from panelcut.domain.value_objects import (
    EPSILON,
    FreeRegion,
    Orientation,
    Placement,
    SplitAxis,
)

logger = logging.getLogger(__name__)


class CutAxis(str, Enum):
    """Direction of a straight saw cut.

    Attributes:
        HORIZONTAL: Cut parallel to the x axis at a fixed y.
        VERTICAL: Cut parallel to the y axis at a fixed x.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Cut:
    """A straight cut spanning the full extent of the region it divides.

    Attributes:
        region: Rectangle being divided.
        axis: Cut direction.
        position: Coordinate of the cut's leading edge (y for horizontal
            cuts, x for vertical cuts). The kerf occupies
            [position, position + kerf).
    """

    region: FreeRegion
    axis: CutAxis
    position: float

    @property
    def length(self) -> float:
        if self.axis is CutAxis.HORIZONTAL:
            return self.region.width
        return self.region.height


@dataclass(frozen=True)
class SplitOutcome:
    """Result of splitting one free region around a placed part.

    Attributes:
        region_index: Index of the split region in the tracker's list.
        region: The region that was split.
        orientation: Orientation of the part placed at the region's top-left.
        children: New free regions (at most two), right leftover first.
        cuts: Cuts performed, in saw order.
        discarded_area: Kerf loss plus dropped slivers.
        regions: The tracker's complete free-region list after the split.
    """

    region_index: int
    region: FreeRegion
    orientation: Orientation
    children: tuple[FreeRegion, ...]
    cuts: tuple[Cut, ...]
    discarded_area: float
    regions: tuple[FreeRegion, ...]

    @property
    def x(self) -> float:
        return self.region.x

    @property
    def y(self) -> float:
        return self.region.y


def _keep(width: float, height: float, sliver_size: float) -> bool:
    return (
        width > EPSILON
        and height > EPSILON
        and width >= sliver_size - EPSILON
        and height >= sliver_size - EPSILON
    )


def split_region(
    region: FreeRegion,
    width: float,
    height: float,
    kerf: float,
    split_axis: SplitAxis = SplitAxis.SHORTER,
    sliver_size: float = 0.0,
    first_cut: CutAxis | None = None,
) -> tuple[tuple[FreeRegion, ...], tuple[Cut, ...]]:
    """Split a region after placing a width x height part at its top-left.

    The right leftover is ``region.width - width - kerf`` wide and the lower
    leftover ``region.height - height - kerf`` tall. With SHORTER the first
    cut runs along the smaller leftover so the larger one stays whole;
    LONGER does the opposite.

    Args:
        region: Free region receiving the part.
        width: Placed part width.
        height: Placed part height.
        kerf: Saw blade width consumed by each cut.
        split_axis: Leftover axis preference.
        sliver_size: Leftovers with a side below this are dropped.
        first_cut: Forces the direction of the first cut, overriding
            split_axis. Shelf layouts use it to keep strips full width.

    Returns:
        Tuple of (children, cuts). Children are ordered right leftover
        first, then lower leftover.
    """
    right_width = region.width - width - kerf
    lower_height = region.height - height - kerf

    if first_cut is not None:
        horizontal_first = first_cut is CutAxis.HORIZONTAL
    elif split_axis is SplitAxis.SHORTER:
        horizontal_first = right_width <= lower_height
    else:
        horizontal_first = right_width > lower_height

    needs_vertical = region.width - width > EPSILON
    needs_horizontal = region.height - height > EPSILON

    cuts: list[Cut] = []
    right: FreeRegion | None = None
    lower: FreeRegion | None = None

    if horizontal_first:
        if needs_horizontal:
            cuts.append(Cut(region, CutAxis.HORIZONTAL, region.y + height))
            if _keep(region.width, lower_height, sliver_size):
                lower = FreeRegion(region.x, region.y + height + kerf, region.width, lower_height)
        if needs_vertical:
            band = FreeRegion(region.x, region.y, region.width, height)
            cuts.append(Cut(band, CutAxis.VERTICAL, region.x + width))
            if _keep(right_width, height, sliver_size):
                right = FreeRegion(region.x + width + kerf, region.y, right_width, height)
    else:
        if needs_vertical:
            cuts.append(Cut(region, CutAxis.VERTICAL, region.x + width))
            if _keep(right_width, region.height, sliver_size):
                right = FreeRegion(region.x + width + kerf, region.y, right_width, region.height)
        if needs_horizontal:
            column = FreeRegion(region.x, region.y, width, region.height)
            cuts.append(Cut(column, CutAxis.HORIZONTAL, region.y + height))
            if _keep(width, lower_height, sliver_size):
                lower = FreeRegion(region.x, region.y + height + kerf, width, lower_height)

    children = tuple(child for child in (right, lower) if child is not None)
    return children, tuple(cuts)


class GuillotineSpaceTracker:
    """Free-rectangle bookkeeping for one sheet.

    Attributes:
        stock_width: Sheet width in mm.
        stock_height: Sheet height in mm.
        kerf: Saw blade width in mm.
        sliver_size: Minimum side of a tracked free region.
        split_axis: Leftover axis preference applied to every split.
        regions: Current free regions.
        splits: Committed splits in the order they were applied.
        placed_area: Area covered by parts.
        dropped_area: Area lost to kerf and dropped slivers.
    """

    def __init__(
        self,
        stock_width: float,
        stock_height: float,
        kerf: float = 0.0,
        sliver_size: float = 0.0,
        split_axis: SplitAxis = SplitAxis.SHORTER,
    ) -> None:
        self.stock_width = stock_width
        self.stock_height = stock_height
        self.kerf = kerf
        self.sliver_size = sliver_size
        self.split_axis = split_axis
        self.regions: list[FreeRegion] = [FreeRegion(0.0, 0.0, stock_width, stock_height)]
        self.splits: list[SplitOutcome] = []
        self.placed_area = 0.0
        self.dropped_area = 0.0

    @property
    def sheet_area(self) -> float:
        return self.stock_width * self.stock_height

    @property
    def free_area(self) -> float:
        return sum(r.area for r in self.regions)

    @property
    def cuts(self) -> tuple[Cut, ...]:
        """Every committed cut in saw order."""
        return tuple(cut for split in self.splits for cut in split.cuts)

    def find_candidates(
        self,
        orientation: Orientation,
    ) -> list[tuple[int, FreeRegion, tuple[float, float]]]:
        """List regions that can hold the orientation, with the anchor position."""
        return [
            (index, region, (region.x, region.y))
            for index, region in enumerate(self.regions)
            if region.can_contain(orientation.width, orientation.height)
        ]

    def index_of(self, region: FreeRegion) -> int | None:
        """Position of a free region in the current list, None once consumed."""
        try:
            return self.regions.index(region)
        except ValueError:
            return None

    def simulate_split(
        self,
        region_index: int,
        orientation: Orientation,
        first_cut: CutAxis | None = None,
    ) -> SplitOutcome:
        """Compute the outcome of placing orientation in a region without committing."""
        region = self.regions[region_index]
        children, cuts = split_region(
            region,
            orientation.width,
            orientation.height,
            self.kerf,
            self.split_axis,
            self.sliver_size,
            first_cut,
        )
        discarded = region.area - orientation.area - sum(c.area for c in children)
        regions = (
            tuple(self.regions[:region_index])
            + children
            + tuple(self.regions[region_index + 1 :])
        )
        return SplitOutcome(
            region_index=region_index,
            region=region,
            orientation=orientation,
            children=children,
            cuts=cuts,
            discarded_area=max(0.0, discarded),
            regions=regions,
        )

    def apply_split(self, outcome: SplitOutcome) -> tuple[FreeRegion, ...]:
        """Commit a simulated split.

        Raises:
            AlgorithmInvariantViolation: If the outcome was simulated against
                a region list that has since changed.
        """
        index = outcome.region_index
        if index >= len(self.regions) or self.regions[index] != outcome.region:
            raise AlgorithmInvariantViolation(
                f"Stale split for region {outcome.region} at index {index}"
            )
        if len(outcome.regions) != len(self.regions) - 1 + len(outcome.children):
            raise AlgorithmInvariantViolation("Split outcome does not match region list")

        self.regions = list(outcome.regions)
        self.splits.append(outcome)
        self.placed_area += outcome.orientation.area
        self.dropped_area += outcome.discarded_area
        return outcome.children

    def verify(self, placements: Sequence[Placement], sheet_index: int | None = None) -> None:
        """Check the sheet's geometric invariants.

        Raises:
            AlgorithmInvariantViolation: On a placement outside the sheet,
                any overlap between placements and free regions, or a
                mismatch between sheet area and accounted area.
        """
        sheet = FreeRegion(0.0, 0.0, self.stock_width, self.stock_height)
        rects = [p.bounds for p in placements] + list(self.regions)

        for rect in rects:
            if not sheet.contains_region(rect):
                raise AlgorithmInvariantViolation(
                    f"Rectangle {rect} extends outside the sheet", sheet_index
                )

        for i, a in enumerate(rects):
            for b in rects[i + 1 :]:
                if a.overlaps(b):
                    raise AlgorithmInvariantViolation(
                        f"Overlap between {a} and {b}", sheet_index
                    )

        placed = sum(p.area for p in placements)
        accounted = placed + self.free_area + self.dropped_area
        if abs(accounted - self.sheet_area) > EPSILON * max(1.0, self.sheet_area):
            raise AlgorithmInvariantViolation(
                f"Area not conserved: {accounted} accounted for sheet area {self.sheet_area}",
                sheet_index,
            )
