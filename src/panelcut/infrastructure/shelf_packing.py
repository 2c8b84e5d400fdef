"""Shelf (strip) placement on top of the guillotine space tracker.

The shelf engine cuts each sheet into full-width horizontal bands. A band's
height is set by the first piece placed on it; later pieces go left to
right along the band. This trades some utilization for fewer distinct rip
settings, which is how many shops run a panel saw.

Every placement is still a guillotine split of a tracked free region, with
the first cut direction forced:

    opening a shelf (horizontal first)     filling a shelf (vertical first)

    +--------+----------+                  +--------+----------+
    |  part  |  shelf   |                  |  part  |  shelf   |
    +--------+----------+                  +--------+          |
    |      floor        |                  | (free) |          |
    +-------------------+                  +--------+----------+

so the cut list, offcut extraction and invariant checks of
GuillotineBinPacker apply unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from panelcut.domain.services import CutAxis
from panelcut.domain.value_objects import EPSILON, FreeRegion, PartInstance, StockSheet
from panelcut.infrastructure.bin_packing import (
    GuillotineBinPacker,
    _Candidate,
    _SheetState,
)

logger = logging.getLogger(__name__)


@dataclass
class _ShelfSheetState(_SheetState):
    """Sheet state with its open shelves and the unshelved floor.

    Attributes:
        shelves: Free remainder of each shelf, in opening order.
        floor: Full-width region below the last shelf, None once used up.
    """

    shelves: list[FreeRegion] = field(default_factory=list)
    floor: FreeRegion | None = None


@dataclass(frozen=True)
class _ShelfCandidate(_Candidate):
    shelf: FreeRegion | None = None


class ShelfPacker(GuillotineBinPacker):
    """Best-height-fit shelf packer.

    Each instance goes on the open shelf whose height it fills most closely,
    across all sheets, in any legal orientation. When no shelf can take it,
    a new shelf is opened on the first sheet whose floor fits the instance,
    using its tallest legal orientation; failing that, a new sheet is opened.
    Ties keep the first shelf found in sheet and opening order.
    """

    def _open_sheet(self, index: int, stock: StockSheet, sliver_size: float) -> _ShelfSheetState:
        base = super()._open_sheet(index, stock, sliver_size)
        return _ShelfSheetState(
            index=index,
            tracker=base.tracker,
            floor=base.tracker.regions[0],
        )

    def _best_candidate(
        self,
        instance: PartInstance,
        sheets: Sequence[_ShelfSheetState],
    ) -> _ShelfCandidate | None:
        return self._shelf_fit(instance, sheets) or self._new_shelf(instance, sheets)

    def _shelf_fit(
        self,
        instance: PartInstance,
        sheets: Sequence[_ShelfSheetState],
    ) -> _ShelfCandidate | None:
        best: _ShelfCandidate | None = None
        for sheet in sheets:
            for shelf in sheet.shelves:
                for orientation in instance.orientations:
                    if not shelf.can_contain(orientation.width, orientation.height):
                        continue
                    gap = shelf.height - orientation.height
                    if best is not None and -gap <= best.score + EPSILON:
                        continue
                    region_index = sheet.tracker.index_of(shelf)
                    outcome = sheet.tracker.simulate_split(
                        region_index, orientation, first_cut=CutAxis.VERTICAL
                    )
                    best = _ShelfCandidate(sheet=sheet, outcome=outcome, score=-gap, shelf=shelf)
        return best

    def _new_shelf(
        self,
        instance: PartInstance,
        sheets: Sequence[_ShelfSheetState],
    ) -> _ShelfCandidate | None:
        for sheet in sheets:
            floor = sheet.floor
            if floor is None:
                continue
            fitting = [o for o in instance.orientations if floor.can_contain(o.width, o.height)]
            if not fitting:
                continue
            orientation = max(fitting, key=lambda o: o.height)
            outcome = sheet.tracker.simulate_split(
                sheet.tracker.index_of(floor), orientation, first_cut=CutAxis.HORIZONTAL
            )
            return _ShelfCandidate(sheet=sheet, outcome=outcome, score=0.0)
        return None

    def _commit(self, candidate: _ShelfCandidate, instance: PartInstance) -> None:
        super()._commit(candidate, instance)
        sheet: _ShelfSheetState = candidate.sheet
        region = candidate.outcome.region
        remainder = next(
            (c for c in candidate.outcome.children if abs(c.y - region.y) <= EPSILON), None
        )

        if candidate.shelf is None:
            sheet.floor = next(
                (c for c in candidate.outcome.children if c.y > region.y + EPSILON), None
            )
            if remainder is not None:
                sheet.shelves.append(remainder)
            logger.debug(
                "Opened shelf of height %s on sheet %d at y=%s",
                candidate.outcome.orientation.height,
                sheet.index,
                region.y,
            )
            return

        position = sheet.shelves.index(candidate.shelf)
        if remainder is None:
            del sheet.shelves[position]
        else:
            sheet.shelves[position] = remainder
