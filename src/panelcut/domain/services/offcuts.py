"""Offcut classification and utilization figures."""

from __future__ import annotations

from typing import Sequence

from panelcut.domain.value_objects import FreeRegion, Offcut


def is_usable(
    region: FreeRegion,
    min_usable_width: float,
    min_usable_height: float,
    min_usable_area: float,
) -> bool:
    """Check whether a leftover region is worth returning to stock."""
    return (
        region.width >= min_usable_width
        and region.height >= min_usable_height
        and region.area >= min_usable_area
    )


def extract_offcuts(
    regions: Sequence[FreeRegion],
    sheet_index: int,
    min_usable_width: float,
    min_usable_height: float,
    min_usable_area: float,
) -> tuple[tuple[Offcut, ...], tuple[Offcut, ...]]:
    """Split a sheet's final free regions into usable and scrap offcuts.

    Args:
        regions: Free regions left on the sheet after packing.
        sheet_index: Index of the sheet.
        min_usable_width: Minimum width of a usable offcut.
        min_usable_height: Minimum height of a usable offcut.
        min_usable_area: Minimum area of a usable offcut.

    Returns:
        Tuple of (usable, scrap) offcuts, usable ones largest first and
        scrap in region order.
    """
    usable: list[Offcut] = []
    scrap: list[Offcut] = []

    for region in regions:
        keep = is_usable(region, min_usable_width, min_usable_height, min_usable_area)
        offcut = Offcut(
            x=region.x,
            y=region.y,
            width=region.width,
            height=region.height,
            sheet_index=sheet_index,
            usable=keep,
        )
        (usable if keep else scrap).append(offcut)

    usable.sort(key=lambda o: (-o.area, o.y, o.x))
    return tuple(usable), tuple(scrap)


def utilization(placed_area: float, sheet_count: int, sheet_area: float) -> float:
    """Fraction of consumed stock area covered by parts."""
    if sheet_count == 0 or sheet_area <= 0:
        return 0.0
    return placed_area / (sheet_count * sheet_area)
