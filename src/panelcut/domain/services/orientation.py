"""Orientation resolution and quantity expansion.

Every consumer of "which ways can this part be cut" goes through
resolve_orientations, so grain rules live in exactly one place.
"""

from __future__ import annotations

import logging
from typing import Sequence

from panelcut.domain.exceptions import InvalidConfigurationError, PartTooLargeError
from panelcut.domain.value_objects import (
    Grain,
    Orientation,
    Part,
    PartInstance,
    StockSheet,
)

logger = logging.getLogger(__name__)


def resolve_orientations(part: Part) -> tuple[Orientation, ...]:
    """Return the grain-legal orientations of a part, unrotated first.

    - LENGTHWISE: only the unrotated orientation.
    - WIDTHWISE: only the orientation rotated 90 degrees.
    - ANY: both, unless the part is square.
    """
    unrotated = Orientation(width=part.width, height=part.height, rotated=False)
    rotated = Orientation(width=part.height, height=part.width, rotated=True)

    if part.grain is Grain.LENGTHWISE:
        return (unrotated,)
    if part.grain is Grain.WIDTHWISE:
        return (rotated,)
    if part.width == part.height:
        return (unrotated,)
    return (unrotated, rotated)


def fitting_orientations(
    orientations: Sequence[Orientation],
    stock: StockSheet,
) -> tuple[Orientation, ...]:
    """Filter orientations down to those that fit an empty sheet."""
    return tuple(
        o for o in orientations if o.width <= stock.width and o.height <= stock.height
    )


def ensure_fits(
    part: Part,
    orientations: Sequence[Orientation],
    stock: StockSheet,
) -> None:
    """Raise PartTooLargeError if no legal orientation fits the stock.

    A rotated orientation that would fit is not considered when the grain
    forbids it.
    """
    if not fitting_orientations(orientations, stock):
        raise PartTooLargeError(
            [part.id],
            f"Part '{part.id}' ({part.width}x{part.height}, grain {part.grain.value}) "
            f"does not fit stock sheet {stock.width}x{stock.height}",
        )


def expand_parts(parts: Sequence[Part], stock: StockSheet) -> list[PartInstance]:
    """Expand parts into one instance per unit of quantity.

    All parts are checked before anything is returned, so a single
    PartTooLargeError reports every oversized part id.

    Raises:
        InvalidConfigurationError: If two parts share an id.
        PartTooLargeError: If any part fits the stock in no legal orientation.
    """
    seen: set[str] = set()
    too_large: list[Part] = []
    instances: list[PartInstance] = []

    for part in parts:
        if part.id in seen:
            raise InvalidConfigurationError(f"Duplicate part id '{part.id}'", "parts.id")
        seen.add(part.id)

        orientations = resolve_orientations(part)
        if not fitting_orientations(orientations, stock):
            too_large.append(part)
            continue

        for number in range(1, part.quantity + 1):
            instances.append(
                PartInstance(part=part, number=number, orientations=orientations)
            )

    if too_large:
        if len(too_large) == 1:
            part = too_large[0]
            ensure_fits(part, resolve_orientations(part), stock)
        raise PartTooLargeError([p.id for p in too_large])

    logger.debug("Expanded %d parts into %d instances", len(parts), len(instances))
    return instances
