"""Placement ordering for part instances."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from panelcut.domain.value_objects import Grain, PartInstance


class OrderingStrategy(str, Enum):
    """Primary sort key applied after the constrained-first rule.

    Attributes:
        AREA: Area descending (the default order).
        LONGEST_SIDE: Longest side descending, establishes major cut lines.
        PERIMETER: Perimeter descending.
        WIDTH: Nominal width descending.
        HEIGHT: Placed height descending, taking grain into account.
    """

    AREA = "area"
    LONGEST_SIDE = "longest-side"
    PERIMETER = "perimeter"
    WIDTH = "width"
    HEIGHT = "height"


def _placed_height(instance: PartInstance) -> float:
    part = instance.part
    if part.grain is Grain.LENGTHWISE:
        return part.height
    if part.grain is Grain.WIDTHWISE:
        return part.width
    return max(part.width, part.height)


def _primary_key(instance: PartInstance, strategy: OrderingStrategy) -> float:
    part = instance.part
    if strategy is OrderingStrategy.LONGEST_SIDE:
        return max(part.width, part.height)
    if strategy is OrderingStrategy.PERIMETER:
        return 2 * (part.width + part.height)
    if strategy is OrderingStrategy.WIDTH:
        return part.width
    if strategy is OrderingStrategy.HEIGHT:
        return _placed_height(instance)
    return instance.area


def order_instances(
    instances: Sequence[PartInstance],
    strategy: OrderingStrategy = OrderingStrategy.AREA,
) -> list[PartInstance]:
    """Produce the total placement order for a run.

    Instances with a single legal orientation come first since they cannot
    adapt to whatever space is left later. Within each group the strategy
    key sorts descending, area breaks remaining ties, and part id plus copy
    number make the order deterministic.
    """
    return sorted(
        instances,
        key=lambda i: (
            0 if i.is_constrained else 1,
            -_primary_key(i, strategy),
            -i.area,
            i.part_id,
            i.number,
        ),
    )
