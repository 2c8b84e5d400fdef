"""Waste consolidation scoring.

Scores a set of free regions by how consolidated the leftover material
is: one large, squarish, usable rectangle scores high while the same area
spread over several thin strips scores low. The function is evaluated for
every candidate placement, so it stays linear in the number of regions.
"""

from __future__ import annotations

from typing import Sequence

from panelcut.domain.value_objects import FreeRegion, WasteScoringConfig

DEFAULT_WASTE_SCORING = WasteScoringConfig()


def fragmentation_penalty(
    region_count: int,
    config: WasteScoringConfig = DEFAULT_WASTE_SCORING,
) -> float:
    """Penalty growing with every free region beyond the first, capped."""
    if region_count <= 1:
        return 0.0
    return min(config.fragmentation_cap, config.fragmentation_step * (region_count - 1))


def waste_score(
    regions: Sequence[FreeRegion],
    min_usable_width: float = 150.0,
    min_usable_height: float = 150.0,
    config: WasteScoringConfig = DEFAULT_WASTE_SCORING,
) -> float:
    """Score leftover consolidation, higher is better.

    score = concentration * usability bonus * (1 - fragmentation penalty)
            * (0.5 + 0.5 * aspect ratio)

    where concentration is the largest region's share of the free area and
    the aspect ratio is that region's short side over its long side. A sheet
    with no free area scores 1.0.

    Args:
        regions: Free regions of one sheet.
        min_usable_width: Width the largest region needs for the bonus.
        min_usable_height: Height the largest region needs for the bonus.
        config: Tunable scoring constants.

    Returns:
        Non-negative score, at most ``config.usability_bonus``.
    """
    if not regions:
        return 1.0

    total = 0.0
    largest = regions[0]
    for region in regions:
        total += region.area
        if region.area > largest.area:
            largest = region

    if total <= 0:
        return 1.0

    concentration = largest.area / total
    bonus = (
        config.usability_bonus
        if largest.width >= min_usable_width and largest.height >= min_usable_height
        else 1.0
    )
    penalty = fragmentation_penalty(len(regions), config)
    return concentration * bonus * (1.0 - penalty) * (0.5 + 0.5 * largest.aspect_ratio)
