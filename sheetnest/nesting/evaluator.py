"""Placement validity checks.

Parts are packed by their rotated, kerf-expanded bounding boxes rather than
their true outlines. This trades some density for a collision test that is
fast and easy to verify.
"""

from typing import Sequence, Tuple

from sheetnest.nesting.geometry import rotated_bounds
from sheetnest.nesting.models import NestingConfig, PartUnit, PlacedPart, SheetDefinition


def footprint(unit: PartUnit, rotation: float, kerf_width: float) -> Tuple[float, float]:
    """Width and height of a part's bounding box at ``rotation``, plus kerf."""
    box = rotated_bounds(unit.points, rotation)
    return box.width + 2 * kerf_width, box.height + 2 * kerf_width


def clearance_between(spacing_a: float, spacing_b: float, config: NestingConfig) -> float:
    """Required gap between two parts.

    With common-line cutting the global clearance is dropped so neighbouring
    parts may share a cut, but per-part spacing overrides still apply.
    """
    global_clearance = 0.0 if config.common_line_cutting else config.global_clearance
    return max(global_clearance, spacing_a, spacing_b)


def fits_sheet(x: float, y: float, width: float, height: float, sheet: SheetDefinition) -> bool:
    """Check that the box lies within ``[0, width] x [0, height]`` of the sheet."""
    return (
        x >= 0 and y >= 0 and
        x + width <= sheet.width and
        y + height <= sheet.height
    )


def boxes_overlap(
    candidate: PlacedPart,
    other: PlacedPart,
    clearance: float,
) -> bool:
    """Separating-axis test for two boxes inflated by ``clearance``.

    Overlap is reported only when the intervals overlap on both axes.
    """
    return (
        candidate.x < other.x + other.width + clearance and
        candidate.x + candidate.width + clearance > other.x and
        candidate.y < other.y + other.height + clearance and
        candidate.y + candidate.height + clearance > other.y
    )


def is_valid_placement(
    candidate: PlacedPart,
    existing: Sequence[PlacedPart],
    sheet: SheetDefinition,
    config: NestingConfig,
) -> bool:
    """Check containment, then clearance against every part in the same bin."""
    if not fits_sheet(candidate.x, candidate.y, candidate.width, candidate.height, sheet):
        return False

    for other in existing:
        clearance = clearance_between(candidate.min_spacing, other.min_spacing, config)
        if boxes_overlap(candidate, other, clearance):
            return False

    return True
