"""Candidate search for a single part unit within one bin.

Rotations are tried in generated order (0° first). For each rotation the
sheet is scanned bottom-left first: rows of increasing ``y`` on the outside,
increasing ``x`` within a row, so the first valid hit is the lowest, then
leftmost, grid position.
"""

from typing import Iterator, List, Optional, Sequence

from sheetnest.nesting.evaluator import footprint, is_valid_placement
from sheetnest.nesting.models import (
    NestingConfig,
    PartUnit,
    PlacedPart,
    RotationPolicy,
    SheetDefinition,
)
from sheetnest.utils import get_logger

logger = get_logger("nesting.search")

GRAIN_TOLERANCE = 5.0  # degrees

# Guards x + width <= limit against float noise in the grid coordinates
_GRID_EPSILON = 1e-9


def rotation_angles(policy: RotationPolicy, step: float) -> List[float]:
    """Rotations to try for a policy, starting at 0."""
    if policy == RotationPolicy.NONE:
        return [0.0]
    if policy == RotationPolicy.FOUR_WAY:
        return [0.0, 90.0, 180.0, 270.0]

    angles = []
    i = 0
    while i * step < 360:
        angles.append(i * step)
        i += 1
    return angles


def grain_allows(rotation: float, sheet_grain: float) -> bool:
    """True if ``rotation`` is within tolerance of the sheet grain, wrapping at 360."""
    diff = abs(rotation - sheet_grain) % 360
    return diff <= GRAIN_TOLERANCE or diff >= 360 - GRAIN_TOLERANCE


def grid_positions(limit: float, step: float) -> Iterator[float]:
    """Yield ``0, step, 2*step, ...`` up to and including ``limit``."""
    i = 0
    while i * step <= limit + _GRID_EPSILON:
        yield i * step
        i += 1


def allowed_rotations(unit: PartUnit, sheet: SheetDefinition, config: NestingConfig) -> List[float]:
    """Rotations for a unit after applying its policy and grain lock."""
    step = unit.spec.rotation_step or config.rotation_step
    angles = rotation_angles(unit.spec.rotation_policy, step)

    if unit.spec.lock_to_grain and sheet.grain_angle is not None:
        angles = [a for a in angles if grain_allows(a, sheet.grain_angle)]

    return angles


def find_placement(
    unit: PartUnit,
    existing: Sequence[PlacedPart],
    sheet: SheetDefinition,
    config: NestingConfig,
    bin_index: int = 0,
) -> Optional[PlacedPart]:
    """
    Find the first valid placement of a part unit in a bin.

    Args:
        unit: Part unit to place
        existing: Parts already placed in the bin
        sheet: Sheet definition shared by all bins
        config: Nesting configuration
        bin_index: Index recorded on the returned placement

    Returns:
        The placed part, or None if no rotation/position combination fits
    """
    evaluated = 0

    for rotation in allowed_rotations(unit, sheet, config):
        width, height = footprint(unit, rotation, config.kerf_width)
        if width > sheet.width or height > sheet.height:
            continue

        for y in grid_positions(sheet.height - height, config.position_step):
            for x in grid_positions(sheet.width - width, config.position_step):
                if config.max_iterations is not None and evaluated >= config.max_iterations:
                    logger.debug(
                        f"{unit.id}: gave up after {evaluated} candidates in bin {bin_index}"
                    )
                    return None
                evaluated += 1

                candidate = PlacedPart(
                    part_id=unit.id,
                    source_id=unit.spec.id,
                    bin_index=bin_index,
                    x=x,
                    y=y,
                    rotation=rotation,
                    width=width,
                    height=height,
                    area=unit.area,
                    min_spacing=unit.min_spacing,
                )
                if is_valid_placement(candidate, existing, sheet, config):
                    return candidate

    return None
