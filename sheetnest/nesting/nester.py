"""Sheet nesting for flat parts cut from rectangular stock.

Packs part outlines onto as few sheets as possible using a largest-first,
bottom-left-fill heuristic over kerf-expanded bounding boxes.
"""

import time
from typing import Callable, List, Optional, Sequence

from sheetnest.nesting.bins import BinManager
from sheetnest.nesting.errors import InvalidInputError, NestingTimeoutError
from sheetnest.nesting.metrics import compute_metrics
from sheetnest.nesting.models import (
    NestingConfig,
    NestingResult,
    PartSpec,
    PartUnit,
    SheetDefinition,
    UnplacedPart,
)
from sheetnest.utils import get_logger

logger = get_logger("nesting.nester")

ProgressCallback = Callable[[int, int], None]


def expand_parts(parts: Sequence[PartSpec]) -> List[PartUnit]:
    """Expand each spec into ``quantity`` units with ids ``<id>_<n>``."""
    units = []
    for spec in parts:
        for i in range(spec.quantity):
            units.append(PartUnit(id=f"{spec.id}_{i}", spec=spec, index=i, order=len(units)))
    return units


def sort_units(units: Sequence[PartUnit]) -> List[PartUnit]:
    """Largest area first; equal areas keep input order."""
    return sorted(units, key=lambda u: (-u.area, u.order))


def validate_inputs(parts: Sequence[PartSpec], sheet: SheetDefinition, config: NestingConfig) -> None:
    """Reject the whole run before any part is processed."""
    config.validate()
    sheet.validate()

    seen = set()
    for part in parts:
        part.validate()
        if part.id in seen:
            raise InvalidInputError(f"Duplicate part id '{part.id}'")
        seen.add(part.id)


class SheetNester:
    """
    Nests part outlines onto rectangular sheets.

    Parts are expanded by quantity, sorted largest first, and each unit is
    offered to the existing sheets in order before a new sheet is opened.
    Units that fit no empty sheet are reported as unplaced.
    """

    def __init__(self, config: Optional[NestingConfig] = None):
        """
        Initialize sheet nester.

        Args:
            config: Nesting configuration
        """
        self.config = config or NestingConfig()

    def nest(
        self,
        parts: Sequence[PartSpec],
        sheet: SheetDefinition,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> NestingResult:
        """
        Nest parts onto as few sheets as possible.

        Args:
            parts: Part specs to place
            sheet: Stock sheet definition
            progress_callback: Called with (units processed, total units)
                after every part unit

        Returns:
            Nesting result, possibly with unplaced units

        Raises:
            InvalidInputError: Bad sheet or part definitions
            ConfigurationError: Out-of-range configuration
            NestingTimeoutError: ``config.time_limit`` exceeded
        """
        validate_inputs(parts, sheet, self.config)
        start_time = time.monotonic()

        units = sort_units(expand_parts(parts))
        logger.info(
            f"Nesting {len(units)} part units from {len(parts)} parts "
            f"on {sheet.width:g}x{sheet.height:g} sheets"
        )

        manager = BinManager(sheet, self.config)
        unplaced: List[UnplacedPart] = []

        for done, unit in enumerate(units, start=1):
            self._check_deadline(start_time, done - 1, len(units))

            if manager.place(unit) is None:
                logger.warning(f"Could not place part: {unit.id}")
                unplaced.append(UnplacedPart(
                    part_id=unit.id,
                    source_id=unit.spec.id,
                    area=unit.area,
                    reason=self._unplaced_reason(unit, sheet),
                ))

            if progress_callback:
                progress_callback(done, len(units))

        metrics = compute_metrics(manager.bins, sheet)
        result = NestingResult(
            sheet=sheet,
            bins=manager.bins,
            unplaced=unplaced,
            requested_count=len(units),
            placed_count=manager.placed_count,
            used_area=metrics.used_area,
            available_area=metrics.available_area,
            waste_area=metrics.waste_area,
            usage_percent=metrics.usage_percent,
            waste_percent=metrics.waste_percent,
            processing_time=time.monotonic() - start_time,
        )

        logger.info(
            f"Placed {result.placed_count}/{result.requested_count} units on "
            f"{result.sheets_required} sheet(s), usage {result.usage_percent:.1f}%"
        )
        return result

    def _check_deadline(self, start_time: float, processed: int, total: int) -> None:
        if self.config.time_limit is None:
            return
        elapsed = time.monotonic() - start_time
        if elapsed > self.config.time_limit:
            raise NestingTimeoutError(elapsed, processed, total)

    def _unplaced_reason(self, unit: PartUnit, sheet: SheetDefinition) -> str:
        if unit.spec.lock_to_grain and sheet.grain_angle is not None:
            return "No grain-aligned rotation fits an empty sheet"
        return "Does not fit an empty sheet at any allowed rotation"


# Convenience functions
def create_nester(
    kerf_width: float = 0.0,
    global_clearance: float = 5.0,
    rotation_step: float = 90.0,
    position_step: float = 5.0,
) -> SheetNester:
    """Create a sheet nester with specified settings."""
    config = NestingConfig(
        kerf_width=kerf_width,
        global_clearance=global_clearance,
        rotation_step=rotation_step,
        position_step=position_step,
    )
    return SheetNester(config=config)


def nest_parts(
    parts: Sequence[PartSpec],
    sheet: SheetDefinition,
    config: Optional[NestingConfig] = None,
) -> NestingResult:
    """
    Nest parts onto sheets.

    Args:
        parts: Part specs to place
        sheet: Stock sheet definition
        config: Nesting configuration (defaults if omitted)

    Returns:
        Nesting result
    """
    return SheetNester(config=config).nest(parts, sheet)
