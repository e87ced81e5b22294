"""Bin (sheet instance) management.

Bins are only ever appended, and only when a part actually lands on the new
sheet, so a run never leaves an empty bin behind.
"""

from typing import List, Optional

from sheetnest.nesting.models import Bin, NestingConfig, PartUnit, PlacedPart, SheetDefinition
from sheetnest.nesting.search import find_placement
from sheetnest.utils import get_logger

logger = get_logger("nesting.bins")


class BinManager:
    """Ordered list of bins tried first-fit in creation order."""

    def __init__(self, sheet: SheetDefinition, config: NestingConfig):
        self.sheet = sheet
        self.config = config
        self.bins: List[Bin] = []

    def place(self, unit: PartUnit) -> Optional[PlacedPart]:
        """Place a unit in the first bin that takes it, opening one new bin if needed."""
        for bin_ in self.bins:
            placed = find_placement(unit, bin_.placed, self.sheet, self.config, bin_.index)
            if placed:
                bin_.placed.append(placed)
                return placed

        new_index = len(self.bins)
        placed = find_placement(unit, [], self.sheet, self.config, new_index)
        if placed is None:
            return None

        self.bins.append(Bin(index=new_index, placed=[placed]))
        logger.debug(f"Opened sheet {new_index + 1} for {unit.id}")
        return placed

    @property
    def placed_count(self) -> int:
        return sum(len(b.placed) for b in self.bins)
