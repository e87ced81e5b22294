"""Usage, waste, cutting-path and cost figures for nesting results."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sheetnest.nesting.geometry import perimeter
from sheetnest.nesting.models import Bin, NestingResult, PartSpec, SheetDefinition

# Placements whose y differs by less than this are cut as one row
ROW_TOLERANCE = 10.0

# Flat cut length per part used when no path length is known (m)
DEFAULT_CUT_LENGTH_PER_PART = 0.5


@dataclass
class AreaMetrics:
    """Area totals over every opened bin."""
    used_area: float = 0.0
    available_area: float = 0.0
    waste_area: float = 0.0
    usage_percent: float = 0.0
    waste_percent: float = 0.0


def compute_metrics(bins: Sequence[Bin], sheet: SheetDefinition) -> AreaMetrics:
    """Used/waste areas and percentages relative to all opened bins."""
    used = sum(b.used_area for b in bins)
    available = len(bins) * sheet.area
    if available <= 0:
        return AreaMetrics()

    waste = available - used
    return AreaMetrics(
        used_area=used,
        available_area=available,
        waste_area=waste,
        usage_percent=used / available * 100,
        waste_percent=waste / available * 100,
    )


def bin_usage(bin_: Bin, sheet: SheetDefinition) -> float:
    """Usage percentage of a single sheet."""
    return bin_.used_area / sheet.area * 100


def cutting_path_length(result: NestingResult, parts: Sequence[PartSpec]) -> float:
    """
    Rough cutting path length in sheet units.

    Per bin, parts are visited row by row (placements within ``ROW_TOLERANCE``
    in y form a row, left to right inside it). The travel between successive
    placement origins is added to the perimeter of every placed outline.
    """
    perimeters: Dict[str, float] = {p.id: perimeter(p.points) for p in parts}
    total = 0.0

    for bin_ in result.bins:
        ordered = _row_order(bin_)
        for prev, curr in zip(ordered, ordered[1:]):
            total += math.hypot(curr.x - prev.x, curr.y - prev.y)
        total += sum(perimeters.get(p.source_id, 0.0) for p in ordered)

    return total


def _row_order(bin_: Bin) -> list:
    rows: List[list] = []
    for part in sorted(bin_.placed, key=lambda p: (p.y, p.x)):
        if rows and abs(part.y - rows[-1][0].y) < ROW_TOLERANCE:
            rows[-1].append(part)
        else:
            rows.append([part])
    return [p for row in rows for p in sorted(row, key=lambda p: p.x)]


@dataclass
class CostEstimate:
    """Material and cutting cost for a nesting result."""
    sheets: int
    parts: int
    material_cost: float
    cutting_cost: float
    total_cost: float
    cost_per_part: float
    waste_cost: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "sheets": self.sheets,
            "parts": self.parts,
            "material_cost": round(self.material_cost, 2),
            "cutting_cost": round(self.cutting_cost, 2),
            "total_cost": round(self.total_cost, 2),
            "cost_per_part": round(self.cost_per_part, 2),
            "waste_cost": round(self.waste_cost, 2),
        }


def estimate_cost(
    result: NestingResult,
    cost_per_sheet: float,
    cutting_cost_per_meter: float = 0.0,
    path_length_mm: Optional[float] = None,
) -> CostEstimate:
    """
    Estimate the cost of a nesting result.

    Args:
        result: Completed nesting result
        cost_per_sheet: Price of one stock sheet
        cutting_cost_per_meter: Cutting price per metre of path
        path_length_mm: Cutting path length; when omitted a flat
            ``DEFAULT_CUT_LENGTH_PER_PART`` metres per part is assumed

    Returns:
        Cost estimate
    """
    sheets = result.sheets_required
    parts = result.placed_count

    material_cost = sheets * cost_per_sheet
    if path_length_mm is None:
        cut_meters = parts * DEFAULT_CUT_LENGTH_PER_PART
    else:
        cut_meters = path_length_mm / 1000
    cutting_cost = cut_meters * cutting_cost_per_meter
    total_cost = material_cost + cutting_cost

    return CostEstimate(
        sheets=sheets,
        parts=parts,
        material_cost=material_cost,
        cutting_cost=cutting_cost,
        total_cost=total_cost,
        cost_per_part=total_cost / parts if parts else 0.0,
        waste_cost=result.waste_percent / 100 * material_cost,
    )
