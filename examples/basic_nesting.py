#!/usr/bin/env python3
"""
Basic nesting example.

Nests a handful of brackets and gussets onto 1500x1000mm sheets and prints
where each part goes.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sheetnest.nesting import NestingConfig, PartSpec, SheetDefinition, SheetNester
from sheetnest.nesting.geometry import placed_outline
from sheetnest.nesting.metrics import cutting_path_length, estimate_cost


def progress_callback(done: int, total: int):
    """Print nesting progress."""
    print(f"  [{done}/{total}] part units processed")


def main():
    """Run basic nesting example."""
    print("=" * 50)
    print("SheetNest Basic Nesting Example")
    print("=" * 50)

    sheet = SheetDefinition(width=1500, height=1000, grain_angle=0)
    parts = [
        PartSpec("bracket", [(0, 0), (300, 0), (300, 80), (80, 80), (80, 250), (0, 250)],
                 quantity=6, rotation_policy="four_way"),
        PartSpec("gusset", [(0, 0), (200, 0), (0, 200)], quantity=8),
        PartSpec("rib", [(0, 0), (900, 0), (900, 60), (0, 60)],
                 quantity=3, lock_to_grain=True, rotation_policy="four_way"),
    ]
    config = NestingConfig(kerf_width=0.2, global_clearance=5, position_step=5)

    print(f"\nSheet: {sheet.width:g} x {sheet.height:g} mm")
    print(f"Kerf: {config.kerf_width}mm  Clearance: {config.global_clearance}mm")
    print()

    result = SheetNester(config).nest(parts, sheet, progress_callback)

    print(f"\nSheets required: {result.sheets_required}")
    print(f"Placed: {result.placed_count}/{result.requested_count}")
    print(f"Usage: {result.usage_percent:.1f}%  Waste: {result.waste_percent:.1f}%")

    outlines = {p.id: p.points for p in parts}
    for bin_ in result.bins:
        print(f"\nSheet {bin_.index + 1}:")
        for part in bin_.placed:
            first = placed_outline(outlines[part.source_id], part.x, part.y,
                                   part.rotation, config.kerf_width)[0]
            print(f"  {part.part_id:<12} at ({part.x:7.1f}, {part.y:7.1f}) "
                  f"rot {part.rotation:5.1f}°  first vertex ({first[0]:.1f}, {first[1]:.1f})")

    for part in result.unplaced:
        print(f"  Unplaced: {part.part_id} ({part.reason})")

    path = cutting_path_length(result, parts)
    cost = estimate_cost(result, cost_per_sheet=180.0, cutting_cost_per_meter=1.2, path_length_mm=path)
    print(f"\nCutting path: {path / 1000:.2f} m")
    print(f"Estimated cost: {cost.total_cost:.2f} ({cost.cost_per_part:.2f} per part)")


if __name__ == "__main__":
    main()
