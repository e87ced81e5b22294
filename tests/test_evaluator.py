"""Tests for placement validity checks."""

import pytest

from sheetnest.nesting.evaluator import (
    boxes_overlap,
    clearance_between,
    fits_sheet,
    footprint,
    is_valid_placement,
)
from sheetnest.nesting.models import (
    NestingConfig,
    PartSpec,
    PartUnit,
    PlacedPart,
    SheetDefinition,
)


def placed(x, y, width, height, min_spacing=0.0, part_id="p"):
    """Build a placed part directly from its box."""
    return PlacedPart(
        part_id=part_id,
        source_id=part_id,
        bin_index=0,
        x=x,
        y=y,
        rotation=0,
        width=width,
        height=height,
        area=width * height,
        min_spacing=min_spacing,
    )


@pytest.fixture
def sheet():
    """A 100x100 sheet."""
    return SheetDefinition(width=100, height=100)


class TestFootprint:
    """Tests for kerf-expanded footprints."""

    @pytest.fixture
    def unit(self):
        spec = PartSpec("r", [(0, 0), (100, 0), (100, 50), (0, 50)])
        return PartUnit("r_0", spec, 0, 0)

    def test_footprint_no_kerf(self, unit):
        """Test footprint without kerf equals the bounding box."""
        assert footprint(unit, 0, 0) == (100, 50)

    def test_footprint_with_kerf(self, unit):
        """Test kerf is added on both sides."""
        assert footprint(unit, 0, 2) == (104, 54)

    def test_footprint_rotated(self, unit):
        """Test footprint at 90°."""
        assert footprint(unit, 90, 2) == (54, 104)


class TestClearance:
    """Tests for clearance selection."""

    def test_global_clearance(self):
        """Test global clearance applies when larger."""
        assert clearance_between(0, 0, NestingConfig(global_clearance=5)) == 5

    def test_part_override_wins(self):
        """Test the largest per-part spacing wins."""
        assert clearance_between(8, 3, NestingConfig(global_clearance=5)) == 8

    def test_common_line_drops_global(self):
        """Test common-line cutting removes the global clearance only."""
        config = NestingConfig(global_clearance=5, common_line_cutting=True)

        assert clearance_between(0, 0, config) == 0
        assert clearance_between(0, 3, config) == 3


class TestContainment:
    """Tests for sheet containment."""

    def test_inside(self, sheet):
        """Test a box inside the sheet."""
        assert fits_sheet(0, 0, 100, 100, sheet) is True

    def test_outside(self, sheet):
        """Test boxes crossing each edge."""
        assert fits_sheet(-1, 0, 10, 10, sheet) is False
        assert fits_sheet(0, -1, 10, 10, sheet) is False
        assert fits_sheet(91, 0, 10, 10, sheet) is False
        assert fits_sheet(0, 91, 10, 10, sheet) is False


class TestOverlap:
    """Tests for the separating-axis rectangle test."""

    def test_separated_on_x(self):
        """Test boxes apart on one axis do not overlap."""
        assert boxes_overlap(placed(50, 0, 40, 40), placed(0, 0, 40, 40), 10) is False

    def test_inside_clearance(self):
        """Test boxes closer than the clearance overlap."""
        assert boxes_overlap(placed(49, 0, 40, 40), placed(0, 0, 40, 40), 10) is True

    def test_touching_without_clearance(self):
        """Test shared edges are allowed at zero clearance."""
        assert boxes_overlap(placed(40, 0, 40, 40), placed(0, 0, 40, 40), 0) is False

    def test_diagonal_separation(self):
        """Test overlap on x alone is not a collision."""
        assert boxes_overlap(placed(20, 60, 40, 40), placed(0, 0, 40, 40), 10) is False


class TestIsValidPlacement:
    """Tests for full placement validation."""

    def test_empty_bin(self, sheet):
        """Test placing into an empty bin."""
        assert is_valid_placement(placed(0, 0, 40, 40), [], sheet, NestingConfig()) is True

    def test_out_of_bounds(self, sheet):
        """Test containment is checked first."""
        assert is_valid_placement(placed(70, 0, 40, 40), [], sheet, NestingConfig()) is False

    def test_respects_global_clearance(self, sheet):
        """Test clearance against an existing part."""
        config = NestingConfig(global_clearance=10)
        existing = [placed(0, 0, 40, 40)]

        assert is_valid_placement(placed(50, 0, 40, 40), existing, sheet, config) is True
        assert is_valid_placement(placed(49, 0, 40, 40), existing, sheet, config) is False

    def test_respects_part_spacing(self, sheet):
        """Test a neighbour's min_spacing is honoured."""
        config = NestingConfig(global_clearance=10)
        existing = [placed(0, 0, 40, 40, min_spacing=20)]

        assert is_valid_placement(placed(50, 0, 40, 40), existing, sheet, config) is False
        assert is_valid_placement(placed(60, 0, 40, 40), existing, sheet, config) is True
