"""Tests for per-bin candidate search."""

import pytest

from sheetnest.nesting.models import (
    NestingConfig,
    PartSpec,
    PartUnit,
    PlacedPart,
    RotationPolicy,
    SheetDefinition,
)
from sheetnest.nesting.search import (
    allowed_rotations,
    find_placement,
    grain_allows,
    grid_positions,
    rotation_angles,
)


def rect_unit(width, height, **kwargs):
    """Part unit for a width x height rectangle at the origin."""
    spec = PartSpec(
        id=kwargs.pop("id", "r"),
        points=[(0, 0), (width, 0), (width, height), (0, height)],
        **kwargs,
    )
    return PartUnit(f"{spec.id}_0", spec, 0, 0)


def block(x, y, width, height):
    """Placed part used as an obstacle."""
    return PlacedPart("block_0", "block", 0, x, y, 0, width, height, width * height)


class TestRotationAngles:
    """Tests for rotation sets per policy."""

    def test_none(self):
        """Test no rotation."""
        assert rotation_angles(RotationPolicy.NONE, 15) == [0.0]

    def test_four_way(self):
        """Test quarter turns ignore the step."""
        assert rotation_angles(RotationPolicy.FOUR_WAY, 15) == [0.0, 90.0, 180.0, 270.0]

    def test_free_step(self):
        """Test free rotation in 45° steps."""
        angles = rotation_angles(RotationPolicy.FREE, 45)

        assert angles[0] == 0
        assert len(angles) == 8
        assert angles[-1] == 315

    def test_free_uneven_step(self):
        """Test steps that do not divide 360."""
        assert rotation_angles(RotationPolicy.FREE, 100) == [0, 100, 200, 300]

    def test_free_full_turn(self):
        """Test a 360° step means only 0°."""
        assert rotation_angles(RotationPolicy.FREE, 360) == [0]


class TestGrain:
    """Tests for grain alignment tolerance."""

    def test_aligned(self):
        assert grain_allows(0, 0) is True
        assert grain_allows(90, 90) is True

    def test_within_tolerance(self):
        assert grain_allows(5, 0) is True
        assert grain_allows(6, 0) is False

    def test_wraps_at_360(self):
        """Test near-360 rotations count as aligned with 0."""
        assert grain_allows(358, 0) is True
        assert grain_allows(0, 357) is True
        assert grain_allows(350, 0) is False

    def test_grain_beyond_full_turn(self):
        """Test sheet grains outside [0, 360) compare as their reduced angle."""
        assert grain_allows(0, 540) is False
        assert grain_allows(180, 540) is True
        assert grain_allows(0, 720) is True
        assert grain_allows(90, -270) is True

    def test_grain_lock_with_unreduced_sheet_grain(self):
        """Test a locked part on a 540 degree grain is placed at 180."""
        unit = rect_unit(500, 100, rotation_policy="four_way", lock_to_grain=True)
        sheet = SheetDefinition(1000, 1000, grain_angle=540)

        assert allowed_rotations(unit, sheet, NestingConfig()) == [180.0]
        assert find_placement(unit, [], sheet, NestingConfig()).rotation == 180

    def test_grain_lock_filters_rotations(self):
        """Test locked parts only keep grain-aligned rotations."""
        unit = rect_unit(10, 10, rotation_policy="four_way", lock_to_grain=True)
        sheet = SheetDefinition(100, 100, grain_angle=90)

        assert allowed_rotations(unit, sheet, NestingConfig()) == [90.0]

    def test_grain_ignored_without_sheet_grain(self):
        """Test grain lock has no effect on sheets without grain."""
        unit = rect_unit(10, 10, rotation_policy="four_way", lock_to_grain=True)
        sheet = SheetDefinition(100, 100)

        assert len(allowed_rotations(unit, sheet, NestingConfig())) == 4

    def test_part_rotation_step_override(self):
        """Test a part's own rotation step beats the config."""
        unit = rect_unit(10, 10, rotation_policy="free", rotation_step=120)

        assert allowed_rotations(unit, SheetDefinition(100, 100), NestingConfig()) == [0, 120, 240]


class TestGridPositions:
    """Tests for grid coordinate generation."""

    def test_inclusive_limit(self):
        assert list(grid_positions(10, 5)) == [0, 5, 10]

    def test_limit_between_steps(self):
        assert list(grid_positions(9, 5)) == [0, 5]

    def test_float_steps_reach_limit(self):
        """Test accumulated float error does not drop the last cell."""
        assert len(list(grid_positions(0.3, 0.1))) == 4

    def test_negative_limit(self):
        assert list(grid_positions(-1, 5)) == []


class TestFindPlacement:
    """Tests for first-fit placement in one bin."""

    @pytest.fixture
    def sheet(self):
        return SheetDefinition(width=1000, height=1000)

    @pytest.fixture
    def config(self):
        return NestingConfig(global_clearance=0, position_step=5)

    def test_empty_bin_bottom_left(self, sheet, config):
        """Test the first grid cell wins on an empty sheet."""
        result = find_placement(rect_unit(100, 50, rotation_policy="none"), [], sheet, config)

        assert result is not None
        assert (result.x, result.y, result.rotation) == (0, 0, 0)
        assert (result.width, result.height) == (100, 50)

    def test_next_to_obstacle(self, sheet):
        """Test the lowest row is filled before moving up."""
        config = NestingConfig(global_clearance=10, position_step=5)
        result = find_placement(rect_unit(100, 50), [block(0, 0, 100, 50)], sheet, config)

        assert (result.x, result.y) == (110, 0)

    def test_row_before_column(self, sheet, config):
        """Test y is minimised before x."""
        existing = [block(0, 0, 950, 100)]
        result = find_placement(rect_unit(100, 100, rotation_policy="none"), existing, sheet, config)

        assert (result.x, result.y) == (0, 100)

    def test_position_step_independent(self, sheet):
        """Test the grid step controls candidate spacing."""
        config = NestingConfig(global_clearance=0, position_step=30)
        result = find_placement(rect_unit(100, 100), [block(0, 0, 100, 100)], sheet, config)

        assert (result.x, result.y) == (120, 0)

    def test_kerf_expands_footprint(self, sheet):
        """Test kerf is part of the stored footprint."""
        config = NestingConfig(kerf_width=2, position_step=5)
        result = find_placement(rect_unit(100, 100), [], sheet, config)

        assert (result.width, result.height) == (104, 104)

    def test_rotates_to_fit(self):
        """Test a part too wide at 0° is placed at 90°."""
        sheet = SheetDefinition(width=1000, height=1500)
        unit = rect_unit(1200, 200, rotation_policy="four_way")
        result = find_placement(unit, [], sheet, NestingConfig())

        assert result.rotation == 90
        assert (result.x, result.y) == (0, 0)
        assert (result.width, result.height) == (200, 1200)

    def test_no_rotation_no_fit(self, sheet, config):
        """Test a part wider than the sheet with rotation disabled."""
        unit = rect_unit(1200, 200, rotation_policy="none")

        assert find_placement(unit, [], sheet, config) is None

    def test_grain_locked_placement(self, config):
        """Test grain lock picks the aligned rotation."""
        sheet = SheetDefinition(1000, 1000, grain_angle=90)
        unit = rect_unit(100, 50, rotation_policy="four_way", lock_to_grain=True)
        result = find_placement(unit, [], sheet, config)

        assert result.rotation == 90

    def test_bin_index_recorded(self, sheet, config):
        """Test the bin index is stored on the placement."""
        result = find_placement(rect_unit(10, 10), [], sheet, config, bin_index=3)

        assert result.bin_index == 3
        assert result.part_id == "r_0"
        assert result.source_id == "r"

    def test_max_iterations_caps_search(self, sheet):
        """Test the candidate budget stops the scan."""
        config = NestingConfig(global_clearance=0, position_step=5, max_iterations=1)
        unit = rect_unit(100, 100, rotation_policy="none")

        assert find_placement(unit, [], sheet, config) is not None
        assert find_placement(unit, [block(0, 0, 100, 100)], sheet, config) is None
