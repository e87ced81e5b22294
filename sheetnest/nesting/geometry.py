"""Polygon helpers for the nesting engine.

Everything here is a pure function over point sequences. Rotation is always
about the origin ``(0, 0)``, never about the shape centroid, so the rotated
bounding box of a part generally moves as well as changes size.
"""

import math
from dataclasses import dataclass
from typing import Sequence, List, Tuple

Point = Tuple[float, float]

# Exact (cos, sin) for quarter turns, avoids 6e-17 noise at 90/180/270
_QUARTER_TURNS = {
    0: (1.0, 0.0),
    90: (0.0, 1.0),
    180: (-1.0, 0.0),
    270: (0.0, -1.0),
}


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
        }


def bounds(points: Sequence[Point]) -> Bounds:
    """Return the bounding box of a point sequence.

    Raises:
        ValueError: if ``points`` is empty.
    """
    if not points:
        raise ValueError("Cannot compute bounds of an empty point sequence")

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return Bounds(min(xs), max(xs), min(ys), max(ys))


def _cos_sin(angle: float) -> Tuple[float, float]:
    normalized = angle % 360
    if normalized in _QUARTER_TURNS:
        return _QUARTER_TURNS[normalized]
    rad = math.radians(angle)
    return math.cos(rad), math.sin(rad)


def rotate(points: Sequence[Point], angle: float) -> List[Point]:
    """Rotate points counter-clockwise about the origin by ``angle`` degrees."""
    cos, sin = _cos_sin(angle)
    return [(x * cos - y * sin, x * sin + y * cos) for x, y in points]


def rotated_bounds(points: Sequence[Point], angle: float) -> Bounds:
    """Bounding box of the points after rotating them about the origin."""
    return bounds(rotate(points, angle))


def polygon_area(points: Sequence[Point]) -> float:
    """Area of a closed polygon (shoelace formula, always positive)."""
    if len(points) < 3:
        return 0.0

    total = 0.0
    for i, (x1, y1) in enumerate(points):
        x2, y2 = points[(i + 1) % len(points)]
        total += x1 * y2 - x2 * y1
    return abs(total) / 2


def perimeter(points: Sequence[Point]) -> float:
    """Length of the closed outline through ``points``."""
    if len(points) < 2:
        return 0.0

    length = 0.0
    for i, (x1, y1) in enumerate(points):
        x2, y2 = points[(i + 1) % len(points)]
        length += math.hypot(x2 - x1, y2 - y1)
    return length


def placed_outline(
    points: Sequence[Point],
    x: float,
    y: float,
    rotation: float,
    kerf_width: float = 0.0,
) -> List[Point]:
    """Transform a part outline into sheet coordinates.

    ``(x, y)`` is the origin of the kerf-expanded, rotated bounding box as
    stored on a placed part, so the outline itself starts ``kerf_width``
    further in on both axes.
    """
    rotated = rotate(points, rotation)
    box = bounds(rotated)
    dx = x + kerf_width - box.min_x
    dy = y + kerf_width - box.min_y
    return [(px + dx, py + dy) for px, py in rotated]
