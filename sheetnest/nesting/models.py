"""Data model for nesting runs.

Part specs, the sheet definition and the run configuration are inputs and
are never modified by the engine. Bins, placed parts and the result are
created by a run and only live in the returned ``NestingResult``.

``from_dict`` accepts both the snake_case keys written by ``to_dict`` and the
camelCase keys used by the web front end's exports (``kerfWidth``,
``rotationLimit``, ``grainVector`` ...).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from sheetnest.nesting.errors import ConfigurationError, InvalidInputError
from sheetnest.nesting.geometry import Point, polygon_area


def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key from ``keys``."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional(value: Any, cast) -> Any:
    """Apply ``cast`` unless ``value`` is None."""
    return None if value is None else cast(value)


class RotationPolicy(str, Enum):
    """Which rotations a part may be tried at."""
    NONE = "none"  # 0° only
    FOUR_WAY = "four_way"  # 0/90/180/270
    FREE = "free"  # every rotation step

    @classmethod
    def from_limit(cls, rotation_limit: float) -> "RotationPolicy":
        """Map the front end's ``rotationLimit`` (0, 90, 360) to a policy."""
        if rotation_limit == 0:
            return cls.NONE
        if rotation_limit == 90:
            return cls.FOUR_WAY
        return cls.FREE


@dataclass(frozen=True)
class PartSpec:
    """A part outline to nest, with its quantity and constraints."""
    id: str
    points: Tuple[Point, ...]
    area: float = 0.0  # computed from points when left at 0
    quantity: int = 1
    rotation_policy: RotationPolicy = RotationPolicy.FREE
    rotation_step: Optional[float] = None  # overrides NestingConfig.rotation_step
    grain_angle: Optional[float] = None
    lock_to_grain: bool = False
    min_spacing: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "points", tuple((float(x), float(y)) for x, y in self.points))
        object.__setattr__(self, "rotation_policy", RotationPolicy(self.rotation_policy))
        if not self.area:
            object.__setattr__(self, "area", polygon_area(self.points))
        else:
            object.__setattr__(self, "area", abs(float(self.area)))

    def validate(self) -> None:
        """Raise InvalidInputError if the part cannot take part in a run."""
        if len(self.points) < 3:
            raise InvalidInputError(
                f"Part '{self.id}' needs at least 3 points, got {len(self.points)}"
            )
        if self.quantity < 1:
            raise InvalidInputError(f"Part '{self.id}' has quantity {self.quantity}, expected >= 1")
        if self.min_spacing is not None and self.min_spacing < 0:
            raise InvalidInputError(f"Part '{self.id}' has negative min_spacing")
        if self.rotation_step is not None and not 0 < self.rotation_step <= 360:
            raise ConfigurationError(
                f"Part '{self.id}' rotation_step must be in (0, 360], got {self.rotation_step}"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "points": [list(p) for p in self.points],
            "area": self.area,
            "quantity": self.quantity,
            "rotation_policy": self.rotation_policy.value,
            "rotation_step": self.rotation_step,
            "grain_angle": self.grain_angle,
            "lock_to_grain": self.lock_to_grain,
            "min_spacing": self.min_spacing,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PartSpec":
        """Create from dictionary."""
        raw_points = data.get("points", [])
        points = [
            (p["x"], p["y"]) if isinstance(p, dict) else (p[0], p[1])
            for p in raw_points
        ]

        if "rotation_policy" in data:
            policy = RotationPolicy(data["rotation_policy"])
        elif "rotationLimit" in data:
            policy = RotationPolicy.from_limit(data["rotationLimit"])
        else:
            policy = RotationPolicy.FREE

        return cls(
            id=str(data["id"]),
            points=tuple(points),
            area=float(_get(data, "area", default=0.0)),
            quantity=int(_get(data, "quantity", default=1)),
            rotation_policy=policy,
            rotation_step=_optional(_get(data, "rotation_step", "rotationStep"), float),
            grain_angle=_optional(_get(data, "grain_angle", "grainDirection"), float),
            lock_to_grain=bool(_get(data, "lock_to_grain", "lockToGrain", default=False)),
            min_spacing=_optional(_get(data, "min_spacing", "minSpacing"), float),
        )


@dataclass(frozen=True)
class PartUnit:
    """One concrete instance of a PartSpec after quantity expansion."""
    id: str
    spec: PartSpec
    index: int
    order: int  # position in the expanded input, used as sort tie-break

    @property
    def area(self) -> float:
        return self.spec.area

    @property
    def points(self) -> Tuple[Point, ...]:
        return self.spec.points

    @property
    def min_spacing(self) -> float:
        return self.spec.min_spacing or 0.0


@dataclass(frozen=True)
class SheetDefinition:
    """Stock sheet shared by every bin of a run."""
    width: float
    height: float
    grain_angle: Optional[float] = None

    @property
    def area(self) -> float:
        return self.width * self.height

    def validate(self) -> None:
        """Raise InvalidInputError for non-positive dimensions."""
        if not (self.width > 0 and self.height > 0):
            raise InvalidInputError(
                f"Sheet dimensions must be positive, got {self.width}x{self.height}"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "grain_angle": self.grain_angle,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SheetDefinition":
        """Create from dictionary."""
        grain = data.get("grain_angle")
        if grain is None and isinstance(data.get("grainVector"), dict):
            grain = data["grainVector"].get("angle")
        return cls(
            width=float(data["width"]),
            height=float(data["height"]),
            grain_angle=_optional(grain, float),
        )


@dataclass
class NestingConfig:
    """Configuration for a nesting run."""
    # Compensation (mm)
    kerf_width: float = 0.0  # added on every side of a part's bounding box
    global_clearance: float = 5.0  # minimum gap between parts

    # Search granularity
    rotation_step: float = 90.0  # degrees, used by RotationPolicy.FREE
    position_step: float = 5.0  # mm between grid candidates

    # Options
    common_line_cutting: bool = False  # drop the global clearance between parts
    max_iterations: Optional[int] = None  # candidate positions per part and bin
    time_limit: Optional[float] = None  # seconds for the whole run

    def validate(self) -> None:
        """Raise ConfigurationError for out-of-range values."""
        if not 0 < self.rotation_step <= 360:
            raise ConfigurationError(f"rotation_step must be in (0, 360], got {self.rotation_step}")
        if self.position_step <= 0:
            raise ConfigurationError(f"position_step must be > 0, got {self.position_step}")
        if self.kerf_width < 0:
            raise ConfigurationError(f"kerf_width must be >= 0, got {self.kerf_width}")
        if self.global_clearance < 0:
            raise ConfigurationError(f"global_clearance must be >= 0, got {self.global_clearance}")
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ConfigurationError(f"time_limit must be > 0, got {self.time_limit}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kerf_width": self.kerf_width,
            "global_clearance": self.global_clearance,
            "rotation_step": self.rotation_step,
            "position_step": self.position_step,
            "common_line_cutting": self.common_line_cutting,
            "max_iterations": self.max_iterations,
            "time_limit": self.time_limit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NestingConfig":
        """Create from dictionary."""
        defaults = cls()
        return cls(
            kerf_width=float(_get(data, "kerf_width", "kerfWidth", default=defaults.kerf_width)),
            global_clearance=float(
                _get(data, "global_clearance", "globalClearance", default=defaults.global_clearance)
            ),
            rotation_step=float(_get(data, "rotation_step", "rotationStep", default=defaults.rotation_step)),
            position_step=float(_get(data, "position_step", "positionStep", default=defaults.position_step)),
            common_line_cutting=bool(_get(data, "common_line_cutting", "commonLineCutting", default=False)),
            max_iterations=_optional(_get(data, "max_iterations", "maxIterations"), int),
            time_limit=_optional(_get(data, "time_limit", "timeLimit"), float),
        )

    @classmethod
    def from_settings(cls, settings=None) -> "NestingConfig":
        """Create from the environment-driven application settings."""
        from sheetnest.config import get_settings

        settings = settings or get_settings()
        return cls(
            kerf_width=settings.default_kerf_width,
            global_clearance=settings.default_global_clearance,
            rotation_step=settings.default_rotation_step,
            position_step=settings.default_position_step,
            time_limit=settings.default_time_limit,
        )


@dataclass(frozen=True)
class PlacedPart:
    """A part unit bound to a bin, a rotation and a position.

    ``x``/``y`` locate the lower-left corner of the rotated, kerf-expanded
    bounding box; ``width``/``height`` are that box's dimensions.
    """
    part_id: str
    source_id: str
    bin_index: int
    x: float
    y: float
    rotation: float
    width: float
    height: float
    area: float
    min_spacing: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "part_id": self.part_id,
            "source_id": self.source_id,
            "bin_index": self.bin_index,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "width": self.width,
            "height": self.height,
            "area": self.area,
            "min_spacing": self.min_spacing,
        }


@dataclass(frozen=True)
class UnplacedPart:
    """A part unit that fit no sheet at any tested rotation."""
    part_id: str
    source_id: str
    area: float
    reason: str = "Does not fit an empty sheet at any allowed rotation"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "part_id": self.part_id,
            "source_id": self.source_id,
            "area": self.area,
            "reason": self.reason,
        }


@dataclass
class Bin:
    """One sheet instance with its parts in placement order."""
    index: int
    placed: List[PlacedPart] = field(default_factory=list)

    @property
    def used_area(self) -> float:
        return sum(p.area for p in self.placed)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "placed": [p.to_dict() for p in self.placed],
            "used_area": self.used_area,
        }


@dataclass
class NestingResult:
    """Outcome of a nesting run, possibly partial."""
    sheet: SheetDefinition
    bins: List[Bin] = field(default_factory=list)
    unplaced: List[UnplacedPart] = field(default_factory=list)
    requested_count: int = 0
    placed_count: int = 0
    used_area: float = 0.0
    available_area: float = 0.0
    waste_area: float = 0.0
    usage_percent: float = 0.0
    waste_percent: float = 0.0
    processing_time: float = 0.0

    @property
    def sheets_required(self) -> int:
        return len(self.bins)

    @property
    def placed_parts(self) -> List[PlacedPart]:
        return [p for b in self.bins for p in b.placed]

    @property
    def complete(self) -> bool:
        return not self.unplaced

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "sheet": self.sheet.to_dict(),
            "sheets_required": self.sheets_required,
            "bins": [b.to_dict() for b in self.bins],
            "unplaced": [u.to_dict() for u in self.unplaced],
            "requested_count": self.requested_count,
            "placed_count": self.placed_count,
            "used_area": self.used_area,
            "available_area": self.available_area,
            "waste_area": self.waste_area,
            "usage_percent": self.usage_percent,
            "waste_percent": self.waste_percent,
            "processing_time": self.processing_time,
        }
