"""Nesting engine for placing flat parts on rectangular sheets.

Provides sheet nesting with kerf, clearance, rotation and grain constraints.
"""

from sheetnest.nesting.errors import (
    ConfigurationError,
    InvalidInputError,
    NestingError,
    NestingTimeoutError,
)
from sheetnest.nesting.models import (
    Bin,
    NestingConfig,
    NestingResult,
    PartSpec,
    PlacedPart,
    RotationPolicy,
    SheetDefinition,
    UnplacedPart,
)
from sheetnest.nesting.nester import (
    SheetNester,
    create_nester,
    nest_parts,
)
from sheetnest.nesting.job import NestingJob, load_job, save_job

__all__ = [
    "Bin",
    "ConfigurationError",
    "InvalidInputError",
    "NestingConfig",
    "NestingError",
    "NestingJob",
    "NestingResult",
    "NestingTimeoutError",
    "PartSpec",
    "PlacedPart",
    "RotationPolicy",
    "SheetDefinition",
    "SheetNester",
    "UnplacedPart",
    "create_nester",
    "load_job",
    "nest_parts",
    "save_job",
]
