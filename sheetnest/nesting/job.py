"""JSON job files bundling parts, sheet and configuration for a run.

A job file looks like::

    {
        "sheet": {"width": 3000, "height": 1500, "grain_angle": 0},
        "config": {"kerf_width": 0.2, "global_clearance": 5},
        "parts": [
            {"id": "bracket", "points": [[0, 0], [120, 0], [120, 80], [0, 80]],
             "quantity": 10, "rotation_policy": "four_way"}
        ]
    }

Missing ``config`` keys fall back to the application settings.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from sheetnest.nesting.errors import InvalidInputError
from sheetnest.nesting.models import NestingConfig, NestingResult, PartSpec, SheetDefinition
from sheetnest.nesting.nester import SheetNester, ProgressCallback


@dataclass
class NestingJob:
    """Everything needed for one nesting run."""
    sheet: SheetDefinition
    parts: List[PartSpec] = field(default_factory=list)
    config: NestingConfig = field(default_factory=NestingConfig)

    def run(self, progress_callback: Optional[ProgressCallback] = None) -> NestingResult:
        """Nest the job's parts."""
        return SheetNester(self.config).nest(self.parts, self.sheet, progress_callback)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "sheet": self.sheet.to_dict(),
            "config": self.config.to_dict(),
            "parts": [p.to_dict() for p in self.parts],
        }

    @classmethod
    def from_dict(cls, data: dict, base_config: Optional[NestingConfig] = None) -> "NestingJob":
        """Create from dictionary, filling config gaps from ``base_config``."""
        if not isinstance(data, dict):
            raise InvalidInputError("Job must be a JSON object")

        try:
            sheet = SheetDefinition.from_dict(data["sheet"])
            parts = [PartSpec.from_dict(p) for p in data.get("parts", [])]
            merged = (base_config or NestingConfig.from_settings()).to_dict()
            merged.update({_snake_case(k): v for k, v in (data.get("config") or {}).items()})
            config = NestingConfig.from_dict(merged)
        except KeyError as e:
            raise InvalidInputError(f"Job is missing required field {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed job: {e}") from e

        return cls(sheet=sheet, parts=parts, config=config)


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def load_job(path: Union[str, Path], base_config: Optional[NestingConfig] = None) -> NestingJob:
    """Read a job file from disk."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidInputError(f"{path.name} cannot be read: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidInputError(f"{path.name} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"{path.name} is not valid JSON: {e}") from e
    return NestingJob.from_dict(data, base_config)


def save_job(job: NestingJob, path: Union[str, Path]) -> Path:
    """Write a job file to disk."""
    path = Path(path)
    path.write_text(json.dumps(job.to_dict(), indent=2), encoding="utf-8")
    return path
