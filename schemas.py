from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from config import settings
from utils.hashing import calculate_hash

# Content hash -> finalized. Only ``True`` is ever stored.
OptimizationState = dict[str, bool]


class OptimizationOptions(BaseModel):
    """Options for one optimization run (all optional with defaults).

    Quality is passed through to the compressor untouched; range checks
    are the compressor's business.
    """

    quality: int = Field(default_factory=lambda: settings.default_quality)
    include: Optional[str] = None
    exclude: Optional[str] = None
    save: bool = False

    @property
    def has_filters(self) -> bool:
        return bool(self.include or self.exclude)


@dataclass
class AssetFile:
    """A discovered image. Never persisted; rebuilt every run."""

    relative_path: str
    path: Path

    @classmethod
    def from_relative(cls, project_root: Path, relative_path: str) -> "AssetFile":
        return cls(relative_path=relative_path, path=Path(project_root) / relative_path)

    @cached_property
    def hash(self) -> str:
        return calculate_hash(self.path)

    @property
    def size(self) -> int:
        return self.path.stat().st_size


class OptimizationOutcome(str, Enum):
    ALREADY_OPTIMIZED = "already_optimized"
    IMPROVED = "improved"
    NOT_IMPROVED = "not_improved"
    UNAVAILABLE = "unavailable"


class AssetResult(BaseModel):
    """Per-asset result used for totals and messaging."""

    path: str
    outcome: OptimizationOutcome
    original_hash: Optional[str] = None
    optimized_hash: Optional[str] = None
    original_size: Optional[int] = None
    optimized_size: Optional[int] = None
    saved_bytes: int = 0
    backup_path: Optional[str] = None


class RunSummary(BaseModel):
    """Outcome of a whole run."""

    results: list[AssetResult] = Field(default_factory=list)
    state_created: bool = False
    aborted: bool = False
    evicted: int = 0

    @property
    def files_checked(self) -> int:
        return sum(
            1 for r in self.results if r.outcome != OptimizationOutcome.UNAVAILABLE
        )

    @property
    def total_saved(self) -> int:
        return sum(
            r.saved_bytes for r in self.results if r.outcome == OptimizationOutcome.IMPROVED
        )

    @property
    def files_skipped(self) -> int:
        return sum(
            1
            for r in self.results
            if r.outcome in (OptimizationOutcome.ALREADY_OPTIMIZED, OptimizationOutcome.NOT_IMPROVED)
        )

    def count(self, outcome: OptimizationOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)
