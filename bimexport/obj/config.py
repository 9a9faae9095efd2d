"""OBJ writer configuration."""

import os
from dataclasses import dataclass
from typing import Callable, Optional

from .buffer import DEFAULT_FLUSH_THRESHOLD
from .units import TARGET_UNITS


def _noop(message: str) -> None:
    pass


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class WriterOptions:
    """Configuration options for the OBJ writer."""

    skip_normals: bool = False  # Omit vn lines and v//n faces entirely
    log: Optional[Callable[[str], None]] = None  # Receives progress/skip messages

    # Output settings
    flush_threshold: int = DEFAULT_FLUSH_THRESHOLD  # Buffered lines before a write
    output_filename: str = "output.obj"
    openings_filename: str = "openings.obj"
    target_unit: str = "m"  # Unit of the written coordinates

    def __post_init__(self):
        if self.log is None:
            self.log = _noop
        if self.flush_threshold < 1:
            raise ValueError(f"flush_threshold must be at least 1, got {self.flush_threshold}")
        if self.target_unit not in TARGET_UNITS:
            raise ValueError(
                f"Unknown target unit: {self.target_unit}. Available: {list(TARGET_UNITS.keys())}"
            )
        if self.output_filename == self.openings_filename:
            raise ValueError("output_filename and openings_filename must differ")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "skip_normals": self.skip_normals,
            "flush_threshold": self.flush_threshold,
            "output_filename": self.output_filename,
            "openings_filename": self.openings_filename,
            "target_unit": self.target_unit,
        }

    @classmethod
    def from_dict(cls, data: dict, log: Optional[Callable[[str], None]] = None) -> "WriterOptions":
        """Create WriterOptions from dictionary."""
        return cls(
            skip_normals=bool(data.get("skip_normals", False)),
            log=log,
            flush_threshold=int(data.get("flush_threshold", DEFAULT_FLUSH_THRESHOLD)),
            output_filename=data.get("output_filename", "output.obj"),
            openings_filename=data.get("openings_filename", "openings.obj"),
            target_unit=data.get("target_unit", "m"),
        )

    @classmethod
    def from_env(cls, log: Optional[Callable[[str], None]] = None) -> "WriterOptions":
        """Load configuration from environment variables."""
        return cls(
            skip_normals=_env_flag("BIMEXPORT_SKIP_NORMALS"),
            log=log,
            flush_threshold=int(os.getenv("BIMEXPORT_FLUSH_THRESHOLD", str(DEFAULT_FLUSH_THRESHOLD))),
            output_filename=os.getenv("BIMEXPORT_OUTPUT_FILENAME", "output.obj"),
            openings_filename=os.getenv("BIMEXPORT_OPENINGS_FILENAME", "openings.obj"),
            target_unit=os.getenv("BIMEXPORT_TARGET_UNIT", "m"),
        )
