"""Per-check data structures: identity, location, options and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class Mode(str, Enum):
    RECORD = "record"
    VERIFY = "verify"


class ExampleMetadata(BaseModel):
    """The test example currently running, as described by the host framework."""
    name: str
    file: str = ""
    line: int = 0


class CheckContext(BaseModel):
    example: Optional[ExampleMetadata] = None
    source_file: str


class SnapshotIdentity(BaseModel):
    sanitized_name: str
    raw_name: Optional[str] = None


class ReferenceLocation(BaseModel):
    directory_path: Path


class ComparisonConfig(BaseModel):
    tolerance: float = 0.0
    is_device_agnostic: bool = False
    uses_alternate_render_path: bool = False
    mode: Mode = Mode.VERIFY


@dataclass
class ComparisonResult:
    passed: bool
    message: str = ""
