"""Configuration models for snapshot runs."""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FOLDER_SUFFIXES = ("tests", "specs")

ENV_REFERENCE_DIR = "SNAPMATCH_REFERENCE_DIR"
ENV_RECORD = "SNAPMATCH_RECORD"
ENV_TOLERANCE = "SNAPMATCH_TOLERANCE"
ENV_FAILURE_DIR = "SNAPMATCH_FAILURE_DIR"


class DeviceProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str = Field(default_factory=lambda: platform.machine() or "unknown")
    os_name: str = Field(default_factory=lambda: platform.system() or "unknown")
    os_version: str = Field(default_factory=lambda: platform.release() or "0")
    scale: float = 1.0
    # Screen (or browser viewport) size in points
    screen_width: int = 1280
    screen_height: int = 720


class SnapshotConfig(BaseModel):
    """Run configuration read by every snapshot check.

    Instances are immutable; the mode controller swaps in updated copies.
    """

    model_config = ConfigDict(frozen=True)

    # None means "infer from the test file's path"
    reference_images_directory: Optional[Path] = None
    tolerance: float = Field(default=0.0, ge=0.0, le=1.0)
    record_mode: bool = False
    folder_suffixes: tuple[str, ...] = DEFAULT_FOLDER_SUFFIXES

    # Where reference/failed/diff images go when a check fails
    failure_directory: Optional[Path] = None

    device: DeviceProfile = Field(default_factory=DeviceProfile)

    @field_validator("reference_images_directory", "failure_directory", mode="before")
    @classmethod
    def resolve_env_path(cls, v):
        if isinstance(v, str) and v.startswith("env:"):
            env_var = v[4:]
            resolved = os.environ.get(env_var)
            if resolved is None:
                raise ValueError(f"Environment variable '{env_var}' not set")
            return resolved
        return v

    @field_validator("folder_suffixes", mode="before")
    @classmethod
    def lowercase_suffixes(cls, v):
        if isinstance(v, str):
            v = [v]
        suffixes = tuple(s.lower() for s in v)
        if not suffixes:
            raise ValueError("At least one test folder suffix is required")
        return suffixes

    @classmethod
    def load(cls, path: str | Path) -> "SnapshotConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file.

        An auto-detected device is left out so the file stays portable across machines.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        exclude = None if "device" in self.model_fields_set else {"device"}
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json", exclude=exclude), f, indent=2)

    @classmethod
    def from_env(cls, base: "SnapshotConfig | None" = None) -> "SnapshotConfig":
        """Overlay SNAPMATCH_* environment variables onto ``base``."""
        base = base or cls()
        changes: dict = {}
        if os.environ.get(ENV_REFERENCE_DIR):
            changes["reference_images_directory"] = os.environ[ENV_REFERENCE_DIR]
        if os.environ.get(ENV_FAILURE_DIR):
            changes["failure_directory"] = os.environ[ENV_FAILURE_DIR]
        if os.environ.get(ENV_TOLERANCE):
            changes["tolerance"] = float(os.environ[ENV_TOLERANCE])
        if os.environ.get(ENV_RECORD):
            changes["record_mode"] = os.environ[ENV_RECORD].lower() in ("1", "true", "yes")
        if not changes:
            return base
        return cls(**{**base.model_dump(exclude_unset=True), **changes})
