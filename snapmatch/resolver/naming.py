"""Snapshot name sanitization."""

from __future__ import annotations

import re
from typing import Optional

from snapmatch.exceptions import MissingExampleError
from snapmatch.models.snapshot import ExampleMetadata, SnapshotIdentity

ROOT_GROUP_PREFIX = "root example group, "

# One match per character, so a run of N disallowed characters yields N underscores
_DISALLOWED = re.compile(r"[^A-Za-z0-9_]")


def sanitize_test_name(name: Optional[str], example: Optional[ExampleMetadata] = None) -> str:
    if name is not None:
        raw = name
    elif example is not None:
        raw = example.name
    else:
        raise MissingExampleError()

    raw = raw.replace(ROOT_GROUP_PREFIX, "")
    return "_".join(_DISALLOWED.split(raw))


def snapshot_identity(name: Optional[str], example: Optional[ExampleMetadata] = None) -> SnapshotIdentity:
    return SnapshotIdentity(sanitized_name=sanitize_test_name(name, example), raw_name=name)
