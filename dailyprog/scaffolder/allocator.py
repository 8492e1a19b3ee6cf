"""Versioned project directory allocation."""

from __future__ import annotations

import os
from pathlib import Path

from ..errors import AllocationExhausted

MAX_VERSIONS = 1000


def _exists(path: Path) -> bool:
    # lexists so a dangling symlink still counts as taken
    return os.path.lexists(path)


def allocate(desired: str | Path, max_versions: int = MAX_VERSIONS) -> Path:
    """Return the first non-existing path among ``desired``, ``desired-1``, ...

    The allocator only probes; it never creates the returned directory.

    Raises:
        AllocationExhausted: If ``desired`` and the first *max_versions*
            suffixed siblings all exist.
    """
    desired = Path(desired)
    if not _exists(desired):
        return desired

    for version in range(1, max_versions + 1):
        candidate = desired.with_name(f"{desired.name}-{version}")
        if not _exists(candidate):
            return candidate

    raise AllocationExhausted(desired, max_versions)
