"""Resource resolution with a bundled fallback.

Logical resource names are POSIX-style paths such as ``templates.json``,
``user-config.json`` or ``templates/go/basic/main.go``.  They are looked up
in three tiers, first hit wins:

1. an explicit file path supplied by the caller,
2. the user's override tree (the directory holding their ``templates.json``),
3. the read-only resources bundled with the package under ``_builtin/``.

``export_bundled_resources`` writes tier 3 out as a real directory so it can
be edited and then used as tier 2.
"""

from __future__ import annotations

import posixpath
import shutil
from pathlib import Path

from ..errors import NotFoundError
from ..utils import ensure_dir, print_verbose

BUILTIN_DIR = Path(__file__).resolve().parent.parent / "_builtin"

TEMPLATES_CONFIG = "templates.json"
USER_CONFIG = "user-config.json"
TEMPLATES_DIR = "templates"

_SKIP_DIRS = {"__pycache__"}


def _normalize(logical_name: str) -> str | None:
    """Return a clean relative POSIX name, or ``None`` if it escapes its root."""
    name = logical_name.replace("\\", "/")
    if not name or name.startswith("/"):
        return None
    name = posixpath.normpath(name)
    if name in (".", "..") or name.startswith("../"):
        return None
    return name


class ResourceResolver:
    """Resolves logical resource names to bytes.

    Args:
        override_root: Directory mirroring the bundled layout whose files take
            precedence over the bundled ones.  ``None`` disables this tier.
        bundle_root: Root of the bundled resources.  Tests point this at a
            temporary directory.
    """

    def __init__(
        self,
        override_root: str | Path | None = None,
        bundle_root: str | Path = BUILTIN_DIR,
    ) -> None:
        self.override_root = Path(override_root) if override_root else None
        self.bundle_root = Path(bundle_root)

    def resolve(self, logical_name: str, override_path: str | Path | None = None) -> bytes:
        """Return the bytes for *logical_name*.

        Args:
            logical_name: Relative resource name.
            override_path: Explicit file to use verbatim when it exists.

        Raises:
            NotFoundError: If no tier yields a readable file.
        """
        if override_path:
            explicit = Path(override_path)
            if explicit.is_file():
                return explicit.read_bytes()

        name = _normalize(logical_name)
        if name is None:
            raise NotFoundError(logical_name)

        for root in (self.override_root, self.bundle_root):
            if root is None:
                continue
            candidate = root / name
            if candidate.is_file():
                return candidate.read_bytes()

        raise NotFoundError(logical_name)

    def resolve_text(self, logical_name: str, override_path: str | Path | None = None) -> str:
        """Like :meth:`resolve` but decoded as UTF-8."""
        return self.resolve(logical_name, override_path).decode("utf-8")

    def resolve_template(self, source: str) -> str:
        """Resolve a ``FileSpec.source`` relative to the templates root."""
        return self.resolve_text(posixpath.join(TEMPLATES_DIR, source.replace("\\", "/")))


def export_bundled_resources(
    target_dir: str | Path,
    bundle_root: str | Path = BUILTIN_DIR,
    verbose: bool = False,
) -> list[Path]:
    """Copy every bundled resource into *target_dir*, preserving layout.

    Hidden directories (``.vscode``) are included.  Existing files in the
    target are overwritten.

    Returns:
        The written file paths, sorted.
    """
    source_root = Path(bundle_root)
    target_root = ensure_dir(target_dir)
    written: list[Path] = []

    for source in sorted(source_root.rglob("*")):
        rel = source.relative_to(source_root)
        if any(part in _SKIP_DIRS for part in rel.parts):
            continue
        destination = target_root / rel
        if source.is_dir():
            ensure_dir(destination)
            print_verbose(f"Created directory: {destination}", verbose)
            continue
        ensure_dir(destination.parent)
        shutil.copyfile(source, destination)
        written.append(destination)
        print_verbose(f"Created file: {destination}", verbose)

    return written
