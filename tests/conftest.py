"""Shared pytest fixtures for the dailyprog test suite.

Provides reusable fixtures for:
- A throwaway bundled-resource tree with a small catalog
- Parsed catalog and user profile objects
- A fixed "today" so directory names are predictable
- A resolver / generator wired to the temporary bundle
"""

from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from dailyprog.scaffolder.catalog import Catalog, UserProfile, parse_catalog
from dailyprog.scaffolder.generator import ProjectGenerator
from dailyprog.scaffolder.resources import ResourceResolver


FIXED_DAY = date(2024, 3, 9)


# ---------------------------------------------------------------------------
# Catalog documents
# ---------------------------------------------------------------------------


def make_catalog_doc() -> dict[str, Any]:
    """A catalog with one Go template and a few Python-driven step templates."""
    py = sys.executable
    return {
        "languages": {
            "go": {
                "name": "Go",
                "fileExtension": ".go",
                "templates": {
                    "basic": {
                        "name": "Basic",
                        "description": "Minimal program",
                        "files": [{"source": "go/basic/main.go.tmpl", "dest": "main.go"}],
                        "postCreateSteps": [],
                    },
                    "nested": {
                        "name": "Nested",
                        "description": "Files in subdirectories",
                        "files": [
                            {"source": "go/nested/a.txt", "dest": "a.txt"},
                            {"source": "go/nested/b.txt", "dest": "cmd/tool/b.txt"},
                            {"source": "go/nested/c.txt", "dest": "docs/c.txt"},
                        ],
                    },
                    "broken": {
                        "name": "Broken",
                        "description": "Second file uses an unknown field",
                        "files": [
                            {"source": "go/broken/a.txt", "dest": "a.txt"},
                            {"source": "go/broken/b.txt", "dest": "b.txt"},
                            {"source": "go/broken/c.txt", "dest": "c.txt"},
                        ],
                    },
                },
            },
            "python": {
                "name": "Python",
                "fileExtension": ".py",
                "templates": {
                    "steps": {
                        "name": "Steps",
                        "description": "Exercises post-create steps",
                        "files": [
                            {"source": "python/steps/main.py", "dest": "main.py"},
                            {"source": "python/steps/scratch.txt", "dest": "scratch.txt"},
                        ],
                        "postCreateSteps": [
                            {"type": "remove", "path": "scratch.txt"},
                            {"type": "remove", "path": "never-existed.txt"},
                            {
                                "type": "exec",
                                "command": [
                                    py,
                                    "-c",
                                    "open('marker.txt', 'w').write('{{ ProjectName }}')",
                                ],
                            },
                        ],
                    },
                    "failing": {
                        "name": "Failing",
                        "description": "A step exits non-zero",
                        "files": [{"source": "python/steps/main.py", "dest": "main.py"}],
                        "postCreateSteps": [
                            {"type": "exec", "command": [py, "-c", "import sys; sys.exit(3)"]},
                            {"type": "exec", "command": [py, "-c", "open('after.txt', 'w')"]},
                        ],
                    },
                    "empty": {
                        "name": "Empty",
                        "description": "No files at all",
                        "files": [],
                    },
                },
            },
        },
    }


TEMPLATE_FILES: dict[str, str] = {
    "go/basic/main.go.tmpl": "package main // {{ ProjectName }}\n",
    "go/nested/a.txt": "A {{ ProjectName }}\n",
    "go/nested/b.txt": "B {{ Author }}\n",
    "go/nested/c.txt": "C {{ Date }}\n",
    "go/broken/a.txt": "first {{ ProjectName }}\n",
    "go/broken/b.txt": "second {{ Nickname }}\n",
    "go/broken/c.txt": "third\n",
    "python/steps/main.py": "# {{ Copyright }}\nprint('{{ ProjectName }}')\n",
    "python/steps/scratch.txt": "temporary\n",
}

PROFILE_DOC: dict[str, str] = {
    "author": "A",
    "copyright": "Copyright (c) 2024 A",
    "email": "a@example.com",
    "organization": "Org",
}


def write_bundle(root: Path, catalog_doc: dict[str, Any] | None = None) -> Path:
    """Write a bundled-resource tree (config, profile, templates) under *root*."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "templates.json").write_text(
        json.dumps(catalog_doc or make_catalog_doc(), indent=2), encoding="utf-8"
    )
    (root / "user-config.json").write_text(json.dumps(PROFILE_DOC), encoding="utf-8")
    for rel, body in TEMPLATE_FILES.items():
        path = root / "templates" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def today() -> date:
    return FIXED_DAY


@pytest.fixture
def catalog_doc() -> dict[str, Any]:
    return make_catalog_doc()


@pytest.fixture
def bundle_dir(tmp_path: Path) -> Path:
    """Temporary stand-in for the package's bundled resources."""
    return write_bundle(tmp_path / "bundle")


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Empty parent directory for generated projects."""
    path = tmp_path / "projects"
    path.mkdir()
    return path


@pytest.fixture
def catalog(catalog_doc: dict[str, Any]) -> Catalog:
    return parse_catalog(json.dumps(catalog_doc))


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(**PROFILE_DOC)


@pytest.fixture
def resolver(bundle_dir: Path) -> ResourceResolver:
    return ResourceResolver(bundle_root=bundle_dir)


@pytest.fixture
def generator(catalog: Catalog, profile: UserProfile, resolver: ResourceResolver) -> ProjectGenerator:
    return ProjectGenerator(catalog, profile, resolver)


@pytest.fixture
def make_bundle():
    """Factory for extra bundle trees, e.g. with an edited config document."""
    return write_bundle
