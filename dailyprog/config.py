"""dailyprog run configuration.

A single immutable ``RunConfig`` carries every option for one invocation.  It
is built once by the CLI (or by tests) and passed explicitly to the runner, so
two materializations in one process never observe each other's settings.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .utils import expand_home

DEFAULT_BASE_DIR = "~/dailyprog"
DEFAULT_LANGUAGE = "go"
DEFAULT_TEMPLATE = "basic"
DEFAULT_EDITOR = "code"


class RunConfig(BaseModel):
    """Options for one dailyprog invocation."""

    model_config = ConfigDict(frozen=True)

    base_dir: str = Field(default=DEFAULT_BASE_DIR, description="Parent of new projects; ~ expanded")
    templates_file: Path | None = Field(
        default=None, description="templates.json override; its directory is the override root"
    )
    user_config_file: Path | None = Field(default=None, description="user-config.json override")
    language: str = Field(default=DEFAULT_LANGUAGE)
    template: str = Field(default=DEFAULT_TEMPLATE)
    author: str | None = Field(default=None, description="Overrides the profile author")
    copyright: str | None = Field(default=None, description="Overrides the profile copyright")
    editor: str = Field(default=DEFAULT_EDITOR)
    open_editor: bool = Field(default=True)
    verbose: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def resolved_base_dir(self) -> Path:
        """``base_dir`` with a leading ``~`` expanded."""
        return expand_home(self.base_dir)

    @property
    def override_root(self) -> Path | None:
        """Directory whose ``templates/`` tree overrides the bundled templates."""
        if self.templates_file is None:
            return None
        return self.templates_file.parent

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "RunConfig":
        """Build a ``RunConfig`` from environment variables.

        Recognised variables (all optional):
            DAILYPROG_DIR, DAILYPROG_LANG, DAILYPROG_TEMPLATE,
            DAILYPROG_EDITOR, DAILYPROG_AUTHOR.

        Keyword arguments whose value is not ``None`` take precedence over
        the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DAILYPROG_DIR"):
            kwargs["base_dir"] = os.environ["DAILYPROG_DIR"]
        if os.environ.get("DAILYPROG_LANG"):
            kwargs["language"] = os.environ["DAILYPROG_LANG"]
        if os.environ.get("DAILYPROG_TEMPLATE"):
            kwargs["template"] = os.environ["DAILYPROG_TEMPLATE"]
        if os.environ.get("DAILYPROG_EDITOR"):
            kwargs["editor"] = os.environ["DAILYPROG_EDITOR"]
        if os.environ.get("DAILYPROG_AUTHOR"):
            kwargs["author"] = os.environ["DAILYPROG_AUTHOR"]

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
