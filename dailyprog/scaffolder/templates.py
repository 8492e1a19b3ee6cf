"""Jinja2 template rendering for project materialization.

Template files and ``exec`` command tokens are rendered against a fixed set of
fields (see ``RENDER_FIELDS``).  Binding is strict: a template that mentions
any other name fails with ``RenderError`` before anything is rendered, and
``StrictUndefined`` backs that up at render time.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Sequence

from jinja2 import Environment, StrictUndefined, meta
from pydantic import BaseModel, ConfigDict

from ..errors import RenderError
from .catalog import UserProfile

RENDER_FIELDS: frozenset[str] = frozenset(
    {"ProjectName", "Date", "Author", "Copyright", "Email", "Organization"}
)


# ---------------------------------------------------------------------------
# Render context
# ---------------------------------------------------------------------------


class RenderContext(BaseModel):
    """The values substituted into templates for one materialization."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    date: str
    author: str = ""
    copyright: str = ""
    email: str = ""
    organization: str = ""

    @classmethod
    def build(cls, project_name: str, profile: UserProfile, today: date) -> "RenderContext":
        """Fix project name, date (``YYYY-MM-DD``) and profile fields."""
        return cls(
            project_name=project_name,
            date=today.isoformat(),
            author=profile.author,
            copyright=profile.copyright,
            email=profile.email,
            organization=profile.organization,
        )

    def as_mapping(self) -> dict[str, str]:
        """Return the template variables keyed by their placeholder names."""
        return {
            "ProjectName": self.project_name,
            "Date": self.date,
            "Author": self.author,
            "Copyright": self.copyright,
            "Email": self.email,
            "Organization": self.organization,
        }


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template text against a ``RenderContext``.

    Rendering is pure: the same text and context always produce the same
    output, and nothing touches the file system.

    Placeholders use Jinja syntax (``{{ ProjectName }}``).  Go-style dotted
    placeholders such as ``{{.ProjectName}}`` are not accepted and fail with
    ``RenderError``.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter

    def render(self, text: str, context: RenderContext, source: str = "<string>") -> str:
        """Render *text* with *context*.

        Args:
            text: Template source.
            context: Substitution values.
            source: Name used in error messages (e.g. the template path).

        Raises:
            RenderError: On syntax errors, references to unknown fields or any
                failure while evaluating the template.
        """
        try:
            ast = self.env.parse(text)
            unknown = meta.find_undeclared_variables(ast) - RENDER_FIELDS
            if unknown:
                raise RenderError(source, f"undefined field(s): {', '.join(sorted(unknown))}")
            template = self.env.from_string(ast)
            return template.render(**context.as_mapping())
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(source, str(exc)) from exc

    def render_args(self, argv: Sequence[str], context: RenderContext) -> list[str]:
        """Render each command token independently."""
        return [self.render(arg, context, source=f"command argument {arg!r}") for arg in argv]


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _slugify_filter(value: Any) -> str:
    """Convert a string to a filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(value).lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: Any) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", str(value))
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: Any) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", str(value))
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()
