"""Catalog data model.

The catalog is a JSON document describing languages, their templates, the
files each template copies and the post-create steps it runs afterwards::

    {
      "languages": {
        "go": {
          "name": "Go",
          "fileExtension": ".go",
          "templates": {
            "basic": {
              "name": "Basic",
              "description": "Minimal command-line program",
              "files": [{"source": "go/basic/main.go", "dest": "main.go"}],
              "postCreateSteps": [
                {"type": "exec", "command": ["go", "mod", "init", "{{ ProjectName }}"]}
              ]
            }
          }
        }
      }
    }

All models are frozen Pydantic v2 models: once loaded, a catalog or profile
cannot be mutated.
"""

from __future__ import annotations

import posixpath
from pathlib import PureWindowsPath
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import NotFoundError, ParseError


# ---------------------------------------------------------------------------
# Path validation
# ---------------------------------------------------------------------------


def _project_relative(value: str) -> str:
    """Reject paths that are absolute or climb above the project root."""
    if not value:
        raise ValueError("path must not be empty")
    posix = value.replace("\\", "/")
    if posix.startswith("/") or PureWindowsPath(value).drive:
        raise ValueError(f"path must be relative to the project: {value!r}")
    normalized = posixpath.normpath(posix)
    if normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"path escapes the project directory: {value!r}")
    return value


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)


class FileSpec(_Frozen):
    """A template file and where it lands inside the new project."""

    source: str = Field(..., min_length=1, description="Path relative to the templates root")
    dest: str = Field(..., description="Path relative to the project directory")

    @field_validator("dest")
    @classmethod
    def _dest_is_relative(cls, value: str) -> str:
        return _project_relative(value)


class RemoveStep(_Frozen):
    """Delete a project-relative path; a missing path is not an error."""

    type: Literal["remove"]
    path: str

    @field_validator("path")
    @classmethod
    def _path_is_relative(cls, value: str) -> str:
        return _project_relative(value)


class ExecStep(_Frozen):
    """Run a command inside the project directory.

    Every token of ``command`` is template-rendered before execution.
    """

    type: Literal["exec"]
    command: list[str] = Field(..., min_length=1)


PostStep = Annotated[Union[RemoveStep, ExecStep], Field(discriminator="type")]


class TemplateDef(_Frozen):
    """One project template: ordered files plus ordered post-create steps."""

    name: str
    description: str
    files: list[FileSpec]
    post_create_steps: list[PostStep] = Field(default_factory=list, alias="postCreateSteps")

    @property
    def entry_file(self) -> str | None:
        """Destination of the first file, handed to the editor."""
        return self.files[0].dest if self.files else None


class LanguageEntry(_Frozen):
    """A language and the templates available for it."""

    name: str
    file_extension: str = Field(..., alias="fileExtension")
    templates: dict[str, TemplateDef]


class Catalog(_Frozen):
    """Every language/template definition known to this invocation."""

    languages: dict[str, LanguageEntry]

    def get_language(self, language: str) -> LanguageEntry:
        """Return the entry for *language* or raise ``NotFoundError``."""
        try:
            return self.languages[language]
        except KeyError:
            raise NotFoundError(
                language,
                f"Language '{language}' not found. Use --list to see available languages.",
            ) from None

    def get_template(self, language: str, template: str) -> tuple[LanguageEntry, TemplateDef]:
        """Return ``(language_entry, template_def)`` or raise ``NotFoundError``."""
        lang = self.get_language(language)
        try:
            return lang, lang.templates[template]
        except KeyError:
            raise NotFoundError(
                template,
                f"Template '{template}' not found for language '{language}'. "
                "Use --list to see available templates.",
            ) from None

    def iter_sorted(self) -> list[tuple[str, LanguageEntry, list[tuple[str, TemplateDef]]]]:
        """Languages and their templates in sorted key order, for listing."""
        return [
            (key, lang, sorted(lang.templates.items()))
            for key, lang in sorted(self.languages.items())
        ]


class UserProfile(_Frozen):
    """Author details substituted into templates."""

    author: str = ""
    copyright: str = ""
    email: str = ""
    organization: str = ""

    def with_overrides(
        self, author: str | None = None, copyright: str | None = None
    ) -> "UserProfile":
        """Return a copy with non-empty command-line overrides applied."""
        update: dict[str, str] = {}
        if author:
            update["author"] = author
        if copyright:
            update["copyright"] = copyright
        return self.model_copy(update=update) if update else self

    def with_login_defaults(self, login: str, year: int) -> "UserProfile":
        """Replace the bundled ``Your Name`` placeholders with *login*."""
        if not login:
            return self
        update: dict[str, str] = {}
        if self.author == PLACEHOLDER_NAME:
            update["author"] = login
        if PLACEHOLDER_NAME in self.copyright:
            update["copyright"] = f"Copyright (c) {year} {login}. All rights reserved."
        return self.model_copy(update=update) if update else self


PLACEHOLDER_NAME = "Your Name"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _to_parse_error(exc: ValidationError, document: str) -> ParseError:
    """Convert the first Pydantic error into a ``ParseError`` with its location."""
    first = exc.errors()[0]
    path = ".".join(str(part) for part in first.get("loc", ()))
    return ParseError(f"invalid {document}: {first.get('msg', 'validation error')}", path)


def parse_catalog(data: bytes | str) -> Catalog:
    """Decode a catalog document.

    Raises:
        ParseError: If the document is not valid JSON or does not match the
            catalog structure.  Required fields are never defaulted.
    """
    try:
        return Catalog.model_validate_json(data)
    except ValidationError as exc:
        raise _to_parse_error(exc, "templates config") from exc


def parse_user_profile(data: bytes | str) -> UserProfile:
    """Decode a user profile document; missing fields become ``""``."""
    try:
        return UserProfile.model_validate_json(data)
    except ValidationError as exc:
        raise _to_parse_error(exc, "user config") from exc
