"""Exception hierarchy for dailyprog.

Every error raised by the materialization engine derives from
``DailyprogError`` so the CLI can report it uniformly.  The split between
process-fatal and per-project errors is made by the batch runner in
``dailyprog.pipeline``, not here.
"""

from __future__ import annotations

from pathlib import Path


class DailyprogError(Exception):
    """Base class for all dailyprog errors."""


class ParseError(DailyprogError):
    """Raised when a catalog or user profile document is malformed.

    Attributes:
        path: Dotted location of the offending element inside the document
            (e.g. ``languages.go.templates.basic.files.0.dest``).  Empty when
            the document as a whole could not be decoded.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{message}")


class NotFoundError(DailyprogError):
    """Raised for unknown language/template keys and unresolvable resources."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Resource not found: {name}")


class AllocationExhausted(DailyprogError):
    """Raised when no free versioned sibling directory could be found."""

    def __init__(self, desired: Path, tried: int) -> None:
        self.desired = desired
        self.tried = tried
        super().__init__(
            f"All directories {desired} to {desired}-{tried} seem to exist, quitting."
        )


class RenderError(DailyprogError):
    """Raised when a template references an unknown field or fails to parse."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"Can't render template {source}: {message}")


class StepFailure(DailyprogError):
    """Raised when an ``exec`` post-create step fails to launch or exits non-zero."""

    def __init__(self, command: list[str], returncode: int | None, reason: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        detail = reason or f"exit status {returncode}"
        super().__init__(f"Command failed: {' '.join(self.command)}: {detail}")
