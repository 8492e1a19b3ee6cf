"""Project materialization.

Takes a ``Catalog`` entry and produces one concrete project directory:

1. allocate a collision-free ``<base>/<YYYYMMDD>-<name>[-<n>]`` directory,
2. render and write every template file in declared order,
3. run the post-create steps in declared order with the project as ``cwd``.

Failures are fail-fast with no rollback: files already written stay on disk.
Opening the result in an editor is left to the caller (see
``dailyprog.pipeline``).
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, Sequence

from pydantic import BaseModel, Field

from ..errors import RenderError, StepFailure
from ..utils import ensure_dir, print_verbose, print_warning, run_command, write_text
from .allocator import MAX_VERSIONS, allocate
from .catalog import Catalog, ExecStep, RemoveStep, TemplateDef, UserProfile
from .resources import ResourceResolver
from .templates import RenderContext, TemplateRenderer

DEFAULT_NAME_PREFIX = "dailyprog"

CommandRunner = Callable[[Sequence[str], Path], int]


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class MaterializeResult(BaseModel):
    """Outcome of a successful materialization."""

    project_dir: Path
    project_name: str
    language: str = Field(..., description="Display name of the language")
    template: str = Field(..., description="Display name of the template")
    entry_file: Path | None = None
    written_files: list[Path] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def default_project_name(today: date) -> str:
    """Name used when the caller gives no project name."""
    return f"{DEFAULT_NAME_PREFIX}-{today:%Y%m%d}"


def desired_project_dir(base_dir: Path, project_name: str | None, today: date) -> Path:
    """``<base>/<YYYYMMDD>-<name>``, or ``<base>/dailyprog-<YYYYMMDD>`` without a name."""
    if project_name:
        return base_dir / f"{today:%Y%m%d}-{project_name}"
    return base_dir / default_project_name(today)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materializes templates from a catalog.

    Args:
        catalog: Loaded language/template catalog.
        profile: Author details for template substitution.
        resolver: Source of template file bodies.
        renderer: Template renderer; a default one is created if omitted.
        runner: Executes ``exec`` steps and returns the exit status.  Defaults
            to :func:`dailyprog.utils.run_command`.
        verbose: Print every created file and executed command.
        max_versions: Upper bound for the directory suffix search.
    """

    def __init__(
        self,
        catalog: Catalog,
        profile: UserProfile,
        resolver: ResourceResolver,
        renderer: TemplateRenderer | None = None,
        runner: CommandRunner | None = None,
        verbose: bool = False,
        max_versions: int = MAX_VERSIONS,
    ) -> None:
        self.catalog = catalog
        self.profile = profile
        self.resolver = resolver
        self.renderer = renderer or TemplateRenderer()
        self.runner: CommandRunner = runner or run_command
        self.verbose = verbose
        self.max_versions = max_versions

    # -- Public API --------------------------------------------------------

    def materialize(
        self,
        language: str,
        template: str,
        project_name: str | None,
        base_dir: str | Path,
        today: date | None = None,
    ) -> MaterializeResult:
        """Create one project directory from ``catalog[language][template]``.

        Args:
            language: Language key.
            template: Template key under *language*.
            project_name: Name of the project; ``None`` or ``""`` selects the
                date-based default name.
            base_dir: Parent directory for the new project.
            today: Date to use instead of reading the clock.

        Returns:
            A ``MaterializeResult`` describing what was created.

        Raises:
            NotFoundError: Unknown language/template or missing template file.
            AllocationExhausted: No free directory suffix.
            RenderError: A template file or command token failed to render.
            StepFailure: An ``exec`` step failed.
            OSError: Writing to disk failed.
        """
        lang, tmpl = self.catalog.get_template(language, template)
        today = today or date.today()

        name = project_name or default_project_name(today)
        desired = desired_project_dir(Path(base_dir), project_name, today)
        project_dir = allocate(desired, self.max_versions)
        ensure_dir(project_dir)
        print_verbose(f"Created directory: {project_dir}", self.verbose)

        context = RenderContext.build(name, self.profile, today)
        result = MaterializeResult(
            project_dir=project_dir,
            project_name=name,
            language=lang.name,
            template=tmpl.name,
        )

        self._write_files(tmpl, project_dir, context, result)
        self._run_steps(tmpl, project_dir, context, result)

        if tmpl.entry_file is not None:
            result.entry_file = project_dir / tmpl.entry_file
        return result

    # -- Files -------------------------------------------------------------

    def _write_files(
        self,
        tmpl: TemplateDef,
        project_dir: Path,
        context: RenderContext,
        result: MaterializeResult,
    ) -> None:
        """Render and write every file in declared order, stopping at the first error."""
        for spec in tmpl.files:
            try:
                text = self.resolver.resolve_template(spec.source)
            except UnicodeDecodeError as exc:
                raise RenderError(spec.source, f"not valid UTF-8 text: {exc}") from exc
            rendered = self.renderer.render(text, context, source=spec.source)
            dest = write_text(project_dir / spec.dest, rendered)
            result.written_files.append(dest)
            print_verbose(f"Created: {dest}", self.verbose)

    # -- Post-create steps -------------------------------------------------

    def _run_steps(
        self,
        tmpl: TemplateDef,
        project_dir: Path,
        context: RenderContext,
        result: MaterializeResult,
    ) -> None:
        for step in tmpl.post_create_steps:
            if isinstance(step, RemoveStep):
                warning = self._remove(project_dir / step.path)
                if warning:
                    result.warnings.append(warning)
            elif isinstance(step, ExecStep):
                self._exec(step, project_dir, context)

    def _remove(self, target: Path) -> str | None:
        """Delete *target*; return a warning message instead of raising."""
        try:
            if target.is_dir() and not target.is_symlink():
                target.rmdir()
            else:
                target.unlink()
        except FileNotFoundError:
            return None
        except OSError as exc:
            message = f"couldn't remove {target}: {exc}"
            print_warning(message)
            return message
        print_verbose(f"Removed: {target}", self.verbose)
        return None

    def _exec(self, step: ExecStep, project_dir: Path, context: RenderContext) -> None:
        argv = self.renderer.render_args(step.command, context)
        if not argv or not argv[0]:
            raise StepFailure(argv, None, "empty executable name after rendering")

        print_verbose(f"Executing: {' '.join(argv)}", self.verbose)
        try:
            returncode = self.runner(argv, project_dir)
        except OSError as exc:
            raise StepFailure(argv, None, str(exc)) from exc
        if returncode != 0:
            raise StepFailure(argv, returncode)
