"""dailyprog batch runner and CLI.

Loads the catalog and user profile once, materializes one project per name
(each fully, editor launch included, before the next) and reports the result.

Usage::

    dailyprog myproject
    dailyprog --lang python --template flask mywebapp
    dailyprog --list
    dailyprog --generate-template ./my-templates
    python -m dailyprog.pipeline --templates ./my-templates/templates.json myproject
"""

from __future__ import annotations

import getpass
import subprocess
import sys
import threading
from datetime import date
from pathlib import Path
from typing import Sequence

from . import __version__
from .config import DEFAULT_BASE_DIR, DEFAULT_EDITOR, RunConfig
from .errors import DailyprogError, RenderError, StepFailure
from .scaffolder.catalog import Catalog, UserProfile, parse_catalog, parse_user_profile
from .scaffolder.generator import CommandRunner, MaterializeResult, ProjectGenerator
from .scaffolder.resources import (
    BUILTIN_DIR,
    TEMPLATES_CONFIG,
    USER_CONFIG,
    ResourceResolver,
    export_bundled_resources,
)
from .utils import console, print_error, print_success, print_table, print_verbose, print_warning

# ---------------------------------------------------------------------------
# Editor hand-off
# ---------------------------------------------------------------------------


def editor_command(editor: str, project_dir: Path, entry_file: Path | None) -> list[str]:
    """Build the editor invocation for *project_dir* and optional *entry_file*."""
    argv = [editor]
    if Path(editor).name in ("code", "code.cmd", "code-insiders"):
        argv += ["--disable-workspace-trust", "-n"]
    argv.append(str(project_dir))
    if entry_file is not None:
        argv.append(str(entry_file))
    return argv


def open_in_editor(
    project_dir: Path,
    entry_file: Path | None = None,
    editor: str = DEFAULT_EDITOR,
    verbose: bool = False,
) -> bool:
    """Launch the editor without waiting for it.

    The editor runs in its own session and is reaped by a daemon thread; its
    exit status is never observed.  A launch failure is reported
    as a warning and ``False`` is returned; nothing already created is undone.
    """
    argv = editor_command(editor, project_dir, entry_file)
    print_verbose(f"Opening editor: {' '.join(argv)}", verbose)
    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        print_warning(f"can't open editor {editor!r}: {exc}")
        return False
    # reaped off the main thread
    threading.Thread(target=proc.wait, daemon=True).start()
    return True


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return ""


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


class Runner:
    """Drives one dailyprog invocation.

    Attributes:
        config: Immutable options for this invocation.
        resolver: Resource resolver honouring ``config.templates_file``.
    """

    def __init__(
        self,
        config: RunConfig,
        bundle_root: str | Path = BUILTIN_DIR,
        command_runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.bundle_root = Path(bundle_root)
        self.resolver = ResourceResolver(config.override_root, self.bundle_root)
        self.command_runner = command_runner

    # -- Loading -----------------------------------------------------------

    def load_catalog(self) -> Catalog:
        """Resolve and parse ``templates.json``."""
        return parse_catalog(self.resolver.resolve(TEMPLATES_CONFIG, self.config.templates_file))

    def load_profile(self, today: date | None = None) -> UserProfile:
        """Resolve and parse ``user-config.json`` and apply overrides.

        Without an explicit user config, the bundled ``Your Name``
        placeholders are replaced with the login name.  ``--author`` and
        ``--copyright`` win over both.
        """
        raw = self.resolver.resolve(USER_CONFIG, self.config.user_config_file)
        profile = parse_user_profile(raw)
        if self.config.user_config_file is None:
            year = (today or date.today()).year
            profile = profile.with_login_defaults(_login_name(), year)
        return profile.with_overrides(author=self.config.author, copyright=self.config.copyright)

    # -- Modes -------------------------------------------------------------

    def list_templates(self) -> None:
        """Print every language and template in sorted order."""
        catalog = self.load_catalog()
        rows = [
            (f"{lang.name} ({lang_key})", tmpl_key, tmpl.description)
            for lang_key, lang, templates in catalog.iter_sorted()
            for tmpl_key, tmpl in templates
        ]
        print_table(rows, ["Language", "Template", "Description"], title="Available Languages and Templates")
        console.print("Usage: dailyprog --lang <language> --template <template> [name]")

    def export(self, target: str | Path) -> list[Path]:
        """Write the bundled resources to *target* for customization."""
        print_verbose(f"Generating template directory at: {target}", self.config.verbose)
        written = export_bundled_resources(target, self.bundle_root, verbose=self.config.verbose)
        print_success(f"Template directory successfully generated at: {target}")
        console.print("\nYou can now:")
        console.print(f"  1. Modify the templates in: {target}/templates/")
        console.print(
            f"  2. Edit configuration files: {target}/{TEMPLATES_CONFIG} and {target}/{USER_CONFIG}"
        )
        console.print(
            f"  3. Use them with: dailyprog --templates {target}/{TEMPLATES_CONFIG} "
            f"--user-config {target}/{USER_CONFIG}"
        )
        return written

    def run(self, project_names: Sequence[str] = ()) -> int:
        """Materialize each name in turn; return the process exit code.

        ``RenderError``, ``StepFailure`` and ``OSError`` only fail the project
        they occur in.  Every other ``DailyprogError`` propagates and stops
        the batch.
        """
        catalog = self.load_catalog()
        profile = self.load_profile()
        catalog.get_template(self.config.language, self.config.template)

        generator = ProjectGenerator(
            catalog,
            profile,
            self.resolver,
            runner=self.command_runner,
            verbose=self.config.verbose,
        )

        exit_code = 0
        for name in list(project_names) or [None]:
            try:
                result = generator.materialize(
                    self.config.language,
                    self.config.template,
                    name,
                    self.config.resolved_base_dir,
                )
            except (RenderError, StepFailure, OSError) as exc:
                print_error(f"{name or 'default project'}: {exc}")
                exit_code = 1
                continue
            self._finish(result)
        return exit_code

    def _finish(self, result: MaterializeResult) -> None:
        if self.config.open_editor:
            open_in_editor(
                result.project_dir,
                result.entry_file,
                editor=self.config.editor,
                verbose=self.config.verbose,
            )
        print_success(f"Created {result.language} project in: {result.project_dir}")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser():
    """Return the argparse parser for the ``dailyprog`` command."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="dailyprog",
        description="Quickly scaffold new programming projects with pre-configured templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Projects are organized by date (YYYYMMDD-projectname) in the base directory.\n\n"
            "Examples:\n"
            "  dailyprog myproject\n"
            '  dailyprog --author "Alice Smith" myproject\n'
            "  dailyprog --lang python --template flask mywebapp\n"
            "  dailyprog --list\n"
            "  dailyprog --generate-template ./my-templates\n"
            "  dailyprog --templates ./my-templates/templates.json \\\n"
            "            --user-config ./my-templates/user-config.json myproject\n"
        ),
    )

    parser.add_argument("names", nargs="*", metavar="PROJECT_NAME", help="Project name(s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show what's being done")
    parser.add_argument("-V", "--version", action="store_true", help="Print version and exit")
    parser.add_argument(
        "-d", "--dir",
        default=None,
        help=f"Base directory where new projects are created (default: {DEFAULT_BASE_DIR})",
    )
    parser.add_argument(
        "-t", "--templates",
        default=None,
        help="Path to templates configuration file (uses bundled if not specified)",
    )
    parser.add_argument(
        "-u", "--user-config",
        default=None,
        help="Path to user configuration file (uses bundled if not specified)",
    )
    parser.add_argument("-l", "--lang", default=None, help="Programming language (default: go)")
    parser.add_argument("-T", "--template", default=None, help="Template to use (default: basic)")
    parser.add_argument("--list", action="store_true", help="List available languages and templates")
    parser.add_argument(
        "-g", "--generate-template",
        default=None,
        metavar="DIR",
        help="Export the bundled templates to DIR for customization",
    )
    parser.add_argument("--author", default=None, help="Override author name from user-config")
    parser.add_argument("--copyright", default=None, help="Override copyright from user-config")
    parser.add_argument("--editor", default=None, help=f"Editor command (default: {DEFAULT_EDITOR})")
    parser.add_argument("--no-editor", action="store_true", help="Don't open the new project")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``dailyprog`` and ``python -m dailyprog.pipeline``."""
    args = build_parser().parse_args(argv)

    if args.version:
        console.print(f"dailyprog {__version__}")
        return 0

    config = RunConfig.from_env(
        base_dir=args.dir,
        templates_file=Path(args.templates) if args.templates else None,
        user_config_file=Path(args.user_config) if args.user_config else None,
        language=args.lang,
        template=args.template,
        author=args.author,
        copyright=args.copyright,
        editor=args.editor,
        open_editor=False if args.no_editor else None,
        verbose=args.verbose or None,
    )
    runner = Runner(config)

    try:
        if args.generate_template:
            runner.export(args.generate_template)
            return 0
        if args.list:
            runner.list_templates()
            return 0
        return runner.run(args.names)
    except DailyprogError as exc:
        print_error(str(exc))
        return 1
    except OSError as exc:
        print_error(f"{exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
