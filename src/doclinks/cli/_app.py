"""App configuration, callbacks, and shared types for the CLI.

This module contains the Typer application factory, the main callback,
shared enums, and type aliases used by the CLI commands.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

# =============================================================================
# Help Panel Names
# =============================================================================

CHECK_COMMANDS = "Link Checking"
INFO_COMMANDS = "Information"


# =============================================================================
# Shared Enums
# =============================================================================


class OutputFormat(str, Enum):
    """Check output format options."""

    table = "table"
    simple = "simple"
    json = "json"


# =============================================================================
# Shared Options
# =============================================================================

ProductsOpt = Annotated[
    Path | None,
    typer.Option(
        "--products",
        "-p",
        help="Product map YAML (default: DOCLINKS_PRODUCT_MAP or bundled map).",
        exists=True,
        dir_okay=False,
    ),
]

HostOpt = Annotated[
    str | None,
    typer.Option(
        "--host",
        help="Documentation host (default: DOCLINKS_DOC_HOST or docs.itrsgroup.com).",
    ),
]

DocumentArg = Annotated[
    Path,
    typer.Argument(
        help="HTML or Markdown source file.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
]


# =============================================================================
# Version Callback
# =============================================================================


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from doclinks import __version__
        from doclinks.ui import console

        console.print(f"[bold]doclinks[/] {__version__}")
        raise typer.Exit()


# =============================================================================
# App Factory
# =============================================================================


MAIN_EPILOG = """
[bold cyan]Examples:[/]
  doclinks check content/en/install.md          [dim]# Check every link[/]
  doclinks check page.md --broken-only          [dim]# Only list failures[/]
  doclinks check page.md -f json > report.json  [dim]# Machine readable[/]
  doclinks resolve content/en/install.md        [dim]# Show the base URL[/]

[bold cyan]Tips:[/]
  - The nearest [green]config/config.toml[/] above the file decides the base URL
  - Exit code is 1 when any link is broken, 2 when the check cannot run
"""


def make_app() -> typer.Typer:
    """Create and configure the main Typer application."""
    return typer.Typer(
        name="doclinks",
        help="Check links in HTML/Markdown documentation sources",
        epilog=MAIN_EPILOG,
        rich_markup_mode="rich",
        pretty_exceptions_enable=True,
        pretty_exceptions_show_locals=False,
        no_args_is_help=True,
        add_completion=False,
        context_settings={"help_option_names": ["-h", "--help"]},
    )


# =============================================================================
# Error Exit Helper
# =============================================================================


def fail(error: Exception) -> typer.Exit:
    """Print one error line and return the exit for a run that cannot start."""
    from doclinks.ui import print_error

    print_error(str(error))
    return typer.Exit(2)


# =============================================================================
# Logging Setup Helper
# =============================================================================


def setup_logging(verbose: bool, log_file: Path | None) -> None:
    """Configure logging based on options and LOG_LEVEL."""
    from doclinks.env_settings import get_env_settings
    from doclinks.logging_setup import setup_logging as _setup_logging

    log_level = "DEBUG" if verbose else get_env_settings().app.log_level

    _setup_logging(
        log_level=log_level,
        log_file=log_file,
        rich_console=True,
        quiet_console=not verbose,
        http_debug=verbose,
    )


# =============================================================================
# Main Callback Factory
# =============================================================================


def create_main_callback(app: typer.Typer) -> None:
    """Register the main callback on the app."""

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                "-V",
                callback=version_callback,
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option(
                "--verbose",
                "-v",
                help="Enable verbose (DEBUG) logging.",
            ),
        ] = False,
        log_file: Annotated[
            Path | None,
            typer.Option(
                "--log-file",
                help="Also write DEBUG logs to this file.",
            ),
        ] = None,
        env_file: Annotated[
            Path | None,
            typer.Option(
                "--env-file",
                help="Load DOCLINKS_* settings from a .env file.",
                exists=True,
                dir_okay=False,
            ),
        ] = None,
    ) -> None:
        """Check links in HTML/Markdown documentation sources.

        Every link is resolved against the published documentation site
        and probed over HTTP:
        [cyan]Extract → Resolve base URL → Classify → Probe → Report[/]
        """
        from pydantic import ValidationError

        ctx.ensure_object(dict)
        ctx.obj["verbose"] = verbose
        ctx.obj["log_file"] = log_file

        try:
            if env_file is not None:
                from doclinks.env_settings import load_env_settings_from_file

                load_env_settings_from_file(env_file)
            setup_logging(verbose, log_file)
        except ValidationError as e:
            raise fail(e) from None
