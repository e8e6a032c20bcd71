"""doclinks CLI - built with Typer and Rich.

Commands:
- check     Probe every link of one HTML/Markdown document
- resolve   Show the base URL a document's links resolve against
- products  List the product folder mapping
"""

from __future__ import annotations

from doclinks.cli._app import (
    CHECK_COMMANDS,
    INFO_COMMANDS,
    OutputFormat,
    create_main_callback,
    make_app,
)
from doclinks.cli.check import register_check_commands

app = make_app()

# Handles --version, --verbose, --log-file, --env-file
create_main_callback(app)
register_check_commands(app)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = [
    "CHECK_COMMANDS",
    "INFO_COMMANDS",
    "OutputFormat",
    "app",
    "main",
]
