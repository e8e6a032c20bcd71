"""Simple message printing helpers for doclinks UI."""

from __future__ import annotations

from rich.markup import escape

from doclinks.ui.core import console, err_console


def print_success(message: str) -> None:
    """Print a success message with checkmark.

    Example:
        >>> print_success("All links working")
          ✓ All links working
    """
    console.print(f"  [success]✓[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message with X to stderr.

    Example:
        >>> print_error("Config file not found.")
          ✗ Config file not found.
    """
    err_console.print(f"  [error]✗[/] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"  [warning]![/] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message.

    Example:
        >>> print_info("Base URL: https://docs.itrsgroup.com/docs/geneos/current")
          → Base URL: https://docs.itrsgroup.com/docs/geneos/current
    """
    console.print(f"  [info]→[/] {escape(message)}")
