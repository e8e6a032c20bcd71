"""doclinks terminal UI components.

Usage:
    from doclinks.ui import console, print_error
    from doclinks.ui.tables import print_verdict_table
"""

from __future__ import annotations

from doclinks.ui.core import DOCLINKS_THEME, console, err_console
from doclinks.ui.messages import print_error, print_info, print_success, print_warning
from doclinks.ui.progress import probe_progress
from doclinks.ui.tables import (
    print_product_table,
    print_resolution,
    print_results_list,
    print_summary,
    print_verdict_table,
)

__all__ = [
    # Core
    "DOCLINKS_THEME",
    "console",
    "err_console",
    # Messages
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    # Progress
    "probe_progress",
    # Tables
    "print_product_table",
    "print_resolution",
    "print_results_list",
    "print_summary",
    "print_verdict_table",
]
