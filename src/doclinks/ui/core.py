"""Core console configuration and theme for doclinks UI.

This module provides the Rich console instances and theme that the other
UI modules build upon.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

# =============================================================================
# Theme Configuration
# =============================================================================

DOCLINKS_THEME = Theme(
    {
        # Status colors
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        # Text styles
        "title": "bold white",
        "dim": "dim",
        "highlight": "bold magenta",
        # Link report styles
        "path": "cyan",
        "url": "blue underline",
        "location": "dim",
        "broken": "red",
        "working": "green",
        "hint": "dim italic",
    }
)

# =============================================================================
# Console Instances
# =============================================================================

# Primary console for normal output
console = Console(theme=DOCLINKS_THEME, stderr=False)

# Error console for stderr output
err_console = Console(theme=DOCLINKS_THEME, stderr=True)
