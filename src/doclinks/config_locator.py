"""Locate the nearest Hugo build configuration for a document."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path("config") / "config.toml"


def find_config_file(file_path: Path | str) -> Path | None:
    """Walk up from a document to the nearest ``config/config.toml``.

    The walk starts at the document's directory (or at ``file_path`` itself
    when it is a directory) and stops before the filesystem root.

    Args:
        file_path: Absolute path of the source document

    Returns:
        Path to the configuration file, or None if no ancestor has one
    """
    path = Path(file_path).absolute()
    current = path if path.is_dir() else path.parent

    while current != Path(current.anchor):
        candidate = current / CONFIG_RELATIVE_PATH
        if candidate.is_file():
            logger.debug("Found build config: %s", candidate)
            return candidate
        current = current.parent

    logger.debug("No %s found above %s", CONFIG_RELATIVE_PATH, file_path)
    return None
