"""Product folder to documentation product mapping.

The mapping is loaded once (bundled ``data/products.yaml`` or a user file)
into a read-only table and handed to the resolver explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType

import yaml

from doclinks.exceptions import ConfigurationError, UnknownProductError

logger = logging.getLogger(__name__)

BUNDLED_PRODUCTS = "products.yaml"


class ProductMapping(Mapping[str, str]):
    """Immutable folder-token -> product identifier table.

    Example:
        >>> products = ProductMapping({"geneos": "docs/geneos/current"})
        >>> products.lookup("geneos")
        'docs/geneos/current'
    """

    def __init__(self, entries: Mapping[str, str], *, source: str = "<memory>") -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries))
        self.source = source

    def __getitem__(self, token: str) -> str:
        return self._entries[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ProductMapping({len(self)} products from {self.source})"

    def lookup(self, token: str) -> str:
        """Return the product identifier for a folder token.

        Raises:
            UnknownProductError: If the token is not mapped
        """
        try:
            return self._entries[token]
        except KeyError:
            raise UnknownProductError(
                f"No matching product found for folder: {token}", token=token
            ) from None


def _validate(data: object, source: str) -> dict[str, str]:
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Product map must be a mapping of folder -> product, got {type(data).__name__}",
            config_file=source,
        )

    entries: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(
                f"Product for folder {key!r} must be a non-empty string",
                config_file=source,
                field=str(key),
            )
        entries[str(key)] = value.strip().strip("/")
    return entries


def load_product_mapping(path: Path | str | None = None) -> ProductMapping:
    """Load the product mapping table.

    Args:
        path: YAML file to load; the bundled table is used when None

    Returns:
        Read-only ProductMapping

    Raises:
        ConfigurationError: If the file is missing, unparsable or malformed
    """
    if path is None:
        resource = files("doclinks.data").joinpath(BUNDLED_PRODUCTS)
        source = f"doclinks.data/{BUNDLED_PRODUCTS}"
        try:
            content = resource.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Bundled product map unreadable: {e}", config_file=source
            ) from e
    else:
        source = str(path)
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read product map: {e}", config_file=source) from e

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in product map: {e}", config_file=source) from e

    mapping = ProductMapping(_validate(data, source), source=source)
    logger.debug("Loaded %s", mapping)
    return mapping
