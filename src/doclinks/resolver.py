"""Base URL resolution for a documentation source file.

Given a document inside a Hugo site tree and the site's ``config/config.toml``,
work out the published URL under which every relative link of the document
lives:

1. The product folder is the path segment just before ``content/``; the
   product mapping turns it into a product path such as ``docs/geneos/current``.
2. ``publishDir`` in the build config says whether the site is unversioned,
   the Opsview Cloud special case, or a pinned version (``public/x/7_0_1``).
3. For versioned builds the live documentation site is asked whether the
   configured version is the one served at the unversioned URL.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from bs4 import BeautifulSoup

from doclinks.exceptions import (
    ConfigurationError,
    ProductFolderError,
    VersionCheckError,
)
from doclinks.products import ProductMapping

logger = logging.getLogger(__name__)

CONTENT_MARKER = "content"
MARKUP_SUFFIXES: tuple[str, ...] = (".markdown", ".md", ".html", ".htm")

DEFAULT_DOC_HOST = "docs.itrsgroup.com"
OPSVIEW_CLOUD_URL = "https://docs.itrsgroup.com/docs/opsview/cloud"

SPECIAL_PUBLISH_DIR_RE = re.compile(r'publishDir\s*=\s*"public/opsview/cloud"')
PUBLISH_DIR_RE = re.compile(r'publishDir\s*=\s*"public/([^/]+)/([\d_]+)"')
VERSION_RE = re.compile(r"\d+\.\d+\.\d+")

# Keys that mark the default entry in a versions/<product>.json listing
LIVE_MARKER_KEYS: tuple[str, ...] = ("latest", "default", "current")


# =============================================================================
# Path analysis
# =============================================================================


@dataclass(frozen=True)
class ProductLocation:
    """Where a document sits relative to its site's content root."""

    token: str  # folder name just before content/
    same_page_path: str  # e.g. "en/page" for .../content/en/page.md


def _strip_markup_suffix(segment: str) -> str:
    lowered = segment.lower()
    for suffix in MARKUP_SUFFIXES:
        if lowered.endswith(suffix):
            return segment[: -len(suffix)]
    return segment


def extract_product_folder(file_path: Path | str) -> ProductLocation:
    """Derive the product folder token and same-page path from a file path.

    Args:
        file_path: Path of the source document

    Returns:
        ProductLocation for the document

    Raises:
        ProductFolderError: If there is no ``content`` segment, or it is the
            first segment so no product folder precedes it
    """
    path = Path(file_path)
    parts = [p for p in path.parts if p != path.anchor]

    try:
        first = parts.index(CONTENT_MARKER)
    except ValueError:
        raise ProductFolderError(
            f"Could not extract product folder: no '{CONTENT_MARKER}' folder in path",
            file_path=file_path,
        ) from None
    if first == 0:
        raise ProductFolderError(
            f"Could not extract product folder: '{CONTENT_MARKER}' has no parent folder",
            file_path=file_path,
        )

    # Page path is measured from the content root nearest to the file
    last = len(parts) - 1 - parts[::-1].index(CONTENT_MARKER)
    page_parts = parts[last + 1 :]
    if page_parts:
        page_parts[-1] = _strip_markup_suffix(page_parts[-1])

    return ProductLocation(token=parts[first - 1], same_page_path="/".join(page_parts))


# =============================================================================
# Build configuration
# =============================================================================


@dataclass(frozen=True)
class PublishDir:
    """publishDir declaration found in a build config."""

    product: str | None = None
    version_token: str | None = None
    special: bool = False

    @property
    def version(self) -> str | None:
        """Dotted version, ``7_0_1`` -> ``7.0.1``."""
        if self.version_token is None:
            return None
        return self.version_token.replace("_", ".")


def parse_publish_dir(config_text: str) -> PublishDir | None:
    """Scan raw config text for a publishDir declaration.

    Only pattern matching is done; the TOML is never parsed.

    Returns:
        PublishDir(special=True) for the Opsview Cloud build, a versioned
        PublishDir for ``public/<product>/<version>``, or None
    """
    if SPECIAL_PUBLISH_DIR_RE.search(config_text):
        return PublishDir(product="opsview", special=True)

    match = PUBLISH_DIR_RE.search(config_text)
    if match is None:
        return None
    return PublishDir(product=match.group(1), version_token=match.group(2))


def read_build_config(config_path: Path | str) -> str:
    """Read the build configuration as raw text.

    Raises:
        ConfigurationError: If the file cannot be read
    """
    try:
        return Path(config_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Error reading config file: {e}", config_file=config_path
        ) from e


# =============================================================================
# Live version check
# =============================================================================


def _published_versions(entries: Any) -> set[str]:
    """Versions named in a versions/<product>.json listing.

    Entries flagged with one of LIVE_MARKER_KEYS win; without any flag every
    listed version counts.
    """
    if not isinstance(entries, list):
        raise VersionCheckError(f"Version listing is not a list: {type(entries).__name__}")

    listed: list[tuple[str, bool]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        match = VERSION_RE.search(str(entry.get("path", "")))
        if match:
            flagged = any(entry.get(key) is True for key in LIVE_MARKER_KEYS)
            listed.append((match.group(0), flagged))

    flagged_versions = {version for version, flagged in listed if flagged}
    return flagged_versions or {version for version, _ in listed}


class VersionChecker:
    """Asks the documentation site which version of a product is live.

    Two discovery paths are tried in order:

    - the unversioned product URL redirects to a versioned one, whose
      dotted version is the live version
    - the page carries a ``.version-picker`` widget whose ``data-product``
      names a ``versions/<product>.json`` listing to search
    """

    def __init__(self, client: httpx.AsyncClient, host: str = DEFAULT_DOC_HOST) -> None:
        self._client = client
        self.host = host

    def product_url(self, product_name: str) -> str:
        return f"https://{self.host}/{product_name}"

    def versions_url(self, picker_product: str) -> str:
        return f"https://{self.host}/versions/{picker_product}.json"

    async def _get(self, url: str) -> httpx.Response:
        try:
            response = await self._client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise VersionCheckError(
                f"{url} returned {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise VersionCheckError(f"{url}: {e}", url=url) from e
        return response

    @staticmethod
    def version_picker_product(html: str) -> str:
        """Read ``data-product`` from the first ``.version-picker`` element."""
        soup = BeautifulSoup(html, "html.parser")
        picker = soup.select_one(".version-picker")
        product = picker.get("data-product") if picker is not None else None
        if not product or not isinstance(product, str):
            raise VersionCheckError("No version picker with a data-product on page")
        return product

    async def _is_live(self, product_name: str, version: str) -> bool:
        response = await self._get(self.product_url(product_name))

        if response.history:
            redirected = VERSION_RE.search(str(response.url))
            if redirected:
                logger.debug("%s redirects to live version %s", product_name, redirected.group(0))
                return redirected.group(0) == version

        picker = self.version_picker_product(response.text)
        listing = await self._get(self.versions_url(picker))
        try:
            entries = listing.json()
        except ValueError as e:
            raise VersionCheckError(
                f"Invalid version listing JSON: {e}", url=str(listing.url), product=picker
            ) from e

        published = _published_versions(entries)
        logger.debug("Versions listed for %s: %s", picker, sorted(published))
        return version in published

    async def is_live(self, product_name: str, version: str) -> bool:
        """Return True if ``version`` is served at the unversioned product URL.

        Products without a ``current`` alias have a single stream and are
        always live. Any failure during the lookup counts as "not live".
        """
        if "current" not in product_name:
            logger.debug("%s is unversioned, skipping live version check", product_name)
            return True

        try:
            return await self._is_live(product_name, version)
        except VersionCheckError as e:
            logger.warning(
                "Live version check for %s failed, treating %s as pinned: %s",
                product_name,
                version,
                e,
            )
            return False


# =============================================================================
# Base URL
# =============================================================================


@dataclass(frozen=True)
class Resolution:
    """Everything learned while computing a document's base URL."""

    base_url: str
    location: ProductLocation
    product_name: str
    publish_dir: PublishDir | None = None
    is_live: bool | None = None


class BaseUrlResolver:
    """Computes the single base URL for one document.

    Example:
        >>> resolver = BaseUrlResolver(products, VersionChecker(client))
        >>> await resolver.resolve(config_path, doc_path)
        'https://docs.itrsgroup.com/docs/geneos/current'
    """

    def __init__(
        self,
        products: ProductMapping,
        version_checker: VersionChecker,
        host: str = DEFAULT_DOC_HOST,
    ) -> None:
        self.products = products
        self.version_checker = version_checker
        self.host = host

    def unversioned_url(self, product_name: str) -> str:
        return f"https://{self.host}/{product_name}"

    def pinned_url(self, product_name: str, version: str) -> str:
        return f"https://{self.host}/{product_name.replace('current', '')}{version}"

    async def resolve_details(self, config_path: Path | str, file_path: Path | str) -> Resolution:
        """Resolve the base URL and keep the intermediate facts."""
        location = extract_product_folder(file_path)
        product_name = self.products.lookup(location.token)
        publish_dir = parse_publish_dir(read_build_config(config_path))

        if publish_dir is None:
            base_url = self.unversioned_url(product_name)
            logger.debug("No versioned publishDir, using %s", base_url)
            return Resolution(base_url, location, product_name)

        if publish_dir.special:
            return Resolution(OPSVIEW_CLOUD_URL, location, product_name, publish_dir)

        version = publish_dir.version
        assert version is not None
        live = await self.version_checker.is_live(product_name, version)
        base_url = (
            self.unversioned_url(product_name) if live else self.pinned_url(product_name, version)
        )
        logger.debug("Version %s of %s live=%s, base URL %s", version, product_name, live, base_url)
        return Resolution(base_url, location, product_name, publish_dir, live)

    async def resolve(self, config_path: Path | str, file_path: Path | str) -> str:
        """Return the base URL every relative link of the document resolves against.

        Raises:
            ProductFolderError: No product folder before ``content/``
            UnknownProductError: Product folder not mapped
            ConfigurationError: Build config unreadable
        """
        resolution = await self.resolve_details(config_path, file_path)
        return resolution.base_url
