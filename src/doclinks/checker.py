"""Check run orchestration.

One run covers one document:

    detect kind -> clear old diagnostics -> extract links -> find config
    -> resolve base URL -> classify links -> probe -> publish diagnostics

Anything that fails before probing aborts the run with a DocLinksError;
once probing starts every link gets a verdict.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from doclinks import __version__
from doclinks.config_locator import find_config_file
from doclinks.exceptions import ConfigNotFoundError, SetupError, UnsupportedDocumentError
from doclinks.extractor import extract_links
from doclinks.models import Diagnostic, ResolvedTarget, RunSummary, Verdict
from doclinks.prober import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT, LinkProber
from doclinks.reporter import DiagnosticStore, build_diagnostics, summarize
from doclinks.resolver import DEFAULT_DOC_HOST, BaseUrlResolver, Resolution, VersionChecker
from doclinks.urls import resolve_target

if TYPE_CHECKING:
    from doclinks.env_settings import CheckerEnvSettings
    from doclinks.products import ProductMapping

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """Document types a check can run on."""

    html = "html"
    markdown = "markdown"


DOCUMENT_SUFFIXES: dict[str, DocumentKind] = {
    ".md": DocumentKind.markdown,
    ".markdown": DocumentKind.markdown,
    ".html": DocumentKind.html,
    ".htm": DocumentKind.html,
}


def detect_document_kind(path: Path | str) -> DocumentKind:
    """Return the document kind from the file extension.

    Raises:
        UnsupportedDocumentError: For anything but HTML and Markdown
    """
    suffix = Path(path).suffix.lower()
    try:
        return DOCUMENT_SUFFIXES[suffix]
    except KeyError:
        raise UnsupportedDocumentError(
            "This tool only works with HTML and Markdown files.",
            document=path,
            suffix=suffix,
        ) from None


@contextmanager
def _timed(label: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s took %.1f ms", label, (time.perf_counter() - started) * 1000)


@dataclass
class CheckReport:
    """Everything produced by one check run."""

    document: Path
    kind: DocumentKind
    resolution: Resolution
    targets: list[ResolvedTarget] = field(default_factory=list)
    verdicts: list[Verdict] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def base_url(self) -> str:
        return self.resolution.base_url

    @property
    def summary(self) -> RunSummary:
        return summarize(self.verdicts)

    @property
    def working(self) -> list[Verdict]:
        return [v for v in self.verdicts if not v.is_broken]

    @property
    def broken(self) -> list[Verdict]:
        return [v for v in self.verdicts if v.is_broken]

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "document": str(self.document),
            "kind": self.kind.value,
            "base_url": self.base_url,
            "summary": self.summary.to_dict(),
            "verdicts": [v.to_dict() for v in self.verdicts],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class LinkChecker:
    """Runs link checks for documents of one documentation tree.

    Example:
        >>> checker = LinkChecker(load_product_mapping())
        >>> report = await checker.check(Path("site/geneos/content/en/page.md"))
        >>> print(report.summary.header)
        Checked 12 URLs, found 1 broken and 11 working.
    """

    def __init__(
        self,
        products: ProductMapping,
        *,
        store: DiagnosticStore | None = None,
        client: httpx.AsyncClient | None = None,
        host: str = DEFAULT_DOC_HOST,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ) -> None:
        self.products = products
        self.store = store if store is not None else DiagnosticStore()
        self.host = host
        self.concurrency = concurrency
        self.timeout = timeout
        self.user_agent = user_agent or f"doclinks/{__version__}"
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: CheckerEnvSettings,
        products: ProductMapping,
        store: DiagnosticStore | None = None,
    ) -> LinkChecker:
        """Create a checker from CheckerEnvSettings."""
        return cls(
            products,
            store=store,
            host=settings.doc_host,
            concurrency=settings.concurrency,
            timeout=settings.timeout,
            user_agent=settings.user_agent,
        )

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a fresh one closed afterwards."""
        if self._client is not None:
            yield self._client
            return

        limits = httpx.Limits(max_connections=self.concurrency)
        async with httpx.AsyncClient(
            timeout=self.timeout,
            limits=limits,
            headers={"User-Agent": self.user_agent},
        ) as client:
            yield client

    def _locate_config(self, document: Path) -> Path:
        with _timed("Find config file"):
            config_file = find_config_file(document)
        if config_file is None:
            raise ConfigNotFoundError("Config file not found.", document=document)
        return config_file

    async def resolve(self, path: Path | str) -> Resolution:
        """Resolve a document's base URL without probing any link."""
        document = Path(path).absolute()
        detect_document_kind(document)
        config_file = self._locate_config(document)
        async with self._session() as client:
            resolver = BaseUrlResolver(self.products, VersionChecker(client, self.host), self.host)
            return await resolver.resolve_details(config_file, document)

    async def check(
        self,
        path: Path | str,
        text: str | None = None,
        on_verdict: Callable[[Verdict], None] | None = None,
    ) -> CheckReport:
        """Check every link of a document.

        Args:
            path: Document path; used for config lookup and as store key
            text: Document text; read from ``path`` when None
            on_verdict: Called as each link verdict completes

        Returns:
            CheckReport with one verdict per extracted link

        Raises:
            UnsupportedDocumentError: Not an HTML/Markdown document
            SetupError: Document unreadable
            ConfigNotFoundError: No config/config.toml above the document
            ResolutionError: Product folder missing or unmapped
            ConfigurationError: Build config unreadable
        """
        document = Path(path).absolute()
        kind = detect_document_kind(document)
        key = str(document)
        self.store.clear(key)

        if text is None:
            try:
                text = document.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise SetupError(f"Cannot read document: {e}", document=document) from e

        occurrences = extract_links(text)
        config_file = self._locate_config(document)

        async with self._session() as client:
            resolver = BaseUrlResolver(self.products, VersionChecker(client, self.host), self.host)
            with _timed("Resolve base URL"):
                resolution = await resolver.resolve_details(config_file, document)
            logger.info("Base URL for %s: %s", document.name, resolution.base_url)

            targets = [
                resolve_target(o, resolution.base_url, resolution.location.same_page_path)
                for o in occurrences
            ]
            prober = LinkProber(client, concurrency=self.concurrency)
            with _timed(f"Test {len(targets)} URLs"):
                results = await prober.probe_all(targets, on_verdict=on_verdict)

        diagnostics = build_diagnostics(results.verdicts, text)
        self.store.publish(key, diagnostics)

        report = CheckReport(
            document=document,
            kind=kind,
            resolution=resolution,
            targets=targets,
            verdicts=results.verdicts,
            diagnostics=diagnostics,
        )
        logger.info(report.summary.header)
        return report


def check_document(
    path: Path | str,
    products: ProductMapping,
    *,
    settings: CheckerEnvSettings | None = None,
    store: DiagnosticStore | None = None,
    on_verdict: Callable[[Verdict], None] | None = None,
) -> CheckReport:
    """Synchronous wrapper around LinkChecker.check()."""
    if settings is not None:
        checker = LinkChecker.from_settings(settings, products, store=store)
    else:
        checker = LinkChecker(products, store=store)
    return asyncio.run(checker.check(path, on_verdict=on_verdict))
