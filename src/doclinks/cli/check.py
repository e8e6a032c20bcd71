"""Link checking commands.

Commands: check, resolve, products
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from doclinks.cli._app import (
    CHECK_COMMANDS,
    INFO_COMMANDS,
    DocumentArg,
    HostOpt,
    OutputFormat,
    ProductsOpt,
    fail,
)
from doclinks.exceptions import DocLinksError

if TYPE_CHECKING:
    from doclinks.env_settings import CheckerEnvSettings

logger = logging.getLogger(__name__)


def _checker_settings(
    concurrency: int | None = None,
    timeout: float | None = None,
    host: str | None = None,
    products: Path | None = None,
) -> CheckerEnvSettings:
    """Environment settings with CLI overrides applied."""
    from pydantic import ValidationError

    from doclinks.env_settings import CheckerEnvSettings, get_env_settings

    overrides = {
        "concurrency": concurrency,
        "timeout": timeout,
        "doc_host": host,
        "product_map": products,
    }
    try:
        values = get_env_settings().checker.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CheckerEnvSettings.model_validate(values)
    except ValidationError as e:
        raise fail(e) from None


def register_check_commands(app: typer.Typer) -> None:
    """Register link checking commands on the main app."""

    @app.command("check", rich_help_panel=CHECK_COMMANDS)
    def check_command(
        document: DocumentArg,
        concurrency: Annotated[
            int | None,
            typer.Option(
                "--concurrency",
                "-n",
                min=1,
                help="Max simultaneous probes (default: DOCLINKS_CONCURRENCY or 50).",
            ),
        ] = None,
        timeout: Annotated[
            float | None,
            typer.Option(
                "--timeout",
                "-t",
                min=0.1,
                help="Per-request timeout in seconds (default: DOCLINKS_TIMEOUT or 30).",
            ),
        ] = None,
        products: ProductsOpt = None,
        host: HostOpt = None,
        output_format: Annotated[
            OutputFormat,
            typer.Option("--format", "-f", help="Output format."),
        ] = OutputFormat.table,
        broken_only: Annotated[
            bool,
            typer.Option("--broken-only", "-b", help="Only list broken links."),
        ] = False,
    ) -> None:
        """🔗 Check every link in a document.

        Links come from HTML attributes ([cyan]href, src, ...[/]) and Markdown
        [cyan]\\[label](target)[/] syntax. Relative links are expanded against
        the document's published base URL.

        [bold]Examples:[/]
          doclinks check content/en/install.md
          doclinks check page.md --broken-only
          doclinks check page.md -n 10 -t 5 -f json
        """
        from doclinks.checker import LinkChecker
        from doclinks.extractor import extract_links
        from doclinks.products import load_product_mapping
        from doclinks.reporter import LineIndex
        from doclinks.ui import (
            console,
            print_info,
            print_results_list,
            print_summary,
            print_verdict_table,
            probe_progress,
        )

        settings = _checker_settings(concurrency, timeout, host, products)
        try:
            mapping = load_product_mapping(settings.product_map)
            text = document.read_text(encoding="utf-8")
        except DocLinksError as e:
            raise fail(e) from None
        except (OSError, UnicodeDecodeError) as e:
            raise fail(DocLinksError(f"Cannot read document: {e}")) from None

        checker = LinkChecker.from_settings(settings, mapping)
        show_progress = output_format is not OutputFormat.json

        try:
            total = len(extract_links(text))
            with probe_progress(total=total, enabled=show_progress) as on_verdict:
                report = asyncio.run(checker.check(document, text=text, on_verdict=on_verdict))
        except DocLinksError as e:
            logger.debug("Check aborted: %r", e.details)
            raise fail(e) from None

        if output_format is OutputFormat.json:
            typer.echo(json.dumps(report.to_dict(), indent=2))
        elif output_format is OutputFormat.simple:
            verdicts = report.broken if broken_only else report.verdicts
            print_results_list(verdicts, LineIndex(text))
            print_summary(report.summary)
        else:
            print_info(f"Base URL: {report.base_url}")
            console.print()
            print_verdict_table(report, show_working=not broken_only)
            print_summary(report.summary)

        raise typer.Exit(1 if report.summary.broken else 0)

    @app.command("resolve", rich_help_panel=INFO_COMMANDS)
    def resolve_command(
        document: DocumentArg,
        products: ProductsOpt = None,
        host: HostOpt = None,
    ) -> None:
        """🧭 Show how a document's base URL is derived, without probing links.

        [bold]Examples:[/]
          doclinks resolve content/en/install.md
        """
        from doclinks.checker import LinkChecker
        from doclinks.products import load_product_mapping
        from doclinks.ui import print_resolution

        settings = _checker_settings(host=host, products=products)
        try:
            mapping = load_product_mapping(settings.product_map)
            resolution = asyncio.run(
                LinkChecker.from_settings(settings, mapping).resolve(document)
            )
        except DocLinksError as e:
            raise fail(e) from None

        print_resolution(resolution)

    @app.command("products", rich_help_panel=INFO_COMMANDS)
    def products_command(products: ProductsOpt = None) -> None:
        """📚 List the product folder mapping.

        [bold]Examples:[/]
          doclinks products
          doclinks products --products my-products.yaml
        """
        from doclinks.products import load_product_mapping
        from doclinks.ui import print_product_table

        settings = _checker_settings(products=products)
        try:
            mapping = load_product_mapping(settings.product_map)
        except DocLinksError as e:
            raise fail(e) from None

        print_product_table(mapping, title=f"Products ({mapping.source})")
