"""Table and list renderers for check results."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from doclinks.ui.core import console

if TYPE_CHECKING:
    from doclinks.checker import CheckReport
    from doclinks.models import RunSummary, Verdict
    from doclinks.reporter import LineIndex
    from doclinks.resolver import Resolution


def print_verdict_table(
    report: CheckReport,
    show_working: bool = True,
) -> None:
    """Print one row per link, anchored to its line:column.

    Example:
        >>> print_verdict_table(report)
        ┏━━━━━━━┳━━━━┳━━━━━━━━━━━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━━━━━━━━━┓
        ┃ Line  ┃    ┃ URL                       ┃ Detail                  ┃
        ┡━━━━━━━╇━━━━╇━━━━━━━━━━━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━━━━━━━━━┩
        │ 12:9  │ ❌ │ https://docs.../missing   │ 404 Forbidden/Not Found │
        └───────┴────┴───────────────────────────┴─────────────────────────┘
    """
    rows = [
        (diagnostic, verdict)
        for diagnostic, verdict in zip(report.diagnostics, report.verdicts, strict=True)
        if show_working or verdict.is_broken
    ]
    if not rows:
        console.print("[dim]No links to show[/]")
        return

    rows.sort(key=lambda row: (row[0].range.start.line, row[0].range.start.character))

    table = Table(title=report.document.name, show_header=True, header_style="bold")
    table.add_column("Line", style="location", no_wrap=True)
    table.add_column("", justify="center", width=3)
    table.add_column("URL", style="url", overflow="fold")
    table.add_column("Detail")

    for diagnostic, verdict in rows:
        style = "broken" if verdict.is_broken else "working"
        table.add_row(
            str(diagnostic.range.start),
            verdict.icon,
            escape(verdict.checked_url),
            f"[{style}]{escape(verdict.detail)}[/]",
        )

    console.print(table)


def print_results_list(verdicts: Iterable[Verdict], index: LineIndex | None = None) -> None:
    """Print working links then broken links, one per line.

    Example:
        >>> print_results_list(report.verdicts)
        ✅ /docs/install - Working
        ❌ ../missing.md - Broken
    """
    ordered = sorted(verdicts, key=lambda v: v.is_broken)
    for verdict in ordered:
        label = "Broken" if verdict.is_broken else "Working"
        where = ""
        if index is not None:
            where = f"[location]{index.position(verdict.occurrence.span.start)}[/] "
        console.print(f"{where}{verdict.icon} {escape(verdict.occurrence.raw_text)} - {label}")


def print_summary(summary: RunSummary) -> None:
    """Print the one-line run summary."""
    style = "error" if summary.broken else "success"
    console.print(f"[{style}]{summary.header}[/]")


def print_resolution(resolution: Resolution) -> None:
    """Print how a document's base URL was derived."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value")

    table.add_row("Product folder", escape(resolution.location.token))
    table.add_row("Product", escape(resolution.product_name))
    table.add_row("Same-page path", escape(resolution.location.same_page_path) or "-")
    publish_dir = resolution.publish_dir
    if publish_dir is None:
        table.add_row("publishDir", "[dim]unversioned[/]")
    elif publish_dir.special:
        table.add_row("publishDir", "public/opsview/cloud")
    else:
        table.add_row("publishDir", f"public/{publish_dir.product}/{publish_dir.version_token}")
        live = "[success]yes[/]" if resolution.is_live else "[warning]no (pinned)[/]"
        table.add_row(f"Version {publish_dir.version} live", live)
    table.add_row("Base URL", f"[url]{escape(resolution.base_url)}[/]")

    console.print(table)


def print_product_table(products: Mapping[str, str], title: str = "Products") -> None:
    """Print the product mapping table."""
    if not products:
        console.print(f"[dim]No {title.lower()} found[/]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Folder", style="path")
    table.add_column("Product")
    table.add_column("Versioned", justify="center")

    for token in sorted(products):
        product = products[token]
        table.add_row(token, product, "✓" if "current" in product else "-")

    console.print(table)
