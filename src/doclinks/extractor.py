"""Link extraction from HTML and Markdown source text.

Two independent pattern families are scanned:

- HTML attribute links: ``href="..."``, ``src='...'`` and the other
  link-bearing attributes in ``LINK_ATTRIBUTES``
- Markdown inline links: ``[label](target)``

All HTML matches come first, then all Markdown matches; each family is in
document order. Offsets are captured from the match itself so identical
link strings are located independently.
"""

from __future__ import annotations

import logging
import re
import time

from doclinks.models import LinkOccurrence, LinkSyntax, SourceRange

logger = logging.getLogger(__name__)

LINK_ATTRIBUTES: tuple[str, ...] = (
    "href",
    "src",
    "action",
    "data",
    "poster",
    "cite",
    "profile",
    "background",
    "ping",
    "formaction",
)

HTML_LINK_RE = re.compile(
    r"(?:" + "|".join(LINK_ATTRIBUTES) + r")\s*=\s*[\"']([^\"']+)[\"']",
)
MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def _scan(
    pattern: re.Pattern[str], text: str, group: int, syntax: LinkSyntax
) -> list[LinkOccurrence]:
    return [
        LinkOccurrence(
            raw_text=match.group(group),
            span=SourceRange(match.start(group), match.end(group)),
            syntax=syntax,
        )
        for match in pattern.finditer(text)
    ]


def extract_html_links(text: str) -> list[LinkOccurrence]:
    """Return attribute-value links in document order."""
    return _scan(HTML_LINK_RE, text, 1, LinkSyntax.HTML)


def extract_markdown_links(text: str) -> list[LinkOccurrence]:
    """Return ``[label](target)`` targets in document order."""
    return _scan(MARKDOWN_LINK_RE, text, 2, LinkSyntax.MARKDOWN)


def extract_links(text: str) -> list[LinkOccurrence]:
    """Extract every candidate link from raw markup.

    No filtering happens here: duplicates, ``mailto:`` and anchors are all
    returned and handled downstream.

    Args:
        text: Full document text

    Returns:
        HTML attribute links followed by Markdown inline links

    Example:
        >>> [o.raw_text for o in extract_links('<a href="/x">x</a> [y](#y)')]
        ['/x', '#y']
    """
    started = time.perf_counter()
    links = extract_html_links(text) + extract_markdown_links(text)
    logger.debug(
        "Extracted %d links in %.1f ms",
        len(links),
        (time.perf_counter() - started) * 1000,
    )
    return links
