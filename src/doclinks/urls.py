"""Link cleaning, classification and expansion against a base URL."""

from __future__ import annotations

import re

from doclinks.models import LinkKind, LinkOccurrence, ResolvedTarget

# "<url>" or '<url> "title"'; anything else is left untouched
_TITLED_LINK_RE = re.compile(r'^(\S+)(?:\s+"[^"]*")?$')


def clean_url(url: str) -> str:
    """Drop a trailing quoted link title.

    Example:
        >>> clean_url('/a/b "title"')
        '/a/b'
        >>> clean_url("https://x.com")
        'https://x.com'
    """
    match = _TITLED_LINK_RE.match(url)
    return match.group(1) if match else url


def classify(url: str) -> LinkKind:
    """Classify a cleaned link by its leading characters."""
    if url.startswith(("http://", "https://")):
        return LinkKind.ABSOLUTE
    if url.startswith("/"):
        return LinkKind.ROOT_RELATIVE
    if url.startswith("#"):
        return LinkKind.FRAGMENT
    return LinkKind.OTHER


def expand_url(url: str, kind: LinkKind, base_url: str, same_page_path: str = "") -> str:
    """Build the URL that gets probed for a cleaned link.

    No encoding or validation is applied; the result may be malformed and
    that is reported by the prober.
    """
    if kind is LinkKind.ABSOLUTE:
        return url
    if kind is LinkKind.ROOT_RELATIVE:
        return base_url + url
    if kind is LinkKind.FRAGMENT:
        return f"{base_url}/{same_page_path}/{url}"
    return f"{base_url}/{url}"


def resolve_target(
    occurrence: LinkOccurrence,
    base_url: str,
    same_page_path: str = "",
) -> ResolvedTarget:
    """Clean, classify and expand one link occurrence.

    Args:
        occurrence: Extracted link
        base_url: Base URL of the document
        same_page_path: Document path below the content root, used for
            ``#fragment`` links

    Returns:
        ResolvedTarget with the absolute URL to probe
    """
    cleaned = clean_url(occurrence.raw_text)
    kind = classify(cleaned)
    return ResolvedTarget(
        occurrence=occurrence,
        kind=kind,
        absolute_url=expand_url(cleaned, kind, base_url, same_page_path),
    )
