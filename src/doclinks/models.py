"""Data models for doclinks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LinkSyntax(Enum):
    """Markup family a link was extracted from."""

    HTML = "html"  # href="..." style attribute
    MARKDOWN = "markdown"  # [label](target)


class LinkKind(Enum):
    """Classification of a cleaned link string."""

    ABSOLUTE = "absolute"  # http:// or https://
    ROOT_RELATIVE = "root_relative"  # /path
    FRAGMENT = "fragment"  # #anchor on the same page
    OTHER = "other"  # relative path, shortcodes, anything else


class Outcome(Enum):
    """Final reachability outcome for a link."""

    WORKING = "working"
    BROKEN = "broken"


class Severity(Enum):
    """Diagnostic severity, mirrors editor problem-panel levels."""

    ERROR = "error"
    INFORMATION = "information"


@dataclass(frozen=True)
class SourceRange:
    """Character offsets of a link inside the document text (end exclusive)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid source range: {self.start}..{self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Position:
    """Zero-based line/character position."""

    line: int
    character: int

    def __str__(self) -> str:
        # Human facing, 1-based like editors and compilers print it
        return f"{self.line + 1}:{self.character + 1}"


@dataclass(frozen=True)
class TextRange:
    """Start/end positions of a link in the document."""

    start: Position
    end: Position


@dataclass(frozen=True)
class LinkOccurrence:
    """A single link string found in a document.

    Every regex match produces one occurrence; identical link strings found
    at different places are separate occurrences.
    """

    raw_text: str
    span: SourceRange
    syntax: LinkSyntax = LinkSyntax.HTML


@dataclass(frozen=True)
class ResolvedTarget:
    """A link occurrence paired with the absolute URL that will be probed."""

    occurrence: LinkOccurrence
    kind: LinkKind
    absolute_url: str


@dataclass(frozen=True)
class Verdict:
    """Outcome of probing one link occurrence."""

    occurrence: LinkOccurrence
    outcome: Outcome
    detail: str
    checked_url: str
    status_code: int | None = None

    @property
    def is_broken(self) -> bool:
        return self.outcome is Outcome.BROKEN

    @property
    def icon(self) -> str:
        return "❌" if self.is_broken else "✅"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON reports."""
        return {
            "link": self.occurrence.raw_text,
            "start": self.occurrence.span.start,
            "end": self.occurrence.span.end,
            "outcome": self.outcome.value,
            "detail": self.detail,
            "checked_url": self.checked_url,
            "status_code": self.status_code,
        }


@dataclass(frozen=True)
class Diagnostic:
    """Structured problem entry for one verdict."""

    severity: Severity
    message: str
    range: TextRange
    source: str = "doclinks"

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "line": self.range.start.line,
            "character": self.range.start.character,
            "end_line": self.range.end.line,
            "end_character": self.range.end.character,
            "source": self.source,
        }


@dataclass(frozen=True)
class RunSummary:
    """Aggregate counts for one check run."""

    total: int
    broken: int
    working: int

    @property
    def header(self) -> str:
        """One-line summary shown after a run."""
        return (
            f"Checked {self.total} URLs, found {self.broken} broken and {self.working} working."
        )

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "broken": self.broken, "working": self.working}
