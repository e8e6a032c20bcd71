"""Diagnostics and summaries for link verdicts."""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable, Iterator

from doclinks.models import (
    Diagnostic,
    Position,
    RunSummary,
    Severity,
    SourceRange,
    TextRange,
    Verdict,
)

logger = logging.getLogger(__name__)


class LineIndex:
    """Converts character offsets of a text into line/character positions."""

    def __init__(self, text: str) -> None:
        self._line_starts = [0]
        for i, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(i + 1)
        self._length = len(text)

    def position(self, offset: int) -> Position:
        if not 0 <= offset <= self._length:
            raise ValueError(f"Offset {offset} outside text of length {self._length}")
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line=line, character=offset - self._line_starts[line])

    def range(self, span: SourceRange) -> TextRange:
        return TextRange(start=self.position(span.start), end=self.position(span.end))


def build_diagnostic(verdict: Verdict, index: LineIndex) -> Diagnostic:
    """Create the problem entry for a verdict.

    Broken links are errors, working links informational; the message is
    ``"<checked URL> - <detail>"``.
    """
    return Diagnostic(
        severity=Severity.ERROR if verdict.is_broken else Severity.INFORMATION,
        message=f"{verdict.checked_url} - {verdict.detail}",
        range=index.range(verdict.occurrence.span),
    )


def build_diagnostics(verdicts: Iterable[Verdict], text: str) -> list[Diagnostic]:
    index = LineIndex(text)
    return [build_diagnostic(v, index) for v in verdicts]


def summarize(verdicts: Iterable[Verdict]) -> RunSummary:
    total = broken = 0
    for verdict in verdicts:
        total += 1
        if verdict.is_broken:
            broken += 1
    return RunSummary(total=total, broken=broken, working=total - broken)


class DiagnosticStore:
    """Diagnostics published per document.

    Lifecycle of one check run: ``clear(key)`` before starting, accumulate
    diagnostics, ``publish(key, diagnostics)`` at the end. A later run on
    the same document replaces the earlier entries.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[Diagnostic]] = {}

    def clear(self, key: str | None = None) -> None:
        """Drop diagnostics for one document, or for all when key is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def publish(self, key: str, diagnostics: list[Diagnostic]) -> None:
        # An empty run leaves nothing behind
        if not diagnostics:
            return
        self._entries[key] = list(diagnostics)
        logger.debug("Published %d diagnostics for %s", len(diagnostics), key)

    def get(self, key: str) -> list[Diagnostic]:
        return list(self._entries.get(key, []))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
