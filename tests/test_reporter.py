"""Tests for diagnostics, summaries and the diagnostic store."""

from __future__ import annotations

import pytest

from doclinks.models import Outcome, Position, Severity, SourceRange, TextRange, Verdict
from doclinks.reporter import (
    DiagnosticStore,
    LineIndex,
    build_diagnostic,
    build_diagnostics,
    summarize,
)
from tests.conftest import make_occurrence


def make_verdict(raw: str, start: int, outcome: Outcome, detail: str = "Working") -> Verdict:
    return Verdict(
        occurrence=make_occurrence(raw, start),
        outcome=outcome,
        detail=detail,
        checked_url=f"https://docs.example.com{raw}",
    )


class TestLineIndex:
    """Tests for LineIndex."""

    def test_first_line(self) -> None:
        """Test offsets on the first line."""
        index = LineIndex("abc\ndef")
        assert index.position(0) == Position(0, 0)
        assert index.position(2) == Position(0, 2)

    def test_later_lines(self) -> None:
        """Test offsets after newlines."""
        index = LineIndex("abc\ndef\n\nxyz")
        assert index.position(4) == Position(1, 0)
        assert index.position(8) == Position(2, 0)
        assert index.position(11) == Position(3, 2)

    def test_newline_belongs_to_its_line(self) -> None:
        """Test the newline character is the last column of its line."""
        assert LineIndex("abc\ndef").position(3) == Position(0, 3)

    def test_end_of_text(self) -> None:
        """Test the offset just past the end is valid."""
        assert LineIndex("ab").position(2) == Position(0, 2)

    def test_out_of_range(self) -> None:
        """Test offsets outside the text are rejected."""
        with pytest.raises(ValueError, match="outside text"):
            LineIndex("ab").position(3)

    def test_range(self) -> None:
        """Test a span converts to a start/end range."""
        text_range = LineIndex("x\n[a](/b)").range(SourceRange(6, 8))
        assert text_range == TextRange(Position(1, 4), Position(1, 6))


class TestBuildDiagnostic:
    """Tests for build_diagnostic()/build_diagnostics()."""

    def test_broken_is_error(self) -> None:
        """Test broken verdicts become errors with URL and detail."""
        verdict = make_verdict("/gone", 0, Outcome.BROKEN, "404 Forbidden/Not Found")
        diagnostic = build_diagnostic(verdict, LineIndex("/gone"))

        assert diagnostic.severity is Severity.ERROR
        assert diagnostic.message == "https://docs.example.com/gone - 404 Forbidden/Not Found"
        assert diagnostic.source == "doclinks"

    def test_working_is_information(self) -> None:
        """Test working verdicts are informational."""
        diagnostic = build_diagnostic(make_verdict("/ok", 0, Outcome.WORKING), LineIndex("/ok"))
        assert diagnostic.severity is Severity.INFORMATION
        assert diagnostic.message.endswith(" - Working")

    def test_range_covers_link(self) -> None:
        """Test the diagnostic range is the link's own span."""
        text = "intro\n[a](/x) and [b](/y)"
        verdicts = [
            make_verdict("/x", text.index("/x"), Outcome.WORKING),
            make_verdict("/y", text.index("/y"), Outcome.BROKEN, "500 Error"),
        ]

        diagnostics = build_diagnostics(verdicts, text)

        assert [d.range.start for d in diagnostics] == [Position(1, 4), Position(1, 16)]
        assert diagnostics[1].range.end == Position(1, 18)

    def test_duplicate_links_keep_own_ranges(self) -> None:
        """Test the same link twice gets two distinct ranges."""
        text = "[a](/x)\n[a](/x)"
        verdicts = [
            make_verdict("/x", 4, Outcome.WORKING),
            make_verdict("/x", 12, Outcome.WORKING),
        ]

        first, second = build_diagnostics(verdicts, text)

        assert first.range.start.line == 0
        assert second.range.start.line == 1


class TestSummarize:
    """Tests for summarize()."""

    def test_counts(self) -> None:
        """Test totals and the summary header."""
        verdicts = [
            make_verdict("/a", 0, Outcome.WORKING),
            make_verdict("/b", 5, Outcome.BROKEN, "404 Forbidden/Not Found"),
            make_verdict("/c", 10, Outcome.WORKING),
        ]

        summary = summarize(verdicts)

        assert (summary.total, summary.broken, summary.working) == (3, 1, 2)
        assert summary.header == "Checked 3 URLs, found 1 broken and 2 working."

    def test_empty(self) -> None:
        """Test an empty run."""
        assert summarize([]).header == "Checked 0 URLs, found 0 broken and 0 working."


class TestDiagnosticStore:
    """Tests for DiagnosticStore."""

    def _diagnostics(self) -> list:
        return build_diagnostics([make_verdict("/a", 0, Outcome.WORKING)], "/a")

    def test_publish_and_get(self) -> None:
        """Test published diagnostics are returned as a copy."""
        store = DiagnosticStore()
        diagnostics = self._diagnostics()
        store.publish("doc.md", diagnostics)

        got = store.get("doc.md")
        got.clear()

        assert store.get("doc.md") == diagnostics
        assert "doc.md" in store
        assert len(store) == 1

    def test_publish_empty_leaves_nothing(self) -> None:
        """Test an empty publish creates no entry."""
        store = DiagnosticStore()
        store.publish("doc.md", [])
        assert "doc.md" not in store
        assert store.get("doc.md") == []

    def test_later_publish_replaces(self) -> None:
        """Test a second run replaces the first run's entries."""
        store = DiagnosticStore()
        store.publish("doc.md", self._diagnostics() * 2)
        store.publish("doc.md", self._diagnostics())
        assert len(store.get("doc.md")) == 1

    def test_clear_one_key(self) -> None:
        """Test clearing one document leaves others alone."""
        store = DiagnosticStore()
        store.publish("a.md", self._diagnostics())
        store.publish("b.md", self._diagnostics())

        store.clear("a.md")
        store.clear("missing.md")

        assert list(store) == ["b.md"]

    def test_clear_all(self) -> None:
        """Test clearing without a key empties the store."""
        store = DiagnosticStore()
        store.publish("a.md", self._diagnostics())
        store.clear()
        assert len(store) == 0
