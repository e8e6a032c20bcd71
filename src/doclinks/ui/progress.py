"""Progress display for link probing."""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from doclinks.models import Verdict
from doclinks.ui.core import console


@contextmanager
def probe_progress(
    total: int | None = None,
    description: str = "Checking URLs... Please wait.",
    enabled: bool = True,
) -> Generator[Callable[[Verdict], None], None, None]:
    """Context manager yielding an ``on_verdict`` callback that advances a bar.

    The bar is transient and is rendered by Rich on its own refresh thread,
    so probing never waits on it.

    Example:
        >>> with probe_progress() as on_verdict:
        ...     report = await checker.check(path, on_verdict=on_verdict)
    """
    if not enabled:
        yield lambda verdict: None
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with progress:
        task = progress.add_task(f"[cyan]{description}[/]", total=total)
        broken = 0

        def on_verdict(verdict: Verdict) -> None:
            nonlocal broken
            if verdict.is_broken:
                broken += 1
                progress.update(task, description=f"[cyan]{description}[/] [red]{broken} broken[/]")
            progress.advance(task)

        yield on_verdict
