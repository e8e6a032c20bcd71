"""Concurrent HTTP reachability probing.

Every resolved link gets one HEAD request. At most ``concurrency`` requests
are in flight at a time: a working set of tasks is admitted until it is
full, then the next link waits for any task to finish. Completion order is
not the input order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import httpx

from doclinks.models import Outcome, ResolvedTarget, Verdict

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 50
DEFAULT_TIMEOUT = 30.0

NOT_FOUND_STATUSES = frozenset({403, 404})


def verdict_for_status(target: ResolvedTarget, status_code: int) -> Verdict:
    """Map an HTTP status to a verdict.

    - 403/404: broken, "<status> Forbidden/Not Found"
    - 2xx: working
    - anything else: broken, "<status> Error"
    """
    if status_code in NOT_FOUND_STATUSES:
        outcome, detail = Outcome.BROKEN, f"{status_code} Forbidden/Not Found"
    elif 200 <= status_code < 300:
        outcome, detail = Outcome.WORKING, "Working"
    else:
        outcome, detail = Outcome.BROKEN, f"{status_code} Error"

    return Verdict(
        occurrence=target.occurrence,
        outcome=outcome,
        detail=detail,
        checked_url=target.absolute_url,
        status_code=status_code,
    )


def verdict_for_error(target: ResolvedTarget, error: Exception) -> Verdict:
    """Map a request failure to a broken verdict.

    The attached response status is preferred; otherwise the transport
    error text is used.
    """
    status_code: int | None = None
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        detail = f"Status: {status_code}"
    else:
        detail = str(error) or type(error).__name__

    return Verdict(
        occurrence=target.occurrence,
        outcome=Outcome.BROKEN,
        detail=detail,
        checked_url=target.absolute_url,
        status_code=status_code,
    )


@dataclass
class ProbeResults:
    """Verdicts of one probing pass, in completion order."""

    verdicts: list[Verdict] = field(default_factory=list)
    working: list[Verdict] = field(default_factory=list)
    broken: list[Verdict] = field(default_factory=list)

    def add(self, verdict: Verdict) -> None:
        self.verdicts.append(verdict)
        if verdict.is_broken:
            self.broken.append(verdict)
        else:
            self.working.append(verdict)


class LinkProber:
    """Probes resolved links with bounded concurrency.

    Example:
        >>> async with httpx.AsyncClient(timeout=30.0) as client:
        ...     prober = LinkProber(client, concurrency=50)
        ...     results = await prober.probe_all(targets)
        >>> len(results.verdicts) == len(targets)
        True
    """

    def __init__(self, client: httpx.AsyncClient, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self._client = client
        self.concurrency = concurrency

    async def probe(self, target: ResolvedTarget) -> Verdict:
        """HEAD one URL; never raises for network or HTTP failures."""
        url = target.absolute_url
        try:
            response = await self._client.head(url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Error checking URL %s: %s", url, e)
            return verdict_for_error(target, e)
        except Exception as e:
            logger.warning("Unexpected error checking URL %s: %s", url, e)
            return verdict_for_error(target, e)

        verdict = verdict_for_status(target, response.status_code)
        logger.debug("%s -> %s", url, verdict.detail)
        return verdict

    async def probe_all(
        self,
        targets: Iterable[ResolvedTarget],
        on_verdict: Callable[[Verdict], None] | None = None,
    ) -> ProbeResults:
        """Probe every target, at most ``concurrency`` at a time.

        Args:
            targets: Links to probe; duplicates are probed independently
            on_verdict: Called once per verdict as it completes

        Returns:
            ProbeResults with exactly one verdict per target
        """
        results = ProbeResults()
        pending: set[asyncio.Task[Verdict]] = set()

        def collect(done: set[asyncio.Task[Verdict]]) -> None:
            for task in done:
                verdict = task.result()
                results.add(verdict)
                if on_verdict is not None:
                    on_verdict(verdict)

        for target in targets:
            if len(pending) >= self.concurrency:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                collect(done)
            pending.add(asyncio.create_task(self.probe(target)))

        if pending:
            done, _ = await asyncio.wait(pending)
            collect(done)

        return results
