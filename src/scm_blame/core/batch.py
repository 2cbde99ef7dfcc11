from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from scm_blame.config import get_concurrency
from scm_blame.core.blame import Emit, SkipReason, process
from scm_blame.core.errors import UnderlyingQueryError
from scm_blame.core.ports.history import HistoryAnnotationSource
from scm_blame.core.ports.sink import BlameOutputSink
from scm_blame.models import FileBlameRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlameFailure:
    request: FileBlameRequest
    error: UnderlyingQueryError


@dataclass
class BatchReport:
    emitted: list[FileBlameRequest] = field(default_factory=list)
    skipped: list[tuple[FileBlameRequest, SkipReason]] = field(default_factory=list)
    failed: list[BlameFailure] = field(default_factory=list)


async def run_blame(
    requests: Iterable[FileBlameRequest],
    source: HistoryAnnotationSource,
    sink: BlameOutputSink,
    concurrency: int | None = None,
) -> BatchReport:
    """Blame every request independently, at most *concurrency* at a time.

    A failing file is recorded in the report and never stops the others.
    """
    pending = list(requests)
    limit = max(1, concurrency if concurrency is not None else get_concurrency())
    semaphore = asyncio.Semaphore(limit)
    report = BatchReport()
    logger.info("%d file(s) to blame with concurrency %d", len(pending), limit)

    async def _blame_one(request: FileBlameRequest) -> None:
        async with semaphore:
            try:
                outcome = await asyncio.to_thread(process, request, source, sink)
            except UnderlyingQueryError as exc:
                logger.warning("%s", exc)
                report.failed.append(BlameFailure(request=request, error=exc))
                return
        if isinstance(outcome, Emit):
            report.emitted.append(request)
        else:
            report.skipped.append((request, outcome.reason))

    await asyncio.gather(*(_blame_one(request) for request in pending))
    return report
