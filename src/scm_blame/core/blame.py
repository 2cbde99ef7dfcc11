"""Per-file blame assembly: query history, validate, normalize, emit."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from scm_blame.core.authors import normalize_author
from scm_blame.core.errors import NotVersionControlledError, PathCaseMismatchError
from scm_blame.core.ports.history import HistoryAnnotationSource
from scm_blame.core.ports.sink import BlameOutputSink
from scm_blame.core.validation import LineCountVerdict, validate_line_count
from scm_blame.models import BlameLine, FileBlameRequest, RawAnnotationRecord

logger = logging.getLogger(__name__)


class SkipReason(Enum):
    NOT_VERSION_CONTROLLED = "not_version_controlled"
    PATH_CASE_MISMATCH = "path_case_mismatch"
    LINE_COUNT_MISMATCH = "line_count_mismatch"


@dataclass(frozen=True)
class Skip:
    reason: SkipReason


@dataclass(frozen=True)
class Emit:
    lines: tuple[BlameLine, ...]


BlameOutcome = Skip | Emit


def to_blame_line(record: RawAnnotationRecord) -> BlameLine:
    return BlameLine(
        revision_id=record.revision_id,
        commit_timestamp=record.commit_timestamp,
        author=normalize_author(record.raw_author),
    )


def assemble_blame(request: FileBlameRequest, source: HistoryAnnotationSource) -> BlameOutcome:
    """Compute the outcome for one file without emitting it.

    ``UnderlyingQueryError`` raised by *source* propagates; every other
    reason not to attribute the file is returned as a ``Skip``.
    """
    try:
        records = source.annotate(request.path)
    except NotVersionControlledError:
        logger.debug("Skipping %s: not under version control", request.path)
        return Skip(SkipReason.NOT_VERSION_CONTROLLED)
    except PathCaseMismatchError as exc:
        logger.debug("Skipping %s: history only knows %s", request.path, exc.tracked_path)
        return Skip(SkipReason.PATH_CASE_MISMATCH)

    if validate_line_count(request.expected_line_count, records) is LineCountVerdict.UNTRUSTED:
        logger.debug(
            "Skipping %s: %d annotated lines for %d current lines",
            request.path,
            len(records),
            request.expected_line_count,
        )
        return Skip(SkipReason.LINE_COUNT_MISMATCH)

    return Emit(tuple(to_blame_line(record) for record in records))


def process(request: FileBlameRequest, source: HistoryAnnotationSource, sink: BlameOutputSink) -> BlameOutcome:
    """Run the pipeline for one file and emit to *sink* at most once."""
    outcome = assemble_blame(request, source)
    if isinstance(outcome, Emit):
        sink.emit(request, list(outcome.lines))
    return outcome
