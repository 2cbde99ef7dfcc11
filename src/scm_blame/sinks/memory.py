import threading
from collections.abc import Sequence

from scm_blame.models import BlameLine, FileBlameRequest


class InMemoryBlameSink:
    """Collects emitted attributions keyed by request, in emission order.

    Implements the ``BlameOutputSink`` protocol and is safe to share between
    the worker threads of a concurrent batch.
    """

    def __init__(self) -> None:
        self.results: dict[FileBlameRequest, list[BlameLine]] = {}
        self._lock = threading.Lock()

    def emit(self, request: FileBlameRequest, lines: Sequence[BlameLine]) -> None:
        with self._lock:
            if request in self.results:
                raise ValueError(f"Blame already emitted for {request.path}")
            self.results[request] = list(lines)

    def get(self, path: str) -> list[BlameLine] | None:
        with self._lock:
            for request, lines in self.results.items():
                if request.path == path:
                    return lines
        return None
