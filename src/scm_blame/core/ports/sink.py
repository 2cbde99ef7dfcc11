from collections.abc import Sequence
from typing import Protocol

from scm_blame.models import BlameLine, FileBlameRequest


class BlameOutputSink(Protocol):
    def emit(self, request: FileBlameRequest, lines: Sequence[BlameLine]) -> None: ...
