from collections.abc import Sequence
from typing import Protocol

from scm_blame.models import RawAnnotationRecord


class HistoryAnnotationSource(Protocol):
    def annotate(self, path: str) -> Sequence[RawAnnotationRecord]: ...
