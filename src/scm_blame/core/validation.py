from collections.abc import Sized
from enum import Enum


class LineCountVerdict(Enum):
    TRUSTED = "trusted"
    UNTRUSTED = "untrusted"


def validate_line_count(expected_line_count: int, records: Sized) -> LineCountVerdict:
    """Trust history annotations only when they cover every current line.

    A mismatch means the working copy diverged from the last commit (or the
    file is empty), so positional alignment no longer holds.
    """
    if expected_line_count > 0 and len(records) == expected_line_count:
        return LineCountVerdict.TRUSTED
    return LineCountVerdict.UNTRUSTED
