class HistoryAnnotationError(Exception):
    """Base class for errors raised by a history annotation source."""


class NotVersionControlledError(HistoryAnnotationError):
    def __init__(self, path: str) -> None:
        super().__init__(f"{path} is not under version control")
        self.path = path


class PathCaseMismatchError(HistoryAnnotationError):
    def __init__(self, path: str, tracked_path: str) -> None:
        super().__init__(f"{path} is tracked as {tracked_path}")
        self.path = path
        self.tracked_path = tracked_path


class UnderlyingQueryError(HistoryAnnotationError):
    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Blame failed for {path}: {message}")
        self.path = path
        self.message = message
