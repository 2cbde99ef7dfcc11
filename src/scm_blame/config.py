import os

_DEFAULT_CONCURRENCY = 4
_DEFAULT_GIT_TIMEOUT = 30


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def get_concurrency() -> int:
    return _int_from_env("SCM_BLAME_CONCURRENCY", _DEFAULT_CONCURRENCY)


def get_git_timeout() -> int:
    return _int_from_env("SCM_BLAME_GIT_TIMEOUT", _DEFAULT_GIT_TIMEOUT)


def get_git_executable() -> str:
    return os.getenv("SCM_BLAME_GIT", "git")
