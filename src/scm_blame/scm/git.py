import subprocess
from datetime import UTC, datetime
from pathlib import Path

from scm_blame.config import get_git_executable, get_git_timeout
from scm_blame.core.errors import NotVersionControlledError, PathCaseMismatchError, UnderlyingQueryError
from scm_blame.models import RawAnnotationRecord

_UNCOMMITTED_SHA = "0" * 40


def get_git_repo_root(start_dir: Path) -> Path | None:
    try:
        result = subprocess.run(
            [get_git_executable(), "-C", str(start_dir), "rev-parse", "--show-toplevel"],
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    root = result.stdout.strip()
    if not root:
        return None
    return Path(root)


def _is_sha(value: str) -> bool:
    return len(value) == 40 and all(c in "0123456789abcdef" for c in value)


def parse_blame_porcelain(raw: str) -> list[RawAnnotationRecord]:
    """Parse ``git blame --porcelain`` output into one record per committed line.

    Commit headers are only printed the first time a SHA appears, so they are
    cached per SHA. Lines that are not committed yet carry the all-zero SHA
    and produce no record.
    """
    records: list[RawAnnotationRecord] = []
    headers: dict[str, dict[str, str]] = {}
    current: dict[str, str] | None = None
    sha = ""

    for line in raw.split("\n"):
        if line.startswith("\t"):
            if current is not None and sha != _UNCOMMITTED_SHA:
                records.append(_to_record(sha, current))
            current = None
            continue
        parts = line.split(" ")
        if current is None:
            if len(parts) >= 3 and _is_sha(parts[0]):
                sha = parts[0]
                current = headers.setdefault(sha, {})
            continue
        key, _, value = line.partition(" ")
        current.setdefault(key, value)

    return records


def _to_record(sha: str, header: dict[str, str]) -> RawAnnotationRecord:
    author: str | None = header.get("author")
    if not author:
        mail = header.get("author-mail", "").strip("<>")
        author = mail or None
    committed = header.get("committer-time") or header.get("author-time") or "0"
    return RawAnnotationRecord(
        revision_id=sha,
        commit_timestamp=datetime.fromtimestamp(int(committed), tz=UTC),
        raw_author=author,
    )


class GitAnnotationSource:
    """Annotate files of a local Git working copy.

    Implements the ``HistoryAnnotationSource`` protocol.
    """

    def __init__(self, repo_root: str | Path, timeout: int | None = None) -> None:
        self._repo_root = Path(repo_root).resolve()
        self._timeout = timeout if timeout is not None else get_git_timeout()

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    @classmethod
    def discover(cls, start_dir: str | Path, timeout: int | None = None) -> "GitAnnotationSource":
        root = get_git_repo_root(Path(start_dir))
        if root is None:
            raise NotVersionControlledError(str(start_dir))
        return cls(root, timeout=timeout)

    def annotate(self, path: str) -> list[RawAnnotationRecord]:
        rel_path = self._relative_path(path)
        # Tracked means present in HEAD; staged-only files have no history yet.
        if not self._has_head(path):
            raise NotVersionControlledError(path)
        if rel_path not in self._ls_tree(path, rel_path):
            folded = rel_path.lower()
            matches = [candidate for candidate in self._ls_tree(path) if candidate.lower() == folded]
            if not matches:
                raise NotVersionControlledError(path)
            if rel_path not in matches:
                raise PathCaseMismatchError(path, matches[0])
        output = self._git(path, "blame", "--porcelain", "--", rel_path)
        return parse_blame_porcelain(output)

    def _has_head(self, path: str) -> bool:
        return self._run(path, "rev-parse", "--verify", "-q", "HEAD").returncode == 0

    def _relative_path(self, path: str) -> str:
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = self._repo_root / file_path
        # Only the parent is resolved so a mis-cased file name is kept as given.
        file_path = file_path.parent.resolve() / file_path.name
        try:
            rel_path = file_path.relative_to(self._repo_root)
        except ValueError:
            raise NotVersionControlledError(path) from None
        return rel_path.as_posix()

    def _ls_tree(self, path: str, *names: str) -> list[str]:
        """List files committed in HEAD, limited to *names* when given.

        Names are compared literally in Python, so glob characters in paths
        never act as wildcards.
        """
        output = self._git(path, "ls-tree", "-r", "-z", "--full-name", "--name-only", "HEAD", "--", *names)
        return [name for name in output.split("\0") if name]

    def _git(self, path: str, *args: str) -> str:
        result = self._run(path, *args)
        if result.returncode != 0:
            raise UnderlyingQueryError(path, result.stderr.strip() or f"git {args[0]} exited {result.returncode}")
        return result.stdout

    def _run(self, path: str, *args: str) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                [get_git_executable(), *args],
                cwd=self._repo_root,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            raise UnderlyingQueryError(path, f"git {args[0]} timed out after {self._timeout}s") from None
        except OSError as exc:
            raise UnderlyingQueryError(path, str(exc)) from exc
