"""Shared fixtures and helpers for tests."""

import os
import subprocess
from pathlib import Path

import pytest

from scm_blame.sinks import InMemoryBlameSink

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# GitTestBase — helpers for tests that need a real working copy
# ---------------------------------------------------------------------------


class GitTestBase:
    @staticmethod
    def run_git(args: list[str], cwd: Path, env: dict[str, str] | None = None) -> str:
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
            env={**os.environ, **(env or {})},
        )
        return result.stdout.strip()

    @staticmethod
    def init_repo(path: Path) -> Path:
        GitTestBase.run_git(["init"], path)
        GitTestBase.run_git(["config", "user.name", "Test Author"], path)
        GitTestBase.run_git(["config", "user.email", "author@example.com"], path)
        return path

    @staticmethod
    def commit_all(repo: Path, message: str, author: str, timestamp: int) -> str:
        """Commit every change as *author* at *timestamp* and return the new SHA."""
        date = f"{timestamp} +0000"
        GitTestBase.run_git(["add", "-A"], repo)
        GitTestBase.run_git(
            ["-c", f"user.name={author}", "-c", f"user.email={author}@example.com", "commit", "-m", message],
            repo,
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return GitTestBase.run_git(["rev-parse", "HEAD"], repo)

    @staticmethod
    def write_lines(path: Path, lines: list[str]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Return an empty, configured Git working copy."""
    repo = tmp_path / "repo"
    repo.mkdir()
    return GitTestBase.init_repo(repo)


@pytest.fixture
def sink() -> InMemoryBlameSink:
    return InMemoryBlameSink()
