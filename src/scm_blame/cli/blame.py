import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from scm_blame.core.batch import BatchReport, run_blame
from scm_blame.core.errors import NotVersionControlledError
from scm_blame.models import BlameLine, FileBlameRequest
from scm_blame.scm.git import GitAnnotationSource
from scm_blame.sinks import InMemoryBlameSink

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def count_lines(path: Path) -> int:
    """Count lines the way ``git blame`` does: a final line without newline still counts."""
    data = path.read_bytes()
    count = data.count(b"\n")
    if data and not data.endswith(b"\n"):
        count += 1
    return count


def _render_table(display: str, lines: list[BlameLine]) -> None:
    table = Table(title=display, show_lines=False)
    for h in ("line", "revision", "date", "author"):
        table.add_column(h)
    for number, line in enumerate(lines, start=1):
        table.add_row(
            str(number),
            line.revision_id[:12],
            line.commit_timestamp.isoformat(),
            line.author or "",
        )
    console.print(table)


def _print_json(display: str, lines: list[BlameLine]) -> None:
    for number, line in enumerate(lines, start=1):
        typer.echo(json.dumps({"path": display, "line": number, **line.model_dump(mode="json")}))


def _print_summary(report: BatchReport, displays: dict[FileBlameRequest, str], out: Console) -> None:
    for failure in report.failed:
        out.print(f"[red]Failed[/red] {displays[failure.request]}: {failure.error.message}")
    out.print(
        f"[green]{len(report.emitted)} blamed[/green], "
        f"[yellow]{len(report.skipped)} skipped[/yellow], "
        f"[red]{len(report.failed)} failed[/red]",
        highlight=False,
    )


def blame(
    files: Annotated[list[Path], typer.Argument(help="Working-copy files to blame.")],
    repo: Annotated[Path | None, typer.Option(help="Repository directory (defaults to the current directory).")] = None,
    concurrency: Annotated[int | None, typer.Option(help="Files blamed in parallel.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print one JSON object per line.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log skipped files and git activity.")] = False,
) -> None:
    """Attribute every line of the given files to its last revision and author."""
    _configure_logging(verbose)
    try:
        source = GitAnnotationSource.discover(repo or Path.cwd())
    except NotVersionControlledError:
        err_console.print(f"[red]Not a Git repository:[/red] {repo or Path.cwd()}")
        raise typer.Exit(1) from None

    displays: dict[FileBlameRequest, str] = {}
    unreadable = 0
    for file in files:
        try:
            line_count = count_lines(file)
        except OSError as exc:
            err_console.print(f"[red]Cannot read[/red] {file}: {exc.strerror}")
            unreadable += 1
            continue
        displays[FileBlameRequest(path=os.path.abspath(file), expected_line_count=line_count)] = str(file)

    sink = InMemoryBlameSink()
    report = asyncio.run(run_blame(displays, source, sink, concurrency=concurrency))

    for request, display in displays.items():
        lines = sink.results.get(request)
        if lines is None:
            continue
        if json_output:
            _print_json(display, lines)
        else:
            _render_table(display, lines)

    _print_summary(report, displays, err_console if json_output else console)
    if report.failed or unreadable:
        raise typer.Exit(1)
