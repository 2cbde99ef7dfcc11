from typing import Annotated

import typer

from scm_blame.core.authors import normalize_author


def author(
    raw: Annotated[list[str], typer.Argument(help="Author identifiers to normalize.")],
) -> None:
    """Print the normalized form of each author identifier."""
    for value in raw:
        typer.echo(normalize_author(value))
