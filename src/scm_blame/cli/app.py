import typer

from scm_blame.cli.author import author
from scm_blame.cli.blame import blame

app = typer.Typer(
    name="scm-blame",
    help="SCM Blame CLI — attribute file lines to revisions and authors.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("blame")(blame)
app.command("author")(author)


def main() -> None:
    app()
