"""Main CLI entry point for mailbridge."""

import logging

import typer
from typing_extensions import Annotated

from mailbridge import __version__
from mailbridge.cli import commands

app = typer.Typer(
    name="mailbridge",
    help="Decode provider messages and compose RFC 2822 mail",
    no_args_is_help=True,
)

app.add_typer(commands.decode.app, name="decode")
app.add_typer(commands.compose.app, name="compose")
app.add_typer(commands.config.app, name="config")


@app.callback()
def setup(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log codec decisions to stderr")
    ] = False,
):
    """Decode provider messages and compose RFC 2822 mail."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show version information."""
    typer.echo(f"mailbridge version {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
