"""codemap CLI - codemap command."""

import click

from codemap import __version__
from codemap.cli.languages import languages_command
from codemap.cli.scores import scores_command
from codemap.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="codemap")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """codemap - symbol definitions and callers across source files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(scores_command, name="scores")
cli.add_command(languages_command, name="languages")


if __name__ == "__main__":
    cli()
