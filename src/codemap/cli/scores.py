"""codemap scores command - print token scores and callers as JSON."""

import json
from pathlib import Path

import click

from codemap.core.errors import CodeMapError
from codemap.core.logging import clear_request_id, set_request_id
from codemap.index.ops import get_file_token_scores


@click.command()
@click.argument("root", type=click.Path(path_type=Path))
@click.argument("files", nargs=-1, required=True)
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indent (0 for compact)")
@click.option("--stats", "with_stats", is_flag=True, help="Include build statistics")
def scores_command(root: Path, files: tuple[str, ...], indent: int, with_stats: bool) -> None:
    """Score definitions in FILES and list their callers.

    ROOT is the directory FILES are relative to.
    """
    set_request_id()
    try:
        result = get_file_token_scores(root, list(files))
    except CodeMapError as e:
        raise click.ClickException(str(e)) from e
    finally:
        clear_request_id()

    payload = result.to_dict()
    if with_stats:
        payload["stats"] = result.stats.to_dict()
    click.echo(json.dumps(payload, indent=indent or None))
