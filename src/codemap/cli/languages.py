"""codemap languages command - list the extension table."""

import json
from typing import Any

import click

from codemap.index._internal.parsing.registry import GrammarRegistry


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--check", is_flag=True, help="Load each grammar and report availability")
def languages_command(as_json: bool, check: bool) -> None:
    """List recognized file extensions and their grammars."""
    registry = GrammarRegistry.get()
    rows: list[dict[str, Any]] = []
    for pack in registry.languages():
        row: dict[str, Any] = {
            "language": pack.language.value,
            "extensions": sorted(pack.extensions),
            "grammar": pack.grammar_package,
        }
        if check:
            row["available"] = registry.profile_for(pack.language) is not None
        rows.append(row)

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    for row in rows:
        extensions = " ".join(row["extensions"])
        line = f"{row['language']:<12} {extensions:<14} {row['grammar']}"
        if check:
            line += "  ok" if row["available"] else "  unavailable"
        click.echo(line)
