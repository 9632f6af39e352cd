"""CLI command: leakwatch rules — list the active detection rules."""

from __future__ import annotations

import json

import click
from rich.table import Table

from leakwatch.cli.common import console, load_config
from leakwatch.scanner.engine import build_registry


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print rules as JSON.")
@click.pass_context
def rules(ctx: click.Context, as_json: bool) -> None:
    """List detection rules, including custom ones from the config."""
    registry = build_registry(load_config(ctx))

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in registry.rules], indent=2))
        return

    table = Table(title="Detection rules")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Confidence", justify="right")
    table.add_column("Enabled")
    for rule in sorted(registry.rules, key=lambda r: (r.severity.rank, r.name)):
        table.add_row(
            rule.name,
            rule.type,
            rule.severity.value,
            f"{rule.confidence:.2f}",
            "yes" if rule.enabled else "[dim]no[/dim]",
        )
    console.print(table)
