"""CLI commands: leakwatch findings ... — query and triage stored findings."""

from __future__ import annotations

import click

from leakwatch.cli.common import console, fail, load_config, open_store
from leakwatch.cli.render import FORMATS, print_findings, print_stats
from leakwatch.errors import FindingNotFoundError, StoreError
from leakwatch.rules.models import Severity
from leakwatch.scanner.models import FindingStatus


@click.group()
def findings() -> None:
    """Inspect and triage findings from previous scans."""


@findings.command("list")
@click.option(
    "--severity",
    "-s",
    type=click.Choice([s.value for s in Severity]),
    help="Filter by severity.",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in FindingStatus]),
    help="Filter by status.",
)
@click.option("--type", "finding_type", help="Filter by finding type.")
@click.option("--file", "file_path", help="Filter by exact file path.")
@click.option("--min-confidence", type=float, help="Minimum confidence (0-1).")
@click.option("--format", "-f", "fmt", type=click.Choice(FORMATS), default="table")
@click.pass_context
def list_findings(
    ctx: click.Context,
    severity: str | None,
    status: str | None,
    finding_type: str | None,
    file_path: str | None,
    min_confidence: float | None,
    fmt: str,
) -> None:
    """List stored findings."""
    filters: dict[str, object] = {}
    if severity:
        filters["severity"] = severity
    if status:
        filters["status"] = status
    if finding_type:
        filters["type"] = finding_type
    if file_path:
        filters["file"] = file_path
    if min_confidence is not None:
        filters["min_confidence"] = min_confidence

    store = open_store(load_config(ctx))
    print_findings(console, store.query(filters), fmt)


@findings.command()
@click.option("--format", "-f", "fmt", type=click.Choice(("table", "json")), default="table")
@click.pass_context
def stats(ctx: click.Context, fmt: str) -> None:
    """Show statistics about stored findings."""
    store = open_store(load_config(ctx))
    print_stats(console, store.stats(), fmt)


@findings.command()
@click.argument("finding_id")
@click.pass_context
def resolve(ctx: click.Context, finding_id: str) -> None:
    """Mark a finding as resolved."""
    _set_status(ctx, finding_id, FindingStatus.RESOLVED)


@findings.command()
@click.argument("finding_id")
@click.pass_context
def ignore(ctx: click.Context, finding_id: str) -> None:
    """Mark a finding as ignored (false positive)."""
    _set_status(ctx, finding_id, FindingStatus.IGNORED)


@findings.command()
@click.argument("finding_id")
@click.pass_context
def reopen(ctx: click.Context, finding_id: str) -> None:
    """Mark a finding as active again."""
    _set_status(ctx, finding_id, FindingStatus.ACTIVE)


@findings.command()
@click.argument("finding_id")
@click.confirmation_option(prompt="Delete this finding permanently?")
@click.pass_context
def delete(ctx: click.Context, finding_id: str) -> None:
    """Delete a finding from the store."""
    store = open_store(load_config(ctx))
    try:
        store.delete(finding_id)
    except (FindingNotFoundError, StoreError) as e:
        fail(str(e))
    console.print(f"Finding [cyan]{finding_id}[/cyan] deleted")


def _set_status(ctx: click.Context, finding_id: str, status: FindingStatus) -> None:
    store = open_store(load_config(ctx))
    try:
        store.update_status(finding_id, status)
    except (FindingNotFoundError, StoreError) as e:
        fail(str(e))
    console.print(f"Finding [cyan]{finding_id}[/cyan] marked as {status.value}")
