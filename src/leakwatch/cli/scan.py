"""CLI command: leakwatch scan [PATH] — detect secrets in files."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from leakwatch.cli.common import console, fail, load_config, open_store
from leakwatch.cli.render import FORMATS, print_scan_result
from leakwatch.errors import LeakwatchError
from leakwatch.repo.base import ScanMode
from leakwatch.rules.models import Severity
from leakwatch.scanner.engine import ScanEngine
from leakwatch.scanner.models import ScanOptions

_SEVERITIES = [s.value for s in Severity]


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option(
    "--mode",
    "-m",
    type=click.Choice([m.value for m in ScanMode]),
    default=None,
    help="Scan mode (default from config: risky).",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(FORMATS),
    default="table",
    help="Output format.",
)
@click.option(
    "--severity",
    "-s",
    multiple=True,
    type=click.Choice(_SEVERITIES),
    help="Only show findings of this severity (repeatable).",
)
@click.option(
    "--gitignore/--no-gitignore",
    default=True,
    help="Respect version-control ignore rules.",
)
@click.option("--history", is_flag=True, help="Include git history (not implemented).")
@click.option("--max-depth", type=int, default=100, help="Maximum history depth.")
@click.option("--include", "-i", multiple=True, help="Only scan files matching glob.")
@click.option("--exclude", "-e", multiple=True, help="Patterns to exclude from scan.")
@click.pass_context
def scan(
    ctx: click.Context,
    path: str,
    mode: str | None,
    fmt: str,
    severity: tuple[str, ...],
    gitignore: bool,
    history: bool,
    max_depth: int,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
) -> None:
    """Scan PATH for committed secrets and record the findings."""
    config = load_config(ctx)
    target = Path(path).resolve()

    options = ScanOptions(
        paths=[str(target)],
        scan_mode=ScanMode(mode) if mode else None,
        include_history=history,
        max_depth=max_depth,
        file_patterns=list(include),
        exclude_patterns=list(exclude),
        respect_gitignore=gitignore,
    )

    if fmt == "table":
        effective = mode or config.default_scan_mode.value
        console.print(
            f"[bold]leakwatch[/bold] scanning [cyan]{target}[/cyan] "
            f"in [cyan]{effective}[/cyan] mode\n"
        )

    store = open_store(config)
    try:
        result = ScanEngine(store, config).scan(options)
    except LeakwatchError as e:
        fail(f"Scan failed: {e}")

    if severity:
        wanted = {Severity(s) for s in severity}
        result.findings = [f for f in result.findings if f.severity in wanted]

    base_dir = str(target) if target.is_dir() else str(target.parent)
    print_scan_result(console, result, fmt, base_dir)

    serious = [
        f
        for f in result.findings
        if f.severity in (Severity.CRITICAL, Severity.HIGH)
    ]
    if serious:
        if fmt == "table":
            console.print(f"\n[red]{len(serious)} critical/high finding(s)[/red]")
        sys.exit(1)
