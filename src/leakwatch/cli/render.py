"""Render findings, scan results, and stats as tables, JSON, or CSV."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

from leakwatch.rules.models import Severity
from leakwatch.scanner.models import Finding, ScanResult
from leakwatch.storage.store import Stats

FORMATS = ("table", "json", "csv")

_SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "dark_orange",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}

_CSV_FIELDS = (
    "id",
    "file",
    "line",
    "column",
    "type",
    "severity",
    "message",
    "status",
    "confidence",
)


def sort_findings(findings: list[Finding]) -> list[Finding]:
    """Critical first, then file, then line."""
    return sorted(findings, key=lambda f: (f.severity.rank, f.file, f.line, f.column))


def findings_table(findings: list[Finding], base_dir: str = "") -> Table:
    table = Table(title="Findings", show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("ID", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Rule")
    table.add_column("Value", max_width=40)
    table.add_column("Status")

    for finding in sort_findings(findings):
        color = _SEVERITY_COLORS.get(finding.severity, "white")
        table.add_row(
            f"[{color}]{finding.severity.value}[/{color}]",
            finding.id,
            _shorten_path(finding.file, base_dir),
            str(finding.line),
            finding.rule,
            finding.value,
            finding.status.value,
        )
    return table


def findings_csv(findings: list[Finding]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for finding in sort_findings(findings):
        writer.writerow(finding.to_dict())
    return buf.getvalue()


def print_scan_result(
    console: Console,
    result: ScanResult,
    fmt: str,
    base_dir: str = "",
) -> None:
    if fmt == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if fmt == "csv":
        click.echo(findings_csv(result.findings), nl=False)
        return

    if result.findings:
        console.print(findings_table(result.findings, base_dir))
    else:
        console.print("[green]No secrets found.[/green]")
    console.print(
        f"\nScanned {result.files_scanned} files "
        f"({result.files_skipped} skipped) "
        f"in {result.duration:.2f}s"
    )
    console.print(f"Total findings: {len(result.findings)}")


def print_findings(console: Console, findings: list[Finding], fmt: str) -> None:
    if fmt == "json":
        click.echo(json.dumps([f.to_dict() for f in sort_findings(findings)], indent=2))
    elif fmt == "csv":
        click.echo(findings_csv(findings), nl=False)
    elif findings:
        console.print(findings_table(findings))
    else:
        console.print("[green]No findings.[/green]")


def print_stats(console: Console, stats: Stats, fmt: str) -> None:
    if fmt == "json":
        click.echo(json.dumps(stats.to_dict(), indent=2))
        return

    console.print("[bold]Security statistics[/bold]")
    console.print(f"Total findings:    {stats.total_findings}")
    console.print(f"Files with issues: {stats.files_with_issues}")
    last = (
        datetime.fromtimestamp(stats.last_scan_time).strftime("%Y-%m-%d %H:%M:%S")
        if stats.last_scan_time is not None
        else "never"
    )
    console.print(f"Last scan:         {last}")

    for title, counts in (
        ("Severity", stats.findings_by_severity),
        ("Type", stats.findings_by_type),
        ("Status", stats.findings_by_status),
    ):
        if not counts:
            continue
        table = Table(title=f"By {title.lower()}")
        table.add_column(title)
        table.add_column("Count", justify="right")
        for key, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
            table.add_row(key, str(count))
        console.print(table)


def _shorten_path(file_path: str, base_dir: str) -> str:
    """Shorten file path relative to scan directory."""
    if base_dir and file_path.startswith(base_dir):
        return file_path[len(base_dir) :].lstrip("/")
    return file_path
