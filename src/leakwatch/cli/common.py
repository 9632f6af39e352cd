"""Shared helpers for CLI commands — config loading and error reporting."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console

from leakwatch.config import ScannerConfig
from leakwatch.errors import LeakwatchError
from leakwatch.storage.store import FindingsStore

console = Console(stderr=True)


def load_config(ctx: click.Context) -> ScannerConfig:
    try:
        config = ScannerConfig.load(ctx.obj.get("config_path"))
    except (OSError, ValueError, LeakwatchError) as e:
        fail(f"Error loading config: {e}")
    database = ctx.obj.get("database")
    if database:
        config.database = Path(database)
    return config


def open_store(config: ScannerConfig) -> FindingsStore:
    try:
        return FindingsStore(config.database)
    except LeakwatchError as e:
        fail(str(e))


def fail(message: str) -> NoReturn:
    """Print one actionable error and exit non-zero."""
    console.print(f"[red]{message}[/red]")
    raise SystemExit(1)
