"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from leakwatch import __version__


@click.group()
@click.version_option(version=__version__, prog_name="leakwatch")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML scanner configuration file.",
)
@click.option(
    "--database",
    "-d",
    type=click.Path(dir_okay=False),
    default=None,
    help="Findings database file (default: .security-findings.json).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    database: str | None,
    verbose: bool,
) -> None:
    """leakwatch — detect committed secrets and track them across scans."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["database"] = database
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from leakwatch.cli.findings import findings  # noqa: F811
    from leakwatch.cli.rules import rules  # noqa: F811
    from leakwatch.cli.scan import scan  # noqa: F811
    from leakwatch.cli.server import server  # noqa: F811

    main.add_command(scan)
    main.add_command(findings)
    main.add_command(rules)
    main.add_command(server)


_register_commands()
