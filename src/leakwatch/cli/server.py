"""CLI command: leakwatch server — serve the findings HTTP API."""

from __future__ import annotations

import click

from leakwatch.cli.common import console, load_config


@click.command()
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to listen on (default: 8471).",
)
@click.pass_context
def server(ctx: click.Context, port: int | None) -> None:
    """Start the leakwatch HTTP API."""
    try:
        import uvicorn
    except ImportError:
        console.print(
            "[red]Web server dependencies not installed.[/red]\n"
            "Install with: pip install leakwatch[web]"
        )
        raise SystemExit(1)

    config = load_config(ctx)
    if port is not None:
        config.web_port = port

    console.print(
        f"[bold]leakwatch[/bold] API starting on "
        f"[cyan]http://{config.web_host}:{config.web_port}[/cyan]"
    )
    console.print(f"  [dim]Findings database: {config.database}[/dim]\n")

    from leakwatch.web.app import create_app

    app = create_app(config)
    uvicorn.run(app, host=config.web_host, port=config.web_port, log_level="info")
