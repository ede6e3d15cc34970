"""Thin CLI wrapper for lane_notifier.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from lane_notifier import __version__
from lane_notifier.config import get_settings, print_settings_json
from lane_notifier.models import Notification
from lane_notifier.pipeline import PipelineCoordinator
from lane_notifier.types import PipelineStatus

app = typer.Typer(
    name="lane-notifier",
    help="Lane Notifier - registry webhook driving Lane build, export and upload",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"lane-notifier version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Send log records to stderr at the given level."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Lane Notifier - registry webhook driving Lane build, export and upload."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings))
        return

    timeout_display = (
        str(settings.stage_timeout) if settings.stage_timeout else "(no limit)"
    )
    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Lane:[/bold]")
    console.print(f"  Lane binary:         {settings.lane_binary}")
    console.print(f"  Lane environment:    {settings.lane_environment}")
    console.print(f"  Export directory:    {settings.export_dir}")
    console.print(f"  Stage timeout:       {timeout_display}")
    console.print()
    console.print("[bold]Docker:[/bold]")
    console.print(f"  Docker binary:       {settings.docker_binary}")
    console.print(f"  Ready timeout:       {settings.docker_ready_timeout:g}")
    console.print(f"  Poll interval:       {settings.docker_poll_interval:g}")
    console.print()
    console.print("[bold]Storage:[/bold]")
    console.print(f"  Endpoint:            {settings.storage_endpoint}")
    console.print(f"  Region:              {settings.storage_region}")
    console.print(f"  Bucket:              {settings.storage_bucket}")
    console.print(
        f"  Credentials:         "
        f"{'configured' if settings.storage_access_key else '(not set)'}"
    )
    console.print(f"  Upload workers:      {settings.upload_workers}")
    console.print()
    console.print("[bold]Server:[/bold]")
    console.print(f"  Listen address:      {settings.host}:{settings.port}")
    console.print(f"  Shutdown grace:      {settings.shutdown_grace_period}")
    console.print(f"  Log level:           {settings.log_level}")


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Bind address (overrides settings)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Listen port (overrides settings)"),
    ] = None,
) -> None:
    """Run the webhook HTTP server."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)

    uvicorn.run(
        "web.app:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_grace_period,
    )


@app.command()
def run(
    path: Annotated[
        Path, typer.Argument(help="Path to a notification JSON payload")
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Run the pipeline once for a notification payload file."""
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        notification = Notification.model_validate_json(path.read_text())
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot read {path}: {escape(str(e))}")
        raise typer.Exit(code=1) from None
    except ValidationError as e:
        console.print(f"[red]Invalid notification:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    outcome = PipelineCoordinator(settings).run(notification)

    if json_output:
        data = {
            "status": outcome.status.value,
            "message": outcome.message,
            "container": outcome.container,
            "stages": [
                {"stage": s.stage.value, "success": s.success, "message": s.message}
                for s in outcome.stages
            ],
        }
        if outcome.upload_summary is not None:
            data["upload"] = {
                "prefix": outcome.upload_summary.prefix,
                "uploaded": outcome.upload_summary.uploaded,
                "failed": outcome.upload_summary.failed,
            }
        typer.echo(json.dumps(data, indent=2))
    else:
        console.print(f"[bold]Status:[/bold]    {outcome.status.value}")
        console.print(f"[bold]Container:[/bold] {outcome.container}")
        console.print(f"[bold]Message:[/bold]   {escape(outcome.message)}")
        if outcome.upload_summary is not None:
            console.print(
                f"[bold]Uploaded:[/bold]  {outcome.upload_summary.uploaded} "
                f"(failed: {outcome.upload_summary.failed})"
            )

    if outcome.status == PipelineStatus.FAILURE:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
