"""
droplet_monitor.main
--------------------

CLI entrypoint

Key contract:
- `droplet-monitor run` polls until Ctrl+C, redrawing the table each cycle
- `droplet-monitor oneshot` runs a single cycle and exits
- stdout carries the rendered output; structured events go to stderr
"""

from __future__ import annotations

import asyncio
import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import typer

from droplet_monitor.client import MonitoringClient
from droplet_monitor.config import ConfigError, Settings
from droplet_monitor.logging import emit_event
from droplet_monitor.model import MetricSnapshot
from droplet_monitor.poll import poll_forever
from droplet_monitor.render import RENDERER_NAMES, get_renderer
from droplet_monitor.version import MONITOR_VERSION

app = typer.Typer(
    add_completion=False,
    help="droplet-monitor: live resource table for DigitalOcean droplets",
)


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ConfigError as e:
        raise typer.BadParameter(str(e)) from e


def _make_client(settings: Settings) -> MonitoringClient:
    return MonitoringClient(
        settings.api_token,
        base_url=settings.base_url,
        timeout=settings.request_timeout_s,
    )


def _check_format(output_format: str) -> None:
    if output_format not in RENDERER_NAMES:
        raise typer.BadParameter(f"--format must be one of: {', '.join(RENDERER_NAMES)}")


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Root command behavior: print a hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: droplet-monitor --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print monitor version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"droplet-monitor v{MONITOR_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")

    try:
        settings = Settings.from_env()
    except ConfigError:
        typer.echo("configured=false")
        return
    typer.echo(f"api={settings.base_url}")
    typer.echo(f"host_id={settings.host_id or 'unset'}")


@app.command("oneshot")
def oneshot(
    output_format: str = typer.Option(
        "table",
        "--format",
        help="Output format: table or json.",
    ),
    max_concurrency: Optional[int] = typer.Option(
        None,
        "--max-concurrency",
        help="Maximum hosts fetched at once (default from DO_MAX_CONCURRENCY).",
        min=1,
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI styling in the table.",
    ),
) -> None:
    """
    Render a single cycle and exit

    Exit code 1 when the host list could not be fetched
    """
    _check_format(output_format)
    settings = _load_settings()
    renderer = get_renderer(output_format, color=not no_color)

    def _show(snapshots: list[MetricSnapshot]) -> None:
        typer.echo(renderer.render(snapshots, meta={"computed_at": datetime.now(timezone.utc).isoformat()}))

    async def _main() -> int:
        async with _make_client(settings) as client:
            return await poll_forever(
                client,
                _show,
                interval_s=settings.poll_interval_s,
                max_concurrency=max_concurrency or settings.max_concurrency,
                max_cycles=1,
            )

    emit_event("monitor_start", monitor_version=MONITOR_VERSION, mode="oneshot")
    try:
        rendered = asyncio.run(_main())
    finally:
        emit_event("monitor_shutdown", monitor_version=MONITOR_VERSION, mode="oneshot")

    if not rendered:
        raise typer.Exit(code=1)


@app.command("run")
def run(
    interval: Optional[int] = typer.Option(
        None,
        help="Seconds between cycles and the metrics window (default from DO_POLL_INTERVAL).",
        min=1,
    ),
    max_concurrency: Optional[int] = typer.Option(
        None,
        "--max-concurrency",
        help="Maximum hosts fetched at once (default from DO_MAX_CONCURRENCY).",
        min=1,
    ),
    output_format: str = typer.Option(
        "table",
        "--format",
        help="Output format: table or json.",
    ),
    no_clear: bool = typer.Option(
        False,
        "--no-clear",
        help="Append each table instead of redrawing the screen.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI styling in the table.",
    ),
) -> None:
    """
    Poll continuously until interrupted
    """
    _check_format(output_format)
    settings = _load_settings()
    interval_s = interval or settings.poll_interval_s
    renderer = get_renderer(output_format, color=not no_color)
    redraw = output_format == "table" and not no_clear

    def _show(snapshots: list[MetricSnapshot]) -> None:
        out = renderer.render(snapshots, meta={"computed_at": datetime.now(timezone.utc).isoformat()})
        if redraw:
            typer.clear()
        typer.echo(out)

    async def _main() -> None:
        async with _make_client(settings) as client:
            await poll_forever(
                client,
                _show,
                interval_s=interval_s,
                max_concurrency=max_concurrency or settings.max_concurrency,
            )

    emit_event(
        "monitor_start",
        monitor_version=MONITOR_VERSION,
        mode="run",
        interval_s=interval_s,
        api=settings.base_url,
    )

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        pass
    finally:
        emit_event("monitor_shutdown", monitor_version=MONITOR_VERSION, mode="run")


if __name__ == "__main__":
    app()
