from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import (
    render_current,
    render_readings,
    render_statistics,
    render_stats,
    render_submission,
)


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the heart rate monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:3001).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    pulse: int = typer.Argument(..., min=30, max=250, help="Heart rate in BPM."),
    spo2: Optional[float] = typer.Option(
        None, "--spo2", min=50, max=100, help="Blood oxygen saturation (%)."
    ),
) -> None:
    """Submit a single heart rate reading."""
    state = _get_state(ctx)
    payload = state.client.submit_reading(pulse, spo2)
    render_submission(payload)


@app.command("stats")
def stats_command(ctx: typer.Context) -> None:
    """Show rolling averages and the current value."""
    state = _get_state(ctx)
    render_stats(state.client.get_stats())


@app.command("current")
def current_command(ctx: typer.Context) -> None:
    """Show the most recent heart rate."""
    state = _get_state(ctx)
    render_current(state.client.get_current())


@app.command("readings")
def readings_command(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", min=1, max=100, help="Maximum readings."),
    since: Optional[str] = typer.Option(
        None, "--since", help="ISO 8601 timestamp; only newer readings are listed."
    ),
) -> None:
    """List recent readings, newest first."""
    state = _get_state(ctx)
    render_readings(state.client.get_readings(limit=limit, since=since))


@app.command("statistics")
def statistics_command(ctx: typer.Context) -> None:
    """Show the risky/normal breakdown and thresholds."""
    state = _get_state(ctx)
    render_statistics(state.client.get_statistics())
