from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

NO_DATA = "no data"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def _display(value: Any) -> Any:
    return NO_DATA if value is None else value


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {_display(value)}")


def _echo_windows(payload: Dict[str, Any]) -> None:
    echo_key_values(
        [
            ("current", payload.get("current")),
            ("last5Minutes", payload.get("last5Minutes")),
            ("last15Minutes", payload.get("last15Minutes")),
            ("last30Minutes", payload.get("last30Minutes")),
        ]
    )


def render_stats(payload: Dict[str, Any]) -> None:
    echo_heading("Heart Rate")
    _echo_windows(payload)
    echo_key_values(
        [
            ("lastUpdated", payload.get("lastUpdated")),
            ("totalReadings", payload.get("totalReadings")),
            ("hasData", payload.get("hasData")),
        ]
    )
    spo2 = payload.get("spo2") or {}
    typer.echo()
    echo_heading("SpO2")
    _echo_windows(spo2)


def render_reading(reading: Dict[str, Any]) -> None:
    flag = typer.style("RISKY", fg=typer.colors.RED) if reading.get("isRisky") else "NORMAL"
    spo2 = reading.get("spo2")
    suffix = f" spo2={spo2}%" if spo2 is not None else ""
    typer.echo(
        f"  #{reading.get('id')} {reading.get('hour')} {reading.get('pulse')} BPM{suffix} [{flag}]"
    )


def render_submission(payload: Dict[str, Any]) -> None:
    reading = payload.get("reading") or {}
    typer.secho(payload.get("message", "Reading recorded."), fg=typer.colors.GREEN)
    render_reading(reading)


def render_current(payload: Dict[str, Any]) -> None:
    echo_heading("Current Heart Rate")
    echo_key_values(
        [
            ("current", payload.get("current")),
            ("lastUpdated", payload.get("lastUpdated")),
            ("timestamp", payload.get("timestamp")),
        ]
    )


def render_readings(readings: List[Dict[str, Any]]) -> None:
    echo_heading(f"Readings ({len(readings)})")
    if not readings:
        typer.echo("No readings available.")
        return
    for reading in readings:
        render_reading(reading)


def render_statistics(payload: Dict[str, Any]) -> None:
    counts = payload.get("readingCount") or {}
    echo_heading("Reading Count")
    echo_key_values(
        [
            ("total", counts.get("total")),
            ("normal", counts.get("normal")),
            ("risky", counts.get("risky")),
            ("riskyPercentage", f"{counts.get('riskyPercentage', 0)}%"),
        ]
    )
    thresholds = payload.get("thresholds") or {}
    typer.echo()
    echo_heading("Thresholds")
    echo_key_values(
        [
            ("riskyThreshold", thresholds.get("riskyThreshold")),
            ("normalMin", thresholds.get("normalMin")),
            ("maxHistory", thresholds.get("maxHistory")),
        ]
    )
    typer.echo()
    render_stats(payload.get("averages") or {})
