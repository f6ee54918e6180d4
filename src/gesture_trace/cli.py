"""gesture-trace CLI.

Usage:
    gesture-trace serve      Start the HTTP API
    gesture-trace replay     Replay a recorded sensor session
    gesture-trace templates  List stored templates
    gesture-trace delete     Delete one or all templates
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from gesture_trace.config import ServerConfig

app = typer.Typer(
    name="gesture-trace",
    help="Air gesture recognition from fingertip traces.",
    add_completion=False,
)


def _load_config(config: Optional[str]) -> ServerConfig:
    if config is None:
        return ServerConfig()
    path = Path(config)
    if not path.exists():
        typer.echo(f"Config file not found: {config}", err=True)
        raise typer.Exit(1)
    return ServerConfig.from_yaml(path)


def _open_core(template_file: str):
    from gesture_trace.core import Core
    from gesture_trace.errors import TemplateFileError

    core = Core(template_file=template_file)
    try:
        core.load()
    except TemplateFileError as e:
        typer.echo(f"{e}", err=True)
        raise typer.Exit(1)
    return core


@app.command()
def serve(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
    templates: Optional[str] = typer.Option(None, help="Template file"),
):
    """Start the HTTP API."""
    import uvicorn
    from gesture_trace.server import app as fastapi_app, state

    settings = _load_config(config)
    if host:
        settings.host = host
    if port:
        settings.port = port
    if templates:
        settings.template_file = templates

    logging.basicConfig(level=settings.log_level.upper())
    state.config = settings

    typer.echo(f"Serving gesture-trace on {settings.host}:{settings.port}")
    typer.echo(f"   Templates: {settings.template_file}")
    uvicorn.run(fastapi_app, host=settings.host, port=settings.port, log_level=settings.log_level)


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to recorded session (.json)"),
    templates: Optional[str] = typer.Option(None, help="Template file"),
    speed: float = typer.Option(1.0, help="Playback speed multiplier"),
    realtime: bool = typer.Option(False, help="Play at original timing"),
):
    """Replay a recorded sensor session and print detected gestures."""
    from gesture_trace.recorder import FramePlayer

    path = Path(recording)
    if not path.exists():
        typer.echo(f"Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    core = _open_core(templates or ServerConfig().template_file)
    player = FramePlayer.load(path)
    typer.echo(f"Replaying {path.name} ({player.frame_count} frames, {player.duration:.1f}s)")

    detected = 0
    frames = player.play_realtime(speed=speed) if realtime else player.play()
    for frame in frames:
        core.process_frame(frame.hands)
        for template in core.flush_detected():
            detected += 1
            typer.echo(f"   {frame.timestamp:7.2f}s  {template.name} (id={template.id})")

    typer.echo(f"Replay complete. {detected} gestures detected.")


@app.command("templates")
def list_templates(
    templates: Optional[str] = typer.Option(None, help="Template file"),
):
    """List stored templates."""
    core = _open_core(templates or ServerConfig().template_file)
    stored = core.to_templates()
    if not stored:
        typer.echo("No templates.")
        return

    for template in stored:
        typer.echo(f"{template.id:>10}  {template.name:20s} {len(template.model)} points")


@app.command()
def delete(
    template_id: Optional[int] = typer.Argument(None, help="Template id (omit with --all)"),
    all_templates: bool = typer.Option(False, "--all", help="Delete every template"),
    templates: Optional[str] = typer.Option(None, help="Template file"),
):
    """Delete one template, or all of them."""
    from gesture_trace.errors import TemplateNotFoundError

    core = _open_core(templates or ServerConfig().template_file)
    if all_templates:
        count = core.delete_all()
        typer.echo(f"Deleted {count} templates.")
        return

    if template_id is None:
        typer.echo("Give a template id or --all", err=True)
        raise typer.Exit(1)

    try:
        removed = core.delete(template_id)
    except TemplateNotFoundError as e:
        typer.echo(f"{e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted {removed.name} (id={removed.id}).")


def main():
    app()


if __name__ == "__main__":
    main()
