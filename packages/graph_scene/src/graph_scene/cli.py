"""CLI preview of the scene built from a running graph API."""

from __future__ import annotations

import asyncio
import json
import logging

import typer

from .controller import SceneController, SceneState
from .data_source import HttpGraphDataSource
from .engine import HeadlessEngine, StaticViewport
from .shaper import count_by_type

logger = logging.getLogger(__name__)

app = typer.Typer(help="Ledger graph scene tools.")


@app.callback()
def main_callback() -> None:
    """Root callback, a command is required."""


async def build_scene(source: HttpGraphDataSource, width: float, window_height: float) -> tuple[SceneController, HeadlessEngine]:
    engine = HeadlessEngine()
    controller = SceneController()
    controller.mount(engine, StaticViewport(width=width, window_height=window_height))
    try:
        await controller.load(source)
    finally:
        controller.unmount()
    return controller, engine


@app.command(name="summary")
def summary(
    url: str = typer.Option("http://localhost:8000", "--url", envvar="GRAPH_API_URL", help="Graph API base URL."),
    timeout: float = typer.Option(30.0, "--timeout", min=1.0, help="HTTP timeout, seconds."),
    width: float = typer.Option(1280, "--width", min=1, help="Container width in px."),
    window_height: float = typer.Option(900, "--window-height", min=1, help="Window height in px."),
) -> None:
    """Load `/graph-data`, shape it and print per-category counts."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s - %(message)s")
    source = HttpGraphDataSource(url, timeout=timeout)
    controller, engine = asyncio.run(build_scene(source, width, window_height))
    if controller.state is not SceneState.READY:
        typer.echo(controller.error or f"Scene is {controller.state.value}", err=True)
        raise typer.Exit(code=1)

    payload = {
        "nodes": count_by_type(engine.nodes),
        "links": count_by_type(engine.links),
        "dimensions": list(controller.dimensions),
        "camera": list(engine.camera_position()),
    }
    typer.echo(json.dumps(payload, indent=2))


def main() -> None:
    """Entry point for python -m graph_scene.cli."""

    app()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
