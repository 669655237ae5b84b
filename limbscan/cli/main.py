from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer

from ..config import load_config
from ..core.errors import LimbscanError
from ..core.exporter import EXPORT_FORMATS, output_filename, write_payload
from ..core.formats import UploadKind, decode_text, detect, detect_upload
from ..sdk.run import LoadResult, export_cloud, load_file, run_from_config

app = typer.Typer(help="limbscan point-cloud utilities")


def _configure_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="[%(levelname)s] %(message)s")
    logging.getLogger("limbscan").setLevel(numeric)


def _load_or_exit(path: Path) -> LoadResult:
    try:
        return load_file(path)
    except LimbscanError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)


@app.command("detect")
def detect_cmd(
    file: Path = typer.Argument(..., exists=True, readable=True, help="Upload to inspect."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Print which parser a file would be routed to."""

    _configure_logging(log_level)
    try:
        upload = detect_upload(file)
    except LimbscanError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    if upload is UploadKind.IMAGE:
        typer.echo("image")
        return
    typer.echo(detect(decode_text(file.read_bytes())).value)


@app.command("classify")
def classify_cmd(
    file: Path = typer.Argument(..., exists=True, readable=True, help="Point cloud (.ply/.pcd/.xyz/.txt) or image."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Guess which limb a scan shows."""

    _configure_logging(log_level)
    result = _load_or_exit(file)
    cls = result.classification
    typer.echo(result.describe())
    typer.echo(f"Guess: {cls.summary()}")
    if cls.bbox is not None:
        typer.echo(f"Bounding box (m): length={cls.bbox.length} width={cls.bbox.width} depth={cls.bbox.depth}")


@app.command("export")
def export_cmd(
    file: Path = typer.Argument(..., exists=True, readable=True, help="Point cloud to export."),
    fmt: str = typer.Option("stl", "--format", "-f", help="Export format: obj, ply or stl."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file or directory (default: limb.<ext> in the cwd)."),
    max_neighbors: int = typer.Option(12, "--max-neighbors", help="Neighbours per triangle fan (STL only)."),
    max_points: Optional[int] = typer.Option(None, "--max-points", help="Downsample to this many points before meshing (STL only)."),
    date_stamp: bool = typer.Option(False, "--date-stamp", help="Name the default output limb_<date>.<ext>."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Export a point cloud as OBJ, PLY or binary STL."""

    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise typer.BadParameter(f"format must be one of {list(EXPORT_FORMATS)}.", param_hint="--format")
    if max_neighbors < 1:
        raise typer.BadParameter("max_neighbors must be >= 1.", param_hint="--max-neighbors")
    if max_points is not None and max_points < 3:
        raise typer.BadParameter("max_points must be >= 3.", param_hint="--max-points")
    _configure_logging(log_level)

    target = (output or Path.cwd()).resolve()
    try:
        filename = output_filename(target, fmt)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--output")
    if filename is None:
        target.mkdir(parents=True, exist_ok=True)

    result = _load_or_exit(file)
    try:
        payload = export_cloud(
            result.data,
            fmt,
            filename=filename,
            max_neighbors=max_neighbors,
            max_points=max_points,
            stamp=date.today() if date_stamp else None,
        )
    except LimbscanError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    path = write_payload(payload, target)
    typer.echo(f"Exported {result.describe()} → {path}")


@app.command("run")
def run_cmd(
    config: Path = typer.Argument(..., exists=True, readable=True, help="Path to YAML configuration file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (overrides the config)."),
) -> None:
    """Run a load → classify → export pipeline from a YAML config."""

    cfg = load_config(config)
    _configure_logging(log_level or cfg.log_level)
    try:
        result = run_from_config(cfg)
    except LimbscanError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Guess: {result.load.classification.summary()}")
    typer.echo(f"Exported {result.load.describe()} → {result.output_path}")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
