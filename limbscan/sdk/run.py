from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Union
import io

from PIL import Image, UnidentifiedImageError

from ..config import PipelineConfig, load_config
from ..core.classifier import ClassificationResult, classify_from_image, classify_point_cloud
from ..core.errors import FormatUnrecognized, NoPointCloudLoaded
from ..core.exporter import (
    EXPORT_FORMATS,
    ExportPayload,
    default_filename,
    encode_obj,
    encode_ply,
    encode_stl,
    media_type,
    output_filename,
    write_payload,
)
from ..core.formats import FormatKind, UploadKind, decode_text, detect, detect_upload
from ..core.mesher import DEFAULT_MAX_NEIGHBORS, build_mesh, downsample
from ..core.parsers import parse
from ..core.pointcloud import DepthImage, LoadedData, PointCloudData
from ..core.utils import get_logger

_log = get_logger()


@dataclass(frozen=True)
class LoadResult:
    """An accepted upload together with its classification."""

    data: LoadedData
    classification: ClassificationResult
    format: Optional[FormatKind] = None

    def describe(self) -> str:
        if self.data.kind == "image":
            return f"Image {self.data.width}x{self.data.height}"
        if self.data.kind == "pointcloud":
            return f"Pointcloud {len(self.data.cloud)} points"
        raise TypeError(f"Unknown loaded data kind: {self.data.kind!r}")


@dataclass(frozen=True)
class RunResult:
    """Summary of a pipeline run driven by a configuration file."""

    load: LoadResult
    payload: ExportPayload
    output_path: Path
    config: PipelineConfig


def load_text(text: str) -> LoadResult:
    """Detect, parse and classify a point-cloud text buffer."""
    kind = detect(text)
    cloud = parse(text, kind)
    classification = classify_point_cloud(cloud)
    result = LoadResult(data=PointCloudData(cloud), classification=classification, format=kind)
    _log.info("Loaded %s (%s): %s", result.describe(), kind.value.upper(), classification.summary())
    return result


def load_image(width: int, height: int, pixels: bytes) -> LoadResult:
    """Accept a decoded image; only its dimensions feed the classifier."""
    if width <= 0 or height <= 0 or not pixels:
        raise FormatUnrecognized("Image could not be read as a valid LiDAR depth image.")
    data = DepthImage(width=int(width), height=int(height), pixels=bytes(pixels))
    result = LoadResult(data=data, classification=classify_from_image(width, height))
    _log.info("Loaded %s: %s", result.describe(), result.classification.summary())
    return result


def _decode_image(raw: bytes) -> LoadResult:
    try:
        with Image.open(io.BytesIO(raw)) as im:
            rgba = im.convert("RGBA")
            width, height = rgba.size
            pixels = rgba.tobytes()
    except (UnidentifiedImageError, OSError) as exc:
        raise FormatUnrecognized("Image could not be read as a valid LiDAR depth image.") from exc
    return load_image(width, height, pixels)


def load_file(path: Union[str, Path]) -> LoadResult:
    """Route a file on disk to the image or point-cloud path by its extension."""
    path = Path(path)
    upload = detect_upload(path)
    if upload is UploadKind.IMAGE:
        return _decode_image(path.read_bytes())
    return load_text(decode_text(path.read_bytes()))


def export_cloud(
    data: Optional[LoadedData],
    fmt: str,
    *,
    filename: Optional[str] = None,
    max_neighbors: int = DEFAULT_MAX_NEIGHBORS,
    max_points: Optional[int] = None,
    stamp: Optional[date] = None,
) -> ExportPayload:
    """Encode an accepted point cloud as OBJ, PLY or binary STL.

    Parameters
    ----------
    data:
        The loaded upload. Images and ``None`` raise :class:`NoPointCloudLoaded`.
    fmt:
        ``"obj"``, ``"ply"`` or ``"stl"``.
    filename:
        Name handed to the sink; defaults to ``limb.<ext>`` (or
        ``limb_<date>.<ext>`` when ``stamp`` is given).
    max_neighbors:
        Fan size per point for the STL mesh.
    max_points:
        Optional budget; larger clouds are downsampled before meshing.
    """
    if data is None or data.kind != "pointcloud":
        raise NoPointCloudLoaded()
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    cloud = data.cloud
    if fmt == "obj":
        body: Union[str, bytes] = encode_obj(cloud)
    elif fmt == "ply":
        body = encode_ply(cloud)
    else:
        mesh = build_mesh(downsample(cloud, max_points), max_neighbors=max_neighbors)
        body = encode_stl(mesh)
        _log.info("Meshed %d points into %d triangles", len(cloud), len(mesh))

    return ExportPayload(
        filename=filename or default_filename(fmt, stamp),
        media_type=media_type(fmt),
        data=body,
    )


def run_from_config(config: Union[str, Path, PipelineConfig]) -> RunResult:
    """Load the configured input, export it and write the payload to disk."""

    cfg = load_config(config) if not isinstance(config, PipelineConfig) else config.model_copy(deep=True)

    loaded = load_file(cfg.input)
    out = cfg.output
    target = Path(out.path) if out.path is not None else Path.cwd()
    filename = output_filename(target, out.format)
    payload = export_cloud(
        loaded.data,
        out.format,
        filename=filename,
        max_neighbors=cfg.mesh.max_neighbors,
        max_points=cfg.mesh.max_points,
        stamp=date.today() if out.date_stamp else None,
    )
    if filename is None:
        target.mkdir(parents=True, exist_ok=True)
    output_path = write_payload(payload, target)
    return RunResult(load=loaded, payload=payload, output_path=output_path, config=cfg)
