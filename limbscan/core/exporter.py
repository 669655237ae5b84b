from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional, Union
import numpy as np
import pathlib

from .pointcloud import Mesh, PointCloud
from .utils import get_logger, triangle_normals

_log = get_logger()

ExportFormat = Literal["obj", "ply", "stl"]
EXPORT_FORMATS = ("obj", "ply", "stl")

STL_HEADER_BYTES = 80
STL_RECORD_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attr", "<u2"),
])                                        # 50 bytes, packed

_MEDIA_TYPES = {
    "obj": "text/plain",
    "ply": "text/plain",
    "stl": "application/octet-stream",
}


@dataclass(frozen=True)
class ExportPayload:
    """Encoded export ready for an external sink (disk, HTTP response, ...)."""
    filename: str
    media_type: str
    data: Union[str, bytes]

    def as_bytes(self) -> bytes:
        return self.data.encode("utf-8") if isinstance(self.data, str) else self.data


def default_filename(fmt: str, stamp: Optional[date] = None) -> str:
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    if stamp is None:
        return f"limb.{fmt}"
    return f"limb_{stamp.isoformat()}.{fmt}"


def output_filename(target: Union[str, pathlib.Path], fmt: str) -> Optional[str]:
    """Filename part of ``target`` when it names an export file, else None.

    Only an export suffix (.obj/.ply/.stl) marks a file; anything else,
    e.g. ``scans.v2``, is a directory. A suffix that disagrees with ``fmt``
    raises ``ValueError``.
    """
    path = pathlib.Path(target)
    ext = path.suffix.lower().lstrip(".")
    if ext not in EXPORT_FORMATS:
        return None
    if ext != fmt.lower():
        raise ValueError(f"output path suffix '.{ext}' does not match format '{fmt.lower()}'")
    return path.name


def _fmt(v: float) -> str:
    # +0.0 folds negative zero so it prints as 0.000000
    return f"{float(v) + 0.0:.6f}"


def _xyz_rows(cloud: PointCloud, prefix: str = "") -> list[str]:
    return [f"{prefix}{_fmt(x)} {_fmt(y)} {_fmt(z)}" for x, y, z in cloud.xyz]


def encode_obj(cloud: PointCloud) -> str:
    """Vertex-only Wavefront OBJ."""
    lines = [
        "# Exported LiDAR Point Cloud",
        f"# Points: {len(cloud)}",
        "",
    ]
    lines.extend(_xyz_rows(cloud, prefix="v "))
    return "\n".join(lines) + "\n"


def encode_ply(cloud: PointCloud) -> str:
    lines = [
        "ply",
        "format ascii 1.0",
        f"element vertex {len(cloud)}",
        "property float x",
        "property float y",
        "property float z",
        "end_header",
    ]
    lines.extend(_xyz_rows(cloud))
    return "\n".join(lines) + "\n"


def encode_stl(mesh: Mesh) -> bytes:
    """Binary STL.

    Layout (little-endian): 80 zero header bytes, uint32 triangle count, then
    per triangle float32 normal[3], v1[3], v2[3], v3[3] and a uint16 zero
    attribute count. Normals are recomputed from the vertices.
    """
    tris = mesh.triangles
    records = np.zeros(len(tris), dtype=STL_RECORD_DTYPE)
    if len(tris):
        records["normal"] = triangle_normals(tris)
        records["vertices"] = tris
    head = bytes(STL_HEADER_BYTES) + np.array([len(tris)], dtype="<u4").tobytes()
    return head + records.tobytes()


def write_payload(payload: ExportPayload, target: Union[str, pathlib.Path]) -> pathlib.Path:
    """Write ``payload`` to ``target``; a directory target gets ``payload.filename``."""
    path = pathlib.Path(target)
    if path.is_dir():
        path = path / payload.filename
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(payload.data, bytes):
        path.write_bytes(payload.data)
    else:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(payload.data)
    _log.info("Wrote %s (%d bytes)", path.name, len(payload.as_bytes()))
    return path


def media_type(fmt: str) -> str:
    return _MEDIA_TYPES[fmt.lower()]
