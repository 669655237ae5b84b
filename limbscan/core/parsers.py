from __future__ import annotations
import math
import re
from typing import Callable, Dict, List, Optional, Tuple

from .errors import ParseEmpty
from .formats import FormatKind, detect
from .pointcloud import PointCloud
from .utils import get_logger

_log = get_logger()

_LINE_BREAK = re.compile(r"\r?\n")
_LEADING_INT = re.compile(r"[+-]?\d+")
_ALPHA = re.compile(r"[A-Za-z]")

Row = Tuple[float, float, float]


def _lines(text: str) -> List[str]:
    return _LINE_BREAK.split(text)


def _number(token: str) -> Optional[float]:
    """Parse a plain decimal/exponent token; anything else (incl. nan/inf) is None."""
    if "_" in token:
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _numbers(tokens: List[str]) -> List[float]:
    out: List[float] = []
    for tok in tokens:
        v = _number(tok)
        if v is not None:
            out.append(v)
    return out


def _leading_int(token: str) -> int:
    m = _LEADING_INT.match(token)
    return int(m.group(0)) if m else 0


def _finish(points: List[Row], kind: FormatKind, skipped: int) -> PointCloud:
    if not points:
        raise ParseEmpty(kind)
    _log.debug("Parsed %d points as %s (%d rows skipped)", len(points), kind.value.upper(), skipped)
    return PointCloud.from_points(points)


def parse_ply(text: str) -> PointCloud:
    """Read the vertex block of an ASCII PLY file.

    Only ``x y z`` (the first three columns) are taken from each vertex row.
    Blank lines inside the vertex block do not count towards the declared
    vertex total; short or non-numeric rows do count but yield no point.
    """
    lines = _lines(text)
    i = 0
    while i < len(lines) and not lines[i].strip():
        i += 1
    if i >= len(lines) or not lines[i].strip().startswith("ply"):
        raise ParseEmpty(FormatKind.PLY)
    i += 1

    expected = 0
    while i < len(lines):
        line = lines[i].strip()
        i += 1
        if line.startswith("element vertex"):
            parts = line.split()
            expected = _leading_int(parts[2]) if len(parts) > 2 else 0
        if line == "end_header":
            break

    points: List[Row] = []
    consumed = 0
    skipped = 0
    while consumed < expected and i < len(lines):
        row = lines[i].strip()
        i += 1
        if not row:
            continue
        consumed += 1
        parts = row.split()
        if len(parts) < 3:
            skipped += 1
            continue
        x, y, z = (_number(t) for t in parts[:3])
        if x is None or y is None or z is None:
            skipped += 1
            continue
        points.append((x, y, z))
    return _finish(points, FormatKind.PLY, skipped)


def parse_pcd(text: str) -> PointCloud:
    """Read the data section of an ASCII PCD file.

    ``FIELDS`` decides which columns hold x, y and z when it names all three;
    otherwise the first three numeric columns are used.
    """
    lines = _lines(text)
    fields: List[str] = []
    # Without a DATA line every row is treated as data.
    data_start = 0
    for idx, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        key = parts[0].lower()
        if key == "fields":
            fields = parts[1:]
        if key == "data":
            data_start = idx + 1
            break

    columns = (0, 1, 2)
    if len(fields) >= 3 and all(name in fields for name in ("x", "y", "z")):
        columns = (fields.index("x"), fields.index("y"), fields.index("z"))

    points: List[Row] = []
    skipped = 0
    for raw in lines[data_start:]:
        line = raw.strip()
        if not line:
            continue
        vals = _numbers(line.split())
        if len(vals) < 3 or max(columns) >= len(vals):
            skipped += 1
            continue
        points.append((vals[columns[0]], vals[columns[1]], vals[columns[2]]))
    return _finish(points, FormatKind.PCD, skipped)


def parse_xyz(text: str) -> PointCloud:
    points: List[Row] = []
    skipped = 0
    for raw in _lines(text):
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        # comments and label rows
        if line.startswith("#") or _ALPHA.search(parts[0]):
            skipped += 1
            continue
        vals = _numbers(parts)
        if len(vals) >= 3:
            points.append((vals[0], vals[1], vals[2]))
        else:
            skipped += 1
    return _finish(points, FormatKind.XYZ, skipped)


_PARSERS: Dict[FormatKind, Callable[[str], PointCloud]] = {
    FormatKind.PLY: parse_ply,
    FormatKind.PCD: parse_pcd,
    FormatKind.XYZ: parse_xyz,
}


def parse(text: str, kind: Optional[FormatKind] = None) -> PointCloud:
    """Parse ``text`` with the parser for ``kind`` (detected when omitted)."""
    if kind is None:
        kind = detect(text)
    return _PARSERS[FormatKind(kind)](text)
