from __future__ import annotations
from enum import Enum
from pathlib import Path
import re

from .errors import FormatUnrecognized

_PCD_VERSION = re.compile(r"pcd\s+v?\d")

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg")
POINTCLOUD_SUFFIXES = (".ply", ".pcd", ".xyz", ".txt")


class FormatKind(str, Enum):
    PLY = "ply"
    PCD = "pcd"
    XYZ = "xyz"


class UploadKind(str, Enum):
    IMAGE = "image"
    POINTCLOUD = "pointcloud"


def detect(text: str) -> FormatKind:
    """Pick a point-cloud parser from the leading content of ``text``.

    PLY wins when the text opens with ``ply``; PCD when it opens with a
    ``# .PCD`` comment or a ``pcd v<digit>`` marker shows up in the first
    200 characters; anything else is treated as bare XYZ rows.
    """
    trimmed = text.strip()
    if trimmed.startswith("ply"):
        return FormatKind.PLY
    lowered = trimmed.lower()
    if lowered.startswith("# .pcd") or _PCD_VERSION.search(lowered[:200]):
        return FormatKind.PCD
    return FormatKind.XYZ


def decode_text(raw: bytes) -> str:
    """Decode an uploaded text file; a UTF-8 BOM is dropped and bad bytes become U+FFFD."""
    return raw.decode("utf-8-sig", errors="replace")


def detect_upload(path: str | Path) -> UploadKind:
    suffix = Path(path).suffix.lower()
    if suffix in IMAGE_SUFFIXES:
        return UploadKind.IMAGE
    if suffix in POINTCLOUD_SUFFIXES:
        return UploadKind.POINTCLOUD
    raise FormatUnrecognized()
