from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .formats import FormatKind


class LimbscanError(ValueError):
    """Base class for user-facing ingest/export failures."""


class FormatUnrecognized(LimbscanError):
    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or "Unrecognized file extension. Please select a PNG/JPG image or ASCII point-cloud (.ply/.pcd/.xyz)."
        )


_EMPTY_MESSAGES = {
    "ply": "PLY file parsed but contains no vertex data.",
    "pcd": "PCD file parsed but contains no point data.",
    "xyz": "No point data found in file. Please select a valid ASCII point-cloud (.ply/.pcd/.xyz) or an image.",
}


class ParseEmpty(LimbscanError):
    """A parser ran to completion but produced zero points."""

    def __init__(self, kind: "FormatKind") -> None:
        self.kind = kind
        super().__init__(_EMPTY_MESSAGES[kind.value])


class NoPointCloudLoaded(LimbscanError):
    def __init__(self) -> None:
        super().__init__("No point-cloud loaded. Please upload a point-cloud file first.")
