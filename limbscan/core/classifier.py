from __future__ import annotations
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple
import math
import numpy as np

from .pointcloud import PointCloud
from .utils import get_logger

_log = get_logger()

# (exclusive upper bound on length in metres, label, base confidence),
# evaluated in order; the first bound the length falls under wins.
THRESHOLDS: Tuple[Tuple[float, str, float], ...] = (
    (0.06, "finger", 0.45),
    (0.25, "hand", 0.60),
    (0.55, "forearm", 0.80),
    (0.9, "upper arm", 0.60),
    (math.inf, "leg", 0.70),
)

# Longest extent above this is taken to be in millimetres.
MILLIMETRE_THRESHOLD = 5.0

SLENDER_RATIO = 0.25
SLENDER_BOOST = 0.15
BLOBBY_RATIO = 0.6
BLOBBY_PENALTY = 0.2
MAX_DENSITY_BOOST = 0.15

IMAGE_LABEL = "unknown (image)"
IMAGE_CONFIDENCE = 0.2


@dataclass(frozen=True)
class BoundingBox:
    length: float
    width: float
    depth: float


@dataclass(frozen=True)
class ClassificationResult:
    label: str
    confidence: float
    point_count: int
    bbox: Optional[BoundingBox] = None

    def summary(self) -> str:
        return f"{self.label} — {round(self.confidence * 100)}%"


def _clamp(v: float) -> float:
    return min(1.0, max(0.0, v))


def _round_half_up(v: float, places: int) -> float:
    # Ties on the exact binary value go away from zero, like toFixed.
    return float(Decimal(v).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def label_for_length(length_m: float) -> Tuple[str, float]:
    for upper, label, confidence in THRESHOLDS:
        if length_m < upper:
            return label, confidence
    # Only reachable for NaN lengths.
    return THRESHOLDS[-1][1], THRESHOLDS[-1][2]


def classify_point_cloud(cloud: PointCloud) -> ClassificationResult:
    """Guess which limb a cloud shows from its axis-aligned extents.

    The longest extent drives the label; clouds longer than 5 units are assumed
    to be in millimetres. Thin shapes gain confidence, blobby ones lose it, and
    denser clouds get a small boost. Confidence stays within [0, 1] after each
    adjustment.
    """
    n = len(cloud)
    if n == 0:
        return ClassificationResult(label="unknown", confidence=0.0, point_count=0)

    extents = cloud.xyz.max(axis=0) - cloud.xyz.min(axis=0)
    ordered = np.sort(extents)
    longest = float(ordered[2])
    scale = 1000.0 if longest > MILLIMETRE_THRESHOLD else 1.0
    length_m = longest / scale
    width_m = float(ordered[0]) / scale
    depth_m = float(ordered[1]) / scale

    label, confidence = label_for_length(length_m)

    if length_m > 0:
        ratio = width_m / length_m
        if ratio < SLENDER_RATIO:
            confidence = _clamp(confidence + SLENDER_BOOST)
        if ratio > BLOBBY_RATIO:
            confidence = _clamp(confidence - BLOBBY_PENALTY)

    density = min(MAX_DENSITY_BOOST, math.log10(max(1, n)) / 10)
    confidence = _clamp(confidence + density)

    result = ClassificationResult(
        label=label,
        confidence=_round_half_up(confidence, 2),
        point_count=n,
        bbox=BoundingBox(
            length=_round_half_up(length_m, 3),
            width=_round_half_up(width_m, 3),
            depth=_round_half_up(depth_m, 3),
        ),
    )
    _log.debug("Classified %d points (scale 1/%g) as %s", n, scale, result.summary())
    return result


def classify_from_image(width: int, height: int) -> ClassificationResult:
    """Placeholder result for depth images; pixel content is never inspected."""
    return ClassificationResult(
        label=IMAGE_LABEL,
        confidence=IMAGE_CONFIDENCE,
        point_count=0,
        bbox=BoundingBox(length=float(width), width=float(height), depth=0.0),
    )
