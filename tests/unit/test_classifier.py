import numpy as np
import pytest

from limbscan.core.classifier import (
    THRESHOLDS,
    classify_from_image,
    classify_point_cloud,
    label_for_length,
)
from limbscan.core.pointcloud import PointCloud


def _box(dx: float, dy: float, dz: float) -> PointCloud:
    return PointCloud.from_points([(0.0, 0.0, 0.0), (dx, dy, dz)])


def test_empty_cloud_is_unknown() -> None:
    result = classify_point_cloud(PointCloud.from_points([]))
    assert result.label == "unknown"
    assert result.confidence == 0.0
    assert result.point_count == 0
    assert result.bbox is None


def test_forearm_in_metres() -> None:
    result = classify_point_cloud(_box(0.5, 0.05, 0.05))
    assert result.label == "forearm"
    # 0.80 base + 0.15 slender + log10(2)/10 density
    assert result.confidence == pytest.approx(0.98)
    assert result.bbox is not None
    assert (result.bbox.length, result.bbox.width, result.bbox.depth) == (0.5, 0.05, 0.05)
    assert result.point_count == 2


def test_millimetre_input_matches_metre_input() -> None:
    metres = classify_point_cloud(_box(0.5, 0.05, 0.05))
    millis = classify_point_cloud(_box(500.0, 50.0, 50.0))
    assert millis.label == metres.label == "forearm"
    assert millis.bbox == metres.bbox
    assert millis.confidence == metres.confidence


def test_unit_switch_is_strictly_above_five() -> None:
    assert classify_point_cloud(_box(5.0, 0.1, 0.1)).label == "leg"
    assert classify_point_cloud(_box(5.001, 0.1, 0.1)).label == "finger"


def test_blobby_shape_loses_confidence() -> None:
    result = classify_point_cloud(_box(0.1, 0.1, 0.1))
    assert result.label == "hand"
    assert result.confidence == pytest.approx(0.43)


def test_single_point_is_a_finger_without_shape_adjustment() -> None:
    result = classify_point_cloud(PointCloud.from_points([(1.0, 2.0, 3.0)]))
    assert result.label == "finger"
    assert result.confidence == pytest.approx(0.45)
    assert result.bbox is not None and result.bbox.length == 0.0


def test_confidence_is_clamped_to_one() -> None:
    xs = np.linspace(0.0, 1.0, 100)
    cloud = PointCloud(np.column_stack([xs, np.zeros(100), np.zeros(100)]))
    result = classify_point_cloud(cloud)
    assert result.label == "leg"
    assert result.confidence == 1.0


def test_depth_is_the_median_extent() -> None:
    result = classify_point_cloud(_box(0.02, 0.3, 0.1))
    assert result.label == "forearm"
    assert result.bbox is not None
    assert (result.bbox.length, result.bbox.width, result.bbox.depth) == (0.3, 0.02, 0.1)


def test_bbox_ties_round_half_up() -> None:
    # 0.0625 is exact in binary; round() would give 0.062
    result = classify_point_cloud(_box(0.0625, 0.0, 0.0))
    assert result.label == "hand"
    assert result.bbox is not None
    assert result.bbox.length == 0.063


def test_threshold_table_is_ascending_and_exclusive() -> None:
    bounds = [b for b, _, _ in THRESHOLDS]
    assert bounds == sorted(bounds)
    assert label_for_length(0.0599) == ("finger", 0.45)
    assert label_for_length(0.06) == ("hand", 0.60)
    assert label_for_length(0.55) == ("upper arm", 0.60)
    assert label_for_length(0.9) == ("leg", 0.70)


def test_image_fallback_ignores_content() -> None:
    result = classify_from_image(640, 480)
    assert result.label == "unknown (image)"
    assert result.confidence == 0.2
    assert result.point_count == 0
    assert result.bbox is not None
    assert (result.bbox.length, result.bbox.width, result.bbox.depth) == (640, 480, 0)


def test_summary_matches_loader_display() -> None:
    assert classify_point_cloud(_box(0.5, 0.05, 0.05)).summary() == "forearm — 98%"
    assert classify_from_image(2, 2).summary() == "unknown (image) — 20%"
