import dataclasses

import numpy as np
import pytest

from limbscan.core.pointcloud import DepthImage, Mesh, Point3, PointCloud, PointCloudData, Triangle
from limbscan.core.utils import triangle_normal, triangle_normals


def test_pointcloud_is_read_only_and_ordered() -> None:
    cloud = PointCloud.from_points([(3, 2, 1), (0, 0, 0)])
    assert list(cloud) == [Point3(3.0, 2.0, 1.0), Point3(0.0, 0.0, 0.0)]
    with pytest.raises(ValueError):
        cloud.xyz[0, 0] = 9.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        cloud.xyz = np.zeros((1, 3))  # type: ignore[misc]


def test_pointcloud_copies_its_input() -> None:
    src = np.zeros((2, 3))
    cloud = PointCloud(src)
    src[0, 0] = 5.0
    assert cloud.xyz[0, 0] == 0.0


def test_pointcloud_rejects_bad_shapes() -> None:
    with pytest.raises(ValueError):
        PointCloud(np.zeros((2, 2)))
    assert PointCloud.from_points([]).is_empty
    assert PointCloud.from_points([]).xyz.shape == (0, 3)


def test_mesh_iterates_triangles() -> None:
    mesh = Mesh(np.array([[(0, 0, 0), (1, 0, 0), (0, 1, 0)]], dtype=float))
    tris = list(mesh)
    assert tris == [Triangle(Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0))]
    assert tris[0].normal == Point3(0.0, 0.0, 1.0)


def test_normal_follows_winding() -> None:
    np.testing.assert_allclose(triangle_normal((0, 0, 0), (0, 1, 0), (1, 0, 0)), [0, 0, -1])
    np.testing.assert_allclose(triangle_normal((0, 0, 0), (0, 3, 0), (0, 0, 3)), [1, 0, 0])


def test_normal_of_collinear_points_is_fallback() -> None:
    np.testing.assert_array_equal(triangle_normal((0, 0, 0), (1, 1, 1), (2, 2, 2)), [0, 0, 1])
    np.testing.assert_array_equal(triangle_normal((1, 1, 1), (1, 1, 1), (1, 1, 1)), [0, 0, 1])


def test_vectorised_normals_match_scalar() -> None:
    rng = np.random.default_rng(1)
    tris = rng.normal(size=(8, 3, 3))
    tris[3] = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
    expected = np.array([triangle_normal(*t) for t in tris])
    np.testing.assert_allclose(triangle_normals(tris), expected, atol=1e-12)


def test_loaded_data_variants_are_tagged() -> None:
    img = DepthImage(width=2, height=1, pixels=b"\x00" * 8)
    pc = PointCloudData(PointCloud.from_points([(0, 0, 0)]))
    assert img.kind == "image"
    assert pc.kind == "pointcloud"
