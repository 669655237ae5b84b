from __future__ import annotations
from typing import Optional
import numpy as np

from .pointcloud import Mesh, PointCloud
from .utils import get_logger

_log = get_logger()

DEFAULT_MAX_NEIGHBORS = 12


def downsample(cloud: PointCloud, max_points: Optional[int]) -> PointCloud:
    """Uniform-stride subsample keeping source order; no-op within budget."""
    n = len(cloud)
    if max_points is None or n <= max_points:
        return cloud
    if max_points < 3:
        raise ValueError("max_points must be at least 3")
    idx = np.linspace(0, n - 1, num=max_points).round().astype(np.int64)
    idx = np.unique(idx)
    _log.warning("Downsampling %d points to %d before meshing", n, len(idx))
    return PointCloud(cloud.xyz[idx])


def build_mesh(cloud: PointCloud, max_neighbors: int = DEFAULT_MAX_NEIGHBORS) -> Mesh:
    """Approximate a surface with one triangle fan per point.

    Each point is joined to consecutive pairs of its nearest neighbours
    (Euclidean, ties broken by source order). Fans from different points are
    independent, so the result overlaps and double-covers freely. Cost is
    O(n^2 log n); downsample large clouds first.
    """
    if max_neighbors < 1:
        raise ValueError("max_neighbors must be >= 1")
    xyz = cloud.xyz
    n = len(xyz)
    if n < 3:
        return Mesh.empty()

    window = min(max_neighbors, n - 1)
    fans = []
    for i in range(n):
        dist = np.sqrt(np.sum((xyz - xyz[i]) ** 2, axis=1))
        order = np.argsort(dist, kind="stable")
        # Sorted position 0 is the point itself (or an exact duplicate ahead of it).
        nb = order[1:window + 1]
        if len(nb) < 2:
            continue
        tri = np.empty((len(nb) - 1, 3, 3), dtype=np.float64)
        tri[:, 0] = xyz[i]
        tri[:, 1] = xyz[nb[:-1]]
        tri[:, 2] = xyz[nb[1:]]
        fans.append(tri)

    if not fans:
        return Mesh.empty()
    mesh = Mesh(np.concatenate(fans, axis=0))
    _log.debug("Built %d triangles from %d points (k=%d)", len(mesh), n, max_neighbors)
    return mesh
