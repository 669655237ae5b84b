from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Literal, NamedTuple, Sequence, Union
import numpy as np

from .utils import triangle_normal


class Point3(NamedTuple):
    x: float
    y: float
    z: float


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class PointCloud:
    """Ordered point samples; row order is the order they appeared in the source."""
    xyz: np.ndarray                       # (N, 3) float64, read-only

    def __post_init__(self) -> None:
        xyz = np.asarray(self.xyz, dtype=np.float64)
        if xyz.size == 0:
            xyz = xyz.reshape(0, 3)
        if xyz.ndim != 2 or xyz.shape[1] != 3:
            raise ValueError(f"PointCloud expects an (N, 3) array, got shape {xyz.shape}")
        object.__setattr__(self, "xyz", _frozen(xyz))

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "PointCloud":
        rows = [tuple(p) for p in points]
        return cls(np.asarray(rows, dtype=np.float64).reshape(-1, 3))

    def __len__(self) -> int:
        return len(self.xyz)

    def __iter__(self) -> Iterator[Point3]:
        for x, y, z in self.xyz:
            yield Point3(float(x), float(y), float(z))

    def __getitem__(self, i: int) -> Point3:
        x, y, z = self.xyz[i]
        return Point3(float(x), float(y), float(z))

    @property
    def is_empty(self) -> bool:
        return len(self.xyz) == 0


@dataclass(frozen=True)
class Triangle:
    v1: Point3
    v2: Point3
    v3: Point3

    @property
    def normal(self) -> Point3:
        n = triangle_normal(self.v1, self.v2, self.v3)
        return Point3(float(n[0]), float(n[1]), float(n[2]))

    @property
    def vertices(self) -> tuple[Point3, Point3, Point3]:
        return (self.v1, self.v2, self.v3)


@dataclass(frozen=True, eq=False)
class Mesh:
    """Triangle soup; triangles may overlap and share no topology."""
    triangles: np.ndarray                 # (M, 3, 3) float64, read-only

    def __post_init__(self) -> None:
        tris = np.asarray(self.triangles, dtype=np.float64)
        if tris.size == 0:
            tris = tris.reshape(0, 3, 3)
        if tris.ndim != 3 or tris.shape[1:] != (3, 3):
            raise ValueError(f"Mesh expects an (M, 3, 3) array, got shape {tris.shape}")
        object.__setattr__(self, "triangles", _frozen(tris))

    @classmethod
    def empty(cls) -> "Mesh":
        return cls(np.zeros((0, 3, 3), dtype=np.float64))

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        for tri in self.triangles:
            yield Triangle(*(Point3(float(v[0]), float(v[1]), float(v[2])) for v in tri))


@dataclass(frozen=True)
class DepthImage:
    """Decoded image upload; pixels are passed through untouched."""
    width: int
    height: int
    pixels: bytes = field(repr=False)
    kind: Literal["image"] = "image"


@dataclass(frozen=True)
class PointCloudData:
    cloud: PointCloud
    kind: Literal["pointcloud"] = "pointcloud"


LoadedData = Union[DepthImage, PointCloudData]
