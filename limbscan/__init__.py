"""limbscan – point-cloud ingest, limb classification and 3-D export.

This package contains:
- Point3 / PointCloud / Mesh value types (core.pointcloud)
- Format detection and ASCII PLY / PCD / XYZ parsers (core.formats, core.parsers)
- Bounding-box limb classifier (core.classifier)
- Nearest-neighbour triangle-fan mesher (core.mesher)
- OBJ / PLY / binary STL encoders (core.exporter)
- Load/export pipeline (sdk.run) and a typer CLI (cli.main)
"""

from .core.pointcloud import (Point3, PointCloud, Triangle, Mesh,
                              DepthImage, PointCloudData, LoadedData)
from .core.errors import LimbscanError, FormatUnrecognized, ParseEmpty, NoPointCloudLoaded
from .core.formats import FormatKind, detect
from .core.parsers import parse, parse_ply, parse_pcd, parse_xyz
from .core.classifier import (ClassificationResult, BoundingBox,
                              classify_point_cloud, classify_from_image)
from .core.mesher import build_mesh, downsample
from .core.exporter import ExportPayload, encode_obj, encode_ply, encode_stl
from .core.utils import triangle_normal
from .sdk.run import load_text, load_image, load_file, export_cloud, run_from_config
