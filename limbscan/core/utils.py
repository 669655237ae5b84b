from __future__ import annotations
import numpy as np
import logging
from typing import Sequence

# Returned for degenerate (zero-area) triangles.
FALLBACK_NORMAL = (0.0, 0.0, 1.0)

def get_logger(name: str = "limbscan") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

def subtract(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    return np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)

def cross(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    return np.cross(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))

def normalize(v: Sequence[float], fallback: Sequence[float] = FALLBACK_NORMAL) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64)
    norm = float(np.linalg.norm(v))
    if norm == 0.0 or not np.isfinite(norm):
        return np.asarray(fallback, dtype=np.float64)
    return v / norm

def triangle_normal(v1: Sequence[float], v2: Sequence[float], v3: Sequence[float]) -> np.ndarray:
    """Unit normal of (v2 - v1) x (v3 - v1); (0, 0, 1) for collinear vertices."""
    return normalize(cross(subtract(v2, v1), subtract(v3, v1)))

def triangle_normals(tris: np.ndarray) -> np.ndarray:
    """Vectorised :func:`triangle_normal` over an (M, 3, 3) array."""
    tris = np.asarray(tris, dtype=np.float64).reshape(-1, 3, 3)
    n = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    norms = np.linalg.norm(n, axis=1, keepdims=True)
    degenerate = (norms[:, 0] == 0.0) | ~np.isfinite(norms[:, 0])
    safe = np.where(degenerate[:, None], 1.0, norms)
    out = n / safe
    out[degenerate] = FALLBACK_NORMAL
    return out
