"""
Default point-set collaborators for the fitting engine.

``fit_obb`` fits an oriented box along the principal axes of a point set and
``complete_basis`` grows a single direction into a right-handed frame. Both
can be replaced through ``FittingConfig``.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from bvfit.volumes import OBB

logger = logging.getLogger(__name__)

PointFitter = Callable[[np.ndarray], OBB]
BasisCompleter = Callable[[np.ndarray], np.ndarray]


def fit_obb(points: np.ndarray) -> OBB:
    """Fit an OBB to ``points`` using the SVD of the centered point set.

    Extents and center come from the projections onto the principal axes, so
    every input point lies inside the returned box.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    if len(pts) == 0:
        raise ValueError("Cannot fit an OBB to an empty point set")

    centroid = np.mean(pts, axis=0)
    centered = pts - centroid
    if len(pts) < 2 or not np.any(centered):
        logger.debug("Degenerate point set (%d points), using identity axes", len(pts))
        axes = np.eye(3)
    else:
        _, _, vh = np.linalg.svd(centered, full_matrices=True)
        axes = _right_handed(vh.T)

    local = centered @ axes
    lo = local.min(axis=0)
    hi = local.max(axis=0)
    center = centroid + axes @ (0.5 * (lo + hi))
    return OBB(center=center, axes=axes, extent=0.5 * (hi - lo))


def complete_basis(primary: np.ndarray) -> np.ndarray:
    """Right-handed orthonormal frame whose first column is ``primary``."""
    w = np.asarray(primary, dtype=float).reshape(3)
    w = w / np.linalg.norm(w)
    ref = np.array([0.0, 0.0, 1.0])
    if abs(float(np.dot(w, ref))) > 0.9:
        ref = np.array([1.0, 0.0, 0.0])
    u = np.cross(w, ref)
    u /= np.linalg.norm(u)
    v = np.cross(w, u)
    return np.column_stack([w, u, v])


def _right_handed(axes: np.ndarray) -> np.ndarray:
    a0 = axes[:, 0]
    a1 = axes[:, 1]
    return np.column_stack([a0, a1, np.cross(a0, a1)])
