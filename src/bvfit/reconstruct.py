"""
Materialise a bounding volume as a box shape plus its placement.

The rounding of an RSS, the sphere covering of a kIOS and the diagonal slabs
of a KDOP have no box counterpart and are dropped.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
import trimesh

from bvfit.shapes import Box
from bvfit.transforms import RigidTransform
from bvfit.volumes import AABB, KDOP, KIOS, OBB, OBBRSS, RSS, BoundingVolume

logger = logging.getLogger(__name__)


def construct_box(
    bv: BoundingVolume,
    tf_bv: Optional[RigidTransform] = None,
) -> Tuple[Box, RigidTransform]:
    """Return ``(box, tf)`` such that ``box`` placed by ``tf`` matches ``bv``.

    Without ``tf_bv`` the volume's fields are taken as world coordinates.
    With ``tf_bv`` they are local to that frame and the returned placement is
    ``tf_bv ∘ local_placement``.
    """
    box, local = _local_box(bv)
    if tf_bv is None:
        return box, local
    return box, tf_bv.compose(local)


def box_mesh(box: Box, tf: RigidTransform) -> trimesh.Trimesh:
    """Triangle mesh of ``box`` placed by ``tf``."""
    return trimesh.creation.box(extents=box.side, transform=tf.as_matrix())


def bounding_volume_mesh(
    bv: BoundingVolume,
    tf_bv: Optional[RigidTransform] = None,
) -> trimesh.Trimesh:
    """Box mesh of a bounding volume, e.g. for rendering a tree node."""
    box, tf = construct_box(bv, tf_bv)
    if not np.all(np.isfinite(box.side)):
        logger.debug("Bounding volume %s is unbounded; mesh will not be finite", type(bv).__name__)
    return box_mesh(box, tf)


def _local_box(bv: BoundingVolume) -> Tuple[Box, RigidTransform]:
    if isinstance(bv, AABB):
        return Box(bv.max_ - bv.min_), RigidTransform.from_translation(bv.center)
    if isinstance(bv, OBB):
        return _obb_box(bv)
    if isinstance(bv, (OBBRSS, KIOS)):
        return _obb_box(bv.obb)
    if isinstance(bv, RSS):
        return Box([bv.width, bv.height, bv.depth]), RigidTransform(bv.axes, bv.center)
    if isinstance(bv, KDOP):
        return Box([bv.width, bv.height, bv.depth]), RigidTransform.from_translation(bv.center)
    raise TypeError(f"Cannot construct a box from {type(bv).__name__}")


def _obb_box(obb: OBB) -> Tuple[Box, RigidTransform]:
    return Box(obb.extent * 2.0), RigidTransform(obb.axes, obb.center)
