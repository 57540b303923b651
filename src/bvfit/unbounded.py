"""Placement of half-spaces and planes under a rigid transform."""

from __future__ import annotations

from typing import TypeVar

import numpy as np

from bvfit.shapes import Halfspace, Plane, UnboundedShape
from bvfit.transforms import RigidTransform

PlanarT = TypeVar("PlanarT", Halfspace, Plane)


def transform_unbounded(shape: PlanarT, tf: RigidTransform) -> PlanarT:
    """Move ``n . x (<=|=) d`` into the frame of ``tf``.

    With x' = R x + T the constraint becomes n' . x' (<=|=) d' where
    n' = R n and d' = d + n' . T. R is orthonormal, so the normal needs no
    inverse-transpose.
    """
    if not isinstance(shape, (Halfspace, Plane)):
        raise TypeError(f"Expected Halfspace or Plane, got {type(shape).__name__}")
    n = tf.rotation @ shape.n
    d = shape.d + float(np.dot(n, tf.translation))
    return type(shape)(n, d)


def transform_halfspace(shape: Halfspace, tf: RigidTransform) -> Halfspace:
    return transform_unbounded(shape, tf)


def transform_plane(shape: Plane, tf: RigidTransform) -> Plane:
    return transform_unbounded(shape, tf)


def anchor_point(shape: UnboundedShape) -> np.ndarray:
    """The point of the boundary plane closest to the origin (n * d)."""
    return shape.n * shape.d
