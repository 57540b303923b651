"""
Finite point envelopes for bounded shapes.

The convex hull of the returned points contains the shape. Curved surfaces
are bounded by circumscribed polytopes: icosahedra whose in-radius equals the
sphere radius and hexagons whose in-radius equals the disc radius.
"""

from __future__ import annotations

import math
from functools import singledispatch

import numpy as np

from bvfit.shapes import (
    Box,
    Capsule,
    Cone,
    Convex,
    Cylinder,
    Ellipsoid,
    Sphere,
    TriangleP,
)
from bvfit.transforms import RigidTransform

GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0

# Scale turning an icosahedron with vertices (0, ±1, ±φ) into one whose
# in-radius is 1.
_ICOSA_UNIT_EDGE = 6.0 / (math.sqrt(27.0) + math.sqrt(15.0))


def _icosahedron(scale: float) -> np.ndarray:
    """Icosahedron circumscribing a sphere of radius ``scale``."""
    a = scale * _ICOSA_UNIT_EDGE
    b = GOLDEN_RATIO * a
    return np.array([
        [0, a, b], [0, -a, b], [0, a, -b], [0, -a, -b],
        [a, b, 0], [-a, b, 0], [a, -b, 0], [-a, -b, 0],
        [b, 0, a], [b, 0, -a], [-b, 0, a], [-b, 0, -a],
    ], dtype=float)


def _hexagon(radius: float, z: float) -> np.ndarray:
    """Hexagon in the plane at height ``z`` circumscribing a disc of ``radius``."""
    r2 = radius * 2.0 / math.sqrt(3.0)
    a = 0.5 * r2
    b = radius
    return np.array([
        [r2, 0, z], [a, b, z], [-a, b, z],
        [-r2, 0, z], [-a, -b, z], [a, -b, z],
    ], dtype=float)


@singledispatch
def bound_vertices(shape, tf: RigidTransform) -> np.ndarray:
    """Return world-space envelope vertices of ``shape`` placed by ``tf`` as (N, 3)."""
    raise TypeError(f"No vertex envelope for {type(shape).__name__}")


@bound_vertices.register
def _(shape: Box, tf: RigidTransform) -> np.ndarray:
    a, b, c = shape.half_extents
    local = np.array([
        [a, b, c], [a, b, -c], [a, -b, c], [a, -b, -c],
        [-a, b, c], [-a, b, -c], [-a, -b, c], [-a, -b, -c],
    ], dtype=float)
    return tf.apply(local)


@bound_vertices.register
def _(shape: Sphere, tf: RigidTransform) -> np.ndarray:
    return tf.apply(_icosahedron(shape.radius))


@bound_vertices.register
def _(shape: Ellipsoid, tf: RigidTransform) -> np.ndarray:
    # Affine image of the unit circumscribed icosahedron.
    return tf.apply(_icosahedron(1.0) * shape.radii)


@bound_vertices.register
def _(shape: Capsule, tf: RigidTransform) -> np.ndarray:
    hl = shape.half_length
    cap = _icosahedron(shape.radius)
    top = cap + np.array([0.0, 0.0, hl])
    bottom = cap - np.array([0.0, 0.0, hl])
    local = np.vstack([top, bottom, _hexagon(shape.radius, hl), _hexagon(shape.radius, -hl)])
    return tf.apply(local)


@bound_vertices.register
def _(shape: Cone, tf: RigidTransform) -> np.ndarray:
    hl = shape.half_length
    local = np.vstack([_hexagon(shape.radius, -hl), [[0.0, 0.0, hl]]])
    return tf.apply(local)


@bound_vertices.register
def _(shape: Cylinder, tf: RigidTransform) -> np.ndarray:
    hl = shape.half_length
    local = np.vstack([_hexagon(shape.radius, -hl), _hexagon(shape.radius, hl)])
    return tf.apply(local)


@bound_vertices.register
def _(shape: Convex, tf: RigidTransform) -> np.ndarray:
    return tf.apply(shape.points)


@bound_vertices.register
def _(shape: TriangleP, tf: RigidTransform) -> np.ndarray:
    return tf.apply(shape.points)
