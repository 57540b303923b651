"""
Bounding-volume fitting for shapes placed by a rigid transform.

Each (bounding-volume family, shape type) pair has its own closed-form rule,
registered in a lookup table that covers every pair of BV_TYPES x SHAPE_TYPES.
Results always contain the transformed shape. They are exact for boxes,
spheres, triangles and convex point sets and a conservative over-approximation
for the remaining shapes.

Half-spaces and planes only get a finite bound along a slab direction that the
transformed normal is exactly parallel to; any other orientation leaves the
AABB/KDOP unbounded on every slab. The tight box of a half-space is unbounded
along the other directions anyway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

import numpy as np

from bvfit.principal_axes import BasisCompleter, PointFitter, complete_basis, fit_obb
from bvfit.shapes import (
    Box,
    Capsule,
    Cone,
    Convex,
    Cylinder,
    Ellipsoid,
    Halfspace,
    Plane,
    Sphere,
    TriangleP,
)
from bvfit.transforms import RigidTransform
from bvfit.unbounded import anchor_point, transform_unbounded
from bvfit.vertices import bound_vertices
from bvfit.volumes import (
    AABB,
    KDOP,
    KDOP_TYPES,
    KIOS,
    OBB,
    OBBRSS,
    RSS,
    BoundingVolume,
    KIOSSphere,
)

logger = logging.getLogger(__name__)

NEAR_INFINITE = float(np.finfo(float).max)


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class FittingConfig:
    """Collaborators and constants used by the fitters."""
    point_fitter: PointFitter = fit_obb
    basis_completer: BasisCompleter = complete_basis
    # Extent used by OBB/RSS/kIOS for directions a shape does not bound.
    unbounded_extent: float = NEAR_INFINITE


DEFAULT_FITTING_CONFIG = FittingConfig()

Fitter = Callable[[type, object, RigidTransform, FittingConfig], BoundingVolume]

_FITTERS: Dict[Tuple[type, type], Fitter] = {}


def _fits(bv_types: Union[type, Iterable[type]], shape_types: Union[type, Iterable[type]]):
    """Register the decorated function for every (bv_type, shape_type) pair."""
    bv_list = [bv_types] if isinstance(bv_types, type) else list(bv_types)
    shape_list = [shape_types] if isinstance(shape_types, type) else list(shape_types)

    def decorator(func: Fitter) -> Fitter:
        for bv_type in bv_list:
            for shape_type in shape_list:
                _FITTERS[(bv_type, shape_type)] = func
        return func

    return decorator


def fit_bounding_volume(
    shape,
    tf: Optional[RigidTransform] = None,
    bv_type: type = AABB,
    config: Optional[FittingConfig] = None,
) -> BoundingVolume:
    """Fit a ``bv_type`` volume to ``shape`` placed in the world by ``tf``.

    Args:
        shape: Any shape from ``bvfit.shapes``.
        tf: Placement of the shape; identity when omitted.
        bv_type: One of AABB, OBB, RSS, OBBRSS, KIOS, KDOP16, KDOP18, KDOP24.
        config: Injected point fitter / basis completer.

    Returns:
        A new bounding volume of type ``bv_type``.
    """
    if tf is None:
        tf = RigidTransform.identity()
    if config is None:
        config = DEFAULT_FITTING_CONFIG
    fitter = _FITTERS.get((bv_type, type(shape)))
    if fitter is None:
        raise TypeError(
            f"No fitter for bounding volume {getattr(bv_type, '__name__', bv_type)!r} "
            f"and shape {type(shape).__name__!r}"
        )
    return fitter(bv_type, shape, tf, config)


def supported_pairs() -> List[Tuple[type, type]]:
    """All registered (bv_type, shape_type) pairs."""
    return sorted(_FITTERS, key=lambda pair: (pair[0].__name__, pair[1].__name__))


# =============================================================================
# AABB
# =============================================================================

def _aabb_around(center: np.ndarray, half: np.ndarray) -> AABB:
    return AABB(center - half, center + half)


@_fits(AABB, Box)
def _aabb_box(bv_type, s: Box, tf, config) -> AABB:
    half = np.abs(tf.rotation) @ s.half_extents
    return _aabb_around(tf.translation, half)


@_fits(AABB, Sphere)
def _aabb_sphere(bv_type, s: Sphere, tf, config) -> AABB:
    return _aabb_around(tf.translation, np.full(3, s.radius))


@_fits(AABB, Ellipsoid)
def _aabb_ellipsoid(bv_type, s: Ellipsoid, tf, config) -> AABB:
    half = np.abs(tf.rotation) @ s.radii
    return _aabb_around(tf.translation, half)


@_fits(AABB, Capsule)
def _aabb_capsule(bv_type, s: Capsule, tf, config) -> AABB:
    half = np.abs(tf.rotation[:, 2]) * s.half_length + s.radius
    return _aabb_around(tf.translation, half)


@_fits(AABB, [Cone, Cylinder])
def _aabb_axial(bv_type, s, tf, config) -> AABB:
    local = np.array([s.radius, s.radius, s.half_length])
    half = np.abs(tf.rotation) @ local
    return _aabb_around(tf.translation, half)


@_fits(AABB, [Convex, TriangleP])
def _aabb_points(bv_type, s, tf, config) -> AABB:
    return AABB.from_points(tf.apply(s.points))


@_fits(AABB, [Halfspace, Plane])
def _aabb_unbounded(bv_type, s, tf, config) -> AABB:
    seed = AABB.unbounded()
    lower, upper = _slab_bounds(s, tf, np.eye(3), seed.min_, seed.max_)
    return AABB(lower, upper)


# =============================================================================
# OBB
# =============================================================================

@_fits(OBB, Box)
def _obb_box(bv_type, s: Box, tf, config) -> OBB:
    return OBB(tf.translation, tf.rotation, s.half_extents)


@_fits(OBB, Sphere)
def _obb_sphere(bv_type, s: Sphere, tf, config) -> OBB:
    return OBB(tf.translation, np.eye(3), np.full(3, s.radius))


@_fits(OBB, Ellipsoid)
def _obb_ellipsoid(bv_type, s: Ellipsoid, tf, config) -> OBB:
    return OBB(tf.translation, tf.rotation, s.radii)


@_fits(OBB, Capsule)
def _obb_capsule(bv_type, s: Capsule, tf, config) -> OBB:
    extent = [s.radius, s.radius, s.half_length + s.radius]
    return OBB(tf.translation, tf.rotation, extent)


@_fits(OBB, [Cone, Cylinder])
def _obb_axial(bv_type, s, tf, config) -> OBB:
    return OBB(tf.translation, tf.rotation, [s.radius, s.radius, s.half_length])


@_fits(OBB, [Convex, TriangleP])
def _obb_points(bv_type, s, tf, config) -> OBB:
    local = config.point_fitter(s.points)
    return OBB(
        center=tf.apply(local.center),
        axes=tf.rotation @ local.axes,
        extent=local.extent,
    )


@_fits(OBB, Halfspace)
def _obb_halfspace(bv_type, s: Halfspace, tf, config) -> OBB:
    return OBB(np.zeros(3), np.eye(3), np.full(3, config.unbounded_extent))


@_fits(OBB, Plane)
def _obb_plane(bv_type, s: Plane, tf, config) -> OBB:
    # Axis 0 is the world normal; the box is flat along it.
    axes = config.basis_completer(tf.rotation @ s.n)
    big = config.unbounded_extent
    return OBB(tf.apply(anchor_point(s)), axes, [0.0, big, big])


# =============================================================================
# RSS
# =============================================================================

def _rss_from_obb(obb: OBB) -> RSS:
    """Smallest-extent axis becomes the sweep radius, the others the rectangle."""
    thin = int(np.argmin(obb.extent))
    order = [(thin + 1) % 3, (thin + 2) % 3, thin]
    return RSS(
        axes=obb.axes[:, order],
        center=obb.center,
        lengths=obb.extent[order[:2]],
        radius=float(obb.extent[thin]),
    )


@_fits(RSS, Sphere)
def _rss_sphere(bv_type, s: Sphere, tf, config) -> RSS:
    return RSS(np.eye(3), tf.translation, np.zeros(2), s.radius)


@_fits(RSS, Capsule)
def _rss_capsule(bv_type, s: Capsule, tf, config) -> RSS:
    r = tf.rotation
    axes = np.column_stack([r[:, 2], r[:, 0], r[:, 1]])
    return RSS(axes, tf.translation, [s.half_length, 0.0], s.radius)


@_fits(RSS, [Box, Ellipsoid, Cone, Cylinder, Convex, TriangleP])
def _rss_via_obb(bv_type, s, tf, config) -> RSS:
    return _rss_from_obb(fit_bounding_volume(s, tf, OBB, config))


@_fits(RSS, Halfspace)
def _rss_halfspace(bv_type, s: Halfspace, tf, config) -> RSS:
    big = config.unbounded_extent
    return RSS(np.eye(3), np.zeros(3), [big, big], big)


@_fits(RSS, Plane)
def _rss_plane(bv_type, s: Plane, tf, config) -> RSS:
    # Rectangle spans the plane, the normal is the (zero) sweep direction.
    frame = config.basis_completer(tf.rotation @ s.n)
    axes = frame[:, [1, 2, 0]]
    big = config.unbounded_extent
    return RSS(axes, tf.apply(anchor_point(s)), [big, big], 0.0)


# =============================================================================
# OBBRSS / kIOS
# =============================================================================

@_fits(OBBRSS, [Box, Sphere, Ellipsoid, Capsule, Cone, Cylinder, Convex, TriangleP, Halfspace, Plane])
def _obbrss(bv_type, s, tf, config) -> OBBRSS:
    return OBBRSS(
        obb=fit_bounding_volume(s, tf, OBB, config),
        rss=fit_bounding_volume(s, tf, RSS, config),
    )


@_fits(KIOS, Sphere)
def _kios_sphere(bv_type, s: Sphere, tf, config) -> KIOS:
    obb = fit_bounding_volume(s, tf, OBB, config)
    return KIOS((KIOSSphere(tf.translation, s.radius),), obb)


@_fits(KIOS, [Box, Ellipsoid, Capsule, Cone, Cylinder, Convex, TriangleP])
def _kios_via_obb(bv_type, s, tf, config) -> KIOS:
    obb = fit_bounding_volume(s, tf, OBB, config)
    radius = float(np.linalg.norm(obb.extent))
    return KIOS((KIOSSphere(obb.center, radius),), obb)


@_fits(KIOS, [Halfspace, Plane])
def _kios_unbounded(bv_type, s, tf, config) -> KIOS:
    obb = fit_bounding_volume(s, tf, OBB, config)
    return KIOS((KIOSSphere(obb.center, config.unbounded_extent),), obb)


# =============================================================================
# KDOP
# =============================================================================

@_fits(KDOP_TYPES, Sphere)
def _kdop_sphere(bv_type: Type[KDOP], s: Sphere, tf, config) -> KDOP:
    dirs = bv_type.directions()
    proj = dirs @ tf.translation
    half = s.radius * np.linalg.norm(dirs, axis=1)
    return bv_type.from_bounds(proj - half, proj + half)


@_fits(KDOP_TYPES, [Box, Ellipsoid, Capsule, Cone, Cylinder, Convex, TriangleP])
def _kdop_envelope(bv_type: Type[KDOP], s, tf, config) -> KDOP:
    return bv_type.from_points(bound_vertices(s, tf))


@_fits(KDOP_TYPES, [Halfspace, Plane])
def _kdop_unbounded(bv_type: Type[KDOP], s, tf, config) -> KDOP:
    seed = bv_type.unbounded()
    lower, upper = _slab_bounds(s, tf, bv_type.directions(), seed.lower, seed.upper)
    return bv_type.from_bounds(lower, upper)


# =============================================================================
# Internal helpers
# =============================================================================

def _aligned_sign(n: np.ndarray, direction: np.ndarray) -> int:
    """+1/-1 if ``n`` is exactly (anti)parallel to ``direction``, else 0.

    ``direction`` has entries in {-1, 0, 1}; alignment means the components
    of ``n`` vanish where the direction does and ``n_j * u_j`` is the same
    non-zero value everywhere else.
    """
    mask = direction != 0
    if np.any(n[~mask] != 0.0):
        return 0
    scaled = n[mask] * direction[mask]
    if scaled[0] == 0.0 or np.any(scaled != scaled[0]):
        return 0
    return 1 if scaled[0] > 0.0 else -1


def _slab_bounds(
    s,
    tf: RigidTransform,
    directions: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Bounds of ``u . x`` over a transformed half-space or plane.

    ``lower``/``upper`` are the unbounded seed slabs; they are copied, not
    modified.
    """
    world = transform_unbounded(s, tf)
    n, d = world.n, world.d
    count = len(directions)
    lower = np.array(lower, dtype=float)
    upper = np.array(upper, dtype=float)

    for i, u in enumerate(directions):
        sign = _aligned_sign(n, u)
        if sign == 0:
            continue
        # n = sign * u / |u|, so n . x <= d  <=>  sign * (u . x) <= d |u|.
        bound = float(np.dot(n, u)) * d
        if isinstance(world, Plane):
            lower[i] = upper[i] = bound
        elif sign > 0:
            upper[i] = bound
        else:
            lower[i] = bound
        return lower, upper

    logger.debug(
        "%s normal %s not aligned with any of %d slab directions; leaving unbounded",
        type(s).__name__, n, count,
    )
    return lower, upper
