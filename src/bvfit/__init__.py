"""Public API for bounding-volume fitting and box reconstruction."""

from bvfit.fitting import (
    DEFAULT_FITTING_CONFIG,
    FittingConfig,
    fit_bounding_volume,
    supported_pairs,
)
from bvfit.principal_axes import complete_basis, fit_obb
from bvfit.reconstruct import bounding_volume_mesh, box_mesh, construct_box
from bvfit.shapes import (
    SHAPE_TYPES,
    Box,
    Capsule,
    Cone,
    Convex,
    Cylinder,
    Ellipsoid,
    Halfspace,
    Plane,
    Shape,
    Sphere,
    TriangleP,
)
from bvfit.transforms import RigidTransform
from bvfit.unbounded import anchor_point, transform_halfspace, transform_plane, transform_unbounded
from bvfit.vertices import bound_vertices
from bvfit.volumes import (
    AABB,
    BV_TYPES,
    KDOP,
    KDOP16,
    KDOP18,
    KDOP24,
    KIOS,
    OBB,
    OBBRSS,
    RSS,
    KIOSSphere,
)

__all__ = [
    "AABB", "OBB", "RSS", "OBBRSS", "KIOS", "KIOSSphere",
    "KDOP", "KDOP16", "KDOP18", "KDOP24", "BV_TYPES",
    "Shape", "Box", "Sphere", "Ellipsoid", "Capsule", "Cone", "Cylinder",
    "Convex", "TriangleP", "Halfspace", "Plane", "SHAPE_TYPES",
    "RigidTransform",
    "bound_vertices",
    "transform_unbounded", "transform_halfspace", "transform_plane", "anchor_point",
    "fit_bounding_volume", "supported_pairs", "FittingConfig", "DEFAULT_FITTING_CONFIG",
    "fit_obb", "complete_basis",
    "construct_box", "box_mesh", "bounding_volume_mesh",
]
