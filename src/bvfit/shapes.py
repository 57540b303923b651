"""
Geometric primitives consumed by the bounding-volume fitters.

Every shape is defined in its own local frame and placed in the world by a
RigidTransform. Capsule, Cone and Cylinder run along local z and are centered
on the origin. Halfspace and Plane are unbounded.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union

import numpy as np


def _as_vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


class Shape(ABC):
    """Common base for all shape variants."""

    is_bounded = True

    @abstractmethod
    def validate(self) -> None:
        """Raise ValueError if the parameters do not describe a valid shape."""
        ...


def _check_non_negative(name: str, value: float) -> None:
    if not np.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    if value < 0.0:
        raise ValueError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True, eq=False)
class Box(Shape):
    """Box centered on the origin with full side lengths along x, y, z."""

    side: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "side", _as_vec3(self.side))

    @property
    def half_extents(self) -> np.ndarray:
        return self.side * 0.5

    def validate(self) -> None:
        for axis, value in zip("xyz", self.side):
            _check_non_negative(f"Box.side[{axis}]", float(value))


@dataclass(frozen=True, eq=False)
class Sphere(Shape):
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", float(self.radius))

    def validate(self) -> None:
        _check_non_negative("Sphere.radius", self.radius)


@dataclass(frozen=True, eq=False)
class Ellipsoid(Shape):
    """Axis-aligned ellipsoid with semi-axes ``radii``."""

    radii: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "radii", _as_vec3(self.radii))

    def validate(self) -> None:
        for axis, value in zip("xyz", self.radii):
            _check_non_negative(f"Ellipsoid.radii[{axis}]", float(value))


@dataclass(frozen=True, eq=False)
class _AxialShape(Shape):
    """Shape of revolution about local z with a radius and a length ``lz``."""

    radius: float
    lz: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "lz", float(self.lz))

    @property
    def half_length(self) -> float:
        return 0.5 * self.lz

    def validate(self) -> None:
        name = type(self).__name__
        _check_non_negative(f"{name}.radius", self.radius)
        _check_non_negative(f"{name}.lz", self.lz)


class Capsule(_AxialShape):
    """Segment of length ``lz`` swept by a sphere; caps extend past the segment."""


class Cone(_AxialShape):
    """Base disc at z = -lz/2, apex at z = +lz/2."""


class Cylinder(_AxialShape):
    pass


@dataclass(frozen=True, eq=False)
class Convex(Shape):
    """Convex polytope given by its vertices."""

    points: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", np.asarray(self.points, dtype=float).reshape(-1, 3))

    @property
    def num_points(self) -> int:
        return int(len(self.points))

    @classmethod
    def from_mesh(cls, mesh) -> "Convex":
        """Convex shape from the hull vertices of a trimesh.Trimesh."""
        return cls(np.asarray(mesh.convex_hull.vertices, dtype=float))

    def validate(self) -> None:
        if self.num_points == 0:
            raise ValueError("Convex shape has no points")
        if not np.all(np.isfinite(self.points)):
            raise ValueError("Convex shape has non-finite points")


@dataclass(frozen=True, eq=False)
class TriangleP(Shape):
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "a", _as_vec3(self.a))
        object.__setattr__(self, "b", _as_vec3(self.b))
        object.__setattr__(self, "c", _as_vec3(self.c))

    @property
    def points(self) -> np.ndarray:
        return np.vstack([self.a, self.b, self.c])

    def validate(self) -> None:
        if not np.all(np.isfinite(self.points)):
            raise ValueError("Triangle has non-finite vertices")


@dataclass(frozen=True, eq=False)
class _PlanarShape(Shape):
    """Shape bounded by the plane n . x = d.

    The normal is normalised on construction and d scaled by the same factor,
    so the described point set does not change.
    """

    n: np.ndarray
    d: float

    is_bounded = False

    def __post_init__(self) -> None:
        n = _as_vec3(self.n)
        d = float(self.d)
        norm = float(np.linalg.norm(n))
        if norm > 0.0:
            n = n / norm
            d = d / norm
        object.__setattr__(self, "n", n)
        object.__setattr__(self, "d", d)

    def signed_distance(self, points: np.ndarray) -> np.ndarray:
        pts = np.asarray(points, dtype=float)
        return pts @ self.n - self.d

    def validate(self) -> None:
        name = type(self).__name__
        if not np.all(np.isfinite(self.n)) or not np.isfinite(self.d):
            raise ValueError(f"{name} has non-finite parameters")
        if float(np.linalg.norm(self.n)) == 0.0:
            raise ValueError(f"{name} normal cannot be zero")


class Halfspace(_PlanarShape):
    """The region n . x <= d."""

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        return self.signed_distance(points) <= tol


class Plane(_PlanarShape):
    """The set n . x = d."""

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        return np.abs(self.signed_distance(points)) <= tol


UnboundedShape = Union[Halfspace, Plane]

SHAPE_TYPES: List[type] = [
    Box, Sphere, Ellipsoid, Capsule, Cone, Cylinder, Convex, TriangleP, Halfspace, Plane,
]
