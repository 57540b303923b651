"""
Bounding-volume families.

All volumes are immutable value types. Unbounded extents are stored as
``numpy.inf`` for AABB and KDOP and as a very large finite value for the
frame-based families (OBB, RSS, kIOS), whose axes must stay finite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Sequence, Tuple, Union

import numpy as np


def _as_vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


def _as_points(points) -> np.ndarray:
    return np.asarray(points, dtype=float).reshape(-1, 3)


# ─── AABB ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class AABB:
    """Axis-aligned box given by its componentwise min and max corners."""

    min_: np.ndarray
    max_: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_", _as_vec3(self.min_))
        object.__setattr__(self, "max_", _as_vec3(self.max_))

    @classmethod
    def from_points(cls, points: np.ndarray) -> "AABB":
        pts = _as_points(points)
        return cls(pts.min(axis=0), pts.max(axis=0))

    @classmethod
    def unbounded(cls) -> "AABB":
        return cls(np.full(3, -np.inf), np.full(3, np.inf))

    def merged(self, other: Union["AABB", np.ndarray]) -> "AABB":
        """Smallest AABB containing this box and a point set or another box."""
        if isinstance(other, AABB):
            return AABB(np.minimum(self.min_, other.min_), np.maximum(self.max_, other.max_))
        pts = _as_points(other)
        return AABB(
            np.minimum(self.min_, pts.min(axis=0)),
            np.maximum(self.max_, pts.max(axis=0)),
        )

    @property
    def center(self) -> np.ndarray:
        return 0.5 * (self.min_ + self.max_)

    @property
    def size(self) -> np.ndarray:
        return self.max_ - self.min_

    @property
    def width(self) -> float:
        return float(self.max_[0] - self.min_[0])

    @property
    def height(self) -> float:
        return float(self.max_[1] - self.min_[1])

    @property
    def depth(self) -> float:
        return float(self.max_[2] - self.min_[2])

    @property
    def volume(self) -> float:
        return float(np.prod(self.size))

    @property
    def is_bounded(self) -> bool:
        return bool(np.all(np.isfinite(self.min_)) and np.all(np.isfinite(self.max_)))

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        pts = _as_points(points)
        return np.all((pts >= self.min_ - tol) & (pts <= self.max_ + tol), axis=1)


# ─── OBB ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class OBB:
    """Oriented box: center, orthonormal axes (columns) and half-extents."""

    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    axes: np.ndarray = field(default_factory=lambda: np.eye(3))
    extent: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vec3(self.center))
        object.__setattr__(self, "axes", np.asarray(self.axes, dtype=float).reshape(3, 3))
        object.__setattr__(self, "extent", _as_vec3(self.extent))

    @property
    def volume(self) -> float:
        return float(np.prod(2.0 * self.extent))

    def corners(self) -> np.ndarray:
        """The 8 corners as an (8, 3) array."""
        signs = np.array(
            [[sx, sy, sz] for sx in (1, -1) for sy in (1, -1) for sz in (1, -1)],
            dtype=float,
        )
        return self.center + (signs * self.extent) @ self.axes.T

    def to_local(self, points: np.ndarray) -> np.ndarray:
        return (_as_points(points) - self.center) @ self.axes

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        local = self.to_local(points)
        return np.all(np.abs(local) <= self.extent + tol, axis=1)


# ─── RSS ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class RSS:
    """Rectangle swept sphere.

    The rectangle lies in the plane of axes 0 and 1, centered on ``center``
    with half-lengths ``lengths``; the volume is its Minkowski sum with a
    ball of ``radius``.
    """

    axes: np.ndarray = field(default_factory=lambda: np.eye(3))
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    lengths: np.ndarray = field(default_factory=lambda: np.zeros(2))
    radius: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "axes", np.asarray(self.axes, dtype=float).reshape(3, 3))
        object.__setattr__(self, "center", _as_vec3(self.center))
        object.__setattr__(self, "lengths", np.asarray(self.lengths, dtype=float).reshape(2))
        object.__setattr__(self, "radius", float(self.radius))

    @property
    def width(self) -> float:
        return float(2.0 * (self.lengths[0] + self.radius))

    @property
    def height(self) -> float:
        return float(2.0 * (self.lengths[1] + self.radius))

    @property
    def depth(self) -> float:
        return float(2.0 * self.radius)

    def distance_to_rectangle(self, points: np.ndarray) -> np.ndarray:
        local = (_as_points(points) - self.center) @ self.axes
        in_plane = local[:, :2]
        clamped = np.clip(in_plane, -self.lengths, self.lengths)
        offset = np.column_stack([in_plane - clamped, local[:, 2]])
        return np.linalg.norm(offset, axis=1)

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        return self.distance_to_rectangle(points) <= self.radius + tol


# ─── OBBRSS ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class OBBRSS:
    """An OBB and an RSS bounding the same geometry."""

    obb: OBB
    rss: RSS

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        return self.obb.contains(points, tol) & self.rss.contains(points, tol)


# ─── kIOS ────────────────────────────────────────────────────────────────────

KIOS_MAX_SPHERES = 5


@dataclass(frozen=True, eq=False)
class KIOSSphere:
    center: np.ndarray
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vec3(self.center))
        object.__setattr__(self, "radius", float(self.radius))

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        dist = np.linalg.norm(_as_points(points) - self.center, axis=1)
        return dist <= self.radius + tol


@dataclass(frozen=True, eq=False)
class KIOS:
    """Union of up to five spheres, intersected with an OBB."""

    spheres: Tuple[KIOSSphere, ...]
    obb: OBB

    def __post_init__(self) -> None:
        object.__setattr__(self, "spheres", tuple(self.spheres))

    @property
    def num_spheres(self) -> int:
        return len(self.spheres)

    def validate(self) -> None:
        if not 1 <= self.num_spheres <= KIOS_MAX_SPHERES:
            raise ValueError(
                f"kIOS must hold 1..{KIOS_MAX_SPHERES} spheres, got {self.num_spheres}"
            )

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        in_spheres = np.zeros(len(_as_points(points)), dtype=bool)
        for sphere in self.spheres:
            in_spheres |= sphere.contains(points, tol)
        return in_spheres & self.obb.contains(points, tol)


# ─── KDOP ────────────────────────────────────────────────────────────────────

_AXES = [(1, 0, 0), (0, 1, 0), (0, 0, 1)]
_FACE_DIAGONALS_16 = [(1, 1, 0), (1, 0, 1), (0, 1, 1), (1, -1, 0), (1, 0, -1)]
_FACE_DIAGONALS_18 = _FACE_DIAGONALS_16 + [(0, 1, -1)]
_CORNER_DIAGONALS_24 = [(1, 1, -1), (1, -1, 1), (-1, 1, 1)]

KDOP_DIRECTIONS: Dict[int, np.ndarray] = {
    16: np.array(_AXES + _FACE_DIAGONALS_16, dtype=float),
    18: np.array(_AXES + _FACE_DIAGONALS_18, dtype=float),
    24: np.array(_AXES + _FACE_DIAGONALS_18 + _CORNER_DIAGONALS_24, dtype=float),
}


@dataclass(frozen=True, eq=False)
class KDOP:
    """Discrete oriented polytope with k/2 fixed slab directions.

    ``dist[i]`` and ``dist[i + k/2]`` bound ``direction_i . p`` from below and
    above. Directions are not normalised, so diagonal slabs are measured in
    units of the direction's own length.
    """

    k: ClassVar[int] = 0

    dist: np.ndarray

    def __post_init__(self) -> None:
        dist = np.asarray(self.dist, dtype=float).reshape(-1)
        if dist.shape != (self.k,):
            raise ValueError(f"{type(self).__name__} needs {self.k} distances, got {dist.size}")
        object.__setattr__(self, "dist", dist)

    @classmethod
    def directions(cls) -> np.ndarray:
        return KDOP_DIRECTIONS[cls.k]

    @classmethod
    def unbounded(cls) -> "KDOP":
        half = cls.k // 2
        return cls(np.concatenate([np.full(half, -np.inf), np.full(half, np.inf)]))

    @classmethod
    def from_points(cls, points: np.ndarray) -> "KDOP":
        proj = _as_points(points) @ cls.directions().T
        return cls(np.concatenate([proj.min(axis=0), proj.max(axis=0)]))

    @classmethod
    def from_bounds(cls, lower: Sequence[float], upper: Sequence[float]) -> "KDOP":
        return cls(np.concatenate([np.asarray(lower, dtype=float), np.asarray(upper, dtype=float)]))

    @property
    def lower(self) -> np.ndarray:
        return self.dist[: self.k // 2]

    @property
    def upper(self) -> np.ndarray:
        return self.dist[self.k // 2:]

    @property
    def width(self) -> float:
        return float(self.upper[0] - self.lower[0])

    @property
    def height(self) -> float:
        return float(self.upper[1] - self.lower[1])

    @property
    def depth(self) -> float:
        return float(self.upper[2] - self.lower[2])

    @property
    def center(self) -> np.ndarray:
        """Mid-point of the three axis slabs."""
        return 0.5 * (self.lower[:3] + self.upper[:3])

    def contains(self, points: np.ndarray, tol: float = 1e-9) -> np.ndarray:
        proj = _as_points(points) @ self.directions().T
        return np.all((proj >= self.lower - tol) & (proj <= self.upper + tol), axis=1)


class KDOP16(KDOP):
    k = 16


class KDOP18(KDOP):
    k = 18


class KDOP24(KDOP):
    k = 24


KDOP_TYPES: List[type] = [KDOP16, KDOP18, KDOP24]

BoundingVolume = Union[AABB, OBB, RSS, OBBRSS, KIOS, KDOP]

BV_TYPES: List[type] = [AABB, OBB, RSS, OBBRSS, KIOS, KDOP16, KDOP18, KDOP24]
