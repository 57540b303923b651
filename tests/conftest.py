"""
Shared test fixtures for bounding-volume fitting tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest
import trimesh

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bvfit.shapes import (
    Box, Capsule, Cone, Convex, Cylinder, Ellipsoid, Sphere, TriangleP,
)
from bvfit.transforms import RigidTransform


def _unit_directions(rng: np.random.Generator, count: int) -> np.ndarray:
    v = rng.normal(size=(count, 3))
    return v / np.linalg.norm(v, axis=1, keepdims=True)


def sample_shape_surface(shape, rng: np.random.Generator, count: int = 200) -> np.ndarray:
    """Dense local-frame sample of the boundary of a bounded shape.

    Includes the extreme points (corners, rims, apex) that are the first to
    escape a too-tight bounding volume.
    """
    if isinstance(shape, Box):
        half = shape.half_extents
        corners = trimesh.creation.box(extents=shape.side).vertices
        pts = rng.uniform(-1.0, 1.0, size=(count, 3))
        face_axis = rng.integers(0, 3, size=count)
        pts[np.arange(count), face_axis] = rng.choice([-1.0, 1.0], size=count)
        return np.vstack([corners, pts * half])

    if isinstance(shape, Sphere):
        sphere = trimesh.creation.icosphere(subdivisions=3, radius=1.0)
        return np.asarray(sphere.vertices) * shape.radius

    if isinstance(shape, Ellipsoid):
        sphere = trimesh.creation.icosphere(subdivisions=3, radius=1.0)
        return np.asarray(sphere.vertices) * shape.radii

    if isinstance(shape, (Convex, TriangleP)):
        vertices = shape.points
        weights = rng.dirichlet(np.ones(len(vertices)), size=count)
        return np.vstack([vertices, weights @ vertices])

    r, hl = shape.radius, shape.half_length
    theta = rng.uniform(0.0, 2.0 * np.pi, size=count)
    ring = np.column_stack([np.cos(theta), np.sin(theta), np.zeros(count)])

    if isinstance(shape, Capsule):
        dirs = _unit_directions(rng, count)
        caps = r * dirs + np.outer(np.where(dirs[:, 2] >= 0.0, hl, -hl), [0.0, 0.0, 1.0])
        side = r * ring + np.outer(rng.uniform(-hl, hl, size=count), [0.0, 0.0, 1.0])
        return np.vstack([caps, side])

    if isinstance(shape, Cylinder):
        z = rng.uniform(-hl, hl, size=count)
        side = r * ring + np.outer(z, [0.0, 0.0, 1.0])
        rims = np.vstack([r * ring + [0.0, 0.0, hl], r * ring - [0.0, 0.0, hl]])
        return np.vstack([side, rims])

    if isinstance(shape, Cone):
        t = rng.uniform(0.0, 1.0, size=count)
        side = (r * (1.0 - t))[:, None] * ring + np.outer(-hl + t * shape.lz, [0.0, 0.0, 1.0])
        base = r * ring - [0.0, 0.0, hl]
        return np.vstack([side, base, [[0.0, 0.0, hl]]])

    raise TypeError(f"No surface sampler for {type(shape).__name__}")


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def random_transforms(rng):
    """200 random rigid transforms with translations in [-5, 5]^3."""
    return [RigidTransform.random(rng, translation_scale=5.0) for _ in range(200)]


@pytest.fixture
def surface_sampler():
    return sample_shape_surface


@pytest.fixture
def tilted_transform():
    """A fixed, clearly non-axis-aligned placement."""
    return RigidTransform.from_euler([0.3, -0.7, 1.1], translation=[1.0, -2.0, 0.5])


@pytest.fixture
def convex_blob():
    """Convex shape from the hull of a stretched icosphere."""
    mesh = trimesh.creation.icosphere(subdivisions=1, radius=1.0)
    mesh.apply_transform(np.diag([3.0, 1.5, 0.75, 1.0]))
    return Convex.from_mesh(mesh)
