"""Rigid transforms (rotation + translation) used to place shapes in the world."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation


@dataclass(frozen=True, eq=False)
class RigidTransform:
    """Orthonormal rotation followed by a translation: x' = R x + T."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", np.asarray(self.rotation, dtype=float).reshape(3, 3))
        object.__setattr__(self, "translation", np.asarray(self.translation, dtype=float).reshape(3))

    # ─── Construction ────────────────────────────────────────────────────

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls()

    @classmethod
    def from_translation(cls, translation: Sequence[float]) -> "RigidTransform":
        return cls(np.eye(3), translation)

    @classmethod
    def from_euler(
        cls,
        angles: Sequence[float],
        translation: Sequence[float] = (0.0, 0.0, 0.0),
        seq: str = "xyz",
        degrees: bool = False,
    ) -> "RigidTransform":
        rot = Rotation.from_euler(seq, np.asarray(angles, dtype=float), degrees=degrees)
        return cls(rot.as_matrix(), translation)

    @classmethod
    def from_quat(
        cls,
        quat: Sequence[float],
        translation: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "RigidTransform":
        """Build from a scalar-last (x, y, z, w) quaternion."""
        return cls(Rotation.from_quat(np.asarray(quat, dtype=float)).as_matrix(), translation)

    @classmethod
    def random(
        cls,
        rng: Optional[np.random.Generator] = None,
        translation_scale: float = 1.0,
    ) -> "RigidTransform":
        """Uniformly random rotation with a translation drawn from [-scale, scale]^3."""
        if rng is None:
            rng = np.random.default_rng()
        rot = Rotation.random(None, rng)
        translation = rng.uniform(-translation_scale, translation_scale, size=3)
        return cls(rot.as_matrix(), translation)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "RigidTransform":
        m = np.asarray(matrix, dtype=float)
        return cls(m[:3, :3], m[:3, 3])

    # ─── Conversion ──────────────────────────────────────────────────────

    def as_matrix(self) -> np.ndarray:
        """Homogeneous 4x4 matrix."""
        m = np.eye(4)
        m[:3, :3] = self.rotation
        m[:3, 3] = self.translation
        return m

    # ─── Application ─────────────────────────────────────────────────────

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Transform a single point (3,) or a point array (N, 3)."""
        pts = np.asarray(points, dtype=float)
        return pts @ self.rotation.T + self.translation

    def apply_rotation(self, vectors: np.ndarray) -> np.ndarray:
        """Rotate direction vectors; translation is ignored."""
        vec = np.asarray(vectors, dtype=float)
        return vec @ self.rotation.T

    def compose(self, other: "RigidTransform") -> "RigidTransform":
        """Return ``self ∘ other``: apply ``other`` first, then ``self``."""
        return RigidTransform(
            self.rotation @ other.rotation,
            self.rotation @ other.translation + self.translation,
        )

    def __matmul__(self, other: "RigidTransform") -> "RigidTransform":
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return self.compose(other)

    def translated(self, offset: Sequence[float]) -> "RigidTransform":
        """Compose with a translation expressed in this transform's local frame."""
        return self.compose(RigidTransform.from_translation(offset))

    def inverse(self) -> "RigidTransform":
        rt = self.rotation.T
        return RigidTransform(rt, -(rt @ self.translation))

    def is_rigid(self, tol: float = 1e-9) -> bool:
        """True when the rotation is orthonormal with determinant +1."""
        r = self.rotation
        return bool(
            np.allclose(r.T @ r, np.eye(3), atol=tol)
            and abs(float(np.linalg.det(r)) - 1.0) <= tol
        )

    def allclose(self, other: "RigidTransform", atol: float = 1e-9) -> bool:
        return bool(
            np.allclose(self.rotation, other.rotation, atol=atol)
            and np.allclose(self.translation, other.translation, atol=atol)
        )
