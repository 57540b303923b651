"""Tests for bvfit.transforms."""
import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from bvfit.transforms import RigidTransform


class TestConstruction:
    def test_identity(self):
        tf = RigidTransform.identity()
        assert np.array_equal(tf.rotation, np.eye(3))
        assert np.array_equal(tf.translation, np.zeros(3))

    def test_from_euler_matches_scipy(self):
        tf = RigidTransform.from_euler([0.1, 0.2, 0.3], translation=[1, 2, 3])
        expected = Rotation.from_euler("xyz", [0.1, 0.2, 0.3]).as_matrix()
        assert np.allclose(tf.rotation, expected)
        assert np.allclose(tf.translation, [1, 2, 3])

    def test_from_euler_degrees(self):
        tf = RigidTransform.from_euler([0, 0, 90], degrees=True)
        assert np.allclose(tf.apply([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])

    def test_from_quat_identity(self):
        tf = RigidTransform.from_quat([0, 0, 0, 1], translation=[4, 5, 6])
        assert np.allclose(tf.rotation, np.eye(3))
        assert np.allclose(tf.translation, [4, 5, 6])

    def test_random_is_rigid(self, rng):
        for _ in range(50):
            tf = RigidTransform.random(rng, translation_scale=3.0)
            assert tf.is_rigid()
            assert np.all(np.abs(tf.translation) <= 3.0)

    def test_matrix_roundtrip(self, tilted_transform):
        m = tilted_transform.as_matrix()
        assert m.shape == (4, 4)
        assert np.allclose(m[3], [0, 0, 0, 1])
        assert RigidTransform.from_matrix(m).allclose(tilted_transform)


class TestApplication:
    def test_apply_single_point_and_array(self, tilted_transform):
        pts = np.array([[1.0, 2.0, 3.0], [-1.0, 0.5, 2.0]])
        batch = tilted_transform.apply(pts)
        single = tilted_transform.apply(pts[1])
        assert batch.shape == (2, 3)
        assert single.shape == (3,)
        assert np.allclose(batch[1], single)
        expected = tilted_transform.rotation @ pts[0] + tilted_transform.translation
        assert np.allclose(batch[0], expected)

    def test_apply_rotation_ignores_translation(self, tilted_transform):
        v = np.array([0.0, 0.0, 1.0])
        assert np.allclose(tilted_transform.apply_rotation(v), tilted_transform.rotation @ v)

    def test_compose_order(self, rng):
        a = RigidTransform.random(rng)
        b = RigidTransform.random(rng)
        p = rng.normal(size=3)
        assert np.allclose((a @ b).apply(p), a.apply(b.apply(p)))
        assert np.allclose(a.compose(b).as_matrix(), a.as_matrix() @ b.as_matrix())

    def test_inverse(self, tilted_transform):
        ident = tilted_transform @ tilted_transform.inverse()
        assert ident.allclose(RigidTransform.identity())

    def test_translated_is_local_offset(self, tilted_transform):
        moved = tilted_transform.translated([1.0, 0.0, 0.0])
        assert np.allclose(moved.rotation, tilted_transform.rotation)
        assert np.allclose(moved.translation, tilted_transform.apply([1.0, 0.0, 0.0]))

    def test_matmul_rejects_other_types(self, tilted_transform):
        with pytest.raises(TypeError):
            tilted_transform @ "not a transform"

    def test_scaled_matrix_is_not_rigid(self):
        assert not RigidTransform(np.eye(3) * 2.0).is_rigid()
