"""Tests for turning bounding volumes back into placed boxes."""
import numpy as np
import pytest

from bvfit.fitting import fit_bounding_volume
from bvfit.reconstruct import bounding_volume_mesh, box_mesh, construct_box
from bvfit.shapes import Box, Capsule, Cylinder, Sphere
from bvfit.transforms import RigidTransform
from bvfit.volumes import AABB, KDOP16, KDOP24, KIOS, KIOSSphere, OBB, OBBRSS, RSS


class TestConstructBox:
    def test_aabb(self):
        box, tf = construct_box(AABB([-1.0, 0.0, 2.0], [3.0, 1.0, 5.0]))
        assert np.allclose(box.side, [4.0, 1.0, 3.0])
        assert np.allclose(tf.rotation, np.eye(3))
        assert np.allclose(tf.translation, [1.0, 0.5, 3.5])

    def test_obb_roundtrip(self, rng):
        original = Box([1.5, 0.5, 2.5])
        for _ in range(50):
            placement = RigidTransform.random(rng, translation_scale=5.0)
            obb = fit_bounding_volume(original, placement, OBB)
            box, tf = construct_box(obb)
            assert np.allclose(box.side, original.side)
            assert tf.allclose(placement)

    def test_rss_dimensions(self):
        rss = RSS(axes=np.eye(3), center=[1.0, 2.0, 3.0], lengths=[2.0, 1.0], radius=0.5)
        box, tf = construct_box(rss)
        assert np.allclose(box.side, [5.0, 3.0, 1.0])
        assert np.allclose(tf.translation, [1.0, 2.0, 3.0])

    def test_capsule_rss_box_covers_capsule(self, tilted_transform):
        capsule = Capsule(radius=0.5, lz=3.0)
        rss = fit_bounding_volume(capsule, tilted_transform, RSS)
        box, tf = construct_box(rss)
        assert np.allclose(box.side, [4.0, 1.0, 1.0])
        assert np.allclose(tf.rotation[:, 0], tilted_transform.rotation[:, 2])

    def test_kdop_uses_axis_slabs(self):
        kdop = KDOP16.from_points(np.array([[0.0, 0.0, 0.0], [2.0, 4.0, 6.0]]))
        box, tf = construct_box(kdop)
        assert np.allclose(box.side, [2.0, 4.0, 6.0])
        assert np.allclose(tf.translation, [1.0, 2.0, 3.0])

    def test_kdop_sphere_matches_aabb(self):
        placement = RigidTransform.from_translation([1.0, -1.0, 2.0])
        kdop_box, kdop_tf = construct_box(fit_bounding_volume(Sphere(1.0), placement, KDOP24))
        aabb_box, aabb_tf = construct_box(fit_bounding_volume(Sphere(1.0), placement, AABB))
        assert np.allclose(kdop_box.side, aabb_box.side)
        assert kdop_tf.allclose(aabb_tf)

    @pytest.mark.parametrize("bv_type", [OBBRSS, KIOS])
    def test_composites_use_their_obb(self, bv_type, tilted_transform):
        shape = Cylinder(radius=0.5, lz=2.0)
        bv = fit_bounding_volume(shape, tilted_transform, bv_type)
        box, tf = construct_box(bv)
        expected_box, expected_tf = construct_box(bv.obb)
        assert np.allclose(box.side, expected_box.side)
        assert tf.allclose(expected_tf)

    def test_kios_ignores_spheres(self):
        obb = OBB(center=np.zeros(3), axes=np.eye(3), extent=[1.0, 2.0, 3.0])
        kios = KIOS((KIOSSphere([0.0, 0.0, 0.0], 10.0),), obb)
        box, _ = construct_box(kios)
        assert np.allclose(box.side, [2.0, 4.0, 6.0])

    def test_frame_composition(self, tilted_transform):
        obb = OBB(center=[1.0, 0.0, 0.0], axes=np.eye(3), extent=[0.5, 0.5, 0.5])
        box, tf = construct_box(obb, tilted_transform)
        assert np.allclose(box.side, [1.0, 1.0, 1.0])
        assert np.allclose(tf.rotation, tilted_transform.rotation)
        assert np.allclose(tf.translation, tilted_transform.apply([1.0, 0.0, 0.0]))

    def test_aabb_frame_composition(self):
        frame = RigidTransform.from_euler([0.0, 0.0, 90.0], translation=[0.0, 0.0, 1.0], degrees=True)
        box, tf = construct_box(AABB([1.0, -1.0, -1.0], [3.0, 1.0, 1.0]), frame)
        assert np.allclose(box.side, [2.0, 2.0, 2.0])
        assert np.allclose(tf.translation, [0.0, 2.0, 1.0])

    def test_unknown_volume_rejected(self):
        with pytest.raises(TypeError):
            construct_box(object())


class TestMeshes:
    def test_box_mesh_bounds(self, tilted_transform):
        box = Box([1.0, 2.0, 3.0])
        mesh = box_mesh(box, tilted_transform)
        corners = tilted_transform.apply(
            np.array([[sx, sy, sz] for sx in (-0.5, 0.5) for sy in (-1, 1) for sz in (-1.5, 1.5)])
        )
        assert mesh.is_watertight
        assert mesh.volume == pytest.approx(6.0)
        assert np.allclose(mesh.bounds[0], corners.min(axis=0))
        assert np.allclose(mesh.bounds[1], corners.max(axis=0))

    def test_bounding_volume_mesh_contains_shape(self, tilted_transform):
        obb = fit_bounding_volume(Capsule(radius=0.3, lz=1.0), tilted_transform, OBB)
        mesh = bounding_volume_mesh(obb)
        assert mesh.volume == pytest.approx(obb.volume)
        assert np.allclose(mesh.centroid, obb.center)
