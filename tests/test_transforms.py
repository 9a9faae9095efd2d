"""Tests for node transform resolution."""

import math

import numpy as np
import pytest
import trimesh

from bimexport.imf import DecomposedTransform, MatrixTransform, Quaternion
from bimexport.obj.transforms import (
    apply_to_directions,
    apply_to_points,
    extract_rotation,
    quaternion_to_matrix,
    resolve_transform,
)

HALF = math.sqrt(0.5)

# 90 degrees about Z, column-major
ROT_Z_90 = [0, 1, 0, 0, -1, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1]


class TestResolveTransform:
    """Tests for resolve_transform."""

    def test_absent_transform_is_identity(self):
        world, normal = resolve_transform(None)
        assert np.array_equal(world, np.identity(4))
        assert np.array_equal(normal, np.identity(4))

    def test_translation_only_is_exact(self):
        world, normal = resolve_transform(DecomposedTransform(translation=(1.5, -2.25, 3.0)))

        expected = np.identity(4)
        expected[:3, 3] = [1.5, -2.25, 3.0]
        assert np.array_equal(world, expected)
        assert np.array_equal(normal, np.identity(4))

    def test_identity_components_are_exact(self):
        transform = DecomposedTransform(
            translation=(4, 5, 6), rotation=(0, 0, 0, 1), scale=(1, 1, 1)
        )
        world, _ = resolve_transform(transform)

        expected = np.identity(4)
        expected[:3, 3] = [4, 5, 6]
        assert np.array_equal(world, expected)

    def test_matrix_is_column_major(self):
        elements = [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 5, 6, 7, 1]
        world, _ = resolve_transform(MatrixTransform(elements))
        assert np.array_equal(world[:3, 3], [5, 6, 7])
        assert np.array_equal(world[3], [0, 0, 0, 1])

    def test_matrix_normal_is_rotation_submatrix(self):
        elements = list(ROT_Z_90)
        elements[12:15] = [10, 20, 30]
        world, normal = resolve_transform(MatrixTransform(elements))

        expected = np.identity(4)
        expected[:3, :3] = world[:3, :3]
        assert np.array_equal(normal, expected)
        assert np.array_equal(normal[:3, 3], [0, 0, 0])

    def test_shear_is_accepted(self):
        elements = [1, 0, 0, 0, 0.5, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1]
        world, _ = resolve_transform(MatrixTransform(elements))
        assert world[0, 1] == 0.5

    def test_trs_composition_order(self):
        transform = DecomposedTransform(
            translation=(1, 2, 3),
            rotation=(0, 0, HALF, HALF),
            scale=(2, 3, 4),
        )
        world, normal = resolve_transform(transform)

        expected = trimesh.transformations.concatenate_matrices(
            trimesh.transformations.translation_matrix([1, 2, 3]),
            trimesh.transformations.quaternion_matrix([HALF, 0, 0, HALF]),
            np.diag([2, 3, 4, 1]),
        )
        assert np.allclose(world, expected)

        # Scale stripped, rotation kept
        rotation = trimesh.transformations.quaternion_matrix([HALF, 0, 0, HALF])
        assert np.allclose(normal, rotation)

    def test_scale_then_rotate(self):
        # Scale along X happens before the rotation moves X onto Y
        transform = DecomposedTransform(rotation=(0, 0, HALF, HALF), scale=(2, 1, 1))
        world, _ = resolve_transform(transform)
        point = apply_to_points(world, np.array([[1.0, 0.0, 0.0]]))
        assert np.allclose(point, [[0, 2, 0]])

    def test_unknown_transform_type(self):
        with pytest.raises(TypeError):
            resolve_transform(np.identity(4))


class TestQuaternion:
    """Tests for quaternion_to_matrix."""

    def test_matches_trimesh_for_unit_quaternion(self):
        q = Quaternion(0.1, 0.2, 0.3, math.sqrt(1 - 0.14))
        expected = trimesh.transformations.quaternion_matrix([q.w, q.x, q.y, q.z])
        assert np.allclose(quaternion_to_matrix(q), expected)

    def test_not_renormalised(self):
        # A doubled identity quaternion is not a rotation any more
        matrix = quaternion_to_matrix(Quaternion(0, 0, 0, 2))
        assert np.array_equal(matrix, np.identity(4))
        matrix = quaternion_to_matrix(Quaternion(0, 0, 2, 0))
        assert matrix[0, 0] == pytest.approx(-7.0)


class TestExtractRotation:
    """Tests for extract_rotation."""

    def test_strips_non_uniform_scale(self):
        matrix = np.diag([2.0, 3.0, 4.0, 1.0])
        matrix[:3, 3] = [7, 8, 9]
        assert np.array_equal(extract_rotation(matrix), np.identity(4))

    def test_degenerate_column(self):
        matrix = np.diag([0.0, 1.0, 1.0, 1.0])
        rotation = extract_rotation(matrix)
        assert np.array_equal(rotation[:3, 0], [0, 0, 0])


class TestApply:
    """Tests for point and direction transformation."""

    def test_points_translate(self):
        world, _ = resolve_transform(DecomposedTransform(translation=(1, 2, 3)))
        points = apply_to_points(world, np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]))
        assert np.array_equal(points, [[1, 2, 3], [2, 3, 4]])

    def test_directions_ignore_translation(self):
        world, normal = resolve_transform(
            MatrixTransform(ROT_Z_90[:12] + [10, 20, 30, 1])
        )
        directions = apply_to_directions(normal, np.array([[1.0, 0.0, 0.0]]))
        assert np.allclose(directions, [[0, 1, 0]])

    def test_empty_arrays(self):
        points = apply_to_points(np.identity(4), np.zeros((0, 3)))
        assert points.shape == (0, 3)
