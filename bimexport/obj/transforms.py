"""Node transform resolution.

Turns a node's declared transform into a 4x4 world matrix and the matching
rotation-only matrix used for normals.
"""

import math
from typing import Optional, Tuple

import numpy as np
import trimesh

from bimexport.imf.types import (
    DecomposedTransform,
    MatrixTransform,
    Quaternion,
    Transform,
    TransformKind,
)


def quaternion_to_matrix(q: Quaternion) -> np.ndarray:
    """Rotation matrix for a unit quaternion (no renormalisation)."""
    x, y, z, w = q.x, q.y, q.z, q.w
    x2, y2, z2 = x + x, y + y, z + z
    xx, xy, xz = x * x2, x * y2, x * z2
    yy, yz, zz = y * y2, y * z2, z * z2
    wx, wy, wz = w * x2, w * y2, w * z2

    return np.array(
        [
            [1 - (yy + zz), xy - wz, xz + wy, 0.0],
            [xy + wz, 1 - (xx + zz), yz - wx, 0.0],
            [xz - wy, yz + wx, 1 - (xx + yy), 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def matrix_from_elements(elements) -> np.ndarray:
    """Load 16 column-major elements into a 4x4 matrix."""
    return np.array(elements, dtype=np.float64).reshape(4, 4).T


def compose_trs(transform: DecomposedTransform) -> np.ndarray:
    """Compose scale, then rotation, then translation."""
    t = transform.translation
    r = transform.rotation
    s = transform.scale

    translation = trimesh.transformations.translation_matrix(
        [t.x, t.y, t.z] if t is not None else [0.0, 0.0, 0.0]
    )
    rotation = quaternion_to_matrix(r) if r is not None else np.identity(4)
    scale = np.diag([s.x, s.y, s.z, 1.0]) if s is not None else np.identity(4)

    return trimesh.transformations.concatenate_matrices(translation, rotation, scale)


def extract_rotation(matrix: np.ndarray) -> np.ndarray:
    """
    Strip translation and per-axis scale from an affine matrix.

    Each of the upper 3x3 columns is normalised; translation is zeroed. This is
    not the inverse transpose, so normals are only exact for uniform scale.
    """
    rotation = np.identity(4)
    for col in range(3):
        column = matrix[:3, col]
        length = math.sqrt(column[0] * column[0] + column[1] * column[1] + column[2] * column[2])
        if length > 0:
            rotation[:3, col] = column * (1.0 / length)
        else:
            rotation[:3, col] = 0.0
    return rotation


def resolve_transform(transform: Optional[Transform]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Resolve a node transform.

    Args:
        transform: MatrixTransform, DecomposedTransform or None (identity)

    Returns:
        (world_matrix, normal_matrix) as 4x4 float64 arrays
    """
    if transform is None:
        return np.identity(4), np.identity(4)

    if isinstance(transform, MatrixTransform) and transform.kind == TransformKind.MATRIX:
        world = matrix_from_elements(transform.elements)
    elif isinstance(transform, DecomposedTransform) and transform.kind == TransformKind.DECOMPOSED:
        world = compose_trs(transform)
    else:
        raise TypeError(f"Unsupported transform type: {type(transform).__name__}")

    return world, extract_rotation(world)


def apply_to_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Transform an (N, 3) point array, including the projective divide."""
    x, y, z = points[:, 0], points[:, 1], points[:, 2]
    m = matrix
    w = 1.0 / (m[3, 0] * x + m[3, 1] * y + m[3, 2] * z + m[3, 3])
    return np.column_stack(
        [
            (m[0, 0] * x + m[0, 1] * y + m[0, 2] * z + m[0, 3]) * w,
            (m[1, 0] * x + m[1, 1] * y + m[1, 2] * z + m[1, 3]) * w,
            (m[2, 0] * x + m[2, 1] * y + m[2, 2] * z + m[2, 3]) * w,
        ]
    )


def apply_to_directions(matrix: np.ndarray, directions: np.ndarray) -> np.ndarray:
    """Transform an (N, 3) direction array by the upper 3x3 of a matrix."""
    x, y, z = directions[:, 0], directions[:, 1], directions[:, 2]
    m = matrix
    return np.column_stack(
        [
            m[0, 0] * x + m[0, 1] * y + m[0, 2] * z,
            m[1, 0] * x + m[1, 1] * y + m[1, 2] * z,
            m[2, 0] * x + m[2, 1] * y + m[2, 2] * z,
        ]
    )
