"""Data types for the Intermediate Scene Model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import trimesh


class NodeKind(Enum):
    """Scene node variants."""
    GROUP = "group"
    OBJECT = "object"
    CAMERA = "camera"
    LIGHT = "light"


class TransformKind(Enum):
    """Node transform variants."""
    MATRIX = "matrix"
    DECOMPOSED = "decomposed"


class GeometryKind(Enum):
    """Geometry variants."""
    MESH = "mesh"
    LINES = "lines"
    POINTS = "points"
    EMPTY = "empty"


@dataclass(frozen=True)
class Vec3:
    """3D vector used for translation and scale components."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    """Rotation quaternion in (x, y, z, w) order, expected to be unit length."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


# ============================================================================
# Transforms
# ============================================================================


@dataclass
class MatrixTransform:
    """General affine transform as 16 column-major matrix elements."""

    elements: Sequence[float]
    kind: TransformKind = field(default=TransformKind.MATRIX, init=False)

    def __post_init__(self):
        self.elements = [float(e) for e in self.elements]
        if len(self.elements) != 16:
            raise ValueError(
                f"Matrix transform needs 16 elements, got {len(self.elements)}"
            )


@dataclass
class DecomposedTransform:
    """Translation, rotation and scale; absent components are identity."""

    translation: Optional[Vec3] = None
    rotation: Optional[Quaternion] = None
    scale: Optional[Vec3] = None
    kind: TransformKind = field(default=TransformKind.DECOMPOSED, init=False)

    def __post_init__(self):
        # Accept plain tuples from readers
        if self.translation is not None and not isinstance(self.translation, Vec3):
            self.translation = Vec3(*self.translation)
        if self.rotation is not None and not isinstance(self.rotation, Quaternion):
            self.rotation = Quaternion(*self.rotation)
        if self.scale is not None and not isinstance(self.scale, Vec3):
            self.scale = Vec3(*self.scale)


Transform = Union[MatrixTransform, DecomposedTransform]


# ============================================================================
# Geometries
# ============================================================================


def _flat_buffer(values: Any, dtype: Any) -> np.ndarray:
    return np.asarray(values if values is not None else [], dtype=dtype).reshape(-1)


@dataclass
class MeshGeometry:
    """Triangle mesh with flat vertex, index and optional normal buffers.

    Vertices and normals are interleaved XYZ triplets, indices are triangle
    triplets local to this geometry's vertex buffer (0-based).
    """

    vertices: np.ndarray = field(default_factory=lambda: np.array([]))
    indices: np.ndarray = field(default_factory=lambda: np.array([]))
    normals: Optional[np.ndarray] = None
    kind: GeometryKind = field(default=GeometryKind.MESH, init=False)

    def __post_init__(self):
        self.vertices = _flat_buffer(self.vertices, np.float64)
        self.indices = _flat_buffer(self.indices, np.int64)
        if self.normals is not None:
            self.normals = _flat_buffer(self.normals, np.float64)

        if self.vertices.size % 3 != 0:
            raise ValueError(f"Vertex buffer length {self.vertices.size} is not a multiple of 3")
        if self.indices.size % 3 != 0:
            raise ValueError(f"Index buffer length {self.indices.size} is not a multiple of 3")
        if self.normals is not None and self.normals.size != self.vertices.size:
            raise ValueError(
                f"Normal buffer length {self.normals.size} does not match "
                f"vertex buffer length {self.vertices.size}"
            )

    @property
    def vertex_count(self) -> int:
        return self.vertices.size // 3

    @property
    def triangle_count(self) -> int:
        return self.indices.size // 3

    def get_vertices(self) -> np.ndarray:
        return self.vertices

    def get_indices(self) -> np.ndarray:
        return self.indices

    def get_normals(self) -> Optional[np.ndarray]:
        return self.normals

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, with_normals: bool = True) -> "MeshGeometry":
        """Create MeshGeometry from trimesh object."""
        normals = None
        if with_normals and len(mesh.vertices) > 0:
            normals = np.array(mesh.vertex_normals)
        return cls(
            vertices=np.array(mesh.vertices),
            indices=np.array(mesh.faces),
            normals=normals,
        )


@dataclass
class LineGeometry:
    """Polyline geometry (2D drawings, edges). Not exported as mesh."""

    vertices: np.ndarray = field(default_factory=lambda: np.array([]))
    indices: np.ndarray = field(default_factory=lambda: np.array([]))
    kind: GeometryKind = field(default=GeometryKind.LINES, init=False)


@dataclass
class PointGeometry:
    """Point cloud geometry. Not exported as mesh."""

    vertices: np.ndarray = field(default_factory=lambda: np.array([]))
    kind: GeometryKind = field(default=GeometryKind.POINTS, init=False)


@dataclass
class EmptyGeometry:
    """Placeholder for fragments whose geometry could not be decoded."""

    kind: GeometryKind = field(default=GeometryKind.EMPTY, init=False)


Geometry = Union[MeshGeometry, LineGeometry, PointGeometry, EmptyGeometry]


# ============================================================================
# Nodes
# ============================================================================


@dataclass
class ObjectNode:
    """Node instantiating renderable geometry."""

    dbid: int
    geometry: Any  # Opaque geometry reference, see Scene.geometry()
    transform: Optional[Transform] = None
    material: Optional[Any] = None
    kind: NodeKind = field(default=NodeKind.OBJECT, init=False)

    def __post_init__(self):
        if self.transform is not None and not isinstance(
            self.transform, (MatrixTransform, DecomposedTransform)
        ):
            raise TypeError(f"Unsupported transform type: {type(self.transform).__name__}")


@dataclass
class GroupNode:
    """Node grouping other nodes by index."""

    dbid: Optional[int] = None
    children: List[int] = field(default_factory=list)
    transform: Optional[Transform] = None
    kind: NodeKind = field(default=NodeKind.GROUP, init=False)


@dataclass
class CameraNode:
    """Camera placement carried over from the source viewer format."""

    camera: Any = None
    kind: NodeKind = field(default=NodeKind.CAMERA, init=False)


@dataclass
class LightNode:
    """Light placement carried over from the source viewer format."""

    dbid: Optional[int] = None
    light: Any = None
    kind: NodeKind = field(default=NodeKind.LIGHT, init=False)


Node = Union[ObjectNode, GroupNode, CameraNode, LightNode]


# ============================================================================
# Scene
# ============================================================================


@dataclass(frozen=True)
class MetadataValue:
    """Typed scene metadata entry (e.g. ``"distance unit" -> "mm"``)."""

    value: Any
    type: str = "string"


@dataclass
class Scene:
    """Complete scene as produced by a reader.

    Writers only use ``node_count()``, ``node()``, ``geometry()`` and
    ``get_metadata()``, so any object exposing these can stand in for it.
    """

    nodes: List[Node] = field(default_factory=list)
    geometries: List[Geometry] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_node(self, node: Node) -> int:
        """Append a node and return its index."""
        self.nodes.append(node)
        return len(self.nodes) - 1

    def add_geometry(self, geometry: Geometry) -> int:
        """Append a geometry and return the reference to store on nodes."""
        self.geometries.append(geometry)
        return len(self.geometries) - 1

    def node_count(self) -> int:
        return len(self.nodes)

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def geometry(self, ref: Any) -> Geometry:
        return self.geometries[ref]

    def get_metadata(self) -> Dict[str, Any]:
        return self.metadata
