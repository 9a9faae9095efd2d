"""Intermediate Scene Model.

The format-agnostic scene contract shared by all readers and writers. Readers
for vendor viewer formats build a :class:`Scene` out of nodes, transforms and
geometries; writers only ever read from it.

Usage:
    from bimexport.imf import MeshGeometry, ObjectNode, Scene

    scene = Scene(metadata={"distance unit": MetadataValue("mm")})
    geom = scene.add_geometry(MeshGeometry(vertices=[...], indices=[...]))
    scene.add_node(ObjectNode(dbid=7, geometry=geom))
"""

from .propdb import GlobalIdTable, PropertyDatabase
from .types import (
    CameraNode,
    DecomposedTransform,
    EmptyGeometry,
    GeometryKind,
    GroupNode,
    LightNode,
    LineGeometry,
    MatrixTransform,
    MeshGeometry,
    MetadataValue,
    NodeKind,
    ObjectNode,
    PointGeometry,
    Quaternion,
    Scene,
    TransformKind,
    Vec3,
)

__all__ = [
    # Scene container
    "Scene",
    "MetadataValue",
    # Nodes
    "NodeKind",
    "ObjectNode",
    "GroupNode",
    "CameraNode",
    "LightNode",
    # Transforms
    "TransformKind",
    "MatrixTransform",
    "DecomposedTransform",
    "Vec3",
    "Quaternion",
    # Geometries
    "GeometryKind",
    "MeshGeometry",
    "LineGeometry",
    "PointGeometry",
    "EmptyGeometry",
    # Property database adapters
    "PropertyDatabase",
    "GlobalIdTable",
]
