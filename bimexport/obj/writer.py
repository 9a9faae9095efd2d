"""Streaming OBJ writer for Intermediate Scene Model scenes.

Scenes are read through ``node_count()``, ``node(index)``, ``geometry(ref)`` and
``get_metadata()``. Providers exposing ``metadata()`` instead are accepted too.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import numpy as np

from bimexport.imf.types import GeometryKind, NodeKind

from .buffer import DEFAULT_FLUSH_THRESHOLD, LineBuffer
from .config import WriterOptions
from .formatting import face_line, normal_lines, vertex_lines
from .grouping import ElementGroups, classify_and_group
from .transforms import apply_to_directions, apply_to_points, resolve_transform
from .units import resolve_unit_scale

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Base exception for export errors."""


class SceneConsistencyError(ExportError):
    """Grouping and writing passes disagree about scene content."""

    def __init__(self, message: str, node_index: int):
        super().__init__(message)
        self.node_index = node_index


def _noop(message: str) -> None:
    pass


def _report(message: str, log: Callable[[str], None], level: int = logging.DEBUG) -> None:
    logger.log(level, message)
    log(message)


def scene_metadata(scene: Any) -> Any:
    """Read scene metadata via get_metadata(), metadata() or a metadata mapping."""
    getter = getattr(scene, "get_metadata", None)
    if callable(getter):
        return getter()
    metadata = getattr(scene, "metadata", None)
    return metadata() if callable(metadata) else metadata


@dataclass
class WriteStats:
    """Counts for one written OBJ file."""

    path: Path
    groups: int = 0
    nodes: int = 0
    vertices: int = 0
    normals: int = 0
    faces: int = 0
    skipped_geometries: int = 0
    lines: int = 0
    flushes: int = 0

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "groups": self.groups,
            "nodes": self.nodes,
            "vertices": self.vertices,
            "normals": self.normals,
            "faces": self.faces,
            "skipped_geometries": self.skipped_geometries,
            "lines": self.lines,
            "flushes": self.flushes,
        }


@dataclass
class ExportResult:
    """Result of exporting one scene."""

    regular: WriteStats
    openings: WriteStats
    scale: float = 1.0
    groups: ElementGroups = field(default_factory=ElementGroups)

    @property
    def output_path(self) -> Path:
        return self.regular.path

    @property
    def openings_path(self) -> Path:
        return self.openings.path


def _face_lines(faces: np.ndarray, vertex_offset: int, with_normals: bool) -> Iterator[str]:
    """Yield face lines with 1-based indices shifted by the running offset.

    Normals share the vertex index, one normal per vertex.
    """
    for a, b, c in (faces + vertex_offset).tolist():
        if with_normals:
            yield face_line(a, b, c, (a, b, c))
        else:
            yield face_line(a, b, c)


def write_groups(
    groups: Dict[str, List[int]],
    output_path: str | Path,
    scene: Any,
    scale: float,
    skip_normals: bool = False,
    threshold: int = DEFAULT_FLUSH_THRESHOLD,
    log: Callable[[str], None] = _noop,
) -> WriteStats:
    """
    Write one bucket of grouped nodes to an OBJ file.

    The file is truncated first. Vertex indices continue across groups and
    start at 1 for every file.

    Args:
        groups: GroupKey -> node indices, in output order
        output_path: Target file
        scene: Scene the indices refer to
        scale: Unit scale applied after the world transform
        skip_normals: Do not write vn lines
        threshold: Buffered line count that triggers a write
        log: Diagnostic callback

    Returns:
        WriteStats for the written file

    Raises:
        SceneConsistencyError: If a grouped index is no longer an object node
    """
    stats = WriteStats(path=Path(output_path))
    vertex_offset = 1

    with open(output_path, "w", encoding="utf-8", newline="\n") as stream:
        buffer = LineBuffer(stream, threshold)

        for key, indices in groups.items():
            buffer.append(f"o {key}")
            stats.groups += 1

            for index in indices:
                node = scene.node(index)
                if node.kind != NodeKind.OBJECT:
                    raise SceneConsistencyError(
                        f"Node {index} was grouped as an object but is {node.kind.value}",
                        node_index=index,
                    )

                geometry = scene.geometry(node.geometry)
                if geometry.kind != GeometryKind.MESH:
                    _report(f"Skipping geometry type {geometry.kind.value}", log)
                    stats.skipped_geometries += 1
                    continue

                world, rotation = resolve_transform(node.transform)
                vertex_count = geometry.vertex_count

                points = apply_to_points(world, geometry.get_vertices().reshape(-1, 3)) * scale
                buffer.extend(vertex_lines(points))

                normals = None if skip_normals else geometry.get_normals()
                if normals is not None:
                    directions = apply_to_directions(rotation, normals.reshape(-1, 3))
                    buffer.extend(normal_lines(directions))

                faces = geometry.get_indices().reshape(-1, 3)
                buffer.extend(_face_lines(faces, vertex_offset, normals is not None))

                vertex_offset += vertex_count
                if normals is not None:
                    stats.normals += vertex_count

                stats.nodes += 1
                stats.vertices += vertex_count
                stats.faces += geometry.triangle_count

        buffer.flush()
        stats.lines = buffer.lines_written
        stats.flushes = buffer.flush_count

    return stats


class ObjWriter:
    """
    Writes scenes to OBJ.

    Pipeline:
    1. Resolve the unit scale from scene metadata
    2. Classify object nodes as regular or opening and group them by GroupKey
    3. Stream the regular bucket to ``output.obj``
    4. Stream the opening bucket to ``openings.obj``

    Both files are always created, even when a bucket is empty.
    """

    def __init__(self, options: Optional[WriterOptions] = None):
        self.options = options or WriterOptions()

    def write(self, scene: Any, output_dir: str | Path, propdb: Optional[Any] = None) -> ExportResult:
        """
        Output a scene as OBJ.

        Args:
            scene: Complete scene in the intermediate format
            output_dir: Output folder, created if missing
            propdb: Optional property database for classification and grouping

        Returns:
            ExportResult with per-file statistics
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        obj_path = output_dir / self.options.output_filename
        openings_path = output_dir / self.options.openings_filename

        if propdb is None:
            _report("No property database, grouping by dbid", self.options.log, logging.INFO)

        scale = resolve_unit_scale(scene_metadata(scene), self.options.target_unit)
        groups = classify_and_group(scene, propdb, log=self.options.log)

        regular = write_groups(
            groups.regular,
            obj_path,
            scene,
            scale,
            skip_normals=self.options.skip_normals,
            threshold=self.options.flush_threshold,
            log=self.options.log,
        )
        openings = write_groups(
            groups.opening,
            openings_path,
            scene,
            scale,
            skip_normals=self.options.skip_normals,
            threshold=self.options.flush_threshold,
            log=self.options.log,
        )

        _report("Finished writing OBJ", self.options.log, logging.INFO)
        return ExportResult(regular=regular, openings=openings, scale=scale, groups=groups)


def export_scene(
    scene: Any,
    output_dir: str | Path,
    propdb: Optional[Any] = None,
    **options: Any,
) -> ExportResult:
    """
    Convenience function to export a scene to OBJ.

    Args:
        scene: Scene to export
        output_dir: Output folder
        propdb: Optional property database
        **options: WriterOptions fields (skip_normals, log, flush_threshold, ...)

    Returns:
        ExportResult with per-file statistics
    """
    return ObjWriter(WriterOptions(**options)).write(scene, output_dir, propdb)
