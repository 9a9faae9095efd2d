"""OBJ export for Intermediate Scene Model scenes.

Writes two files per scene: regular elements to ``output.obj`` and IFC opening
elements to ``openings.obj``. Nodes sharing an external identifier (IFC
GlobalId) are merged into one named OBJ object.

Usage:
    from bimexport.obj import ObjWriter, WriterOptions

    writer = ObjWriter(WriterOptions(skip_normals=True, log=print))
    result = writer.write(scene, "output/", propdb)
"""

from .buffer import DEFAULT_FLUSH_THRESHOLD, LineBuffer
from .config import WriterOptions
from .grouping import ElementGroups, classify_and_group, group_key, is_opening
from .transforms import resolve_transform
from .units import UNIT_SCALES, resolve_unit_scale
from .writer import (
    ExportError,
    ExportResult,
    ObjWriter,
    SceneConsistencyError,
    WriteStats,
    export_scene,
    write_groups,
)

__all__ = [
    # Main API
    "ObjWriter",
    "WriterOptions",
    "ExportResult",
    "WriteStats",
    "export_scene",
    # Errors
    "ExportError",
    "SceneConsistencyError",
    # Pipeline stages (for advanced usage)
    "resolve_transform",
    "resolve_unit_scale",
    "UNIT_SCALES",
    "classify_and_group",
    "group_key",
    "is_opening",
    "ElementGroups",
    "write_groups",
    "LineBuffer",
    "DEFAULT_FLUSH_THRESHOLD",
]
